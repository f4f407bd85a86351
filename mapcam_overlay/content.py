from __future__ import annotations
import random
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, Optional, Protocol, Tuple

DEFAULT_LINES: Tuple[str, str, str] = (
    "Nairobi, Nairobi County, Kenya",
    "Lavington Location Westlands Division Westlands",
    "Constituency, Nairobi, Nairobi County , Kenya",
)
DEFAULT_BADGE_LABEL = "GPS Map Camera"
# Reference point as decimal-degree prefixes; two random digits are appended.
DEFAULT_REFERENCE: Tuple[str, str] = ("-1.2799", "36.7700")
DEFAULT_UTC_OFFSET = "+03:00"


class RandomSource(Protocol):
    def random(self) -> float: ...


Clock = Callable[[], datetime]


def _two_digits(rng: RandomSource) -> str:
    return f"{int(rng.random() * 100):02d}"


def jitter_coordinates(rng: RandomSource, reference: Tuple[str, str] = DEFAULT_REFERENCE) -> Tuple[str, str]:
    """Reference lat/long with two random trailing digits each.

    The result always parses as a decimal degree within 1e-4 (of the last
    reference digit) of the reference point.
    """
    lat, lon = reference
    return f"{lat}{_two_digits(rng)}", f"{lon}{_two_digits(rng)}"


def format_coordinates(lat: str, lon: str) -> str:
    return f"Lat {lat}° Long {lon}°"


def format_timestamp(now: datetime, utc_offset: str = DEFAULT_UTC_OFFSET) -> str:
    """``DD-MM-YYYY HH:MM`` of the clock's wall time plus a fixed offset label.

    The offset is printed as given; it is not derived from ``now``.
    """
    return f"{now:%d-%m-%Y %H:%M} {utc_offset}"


@dataclass(frozen=True)
class OverlayContent:
    lines: Tuple[str, str, str] = DEFAULT_LINES
    badge_label: str = DEFAULT_BADGE_LABEL
    rng: RandomSource = field(default_factory=random.Random, compare=False)
    clock: Clock = field(default=datetime.now, compare=False)
    reference: Tuple[str, str] = DEFAULT_REFERENCE
    utc_offset: str = DEFAULT_UTC_OFFSET

    def __post_init__(self):
        if len(self.lines) != 3:
            raise ValueError(f"overlay needs exactly 3 location lines, got {len(self.lines)}")

    def dynamic_lines(self) -> Tuple[str, str]:
        """Coordinate and timestamp lines; draws from rng and reads the clock once each."""
        lat, lon = jitter_coordinates(self.rng, self.reference)
        return format_coordinates(lat, lon), format_timestamp(self.clock(), self.utc_offset)

    @classmethod
    def from_config(cls, cfg: Dict[str, Any], rng: Optional[RandomSource] = None,
                    clock: Optional[Clock] = None) -> "OverlayContent":
        ov = cfg.get("overlay", {})
        ref = ov.get("reference", {})
        return cls(
            lines=tuple(ov.get("lines", DEFAULT_LINES)),
            badge_label=ov.get("badge_label", DEFAULT_BADGE_LABEL),
            rng=rng if rng is not None else random.Random(),
            clock=clock if clock is not None else datetime.now,
            reference=(str(ref.get("lat", DEFAULT_REFERENCE[0])), str(ref.get("long", DEFAULT_REFERENCE[1]))),
            utc_offset=ov.get("utc_offset", DEFAULT_UTC_OFFSET),
        )
