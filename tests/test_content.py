from __future__ import annotations
import random
import re
from datetime import datetime, timedelta, timezone

import pytest

from mapcam_overlay import config as cfgmod
from mapcam_overlay.content import (
    DEFAULT_LINES,
    OverlayContent,
    format_coordinates,
    format_timestamp,
    jitter_coordinates,
)

COORD_RE = re.compile(r"^Lat (-?\d+\.\d+)° Long (-?\d+\.\d+)°$")


class _FixedRandom:
    def __init__(self, *values):
        self._values = list(values)

    def random(self):
        return self._values.pop(0)


class TestCoordinates:
    def test_digits_appended_from_rng(self):
        assert jitter_coordinates(_FixedRandom(0.07, 0.999)) == ("-1.279907", "36.770099")

    def test_zero_draw_is_zero_padded(self):
        assert jitter_coordinates(_FixedRandom(0.0, 0.0)) == ("-1.279900", "36.770000")

    @pytest.mark.parametrize("seed", range(20))
    def test_parses_near_reference(self, seed):
        lat, lon = jitter_coordinates(random.Random(seed))
        text = format_coordinates(lat, lon)
        m = COORD_RE.match(text)
        assert m is not None, text
        assert abs(float(m.group(1)) - -1.2799) < 1e-4
        assert abs(float(m.group(2)) - 36.77) < 1e-4

    def test_custom_reference(self):
        lat, lon = jitter_coordinates(_FixedRandom(0.5, 0.25), ("51.50", "-0.12"))
        assert (lat, lon) == ("51.5050", "-0.1225")


class TestTimestamp:
    def test_format(self):
        assert format_timestamp(datetime(2024, 3, 7, 9, 5, 42)) == "07-03-2024 09:05 +03:00"

    def test_offset_label_is_fixed(self):
        aware = datetime(2023, 12, 31, 23, 59, tzinfo=timezone(timedelta(hours=-5)))
        assert format_timestamp(aware) == "31-12-2023 23:59 +03:00"

    def test_custom_offset(self):
        assert format_timestamp(datetime(2024, 1, 2, 3, 4), "+00:00").endswith(" +00:00")


class TestOverlayContent:
    def test_dynamic_lines_deterministic(self):
        now = datetime(2024, 3, 7, 9, 5)
        a = OverlayContent(rng=random.Random(9), clock=lambda: now)
        b = OverlayContent(rng=random.Random(9), clock=lambda: now)
        assert a.dynamic_lines() == b.dynamic_lines()
        assert a.dynamic_lines()[1] == "07-03-2024 09:05 +03:00"

    def test_clock_read_per_call(self):
        ticks = iter([datetime(2024, 1, 1, 0, 0), datetime(2024, 1, 1, 0, 1)])
        c = OverlayContent(rng=random.Random(0), clock=lambda: next(ticks))
        assert c.dynamic_lines()[1] != c.dynamic_lines()[1]

    def test_requires_three_lines(self):
        with pytest.raises(ValueError):
            OverlayContent(lines=("only", "two"))

    def test_defaults(self):
        c = OverlayContent()
        assert c.lines == DEFAULT_LINES
        assert c.badge_label == "GPS Map Camera"
        assert COORD_RE.match(c.dynamic_lines()[0])

    def test_from_config(self):
        cfg = cfgmod._merge(cfgmod.DEFAULT, {"overlay": {
            "lines": ["a", "b", "c"],
            "badge_label": "Badge",
            "reference": {"lat": "10.0", "long": "20.0"},
            "utc_offset": "+01:00",
        }})
        c = OverlayContent.from_config(cfg, rng=_FixedRandom(0.1, 0.2), clock=lambda: datetime(2024, 5, 6, 7, 8))
        assert c.lines == ("a", "b", "c")
        assert c.badge_label == "Badge"
        assert c.dynamic_lines() == ("Lat 10.010° Long 20.020°", "06-05-2024 07:08 +01:00")
