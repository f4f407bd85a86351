from __future__ import annotations
import logging
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from .errors import SurfaceFailure
from .geometry import Rect

logger = logging.getLogger(__name__)

Color = Union[str, Sequence[int]]
Font = Union[ImageFont.FreeTypeFont, ImageFont.ImageFont]

# points per quarter circle; enough for radii up to a few dozen px
ARC_SEGMENTS = 16


def hex_to_rgb(s: str) -> Tuple[int, int, int]:
    s = s.strip()
    if s.startswith("#"): s = s[1:]
    if len(s) == 3:
        s = "".join(ch*2 for ch in s)
    if len(s) != 6:
        raise ValueError(f"not a #rgb/#rrggbb color: {s!r}")
    r = int(s[0:2], 16); g = int(s[2:4], 16); b = int(s[4:6], 16)
    return (r, g, b)


def as_rgb(color: Color) -> Tuple[int, int, int]:
    if isinstance(color, str):
        return hex_to_rgb(color)
    r, g, b = (int(c) for c in tuple(color)[:3])
    return (r, g, b)


def load_font(paths: Union[str, Sequence[str]], size: float) -> Font:
    """First TrueType face in ``paths`` that opens, else Pillow's default face."""
    if isinstance(paths, str):
        paths = [paths]
    for path in paths:
        if not path:
            continue
        try:
            return ImageFont.truetype(path, size)
        except OSError:
            logger.debug("font %s unavailable", path)
    logger.debug("no TrueType font found, using Pillow default at %.1fpx", size)
    return ImageFont.load_default(size)


def rounded_rect_path(x: float, y: float, width: float, height: float, radius: float,
                      segments: int = ARC_SEGMENTS) -> List[Tuple[float, float]]:
    """Closed outline of a rounded rectangle, clockwise from the top edge.

    Straight edges are joined by quarter-circle arcs. ``radius`` is clamped to
    ``[0, min(width, height) / 2]`` so opposite arcs never cross.
    """
    r = max(0.0, min(float(radius), width / 2.0, height / 2.0))
    if r == 0.0:
        return [(x, y), (x + width, y), (x + width, y + height), (x, y + height)]

    # arc centres and start angles (screen coords, y down), clockwise
    corners = (
        (x + width - r, y + r, -90.0),          # top-right
        (x + width - r, y + height - r, 0.0),   # bottom-right
        (x + r, y + height - r, 90.0),          # bottom-left
        (x + r, y + r, 180.0),                  # top-left
    )
    points: List[Tuple[float, float]] = []
    for cx, cy, start in corners:
        theta = np.radians(np.linspace(start, start + 90.0, segments + 1))
        xs = cx + r * np.cos(theta)
        ys = cy + r * np.sin(theta)
        points.extend(zip(xs.tolist(), ys.tolist()))
    return points


class Pen:
    """Fill color plus optional font, bound to one surface.

    A pen is the only way to fill or write on a ``Surface``, so the color
    (and the font, for text) is always fixed before the drawing call.
    """

    def __init__(self, draw: ImageDraw.ImageDraw, fill: Color, font: Optional[Font] = None):
        self._draw = draw
        self.fill = as_rgb(fill)
        self.font = font

    def _need_font(self) -> Font:
        if self.font is None:
            raise SurfaceFailure("pen has no font; text needs one")
        return self.font

    def fill_rounded_rect(self, rect: Rect, radius: float) -> None:
        path = rounded_rect_path(rect.x, rect.y, rect.width, rect.height, radius)
        self._draw.polygon(path, fill=self.fill)

    def fill_text(self, text: str, x: float, baseline: float) -> None:
        """Draw ``text`` with its left baseline point at (x, baseline)."""
        self._draw.text((x, baseline), text, fill=self.fill, font=self._need_font(), anchor="ls")

    def text_width(self, text: str) -> float:
        return float(self._draw.textlength(text, font=self._need_font()))


class Surface:
    """RGB canvas owned by a single composition."""

    def __init__(self, width: int, height: int, background: Color = (0, 0, 0)):
        self.image = Image.new("RGB", (int(width), int(height)), as_rgb(background))
        self._draw = ImageDraw.Draw(self.image)

    @property
    def width(self) -> int:
        return self.image.size[0]

    @property
    def height(self) -> int:
        return self.image.size[1]

    def pen(self, fill: Color, font: Optional[Font] = None) -> Pen:
        return Pen(self._draw, fill, font)

    def draw_image(self, src: Image.Image, dest: Rect, region: Optional[Rect] = None) -> None:
        """Scale ``region`` of ``src`` (all of it by default) into ``dest``.

        Sources with an alpha channel are pasted through it. ``dest`` is
        rounded to whole pixels, so x = 10.56 is drawn from column 11.
        """
        w = max(1, int(round(dest.width)))
        h = max(1, int(round(dest.height)))
        box = region.box() if region is not None else None
        scaled = src.resize((w, h), Image.Resampling.LANCZOS, box=box)
        pos = (int(round(dest.x)), int(round(dest.y)))
        if scaled.mode in ("RGBA", "LA"):
            self.image.paste(scaled.convert("RGB"), pos, scaled.getchannel("A"))
        else:
            self.image.paste(scaled.convert("RGB"), pos)

    def pixels(self) -> np.ndarray:
        return np.asarray(self.image, dtype=np.uint8)
