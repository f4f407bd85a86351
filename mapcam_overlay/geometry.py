"""Layout math for the photo crop, the bottom panel and the badge.

Everything here is pure: numbers in, frozen dataclasses out. Drawing lives
in ``compositor``; text measurement is passed in as a plain float so the
badge can be laid out without a drawing surface.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple

from .errors import DegenerateGeometry

# Panel proportions, as fractions of canvas height / panel width.
MARGIN_BOTTOM_FRAC = 0.01
BOX_HEIGHT_FRAC = 0.165
MAP_PADDING_FRAC = 0.05
TITLE_FONT_FRAC = 0.045
BODY_FONT_FRAC = 0.035

# Fixed pixel spacing, not scaled with the canvas.
CONTENT_PADDING = 15.0
BORDER_RADIUS = 10.0

# Cumulative extra gap below the title for body lines 1..4.
LINE_GAPS = (5.0, 10.0, 15.0, 25.0)

BADGE_FONT_FRAC = 0.08
BADGE_ICON_SCALE = 1.2
BADGE_PADDING = 10.0
BADGE_ICON_GAP = 10.0
BADGE_TEXT_PAD = 20.0
BADGE_OVERLAP = 10.0
BADGE_RADIUS = 12.0

MIN_FONT_PX = 1.0


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def aspect(self) -> float:
        return self.width / self.height

    def box(self) -> Tuple[float, float, float, float]:
        """(left, top, right, bottom), the form Pillow takes."""
        return (self.x, self.y, self.right, self.bottom)


@dataclass(frozen=True)
class PanelGeometry:
    canvas_width: int
    canvas_height: int
    margin_bottom: float
    box_height: float
    box_y: float
    map_padding: float
    map_slot: Rect
    panel: Rect
    border_radius: float
    text_x: float
    text_y: float
    title_font_size: float
    body_font_size: float
    baselines: Tuple[float, ...]

    @property
    def content_width(self) -> float:
        return self.panel.width


@dataclass(frozen=True)
class BadgeGeometry:
    rect: Rect
    font_size: float
    icon_size: float
    icon: Rect
    text_x: float
    text_baseline: float
    text_width: float
    radius: float = BADGE_RADIUS


def canvas_size(target: Tuple[int, int], source: Tuple[int, int]) -> Tuple[int, int]:
    """Output canvas size: always the configured target, whatever the source aspect."""
    tw, th = int(target[0]), int(target[1])
    sw, sh = source
    if tw <= 0 or th <= 0:
        raise DegenerateGeometry(f"canvas target must be positive, got {tw}x{th}")
    if sw <= 0 or sh <= 0:
        raise DegenerateGeometry(f"source image has no pixels: {sw}x{sh}")
    return tw, th


def cover_fit_crop(src_w: float, src_h: float, target_w: float, target_h: float) -> Rect:
    """Largest centered region of the source with the target's aspect ratio."""
    if src_w <= 0 or src_h <= 0 or target_w <= 0 or target_h <= 0:
        raise DegenerateGeometry(
            f"cover fit needs positive sizes, got source {src_w}x{src_h} target {target_w}x{target_h}")
    img_aspect = src_w / src_h
    canvas_aspect = target_w / target_h
    if img_aspect > canvas_aspect:
        # wider than the canvas: full height, trim the sides
        h = float(src_h)
        w = canvas_aspect * h
        return Rect((src_w - w) / 2, 0.0, w, h)
    w = float(src_w)
    h = w / canvas_aspect
    return Rect(0.0, (src_h - h) / 2, w, h)


def min_canvas_width(height: float) -> float:
    """Smallest canvas width whose panel still gets a 1px body font."""
    box_h = BOX_HEIGHT_FRAC * height
    return box_h * (1 + 2 * MAP_PADDING_FRAC) + CONTENT_PADDING + MIN_FONT_PX / BODY_FONT_FRAC


def panel_layout(width: float, height: float) -> PanelGeometry:
    if width <= 0 or height <= 0:
        raise DegenerateGeometry(f"canvas must be positive, got {width}x{height}")

    margin_bottom = MARGIN_BOTTOM_FRAC * height
    box_h = BOX_HEIGHT_FRAC * height
    box_y = height - box_h - margin_bottom

    map_padding = MAP_PADDING_FRAC * box_h
    map_slot = Rect(map_padding, box_y, box_h, box_h)

    panel_x = box_h + map_padding + CONTENT_PADDING
    panel_w = width - (box_h + map_padding * 2 + CONTENT_PADDING)
    title = TITLE_FONT_FRAC * panel_w
    body = BODY_FONT_FRAC * panel_w
    if panel_w <= 0 or body < MIN_FONT_PX:
        raise DegenerateGeometry(
            f"canvas {width}x{height} leaves a {panel_w:.2f}px panel; "
            f"need width > {min_canvas_width(height):.2f}")

    text_x = panel_x + map_padding
    text_y = box_y + map_padding * 1.5

    baselines = [text_y + title]
    for k, gap in enumerate(LINE_GAPS, start=1):
        baselines.append(text_y + title + body * k + gap)

    return PanelGeometry(
        canvas_width=int(width),
        canvas_height=int(height),
        margin_bottom=margin_bottom,
        box_height=box_h,
        box_y=box_y,
        map_padding=map_padding,
        map_slot=map_slot,
        panel=Rect(panel_x, box_y, panel_w, box_h),
        border_radius=BORDER_RADIUS,
        text_x=text_x,
        text_y=text_y,
        title_font_size=title,
        body_font_size=body,
        baselines=tuple(baselines),
    )


def badge_font_size(panel: PanelGeometry) -> float:
    return BADGE_FONT_FRAC * panel.box_height


def badge_layout(panel: PanelGeometry, text_width: float) -> BadgeGeometry:
    """Badge rect above the panel, right-aligned to ``W - mapPadding``.

    ``text_width`` is the label measured at ``badge_font_size(panel)`` in the
    bold face; the badge cannot be sized before that measurement exists.
    """
    font_size = badge_font_size(panel)
    icon_size = BADGE_ICON_SCALE * font_size
    badge_w = icon_size + BADGE_ICON_GAP + text_width + BADGE_TEXT_PAD
    badge_h = icon_size + BADGE_PADDING
    badge_x = panel.canvas_width - badge_w - panel.map_padding
    badge_y = panel.box_y - badge_h + BADGE_OVERLAP

    icon = Rect(badge_x + BADGE_ICON_GAP, badge_y + (badge_h - icon_size) / 2, icon_size, icon_size)
    return BadgeGeometry(
        rect=Rect(badge_x, badge_y, badge_w, badge_h),
        font_size=font_size,
        icon_size=icon_size,
        icon=icon,
        text_x=badge_x + icon_size + BADGE_TEXT_PAD,
        text_baseline=badge_y + font_size + (badge_h - font_size) / 2,
        text_width=text_width,
    )
