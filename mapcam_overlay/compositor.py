"""Photo + map + icon -> one JPEG with the GPS information panel.

Order of work for one call to :func:`compose`:

1. canvas size (fixed target from config)
2. cover-fit crop of the photo onto the whole canvas
3. panel: map thumbnail, rounded background, five text lines
4. badge: measured label, rounded background, icon, label
5. JPEG encode

Any failure aborts the call; no partially drawn image is returned.
"""
from __future__ import annotations
import io
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import numpy as np
from PIL import Image

from . import config as cfgmod
from .assets import ImageLike, as_image, decode_all
from .content import OverlayContent
from .errors import CompositionError, SurfaceFailure
from .geometry import (BadgeGeometry, PanelGeometry, Rect, badge_font_size, badge_layout,
                       canvas_size, cover_fit_crop, panel_layout)
from .surface import Surface, load_font

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Composition:
    image: Image.Image
    data: bytes
    crop: Rect
    panel: PanelGeometry
    badge: BadgeGeometry
    mimetype: str = "image/jpeg"

    @property
    def pixels(self) -> np.ndarray:
        return np.asarray(self.image, dtype=np.uint8)


def _draw_photo(surface: Surface, photo: Image.Image) -> Rect:
    crop = cover_fit_crop(photo.size[0], photo.size[1], surface.width, surface.height)
    surface.draw_image(photo, Rect(0, 0, surface.width, surface.height), region=crop)
    return crop


def _draw_panel(surface: Surface, map_img: Image.Image, content: OverlayContent,
                ov: Dict[str, Any], fonts: Dict[str, str]) -> PanelGeometry:
    g = panel_layout(surface.width, surface.height)

    surface.draw_image(map_img, g.map_slot)
    surface.pen(ov["background"]).fill_rounded_rect(g.panel, g.border_radius)

    title_font = load_font([fonts.get("light", ""), fonts.get("regular", "")], g.title_font_size)
    body_font = load_font(fonts.get("regular", ""), g.body_font_size)
    title = surface.pen(ov["text_color"], title_font)
    body = surface.pen(ov["text_color"], body_font)

    coords, stamp = content.dynamic_lines()
    title.fill_text(content.lines[0], g.text_x, g.baselines[0])
    body.fill_text(content.lines[1], g.text_x, g.baselines[1])
    body.fill_text(content.lines[2], g.text_x, g.baselines[2])
    body.fill_text(coords, g.text_x, g.baselines[3])
    body.fill_text(stamp, g.text_x, g.baselines[4])
    return g


def _draw_badge(surface: Surface, panel: PanelGeometry, icon: Image.Image, label: str,
                ov: Dict[str, Any], fonts: Dict[str, str]) -> BadgeGeometry:
    font = load_font([fonts.get("bold", ""), fonts.get("regular", "")], badge_font_size(panel))
    text = surface.pen(ov["text_color"], font)
    b = badge_layout(panel, text.text_width(label))

    surface.pen(ov["background"]).fill_rounded_rect(b.rect, b.radius)
    surface.draw_image(icon, b.icon)
    text.fill_text(label, b.text_x, b.text_baseline)
    return b


def encode_jpeg(img: Image.Image, quality: int) -> bytes:
    buf = io.BytesIO()
    img.save(buf, format="JPEG", quality=quality)
    return buf.getvalue()


def compose(photo: ImageLike, map_asset: ImageLike, icon_asset: ImageLike,
            content: Optional[OverlayContent] = None,
            cfg: Optional[Dict[str, Any]] = None) -> Composition:
    """Compose the overlay onto ``photo`` and encode it.

    Raises ``DecodeFailure`` for unusable inputs, ``DegenerateGeometry`` when
    the canvas is too small for the panel, and ``SurfaceFailure`` when Pillow
    fails while drawing or encoding.
    """
    cfg = cfg if cfg is not None else cfgmod.DEFAULT
    content = content if content is not None else OverlayContent.from_config(cfg)
    ov = {**cfgmod.DEFAULT["overlay"], **cfg.get("overlay", {})}
    fonts = {**cfgmod.DEFAULT["fonts"], **cfg.get("fonts", {})}

    photo_img = as_image(photo, "photo")
    map_img = as_image(map_asset, "map")
    icon_img = as_image(icon_asset, "icon")

    w, h = canvas_size(cfgmod.canvas_target(cfg), photo_img.size)
    try:
        surface = Surface(w, h)
        crop = _draw_photo(surface, photo_img)
        panel = _draw_panel(surface, map_img, content, ov, fonts)
        badge = _draw_badge(surface, panel, icon_img, content.badge_label, ov, fonts)
        data = encode_jpeg(surface.image, cfgmod.jpeg_quality(cfg))
    except CompositionError:
        raise
    except (OSError, ValueError, TypeError) as e:
        raise SurfaceFailure(f"drawing failed: {e}") from e

    logger.debug("composed %dx%d from %dx%d photo, crop=%s, %d bytes",
                 w, h, photo_img.size[0], photo_img.size[1], crop, len(data))
    return Composition(image=surface.image, data=data, crop=crop, panel=panel, badge=badge)


def compose_bytes(photo: bytes, map_data: bytes, icon_data: bytes,
                  content: Optional[OverlayContent] = None,
                  cfg: Optional[Dict[str, Any]] = None) -> Composition:
    """Decode all three inputs (joined) and then compose."""
    photo_img, map_img, icon_img = decode_all(photo, map_data, icon_data)
    return compose(photo_img, map_img, icon_img, content, cfg)
