"""Decoding of the user photo and the two fixed overlay assets."""
from __future__ import annotations
import io
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Dict, Tuple, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from .errors import DecodeFailure

logger = logging.getLogger(__name__)

ImageLike = Union[Image.Image, np.ndarray]


@dataclass(frozen=True)
class AssetPair:
    """Map thumbnail and badge icon, decoded once and shared by every composition."""
    map: Image.Image
    icon: Image.Image


def _normalize(img: Image.Image) -> Image.Image:
    if img.mode in ("RGBA", "LA", "PA") or (img.mode == "P" and "transparency" in img.info):
        return img.convert("RGBA")
    return img.convert("RGB")


def as_image(src: ImageLike, name: str = "image") -> Image.Image:
    """Accept a Pillow image or an HxWx3/HxWx4 uint8 array."""
    if isinstance(src, np.ndarray):
        if src.ndim != 3 or src.shape[2] not in (3, 4):
            raise DecodeFailure(f"{name}: expected HxWx3 or HxWx4 array, got shape {src.shape}")
        if src.shape[0] == 0 or src.shape[1] == 0:
            raise DecodeFailure(f"{name}: image has no pixels")
        try:
            img = Image.fromarray(np.ascontiguousarray(src, dtype=np.uint8))
        except (TypeError, ValueError) as e:
            raise DecodeFailure(f"{name}: {e}") from e
    elif isinstance(src, Image.Image):
        img = src
    else:
        raise DecodeFailure(f"{name}: unsupported image type {type(src).__name__}")
    if img.size[0] <= 0 or img.size[1] <= 0:
        raise DecodeFailure(f"{name}: image has no pixels")
    return _normalize(img)


def decode_image(data: bytes, name: str = "image") -> Image.Image:
    if not data:
        raise DecodeFailure(f"{name}: no data")
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise DecodeFailure(f"{name}: {e}") from e
    return as_image(img, name)


def load_asset(path: str) -> Image.Image:
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise DecodeFailure(f"asset {path}: {e}") from e
    return decode_image(data, name=path)


def load_assets(cfg: Dict[str, Any]) -> AssetPair:
    paths = cfg.get("assets", {})
    pair = AssetPair(map=load_asset(paths["map"]), icon=load_asset(paths["icon"]))
    logger.info("loaded assets map=%s %s icon=%s %s",
                paths["map"], pair.map.size, paths["icon"], pair.icon.size)
    return pair


def decode_all(photo: bytes, map_data: bytes, icon_data: bytes) -> Tuple[Image.Image, Image.Image, Image.Image]:
    """Decode the three inputs concurrently and return once all are done.

    If any decode fails the first failure (in photo, map, icon order) is
    raised; nothing is returned for the others.
    """
    with ThreadPoolExecutor(max_workers=3, thread_name_prefix="decode") as pool:
        futures = [
            pool.submit(decode_image, photo, "photo"),
            pool.submit(decode_image, map_data, "map"),
            pool.submit(decode_image, icon_data, "icon"),
        ]
    # leaving the with-block joins all three
    photo_img, map_img, icon_img = (f.result() for f in futures)
    return photo_img, map_img, icon_img
