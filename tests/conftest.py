from __future__ import annotations
import copy
import io
import random
from datetime import datetime

import numpy as np
import pytest
from PIL import Image

from mapcam_overlay import config as cfgmod
from mapcam_overlay.assets import AssetPair
from mapcam_overlay.content import OverlayContent

FIXED_NOW = datetime(2024, 3, 7, 9, 5, 42)
MAP_COLOR = (30, 120, 40)


def make_photo(width: int, height: int) -> Image.Image:
    """Horizontal/vertical gradient so crops of different regions differ."""
    xs = np.linspace(0, 255, width, dtype=np.float32)
    ys = np.linspace(0, 255, height, dtype=np.float32)
    arr = np.zeros((height, width, 3), dtype=np.uint8)
    arr[..., 0] = xs[None, :].astype(np.uint8)
    arr[..., 1] = ys[:, None].astype(np.uint8)
    arr[..., 2] = 128
    return Image.fromarray(arr)


def png_bytes(img: Image.Image) -> bytes:
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def cfg():
    return copy.deepcopy(cfgmod.DEFAULT)


@pytest.fixture
def photo():
    return make_photo(2000, 1000)


@pytest.fixture
def map_img():
    return Image.new("RGB", (64, 64), MAP_COLOR)


@pytest.fixture
def icon_img():
    img = Image.new("RGBA", (32, 32), (0, 0, 0, 0))
    img.paste((255, 0, 0, 255), (8, 8, 24, 24))
    return img


@pytest.fixture
def assets(map_img, icon_img):
    return AssetPair(map=map_img, icon=icon_img)


@pytest.fixture
def content():
    return OverlayContent(rng=random.Random(1234), clock=lambda: FIXED_NOW)


@pytest.fixture(scope="session")
def huge_png():
    """A small file that decodes to 200 megapixels, past Pillow's bomb limit."""
    return png_bytes(Image.new("1", (20000, 10000)))
