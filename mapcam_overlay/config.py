from __future__ import annotations
import copy
import json, logging, os
from typing import Any, Dict, Tuple

from .content import DEFAULT_BADGE_LABEL, DEFAULT_LINES, DEFAULT_REFERENCE, DEFAULT_UTC_OFFSET

logger = logging.getLogger(__name__)

_FONT_DIR = "/usr/share/fonts/truetype/dejavu"
_ASSET_DIR = os.path.join(os.path.dirname(__file__), "data")

DEFAULT: Dict[str, Any] = {
    "canvas": {"width": 960, "height": 1280},
    "output": {"jpeg_quality": 92},
    "overlay": {
        "background": "#5d5d5b",
        "text_color": "#FFFFFF",
        "lines": list(DEFAULT_LINES),
        "badge_label": DEFAULT_BADGE_LABEL,
        "reference": {"lat": DEFAULT_REFERENCE[0], "long": DEFAULT_REFERENCE[1]},
        "utc_offset": DEFAULT_UTC_OFFSET,
    },
    "fonts": {
        "light": os.path.join(_FONT_DIR, "DejaVuSans-ExtraLight.ttf"),
        "regular": os.path.join(_FONT_DIR, "DejaVuSans.ttf"),
        "bold": os.path.join(_FONT_DIR, "DejaVuSans-Bold.ttf"),
    },
    "assets": {
        "map": os.path.join(_ASSET_DIR, "map.png"),
        "icon": os.path.join(_ASSET_DIR, "icon.png"),
    },
    "server": {"host": "0.0.0.0", "port": 8000, "max_upload_mb": 25},
}

CONF_ENV = "MAPCAM_CONFIG"
CONF_NAME = "config.json"

def _candidate_paths() -> list[str]:
    # read at call time so tests and deployments can point MAPCAM_CONFIG elsewhere
    return [
        os.environ.get(CONF_ENV) or "",
        "/etc/mapcam-overlay/config.json",
        os.path.expanduser("~/.config/mapcam-overlay/config.json"),
        os.path.join(os.path.dirname(__file__), CONF_NAME),
    ]

def load_config() -> Dict[str, Any]:
    for p in _candidate_paths():
        if not p:
            continue
        try:
            with open(p, "r") as f:
                data = json.load(f)
        except FileNotFoundError:
            continue
        except (OSError, ValueError) as e:
            logger.warning("skipping unreadable config %s: %s", p, e)
            continue
        if not isinstance(data, dict):
            logger.warning("skipping config %s: top level is not an object", p)
            continue
        logger.info("loaded config from %s", p)
        return _merge(DEFAULT, data)
    return copy.deepcopy(DEFAULT)

def canvas_target(cfg: Dict[str, Any]) -> Tuple[int, int]:
    c = cfg.get("canvas", {})
    return int(c.get("width", DEFAULT["canvas"]["width"])), int(c.get("height", DEFAULT["canvas"]["height"]))

def jpeg_quality(cfg: Dict[str, Any]) -> int:
    q = int(cfg.get("output", {}).get("jpeg_quality", DEFAULT["output"]["jpeg_quality"]))
    return max(1, min(95, q))

def _merge(base: Dict[str, Any], patch: Dict[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(base)
    for k, v in patch.items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            out[k] = _merge(base[k], v)
        else:
            out[k] = v
    return out
