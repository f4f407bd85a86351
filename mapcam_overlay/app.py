from __future__ import annotations
import logging, os, sys, time
from typing import Any, Dict, Optional

from flask import Flask, Response, jsonify, render_template, request

from . import config as cfgmod
from .assets import AssetPair, decode_image, load_assets
from .compositor import compose
from .content import OverlayContent
from .errors import CompositionError, DecodeFailure, DegenerateGeometry, SurfaceFailure

logger = logging.getLogger(__name__)

_STATUS = {DecodeFailure: 400, DegenerateGeometry: 422, SurfaceFailure: 500}

def _error(kind: str, detail: str, status: int):
    return jsonify({"error": kind, "detail": detail}), status

def create_app(cfg: Optional[Dict[str, Any]] = None, assets: Optional[AssetPair] = None) -> Flask:
    app = Flask(__name__)
    cfg = cfg if cfg is not None else cfgmod.load_config()
    # map and icon are decoded once and reused by every request
    assets = assets if assets is not None else load_assets(cfg)
    # a bad overlay section is a startup error, not a per-request one
    OverlayContent.from_config(cfg)
    app.config["MAPCAM"] = cfg
    app.config["MAPCAM_ASSETS"] = assets
    app.config["MAX_CONTENT_LENGTH"] = int(cfg.get("server", {}).get("max_upload_mb", 25)) * 1024 * 1024

    @app.get("/healthz")
    def healthz():
        return ("ok", 200)

    @app.get("/")
    def index():
        return render_template("index.html")

    @app.post("/compose")
    def compose_upload():
        upload = request.files.get("image")
        if upload is None or not upload.filename:
            return _error("MissingImage", "multipart field 'image' is required", 400)
        try:
            photo = decode_image(upload.read(), name=upload.filename)
            result = compose(photo, assets.map, assets.icon, OverlayContent.from_config(cfg), cfg)
        except CompositionError as e:
            status = _STATUS.get(type(e), 500)
            logger.warning("composition of %s failed (%s): %s", upload.filename, type(e).__name__, e)
            return _error(type(e).__name__, str(e), status)

        resp = Response(result.data, mimetype=result.mimetype)
        if request.args.get("download") in ("1", "true", "yes"):
            name = f"image_{int(time.time() * 1000)}.jpg"
            resp.headers["Content-Disposition"] = f'attachment; filename="{name}"'
        return resp

    return app

def main():
    logging.basicConfig(level=os.environ.get("MAPCAM_LOG_LEVEL", "INFO").upper(),
                        format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    try:
        app = create_app()
    except (DecodeFailure, ValueError) as e:
        logger.error("cannot start: %s", e)
        sys.exit(1)
    srv = app.config["MAPCAM"].get("server", {})
    port = int(os.environ.get("PORT", srv.get("port", 8000)))
    app.run(host=srv.get("host", "0.0.0.0"), port=port, threaded=True)

if __name__ == "__main__":
    main()
