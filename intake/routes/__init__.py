"""Blueprint registration helper."""

from __future__ import annotations

from pathlib import Path

from flask import Flask, current_app, send_from_directory
from werkzeug.exceptions import NotFound

from .leads import bp as leads_bp
from .submissions import bp as submissions_bp
from .telegram import bp as telegram_bp

INDEX_FILE = "index.html"
FALLBACK_METHODS = ["GET", "POST", "PUT", "DELETE"]


def register_routes(app: Flask) -> None:
    """Register all application blueprints and the static file fallback."""
    app.register_blueprint(leads_bp)
    app.register_blueprint(submissions_bp)
    app.register_blueprint(telegram_bp)

    @app.route("/", defaults={"path": ""}, methods=FALLBACK_METHODS)
    @app.route("/<path:path>", methods=FALLBACK_METHODS)
    def serve_static(path: str):
        root = Path(current_app.config["STATIC_ROOT"]).resolve()
        try:
            return send_from_directory(root, path or INDEX_FILE)
        except NotFound:
            return "Not Found", 404, {"Content-Type": "text/plain; charset=utf-8"}
