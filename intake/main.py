"""Flask application setup and blueprint wiring."""

from __future__ import annotations

from typing import Optional

from flask import Flask
from flask_cors import CORS

from intake.config import Settings, load_settings
from intake.routes import register_routes
from intake.services import EXTENSION_KEY, build_services
from intake.services.notification_service import Notifier

CORS_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]


def create_app(settings: Optional[Settings] = None, notifier: Optional[Notifier] = None) -> Flask:
    """Configure and return the Flask application instance."""
    settings = settings or load_settings()

    app = Flask(__name__, static_folder=None)
    CORS(
        app,
        resources={r"/*": {"origins": "*"}},
        methods=CORS_METHODS,
        allow_headers=["Content-Type"],
        send_wildcard=True,
    )

    app.config["MAX_CONTENT_LENGTH"] = settings.max_upload_bytes
    app.config["STATIC_ROOT"] = str(settings.static_root)
    app.config["INTAKE_SETTINGS"] = settings
    app.json.ensure_ascii = False

    app.extensions[EXTENSION_KEY] = build_services(settings, notifier)
    register_routes(app)

    app.logger.info(
        "Intake API ready (data_dir=%s, uploads=%s, static_root=%s)",
        settings.data_dir,
        settings.upload_dir,
        settings.static_root,
    )
    return app
