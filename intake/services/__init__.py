"""Service layer modules for the intake API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from flask import current_app

from intake.config import Settings
from intake.models import DIAGNOSIS, LEAD
from intake.services.notification_service import Notifier, TelegramNotifier
from intake.services.upload_service import UploadSink
from intake.storage import NotificationConfigStore, SubmissionStore

EXTENSION_KEY = "intake"


@dataclass
class AppServices:
    """Stores and collaborators shared by every request handler."""

    diagnoses: SubmissionStore
    leads: SubmissionStore
    notification_config: NotificationConfigStore
    uploads: UploadSink
    notifier: Notifier


def build_services(settings: Settings, notifier: Optional[Notifier] = None) -> AppServices:
    """Construct the stores from ``settings`` and create any missing files."""
    config_store = NotificationConfigStore(settings.config_file)
    services = AppServices(
        diagnoses=SubmissionStore(settings.diagnosis_file, DIAGNOSIS),
        leads=SubmissionStore(settings.lead_file, LEAD),
        notification_config=config_store,
        uploads=UploadSink(settings.upload_dir),
        notifier=notifier
        or TelegramNotifier(
            config_store,
            api_base=settings.telegram_api_base,
            timeout=settings.telegram_timeout_seconds,
        ),
    )

    services.uploads.initialize()
    services.diagnoses.initialize()
    services.leads.initialize()
    config_store.initialize(settings.telegram_bot_token, settings.telegram_chat_id)
    return services


def current_services() -> AppServices:
    """Return the services registered on the active Flask app."""
    return current_app.extensions[EXTENSION_KEY]


__all__ = ["AppServices", "EXTENSION_KEY", "build_services", "current_services"]
