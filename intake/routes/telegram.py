"""/api/telegram-* routes for the admin notification settings."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify

from intake.services import current_services
from intake.services.notification_service import TEST_MESSAGE, dispatch_notification
from intake.storage import StorageError
from intake.utils.request import read_json_object

bp = Blueprint("telegram", __name__, url_prefix="/api")


@bp.get("/telegram-config")
def get_telegram_config():
    """Report whether a bot token and chat id are configured."""
    return jsonify(current_services().notification_config.status()), 200


@bp.post("/telegram-config")
def set_telegram_config():
    """Update the bot token and/or chat id; absent keys stay unchanged."""
    payload, error_response = read_json_object()
    if error_response is not None:
        return error_response

    changes = {}
    if "botToken" in payload:
        changes["bot_token"] = payload["botToken"]
    if "chatId" in payload:
        changes["chat_id"] = payload["chatId"]

    try:
        current_services().notification_config.update(**changes)
    except StorageError as exc:
        current_app.logger.exception("Failed to save Telegram config")
        return jsonify(error=str(exc)), 500

    return jsonify(success=True), 200


@bp.post("/telegram-test")
def send_test_notification():
    dispatch_notification(current_services().notifier, TEST_MESSAGE)
    return jsonify(success=True), 200
