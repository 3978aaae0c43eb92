"""/api lead routes: first-step contact requests."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify

from intake.models import Submission
from intake.services import current_services
from intake.services.notification_service import dispatch_notification, format_lead_message
from intake.storage import StorageError
from intake.utils.ids import parse_record_id
from intake.utils.request import read_json_object

bp = Blueprint("leads", __name__, url_prefix="/api")


@bp.post("/submit-lead")
def submit_lead():
    """Store a lead submitted as a JSON body and notify the admins."""
    payload, error_response = read_json_object()
    if error_response is not None:
        return error_response

    services = current_services()
    try:
        record = services.leads.append(payload)
    except StorageError as exc:
        current_app.logger.exception("Failed to store lead")
        return jsonify(error=str(exc)), 500

    submission = Submission.from_record(record)
    current_app.logger.info(
        "New lead %s: industry=%s company=%s contact=%s phone=%s",
        submission.id,
        submission.extras.get("industry"),
        submission.extras.get("companyName"),
        submission.extras.get("contactName"),
        submission.extras.get("contactPhone"),
    )
    dispatch_notification(services.notifier, format_lead_message(submission))

    return jsonify(success=True, id=submission.id), 200


@bp.get("/leads")
def list_leads():
    """Return every stored lead."""
    return jsonify(current_services().leads.load_all()), 200


@bp.delete("/leads/", defaults={"raw_id": ""})
@bp.delete("/leads/<path:raw_id>")
def delete_lead(raw_id: str):
    """Delete leads by id; succeeds even when nothing matched."""
    record_id = parse_record_id(raw_id)
    if record_id is not None:
        try:
            removed = current_services().leads.delete_by_id(record_id)
        except StorageError as exc:
            current_app.logger.exception("Failed to delete lead %s", record_id)
            return jsonify(error=str(exc)), 500
        current_app.logger.info("Deleted lead %s (found=%s)", record_id, removed)

    return jsonify(success=True), 200
