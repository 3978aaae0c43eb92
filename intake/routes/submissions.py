"""/api diagnosis routes: second-step detailed submissions with attachments."""

from __future__ import annotations

from typing import Any, Dict, List

from flask import Blueprint, current_app, jsonify, request

from intake.models import ATTACHMENT_FIELDS, Submission
from intake.services import current_services
from intake.services.notification_service import dispatch_notification, format_diagnosis_message
from intake.storage import StorageError
from intake.utils import multipart
from intake.utils.ids import parse_record_id
from intake.utils.request import parse_json_object

bp = Blueprint("submissions", __name__, url_prefix="/api")

DATA_PART_NAME = "data"


def _payload_from_parts(parts: List[multipart.Part]) -> Dict[str, Any]:
    """Parse the ``data`` field; a later ``data`` part replaces an earlier one."""
    payload: Dict[str, Any] = {}
    for part in parts:
        if not part.is_file and part.name == DATA_PART_NAME:
            payload = parse_json_object(part.data)
    return payload


@bp.post("/submit")
def submit_diagnosis():
    """Store a diagnosis sent as JSON or as multipart with optional documents."""
    content_type = request.headers.get("Content-Type", "")
    body = request.get_data(cache=False)

    try:
        if "multipart/form-data" in content_type:
            parts = multipart.decode(body, multipart.boundary_from_content_type(content_type))
            payload = _payload_from_parts(parts)
        else:
            parts = []
            payload = parse_json_object(body)
    except ValueError as exc:
        return jsonify(error=f"Invalid submission body: {exc}"), 400

    services = current_services()
    stored_names: List[str] = []
    try:
        saved_files: Dict[str, str] = {}
        for part in parts:
            if part.is_file:
                stored_name = services.uploads.store(part.filename, part.data)
                stored_names.append(stored_name)
                saved_files[part.name] = stored_name

        attachments = {name: saved_files[name] for name in ATTACHMENT_FIELDS if name in saved_files}
        record = services.diagnoses.append(payload, attachments)
    except StorageError as exc:
        current_app.logger.exception("Failed to store diagnosis submission")
        for stored_name in stored_names:
            services.uploads.discard(stored_name)
        return jsonify(error=str(exc)), 500

    submission = Submission.from_record(record)
    current_app.logger.info(
        "New diagnosis %s: employees=%s credit=%s overdue=%s submitted=%s",
        submission.id,
        submission.extras.get("employeeCount"),
        submission.extras.get("creditScore"),
        submission.extras.get("overdue"),
        submission.submitted_at,
    )
    dispatch_notification(services.notifier, format_diagnosis_message(submission))

    return jsonify(success=True, id=submission.id), 200


@bp.get("/submissions")
def list_submissions():
    """Return every stored diagnosis submission."""
    return jsonify(current_services().diagnoses.load_all()), 200


@bp.delete("/submissions/", defaults={"raw_id": ""})
@bp.delete("/submissions/<path:raw_id>")
def delete_submission(raw_id: str):
    """Delete diagnosis submissions by id; succeeds even when nothing matched."""
    record_id = parse_record_id(raw_id)
    if record_id is not None:
        try:
            removed = current_services().diagnoses.delete_by_id(record_id)
        except StorageError as exc:
            current_app.logger.exception("Failed to delete submission %s", record_id)
            return jsonify(error=str(exc)), 500
        current_app.logger.info("Deleted submission %s (found=%s)", record_id, removed)

    return jsonify(success=True), 200
