"""Typed view of persisted submissions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from intake.utils.ids import format_submitted_at, now_millis

LEAD = "lead"
DIAGNOSIS = "diagnosis"
SUBMISSION_TYPES = (LEAD, DIAGNOSIS)

# File fields recorded on diagnosis submissions, keyed by multipart part name.
ATTACHMENT_FIELDS = {
    "bizFile": "bizFileServer",
    "creditFile": "creditFileServer",
}

_BOOKKEEPING_KEYS = {"id", "type", "submittedAt"}
_DIAGNOSIS_KEYS = _BOOKKEEPING_KEYS | set(ATTACHMENT_FIELDS.values())


def _extras(source: Mapping[str, Any], submission_type: str) -> Dict[str, Any]:
    # Attachment names are owned by the store only on diagnosis records.
    reserved = _DIAGNOSIS_KEYS if submission_type == DIAGNOSIS else _BOOKKEEPING_KEYS
    return {k: v for k, v in source.items() if k not in reserved}


@dataclass
class Submission:
    """A lead or diagnosis record.

    Known bookkeeping fields are typed; everything else the caller sent is
    kept verbatim in ``extras``.
    """

    id: Any
    type: str
    submitted_at: str
    extras: Dict[str, Any] = field(default_factory=dict)
    biz_file_server: Optional[str] = None
    credit_file_server: Optional[str] = None

    @classmethod
    def from_payload(
        cls,
        payload: Mapping[str, Any],
        submission_type: str,
        attachments: Optional[Mapping[str, str]] = None,
    ) -> "Submission":
        """Build a new submission from caller fields plus stored attachment names.

        ``attachments`` maps multipart part names (``bizFile``) to the names
        the upload sink stored them under.
        """
        if submission_type not in SUBMISSION_TYPES:
            raise ValueError(f"Unknown submission type: {submission_type!r}")

        attachments = attachments or {}
        record_id = payload["id"] if "id" in payload else now_millis()
        return cls(
            id=record_id,
            type=submission_type,
            submitted_at=payload.get("submittedAt") or format_submitted_at(),
            extras=_extras(payload, submission_type),
            biz_file_server=attachments.get("bizFile"),
            credit_file_server=attachments.get("creditFile"),
        )

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Submission":
        submission_type = record.get("type", "")
        is_diagnosis = submission_type == DIAGNOSIS
        return cls(
            id=record.get("id"),
            type=submission_type,
            submitted_at=record.get("submittedAt", ""),
            extras=_extras(record, submission_type),
            biz_file_server=record.get("bizFileServer") if is_diagnosis else None,
            credit_file_server=record.get("creditFileServer") if is_diagnosis else None,
        )

    def to_record(self) -> Dict[str, Any]:
        """Flatten into the on-disk JSON object."""
        record: Dict[str, Any] = {"id": self.id, **self.extras, "type": self.type}
        if self.type == DIAGNOSIS:
            record["bizFileServer"] = self.biz_file_server
            record["creditFileServer"] = self.credit_file_server
        record["submittedAt"] = self.submitted_at
        return record
