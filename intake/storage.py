"""Flat JSON file stores backing submissions and notification settings.

Every mutation loads the whole file, changes it in memory and writes the
whole file back. Reads never fail: a missing or corrupt file is treated as
empty. Writes go through a temporary file and an atomic rename, and any
``OSError`` surfaces as :class:`StorageError`.

The per-store lock only serialises threads of one process. Running several
worker processes against the same files is not supported.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from intake.models import Submission

logger = logging.getLogger(__name__)

_MISSING = object()


class StorageError(RuntimeError):
    """Raised when a store or the upload sink cannot write to disk."""


def _read_json(path: Path) -> Any:
    with path.open(encoding="utf-8") as fh:
        return json.load(fh)


def _write_json(path: Path, payload: Any) -> None:
    """Replace ``path`` with ``payload`` serialised as indented JSON."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(payload, fh, indent=2, ensure_ascii=False)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except OSError as exc:
        raise StorageError(f"Failed to write {path.name}: {exc}") from exc


def _same_id(stored: Any, wanted: Any) -> bool:
    """JSON-style id equality: ``true`` never matches ``1``."""
    return stored == wanted and isinstance(stored, bool) == isinstance(wanted, bool)


class SubmissionStore:
    """One collection of submissions persisted as a JSON array."""

    def __init__(self, path: Path, submission_type: str) -> None:
        self.path = Path(path)
        self.submission_type = submission_type
        self._lock = threading.Lock()

    def initialize(self) -> None:
        """Create the backing file with an empty array if it does not exist."""
        if not self.path.exists():
            _write_json(self.path, [])

    def load_all(self) -> List[Dict[str, Any]]:
        """Return every stored record in insertion order."""
        try:
            records = _read_json(self.path)
        except FileNotFoundError:
            logger.warning("Store file %s not found; treating as empty", self.path)
            return []
        except (OSError, ValueError) as exc:
            logger.warning("Store file %s unreadable (%s); treating as empty", self.path, exc)
            return []

        if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
            logger.warning("Store file %s is not an array of objects; treating as empty", self.path)
            return []
        return records

    def append(
        self,
        payload: Mapping[str, Any],
        attachments: Optional[Mapping[str, str]] = None,
    ) -> Dict[str, Any]:
        """Persist a new submission built from ``payload`` and return it."""
        record = Submission.from_payload(payload, self.submission_type, attachments).to_record()
        with self._lock:
            records = self.load_all()
            records.append(record)
            _write_json(self.path, records)
        return dict(record)

    def delete_by_id(self, record_id: Any) -> bool:
        """Remove every record whose id equals ``record_id``."""
        with self._lock:
            records = self.load_all()
            kept = [r for r in records if not _same_id(r.get("id"), record_id)]
            _write_json(self.path, kept)
        return len(kept) != len(records)


class NotificationConfigStore:
    """Telegram bot token and chat id persisted as a JSON object."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    @staticmethod
    def _empty() -> Dict[str, Any]:
        return {"telegramBotToken": "", "telegramChatId": ""}

    def initialize(self, bot_token: str = "", chat_id: str = "") -> None:
        """Create the config file, seeded with the given values, if it does not exist."""
        if not self.path.exists():
            _write_json(self.path, {"telegramBotToken": bot_token, "telegramChatId": chat_id})

    def load(self) -> Dict[str, Any]:
        try:
            config = _read_json(self.path)
        except (OSError, ValueError):
            logger.warning("Notification config %s unreadable; using empty config", self.path)
            return self._empty()
        if not isinstance(config, dict):
            return self._empty()
        return {**self._empty(), **config}

    def update(self, bot_token: Any = _MISSING, chat_id: Any = _MISSING) -> Dict[str, Any]:
        """Replace only the values that were passed and persist the result."""
        with self._lock:
            config = self.load()
            if bot_token is not _MISSING:
                config["telegramBotToken"] = bot_token
            if chat_id is not _MISSING:
                config["telegramChatId"] = chat_id
            _write_json(self.path, config)
        return config

    def status(self) -> Dict[str, bool]:
        """Report which values are set without exposing them."""
        config = self.load()
        return {
            "hasToken": bool(config.get("telegramBotToken")),
            "hasChatId": bool(config.get("telegramChatId")),
        }
