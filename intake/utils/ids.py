"""Identifier and timestamp helpers shared by the stores and the upload sink."""

from __future__ import annotations

import re
import secrets
import time
from datetime import datetime
from typing import Optional

SUFFIX_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def now_millis() -> int:
    """Return the current UNIX timestamp in milliseconds."""
    return int(time.time() * 1000)


def generate_suffix(length: int = 6) -> str:
    """Return a short random lowercase base36 string."""
    return "".join(secrets.choice(SUFFIX_ALPHABET) for _ in range(length))


def format_submitted_at(moment: Optional[datetime] = None) -> str:
    """Render a local timestamp the way the Korean locale prints it.

    Example: ``2026. 10. 19. 오후 3:04:05``.
    """
    moment = moment or datetime.now()
    meridiem = "오전" if moment.hour < 12 else "오후"
    hour = moment.hour % 12 or 12
    return (
        f"{moment.year}. {moment.month}. {moment.day}. "
        f"{meridiem} {hour}:{moment.minute:02d}:{moment.second:02d}"
    )


def parse_record_id(raw: str) -> Optional[int]:
    """Parse the leading integer of the last path segment, or ``None`` if there is none."""
    match = _LEADING_INT.match((raw or "").rsplit("/", 1)[-1])
    if not match:
        return None
    return int(match.group(1))
