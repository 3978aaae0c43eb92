"""Text helpers for notification messages."""

from __future__ import annotations

import html
from typing import Any

MISSING_VALUE = "-"


def display_value(value: Any, default: str = MISSING_VALUE) -> str:
    """Return an HTML-escaped string for a caller-supplied value."""
    if value is None or value == "":
        return default
    return html.escape(str(value), quote=False)
