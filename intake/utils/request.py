"""Helpers for reading request payloads inside route handlers."""

from __future__ import annotations

import json
from typing import Any, Dict, Optional, Tuple

from flask import jsonify, request


def parse_json_object(raw: bytes) -> Dict[str, Any]:
    """Decode ``raw`` as a JSON object, raising ``ValueError`` otherwise."""
    payload = json.loads(raw.decode("utf-8"))
    if not isinstance(payload, dict):
        raise ValueError("Request body must be a JSON object.")
    return payload


def read_json_object() -> Tuple[Optional[Dict[str, Any]], Optional[Any]]:
    """Parse the request body and return ``(payload, error_response)``."""
    try:
        return parse_json_object(request.get_data(cache=False)), None
    except ValueError as exc:
        return None, (jsonify(error=f"Invalid JSON body: {exc}"), 400)
