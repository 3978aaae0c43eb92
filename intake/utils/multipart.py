"""Minimal multipart/form-data decoder.

The decoder works directly on the raw request body so file payloads stay
byte-exact. It is deliberately forgiving: segments without a recoverable
field name are skipped rather than failing the whole body. Nested multipart,
charset transcoding and part size limits are not supported.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional

CRLF = b"\r\n"
HEADER_SEPARATOR = b"\r\n\r\n"

# ``\b`` keeps ``name=`` from matching inside ``filename=``.
_NAME_PATTERN = re.compile(r'\bname="([^"]+)"')
_FILENAME_PATTERN = re.compile(r'\bfilename="([^"]+)"')


class MultipartError(ValueError):
    """Raised when a multipart body cannot be decoded at all."""


@dataclass(frozen=True)
class Part:
    """One named section of a multipart body."""

    name: str
    data: bytes
    filename: Optional[str] = None

    @property
    def is_file(self) -> bool:
        return self.filename is not None


def boundary_from_content_type(content_type: str) -> str:
    """Extract the boundary parameter from a ``Content-Type`` header value."""
    _, sep, tail = (content_type or "").partition("boundary=")
    boundary = tail.split(";", 1)[0].strip().strip('"') if sep else ""
    if not boundary:
        raise MultipartError("Missing multipart boundary in Content-Type header.")
    return boundary


def _parse_segment(segment: bytes) -> Optional[Part]:
    header_end = segment.find(HEADER_SEPARATOR)
    if header_end == -1:
        return None

    headers = segment[:header_end].decode("utf-8", errors="replace")
    name_match = _NAME_PATTERN.search(headers)
    if not name_match:
        return None

    filename_match = _FILENAME_PATTERN.search(headers)
    return Part(
        name=name_match.group(1),
        data=segment[header_end + len(HEADER_SEPARATOR):],
        filename=filename_match.group(1) if filename_match else None,
    )


def decode(body: bytes, boundary: str) -> List[Part]:
    """Split ``body`` into its named parts, in the order they appear."""
    if not boundary:
        raise MultipartError("Multipart boundary must not be empty.")

    delimiter = b"--" + boundary.encode("utf-8")
    first = body.find(delimiter)
    if first == -1:
        return []

    parts: List[Part] = []
    start = first + len(delimiter) + len(CRLF)
    while start < len(body):
        end = body.find(delimiter, start)
        if end == -1:
            break

        # The line break before the next delimiter belongs to the delimiter.
        part = _parse_segment(body[start:end - len(CRLF)])
        if part is not None:
            parts.append(part)

        start = end + len(delimiter) + len(CRLF)

    return parts
