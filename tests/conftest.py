"""Shared pytest fixtures for the intake API."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import List

import pytest

# Ensure the application package is importable during tests.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from intake.config import Settings  # noqa: E402
from intake.main import create_app  # noqa: E402


class RecordingNotifier:
    """Notifier double that keeps every message instead of sending it."""

    def __init__(self) -> None:
        self.messages: List[str] = []

    def notify(self, text: str) -> None:
        self.messages.append(text)


def encode_multipart(fields, boundary: str) -> bytes:
    """Encode ``(name, filename_or_None, bytes)`` tuples as a multipart body."""
    chunks = []
    for name, filename, data in fields:
        disposition = f'form-data; name="{name}"'
        if filename is not None:
            disposition += f'; filename="{filename}"'
        chunks.append(f"--{boundary}\r\nContent-Disposition: {disposition}\r\n".encode("utf-8"))
        if filename is not None:
            chunks.append(b"Content-Type: application/octet-stream\r\n")
        chunks.append(b"\r\n" + data + b"\r\n")
    chunks.append(f"--{boundary}--\r\n".encode("utf-8"))
    return b"".join(chunks)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    static_root = tmp_path / "public"
    static_root.mkdir()
    return Settings(
        data_dir=tmp_path / "data",
        upload_dir=tmp_path / "data" / "uploads",
        static_root=static_root,
    )


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def app(settings: Settings, notifier: RecordingNotifier):
    app = create_app(settings, notifier=notifier)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()
