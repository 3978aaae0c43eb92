"""Service for writing uploaded attachments to the uploads directory."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path

from intake.storage import StorageError
from intake.utils.ids import generate_suffix, now_millis

logger = logging.getLogger(__name__)

DEFAULT_EXTENSION = ".bin"

_SAFE_EXTENSION = re.compile(r"^\.[A-Za-z0-9]{1,16}$")


def stored_extension(filename_hint: str) -> str:
    """Return the extension of the client filename, or ``.bin`` if unusable."""
    base = os.path.basename((filename_hint or "").replace("\\", "/"))
    extension = os.path.splitext(base)[1]
    if not _SAFE_EXTENSION.match(extension):
        return DEFAULT_EXTENSION
    return extension


class UploadSink:
    """Stores attachment bytes under generated, collision-resistant names."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def initialize(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

    def path_for(self, stored_name: str) -> Path:
        return self.directory / stored_name

    def store(self, filename_hint: str, data: bytes) -> str:
        """
        Write ``data`` verbatim and return the generated file name.

        Args:
            filename_hint: Original client filename, used only for its extension
            data: Raw attachment bytes

        Returns:
            Name of the stored file inside the uploads directory

        Raises:
            StorageError: If the file cannot be written
        """
        stored_name = f"{now_millis()}_{generate_suffix()}{stored_extension(filename_hint)}"
        try:
            self.initialize()
            # "xb" refuses to overwrite; a name clash is not retried.
            with open(self.path_for(stored_name), "xb") as fh:
                fh.write(data)
        except OSError as exc:
            raise StorageError(f"Failed to store upload {filename_hint!r}: {exc}") from exc

        logger.info("Stored upload %r as %s (%d bytes)", filename_hint, stored_name, len(data))
        return stored_name

    def discard(self, stored_name: str) -> None:
        """Remove a stored upload whose submission could not be saved."""
        try:
            self.path_for(stored_name).unlink(missing_ok=True)
        except OSError:
            logger.warning("Could not remove orphaned upload %s", stored_name, exc_info=True)
