"""Environment-driven settings for the intake API."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DIAGNOSIS_FILENAME = "data.json"
LEAD_FILENAME = "lead-data.json"
CONFIG_FILENAME = "config.json"


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = 5001
    data_dir: Path = Path(".")
    upload_dir: Path = Path("uploads")
    static_root: Path = Path(".")
    max_upload_bytes: Optional[int] = 25 * 1024 * 1024
    log_level: str = "INFO"
    telegram_bot_token: str = ""
    telegram_chat_id: str = ""
    telegram_api_base: str = "https://api.telegram.org"
    telegram_timeout_seconds: float = 10.0

    @property
    def diagnosis_file(self) -> Path:
        return self.data_dir / DIAGNOSIS_FILENAME

    @property
    def lead_file(self) -> Path:
        return self.data_dir / LEAD_FILENAME

    @property
    def config_file(self) -> Path:
        return self.data_dir / CONFIG_FILENAME


def load_settings() -> Settings:
    """Read settings from the environment (after ``load_dotenv`` has run)."""
    data_dir = Path(os.getenv("DATA_DIR", "."))
    max_upload_mb = float(os.getenv("MAX_UPLOAD_MB", "25"))
    return Settings(
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "5001")),
        data_dir=data_dir,
        upload_dir=Path(os.getenv("UPLOAD_DIR") or data_dir / "uploads"),
        static_root=Path(os.getenv("STATIC_ROOT", ".")),
        max_upload_bytes=int(max_upload_mb * 1024 * 1024) if max_upload_mb > 0 else None,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        telegram_bot_token=os.getenv("TELEGRAM_BOT_TOKEN", ""),
        telegram_chat_id=os.getenv("TELEGRAM_CHAT_ID", ""),
        telegram_api_base=os.getenv("TELEGRAM_API_BASE", "https://api.telegram.org"),
        telegram_timeout_seconds=float(os.getenv("TELEGRAM_TIMEOUT_SECONDS", "10")),
    )
