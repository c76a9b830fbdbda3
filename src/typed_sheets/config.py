"""Configuration management using Pydantic Settings."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from ``TYPED_SHEETS_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TYPED_SHEETS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Length of generated record identifiers
    id_length: int = 8

    # JsonFileStore location
    data_dir: Path = Path("./sheets_data")

    # Acting user stamped into created_by / last_modified_by
    actor_email: Optional[str] = None

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None


def configure_logging(level: str | None = None) -> None:
    """Send typed_sheets log records to stderr at the given level."""
    level = level or get_settings().log_level
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("typed_sheets").setLevel(level)
