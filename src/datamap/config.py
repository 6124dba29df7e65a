"""Configuration settings for datamap.

Precedence: CLI options > environment (DATAMAP_*) / .env > defaults.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from datamap.core.logging import Verbosity
from datamap.core.models import LayoutMode


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="DATAMAP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # System export to load (default: bundled sample dataset)
    data_file: Path | None = None

    layout_mode: LayoutMode = LayoutMode.SYSTEM_TYPE

    # JSONL run logs go here when set
    log_dir: Path | None = None
    verbosity: int = Field(default=0, ge=0, le=2)

    @property
    def verbosity_level(self) -> Verbosity:
        return Verbosity(self.verbosity)


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get cached settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings cache (useful for testing)."""
    global _settings
    _settings = None
