"""Configuration management for the PR Presence report engine."""

import os
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Application Settings
    log_level: str = "INFO"

    # Storage - seconds allowed for each story/catalog fetch
    storage_timeout: float = 30.0

    # Corpus snapshot (JSON) used by the in-memory providers
    snapshot_path: Optional[str] = None

    # Report defaults
    default_date_range: str = "90d"
    report_kind: str = "PR_Presence_Analysis"
    brand_name: str = "Ovaview"

    # Vector renderer: triangle-fan subdivisions per pie slice
    pie_segments: int = Field(default=50, ge=4)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def has_snapshot(self) -> bool:
        """Check if a corpus snapshot file is configured and present."""
        return bool(self.snapshot_path and os.path.exists(self.snapshot_path))


def get_settings() -> Settings:
    """Get application settings from the environment and .env file."""
    return Settings()
