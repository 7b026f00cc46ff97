"""
Configuration settings for the adaptive-gating runtime.

Uses Pydantic Settings for environment variable management with .env file support.
Course-level settings (the `_adaptiveContent` block of a course definition) live in
src/course/schemas.py; this module only covers process-wide concerns.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ADAPTIVE_HOME = Path.home() / ".adaptive"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ADAPTIVE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Offline Storage
    # ========================================
    storage_backend: Literal["memory", "json", "sql"] = Field(
        default="sql",
        description="Which offline storage backend persists learner state",
    )
    storage_url: str = Field(
        default=f"sqlite:///{ADAPTIVE_HOME / 'offline_storage.db'}",
        description="SQLAlchemy connection string for the sql backend",
    )
    storage_json_path: Path = Field(
        default=ADAPTIVE_HOME / "offline_storage.json",
        description="File used by the json backend",
    )
    learner_id: str = Field(
        default="default",
        description="Learner whose state is read and written",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    @field_validator("storage_json_path", mode="before")
    @classmethod
    def _expand_user(cls, value: str | Path) -> Path:
        return Path(value).expanduser()

    # ========================================
    # Helper Methods
    # ========================================
    def get_storage_config(self) -> dict[str, str]:
        """Get storage configuration as a dictionary (for display)."""
        return {
            "backend": self.storage_backend,
            "url": self.storage_url,
            "json_path": str(self.storage_json_path),
            "learner_id": self.learner_id,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
