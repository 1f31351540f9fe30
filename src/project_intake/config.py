"""
Project Intake - Configuration and settings.

All knobs come from the environment (or a local .env file). Components take
explicit arguments and only fall back to these settings when none are given.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class IntakeSettings(BaseSettings):
    """Settings shared by the API client, the wizard and the trackers."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Remote API
    intake_api_url: str = "http://localhost:3001"
    intake_api_token: str | None = None
    request_timeout_seconds: float = 30.0

    # Application
    intake_env: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Draft persistence
    draft_dir: Path = Path(".intake")
    draft_key: str = "projectCreationData"

    # Generation tracking
    poll_interval_seconds: float = 5.0
    max_poll_retries: int = 3

    # Questionnaire
    force_complete_threshold: float = 80.0

    @property
    def is_development(self) -> bool:
        return self.intake_env == "development"

    @property
    def is_production(self) -> bool:
        return self.intake_env == "production"


@lru_cache
def get_settings() -> IntakeSettings:
    """Get cached IntakeSettings instance."""
    return IntakeSettings()


class _SettingsProxy:
    """Lazy proxy so importing this module never reads the environment."""

    _instance: IntakeSettings | None = None

    def __getattr__(self, name: str):
        if self._instance is None:
            self._instance = get_settings()
        return getattr(self._instance, name)


settings = _SettingsProxy()
