"""Configuration module for codesplice settings.

Values come from the environment (``CODESPLICE_*``) or a local ``.env`` file.
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="CODESPLICE_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Maximum characters per request batch sent to the generation service
    batch_char_limit: int = 20_000

    # Rule id -> refactoring objective table
    objectives_path: str = "config/refactoring_objectives.yaml"

    # Default level for configure_logging and setup_structured_logging
    log_level: str = "INFO"


settings = Settings()

