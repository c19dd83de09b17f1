"""Application settings powered by Pydantic BaseSettings."""

import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Centralized environment configuration."""

    model_config = SettingsConfigDict(
        env_prefix="", case_sensitive=False, env_file=".env", env_file_encoding="utf-8"
    )

    rakuten_application_id: str | None = Field(
        default=None, validation_alias="RAKUTEN_APPLICATION_ID"
    )
    rakuten_affiliate_id: str | None = Field(
        default=None, validation_alias="RAKUTEN_AFFILIATE_ID"
    )
    log_level: str = Field(default="INFO", validation_alias="RANKING_LOG_LEVEL")
    log_json: bool = Field(default=True, validation_alias="RANKING_LOG_JSON")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and check the log level name."""
        level = v.upper()
        if level not in logging.getLevelNamesMapping():
            msg = f"Unknown log level: {v}"
            raise ValueError(msg)
        return level

    @property
    def log_level_value(self) -> int:
        """Get the numeric logging level."""
        return logging.getLevelNamesMapping()[self.log_level]


def get_settings() -> AppSettings:
    """Get a settings instance."""
    return AppSettings()
