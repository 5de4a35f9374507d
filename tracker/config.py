"""Application settings and configuration management."""
import logging
from datetime import time
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Database
    DATABASE_URL: str = "sqlite:///./tracker.db"
    STORE_LOCK_TIMEOUT_SECONDS: float = 5.0

    # Scheduling
    SCHEDULER_ENABLED: bool = True
    TICK_INTERVAL_SECONDS: int = 60
    SUMMARY_CHECK_TIME: str = "00:10"  # HH:MM, local time
    WEEKLY_SUMMARY_WEEKDAY: int = 0  # Monday

    # Notifications
    NOTIFY_COMMAND: str = ""
    NOTIFY_TIMEOUT_SECONDS: float = 5.0

    LOG_LEVEL: str = "INFO"

    @field_validator("DATABASE_URL")
    @classmethod
    def _fix_postgres_scheme(cls, value: str) -> str:
        # Render/Heroku hand out postgres:// but SQLAlchemy needs postgresql://
        if value.startswith("postgres://"):
            return value.replace("postgres://", "postgresql://", 1)
        return value

    @field_validator("SUMMARY_CHECK_TIME")
    @classmethod
    def _check_time_format(cls, value: str) -> str:
        parse_check_time(value)
        return value

    @field_validator("WEEKLY_SUMMARY_WEEKDAY")
    @classmethod
    def _check_weekday(cls, value: int) -> int:
        if not 0 <= value <= 6:
            raise ValueError("WEEKLY_SUMMARY_WEEKDAY must be between 0 (Monday) and 6 (Sunday)")
        return value

    @field_validator("TICK_INTERVAL_SECONDS")
    @classmethod
    def _check_interval(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("TICK_INTERVAL_SECONDS must be positive")
        return value

    @property
    def summary_check_time(self) -> time:
        return parse_check_time(self.SUMMARY_CHECK_TIME)


def parse_check_time(value: str) -> time:
    """Parse an ``HH:MM`` string into a time of day."""
    try:
        hours, minutes = value.split(":")
        return time(int(hours), int(minutes))
    except ValueError:
        raise ValueError(f"Expected HH:MM, got {value!r}") from None


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(level: str = "INFO") -> None:
    """Install a single stream handler on the root logger."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
