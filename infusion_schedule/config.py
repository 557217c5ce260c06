"""Application configuration using Pydantic Settings."""

from datetime import date, datetime
from zoneinfo import ZoneInfo

from pydantic_settings import BaseSettings, SettingsConfigDict

from infusion_schedule.core.bag_schedule.models import PolicyFlags


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Bag size policy (shared by every patient's schedule)
    enable_5_day_bags: bool = False
    enable_6_day_bags: bool = False

    # "Today" for alert classification is the clinic's calendar day,
    # not the server's.
    clinic_timezone: str = "America/Los_Angeles"

    # Upper bound on rows accepted by the board endpoint
    max_board_patients: int = 200

    # Logging
    log_format: str = "json"  # 'json' or 'text'
    log_level: str = "INFO"
    service_name: str = "infusion-schedule-api"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]


settings = Settings()


def get_policy_flags() -> PolicyFlags:
    """Snapshot the bag size policy from settings.

    Used as a FastAPI dependency so each request computes against one
    consistent, read-only copy of the flags.
    """
    return PolicyFlags(
        enable_5_day_bags=settings.enable_5_day_bags,
        enable_6_day_bags=settings.enable_6_day_bags,
    )


def clinic_today() -> date:
    """Current calendar date in the configured clinic timezone."""
    return datetime.now(ZoneInfo(settings.clinic_timezone)).date()
