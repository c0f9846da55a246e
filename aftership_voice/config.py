"""Application configuration via environment variables."""

from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from .const import (
    DEFAULT_COUNTRY,
    DEFAULT_DAYS_PAST_DELIVERED,
    DEFAULT_DAYS_SEARCH,
    DEFAULT_SCHEDULE_RATE,
    DEFAULT_TIMEZONE,
    DEFAULT_TRACKING_COUNT_LIMIT,
)


class Settings(BaseSettings):
    """App settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # AfterShip
    aftership_api_key: str = ""
    aftership_days_search: int = DEFAULT_DAYS_SEARCH
    aftership_days_past_delivered: int = DEFAULT_DAYS_PAST_DELIVERED
    aftership_note_tagging: Optional[str] = None
    aftership_tracking_count_limit: int = DEFAULT_TRACKING_COUNT_LIMIT

    # Google Maps
    google_maps_api_key: str = ""

    # Grouping policy
    date_tolerance: Literal["hour", "day"] = "hour"

    # Device defaults
    default_country: str = DEFAULT_COUNTRY
    default_timezone: str = DEFAULT_TIMEZONE

    # Proactive events
    schedule_rate: int = DEFAULT_SCHEDULE_RATE  # minutes

    # App
    mute_footnotes: bool = False
    debug_mode: bool = False
    log_level: str = "INFO"


settings = Settings()
