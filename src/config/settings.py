"""
Gala Showdown - Application Settings

Loads configuration from environment variables using Pydantic Settings.
"""

import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings

DEFAULT_ROSTER = [
    "Grandpa",
    "Grandma",
    "Jason",
    "Tina",
    "Sharon",
    "Celine",
    "Dean",
    "Wendy",
    "Penny",
    "Max",
    "Yvonne",
    "Ken",
    "Howard",
]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Supabase (only required by the Supabase room store)
    supabase_url: str | None = None
    supabase_anon_key: str | None = None
    room_table: str = "rooms"
    poll_interval: float = 2.0
    # Seconds between host heartbeats while a room is open, 0 disables them
    heartbeat_interval: float = 5.0

    # Commentary
    gemini_api_key: str | None = None
    commentary_model: str = "gemini-2.0-flash"
    commentary_timeout: float = 8.0

    # Match pacing: 1.0 = real time, 0 = instant
    pace_scale: float = 1.0
    show_frames: bool = True
    dice_max_attempts: int = 100
    max_replays: int = 100

    # Tournament
    default_roster: list[str] = Field(default_factory=lambda: list(DEFAULT_ROSTER))

    # Application
    debug: bool = False
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    @property
    def has_supabase(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached singleton settings instance."""
    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    """Apply the configured log level to the root logger."""
    settings = settings or get_settings()
    level = logging.DEBUG if settings.debug else settings.log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
