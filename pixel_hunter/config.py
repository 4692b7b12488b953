from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import COUNTDOWN_SECONDS


class Settings(BaseSettings):
    """Process configuration, read from the environment (and ``.env``)."""

    host: str = "0.0.0.0"
    port: int = 3000

    # Delay between both players readying up and ``game_start``.
    countdown_seconds: float = COUNTDOWN_SECONDS

    # Default per-room game tuning; only target_level affects the relay.
    target_level: int = 15
    diff_start: float = 16
    diff_min: float = 1.2

    static_dir: str = "public"
    log_level: str = "INFO"
    log_file: Optional[str] = None

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache()
def get_settings() -> Settings:
    return Settings()


__all__ = ["Settings", "get_settings"]
