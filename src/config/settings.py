"""
Farkle Engine - Application Settings

Loads configuration from environment variables using Pydantic Settings.
"""

import logging
from functools import lru_cache

from pydantic_settings import BaseSettings

from src.engine.base import GameMode


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    debug: bool = False
    log_level: str = "INFO"

    # Lobby
    min_players: int = 2
    max_players: int = 4
    lobby_code_length: int = 6
    default_game_mode: GameMode = GameMode.STANDARD

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


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
