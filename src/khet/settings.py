"""Application configuration."""

from enum import Enum
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from khet.game.pieces import Player


class NoMovesPolicy(Enum):
    """What happens when the player to act has no legal move."""

    STALL = "stall"  # Leave the game as it is
    FORFEIT = "forfeit"  # The stuck player loses


class Settings(BaseSettings):
    """Application settings loaded from environment variables (prefix KHET_)."""

    model_config = SettingsConfigDict(
        env_prefix="KHET_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # New games
    default_preset: str = "classic"
    starting_player: Player = Player.SILVER
    no_moves_policy: NoMovesPolicy = NoMovesPolicy.STALL

    # AI opponents
    ai_think_time_ms: int | None = None
    ai_seed: int | None = None

    # Self-play runner
    self_play_max_turns: int = 200

    # Logging
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
