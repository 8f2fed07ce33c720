"""Application configuration."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables (PAPER_*)."""

    model_config = SettingsConfigDict(
        env_prefix="PAPER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_level: str = "INFO"

    # trading.yaml location (None = default path next to the package)
    trading_config_path: str | None = None

    # Session export directory
    sessions_dir: str = "sessions"

    # Polling loop
    update_interval_seconds: float = 60.0
    error_backoff_seconds: float = 5.0

    # Price window kept per pair
    price_history_size: int = 200


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
