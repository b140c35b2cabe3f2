"""Application configuration loaded from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "stoploss"
    debug: bool = False
    log_level: str = "INFO"

    # Persistence
    data_path: str = "stoploss_data.json"

    # Calendar days are cut at local midnight in this zone ("local", "UTC",
    # "+02:00", or an IANA name)
    timezone: str = "local"

    # Used until the user saves their own values
    default_stop_loss_limit: int = 50
    default_cooling_minutes: int = 60

    # History views
    grid_months_back: int = 12
    timeline_days_back: int = 60

    # Progress above this fraction of the limit is flagged as danger
    danger_progress_threshold: float = 0.8

    model_config = {"env_prefix": "STOPLOSS_"}


settings = Settings()
