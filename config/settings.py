"""Centralized configuration using pydantic-settings. All values are env-configurable."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="FORMWIZARD_")

    # Event store
    store_capacity: int = 1000

    # Problem detection
    abandonment_threshold: int = 30  # percent
    hesitation_threshold_ms: int = 5000
    change_threshold: int = 10

    # Time windows
    default_window: str = "24h"

    # Redis (optional event log mirror)
    persist_events: bool = False
    redis_url: str = "redis://redis:6379/0"
    redis_pool_size: int = 20
    redis_events_key: str = "formwizard:events"

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 5001
    ws_throttle_ms: int = 100

    # Sample data
    sample_sessions: int = 20
    sample_submit_ratio: float = 0.6

    # Monitoring
    enable_prometheus: bool = True
    log_level: str = "INFO"
