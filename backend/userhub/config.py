"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process
    - Strict auth mode = production environment OR require_api_key

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for every setting: works out-of-the-box in development
    - create_app() accepts a Settings instance so tests never touch the cache
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Runtime
    environment: str = "development"
    app_version: str = "1.0.0"

    @field_validator("environment", mode="before")
    @classmethod
    def normalize_environment(cls, v: str) -> str:
        return v.strip().lower() if isinstance(v, str) else v

    # Auth
    api_key: str | None = None
    require_api_key: bool = False

    # Rate limiting: 100 requests per 15 minutes
    rate_limit_max_requests: int = 100
    rate_limit_window_seconds: int = 900

    # In-memory store
    store_latency_min_ms: int = 50
    store_latency_max_ms: int = 150
    seed_sample_data: bool = True

    # Board notifier (Monday.com)
    notifier_delay_ms: int = 200
    monday_api_key: str | None = None
    monday_board_id: str | None = None
    monday_item_id: str | None = None
    monday_api_url: str = "https://api.monday.com/v2"

    # API
    cors_origins: list[str] = ["*"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def strict_auth(self) -> bool:
        return self.is_production or self.require_api_key


@lru_cache
def get_settings() -> Settings:
    return Settings()
