"""Application configuration loaded from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central settings pulled from .env / environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_env: str = "development"
    log_level: str = "INFO"
    service_name: str = "synthmarket"
    service_version: str = "0.1.0"

    # Generation
    default_seed: int = 42
    """Seed used when neither the generator nor the options carry one."""

    default_scenario: str = "normal"

    # Latest-price cache (HTTP surface only)
    latest_cache_ttl_seconds: int = 300
    latest_cache_max_entries: int = 256

    # FastAPI
    fastapi_host: str = "0.0.0.0"
    fastapi_port: int = 8000


settings = Settings()
