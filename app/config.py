"""Application configuration using Pydantic Settings."""
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Exchange rate provider
    exchange_rate_api_key: Optional[str] = None
    exchange_rate_api_url: str = "https://v6.exchangerate-api.com/v6"
    exchange_rate_timeout_seconds: float = 10.0

    # Loading-state placeholder for clients; never used in aggregation
    display_placeholder_rate: float = 83.5

    # Storage
    storage_backend: Literal["memory", "mongodb"] = "memory"
    mongodb_url: Optional[str] = None
    mongodb_db_name: str = "savings_tracker"

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    debug: bool = False
    log_level: str = "INFO"

    # CORS
    cors_origins: str = "http://localhost:3000,http://localhost:5000"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",")]


settings = Settings()
