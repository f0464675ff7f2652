"""Configuration management using Pydantic Settings"""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database (repository-backed transaction source)
    database_url: str = "sqlite:///./finly.db"

    # Transaction source: local repository or remote finance API
    source_backend: Literal["database", "api"] = "database"

    # External Services
    finance_api_base: str = "http://localhost:8000/api/v1"
    insights_api_url: str = "http://localhost:8000/api/v1/ai/balance-insights"

    # Service
    service_name: str = "finly-balance"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 5.0

    # Reconstruction
    history_days: int = 30
    fetch_window_days: int = 31  # one extra day beyond history_days
    spending_window_days: int = 7
    projection_period: Literal["month", "week"] = "month"
    timezone: str = "UTC"  # IANA zone used to truncate timestamps to calendar days


settings = Settings()
