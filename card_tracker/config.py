"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_prefix="CARD_TRACKER_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Backend API
    api_base_url: str = "http://localhost:8080"

    # Service
    service_name: str = "card-tracker"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 10.0

    # Dashboard rules
    recommended_payment_offset_days: int = 7
    action_required_window_days: int = 32  # inclusive
    upcoming_statements_limit: int = 5


settings = Settings()
