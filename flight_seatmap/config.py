"""Configuration settings for the flight seat map service."""

from functools import lru_cache
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application Configuration
    app_name: str = "Flight Seat Map API"
    debug: bool = False
    environment: str = "development"

    # Seat Selection Configuration
    max_required_count: int = 10
    max_active_sessions: int = 1000
    session_ttl_seconds: int = 30 * 60

    # CORS Configuration
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173"
    ]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    cors_allow_headers: list[str] = ["*"]
    cors_expose_headers: list[str] = ["X-Request-ID", "X-Process-Time"]

    # Logging Configuration
    log_level: str = "INFO"
    log_file: Optional[str] = None
    enable_json_logging: bool = False
    enable_request_logging: bool = True

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8"
    }


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
