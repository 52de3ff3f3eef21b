"""
Application configuration using pydantic-settings.
Loads from environment variables with .env file support.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database
    database_url: str = "sqlite+aiosqlite:///./portfolio_manager.db"

    # Application
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR
    project_name: str = "Portfolio Manager"
    version: str = "2.0.0"

    # Pagination
    default_page_size: int = 10
    max_page_size: int = 100

    # Audit / metrics sinks
    audit_logger_name: str = "portfolio_manager.audit"
    audit_log_level: str = "INFO"
    metrics_namespace: str = "portfolio_manager"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
