"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Connector settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Cookbook service
    cookbook_base_url: str = "http://localhost:9090/cookbook"
    cookbook_access_token: str = ""
    cookbook_timeout: float = 30.0  # request timeout in seconds
    cookbook_max_retries: int = 3

    # Recently added feed
    poll_interval: float = 10.0  # seconds between polls

    # Application
    environment: str = "development"
    log_level: str = "INFO"
    allowed_origins: str = "http://localhost:3000,http://localhost:8000"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
