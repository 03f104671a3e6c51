from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Loading priority (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values below
    """

    # Environment
    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # Application
    app_name: str = "Alias Shortener"
    app_version: str = "1.0.0"

    # Database
    database_url: str = "sqlite:///./alias_shortener.db"

    # Alias generation
    base_url: str = "http://127.0.0.1:8000"
    alias_length: int = 6
    alias_strategy: str = "deterministic"  # Options: "deterministic", "random"
    max_random_attempts: int = 100  # Cap on the random-suffix fallback loop
    max_insert_retries: int = 5  # Regenerations after a unique-constraint race

    # Identity
    anonymous_owner_id: str = "00000000-0000-0000-0000-000000000000"
    allow_anonymous_custom_slugs: bool = True

    # Cache settings
    cache_backend: str = "redis"  # Options: "redis", "memory", "null"
    redis_url: str = "redis://localhost:6379/0"
    cache_ttl: int = 86400  # 24 hours

    # Redirect
    not_found_redirect_url: Optional[str] = None

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Create settings instance
settings = Settings()
