"""
Configuration settings for the Appeal AI API.

Uses pydantic-settings for environment variable management.
"""

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """API configuration settings."""

    # API Settings
    api_title: str = "Appeal AI Backend"
    api_version: str = "1.0.0"
    port: int = 3000
    log_level: str = "INFO"

    # "production" hides internal error details from clients
    environment: str = Field(
        default="development",
        validation_alias=AliasChoices("environment", "node_env"),
    )

    # CORS Settings
    cors_origins: list[str] = ["*"]

    # Upstream completion provider (LiteLLM model identifiers)
    openai_api_key: str | None = None
    appeal_model: str = "gpt-4o-mini"
    extraction_model: str = "gpt-4o-mini"
    completion_temperature: float = 0.3
    completion_max_tokens: int = 500
    upstream_timeout_seconds: int = 60
    image_detail: str = "auto"

    # Upload limits
    max_upload_mb: int = 50

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def expose_error_details(self) -> bool:
        """Whether internal error messages may be echoed to clients."""
        return self.environment.lower() != "production"

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
