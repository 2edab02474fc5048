"""Application settings loaded from environment variables and .env."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class NeteaseSettings(BaseSettings):
    """NetEase upstream configuration."""

    model_config = SettingsConfigDict(
        env_prefix="NETEASE_", env_file=".env", extra="ignore"
    )

    timeout: float = Field(default=30.0, gt=0, description="Request timeout (seconds)")
    # Hey future me - this is the size of the permit pool! Every outbound request,
    # including each playlist batch, holds one permit while in flight.
    max_concurrent_requests: int = Field(default=8, ge=1)
    # Retries per playlist batch. 0 = one attempt, failed batches are dropped.
    playlist_retry_limit: int = Field(default=0, ge=0, le=255)
    random_ip: bool = Field(
        default=False, description="Send a random X-Real-IP header with every request"
    )


class ObservabilitySettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="OBSERVABILITY_", env_file=".env", extra="ignore"
    )

    log_json_format: bool = False
    log_query_params: bool = False


class Settings(BaseSettings):
    """Top-level application settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = "neo-meting"
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = Field(default=5811, ge=1, le=65535)

    netease: NeteaseSettings = Field(default_factory=NeteaseSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
