"""Application settings using Pydantic Settings for configuration management."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # Application
    app_name: str = "Inbox Relay"
    app_version: str = "0.1.0"
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    # API Server
    api_host: str = "0.0.0.0"
    api_port: int = 8080
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Gmail (OAuth refresh-token flow; the token itself is provisioned out of band)
    google_client_id: str | None = None
    google_client_secret: SecretStr | None = None
    google_refresh_token: SecretStr | None = None
    google_token_uri: str = "https://oauth2.googleapis.com/token"
    gmail_user_id: str = "me"
    gmail_fallback_query: str = "is:unread"
    gmail_fallback_label_ids: list[str] = Field(default_factory=lambda: ["INBOX"])

    # Message store
    store_backend: Literal["redis", "memory"] = "redis"
    redis_url: SecretStr = Field(default=SecretStr("redis://localhost:6379/0"))
    redis_socket_timeout: float = 5.0
    store_key_prefix: str = "gmail"
    store_max_records: int = Field(default=100, gt=0)
    store_record_ttl_seconds: int = Field(default=60 * 60 * 24 * 30, gt=0)

    # Ingestion
    test_marker_prefix: str = "test"
    alert_keywords: list[str] = Field(default_factory=lambda: ["urgent"])
    webhook_token: SecretStr | None = None

    # Read API
    read_default_limit: int = Field(default=50, gt=0)
    read_max_limit: int = Field(default=1000, gt=0)

    @computed_field
    @property
    def gmail_configured(self) -> bool:
        """Whether all three OAuth values needed for Gmail calls are present."""
        return bool(
            self.google_client_id
            and self.google_client_secret
            and self.google_refresh_token
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
