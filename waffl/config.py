"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./waffl.db",
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    secret_key: str = Field(
        description="Secret key for signing session bearer tokens", min_length=1
    )
    access_token_expire_minutes: int = Field(
        default=60,
        description="Number of minutes before access tokens expire",
        gt=0,
    )
    notification_window_size: int = Field(
        default=50,
        description="Maximum number of notifications kept in a recipient's live view",
        gt=0,
    )
    push_endpoint_url: str | None = Field(
        default=None,
        description="Remote push send endpoint. When unset the endpoint is called in-process",
    )
    push_endpoint_api_key: str | None = Field(
        default=None,
        description="Shared secret required in the X-API-Key header of the push endpoint",
    )
    push_request_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout applied to outbound push requests",
        gt=0,
    )
    fcm_project_id: str | None = Field(
        default=None,
        description="Firebase project identifier used to build the FCM v1 send URL",
    )
    fcm_access_token: str | None = Field(
        default=None,
        description="OAuth2 access token authorizing calls to the FCM v1 API",
    )
    log_level: str = Field(default="INFO", description="Root logging level")

    @model_validator(mode="after")
    def _validate_fcm_pair(self) -> "Settings":
        if bool(self.fcm_project_id) ^ bool(self.fcm_access_token):
            raise ValueError(
                "FCM_PROJECT_ID and FCM_ACCESS_TOKEN must both be provided to enable push delivery"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
