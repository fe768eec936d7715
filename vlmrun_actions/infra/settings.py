"""Package configuration, read from ``VLMRUN_*`` environment variables and ``.env``."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "https://api.vlm.run/v1"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="VLMRUN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    api_key: str | None = None
    base_url: str = DEFAULT_BASE_URL

    timeout_seconds: float = Field(default=120.0, gt=0)
    download_timeout_seconds: float = Field(default=60.0, gt=0)

    # Job completion
    completion_strategy: Literal["poll", "callback"] = "poll"
    max_attempts: int = Field(default=30, ge=1)
    retry_delay_seconds: float = Field(default=4.0, ge=0)

    default_model: str = "vlm-1"
    default_mode: str = "accurate"

    log_level: str = "WARNING"
    log_json: bool = False

    @field_validator("base_url", mode="before")
    @classmethod
    def _normalize_base_url(cls, value: str | None) -> str:
        return (value or DEFAULT_BASE_URL).rstrip("/")


class AuthData(BaseModel):
    """Credentials the automation host hands to every invocation."""

    api_key: str = Field(min_length=1)
    base_url: str | None = None

    @property
    def resolved_base_url(self) -> str:
        return (self.base_url or DEFAULT_BASE_URL).rstrip("/")

    @classmethod
    def from_settings(cls, source: Settings | None = None) -> AuthData:
        from ..exceptions import ConfigurationError

        source = source or settings
        if not source.api_key:
            raise ConfigurationError("VLMRUN_API_KEY is not configured")
        return cls(api_key=source.api_key, base_url=source.base_url)


settings = Settings()
