"""Application configuration via pydantic settings."""

from functools import lru_cache
from pathlib import Path

from typing import Any, Literal

from pydantic import Field
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed application configuration."""

    app_env: str = Field("local", alias="APP_ENV")
    app_name: str = "Lodging Admin API"
    api_v1_prefix: str = "/api/v1"

    database_url: str = Field(
        "sqlite+aiosqlite:///./lodging.db", alias="DATABASE_URL"
    )
    sync_database_url: str | None = Field(default=None, alias="SYNC_DATABASE_URL")
    lodging_store: Literal["database", "memory"] = Field(
        "database", alias="LODGING_STORE"
    )

    secret_key: str = Field("change-me", alias="SECRET_KEY")
    jwt_secret_key: str = Field(default="", alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        60 * 12, alias="ACCESS_TOKEN_EXPIRE_MINUTES"
    )

    lodging_admin_pin: str = Field("1234", alias="LODGING_ADMIN_PIN")
    lodging_admin_pin_hash: str | None = Field(
        default=None, alias="LODGING_ADMIN_PIN_HASH"
    )

    dashboard_start_year: int = Field(2024, alias="DASHBOARD_START_YEAR")
    dashboard_years: int = Field(3, alias="DASHBOARD_YEARS")

    notification_webhook_url: str | None = Field(
        default=None, alias="NOTIFICATION_WEBHOOK_URL"
    )
    notification_timeout_seconds: float = Field(
        10.0, alias="NOTIFICATION_TIMEOUT_SECONDS"
    )

    redis_url: str | None = Field(default=None, alias="REDIS_URL")
    rate_limit_login: str = Field("10/minute", alias="RATE_LIMIT_LOGIN")

    cors_allow_credentials: bool = Field(default=False, alias="CORS_ALLOW_CREDENTIALS")
    cors_allowlist: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"], alias="CORS_ALLOWLIST"
    )

    model_config = SettingsConfigDict(
        env_file=Path(__file__).resolve().parents[3] / ".env",
        case_sensitive=False,
        extra="ignore",
    )

    def model_post_init(self, __context: Any) -> None:
        """Populate JWT secret from the generic secret when not provided."""

        if not self.jwt_secret_key:
            object.__setattr__(self, "jwt_secret_key", self.secret_key)

    @field_validator("cors_allowlist", mode="before")
    @classmethod
    def _split_origins(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip().startswith("["):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""
    return Settings()  # type: ignore[call-arg]
