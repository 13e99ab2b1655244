"""Application configuration via pydantic settings."""

from functools import lru_cache
from pathlib import Path

from typing import Any
from zoneinfo import ZoneInfo

from pydantic import Field
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed application configuration."""

    app_env: str = Field("local", alias="APP_ENV")
    app_name: str = "Kassy Cakes Schedule API"
    api_v1_prefix: str = "/api/v1"

    database_url: str = Field(..., alias="DATABASE_URL")
    sync_database_url: str | None = Field(default=None, alias="SYNC_DATABASE_URL")

    secret_key: str = Field("change-me", alias="SECRET_KEY")
    jwt_secret_key: str = Field(default="", alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(60, alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    redis_url: str | None = Field(default=None, alias="REDIS_URL")

    admin_email: str | None = Field(default=None, alias="ADMIN_EMAIL")
    admin_password: str | None = Field(default=None, alias="ADMIN_PASSWORD")
    admin_name: str = Field("Kassy", alias="ADMIN_NAME")

    business_timezone: str = Field("America/Chicago", alias="BUSINESS_TIMEZONE")
    default_daily_capacity: int = Field(2, ge=0, alias="DEFAULT_DAILY_CAPACITY")
    buffer_days: int = Field(10, ge=0, alias="BUFFER_DAYS")
    # Python weekday numbers: Monday=0 ... Sunday=6.
    closed_weekdays: list[int] = Field(
        default_factory=lambda: [6, 0, 1], alias="CLOSED_WEEKDAYS"
    )
    weekly_capacity: int = Field(10, ge=0, alias="WEEKLY_CAPACITY")
    max_bulk_capacity: int = Field(5, ge=0, alias="MAX_BULK_CAPACITY")
    max_query_days: int = Field(186, ge=1, alias="MAX_QUERY_DAYS")
    storage_timeout_seconds: float = Field(10.0, gt=0, alias="STORAGE_TIMEOUT_SECONDS")

    cors_allow_origins: list[str] = Field(
        default_factory=lambda: [
            "http://localhost:3000",
            "http://localhost:5173",
        ],
        alias="CORS_ALLOW_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=False, alias="CORS_ALLOW_CREDENTIALS")
    cors_allowlist: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"], alias="CORS_ALLOWLIST"
    )

    rate_limit_login: str = Field("10/minute", alias="RATE_LIMIT_LOGIN")

    model_config = SettingsConfigDict(
        env_file=Path(__file__).resolve().parents[3] / ".env",
        case_sensitive=False,
        extra="ignore",
    )

    def model_post_init(self, __context: Any) -> None:
        """Populate JWT secret from the generic secret when not provided."""

        if not self.jwt_secret_key:
            object.__setattr__(self, "jwt_secret_key", self.secret_key)

    @field_validator("cors_allow_origins", "cors_allowlist", mode="before")
    @classmethod
    def _split_origins(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("closed_weekdays", mode="before")
    @classmethod
    def _split_weekdays(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [int(part) for part in value.split(",") if part.strip()]
        return value

    @field_validator("closed_weekdays")
    @classmethod
    def _check_weekdays(cls, value: list[int]) -> list[int]:
        if any(day < 0 or day > 6 for day in value):
            raise ValueError("closed weekdays must be between 0 (Monday) and 6 (Sunday)")
        return value

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.business_timezone)


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""
    return Settings()  # type: ignore[call-arg]
