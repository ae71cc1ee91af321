# app/core/config.py
"""Settings for the Fiber Project Tracker API.

Values come from the process environment or a local ``.env`` file; names are
case-insensitive and unknown keys are ignored.
"""
from enum import Enum

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT_ALIASES = {
    "dev": "development",
    "develop": "development",
    "test": "testing",
    "prod": "production",
}


class EnvironmentEnum(str, Enum):
    development = "development"
    testing = "testing"
    staging = "staging"
    production = "production"


class LogLevelEnum(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormatEnum(str, Enum):
    simple = "simple"
    json = "json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ===== Application =====
    app_name: str = Field(default="Fiber Project Tracker API", description="Application name")
    version: str = Field(default="1.0.0", description="Application version")
    environment: EnvironmentEnum = Field(
        default=EnvironmentEnum.development, description="Deployment environment"
    )
    debug: bool = Field(default=False, description="Debug mode")
    host: str = Field(default="127.0.0.1", description="Host to bind the server")
    port: int = Field(default=8000, description="Port to bind the server")
    allowed_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000",
        description="Allowed CORS origins (comma-separated)",
    )

    # ===== Storage =====
    database_url: str | None = Field(default=None, description="Database connection URL")
    test_database_url: str | None = Field(
        default=None, description="Database used while ENVIRONMENT=testing"
    )
    db_echo: bool = Field(default=False, description="Echo SQL statements")

    # ===== Projects and catalogs =====
    default_currency: str = Field(default="EUR", description="Currency used when none is given")
    pagination_default_limit: int = Field(default=20, ge=1, description="Default page size")
    pagination_max_limit: int = Field(default=100, ge=1, description="Largest allowed page size")
    max_write_retries: int = Field(
        default=3,
        ge=0,
        le=10,
        description="Retries of a project read-modify-write after a concurrent modification",
    )

    # ===== Logging =====
    log_level: LogLevelEnum = Field(default=LogLevelEnum.INFO, description="Root log level")
    log_format: LogFormatEnum = Field(
        default=LogFormatEnum.simple, description="'simple' text lines or one JSON object per line"
    )

    @field_validator("environment", mode="before")
    @classmethod
    def normalize_environment(cls, v):
        if isinstance(v, str):
            v = v.strip().lower()
            return _ENVIRONMENT_ALIASES.get(v, v)
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        return v.upper() if isinstance(v, str) else v

    @field_validator("default_currency")
    @classmethod
    def validate_currency(cls, v: str) -> str:
        if len(v) != 3 or not v.isalpha():
            raise ValueError("Currency must be a three-letter code")
        return v.upper()

    @model_validator(mode="after")
    def check_pagination_limits(self):
        if self.pagination_default_limit > self.pagination_max_limit:
            raise ValueError("pagination_default_limit cannot exceed pagination_max_limit")
        return self

    @property
    def is_development(self) -> bool:
        return self.environment == EnvironmentEnum.development

    @property
    def is_testing(self) -> bool:
        return self.environment == EnvironmentEnum.testing

    @property
    def is_production(self) -> bool:
        return self.environment == EnvironmentEnum.production

    @property
    def active_database_url(self) -> str:
        """The URL this process should connect to, or "" when none is set."""
        url = self.test_database_url if self.is_testing and self.test_database_url else self.database_url
        return (url or "").strip()

    @property
    def allowed_origins_list(self) -> list[str]:
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]


settings = Settings()


def get_config_summary() -> dict:
    """Non-secret view of the running configuration."""
    return {
        "app_name": settings.app_name,
        "version": settings.version,
        "environment": settings.environment,
        "debug": settings.debug,
        "database_configured": bool(settings.active_database_url),
        "log_level": settings.log_level,
        "log_format": settings.log_format,
        "default_currency": settings.default_currency,
        "max_write_retries": settings.max_write_retries,
    }


__all__ = [
    "settings",
    "Settings",
    "get_config_summary",
    "EnvironmentEnum",
    "LogLevelEnum",
    "LogFormatEnum",
]
