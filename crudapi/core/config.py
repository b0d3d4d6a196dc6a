"""Application configuration using pydantic settings with structured sections."""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False


class DatabaseSettings(BaseModel):
    url: str = Field(default="sqlite+aiosqlite:///./crudapi.db", alias="url")
    echo: bool = False
    pool_size: Optional[int] = None
    max_overflow: Optional[int] = None
    # Development convenience; production schemas come from alembic.
    create_tables: bool = True


class SecuritySettings(BaseModel):
    secret_key: str = Field(default="change-me", min_length=8)
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    encrypt_tokens: bool = True
    encryption_key: Optional[str] = None
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)


class AuthSettings(BaseModel):
    login_attempts: int = Field(default=5, ge=1)
    hours_to_block: int = Field(default=2, ge=1)


class PaginationSettings(BaseModel):
    default_limit: int = Field(default=10, ge=1)
    export_limit: int = Field(default=99999, ge=1)


class NotificationSettings(BaseModel):
    telegram_bot_token: Optional[str] = None
    telegram_chat_id: Optional[str] = None
    telegram_api_url: str = "https://api.telegram.org"
    timeout: float = 5.0


Severity = Literal["low", "medium", "high", "critical"]


class ErrorReportingSettings(BaseModel):
    enabled: bool = False
    severity_threshold: Severity = "low"
    sensitive_fields: list[str] = Field(
        default_factory=lambda: ["password", "token", "secret", "authorization", "verification"]
    )
    max_reports_per_minute: int = Field(default=10, ge=1)


class LoggingSettings(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    level: str = "INFO"
    json_format: bool = Field(default=False, alias="json")


class Settings(BaseSettings):
    """Top-level application settings with nested sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "staging", "production", "test"] = "development"
    debug: bool = False
    project_name: str = "crudapi"
    api_prefix: str = "/api"

    server: ServerSettings = ServerSettings()
    database: DatabaseSettings = DatabaseSettings()
    security: SecuritySettings = SecuritySettings()
    auth: AuthSettings = AuthSettings()
    pagination: PaginationSettings = PaginationSettings()
    notifications: NotificationSettings = NotificationSettings()
    error_reporting: ErrorReportingSettings = ErrorReportingSettings()
    logging: LoggingSettings = LoggingSettings()

    @property
    def database_url(self) -> str:
        return self.database.url

    @property
    def host(self) -> str:
        return self.server.host

    @property
    def port(self) -> int:
        return self.server.port

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
