"""Configuration management for SRM Ops.

Uses pydantic-settings to load configuration from environment variables.
"""

from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _find_env_file() -> Path | None:
    """Search for .env file in common locations."""
    # Check current working directory first
    cwd = Path.cwd()
    if (cwd / ".env").exists():
        return cwd / ".env"

    # Check parent directories (up to 5 levels) for project root .env
    check_dir = cwd
    for _ in range(5):
        if (check_dir / ".env").exists():
            return check_dir / ".env"
        parent = check_dir.parent
        if parent == check_dir:
            break
        check_dir = parent

    # backend/src/srmops/config.py -> project root
    project_root = Path(__file__).resolve().parent.parent.parent.parent
    if (project_root / ".env").exists():
        return project_root / ".env"

    return None


_env_file = _find_env_file()

DEFAULT_AUTH_SECRET = "change-me-in-production-0000000000000000"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=str(_env_file) if _env_file else ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # =========================
    # Environment
    # =========================
    environment: Literal["development", "staging", "production"] = "development"

    # =========================
    # API Settings
    # =========================
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_debug: bool = False
    cors_origins: str = "http://localhost:3000"
    max_request_bytes: int = 10 * 1024 * 1024

    # =========================
    # PostgreSQL
    # =========================
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_db: str = "srmops"
    postgres_user: str = "srmops"
    postgres_password: str = Field(default="", repr=False)

    # Takes precedence over the postgres_* fields when set
    database_url: str = Field(default="", repr=False)

    @computed_field(repr=False)
    @property
    def sqlalchemy_url(self) -> str:
        """SQLAlchemy async database URL."""
        if self.database_url:
            return self.database_url
        return (
            f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    # =========================
    # Auth
    # =========================
    auth_secret: str = Field(default=DEFAULT_AUTH_SECRET, repr=False)
    auth_algorithm: str = "HS256"
    auth_token_expiration_hours: int = 24
    admin_emails: str = ""

    @property
    def admin_emails_list(self) -> list[str]:
        """Parse the admin allow-list."""
        return [e.strip().lower() for e in self.admin_emails.split(",") if e.strip()]

    # =========================
    # Rate limiting
    # =========================
    daily_submission_limit: int = 15
    rate_limit_window: Literal["rolling", "calendar"] = "rolling"

    # =========================
    # S3/MinIO (photo uploads)
    # =========================
    s3_endpoint: str = "http://localhost:9000"
    s3_access_key: str = Field(default="minioadmin", repr=False)
    s3_secret_key: str = Field(default="minioadmin", repr=False)
    s3_bucket: str = "srmops-photos"
    s3_region: str = "us-east-1"
    s3_public_url: str = ""
    max_upload_bytes: int = 5 * 1024 * 1024

    # =========================
    # SMTP
    # =========================
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = Field(default="", repr=False)
    smtp_password: str = Field(default="", repr=False)
    smtp_sender: str = ""
    smtp_use_tls: bool = True
    smtp_timeout_seconds: float = 15.0
    mail_recipient_mode: Literal["bcc", "to"] = "bcc"

    # =========================
    # Reports
    # =========================
    report_organization_name: str = "Région Souss-Massa"
    report_logo_path: str = ""
    photo_fetch_timeout_seconds: float = 10.0

    # =========================
    # Export
    # =========================
    export_date_format: str = "%d/%m/%Y"
    export_datetime_format: str = "%d/%m/%Y %H:%M:%S"

    # =========================
    # Logging
    # =========================
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"

    def missing_required(self) -> list[str]:
        """Return the names of required settings that are not configured."""
        required = {
            "AUTH_SECRET": "" if self.auth_secret == DEFAULT_AUTH_SECRET else self.auth_secret,
            "SMTP_HOST": self.smtp_host,
            "SMTP_SENDER": self.smtp_sender,
            "ADMIN_EMAILS": self.admin_emails,
        }
        if not self.database_url:
            required["POSTGRES_PASSWORD"] = self.postgres_password
        return [name for name, value in required.items() if not value]


@dataclass(frozen=True)
class MailConfig:
    """SMTP transport configuration, built once at startup."""

    host: str
    port: int
    sender: str
    username: str = ""
    password: str = field(default="", repr=False)
    use_tls: bool = True
    timeout: float = 15.0
    recipient_mode: str = "bcc"

    @classmethod
    def from_settings(cls, settings: Settings) -> "MailConfig":
        return cls(
            host=settings.smtp_host,
            port=settings.smtp_port,
            sender=settings.smtp_sender or settings.smtp_user,
            username=settings.smtp_user,
            password=settings.smtp_password,
            use_tls=settings.smtp_use_tls,
            timeout=settings.smtp_timeout_seconds,
            recipient_mode=settings.mail_recipient_mode,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.host and self.sender)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


@lru_cache
def get_mail_config() -> MailConfig:
    """Get the mail transport configuration derived from settings."""
    return MailConfig.from_settings(get_settings())
