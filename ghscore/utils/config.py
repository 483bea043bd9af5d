"""
Configuration management for GH Score.

Uses Pydantic Settings for type-safe configuration with environment variable support.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Base paths
ROOT_DIR = Path(__file__).parent.parent.parent


class DatabaseSettings(BaseSettings):
    """MongoDB database configuration."""

    model_config = SettingsConfigDict(env_prefix="DB_")

    host: str = "localhost"
    port: int = 27017
    name: str = "ghscore"
    username: str | None = None
    password: str | None = None
    server_selection_timeout_ms: int = 5000


class AuthSettings(BaseSettings):
    """Session and authentication configuration."""

    model_config = SettingsConfigDict(env_prefix="AUTH_")

    session_ttl_hours: int = Field(default=12, ge=1)
    token_bytes: int = Field(default=32, ge=16)


class ScoringSettings(BaseSettings):
    """Match scoring provider configuration."""

    model_config = SettingsConfigDict(env_prefix="SCORING_")

    provider: Literal["heuristic", "none"] = "heuristic"
    default_score: int = Field(default=0, ge=0, le=100)

    # Heuristic provider weights
    skills_weight: float = Field(default=0.45, ge=0, le=1)
    experience_weight: float = Field(default=0.35, ge=0, le=1)
    education_weight: float = Field(default=0.20, ge=0, le=1)


class NotificationSettings(BaseSettings):
    """Recruiter notification configuration."""

    model_config = SettingsConfigDict(env_prefix="NOTIFY_")

    poll_interval_seconds: int = Field(default=30, ge=1, le=30)
    list_limit: int = Field(default=20, ge=1, le=200)


class TrackingSettings(BaseSettings):
    """Public application tracking configuration."""

    model_config = SettingsConfigDict(env_prefix="TRACKING_")

    base_url: str = "http://localhost:5173/seguimiento"
    expiry_days: int = Field(default=90, ge=1)

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the base URL so tokens can be appended."""
        return v.rstrip("/")


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: str = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}"
    file_path: Path = ROOT_DIR / "logs" / "ghscore.log"
    audit_file_path: Path = ROOT_DIR / "logs" / "ghscore-audit.log"
    rotation: str = "10 MB"
    retention: str = "30 days"
    audit_retention: str = "1 year"
    console_output: bool = True
    file_output: bool = True


class AppSettings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    name: str = "GH Score"
    version: str = "0.1.0"
    description: str = "Vacancy and candidate pipeline tracking"
    debug: bool = False

    # Environment
    environment: Literal["development", "production", "testing"] = "development"

    # Tenant used by public endpoints when none is given
    default_tenant: str = "default"

    # HTTP server
    host: str = "127.0.0.1"
    port: int = 8000
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Nested settings
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    scoring: ScoringSettings = Field(default_factory=ScoringSettings)
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)
    tracking: TrackingSettings = Field(default_factory=TrackingSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


# Global settings instance (singleton pattern)
_settings: AppSettings | None = None


def get_settings() -> AppSettings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = AppSettings()
    return _settings


def reload_settings() -> AppSettings:
    """Force reload settings from environment."""
    global _settings
    _settings = AppSettings()
    return _settings
