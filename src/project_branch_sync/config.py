"""Configuration settings for project branch sync."""

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RequestConfig(BaseModel):
    """Configuration for the platform API request layer.

    Controls concurrency, retry and timeout behavior shared by every
    request issued through a PlatformClient.
    """

    max_concurrent_requests: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum parallel platform API requests",
    )
    max_retries: int = Field(
        default=3,
        ge=0,
        le=10,
        description="Retry attempts for rate limited or failed requests",
    )
    backoff_base: float = Field(
        default=2.0,
        ge=0.0,
        description="Base of the exponential backoff between retries (seconds)",
    )
    timeout_seconds: float = Field(
        default=30.0,
        gt=0.0,
        description="Per-request timeout in seconds",
    )


class SyncConfig(BaseModel):
    """Configuration for branch sync fan-out.

    Each bound applies to one nesting level: sources, targets within a
    source, and projects within a target.
    """

    source_concurrency: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Sources synced in parallel",
    )
    target_concurrency: int = Field(
        default=20,
        ge=1,
        le=100,
        description="Targets synced in parallel within a source",
    )
    project_concurrency: int = Field(
        default=1,
        ge=1,
        le=20,
        description="Projects updated in parallel within a target (1 = listing order)",
    )
    targets_page_size: int = Field(
        default=100,
        ge=1,
        le=100,
        description="Page size used when listing targets",
    )


class LoggingConfig(BaseModel):
    """Configuration for application logging.

    Controls the optional diagnostic log file, rotation, and output format.
    The sync log files are configured through SNYK_LOG_PATH instead.
    """

    log_file: str | None = Field(
        default=None,
        description="Optional path for diagnostic file logging (enables rotation)",
    )
    rotation: str = Field(
        default="10 MB",
        description="When to rotate log file (e.g., '10 MB', '1 day')",
    )
    retention: str = Field(
        default="7 days",
        description="How long to keep rotated logs",
    )
    serialize: bool = Field(
        default=False,
        description="If True, output JSON format to file",
    )


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --------------------------------------------------------------------------
    # Platform API
    # --------------------------------------------------------------------------
    snyk_token: str = Field(
        default="",
        description="Platform API token",
    )
    snyk_api: str = Field(
        default="https://api.snyk.io/v1",
        description="Base URL of the platform v1 API",
    )
    snyk_rest_api: str = Field(
        default="https://api.snyk.io/rest",
        description="Base URL of the platform REST API",
    )
    snyk_rest_version: str = Field(
        default="2022-09-15~beta",
        description="Version parameter sent to the platform REST API",
    )

    # --------------------------------------------------------------------------
    # Source control providers
    # --------------------------------------------------------------------------
    github_token: str = Field(
        default="",
        description="GitHub personal access token",
    )

    # --------------------------------------------------------------------------
    # Application
    # --------------------------------------------------------------------------
    snyk_log_path: str | None = Field(
        default=None,
        description="Directory receiving the updated/failed project logs",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    # --------------------------------------------------------------------------
    # Request layer & fan-out
    # --------------------------------------------------------------------------
    request: RequestConfig = Field(
        default_factory=RequestConfig,
        description="Platform API request configuration",
    )
    sync: SyncConfig = Field(
        default_factory=SyncConfig,
        description="Branch sync concurrency configuration",
    )

    # --------------------------------------------------------------------------
    # Logging Configuration
    # --------------------------------------------------------------------------
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging configuration (file output, rotation)",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
