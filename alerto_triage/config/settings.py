"""Application settings using Pydantic BaseSettings for environment variable management."""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Global application settings loaded from environment variables.

    All variables are read with the ``ALERTO_`` prefix, e.g. ``ALERTO_LOG_LEVEL``.

    Attributes:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log output format (json for production, console for dev)
        notify_min_score: Minimum credibility score that triggers admin notification
        notify_severities: Report severities eligible for admin notification
        fanout_concurrency: Max concurrent notification writes per fan-out
        report_persistence_path: Optional JSON file backing the report store
        analysis_persistence_path: Optional JSON file backing the analysis store
        notification_persistence_path: Optional JSON file backing the notification store
    """

    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )
    log_format: str = Field(
        default="json",
        description="Log output format: json or console"
    )
    notify_min_score: float = Field(
        default=0.7,
        ge=0.0,
        le=1.0,
        description="Score at or above which high-severity reports notify admins"
    )
    notify_severities: list[str] = Field(
        default_factory=lambda: ["high", "critical"],
        description="Severities that qualify a report for admin notification"
    )
    fanout_concurrency: int = Field(
        default=10,
        ge=1,
        description="Upper bound on concurrent notification writes"
    )
    report_persistence_path: Optional[str] = Field(
        default=None,
        description="JSON file for report persistence (memory-only if unset)"
    )
    analysis_persistence_path: Optional[str] = Field(
        default=None,
        description="JSON file for analysis persistence (memory-only if unset)"
    )
    notification_persistence_path: Optional[str] = Field(
        default=None,
        description="JSON file for notification persistence (memory-only if unset)"
    )

    model_config = SettingsConfigDict(
        env_prefix="ALERTO_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


# Singleton instance - import this throughout the application
settings = Settings()
