"""Configuration schema models using Pydantic."""

from enum import Enum
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator

from emirimo.utils.cron import crontab_trigger


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class MatchingConfig(BaseModel):
    """Recommendation ranking settings."""

    default_limit: int = Field(
        10, ge=1, le=100, description="Number of recommendations returned when no limit is given"
    )
    max_workers: int = Field(
        1, ge=1, le=32, description="Worker threads used to score postings (1 = sequential)"
    )


class NotificationsConfig(BaseModel):
    """Recommendation fan-out settings."""

    threshold: int = Field(
        60, ge=0, le=100, description="Minimum match score for a new-job recommendation"
    )
    max_recipients: int = Field(
        20, ge=1, le=1000, description="Maximum seekers notified about a single new job"
    )
    digest_size: int = Field(5, ge=1, le=50, description="Jobs per weekly digest email")
    reminder_size: int = Field(3, ge=1, le=50, description="Jobs per application reminder email")
    reminder_inactive_days: int = Field(
        7, ge=1, le=365, description="Days since last login before a reminder is sent"
    )


class EmailConfig(BaseModel):
    """Email delivery settings."""

    use_tls: bool = Field(True, description="Use TLS/STARTTLS for secure connection")
    max_retries: int = Field(
        3, ge=0, le=10, description="Number of retry attempts for failed email sends"
    )
    retry_backoff_multiplier: float = Field(
        2.0, ge=1.0, le=5.0, description="Exponential backoff multiplier for retries"
    )
    retry_initial_delay: int = Field(
        5, ge=0, le=60, description="Initial retry delay in seconds"
    )


class ScheduleConfig(BaseModel):
    """Cron schedules for recurring recommendation batches."""

    timezone: str = Field("Africa/Kigali", description="Timezone the cron expressions run in")
    digest_enabled: bool = Field(True, description="Send the weekly job digest")
    digest_cron: str = Field("0 9 * * 1", description="Weekly digest schedule (crontab syntax)")
    reminder_enabled: bool = Field(True, description="Send application reminders")
    reminder_cron: str = Field("0 10 * * 3", description="Reminder schedule (crontab syntax)")

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Ensure the timezone name is known to the system tz database."""
        try:
            ZoneInfo(v.strip())
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v.strip()

    @field_validator("digest_cron", "reminder_cron")
    @classmethod
    def validate_cron(cls, v: str) -> str:
        """Ensure the expression is a valid five-field crontab."""
        stripped = v.strip()
        try:
            crontab_trigger(stripped, timezone="UTC")
        except ValueError as e:
            raise ValueError(f"Invalid cron expression '{v}': {e}") from e
        return stripped


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True}


class AppConfig(BaseModel):
    """Root configuration object for the matching service.

    Every section is optional; an empty config file yields the defaults.
    """

    matching: MatchingConfig = Field(default_factory=MatchingConfig)
    notifications: NotificationsConfig = Field(default_factory=NotificationsConfig)
    email: EmailConfig = Field(default_factory=EmailConfig)
    schedule: ScheduleConfig = Field(default_factory=ScheduleConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
