"""Configuration management for the matching service."""

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import load_config
from .models import (
    AppConfig,
    EmailConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
    MatchingConfig,
    NotificationsConfig,
    ScheduleConfig,
)

__all__ = [
    "load_config",
    "load_environment_config",
    "AppConfig",
    "MatchingConfig",
    "NotificationsConfig",
    "EmailConfig",
    "ScheduleConfig",
    "LoggingConfig",
    "EnvironmentConfig",
    "LogLevel",
    "LogFormat",
    "ConfigurationError",
]
