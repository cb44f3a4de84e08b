"""Configuration management for the ATS notification service."""

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import load_app_config, load_config
from .models import (
    AdvancedConfig,
    AppConfig,
    CalendarConfig,
    EmailConfig,
    LogFormat,
    LogLevel,
    LoggingConfig,
    OrganizationConfig,
)

__all__ = [
    # Loader functions
    "load_config",
    "load_app_config",
    "load_environment_config",
    # Configuration models
    "AppConfig",
    "OrganizationConfig",
    "EmailConfig",
    "CalendarConfig",
    "LoggingConfig",
    "AdvancedConfig",
    "EnvironmentConfig",
    # Enums
    "LogLevel",
    "LogFormat",
    # Exceptions
    "ConfigurationError",
]
