"""Configuration schema models using Pydantic."""

import re
from enum import Enum
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator


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


class OrganizationConfig(BaseModel):
    """Branding used in notification emails."""

    name: str = Field(
        "GRO Early Learning", min_length=1, description="Organization name shown to candidates"
    )
    team_signature: str = Field(
        "HR Team", min_length=1, description="Signature line under each email"
    )
    brand_color: str = Field("#0052CC", description="Header background colour (hex)")

    @field_validator("name", "team_signature")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        """Strip whitespace from string fields."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("Field cannot be empty or whitespace-only")
        return stripped

    @field_validator("brand_color")
    @classmethod
    def validate_brand_color(cls, v: str) -> str:
        """Require a #rgb or #rrggbb colour."""
        v = v.strip()
        if not re.fullmatch(r"#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})", v):
            raise ValueError(f"brand_color must be a hex colour like #0052CC, got: {v}")
        return v


class EmailConfig(BaseModel):
    """Mail transport settings that are not secrets."""

    sender_name: str = Field(
        "GRO Early Learning", min_length=1, description="Display name for the From header"
    )
    smtp_host: str = Field("smtp.gmail.com", min_length=1, description="SMTP host for Gmail")
    smtp_port: int = Field(587, ge=1, le=65535, description="SMTP port (465 = implicit TLS)")
    use_tls: bool = Field(True, description="Use STARTTLS on non-465 ports")


class CalendarConfig(BaseModel):
    """Interview calendar settings."""

    calendar_id: str = Field("primary", min_length=1, description="Calendar to book against")
    timezone: str = Field(
        "Australia/Brisbane", description="IANA timezone for the working day and events"
    )
    interview_duration_minutes: int = Field(
        45, ge=15, le=240, description="Event length when no end time is given"
    )

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Reject names the zoneinfo database does not know."""
        v = v.strip()
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True}


class AdvancedConfig(BaseModel):
    """Advanced runtime settings."""

    http_request_timeout: int = Field(
        30, ge=5, le=300, description="Timeout for provider HTTP calls (seconds)"
    )
    user_agent: str = Field(
        "ATSNotifications/1.0",
        min_length=1,
        description="User-Agent string for HTTP requests",
    )

    @field_validator("user_agent")
    @classmethod
    def strip_user_agent(cls, v: str) -> str:
        """Strip whitespace from user agent."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("user_agent cannot be empty")
        return stripped


class AppConfig(BaseModel):
    """Root configuration object. Every section has usable defaults."""

    organization: OrganizationConfig = Field(default_factory=OrganizationConfig)
    email: EmailConfig = Field(default_factory=EmailConfig)
    calendar: CalendarConfig = Field(default_factory=CalendarConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    advanced: AdvancedConfig = Field(default_factory=AdvancedConfig)
