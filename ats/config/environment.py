"""Environment variable loading and validation.

Credentials are read here but not required: a missing SendGrid key or Gmail
OAuth setting only fails the first send that needs it. Values that are
present but malformed are rejected up front.
"""

import os
from typing import Optional

from email_validator import EmailNotValidError, validate_email

from .duration import DurationParseError, parse_duration, validate_duration_range
from .exceptions import ConfigurationError

SUPPORTED_TRANSPORTS = ("sendgrid", "gmail")
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

DEFAULT_FROM_EMAIL = "notifications@example.com"
DEFAULT_REQUEST_TIMEOUT = 15.0

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


class EnvironmentConfig:
    """Environment variable configuration holder."""

    def __init__(
        self,
        mail_transport: str = "sendgrid",
        sendgrid_api_key: Optional[str] = None,
        mail_from_email: Optional[str] = None,
        gmail_client_id: Optional[str] = None,
        gmail_client_secret: Optional[str] = None,
        gmail_refresh_token: Optional[str] = None,
        gmail_email: Optional[str] = None,
        mock_emails: bool = False,
        request_timeout: Optional[float] = None,
        log_level: Optional[str] = None,
        environment: Optional[str] = None,
    ):
        self.mail_transport = mail_transport
        self.sendgrid_api_key = sendgrid_api_key
        self.mail_from_email = mail_from_email or DEFAULT_FROM_EMAIL
        self.gmail_client_id = gmail_client_id
        self.gmail_client_secret = gmail_client_secret
        self.gmail_refresh_token = gmail_refresh_token
        self.gmail_email = gmail_email
        self.mock_emails = mock_emails
        self.request_timeout = request_timeout or DEFAULT_REQUEST_TIMEOUT
        self.log_level = log_level
        self.environment = environment or "local"

    @property
    def has_google_credentials(self) -> bool:
        """True when the OAuth client id, secret and refresh token are all set."""
        return bool(
            self.gmail_client_id and self.gmail_client_secret and self.gmail_refresh_token
        )

    def __repr__(self) -> str:
        # Secrets are reported as set/unset only
        return (
            f"EnvironmentConfig(mail_transport={self.mail_transport!r}, "
            f"sendgrid_api_key={'set' if self.sendgrid_api_key else 'unset'}, "
            f"google_credentials={'set' if self.has_google_credentials else 'unset'}, "
            f"mock_emails={self.mock_emails}, request_timeout={self.request_timeout})"
        )


def load_environment_config() -> EnvironmentConfig:
    """
    Load and validate environment variables.

    Recognized environment variables (all optional):
    - MAIL_TRANSPORT: "sendgrid" (default) or "gmail"
    - SENDGRID_API_KEY: API key for the SendGrid transport
    - MAIL_FROM_EMAIL: verified sender address for SendGrid
    - GMAIL_CLIENT_ID, GMAIL_CLIENT_SECRET, GMAIL_REFRESH_TOKEN: OAuth2 client
      credentials shared by the Gmail transport and the calendar client
    - GMAIL_EMAIL: mailbox used as the Gmail sender and SMTP login
    - MOCK_EMAILS: "true" to log emails instead of sending them
    - REQUEST_TIMEOUT: default deadline for a single operation ("15s", "PT15S")
    - LOG_LEVEL: DEBUG, INFO, WARNING, ERROR or CRITICAL
    - ENVIRONMENT: label attached to every log record (default "local")

    Returns:
        EnvironmentConfig object with validated values

    Raises:
        ConfigurationError: If any variable is present but malformed
    """
    errors = []

    mail_transport = (os.getenv("MAIL_TRANSPORT") or "sendgrid").strip().lower()
    sendgrid_api_key = _clean(os.getenv("SENDGRID_API_KEY"))
    mail_from_email = _clean(os.getenv("MAIL_FROM_EMAIL"))
    gmail_client_id = _clean(os.getenv("GMAIL_CLIENT_ID"))
    gmail_client_secret = _clean(os.getenv("GMAIL_CLIENT_SECRET"))
    gmail_refresh_token = _clean(os.getenv("GMAIL_REFRESH_TOKEN"))
    gmail_email = _clean(os.getenv("GMAIL_EMAIL"))
    mock_emails_str = os.getenv("MOCK_EMAILS", "")
    request_timeout_str = _clean(os.getenv("REQUEST_TIMEOUT"))
    log_level = _clean(os.getenv("LOG_LEVEL"))
    environment = _clean(os.getenv("ENVIRONMENT"))

    if mail_transport not in SUPPORTED_TRANSPORTS:
        errors.append(
            f"Invalid MAIL_TRANSPORT: '{mail_transport}'. "
            f"Must be one of: {', '.join(SUPPORTED_TRANSPORTS)}"
        )

    for var_name, value in (("MAIL_FROM_EMAIL", mail_from_email), ("GMAIL_EMAIL", gmail_email)):
        if value and not _is_valid_email(value):
            errors.append(f"Invalid email address format in {var_name}: '{value}'")

    mock_emails = False
    normalized_mock = mock_emails_str.strip().lower()
    if normalized_mock in _TRUE_VALUES:
        mock_emails = True
    elif normalized_mock not in _FALSE_VALUES:
        errors.append(
            f"Invalid MOCK_EMAILS: '{mock_emails_str}'. Use 'true' or 'false'."
        )

    request_timeout = None
    if request_timeout_str:
        try:
            request_timeout = parse_duration(request_timeout_str)
            validate_duration_range(request_timeout, min_seconds=1, max_seconds=300)
        except DurationParseError as e:
            errors.append(f"Invalid REQUEST_TIMEOUT: {e}")

    if log_level and log_level.upper() not in VALID_LOG_LEVELS:
        errors.append(
            f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
        )

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Copy .env.example to .env and fill in your credentials",
                "Check that email addresses are valid",
                "Use durations like '15s' or 'PT15S' for REQUEST_TIMEOUT",
            ],
        )

    return EnvironmentConfig(
        mail_transport=mail_transport,
        sendgrid_api_key=sendgrid_api_key,
        mail_from_email=mail_from_email,
        gmail_client_id=gmail_client_id,
        gmail_client_secret=gmail_client_secret,
        gmail_refresh_token=gmail_refresh_token,
        gmail_email=gmail_email,
        mock_emails=mock_emails,
        request_timeout=request_timeout,
        log_level=log_level.upper() if log_level else None,
        environment=environment,
    )


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def _is_valid_email(email: str) -> bool:
    try:
        validate_email(email, check_deliverability=False)
        return True
    except EmailNotValidError:
        return False
