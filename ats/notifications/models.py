"""Data models and exceptions for the notification service."""

from dataclasses import dataclass
from typing import Optional

STATUS_SENT = "sent"
STATUS_SKIPPED = "skipped"
STATUS_FAILED = "failed"

# Reasons attached to skipped/failed results
REASON_INITIAL_STATUS = "initial_status"
REASON_NO_TEMPLATE = "no_template"
REASON_MISSING_DATA = "missing_data"
REASON_INVALID_RECIPIENT = "invalid_recipient"
REASON_TEMPLATE_ERROR = "template_error"
REASON_TRANSPORT_ERROR = "transport_error"


class NotificationError(Exception):
    """Base exception for notification-related errors."""

    pass


class NotificationTemplateError(NotificationError):
    """Raised when template rendering fails due to configuration or missing variables."""

    pass


@dataclass
class RenderedEmail:
    """Subject and bodies ready to hand to a transport."""

    subject: str
    html_body: str
    text_body: str


@dataclass
class NotificationResult:
    """Result of a notification attempt.

    Attributes:
        status: Outcome status (sent, skipped, failed)
        reason: Machine-readable reason for skipped/failed outcomes
        error: Human-readable error detail when failed
        recipient: Address the email was (or would have been) sent to
        application_id: Application the notification was about, if any
        message_id: Provider message id when sent
        mocked: True when the transport only logged the message
    """

    status: str
    reason: Optional[str] = None
    error: Optional[str] = None
    recipient: Optional[str] = None
    application_id: Optional[int] = None
    message_id: Optional[str] = None
    mocked: bool = False

    def is_success(self) -> bool:
        """True if the email was handed to the provider."""
        return self.status == STATUS_SENT

    def is_skipped(self) -> bool:
        return self.status == STATUS_SKIPPED

    def is_failed(self) -> bool:
        return self.status == STATUS_FAILED
