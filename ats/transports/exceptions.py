"""Custom exceptions for mail transports.

These never escape ``MailTransport.send``; they are raised by the concrete
delivery code and turned into a failed ``DeliveryResult`` at that boundary.
"""

from typing import Optional


class MailTransportError(Exception):
    """Base exception for all mail transport errors."""

    error_type = "delivery"


class MailConfigurationError(MailTransportError):
    """A required credential or sender address is missing.

    Raised before any network activity.
    """

    error_type = "configuration"


class MailAuthenticationError(MailTransportError):
    """The provider rejected our credentials or the OAuth2 exchange failed."""

    error_type = "authentication"


class MailDeliveryError(MailTransportError):
    """The provider rejected the message or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
