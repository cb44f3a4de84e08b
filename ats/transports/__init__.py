"""Interchangeable mail transports.

- SendGridTransport: SendGrid HTTP API, static API key
- GmailTransport: Gmail SMTP with an OAuth2 access token per send
- get_transport: picks the one selected by MAIL_TRANSPORT
"""

from .base import DeliveryResult, MailTransport
from .exceptions import (
    MailAuthenticationError,
    MailConfigurationError,
    MailDeliveryError,
    MailTransportError,
)
from .factory import get_transport
from .gmail import GmailTransport, build_xoauth2_string
from .sendgrid import SendGridTransport

__all__ = [
    "DeliveryResult",
    "MailTransport",
    "SendGridTransport",
    "GmailTransport",
    "get_transport",
    "build_xoauth2_string",
    "MailTransportError",
    "MailConfigurationError",
    "MailAuthenticationError",
    "MailDeliveryError",
]
