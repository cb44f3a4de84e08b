"""Mail transport capability shared by the SendGrid and Gmail backends.

``MailTransport.send`` is the only entry point callers use. It handles mock
mode and converts every failure into a ``DeliveryResult``; subclasses only
check their configuration and perform the actual delivery.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from email.utils import formataddr
from typing import Optional

from ats.logging import get_logger
from ats.logging.context import log_context

from .exceptions import MailConfigurationError, MailTransportError

logger = get_logger(__name__, component="transport")


@dataclass
class DeliveryResult:
    """Outcome of a single send attempt.

    Attributes:
        ok: True if the provider accepted the message (or mock mode is on)
        error: Human-readable reason when ok is False
        error_type: "configuration", "authentication", "delivery" or "unexpected"
        message_id: Provider message id when one is returned
        mocked: True when the message was only logged
    """

    ok: bool
    error: Optional[str] = None
    error_type: Optional[str] = None
    message_id: Optional[str] = None
    mocked: bool = False

    @classmethod
    def failure(cls, error: str, error_type: str) -> "DeliveryResult":
        return cls(ok=False, error=error, error_type=error_type)


class MailTransport(ABC):
    """Base class for mail transports.

    Attributes:
        sender_email: Address used in the From header
        sender_name: Display name used in the From header
        mock_mode: Log messages instead of sending them
    """

    name = "base"

    def __init__(
        self,
        sender_email: Optional[str],
        sender_name: str,
        mock_mode: bool = False,
    ) -> None:
        self.sender_email = sender_email
        self.sender_name = sender_name
        self.mock_mode = mock_mode

        if mock_mode:
            logger.warning(
                f"{self.name} transport is in mock mode: emails will be logged, not sent",
                extra={"event": "transport.mock_mode.enabled", "transport": self.name},
            )

    @property
    def sender_address(self) -> str:
        """Formatted From header, e.g. ``GRO Early Learning <hr@example.com>``."""
        return formataddr((self.sender_name, self.sender_email or ""))

    def send(self, to: str, subject: str, html: str, text: str) -> DeliveryResult:
        """Send one email.

        Never raises: configuration problems, provider rejections and
        unexpected errors are logged and returned as a failed result.
        No retry is attempted.

        Args:
            to: Recipient address
            subject: Subject line
            html: HTML body
            text: Plain-text body

        Returns:
            DeliveryResult describing the outcome
        """
        with log_context(transport=self.name):
            if self.mock_mode:
                logger.info(
                    f"MOCK EMAIL to {to}: {subject}",
                    extra={
                        "event": "transport.send.mocked",
                        "recipient": to,
                        "subject": subject,
                        "sender": self.sender_address,
                    },
                )
                return DeliveryResult(ok=True, mocked=True)

            try:
                self.ensure_configured()
                message_id = self._deliver(to, subject, html, text)
            except MailConfigurationError as e:
                logger.error(
                    f"Cannot send email with {self.name}: {e}",
                    extra={"event": "transport.send.unconfigured", "recipient": to},
                )
                return DeliveryResult.failure(str(e), e.error_type)
            except MailTransportError as e:
                logger.error(
                    f"Email delivery to {to} failed: {e}",
                    extra={
                        "event": "transport.send.failure",
                        "recipient": to,
                        "error_type": e.error_type,
                        "status_code": getattr(e, "status_code", None),
                    },
                )
                return DeliveryResult.failure(str(e), e.error_type)
            except Exception as e:
                logger.error(
                    f"Unexpected error sending email to {to}: {e}",
                    exc_info=True,
                    extra={"event": "transport.send.failure", "recipient": to, "error_type": "unexpected"},
                )
                return DeliveryResult.failure(f"Unexpected error: {e}", "unexpected")

            logger.info(
                f"Email sent to {to}",
                extra={"event": "transport.send.success", "recipient": to, "message_id": message_id},
            )
            return DeliveryResult(ok=True, message_id=message_id)

    @abstractmethod
    def ensure_configured(self) -> None:
        """Raise MailConfigurationError if a required setting is missing.

        Must not perform any network activity.
        """

    @abstractmethod
    def _deliver(self, to: str, subject: str, html: str, text: str) -> Optional[str]:
        """Hand the message to the provider.

        Returns:
            Provider message id, if available

        Raises:
            MailTransportError: On any delivery failure
        """
