"""Gmail transport: OAuth2 access token + SMTP with AUTH XOAUTH2."""

import smtplib
import ssl
from email.message import EmailMessage
from email.utils import make_msgid
from typing import Callable, Optional

from ats.logging import get_logger
from ats.oauth import GoogleOAuthClient, OAuthConfigurationError, OAuthTokenError

from .base import MailTransport
from .exceptions import MailAuthenticationError, MailConfigurationError, MailDeliveryError

logger = get_logger(__name__, component="transport")


def build_xoauth2_string(user: str, access_token: str) -> str:
    """Build the SASL XOAUTH2 initial client response (before base64)."""
    return f"user={user}\x01auth=Bearer {access_token}\x01\x01"


class GmailTransport(MailTransport):
    """Sends mail through Gmail SMTP, authenticated with OAuth2.

    A fresh access token is obtained before every send. Missing OAuth
    credentials or a missing sender address fail the send before any
    network activity.
    """

    name = "gmail"

    def __init__(
        self,
        oauth_client: GoogleOAuthClient,
        sender_email: Optional[str],
        sender_name: str,
        smtp_host: str = "smtp.gmail.com",
        smtp_port: int = 587,
        use_tls: bool = True,
        mock_mode: bool = False,
        timeout: float = 30,
        smtp_factory: Optional[Callable] = None,
        smtp_ssl_factory: Optional[Callable] = None,
    ) -> None:
        super().__init__(sender_email=sender_email, sender_name=sender_name, mock_mode=mock_mode)
        self.oauth_client = oauth_client
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.use_tls = use_tls
        self.timeout = timeout
        self.smtp_factory = smtp_factory or smtplib.SMTP
        self.smtp_ssl_factory = smtp_ssl_factory or smtplib.SMTP_SSL

    def ensure_configured(self) -> None:
        missing = list(self.oauth_client.missing_credentials())
        if not self.sender_email:
            missing.append("GMAIL_EMAIL")
        if missing:
            raise MailConfigurationError(
                f"Gmail API credentials not provided: missing {', '.join(missing)}"
            )

    def build_message(self, to: str, subject: str, html: str, text: str) -> EmailMessage:
        """Build a multipart/alternative message with text and HTML parts."""
        message = EmailMessage()
        message["Subject"] = subject
        message["From"] = self.sender_address
        message["To"] = to
        domain = self.sender_email.split("@", 1)[-1] if self.sender_email else None
        message["Message-ID"] = make_msgid(domain=domain)
        message.set_content(text)
        message.add_alternative(html, subtype="html")
        return message

    def _deliver(self, to: str, subject: str, html: str, text: str) -> Optional[str]:
        try:
            access_token = self.oauth_client.fetch_access_token()
        except OAuthConfigurationError as e:
            raise MailConfigurationError(str(e)) from e
        except OAuthTokenError as e:
            raise MailAuthenticationError(f"Error getting Gmail access token: {e}") from e

        message = self.build_message(to, subject, html, text)
        xoauth2 = build_xoauth2_string(self.sender_email, access_token.token)

        def authobject(challenge=None):
            # On failure Gmail sends a 334 JSON challenge; an empty reply ends the exchange
            return "" if challenge else xoauth2

        smtp = None
        try:
            if self.smtp_port == 465:
                logger.debug(f"Connecting to {self.smtp_host}:{self.smtp_port} with implicit TLS")
                smtp = self.smtp_ssl_factory(
                    self.smtp_host,
                    self.smtp_port,
                    timeout=self.timeout,
                    context=ssl.create_default_context(),
                )
                smtp.ehlo()
            else:
                logger.debug(f"Connecting to {self.smtp_host}:{self.smtp_port}")
                smtp = self.smtp_factory(self.smtp_host, self.smtp_port, timeout=self.timeout)
                smtp.ehlo()
                if self.use_tls:
                    smtp.starttls(context=ssl.create_default_context())
                    smtp.ehlo()

            smtp.auth("XOAUTH2", authobject)
            smtp.send_message(message)

        except smtplib.SMTPAuthenticationError as e:
            raise MailAuthenticationError(f"Gmail rejected XOAUTH2 login: {e}") from e
        except smtplib.SMTPException as e:
            raise MailDeliveryError(f"SMTP error during message delivery: {e}") from e
        except OSError as e:
            raise MailDeliveryError(f"Network error during SMTP connection: {e}") from e
        finally:
            if smtp is not None:
                try:
                    smtp.quit()
                except (smtplib.SMTPException, OSError) as e:
                    logger.warning(f"Error closing SMTP connection: {e}")

        return message["Message-ID"]
