"""SendGrid v3 HTTP API transport."""

from typing import Any, Dict, Optional

import requests

from ats.logging import get_logger

from .base import MailTransport
from .exceptions import MailAuthenticationError, MailConfigurationError, MailDeliveryError

logger = get_logger(__name__, component="transport")

SENDGRID_API_URL = "https://api.sendgrid.com/v3/mail/send"


class SendGridTransport(MailTransport):
    """Sends mail through SendGrid's ``/v3/mail/send`` endpoint.

    A missing API key leaves the transport unconfigured: every send fails
    immediately with a configuration error and no request is made.
    """

    name = "sendgrid"

    def __init__(
        self,
        api_key: Optional[str],
        sender_email: str,
        sender_name: str,
        mock_mode: bool = False,
        timeout: float = 30,
        user_agent: str = "ATSNotifications/1.0",
        session: Optional[requests.Session] = None,
        api_url: str = SENDGRID_API_URL,
    ) -> None:
        super().__init__(sender_email=sender_email, sender_name=sender_name, mock_mode=mock_mode)
        self.api_key = api_key
        self.timeout = timeout
        self.api_url = api_url

        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": user_agent})

        if not api_key and not mock_mode:
            logger.error(
                "SENDGRID_API_KEY environment variable not set; status emails will fail",
                extra={"event": "transport.unconfigured", "transport": self.name},
            )

    def ensure_configured(self) -> None:
        if not self.api_key:
            raise MailConfigurationError("SendGrid API key not set (SENDGRID_API_KEY)")
        if not self.sender_email:
            raise MailConfigurationError("Sender address not set (MAIL_FROM_EMAIL)")

    def build_payload(self, to: str, subject: str, html: str, text: str) -> Dict[str, Any]:
        """Build the JSON body for ``/v3/mail/send``.

        SendGrid requires text/plain to precede text/html in ``content``.
        """
        return {
            "personalizations": [{"to": [{"email": to}]}],
            "from": {"email": self.sender_email, "name": self.sender_name},
            "subject": subject,
            "content": [
                {"type": "text/plain", "value": text},
                {"type": "text/html", "value": html},
            ],
        }

    def _deliver(self, to: str, subject: str, html: str, text: str) -> Optional[str]:
        payload = self.build_payload(to, subject, html, text)

        try:
            response = self._session.post(
                self.api_url,
                json=payload,
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            raise MailDeliveryError(
                f"SendGrid request timed out after {self.timeout} seconds"
            ) from e
        except requests.exceptions.RequestException as e:
            raise MailDeliveryError(f"SendGrid request failed: {e}") from e

        if response.status_code in (401, 403):
            raise MailAuthenticationError(
                f"SendGrid rejected the API key (HTTP {response.status_code}): "
                f"{self._error_detail(response)}"
            )

        if response.status_code >= 400:
            raise MailDeliveryError(
                f"SendGrid API error (HTTP {response.status_code}): {self._error_detail(response)}",
                status_code=response.status_code,
            )

        return response.headers.get("X-Message-Id")

    @staticmethod
    def _error_detail(response: requests.Response) -> str:
        """Join ``errors[].message`` from a SendGrid error body."""
        try:
            body = response.json()
        except ValueError:
            return response.reason or "no details"

        errors = body.get("errors") if isinstance(body, dict) else None
        if not errors:
            return response.reason or "no details"

        messages = []
        for error in errors:
            if not isinstance(error, dict):
                continue
            message = error.get("message") or "unknown error"
            field = error.get("field")
            messages.append(f"{message} ({field})" if field else message)
        return "; ".join(messages) or (response.reason or "no details")
