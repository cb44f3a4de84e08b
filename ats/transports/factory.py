"""Factory for the active mail transport."""

import logging
from typing import Optional

from ats.config.environment import EnvironmentConfig
from ats.config.models import AppConfig
from ats.oauth import GoogleOAuthClient

from .base import MailTransport
from .exceptions import MailConfigurationError
from .gmail import GmailTransport
from .sendgrid import SendGridTransport

logger = logging.getLogger(__name__)


def get_transport(
    app_config: AppConfig,
    env_config: EnvironmentConfig,
    oauth_client: Optional[GoogleOAuthClient] = None,
) -> MailTransport:
    """Instantiate the transport selected by MAIL_TRANSPORT.

    Only one transport is ever active. Missing credentials do not fail
    here; they surface as a configuration error on the first send.

    Args:
        app_config: Application settings (sender name, SMTP host, timeouts)
        env_config: Environment settings (transport choice, credentials, mock flag)
        oauth_client: Shared OAuth client for the Gmail transport

    Returns:
        Configured MailTransport

    Raises:
        MailConfigurationError: If the transport name is not supported
    """
    transport_name = (env_config.mail_transport or "sendgrid").lower()
    timeout = app_config.advanced.http_request_timeout

    logger.debug(
        "Creating mail transport",
        extra={"transport": transport_name, "mock_mode": env_config.mock_emails},
    )

    if transport_name == "sendgrid":
        return SendGridTransport(
            api_key=env_config.sendgrid_api_key,
            sender_email=env_config.mail_from_email,
            sender_name=app_config.email.sender_name,
            mock_mode=env_config.mock_emails,
            timeout=timeout,
            user_agent=app_config.advanced.user_agent,
        )

    if transport_name == "gmail":
        if oauth_client is None:
            oauth_client = GoogleOAuthClient(
                client_id=env_config.gmail_client_id,
                client_secret=env_config.gmail_client_secret,
                refresh_token=env_config.gmail_refresh_token,
                timeout=timeout,
            )
        return GmailTransport(
            oauth_client=oauth_client,
            sender_email=env_config.gmail_email,
            sender_name=app_config.email.sender_name,
            smtp_host=app_config.email.smtp_host,
            smtp_port=app_config.email.smtp_port,
            use_tls=app_config.email.use_tls,
            mock_mode=env_config.mock_emails,
            timeout=timeout,
        )

    raise MailConfigurationError(
        f"Unknown mail transport: {transport_name}. Supported transports: gmail, sendgrid"
    )
