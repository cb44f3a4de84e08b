"""Application context: every long-lived collaborator, built once.

Services receive their dependencies explicitly; nothing is created at
import time. The CLI builds one context per invocation and tests build
their own with fakes.
"""

from dataclasses import dataclass
from typing import Optional

from ats.calendar import GoogleCalendarClient, InterviewAvailabilityService
from ats.config.environment import EnvironmentConfig
from ats.config.models import AppConfig
from ats.logging import get_logger
from ats.notifications import NotificationService, TemplateRenderer
from ats.oauth import GoogleOAuthClient
from ats.transports import MailTransport, get_transport

logger = get_logger(__name__, component="context")


@dataclass
class AppContext:
    """Configuration plus the services built from it."""

    app_config: AppConfig
    env_config: EnvironmentConfig
    oauth_client: GoogleOAuthClient
    transport: MailTransport
    notification_service: NotificationService
    calendar_client: GoogleCalendarClient
    availability_service: InterviewAvailabilityService

    @property
    def request_timeout(self) -> float:
        """Deadline for one end-to-end operation, in seconds."""
        return self.env_config.request_timeout


def build_context(
    app_config: AppConfig,
    env_config: EnvironmentConfig,
    oauth_client: Optional[GoogleOAuthClient] = None,
) -> AppContext:
    """Wire the transport, notification and calendar services.

    The Gmail transport and the calendar client share one OAuth client.

    Raises:
        MailConfigurationError: If MAIL_TRANSPORT names an unknown transport
    """
    http_timeout = app_config.advanced.http_request_timeout

    if oauth_client is None:
        oauth_client = GoogleOAuthClient(
            client_id=env_config.gmail_client_id,
            client_secret=env_config.gmail_client_secret,
            refresh_token=env_config.gmail_refresh_token,
            timeout=http_timeout,
        )

    transport = get_transport(app_config, env_config, oauth_client=oauth_client)
    notification_service = NotificationService(
        transport=transport,
        organization=app_config.organization,
        template_renderer=TemplateRenderer(),
    )

    calendar_client = GoogleCalendarClient(
        oauth_client=oauth_client,
        calendar_id=app_config.calendar.calendar_id,
        timeout=http_timeout,
        user_agent=app_config.advanced.user_agent,
    )
    availability_service = InterviewAvailabilityService(
        client=calendar_client,
        config=app_config.calendar,
    )

    logger.info(
        "Services initialized",
        extra={
            "event": "services.initialized",
            "transport": transport.name,
            "mock_mode": env_config.mock_emails,
            "calendar_id": app_config.calendar.calendar_id,
        },
    )

    return AppContext(
        app_config=app_config,
        env_config=env_config,
        oauth_client=oauth_client,
        transport=transport,
        notification_service=notification_service,
        calendar_client=calendar_client,
        availability_service=availability_service,
    )
