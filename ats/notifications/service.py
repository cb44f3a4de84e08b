"""Notification service for application status emails.

Decides whether a status change warrants an email, renders the template for
the new status and hands it to the configured mail transport. Every call
makes at most one send attempt and never raises; the outcome is reported
as a NotificationResult.
"""

import logging
from typing import Optional

from email_validator import EmailNotValidError, validate_email

from ats.config.models import OrganizationConfig
from ats.domain.models import Application, ApplicationStatus
from ats.logging import get_logger
from ats.logging.context import log_context
from ats.transports.base import DeliveryResult, MailTransport

from .models import (
    REASON_INITIAL_STATUS,
    REASON_INVALID_RECIPIENT,
    REASON_MISSING_DATA,
    REASON_NO_TEMPLATE,
    REASON_TEMPLATE_ERROR,
    REASON_TRANSPORT_ERROR,
    STATUS_FAILED,
    STATUS_SENT,
    STATUS_SKIPPED,
    NotificationResult,
    NotificationTemplateError,
    RenderedEmail,
)
from .payloads import build_branding_context, build_status_context
from .templates import TemplateRenderer, resolve_template

logger = get_logger(__name__, component="notification")


class NotificationService:
    """Sends candidate emails through a single MailTransport.

    Flow for a status change:
    1. Require candidate email and job title
    2. Skip the silent creation event (no previous status, now "applied")
    3. Resolve the template for the new status; skip if none
    4. Render and send exactly once
    """

    def __init__(
        self,
        transport: MailTransport,
        organization: Optional[OrganizationConfig] = None,
        template_renderer: Optional[TemplateRenderer] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize notification service.

        Args:
            transport: Active mail transport
            organization: Branding for templates (defaults if None)
            template_renderer: Template renderer instance (creates default if None)
            logger_instance: Logger instance (uses module logger if None)
        """
        self.transport = transport
        self.organization = organization or OrganizationConfig()
        self.template_renderer = template_renderer or TemplateRenderer()
        self.logger = logger_instance or logger

    def notify_status_change(
        self,
        application: Application,
        previous_status: Optional[str],
    ) -> NotificationResult:
        """Email the candidate about their application's new status.

        Args:
            application: Application snapshot with candidate and job posting
            previous_status: Status before the change; empty/None on creation

        Returns:
            NotificationResult with status sent, skipped or failed
        """
        status = application.status
        with log_context(application_id=application.id, application_status=status):
            candidate = application.candidate
            job = application.job_posting
            recipient = candidate.email if candidate else None

            if not recipient or not (job and job.title):
                self.logger.error(
                    "Missing candidate email or job title for email notification",
                    extra={
                        "event": "notification.validation_failed",
                        "has_email": bool(recipient),
                        "has_job_title": bool(job and job.title),
                    },
                )
                return NotificationResult(
                    status=STATUS_FAILED,
                    reason=REASON_MISSING_DATA,
                    error="Missing candidate email or job title",
                    recipient=recipient,
                    application_id=application.id,
                )

            if not (previous_status or "").strip() and status == ApplicationStatus.APPLIED.value:
                self.logger.info(
                    "Skipping notification for new application",
                    extra={"event": "notification.skip", "reason": REASON_INITIAL_STATUS},
                )
                return NotificationResult(
                    status=STATUS_SKIPPED,
                    reason=REASON_INITIAL_STATUS,
                    recipient=recipient,
                    application_id=application.id,
                )

            template = resolve_template(status)
            if template is None:
                self.logger.info(
                    f"No email template for status: {status}",
                    extra={"event": "notification.skip", "reason": REASON_NO_TEMPLATE},
                )
                return NotificationResult(
                    status=STATUS_SKIPPED,
                    reason=REASON_NO_TEMPLATE,
                    recipient=recipient,
                    application_id=application.id,
                )

            try:
                context = build_status_context(application, self.organization)
                rendered = self.template_renderer.render_status(template, context)
            except NotificationTemplateError as e:
                self.logger.error(
                    f"Template rendering failed: {e}",
                    exc_info=True,
                    extra={"event": "notification.template_error"},
                )
                return NotificationResult(
                    status=STATUS_FAILED,
                    reason=REASON_TEMPLATE_ERROR,
                    error=str(e),
                    recipient=recipient,
                    application_id=application.id,
                )

            self.logger.debug(
                f"Sending '{status}' email (previous status: {previous_status or 'none'})",
                extra={"event": "notification.send.attempt", "previous_status": previous_status},
            )
            delivery = self.transport.send(
                recipient, rendered.subject, rendered.html_body, rendered.text_body
            )
            return self._result_from_delivery(delivery, recipient, application.id)

    def send_custom_email(
        self,
        to: str,
        subject: str,
        message: str,
        application_id: Optional[int] = None,
    ) -> NotificationResult:
        """Send a caller-written email wrapped in the branded layout.

        Args:
            to: Recipient address
            subject: Subject line
            message: Plain-text message; line breaks are kept in the HTML body
            application_id: Optional application id for tracking

        Returns:
            NotificationResult with status sent or failed
        """
        with log_context(application_id=application_id):
            try:
                recipient = validate_email(to or "", check_deliverability=False).normalized
            except EmailNotValidError as e:
                self.logger.error(
                    f"Invalid recipient address '{to}': {e}",
                    extra={"event": "notification.validation_failed"},
                )
                return NotificationResult(
                    status=STATUS_FAILED,
                    reason=REASON_INVALID_RECIPIENT,
                    error=str(e),
                    recipient=to,
                    application_id=application_id,
                )

            if not (subject and subject.strip()) or not (message and message.strip()):
                self.logger.error(
                    "Custom email requires a subject and a message",
                    extra={"event": "notification.validation_failed"},
                )
                return NotificationResult(
                    status=STATUS_FAILED,
                    reason=REASON_MISSING_DATA,
                    error="Subject and message are required",
                    recipient=recipient,
                    application_id=application_id,
                )

            try:
                rendered: RenderedEmail = self.template_renderer.render_custom(
                    subject, message, build_branding_context(self.organization)
                )
            except NotificationTemplateError as e:
                self.logger.error(
                    f"Template rendering failed: {e}",
                    exc_info=True,
                    extra={"event": "notification.template_error"},
                )
                return NotificationResult(
                    status=STATUS_FAILED,
                    reason=REASON_TEMPLATE_ERROR,
                    error=str(e),
                    recipient=recipient,
                    application_id=application_id,
                )

            delivery = self.transport.send(
                recipient, rendered.subject, rendered.html_body, rendered.text_body
            )
            return self._result_from_delivery(delivery, recipient, application_id)

    def _result_from_delivery(
        self,
        delivery: DeliveryResult,
        recipient: str,
        application_id: Optional[int],
    ) -> NotificationResult:
        if delivery.ok:
            self.logger.info(
                f"Notification sent to {recipient}",
                extra={
                    "event": "notification.send.success",
                    "recipient": recipient,
                    "mocked": delivery.mocked,
                },
            )
            return NotificationResult(
                status=STATUS_SENT,
                recipient=recipient,
                application_id=application_id,
                message_id=delivery.message_id,
                mocked=delivery.mocked,
            )

        self.logger.error(
            f"Notification to {recipient} failed: {delivery.error}",
            extra={
                "event": "notification.send.failure",
                "recipient": recipient,
                "error_type": delivery.error_type,
            },
        )
        return NotificationResult(
            status=STATUS_FAILED,
            reason=REASON_TRANSPORT_ERROR,
            error=delivery.error,
            recipient=recipient,
            application_id=application_id,
        )
