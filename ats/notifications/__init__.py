"""Candidate email notifications for application status changes.

This module provides:
- NotificationService: decides, renders and sends status emails
- TemplateRenderer: Jinja2 rendering of status and custom emails
- STATUS_TEMPLATES / resolve_template: status to template registry
"""

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
    NotificationError,
    NotificationResult,
    NotificationTemplateError,
    RenderedEmail,
)
from .service import NotificationService
from .templates import STATUS_TEMPLATES, StatusTemplate, TemplateRenderer, resolve_template

__all__ = [
    "NotificationService",
    "NotificationResult",
    "NotificationError",
    "NotificationTemplateError",
    "RenderedEmail",
    "TemplateRenderer",
    "StatusTemplate",
    "STATUS_TEMPLATES",
    "resolve_template",
    "STATUS_SENT",
    "STATUS_SKIPPED",
    "STATUS_FAILED",
    "REASON_INITIAL_STATUS",
    "REASON_NO_TEMPLATE",
    "REASON_MISSING_DATA",
    "REASON_INVALID_RECIPIENT",
    "REASON_TEMPLATE_ERROR",
    "REASON_TRANSPORT_ERROR",
]
