"""Status email templates and their Jinja2 renderer.

``STATUS_TEMPLATES`` is the single registry mapping an application status to
its subject line and body templates. It is built at import time and never
changes. Statuses without an entry (``interviewed``, legacy values) get no
email.
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from jinja2 import Environment, PackageLoader, StrictUndefined, TemplateError, select_autoescape

from .models import NotificationTemplateError, RenderedEmail

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatusTemplate:
    """Template triple for one application status.

    Attributes:
        status: Status this template is registered under
        subject: Jinja2 source for the subject line
        text_template: Plain-text body template file
        html_template: HTML body template file
    """

    status: str
    subject: str
    text_template: str
    html_template: str


def _status_template(status: str, subject: str, files: Optional[str] = None) -> StatusTemplate:
    stem = files or status
    return StatusTemplate(
        status=status,
        subject=subject,
        text_template=f"status/{stem}.txt.j2",
        html_template=f"status/{stem}.html.j2",
    )


STATUS_TEMPLATES: Mapping[str, StatusTemplate] = MappingProxyType({
    "applied": _status_template(
        "applied", "Application Received: {{ position }} - {{ organization_name }}"
    ),
    "in_review": _status_template(
        "in_review", "Application Under Review: {{ position }} - {{ organization_name }}"
    ),
    # Older records use "screening" for the review stage
    "screening": _status_template(
        "screening",
        "Application Under Review: {{ position }} - {{ organization_name }}",
        files="in_review",
    ),
    "interview": _status_template(
        "interview", "Interview Invitation: {{ position }} - {{ organization_name }}"
    ),
    "offered": _status_template(
        "offered", "Job Offer: {{ position }} - {{ organization_name }}"
    ),
    "hired": _status_template(
        "hired", "Welcome to {{ organization_name }}: {{ position }}"
    ),
    "rejected": _status_template(
        "rejected", "Application Status Update: {{ position }} - {{ organization_name }}"
    ),
})


def resolve_template(status: Optional[str]) -> Optional[StatusTemplate]:
    """Look up the template registered for a status.

    Returns:
        The StatusTemplate, or None when the status has no email
    """
    if not status:
        return None
    return STATUS_TEMPLATES.get(status.strip().lower())


class TemplateRenderer:
    """Renders email templates from the ``ats.notifications`` package.

    HTML templates are auto-escaped; plain-text templates and subjects are
    not. Undefined variables raise instead of rendering as blanks.
    """

    def __init__(
        self,
        template_dir: str = "email_templates",
        custom_html_template: str = "custom.html.j2",
    ):
        self.custom_html_template = custom_html_template
        self.env = Environment(
            loader=PackageLoader("ats.notifications", template_dir),
            autoescape=select_autoescape(
                enabled_extensions=("html.j2",),
                default_for_string=False,
                default=False,
            ),
            undefined=StrictUndefined,
        )

        logger.debug(f"Initialized TemplateRenderer with templates from {template_dir}")

    def render_status(self, template: StatusTemplate, context: Dict[str, Any]) -> RenderedEmail:
        """Render the subject and both bodies for a status template.

        Raises:
            NotificationTemplateError: If any part fails to render
        """
        try:
            subject = self._render_subject(template.subject, context)
            text_body = self.env.get_template(template.text_template).render(context)
            html_body = self.env.get_template(template.html_template).render(context)
        except TemplateError as e:
            raise NotificationTemplateError(
                f"Rendering '{template.status}' template failed: {e}"
            ) from e

        logger.debug(f"Rendered '{template.status}' template")
        return RenderedEmail(subject=subject, html_body=html_body, text_body=text_body)

    def render_custom(self, subject: str, message: str, context: Dict[str, Any]) -> RenderedEmail:
        """Wrap a caller-written message in the branded HTML layout.

        The plain-text body is the message itself. Line breaks in the message
        become ``<br>`` in the HTML body.

        Raises:
            NotificationTemplateError: If the layout fails to render
        """
        try:
            html_body = self.env.get_template(self.custom_html_template).render(
                {**context, "message_lines": message.splitlines()}
            )
        except TemplateError as e:
            raise NotificationTemplateError(f"Rendering custom email failed: {e}") from e

        return RenderedEmail(
            subject=subject.strip().replace("\r", " ").replace("\n", " "),
            html_body=html_body,
            text_body=message,
        )

    def _render_subject(self, source: str, context: Dict[str, Any]) -> str:
        # Subjects must be a single line
        rendered = self.env.from_string(source).render(context)
        return rendered.strip().replace("\r", " ").replace("\n", " ")
