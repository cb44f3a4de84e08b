"""Unit tests for status templates and rendering.

Tests the template registry and TemplateRenderer for:
- Status to template resolution
- Subject, HTML and text rendering for every registered status
- HTML auto-escaping
- Strict undefined variable detection
- Custom message layout
"""

import pytest

from ats.notifications.models import NotificationTemplateError
from ats.notifications.templates import (
    STATUS_TEMPLATES,
    StatusTemplate,
    TemplateRenderer,
    resolve_template,
)


@pytest.fixture
def renderer():
    return TemplateRenderer()


@pytest.fixture
def context():
    return {
        "candidate_name": "Jane Doe",
        "position": "Lead Educator",
        "location": "Brisbane North",
        "status": "interview",
        "organization_name": "Acme Childcare",
        "team_signature": "People Team",
        "brand_color": "#0052CC",
    }


class TestResolveTemplate:
    @pytest.mark.parametrize(
        "status", ["applied", "in_review", "interview", "offered", "hired", "rejected"]
    )
    def test_registered_statuses(self, status):
        template = resolve_template(status)
        assert template is not None
        assert template.status == status

    def test_screening_shares_review_template(self):
        screening = resolve_template("screening")
        in_review = resolve_template("in_review")
        assert screening.subject == in_review.subject
        assert screening.text_template == in_review.text_template

    @pytest.mark.parametrize("status", ["interviewed", "withdrawn", "", None])
    def test_unregistered_statuses(self, status):
        assert resolve_template(status) is None

    def test_lookup_normalizes_case(self):
        assert resolve_template(" Hired ") is STATUS_TEMPLATES["hired"]

    def test_registry_is_read_only(self):
        with pytest.raises(TypeError):
            STATUS_TEMPLATES["new"] = STATUS_TEMPLATES["hired"]


class TestRenderStatus:
    @pytest.mark.parametrize("status", sorted(STATUS_TEMPLATES))
    def test_every_template_mentions_candidate_and_position(self, renderer, context, status):
        rendered = renderer.render_status(resolve_template(status), context)

        assert "Lead Educator" in rendered.subject
        assert "\n" not in rendered.subject
        for body in (rendered.text_body, rendered.html_body):
            assert "Jane Doe" in body
            assert "Lead Educator" in body
            assert "People Team" in body

    def test_interview_subject(self, renderer, context):
        rendered = renderer.render_status(resolve_template("interview"), context)

        assert rendered.subject == "Interview Invitation: Lead Educator - Acme Childcare"
        assert "invite you for an interview" in rendered.text_body
        assert "(Brisbane North)" in rendered.text_body

    def test_location_is_optional(self, renderer, context):
        context["location"] = None
        rendered = renderer.render_status(resolve_template("applied"), context)

        assert "()" not in rendered.text_body
        assert "Lead Educator position at Acme Childcare" in rendered.text_body

    def test_html_is_escaped_but_text_is_not(self, renderer, context):
        context["position"] = "Cook & <Kitchen> Hand"
        rendered = renderer.render_status(resolve_template("offered"), context)

        assert "Cook &amp; &lt;Kitchen&gt; Hand" in rendered.html_body
        assert "Cook & <Kitchen> Hand" in rendered.text_body
        assert rendered.subject == "Job Offer: Cook & <Kitchen> Hand - Acme Childcare"

    def test_brand_color_in_header(self, renderer, context):
        context["brand_color"] = "#ff0000"
        rendered = renderer.render_status(resolve_template("hired"), context)

        assert "background-color: #ff0000" in rendered.html_body

    def test_missing_variable_raises(self, renderer, context):
        del context["candidate_name"]

        with pytest.raises(NotificationTemplateError, match="rejected"):
            renderer.render_status(resolve_template("rejected"), context)

    def test_missing_template_file_raises(self, renderer, context):
        template = StatusTemplate(
            status="ghost",
            subject="Ghost",
            text_template="status/ghost.txt.j2",
            html_template="status/ghost.html.j2",
        )

        with pytest.raises(NotificationTemplateError):
            renderer.render_status(template, context)


class TestRenderCustom:
    def test_message_lines_become_breaks(self, renderer, context):
        rendered = renderer.render_custom(
            "Next steps\n", "Hello Jane,\nPlease bring ID.", context
        )

        assert rendered.subject == "Next steps"
        assert rendered.text_body == "Hello Jane,\nPlease bring ID."
        assert "Hello Jane,<br>Please bring ID." in rendered.html_body
        assert "Acme Childcare" in rendered.html_body

    def test_message_is_escaped_in_html(self, renderer, context):
        rendered = renderer.render_custom("Hi", "<script>alert(1)</script>", context)

        assert "<script>" not in rendered.html_body
        assert "&lt;script&gt;" in rendered.html_body
