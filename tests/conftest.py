"""Shared pytest fixtures."""

from unittest.mock import Mock

import pytest

from ats.config.models import CalendarConfig, OrganizationConfig
from ats.domain.models import Application, Candidate, JobPosting
from ats.logging.context import clear_log_context
from ats.oauth import AccessToken
from ats.transports.base import DeliveryResult

ENV_VARS = (
    "MAIL_TRANSPORT",
    "SENDGRID_API_KEY",
    "MAIL_FROM_EMAIL",
    "GMAIL_CLIENT_ID",
    "GMAIL_CLIENT_SECRET",
    "GMAIL_REFRESH_TOKEN",
    "GMAIL_EMAIL",
    "MOCK_EMAILS",
    "REQUEST_TIMEOUT",
    "LOG_LEVEL",
    "ENVIRONMENT",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep a developer's .env or shell from leaking into tests."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture
def organization():
    return OrganizationConfig(name="Acme Childcare", team_signature="People Team")


@pytest.fixture
def calendar_config():
    return CalendarConfig(calendar_id="primary", timezone="Australia/Brisbane")


@pytest.fixture
def sample_application():
    """Application for Jane Doe, Lead Educator at Brisbane North."""
    return Application(
        id=42,
        status="interview",
        candidate=Candidate(first_name="Jane", last_name="Doe", email="jane.doe@example.com"),
        job_posting=JobPosting(title="Lead Educator", location_name="Brisbane North"),
    )


@pytest.fixture
def mock_transport():
    """Transport double that accepts every message."""
    transport = Mock()
    transport.name = "fake"
    transport.send.return_value = DeliveryResult(ok=True, message_id="msg-1")
    return transport


@pytest.fixture
def oauth_client():
    """Configured OAuth client double returning a fixed token."""
    client = Mock()
    client.missing_credentials.return_value = []
    client.is_configured = True
    client.fetch_access_token.return_value = AccessToken(token="ya29.test-token", expires_in=3599)
    return client

