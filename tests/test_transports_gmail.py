"""Unit tests for the Gmail OAuth2 SMTP transport.

Tests GmailTransport for:
- XOAUTH2 initial response
- STARTTLS and implicit TLS connections
- Mock mode and missing credentials (no network activity)
- OAuth and SMTP error mapping
"""

import smtplib
from email.message import EmailMessage
from unittest.mock import MagicMock, Mock

import pytest

from ats.oauth import OAuthConfigurationError, OAuthTokenError
from ats.transports.gmail import GmailTransport, build_xoauth2_string


@pytest.fixture
def smtp():
    return MagicMock()


@pytest.fixture
def smtp_factory(smtp):
    return Mock(return_value=smtp)


@pytest.fixture
def smtp_ssl_factory(smtp):
    return Mock(return_value=smtp)


@pytest.fixture
def make_transport(oauth_client, smtp_factory, smtp_ssl_factory):
    def _make(**overrides):
        params = {
            "oauth_client": oauth_client,
            "sender_email": "hr@acme.example",
            "sender_name": "Acme Careers",
            "smtp_host": "smtp.gmail.com",
            "smtp_port": 587,
            "timeout": 20,
            "smtp_factory": smtp_factory,
            "smtp_ssl_factory": smtp_ssl_factory,
        }
        params.update(overrides)
        return GmailTransport(**params)

    return _make


def test_build_xoauth2_string():
    assert (
        build_xoauth2_string("hr@acme.example", "ya29.tok")
        == "user=hr@acme.example\x01auth=Bearer ya29.tok\x01\x01"
    )


def test_send_with_starttls(make_transport, smtp, smtp_factory, smtp_ssl_factory, oauth_client):
    transport = make_transport()

    result = transport.send("jane@example.com", "Interview Invitation", "<p>Hi</p>", "Hi")

    assert result.ok is True
    assert result.message_id and result.message_id.endswith("@acme.example>")
    oauth_client.fetch_access_token.assert_called_once()
    smtp_factory.assert_called_once_with("smtp.gmail.com", 587, timeout=20)
    smtp_ssl_factory.assert_not_called()
    smtp.starttls.assert_called_once()
    assert smtp.ehlo.call_count == 2
    smtp.quit.assert_called_once()

    mechanism, authobject = smtp.auth.call_args[0]
    assert mechanism == "XOAUTH2"
    assert authobject() == "user=hr@acme.example\x01auth=Bearer ya29.test-token\x01\x01"
    assert authobject(b'{"status":"400"}') == ""

    message = smtp.send_message.call_args[0][0]
    assert isinstance(message, EmailMessage)
    assert message["To"] == "jane@example.com"
    assert message["From"] == "Acme Careers <hr@acme.example>"
    assert message["Subject"] == "Interview Invitation"
    assert message.is_multipart()
    assert message.get_body(preferencelist=("html",)).get_content().strip() == "<p>Hi</p>"
    assert message.get_body(preferencelist=("plain",)).get_content().strip() == "Hi"


def test_port_465_uses_implicit_tls(make_transport, smtp, smtp_factory, smtp_ssl_factory):
    result = make_transport(smtp_port=465).send("jane@example.com", "S", "<p>x</p>", "x")

    assert result.ok is True
    smtp_ssl_factory.assert_called_once()
    smtp_factory.assert_not_called()
    smtp.starttls.assert_not_called()


def test_tls_disabled_skips_starttls(make_transport, smtp):
    make_transport(use_tls=False).send("jane@example.com", "S", "<p>x</p>", "x")

    smtp.starttls.assert_not_called()
    smtp.send_message.assert_called_once()


def test_mock_mode_has_no_network_activity(make_transport, smtp_factory, oauth_client):
    result = make_transport(mock_mode=True).send("jane@example.com", "S", "<p>x</p>", "x")

    assert result.ok is True
    assert result.mocked is True
    oauth_client.fetch_access_token.assert_not_called()
    smtp_factory.assert_not_called()


def test_missing_credentials_fail_before_network(make_transport, smtp_factory, oauth_client):
    oauth_client.missing_credentials.return_value = ["GMAIL_REFRESH_TOKEN"]

    result = make_transport(sender_email=None).send("jane@example.com", "S", "<p>x</p>", "x")

    assert result.ok is False
    assert result.error_type == "configuration"
    assert "GMAIL_REFRESH_TOKEN" in result.error
    assert "GMAIL_EMAIL" in result.error
    oauth_client.fetch_access_token.assert_not_called()
    smtp_factory.assert_not_called()


def test_missing_sender_does_not_grow_credential_list(make_transport, oauth_client):
    shared = ["GMAIL_REFRESH_TOKEN"]
    oauth_client.missing_credentials.return_value = shared
    transport = make_transport(sender_email=None)

    transport.send("jane@example.com", "S", "<p>x</p>", "x")
    result = transport.send("jane@example.com", "S", "<p>x</p>", "x")

    assert shared == ["GMAIL_REFRESH_TOKEN"]
    assert result.error.count("GMAIL_EMAIL") == 1


def test_oauth_configuration_error_maps_to_configuration(make_transport, oauth_client, smtp_factory):
    oauth_client.fetch_access_token.side_effect = OAuthConfigurationError(["GMAIL_CLIENT_ID"])

    result = make_transport().send("jane@example.com", "S", "<p>x</p>", "x")

    assert result.error_type == "configuration"
    smtp_factory.assert_not_called()


def test_token_error_maps_to_authentication(make_transport, oauth_client, smtp_factory):
    oauth_client.fetch_access_token.side_effect = OAuthTokenError("invalid_grant", status_code=400)

    result = make_transport().send("jane@example.com", "S", "<p>x</p>", "x")

    assert result.ok is False
    assert result.error_type == "authentication"
    assert "access token" in result.error
    smtp_factory.assert_not_called()


def test_smtp_auth_rejected(make_transport, smtp):
    smtp.auth.side_effect = smtplib.SMTPAuthenticationError(535, b"Username and Password not accepted")

    result = make_transport().send("jane@example.com", "S", "<p>x</p>", "x")

    assert result.ok is False
    assert result.error_type == "authentication"
    smtp.send_message.assert_not_called()
    smtp.quit.assert_called_once()


def test_recipient_refused(make_transport, smtp):
    smtp.send_message.side_effect = smtplib.SMTPRecipientsRefused({"jane@example.com": (550, b"No such user")})

    result = make_transport().send("jane@example.com", "S", "<p>x</p>", "x")

    assert result.ok is False
    assert result.error_type == "delivery"
    smtp.quit.assert_called_once()


def test_connection_failure(make_transport, smtp_factory):
    smtp_factory.side_effect = ConnectionRefusedError("refused")

    result = make_transport().send("jane@example.com", "S", "<p>x</p>", "x")

    assert result.ok is False
    assert "Network error" in result.error


def test_quit_failure_does_not_mask_success(make_transport, smtp):
    smtp.quit.side_effect = smtplib.SMTPServerDisconnected("gone")

    result = make_transport().send("jane@example.com", "S", "<p>x</p>", "x")

    assert result.ok is True
