"""Google OAuth2 refresh-token exchange.

Both the Gmail transport and the calendar client authenticate with the same
long-lived refresh token. Each operation exchanges it for a fresh access
token; nothing is cached between calls.
"""

from dataclasses import dataclass
from typing import List, Optional

import requests

from ats.logging import get_logger

logger = get_logger(__name__, component="oauth")

GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"


class OAuthError(Exception):
    """Base exception for OAuth2 failures."""

    pass


class OAuthConfigurationError(OAuthError):
    """Client id, client secret or refresh token is missing."""

    def __init__(self, missing: List[str]) -> None:
        super().__init__(f"Google OAuth2 credentials not configured: missing {', '.join(missing)}")
        self.missing = missing


class OAuthTokenError(OAuthError):
    """The token endpoint refused the refresh token or could not be reached."""

    def __init__(self, message: str, error_code: Optional[str] = None, status_code: int = 0) -> None:
        super().__init__(message)
        self.error_code = error_code
        self.status_code = status_code


@dataclass(frozen=True)
class AccessToken:
    """Short-lived bearer token returned by the token endpoint."""

    token: str
    expires_in: Optional[int] = None
    token_type: str = "Bearer"
    scope: Optional[str] = None

    def __repr__(self) -> str:
        return f"AccessToken(token=***, expires_in={self.expires_in}, scope={self.scope!r})"


class GoogleOAuthClient:
    """Exchanges a refresh token for access tokens.

    Attributes:
        client_id: OAuth2 client id
        client_secret: OAuth2 client secret
        refresh_token: Long-lived refresh token for the mailbox/calendar owner
        timeout: HTTP timeout in seconds
    """

    def __init__(
        self,
        client_id: Optional[str],
        client_secret: Optional[str],
        refresh_token: Optional[str],
        timeout: float = 30,
        session: Optional[requests.Session] = None,
        token_url: str = GOOGLE_TOKEN_URL,
    ) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.refresh_token = refresh_token
        self.timeout = timeout
        self.token_url = token_url
        self._session = session or requests.Session()

    def missing_credentials(self) -> List[str]:
        """Names of the environment variables that are not set."""
        missing = []
        if not self.client_id:
            missing.append("GMAIL_CLIENT_ID")
        if not self.client_secret:
            missing.append("GMAIL_CLIENT_SECRET")
        if not self.refresh_token:
            missing.append("GMAIL_REFRESH_TOKEN")
        return missing

    @property
    def is_configured(self) -> bool:
        return not self.missing_credentials()

    def fetch_access_token(self) -> AccessToken:
        """Exchange the refresh token for a new access token.

        Returns:
            AccessToken with the bearer token and its lifetime

        Raises:
            OAuthConfigurationError: If credentials are missing (no request is made)
            OAuthTokenError: If the exchange fails for any other reason
        """
        missing = self.missing_credentials()
        if missing:
            raise OAuthConfigurationError(missing)

        logger.debug(
            "Requesting OAuth2 access token",
            extra={"event": "oauth.token.request", "url": self.token_url},
        )

        try:
            response = self._session.post(
                self.token_url,
                data={
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "refresh_token": self.refresh_token,
                    "grant_type": "refresh_token",
                },
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            raise OAuthTokenError(
                f"Token request timed out after {self.timeout} seconds"
            ) from e
        except requests.exceptions.RequestException as e:
            raise OAuthTokenError(f"Token request failed: {e}") from e

        try:
            payload = response.json()
        except ValueError:
            payload = {}

        if response.status_code >= 400:
            error_code = payload.get("error") if isinstance(payload, dict) else None
            description = payload.get("error_description") if isinstance(payload, dict) else None
            logger.error(
                f"OAuth2 token exchange rejected with HTTP {response.status_code}",
                extra={
                    "event": "oauth.token.error",
                    "status_code": response.status_code,
                    "error_code": error_code,
                },
            )
            raise OAuthTokenError(
                f"Token exchange failed (HTTP {response.status_code}): "
                f"{description or error_code or response.reason}",
                error_code=error_code,
                status_code=response.status_code,
            )

        token = payload.get("access_token") if isinstance(payload, dict) else None
        if not token:
            raise OAuthTokenError("Token response did not contain an access_token")

        logger.debug(
            "OAuth2 access token obtained",
            extra={"event": "oauth.token.success", "expires_in": payload.get("expires_in")},
        )

        return AccessToken(
            token=token,
            expires_in=payload.get("expires_in"),
            token_type=payload.get("token_type", "Bearer"),
            scope=payload.get("scope"),
        )
