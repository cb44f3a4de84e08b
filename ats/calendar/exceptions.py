"""Exceptions raised by the calendar client and availability service."""


class CalendarError(Exception):
    """Base exception for all calendar errors.

    Catching this catches every failure of the calendar provider, including
    authentication and transport problems. Provider library exceptions are
    always wrapped in one of its subclasses.
    """

    pass


class CalendarHTTPError(CalendarError):
    """Calendar API request failed with a 4xx or 5xx status.

    A status code of 0 means the request never got a response (connection
    refused, DNS failure).
    """

    def __init__(self, message: str, status_code: int, url: str) -> None:
        """Initialize HTTP error with status code and URL.

        Args:
            message: Human-readable error message
            status_code: HTTP status code (e.g., 404, 500), or 0 without a response
            url: URL that failed
        """
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class CalendarTimeoutError(CalendarError):
    """Calendar API request timed out."""

    def __init__(self, message: str, url: str) -> None:
        super().__init__(message)
        self.url = url


class CalendarResponseError(CalendarError):
    """Response could not be parsed or lacked required fields."""

    pass


class CalendarAuthError(CalendarError):
    """Access token could not be obtained or was rejected."""

    pass


class CalendarConfigurationError(CalendarError):
    """Google OAuth2 credentials are not configured."""

    pass
