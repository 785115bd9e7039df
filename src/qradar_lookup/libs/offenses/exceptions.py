"""Exceptions for QRadar offense operations."""


class QRadarError(Exception):
    """Base exception for all QRadar-related errors."""

    def __init__(self, message: str, details: str | None = None) -> None:
        """Initialize the exception.

        Args:
            message: The main error message.
            details: Optional additional details about the error.
        """
        self.message = message
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        """Return a string representation of the error."""
        if self.details:
            return f"{self.message}. Details: {self.details}"
        return self.message


class QRadarConfigError(QRadarError):
    """Invalid lookup or client configuration."""

    pass


class QRadarClientError(QRadarError):
    """HTTP/network-related errors when communicating with the QRadar API."""

    def __init__(
        self, message: str, status_code: int | None = None, details: str | None = None
    ) -> None:
        """Initialize the client error.

        Args:
            message: The main error message.
            status_code: HTTP status code if applicable.
            details: Optional additional details about the error.
        """
        self.status_code = status_code
        super().__init__(message, details)

    def __str__(self) -> str:
        """Return a string representation of the error."""
        base_message = self.message
        if self.status_code:
            base_message = f"{base_message} (HTTP {self.status_code})"
        if self.details:
            base_message = f"{base_message}. Details: {self.details}"
        return base_message


class QRadarAuthenticationError(QRadarClientError):
    """Raised when QRadar rejects the configured credentials."""

    pass


class QRadarNotFoundError(QRadarClientError):
    """Raised when the offense endpoint does not exist on the server."""

    pass


class QRadarAPIError(QRadarClientError):
    """Raised when the API returns an error or an unusable response."""

    pass


class QRadarMalformedResponseError(QRadarAPIError):
    """Raised when a successful response body cannot be parsed into offenses.

    A malformed body is never treated as "no offenses".
    """

    pass


class QRadarNetworkError(QRadarClientError):
    """Raised when network/connection errors occur."""

    pass


class QRadarTransientError(QRadarClientError):
    """Raised for 502, 503 and 504 responses so the request can be retried."""

    pass
