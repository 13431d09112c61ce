"""Exception classes for the Tumblr SDK."""

from __future__ import annotations

from typing import Any


class TumblrError(Exception):
    """Base exception for all Tumblr SDK errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigurationError(TumblrError, ValueError):
    """Client options are invalid.

    This error is raised at construction when:
    - The base URL carries a path, query, userinfo or fragment
    - OAuth credentials are incomplete
    - A consumer key is empty or not a string

    Attributes:
        constraint: Name of the violated constraint, if any.
    """

    def __init__(self, message: str, constraint: str | None = None) -> None:
        self.constraint = constraint
        super().__init__(message)


class EncodingError(TumblrError, ValueError):
    """Request payload could not be encoded.

    Raised before any network I/O takes place.

    Attributes:
        key: Payload key that failed to encode, if known.
    """

    def __init__(self, message: str, key: str | None = None) -> None:
        self.key = key
        super().__init__(message)


class TransportError(TumblrError):
    """The request failed below the HTTP layer.

    This error is raised when:
    - The API host is unreachable
    - The connection drops while reading the response
    - The transport timeout configured on the HTTP client expires
    """

    def __init__(
        self,
        message: str = "Failed to reach the Tumblr API",
        cause: Exception | None = None,
    ) -> None:
        self.cause = cause
        super().__init__(message)


class MalformedResponseError(TumblrError):
    """The API answered with something other than a response envelope.

    Attributes:
        raw_body: Response body text as received.
        status_code: HTTP status code of the response.
    """

    def __init__(self, raw_body: str, status_code: int | None = None) -> None:
        self.raw_body = raw_body
        self.status_code = status_code
        super().__init__(f"API error (malformed API response): {raw_body}")


class APIError(TumblrError):
    """Error status returned from the Tumblr API.

    Attributes:
        status_code: HTTP status code from the API.
        message: Error message supplied by the API, or "unknown".
        details: Parsed response body.
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        details: Any = None,
    ) -> None:
        self.status_code = status_code
        self.details = details
        super().__init__(f"API error: {status_code} {message}")
        self.message = message

    @property
    def is_retryable(self) -> bool:
        """Check if the caller could reasonably retry this request.

        Returns:
            True for 429 Too Many Requests and 5xx server errors.
        """
        return self.status_code == 429 or self.status_code >= 500
