"""Custom exceptions for the Lettermint client."""

from typing import Any, Optional


class LettermintError(Exception):
    """Base exception for all Lettermint errors."""

    pass


class ConfigurationError(LettermintError):
    """Raised when the client configuration is invalid."""

    pass


class HttpRequestError(LettermintError):
    """Raised when the API answers with a non-success status code."""

    def __init__(
        self, message: str, status_code: int, response_body: Optional[Any] = None
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class ValidationError(HttpRequestError):
    """Raised when the API rejects the payload (HTTP 422).

    ``error_type`` holds the discriminator sent by the server, for example
    ``DailyLimitExceeded``.
    """

    def __init__(self, message: str, error_type: str, response_body: Optional[Any] = None):
        super().__init__(message, 422, response_body)
        self.error_type = error_type


class ClientError(HttpRequestError):
    """Raised when the request is malformed (HTTP 400)."""

    def __init__(self, message: str, response_body: Optional[Any] = None):
        super().__init__(message, 400, response_body)


class TimeoutError(LettermintError):
    """Raised when no response arrives within the configured timeout."""

    pass
