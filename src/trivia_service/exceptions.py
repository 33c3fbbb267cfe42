"""
API-facing exceptions for the trivia service.

Each exception carries the error code, HTTP status and user-visible
message that the error handlers put into the response envelope.
"""


class TriviaServiceError(Exception):
    """
    Base exception for errors reported to the caller.

    Attributes:
        code: Machine-readable error code (e.g. "validation_error")
        status_code: HTTP status code for the response
        message: Human-readable (Japanese) message
        details: Optional extra detail string
    """

    code = "generation_failed"
    status_code = 500

    def __init__(self, message: str, details: str | None = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ConfigurationError(TriviaServiceError):
    """Raised when a required setting (e.g. the Gemini API key) is missing."""

    code = "config_error"
    status_code = 500


class InvalidKeywordError(TriviaServiceError):
    """Raised when the keyword is empty or too long. Never retried."""

    code = "validation_error"
    status_code = 400


class RateLimitedError(TriviaServiceError):
    """
    Raised when a client address exceeds its admission window.

    retry_after is the number of seconds until the oldest admission leaves
    the window.
    """

    code = "rate_limited"
    status_code = 429

    def __init__(self, message: str, retry_after: float = 0.0):
        super().__init__(message)
        self.retry_after = retry_after


class AuthenticationError(TriviaServiceError):
    """Raised when the admin password or session token is missing or wrong."""

    code = "unauthorized"
    status_code = 401
