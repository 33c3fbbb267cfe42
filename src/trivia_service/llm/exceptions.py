"""
Custom exceptions for the LLM client layer.

These exceptions let the retry engine tell transport failures apart from
provider-side errors. All of them are recovered by escalating to the next
model configuration; none reach the caller directly.
"""


class LLMClientError(Exception):
    """
    Base exception for all LLM client errors.

    All LLM-specific exceptions inherit from this to allow catching
    any LLM-related error with a single except clause.
    """
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class LLMConnectionError(LLMClientError):
    """
    Raised when unable to reach the provider.

    Includes network errors, DNS failures, refused connections, etc.
    """
    pass


class LLMTimeoutError(LLMConnectionError):
    """
    Raised when a provider call exceeds its timeout.

    Separate from generic connection errors so logs and metrics can tell
    slow models from unreachable ones.
    """
    pass


class LLMGenerationError(LLMClientError):
    """
    Raised when the provider answers with a non-success status or an
    unparseable body.

    details carries "status_code" and a truncated "body" when available.
    """

    @property
    def status_code(self) -> int | None:
        return self.details.get("status_code")
