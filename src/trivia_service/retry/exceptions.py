"""
Retry engine exceptions.

This module defines the exception raised when every model configuration
has been exhausted and no usable candidate (not even a fallback) exists.
"""

from typing import TYPE_CHECKING

from trivia_service.exceptions import TriviaServiceError

if TYPE_CHECKING:
    from trivia_service.models.input_models import GenerationRequest
    from trivia_service.retry.metadata import RetryMetadata


class RetryExhausted(TriviaServiceError):
    """
    Raised when all model configurations fail and no fallback is available.

    Attributes:
        request: Original GenerationRequest that failed
        retry_metadata: Complete retry history
        last_error: Message of the final failure (None if every model was skipped)
    """

    code = "generation_failed"
    status_code = 500

    def __init__(
        self,
        request: "GenerationRequest",
        retry_metadata: "RetryMetadata",
        last_error: str | None = None,
    ) -> None:
        """
        Initialize RetryExhausted exception.

        Args:
            request: Original GenerationRequest
            retry_metadata: Complete retry metadata
            last_error: Message of the final failure
        """
        self.request = request
        self.retry_metadata = retry_metadata
        self.last_error = last_error

        super().__init__(
            "トリビアの生成に失敗しました。もう一度お試しください。",
            details=last_error,
        )

    def __str__(self) -> str:
        return (
            f"All model configurations exhausted. "
            f"Tried: {', '.join(self.retry_metadata.models_tried) or 'none'}. "
            f"Skipped: {', '.join(self.retry_metadata.models_skipped) or 'none'}. "
            f"Final error: {self.last_error or 'unknown'}"
        )
