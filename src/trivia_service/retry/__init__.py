"""
Retry engine with length correction and model fallback.

For each configured model, in priority order, the engine asks for a trivia
answer, sends up to MAX_CORRECTIONS correction turns while the length is
outside the accepted range, and stops at the first in-range answer. When
every model fails, the longest candidate seen is returned as a fallback,
or RetryExhausted is raised.

Main Components:
    - RetryEngine: Main orchestrator for retry logic
    - RetryMetadata: Immutable history of one orchestration run
    - GenerationOutcome: The selected answer
    - RetryExhausted: Exception raised when no answer can be produced

Usage:
    >>> from trivia_service.retry import RetryEngine
    >>> engine = RetryEngine(llm_client, prompt_builder, settings)
    >>> outcome = await engine.execute_with_retry(request)
"""

from trivia_service.retry.engine import RetryEngine
from trivia_service.retry.exceptions import RetryExhausted
from trivia_service.retry.metadata import (
    FALLBACK_MODEL_NAME,
    GenerationOutcome,
    ModelFailure,
    RetryMetadata,
)

__all__ = [
    "RetryEngine",
    "RetryExhausted",
    "RetryMetadata",
    "ModelFailure",
    "GenerationOutcome",
    "FALLBACK_MODEL_NAME",
]
