"""
Retry metadata tracking.

This module defines the frozen dataclasses that describe what the retry
engine did for one generation request: which model configurations were
tried or skipped, why each failed, how many correction turns were spent,
and which answer was finally selected.
"""

from dataclasses import dataclass, field


FALLBACK_MODEL_NAME = "fallback"


@dataclass(frozen=True)
class ModelFailure:
    """Why one model configuration did not produce an accepted answer."""

    model: str
    reason: str


@dataclass(frozen=True)
class RetryMetadata:
    """
    Complete history of one orchestration run for logging and metrics.

    Attributes:
        models_tried: Configurations that were actually invoked, in order
        models_skipped: Configurations skipped because the provider reported
            the model as not found
        failures: One entry per tried configuration that was abandoned
        correction_attempts: Correction turns spent across all configurations
        total_latency_ms: Time from the first call to the final decision
    """

    models_tried: list[str] = field(default_factory=list)
    models_skipped: list[str] = field(default_factory=list)
    failures: list[ModelFailure] = field(default_factory=list)
    correction_attempts: int = 0
    total_latency_ms: int = 0

    def __post_init__(self) -> None:
        """Validate metadata invariants."""
        if self.correction_attempts < 0:
            raise ValueError("correction_attempts must be >= 0")

        if self.total_latency_ms < 0:
            raise ValueError("total_latency_ms must be >= 0")

        overlap = set(self.models_tried) & set(self.models_skipped)
        if overlap:
            raise ValueError(f"models both tried and skipped: {sorted(overlap)}")

    @property
    def last_failure_reason(self) -> str | None:
        return self.failures[-1].reason if self.failures else None


@dataclass(frozen=True)
class GenerationOutcome:
    """
    Final answer selected by the retry engine.

    is_fallback is True when no configuration produced an in-range answer
    and the longest candidate seen was accepted instead; model_used is then
    FALLBACK_MODEL_NAME.
    """

    text: str
    model_used: str
    correction_attempts: int
    metadata: RetryMetadata
    is_fallback: bool = False

    def __post_init__(self) -> None:
        if not self.text:
            raise ValueError("text must not be empty")
        if self.is_fallback and self.model_used != FALLBACK_MODEL_NAME:
            raise ValueError("fallback outcomes must report the fallback model name")

    @property
    def length(self) -> int:
        return len(self.text)
