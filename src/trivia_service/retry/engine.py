"""
Retry engine with length correction and model fallback.

This module implements the RetryEngine that turns one GenerationRequest into
one accepted trivia answer. It provides a single entry point,
execute_with_retry(), and keeps every policy decision here rather than in
the client or the routes.

Retry Policy:
    For each model configuration, in priority order:
      1. Initial call. No text: skip the model if it does not exist,
         otherwise count a failure and move on.
      2. Truncated output is kept only as a fallback candidate and the
         model is abandoned (its output budget is already spent).
      3. Out-of-range length: up to MAX_CORRECTIONS correction turns in the
         same conversation.
      4. In-range length: accept and stop.
    After the last model: accept the longest candidate seen if it has at
    least FALLBACK_MIN_CHARS characters, else raise RetryExhausted.

Usage:
    engine = RetryEngine(llm_client, prompt_builder, settings)
    outcome = await engine.execute_with_retry(request)
"""

import time
from dataclasses import dataclass, field
from typing import Optional

import structlog

from trivia_service.config import Settings
from trivia_service.llm.base_client import BaseLLMClient
from trivia_service.llm.exceptions import LLMClientError
from trivia_service.llm.prompt_builder import PromptBuilder
from trivia_service.models.enums import ConversationRole, FinishSignal
from trivia_service.models.input_models import GenerationRequest
from trivia_service.models.llm_models import ConversationTurn, ModelConfiguration
from trivia_service.monitoring.metrics import (
    correction_attempts_total,
    generation_outcomes_total,
    model_attempts_total,
)
from trivia_service.retry.exceptions import RetryExhausted
from trivia_service.retry.metadata import (
    FALLBACK_MODEL_NAME,
    GenerationOutcome,
    ModelFailure,
    RetryMetadata,
)

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ModelAttempt:
    """Result of driving one model configuration to a decision."""

    outcome: str  # accepted, not_found, empty, truncated, out_of_range, error
    text: Optional[str] = None
    reason: Optional[str] = None

    @property
    def accepted(self) -> bool:
        return self.outcome == "accepted"


@dataclass
class RunState:
    """Mutable bookkeeping for one execute_with_retry() call."""

    started_at: float = field(default_factory=time.perf_counter)
    best_candidate: Optional[str] = None
    correction_attempts: int = 0
    models_tried: list[str] = field(default_factory=list)
    models_skipped: list[str] = field(default_factory=list)
    failures: list[ModelFailure] = field(default_factory=list)

    def consider(self, text: str) -> None:
        """Keep text as the fallback candidate if it is the longest so far."""
        if self.best_candidate is None or len(text) > len(self.best_candidate):
            self.best_candidate = text

    def to_metadata(self) -> RetryMetadata:
        return RetryMetadata(
            models_tried=list(self.models_tried),
            models_skipped=list(self.models_skipped),
            failures=list(self.failures),
            correction_attempts=self.correction_attempts,
            total_latency_ms=int((time.perf_counter() - self.started_at) * 1000),
        )


class RetryEngine:
    """
    Drive the validate, correct, retry loop across model configurations.

    Attributes:
        llm_client: Client used for every provider call
        prompt_builder: Builds initial and correction prompts, owns the length rule
        model_configs: Ordered model configurations (highest priority first)
        api_key: Provider API key
        max_corrections: Correction turns allowed per model configuration
        fallback_min_chars: Minimum length for a best-effort fallback answer
    """

    def __init__(
        self,
        llm_client: BaseLLMClient,
        prompt_builder: PromptBuilder,
        settings: Settings,
        model_configs: Optional[list[ModelConfiguration]] = None,
    ):
        """
        Initialize retry engine.

        Args:
            llm_client: LLM client for generation
            prompt_builder: Prompt builder for constructing prompts
            settings: Application settings
            model_configs: Override for settings.MODEL_CONFIGS
        """
        self.llm_client = llm_client
        self.prompt_builder = prompt_builder
        self.model_configs = list(model_configs if model_configs is not None else settings.MODEL_CONFIGS)
        self.api_key = settings.api_key
        self.max_corrections = settings.MAX_CORRECTIONS
        self.fallback_min_chars = settings.FALLBACK_MIN_CHARS

        logger.info(
            "RetryEngine initialized",
            models=[config.name for config in self.model_configs],
            max_corrections=self.max_corrections,
            fallback_min_chars=self.fallback_min_chars,
        )

    async def execute_with_retry(self, request: GenerationRequest) -> GenerationOutcome:
        """
        Produce one trivia answer for the request.

        Returns:
            GenerationOutcome with the accepted (or fallback) text

        Raises:
            RetryExhausted: No configuration produced an answer and no
                fallback candidate of sufficient length exists
        """
        run = RunState()

        logger.info(
            "Starting retry engine execution",
            keyword=request.keyword,
            models_count=len(self.model_configs),
        )

        for model_config in self.model_configs:
            try:
                attempt = await self._attempt_model(model_config, request, run)
            except LLMClientError as e:
                logger.error(
                    "Model attempt failed",
                    model=model_config.name,
                    error_type=type(e).__name__,
                    error=e.message,
                )
                attempt = ModelAttempt(outcome="error", reason=e.message)

            model_attempts_total.labels(model=model_config.name, outcome=attempt.outcome).inc()

            if attempt.outcome == "not_found":
                logger.warning("Model not found, skipping", model=model_config.name)
                run.models_skipped.append(model_config.name)
                continue

            run.models_tried.append(model_config.name)

            if attempt.accepted:
                return self._accept(run, attempt.text, model_config.name, request)

            run.failures.append(ModelFailure(model=model_config.name, reason=attempt.reason or attempt.outcome))
            logger.warning(
                "Escalating to next model configuration",
                model=model_config.name,
                outcome=attempt.outcome,
                reason=attempt.reason,
            )

        if run.best_candidate is not None and len(run.best_candidate) >= self.fallback_min_chars:
            logger.warning(
                "Using best candidate as fallback",
                length=len(run.best_candidate),
                keyword=request.keyword,
            )
            return self._accept(run, run.best_candidate, FALLBACK_MODEL_NAME, request, is_fallback=True)

        metadata = run.to_metadata()
        generation_outcomes_total.labels(outcome="failed").inc()
        logger.error(
            "All model configurations exhausted",
            keyword=request.keyword,
            models_tried=metadata.models_tried,
            models_skipped=metadata.models_skipped,
            correction_attempts=metadata.correction_attempts,
            total_latency_ms=metadata.total_latency_ms,
            last_error=metadata.last_failure_reason,
        )
        raise RetryExhausted(
            request=request,
            retry_metadata=metadata,
            last_error=metadata.last_failure_reason,
        )

    async def _attempt_model(
        self,
        model_config: ModelConfiguration,
        request: GenerationRequest,
        run: RunState,
    ) -> ModelAttempt:
        """
        Run the initial call and the correction loop for one configuration.

        The conversation is local to this call and dropped afterwards.
        LLMClientError propagates to the caller, which escalates.
        """
        model = model_config.name
        conversation = self.prompt_builder.build_initial_conversation(request.keyword)

        result = await self.llm_client.invoke(model_config, self.api_key, conversation)

        if result.text is None:
            if result.finish_signal is FinishSignal.NOT_FOUND:
                return ModelAttempt(outcome="not_found")
            return ModelAttempt(outcome="empty", reason="生成結果が空でした。")

        candidate = result.text
        logger.info(
            "First attempt",
            model=model,
            length=len(candidate),
            finish_signal=result.finish_signal.value,
        )

        if result.finish_signal is FinishSignal.TRUNCATED:
            run.consider(candidate)
            return ModelAttempt(
                outcome="truncated",
                reason="レスポンスが途中で切れました (MAX_TOKENS)。",
            )

        run.consider(candidate)

        corrections = 0
        while not self.prompt_builder.is_valid_length(candidate) and corrections < self.max_corrections:
            corrections += 1
            run.correction_attempts += 1
            correction_attempts_total.labels(model=model).inc()

            conversation = conversation + [
                ConversationTurn(role=ConversationRole.MODEL, text=candidate),
                ConversationTurn(
                    role=ConversationRole.USER,
                    text=self.prompt_builder.build_correction_prompt(len(candidate)),
                ),
            ]
            retry = await self.llm_client.invoke(model_config, self.api_key, conversation)

            if retry.text is None or retry.finish_signal is FinishSignal.TRUNCATED:
                logger.info(
                    "Correction produced no usable text, keeping last candidate",
                    model=model,
                    correction=corrections,
                    finish_signal=retry.finish_signal.value,
                )
                break

            candidate = retry.text
            run.consider(candidate)
            logger.info("Correction attempt", model=model, correction=corrections, length=len(candidate))

        if self.prompt_builder.is_valid_length(candidate):
            return ModelAttempt(outcome="accepted", text=candidate)

        return ModelAttempt(
            outcome="out_of_range",
            reason=f"文字数が範囲外です（{len(candidate)}文字）。",
        )

    def _accept(
        self,
        run: RunState,
        text: str,
        model_used: str,
        request: GenerationRequest,
        is_fallback: bool = False,
    ) -> GenerationOutcome:
        metadata = run.to_metadata()
        generation_outcomes_total.labels(outcome="fallback" if is_fallback else "accepted").inc()

        logger.info(
            "Retry engine succeeded",
            keyword=request.keyword,
            model=model_used,
            is_fallback=is_fallback,
            length=len(text),
            correction_attempts=metadata.correction_attempts,
            total_latency_ms=metadata.total_latency_ms,
        )

        return GenerationOutcome(
            text=text,
            model_used=model_used,
            correction_attempts=metadata.correction_attempts,
            metadata=metadata,
            is_fallback=is_fallback,
        )
