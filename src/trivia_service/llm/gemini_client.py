"""
Gemini client implementation for trivia generation.

Communicates with the Gemini REST API using httpx AsyncClient. Supports:
- Multi-turn conversations with a fixed system instruction
- Per-model output caps and thinking-budget override
- Connection pooling through a persistent AsyncClient
- Typed response parsing (GeminiResponse) at the boundary
"""

import json
import time
from typing import Any, Dict, Optional, Sequence

import httpx
import structlog
from pydantic import ValidationError as PydanticValidationError

from trivia_service.llm.base_client import BaseLLMClient
from trivia_service.llm.exceptions import (
    LLMConnectionError,
    LLMGenerationError,
    LLMTimeoutError,
)
from trivia_service.models.enums import FinishSignal
from trivia_service.models.llm_models import (
    ConversationTurn,
    GeminiResponse,
    ModelConfiguration,
    ModelInvocation,
)
from trivia_service.monitoring.metrics import llm_latency_seconds, llm_tokens_total


logger = structlog.get_logger(__name__)

ERROR_BODY_LIMIT = 200


class GeminiClient(BaseLLMClient):
    """
    Gemini-specific LLM client using httpx for async HTTP communication.

    API Endpoints:
    - POST /models/{model}:generateContent: Generate a completion
    - GET /models: List available models (health check)

    The API key travels in the x-goog-api-key header so it never shows up
    in logged URLs.
    """

    def __init__(
        self,
        system_prompt: str,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 20.0,
        temperature: float = 0.7,
        connection_limits: Optional[httpx.Limits] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize Gemini client.

        Args:
            system_prompt: Fixed system instruction sent with every call
            base_url: Gemini API base URL (including version segment)
            timeout: Per-call timeout in seconds
            temperature: Sampling temperature
            connection_limits: httpx connection pool limits
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        super().__init__(base_url, timeout)
        self.system_prompt = system_prompt
        self.temperature = temperature

        if connection_limits is None:
            connection_limits = httpx.Limits(
                max_keepalive_connections=10,
                max_connections=20,
                keepalive_expiry=30.0
            )

        self._client: Optional[httpx.AsyncClient] = None
        self._connection_limits = connection_limits
        self._transport = transport

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                limits=self._connection_limits,
                transport=self._transport,
            )
            logger.debug("Created new httpx AsyncClient")
        return self._client

    def build_payload(
        self,
        model_config: ModelConfiguration,
        conversation: Sequence[ConversationTurn],
    ) -> Dict[str, Any]:
        """
        Build the generateContent request body.

        {
            "systemInstruction": {"parts": [{"text": "..."}]},
            "contents": [{"role": "user", "parts": [{"text": "..."}]}, ...],
            "generationConfig": {
                "temperature": 0.7,
                "maxOutputTokens": 500,
                "thinkingConfig": {"thinkingBudget": 0}   # reasoning models only
            }
        }
        """
        generation_config: Dict[str, Any] = {
            "temperature": self.temperature,
            "maxOutputTokens": model_config.max_output_tokens,
        }
        if model_config.is_reasoning_model:
            generation_config["thinkingConfig"] = {
                "thinkingBudget": model_config.thinking_budget
            }

        return {
            "systemInstruction": {"parts": [{"text": self.system_prompt}]},
            "contents": [turn.to_content() for turn in conversation],
            "generationConfig": generation_config,
        }

    async def invoke(
        self,
        model_config: ModelConfiguration,
        api_key: str,
        conversation: Sequence[ConversationTurn],
    ) -> ModelInvocation:
        """
        Call generateContent once for one model configuration.

        A 404 is reported as FinishSignal.NOT_FOUND instead of raising, so
        the engine can skip a retired model without counting a failure.
        """
        start_time = time.perf_counter()
        model = model_config.name
        payload = self.build_payload(model_config, conversation)

        logger.info(
            "Sending generation request to Gemini",
            model=model,
            turns=len(conversation),
            max_output_tokens=model_config.max_output_tokens,
            thinking_budget=model_config.thinking_budget,
        )

        try:
            client = await self._get_client()
            response = await client.post(
                f"/models/{model}:generateContent",
                json=payload,
                headers={"x-goog-api-key": api_key},
            )
        except httpx.TimeoutException as e:
            self._observe_latency(model, start_time, success=False)
            logger.warning("Gemini request timeout", model=model, timeout=self.timeout, error=str(e))
            raise LLMTimeoutError(
                f"Request timeout after {self.timeout}s",
                details={"model": model, "timeout": self.timeout}
            ) from e
        except httpx.HTTPError as e:
            self._observe_latency(model, start_time, success=False)
            logger.warning("Gemini network error", model=model, error=str(e))
            raise LLMConnectionError(
                f"Network error: {e}",
                details={"model": model, "error_type": type(e).__name__}
            ) from e

        latency_ms = self._observe_latency(model, start_time, success=response.is_success)

        if response.status_code == 404:
            logger.warning("Gemini model not found", model=model)
            return ModelInvocation(
                model=model,
                finish_signal=FinishSignal.NOT_FOUND,
                latency_ms=latency_ms,
            )

        if not response.is_success:
            body = response.text[:ERROR_BODY_LIMIT]
            logger.error(
                "Gemini HTTP error",
                model=model,
                status_code=response.status_code,
                error_text=body,
            )
            raise LLMGenerationError(
                f"HTTP {response.status_code}: {body}",
                details={"model": model, "status_code": response.status_code, "body": body}
            )

        try:
            raw = response.json()
            parsed = GeminiResponse.model_validate(raw)
        except (json.JSONDecodeError, PydanticValidationError) as e:
            logger.error("Failed to parse Gemini response", model=model, error=str(e))
            raise LLMGenerationError(
                "Invalid response body from Gemini",
                details={"model": model, "parse_error": str(e)}
            ) from e

        text = parsed.extract_text()
        finish_signal = parsed.finish_signal()
        usage = parsed.usage_metadata
        prompt_tokens = usage.prompt_token_count if usage else None
        output_tokens = usage.candidates_token_count if usage else None

        if prompt_tokens:
            llm_tokens_total.labels(model=model, token_type="prompt").inc(prompt_tokens)
        if output_tokens:
            llm_tokens_total.labels(model=model, token_type="output").inc(output_tokens)

        logger.info(
            "Gemini generation finished",
            model=model,
            latency_ms=latency_ms,
            finish_signal=finish_signal.value,
            text_length=len(text) if text else 0,
            prompt_tokens=prompt_tokens,
            output_tokens=output_tokens,
        )

        return ModelInvocation(
            model=model,
            text=text,
            finish_signal=finish_signal,
            raw_response=raw,
            latency_ms=latency_ms,
            prompt_tokens=prompt_tokens,
            output_tokens=output_tokens,
        )

    def _observe_latency(self, model: str, start_time: float, success: bool) -> int:
        elapsed = time.perf_counter() - start_time
        llm_latency_seconds.labels(
            model=model, success="true" if success else "false"
        ).observe(elapsed)
        return int(elapsed * 1000)

    async def health_check(self, api_key: str) -> bool:
        """
        Check Gemini reachability via GET /models.

        Returns True if the key is accepted, False otherwise.
        """
        if not api_key:
            return False
        try:
            client = await self._get_client()
            response = await client.get(
                "/models",
                headers={"x-goog-api-key": api_key},
                timeout=5.0,
            )
            response.raise_for_status()
            logger.debug("Gemini health check passed")
            return True
        except Exception as e:
            logger.warning("Gemini health check failed", error=str(e))
            return False

    async def close(self):
        """Close the HTTP client connection."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            logger.debug("Closed Gemini client connection")

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
