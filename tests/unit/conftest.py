"""Unit test fixtures (mocks and stubs).

Provides fake provider clients and canned Gemini responses for testing
without external dependencies.
"""

from typing import Optional, Sequence, Union

import httpx
import pytest

from trivia_service.llm.base_client import BaseLLMClient
from trivia_service.models.enums import FinishSignal
from trivia_service.models.llm_models import (
    ConversationTurn,
    ModelConfiguration,
    ModelInvocation,
)

ScriptStep = Union[ModelInvocation, Exception]


class ScriptedLLMClient(BaseLLMClient):
    """Fake client replaying a fixed script of results per model name.

    Every call is recorded as (model, conversation) in `calls`. A model with
    an exhausted or missing script raises AssertionError, so tests notice
    unexpected provider calls.
    """

    def __init__(self, script: dict[str, list[ScriptStep]]):
        super().__init__(base_url="https://gemini.test/v1beta")
        self.script = {model: list(steps) for model, steps in script.items()}
        self.calls: list[tuple[str, list[ConversationTurn]]] = []

    async def invoke(
        self,
        model_config: ModelConfiguration,
        api_key: str,
        conversation: Sequence[ConversationTurn],
    ) -> ModelInvocation:
        self.calls.append((model_config.name, list(conversation)))
        steps = self.script.get(model_config.name)
        if not steps:
            raise AssertionError(f"unexpected call to {model_config.name}")
        step = steps.pop(0)
        if isinstance(step, Exception):
            raise step
        return step

    async def health_check(self, api_key: str) -> bool:
        return True

    def calls_for(self, model: str) -> int:
        return sum(1 for name, _ in self.calls if name == model)


@pytest.fixture
def invocation():
    """Factory fixture for ModelInvocation results.

    Usage:
        invocation("gemini-2.0-flash", make_text(85))
        invocation("gemini-2.0-flash", None, FinishSignal.NOT_FOUND)
    """
    def _create(
        model: str,
        text: Optional[str],
        finish_signal: FinishSignal = FinishSignal.COMPLETE,
    ) -> ModelInvocation:
        return ModelInvocation(model=model, text=text, finish_signal=finish_signal, latency_ms=5)

    return _create


@pytest.fixture
def scripted_client():
    """Factory fixture building a ScriptedLLMClient from a script dict."""
    return ScriptedLLMClient


@pytest.fixture
def gemini_body():
    """Factory fixture for generateContent response bodies."""
    def _create(
        text: Optional[str],
        finish_reason: Optional[str] = "STOP",
        thought: Optional[str] = None,
    ) -> dict:
        parts = []
        if thought is not None:
            parts.append({"text": thought, "thought": True})
        if text is not None:
            parts.append({"text": text})
        candidate: dict = {"content": {"role": "model", "parts": parts}}
        if finish_reason is not None:
            candidate["finishReason"] = finish_reason
        return {
            "candidates": [candidate],
            "usageMetadata": {"promptTokenCount": 120, "candidatesTokenCount": 60},
            "modelVersion": "gemini-2.0-flash",
        }

    return _create


@pytest.fixture
def mock_transport():
    """Factory fixture for httpx.MockTransport that records requests.

    Usage:
        transport, requests = mock_transport(lambda request: httpx.Response(200, json=...))
    """
    def _create(handler):
        requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return handler(request)

        return httpx.MockTransport(_record), requests

    return _create
