"""
Unit tests for domain models: keyword validation and provider response parsing.
"""

import pytest
from pydantic import ValidationError

from trivia_service.exceptions import InvalidKeywordError
from trivia_service.models.enums import ConversationRole, FinishSignal
from trivia_service.models.input_models import GenerationRequest
from trivia_service.models.llm_models import (
    ConversationTurn,
    GeminiResponse,
    ModelConfiguration,
    ModelInvocation,
)


class TestGenerationRequest:
    """Keyword trimming and length rule."""

    def test_keyword_is_trimmed(self):
        request = GenerationRequest.from_raw("  カレー \n")
        assert request.keyword == "カレー"

    @pytest.mark.parametrize("raw", ["", "   ", "\t\n", None])
    def test_empty_keyword_rejected(self, raw):
        with pytest.raises(InvalidKeywordError) as exc_info:
            GenerationRequest.from_raw(raw)

        assert exc_info.value.message == "単語を入れてください。"
        assert exc_info.value.status_code == 400
        assert exc_info.value.code == "validation_error"

    def test_thirty_characters_accepted(self):
        request = GenerationRequest.from_raw("あ" * 30)
        assert len(request.keyword) == 30

    def test_thirty_one_characters_rejected(self):
        with pytest.raises(InvalidKeywordError) as exc_info:
            GenerationRequest.from_raw("あ" * 31)

        assert exc_info.value.message == "30文字以内で入力してください。"

    def test_configured_limit_above_default_accepted(self):
        request = GenerationRequest.from_raw("あ" * 40, max_length=50)
        assert request.keyword == "あ" * 40

    def test_configured_limit_applies_to_message(self):
        with pytest.raises(InvalidKeywordError) as exc_info:
            GenerationRequest.from_raw("あ" * 51, max_length=50)

        assert exc_info.value.message == "50文字以内で入力してください。"

    def test_length_checked_after_trim(self):
        request = GenerationRequest.from_raw("  " + "あ" * 30 + "  ")
        assert request.keyword == "あ" * 30

    def test_request_is_immutable(self):
        request = GenerationRequest.from_raw("カレー")
        with pytest.raises(ValidationError):
            request.keyword = "ラーメン"


class TestGeminiResponse:
    """Typed parsing of generateContent bodies."""

    def test_thought_parts_are_skipped(self):
        response = GeminiResponse.model_validate({
            "candidates": [{
                "content": {"parts": [
                    {"text": "内部の思考", "thought": True},
                    {"text": " 小倉城は"},
                    {"text": "  "},
                    {"text": "石垣が見事らしい。 "},
                ]},
                "finishReason": "STOP",
            }]
        })

        assert response.extract_text() == "小倉城は石垣が見事らしい。"
        assert response.finish_signal() is FinishSignal.COMPLETE

    def test_only_thoughts_gives_none(self):
        response = GeminiResponse.model_validate({
            "candidates": [{"content": {"parts": [{"text": "思考", "thought": True}]}}]
        })
        assert response.extract_text() is None

    def test_empty_body_uses_defaults(self):
        response = GeminiResponse.model_validate({})

        assert response.candidates == []
        assert response.extract_text() is None
        assert response.finish_signal() is FinishSignal.UNKNOWN

    def test_unknown_fields_are_ignored(self):
        response = GeminiResponse.model_validate({
            "candidates": [{
                "content": {"parts": [{"text": "テキスト。"}], "role": "model"},
                "finishReason": "MAX_TOKENS",
                "safetyRatings": [],
            }],
            "promptFeedback": {},
            "usageMetadata": {"promptTokenCount": 10, "thoughtsTokenCount": 3},
        })

        assert response.finish_signal() is FinishSignal.TRUNCATED
        assert response.usage_metadata.prompt_token_count == 10
        assert response.usage_metadata.thoughts_token_count == 3


@pytest.mark.parametrize(
    "reason,expected",
    [
        ("STOP", FinishSignal.COMPLETE),
        ("MAX_TOKENS", FinishSignal.TRUNCATED),
        ("RECITATION", FinishSignal.UNKNOWN),
        (None, FinishSignal.UNKNOWN),
    ],
)
def test_finish_signal_from_reason(reason, expected):
    assert FinishSignal.from_finish_reason(reason) is expected


def test_conversation_turn_content():
    turn = ConversationTurn(role=ConversationRole.MODEL, text="前回の回答。")
    assert turn.to_content() == {"role": "model", "parts": [{"text": "前回の回答。"}]}


def test_model_configuration_reasoning_flag():
    assert ModelConfiguration(name="gemini-2.0-flash", max_output_tokens=500).is_reasoning_model is False
    assert ModelConfiguration(
        name="gemini-2.5-flash", max_output_tokens=8192, thinking_budget=0
    ).is_reasoning_model is True


def test_model_invocation_defaults():
    invocation = ModelInvocation(model="gemini-2.0-flash")
    assert invocation.text is None
    assert invocation.finish_signal is FinishSignal.UNKNOWN
    assert invocation.latency_ms == 0
    assert not hasattr(invocation, "length")
