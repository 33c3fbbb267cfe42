"""
LLM-specific data models for the request/response cycle.

These models are internal to the LLM layer and describe the raw
communication with the Gemini generateContent endpoint. The provider
response is validated once into GeminiResponse at the client boundary;
every field is optional with a default, so downstream code never has to
probe nested dicts.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from trivia_service.models.enums import ConversationRole, FinishSignal


class ModelConfiguration(BaseModel):
    """
    A named provider backend plus its generation parameters.

    The configured list is tried in order; the first entry has the highest
    priority.
    """
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Provider model name, e.g. 'gemini-2.0-flash'")
    max_output_tokens: int = Field(..., ge=1, description="Output size cap sent as maxOutputTokens")
    thinking_budget: Optional[int] = Field(
        default=None,
        ge=0,
        description="Reasoning-token budget override; set only for thinking models",
    )

    @property
    def is_reasoning_model(self) -> bool:
        return self.thinking_budget is not None


class ConversationTurn(BaseModel):
    """One turn of the conversation sent to the provider."""
    model_config = ConfigDict(frozen=True)

    role: ConversationRole
    text: str

    def to_content(self) -> Dict[str, Any]:
        return {"role": self.role.value, "parts": [{"text": self.text}]}


# === Provider response schema ===


class GeminiPart(BaseModel):
    model_config = ConfigDict(extra="ignore")

    text: Optional[str] = None
    thought: bool = False


class GeminiContent(BaseModel):
    model_config = ConfigDict(extra="ignore")

    role: Optional[str] = None
    parts: list[GeminiPart] = Field(default_factory=list)


class GeminiCandidate(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    content: Optional[GeminiContent] = None
    finish_reason: Optional[str] = Field(default=None, alias="finishReason")


class GeminiUsage(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    prompt_token_count: Optional[int] = Field(default=None, alias="promptTokenCount")
    candidates_token_count: Optional[int] = Field(default=None, alias="candidatesTokenCount")
    thoughts_token_count: Optional[int] = Field(default=None, alias="thoughtsTokenCount")


class GeminiResponse(BaseModel):
    """Typed view of a generateContent response body."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    candidates: list[GeminiCandidate] = Field(default_factory=list)
    usage_metadata: Optional[GeminiUsage] = Field(default=None, alias="usageMetadata")
    model_version: Optional[str] = Field(default=None, alias="modelVersion")

    @property
    def first_candidate(self) -> Optional[GeminiCandidate]:
        return self.candidates[0] if self.candidates else None

    def extract_text(self) -> Optional[str]:
        """
        Join the visible text parts of the first candidate.

        Parts flagged as thoughts are skipped, every part is trimmed and
        blank parts dropped. Returns None when nothing usable remains.
        """
        candidate = self.first_candidate
        if candidate is None or candidate.content is None:
            return None

        pieces = [
            part.text.strip()
            for part in candidate.content.parts
            if not part.thought and part.text and part.text.strip()
        ]
        if not pieces:
            return None
        return "".join(pieces).strip() or None

    def finish_signal(self) -> FinishSignal:
        candidate = self.first_candidate
        if candidate is None:
            return FinishSignal.UNKNOWN
        return FinishSignal.from_finish_reason(candidate.finish_reason)


class ModelInvocation(BaseModel):
    """
    Result of one provider call for one model configuration.

    text is None when the provider returned nothing usable (or the model
    does not exist, in which case finish_signal is NOT_FOUND).
    """
    model_config = ConfigDict(frozen=True)

    model: str
    text: Optional[str] = None
    finish_signal: FinishSignal = FinishSignal.UNKNOWN
    raw_response: Optional[Dict[str, Any]] = None
    latency_ms: int = Field(default=0, ge=0)
    prompt_tokens: Optional[int] = None
    output_tokens: Optional[int] = None
