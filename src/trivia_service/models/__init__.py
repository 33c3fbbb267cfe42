"""
Pydantic data models for the trivia service.

Includes:
- Enums (FinishSignal, ConversationRole, Genre, RankingPeriod)
- Input models (GenerationRequest)
- LLM models (ModelConfiguration, ConversationTurn, GeminiResponse, ModelInvocation)
- Output models (RankedKeyword, DailyCount)
"""

from trivia_service.models.enums import ConversationRole, FinishSignal, Genre, RankingPeriod
from trivia_service.models.input_models import GenerationRequest
from trivia_service.models.llm_models import (
    ConversationTurn,
    GeminiResponse,
    ModelConfiguration,
    ModelInvocation,
)
from trivia_service.models.output_models import DailyCount, RankedKeyword

__all__ = [
    # Enums
    "ConversationRole",
    "FinishSignal",
    "Genre",
    "RankingPeriod",
    # Input models
    "GenerationRequest",
    # LLM models
    "ConversationTurn",
    "GeminiResponse",
    "ModelConfiguration",
    "ModelInvocation",
    # Output models
    "DailyCount",
    "RankedKeyword",
]
