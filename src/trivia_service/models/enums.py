"""
Enumerations for trivia service data models.

All enums are closed taxonomies - no values outside these sets are permitted.
"""

from enum import Enum


class FinishSignal(str, Enum):
    """
    Completion status of a single provider invocation.

    Decides whether a candidate may be corrected, must be abandoned in favor
    of the next model configuration, or the configuration skipped entirely.
    """

    COMPLETE = "COMPLETE"
    TRUNCATED = "TRUNCATED"
    NOT_FOUND = "NOT_FOUND"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def from_finish_reason(cls, finish_reason: str | None) -> "FinishSignal":
        """Map a Gemini finishReason onto a FinishSignal."""
        return _FINISH_REASONS.get(finish_reason or "", cls.UNKNOWN)


_FINISH_REASONS = {
    "STOP": FinishSignal.COMPLETE,
    "MAX_TOKENS": FinishSignal.TRUNCATED,
}


class ConversationRole(str, Enum):
    """Speaker of a conversation turn, named as the provider expects."""

    USER = "user"
    MODEL = "model"


class Genre(str, Enum):
    """
    Topical genre of a requested keyword.

    Declaration order is the order shown in the admin view; OTHER is the
    catch-all when no hint matches.
    """

    FOOD = "食べ物"
    TOURISM = "観光"
    HISTORY = "歴史"
    PLACE = "地名"
    CULTURE = "文化"
    INDUSTRY = "産業"
    OTHER = "その他"


class RankingPeriod(str, Enum):
    """Time window for keyword rankings."""

    ALL = "all"
    SEVEN_DAYS = "7days"
    TODAY = "today"
