"""
Input models for the trivia service.
"""

from pydantic import BaseModel, ConfigDict, Field

from trivia_service.exceptions import InvalidKeywordError


KEYWORD_MAX_LENGTH = 30


class GenerationRequest(BaseModel):
    """
    A validated keyword to generate trivia for.

    Created once per incoming call and never mutated. Use from_raw() to build
    one from user input so that trimming and the Japanese error messages are
    applied consistently.
    """
    model_config = ConfigDict(frozen=True)

    keyword: str = Field(..., min_length=1)

    @classmethod
    def from_raw(
        cls, raw_keyword: str | None, max_length: int = KEYWORD_MAX_LENGTH
    ) -> "GenerationRequest":
        """
        Trim and validate a user-supplied keyword.

        Raises:
            InvalidKeywordError: keyword is empty after trimming or longer
                than max_length characters
        """
        keyword = (raw_keyword or "").strip()
        if not keyword:
            raise InvalidKeywordError("単語を入れてください。")
        if len(keyword) > max_length:
            raise InvalidKeywordError(f"{max_length}文字以内で入力してください。")
        return cls(keyword=keyword)
