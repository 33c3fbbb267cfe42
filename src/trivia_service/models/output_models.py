"""
Output models returned by the keyword analytics repository.
"""

from pydantic import BaseModel, Field


class RankedKeyword(BaseModel):
    """One row of a keyword ranking."""

    keyword: str
    count: int = Field(..., ge=0)
    genre: str


class DailyCount(BaseModel):
    """Number of recorded keywords for one calendar day."""

    date: str = Field(..., description="YYYY-MM-DD in the analytics timezone")
    count: int = Field(default=0, ge=0)
