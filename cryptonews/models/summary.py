"""Batch summary covering several articles at once."""

from typing import Optional

from pydantic import Field

from .annotation import Sentiment
from .base import DBModel


class BatchSummary(DBModel):
    """One summary of a batch of articles selected together."""

    all_select: int = Field(..., description="Number of articles in the batch", ge=1)
    all_content: str = Field(..., description="Concatenated batch content (capped)")
    all_source: str = Field(..., description="Comma-joined distinct sources")
    all_category: Optional[str] = Field(None, description="Comma-joined distinct categories")
    name_crypto: Optional[str] = Field(None, description="Primary crypto tag of the batch")
    summary: str = Field(..., description="Generated summary")
    source: str = Field(..., description="Primary source")
    sentiment: Sentiment = Field(Sentiment.NEUTRAL)
    trending_score: int = Field(50, ge=0, le=100)
