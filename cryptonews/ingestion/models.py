"""Data models for ingestion."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class FeedItem(BaseModel):
    """Parsed RSS feed item."""

    title: str = Field("", description="Article title")
    link: str = Field("", description="Article URL")
    published: Optional[datetime] = Field(None, description="Publication date")
    description: Optional[str] = Field(None, description="Article description/summary")
    content: Optional[str] = Field(None, description="Best-effort full content")
    author: Optional[str] = Field(None, description="Best-effort author")
    category: Optional[str] = Field(None, description="Best-effort category")
    source_name: str = Field(..., description="Source name")


class FeedResult(BaseModel):
    """Result of fetching an RSS feed."""

    source_name: str = Field(..., description="Source name")
    source_url: str = Field(..., description="RSS feed URL")
    success: bool = Field(..., description="Whether fetch was successful")
    items: List[FeedItem] = Field(default_factory=list, description="Parsed feed items")
    error: Optional[str] = Field(None, description="Error message if failed")
    item_count: int = Field(0, description="Number of items fetched")


class SourceResult(BaseModel):
    """Ingestion outcome for one source."""

    source: str = Field(..., description="Source name")
    processed: int = Field(0, description="Items with a title and link")
    new: int = Field(0, description="Items inserted")
    existing: int = Field(0, description="Items already stored")
    failed: int = Field(0, description="Items whose storage failed")
    error: Optional[str] = Field(None, description="Why the whole source failed")


class IngestionReport(BaseModel):
    """Aggregate ingestion outcome."""

    success: bool = True
    processed: int = 0
    new: int = 0
    results: List[SourceResult] = Field(default_factory=list)
    timestamp: datetime
