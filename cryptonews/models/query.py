"""Filter parameters for read-only listings."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

MAX_PAGE_SIZE = 100


class ArticleQuery(BaseModel):
    """Article listing filters."""

    source: Optional[str] = Field(None, description="Exact source name, or 'all'")
    tag: Optional[str] = Field(None, description="Crypto tag, 'others' for untagged, or 'all'")
    since: Optional[datetime] = None
    until: Optional[datetime] = None
    page: int = Field(1, ge=1)
    limit: int = Field(20, ge=1, le=MAX_PAGE_SIZE)
    sort_by: Literal["created_at", "pub_date", "title", "source"] = "created_at"
    order: Literal["asc", "desc"] = "desc"

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class AnnotationQuery(BaseModel):
    """Annotation listing filters."""

    summary_type: Optional[str] = None
    source: Optional[str] = None
    crypto: Optional[str] = Field(None, description="Symbol that must appear in related_cryptos")
    since: Optional[datetime] = None
    until: Optional[datetime] = None
    page: int = Field(1, ge=1)
    limit: int = Field(20, ge=1, le=MAX_PAGE_SIZE)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit
