"""Article model for ingested feed items."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from .base import DBModel


class Article(DBModel):
    """Article model."""

    title: str = Field(..., description="Article title")
    url: str = Field(..., description="Canonical URL, unique")
    content: str = Field("", description="Normalized article text")
    description: Optional[str] = Field(None, description="Feed description")
    source: str = Field(..., description="Source name")
    pub_date: Optional[datetime] = Field(None, description="Publication timestamp")
    category: Optional[str] = Field(None, description="Feed category")
    name_category: Optional[str] = Field(None, description="Comma-joined crypto tags")
    creator: Optional[str] = Field(None, description="Author")

    @property
    def tags(self) -> List[str]:
        """Crypto tags as a list."""
        if not self.name_category:
            return []
        return [tag.strip() for tag in self.name_category.split(",") if tag.strip()]
