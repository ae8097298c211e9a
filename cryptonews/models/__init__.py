"""Data models for cryptonews."""

from .annotation import AnnotationRecord, Sentiment
from .article import Article
from .query import AnnotationQuery, ArticleQuery
from .summary import BatchSummary

__all__ = [
    "Article",
    "AnnotationRecord",
    "AnnotationQuery",
    "ArticleQuery",
    "BatchSummary",
    "Sentiment",
]
