"""Database management for cryptonews."""

from .annotations import AnnotationStorage
from .articles import ArticleStorage
from .connection import get_connection, get_connection_pool
from .init import init_database, validate_connection
from .summaries import SummaryStorage

__all__ = [
    "ArticleStorage",
    "AnnotationStorage",
    "SummaryStorage",
    "get_connection",
    "get_connection_pool",
    "init_database",
    "validate_connection",
]
