"""Configuration management for cryptonews."""

from .loader import Config, load_config, load_sources, save_config, save_sources
from .models import (
    AnnotationConfig,
    ConfigModel,
    FeedFieldMap,
    IngestionConfig,
    LLMConfig,
    PostgresConfig,
    SourceConfig,
)

__all__ = [
    "Config",
    "ConfigModel",
    "PostgresConfig",
    "LLMConfig",
    "IngestionConfig",
    "AnnotationConfig",
    "SourceConfig",
    "FeedFieldMap",
    "load_config",
    "load_sources",
    "save_config",
    "save_sources",
]
