"""AI annotation of stored articles."""

from .annotator import ArticleAnnotator, build_record, validate_articles
from .batch import BatchSummarizer
from .llm_provider import (
    GEMINI_BASE_URL,
    LLMProvider,
    MockLLMProvider,
    OpenAIProvider,
    build_llm_provider,
)
from .models import (
    DEFAULT_SCORE,
    DEFAULT_SUMMARY,
    AnnotationItemResult,
    AnnotationReport,
    AnnotationResult,
    default_annotation,
)
from .parsing import clamp_score, extract_json_object, parse_annotation, sanitize_json_text
from .templates import SummaryType, render_batch_prompt

__all__ = [
    "ArticleAnnotator",
    "BatchSummarizer",
    "LLMProvider",
    "OpenAIProvider",
    "MockLLMProvider",
    "GEMINI_BASE_URL",
    "build_llm_provider",
    "AnnotationResult",
    "AnnotationItemResult",
    "AnnotationReport",
    "DEFAULT_SUMMARY",
    "DEFAULT_SCORE",
    "default_annotation",
    "build_record",
    "validate_articles",
    "clamp_score",
    "extract_json_object",
    "parse_annotation",
    "sanitize_json_text",
    "SummaryType",
    "render_batch_prompt",
]
