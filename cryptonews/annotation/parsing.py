"""Best-effort JSON extraction from free-form model output."""

import json
import math
import re
from typing import Any, Callable, Dict, Iterator, List, Optional

from ..models import Sentiment
from .models import AnnotationResult

GREEDY_OBJECT = re.compile(r"\{[\s\S]*\}")
FENCED_JSON = re.compile(r"```json\s*(\{[\s\S]*?\})\s*```")
LAZY_OBJECT = re.compile(r"\{[\s\S]*?\}")

CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f-\x9f]")
WHITESPACE = re.compile(r"\s+")
LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

_DECODER = json.JSONDecoder()


def _greedy(text: str) -> Optional[str]:
    match = GREEDY_OBJECT.search(text)
    return match.group(0) if match else None


def _fenced(text: str) -> Optional[str]:
    match = FENCED_JSON.search(text)
    return match.group(1) if match else None


def _lazy(text: str) -> Optional[str]:
    match = LAZY_OBJECT.search(text)
    return match.group(0) if match else None


def _raw_decode(text: str) -> Optional[str]:
    flat = sanitize_json_text(text)
    start = flat.find("{")
    while start >= 0:
        try:
            data, end = _DECODER.raw_decode(flat, start)
        except json.JSONDecodeError:
            data = None
        if isinstance(data, dict):
            return flat[start:end]
        start = flat.find("{", start + 1)
    return None


# Tried in order; the first candidate that parses into an object wins.
EXTRACTION_STRATEGIES: List[Callable[[str], Optional[str]]] = [_greedy, _fenced, _lazy, _raw_decode]


def sanitize_json_text(text: str) -> str:
    """Flatten a JSON candidate so stray control characters don't break parsing."""
    text = text.replace("\r", "").replace("\n", " ").replace("\t", " ")
    text = CONTROL_CHARS.sub("", text)
    return WHITESPACE.sub(" ", text).strip()


def _candidates(text: str) -> Iterator[str]:
    for strategy in EXTRACTION_STRATEGIES:
        candidate = strategy(text)
        if candidate:
            yield candidate


def extract_json_object(text: Optional[str]) -> Optional[Dict[str, Any]]:
    """
    Pull the first JSON object out of a model response.

    Args:
        text: Raw response text, possibly with preamble or code fences

    Returns:
        Parsed object, or None if no strategy produced one
    """
    if not text:
        return None

    for candidate in _candidates(text):
        try:
            data = json.loads(sanitize_json_text(candidate))
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            return data
    return None


def clamp_score(value: Any, default: int) -> int:
    """Coerce a score to an int in [0, 100]; unusable values give ``default``."""
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        score = value
    elif isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return default
        score = int(value)
    elif isinstance(value, str):
        match = LEADING_INT.match(value)
        if not match:
            return default
        score = int(match.group(1))
    else:
        return default
    return min(100, max(0, score))


def parse_sentiment(value: Any, default: Sentiment = Sentiment.NEUTRAL) -> Sentiment:
    if not isinstance(value, str):
        return default
    normalized = value.strip().lower()
    for sentiment in Sentiment:
        if sentiment.value.lower() == normalized:
            return sentiment
    return default


def _string_list(value: Any, default: List[str]) -> List[str]:
    if not isinstance(value, list):
        return list(default)
    return [str(item).strip() for item in value if item is not None and str(item).strip()]


def parse_annotation(text: Optional[str]) -> Optional[AnnotationResult]:
    """
    Parse a model response into an annotation, filling gaps with defaults.

    Returns:
        AnnotationResult, or None when the response holds no JSON object
    """
    data = extract_json_object(text)
    if data is None:
        return None

    defaults = AnnotationResult()
    summary = data.get("summary")

    return AnnotationResult(
        summary=summary.strip() if isinstance(summary, str) and summary.strip() else defaults.summary,
        sentiment=parse_sentiment(data.get("sentiment"), defaults.sentiment),
        trending_score=clamp_score(data.get("trending_score"), defaults.trending_score),
        key_points=_string_list(data.get("key_points"), defaults.key_points),
        related_cryptos=_string_list(data.get("related_cryptos"), defaults.related_cryptos),
        market_impact_score=clamp_score(data.get("market_impact_score"), defaults.market_impact_score),
    )
