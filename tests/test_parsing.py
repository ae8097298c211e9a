"""Tests for cryptonews.annotation.parsing."""

import pytest

from cryptonews.annotation.models import DEFAULT_SCORE, DEFAULT_SUMMARY
from cryptonews.annotation.parsing import (
    clamp_score,
    extract_json_object,
    parse_annotation,
    sanitize_json_text,
)
from cryptonews.models import Sentiment

FULL = (
    '{"summary": "ok", "sentiment": "Positive", "trending_score": 80, '
    '"key_points": ["a", "b"], "related_cryptos": ["BTC"], "market_impact_score": 70}'
)


class TestExtractJsonObject:
    def test_fenced_block_with_preamble(self) -> None:
        text = f"Here is the result:\n```json\n{FULL}\n```"
        data = extract_json_object(text)
        assert data is not None
        assert data["summary"] == "ok"
        assert data["related_cryptos"] == ["BTC"]

    def test_raw_newlines_inside_strings(self) -> None:
        data = extract_json_object('{"summary": "line one\nline two"}')
        assert data == {"summary": "line one line two"}

    def test_falls_back_to_first_object(self) -> None:
        data = extract_json_object('A {"summary": "x"} B {"bad": } C')
        assert data == {"summary": "x"}

    def test_nested_object_followed_by_stray_brace(self) -> None:
        data = extract_json_object('{"summary": "x", "meta": {"a": 1}} trailing }')
        assert data == {"summary": "x", "meta": {"a": 1}}

    def test_no_object(self) -> None:
        assert extract_json_object("I cannot help with that.") is None
        assert extract_json_object("") is None
        assert extract_json_object(None) is None

    def test_sanitize_removes_control_characters(self) -> None:
        assert sanitize_json_text('{"a":\t"b\x07"\r\n}') == '{"a": "b" }'


class TestClampScore:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (75, 75),
            (150, 100),
            (-5, 0),
            (0, 0),
            ("85", 85),
            ("72.5", 72),
            (72.9, 72),
            (True, DEFAULT_SCORE),
            (None, DEFAULT_SCORE),
            ("high", DEFAULT_SCORE),
            ([80], DEFAULT_SCORE),
        ],
    )
    def test_coercion(self, value, expected) -> None:
        assert clamp_score(value, DEFAULT_SCORE) == expected


class TestParseAnnotation:
    def test_full_response(self) -> None:
        result = parse_annotation(f"Here is the result:\n```json\n{FULL}\n```")
        assert result is not None
        assert result.summary == "ok"
        assert result.sentiment == Sentiment.POSITIVE
        assert result.trending_score == 80
        assert result.key_points == ["a", "b"]
        assert result.related_cryptos == ["BTC"]
        assert result.market_impact_score == 70

    def test_missing_fields_use_defaults(self) -> None:
        result = parse_annotation('{"sentiment": "negative", "trending_score": 999}')
        assert result is not None
        assert result.summary == DEFAULT_SUMMARY
        assert result.sentiment == Sentiment.NEGATIVE
        assert result.trending_score == 100
        assert result.key_points == []
        assert result.related_cryptos == []
        assert result.market_impact_score == DEFAULT_SCORE

    def test_invalid_types_use_defaults(self) -> None:
        result = parse_annotation(
            '{"summary": "", "sentiment": "bullish", "key_points": "not a list", "related_cryptos": null}'
        )
        assert result is not None
        assert result.summary == DEFAULT_SUMMARY
        assert result.sentiment == Sentiment.NEUTRAL
        assert result.key_points == []
        assert result.related_cryptos == []

    def test_no_json_returns_none(self) -> None:
        assert parse_annotation("Sorry, the article could not be analyzed.") is None
