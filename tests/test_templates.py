"""Tests for cryptonews.annotation.templates."""

import pytest

from cryptonews.annotation.templates import SummaryType, render_batch_prompt
from cryptonews.errors import InvalidRequestError

CONTRACT_KEYS = (
    "summary",
    "sentiment",
    "trending_score",
    "key_points",
    "related_cryptos",
    "market_impact_score",
)


class TestSummaryType:
    def test_values_are_display_names(self) -> None:
        assert SummaryType.SENTIMENT_BASED.value == "Sentiment-Based Summarization"
        assert len(list(SummaryType)) == 5

    @pytest.mark.parametrize("summary_type", list(SummaryType))
    def test_every_template_declares_the_same_contract(self, summary_type) -> None:
        for key in CONTRACT_KEYS:
            assert f'"{key}"' in summary_type.template
        assert summary_type.template.count("{content}") == 1

    def test_parse_by_value(self) -> None:
        assert SummaryType.parse("Impact-Oriented Summarization") is SummaryType.IMPACT_ORIENTED

    def test_parse_by_member_name(self) -> None:
        assert SummaryType.parse("ACTIONABLE_INSIGHTS") is SummaryType.ACTIONABLE_INSIGHTS
        assert SummaryType.parse("sentiment-based") is SummaryType.SENTIMENT_BASED

    def test_parse_rejects_unknown(self) -> None:
        with pytest.raises(InvalidRequestError):
            SummaryType.parse("Poetic Summarization")


class TestRender:
    def test_render_is_deterministic(self) -> None:
        first = SummaryType.EXTRACTIVE.render("T", "CoinDesk", "Body")
        second = SummaryType.EXTRACTIVE.render("T", "CoinDesk", "Body")
        assert first == second

    def test_render_fills_article_and_language(self) -> None:
        prompt = SummaryType.ABSTRACTIVE.render("ETH ETF", "CoinDesk", "Approved today.")
        assert "Title: ETH ETF\nSource: CoinDesk\nContent: Approved today." in prompt
        assert "Respond in Thai language" in prompt
        assert "{content}" not in prompt
        assert "{language}" not in prompt

    def test_render_other_language(self) -> None:
        prompt = SummaryType.SENTIMENT_BASED.render("T", "S", "C", language="English")
        assert "Respond in English language" in prompt
        assert "Thai" not in prompt

    def test_article_text_is_not_substituted_again(self) -> None:
        prompt = SummaryType.EXTRACTIVE.render("T", "S", "literal {language} and {content}")
        assert "literal {language} and {content}" in prompt


class TestBatchPrompt:
    def test_combines_articles(self, make_article) -> None:
        articles = [make_article(1), make_article(2, source="Cointelegraph")]
        prompt = render_batch_prompt(articles)
        assert "You are analyzing 2 crypto news articles." in prompt
        assert "\n\n---\n\n" in prompt
        assert "Source: Cointelegraph" in prompt
        assert "(in Thai language)" in prompt
        assert '"trending_score": 0-100' in prompt
