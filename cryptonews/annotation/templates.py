"""Prompt templates for per-article and batch annotation."""

from enum import Enum
from typing import Dict, Sequence

from ..errors import InvalidRequestError
from ..models import Article

CONTENT_SLOT = "{content}"
LANGUAGE_SLOT = "{language}"
DEFAULT_LANGUAGE = "Thai"


def _json_contract(summary_hint: str, points_hint: str) -> str:
    return f"""JSON format:
{{
  "summary": "{summary_hint} in {LANGUAGE_SLOT}",
  "sentiment": "sentiment",
  "trending_score": number,
  "key_points": ["{points_hint}1", "{points_hint}2", "{points_hint}3"],
  "related_cryptos": ["crypto1", "crypto2"],
  "market_impact_score": number
}}"""


class SummaryType(str, Enum):
    """The five annotation framings; values are the display names stored on records."""

    EXTRACTIVE = "Extractive Summarization"
    ABSTRACTIVE = "Abstractive Summarization"
    SENTIMENT_BASED = "Sentiment-Based Summarization"
    IMPACT_ORIENTED = "Impact-Oriented Summarization"
    ACTIONABLE_INSIGHTS = "Actionable Insights Summarization"

    @classmethod
    def parse(cls, key: str) -> "SummaryType":
        """
        Resolve a summary type from its display name or member name.

        Raises:
            InvalidRequestError: If ``key`` names no template
        """
        if isinstance(key, cls):
            return key
        normalized = (key or "").strip()
        for member in cls:
            if normalized == member.value or normalized.upper().replace("-", "_") == member.name:
                return member
        raise InvalidRequestError(f"Invalid summary type: {key}")

    @property
    def template(self) -> str:
        return SUMMARY_TEMPLATES[self]

    def render(self, title: str, source: str, content: str, language: str = DEFAULT_LANGUAGE) -> str:
        """Fill the template with one article."""
        article_block = f"Title: {title}\nSource: {source}\nContent: {content}"
        # Language first so article text containing "{language}" is left alone.
        return self.template.replace(LANGUAGE_SLOT, language).replace(CONTENT_SLOT, article_block, 1)

    def render_article(self, article: Article, language: str = DEFAULT_LANGUAGE) -> str:
        return self.render(article.title, article.source, article.content, language)


SUMMARY_TEMPLATES: Dict[SummaryType, str] = {
    SummaryType.EXTRACTIVE: f"""You are an expert news analyst. Perform EXTRACTIVE summarization by selecting and combining the most important sentences directly from the article without modification.

Instructions:
1. Extract 3-5 key sentences directly from the original text
2. Maintain original wording and structure
3. Focus on facts, figures, and concrete information
4. Present in logical order
5. Respond in {LANGUAGE_SLOT} language

Article to analyze:
{CONTENT_SLOT}

Also provide:
- Sentiment: Positive, Neutral, or Negative
- Trending Score: 0-100 based on market impact
- Key Points: 3-5 important facts
- Related Cryptos: mentioned cryptocurrencies
- Market Impact Score: 0-100

{_json_contract("extractive summary", "point")}""",
    SummaryType.ABSTRACTIVE: f"""You are an expert financial news writer. Create ABSTRACTIVE summarization by rewriting and restructuring information in your own words while preserving meaning.

Instructions:
1. Rewrite content using new sentence structures
2. Synthesize and interpret information
3. Create coherent narrative flow
4. Add context and implications
5. Respond in {LANGUAGE_SLOT} language

Article to analyze:
{CONTENT_SLOT}

Also provide:
- Sentiment: Positive, Neutral, or Negative
- Trending Score: 0-100 based on market impact
- Key Points: 3-5 important interpretations
- Related Cryptos: mentioned cryptocurrencies
- Market Impact Score: 0-100

{_json_contract("abstractive summary", "interpretation")}""",
    SummaryType.SENTIMENT_BASED: f"""You are a market sentiment analyst. Focus on SENTIMENT ANALYSIS and emotional indicators in the news.

Instructions:
1. Analyze emotional tone and market sentiment
2. Identify positive/negative indicators
3. Assess market psychology impact
4. Highlight sentiment-driving factors
5. Respond in {LANGUAGE_SLOT} language

Article to analyze:
{CONTENT_SLOT}

Also provide:
- Sentiment: Positive, Neutral, or Negative (primary focus)
- Trending Score: 0-100 based on sentiment strength
- Key Points: 3-5 sentiment indicators
- Related Cryptos: mentioned cryptocurrencies
- Market Impact Score: 0-100 based on sentiment impact

{_json_contract("sentiment-focused summary", "sentiment")}""",
    SummaryType.IMPACT_ORIENTED: f"""You are a market impact specialist. Focus on MARKET IMPACT and potential consequences of the news.

Instructions:
1. Analyze potential market effects
2. Assess short and long-term implications
3. Identify affected sectors/projects
4. Evaluate regulatory/adoption impact
5. Respond in {LANGUAGE_SLOT} language

Article to analyze:
{CONTENT_SLOT}

Also provide:
- Sentiment: Positive, Neutral, or Negative
- Trending Score: 0-100 based on potential impact
- Key Points: 3-5 impact factors
- Related Cryptos: affected cryptocurrencies
- Market Impact Score: 0-100 (primary focus)

{_json_contract("impact-focused summary", "impact")}""",
    SummaryType.ACTIONABLE_INSIGHTS: f"""You are an investment advisor. Provide ACTIONABLE INSIGHTS and recommendations based on the news.

Instructions:
1. Extract actionable investment insights
2. Provide strategic recommendations
3. Identify opportunities and risks
4. Suggest next steps for investors
5. Respond in {LANGUAGE_SLOT} language

Article to analyze:
{CONTENT_SLOT}

Also provide:
- Sentiment: Positive, Neutral, or Negative
- Trending Score: 0-100 based on actionability
- Key Points: 3-5 actionable insights
- Related Cryptos: relevant for action
- Market Impact Score: 0-100

{_json_contract("actionable insights summary", "insight")}""",
}


BATCH_TEMPLATE = f"""You are analyzing {{count}} crypto news articles.

Please provide:
1. A comprehensive summary combining all articles (in {LANGUAGE_SLOT} language)
2. Overall sentiment: Positive, Neutral, or Negative
3. Trending score (0-100) based on market impact and relevance

Articles to analyze:
{CONTENT_SLOT}

Focus on:
- Market trends and price movements
- Regulatory developments
- Technology updates
- Major partnerships or adoptions
- Risk factors

Output JSON format:
{{
  "summary": "...",
  "sentiment": "Positive | Neutral | Negative",
  "trending_score": 0-100
}}"""

BATCH_SEPARATOR = "\n\n---\n\n"


def article_block(article: Article) -> str:
    return f"Title: {article.title}\nSource: {article.source}\nContent: {article.content}"


def combine_articles(articles: Sequence[Article]) -> str:
    """Join articles into the block used by batch summaries."""
    return BATCH_SEPARATOR.join(article_block(a) for a in articles)


def render_batch_prompt(articles: Sequence[Article], language: str = DEFAULT_LANGUAGE) -> str:
    """Prompt asking for one summary over a whole batch."""
    prompt = BATCH_TEMPLATE.replace("{count}", str(len(articles)))
    return prompt.replace(LANGUAGE_SLOT, language).replace(CONTENT_SLOT, combine_articles(articles), 1)
