"""Built-in crypto news sources."""

from typing import List, Optional, Sequence

from ..config.models import FeedFieldMap, SourceConfig
from ..errors import InvalidRequestError

DEFAULT_SOURCES: Sequence[SourceConfig] = (
    SourceConfig(
        name="CoinDesk",
        url="https://www.coindesk.com/arc/outboundfeeds/rss/",
        fields=FeedFieldMap(rich_content=False, author_field="author", category_field="tags"),
    ),
    SourceConfig(
        name="Cointelegraph",
        url="https://cointelegraph.com/rss",
        fields=FeedFieldMap(rich_content=False, author_field="author", category_field="category"),
    ),
    SourceConfig(
        name="CoinGape",
        url="https://coingape.com/feed/",
        fields=FeedFieldMap(rich_content=True, content_field="content:encoded"),
    ),
    SourceConfig(
        name="Bitcoin Magazine",
        url="https://bitcoinmagazine.com/.rss/full/",
        fields=FeedFieldMap(rich_content=True, content_field="content:encoded", category_field="category"),
    ),
    SourceConfig(
        name="CryptoSlate",
        url="https://cryptoslate.com/feed/",
        fields=FeedFieldMap(rich_content=True, content_field="content:encoded"),
    ),
)

ALL_SOURCES = "all"


def select_sources(sources: Sequence[SourceConfig], name: Optional[str] = None) -> List[SourceConfig]:
    """
    Pick the sources a run should fetch.

    Returns every enabled source when ``name`` is empty or ``"all"``,
    otherwise the enabled source with that name.
    """
    if not name or name == ALL_SOURCES:
        return [s for s in sources if s.enabled]

    selected = [s for s in sources if s.name == name and s.enabled]
    if not selected:
        raise InvalidRequestError(f"Source not found or disabled: {name}")
    return selected
