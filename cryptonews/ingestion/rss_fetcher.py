"""RSS feed fetcher with per-source field extraction."""

import asyncio
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import feedparser
import httpx
import pendulum
from lxml import etree
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..config import FeedFieldMap, SourceConfig
from .models import FeedItem, FeedResult
from .normalize import html_to_text

console = Console()

ATOM_NS = "http://www.w3.org/2005/Atom"

# Used when the feed document does not declare the prefix on its root.
KNOWN_NAMESPACES = {
    "content": "http://purl.org/rss/1.0/modules/content/",
    "dc": "http://purl.org/dc/elements/1.1/",
    "media": "http://search.yahoo.com/mrss/",
    "atom": ATOM_NS,
}


def _parse_date(entry: Dict[str, Any]) -> Optional[datetime]:
    """Read the entry's publication date as an aware UTC datetime."""
    for key in ("published_parsed", "updated_parsed"):
        parsed = entry.get(key)
        if parsed:
            try:
                return datetime(*parsed[:6], tzinfo=timezone.utc)
            except (TypeError, ValueError):
                continue
    return None


def _entry_text(entry: Dict[str, Any], key: str) -> Optional[str]:
    """Read a feedparser entry field as a single string."""
    value = entry.get(key)

    if isinstance(value, list):
        # e.g. tags: [{"term": "Bitcoin", ...}, ...]
        terms = [v.get("term") for v in value if isinstance(v, dict) and v.get("term")]
        value = terms[0] if terms else None
    elif isinstance(value, dict):
        value = value.get("name") or value.get("term") or value.get("value")

    if not isinstance(value, str):
        return None
    return value.strip() or None


def _standard_content(entry: Dict[str, Any]) -> Optional[str]:
    """Content feedparser exposes without any source-specific help."""
    contents = entry.get("content") or []
    for content in contents:
        value = content.get("value") if isinstance(content, dict) else None
        if value:
            return value
    return None


def _item_link(item: etree._Element) -> Optional[str]:
    """Link of a raw RSS <item> or Atom <entry>."""
    link = item.findtext("link")
    if link and link.strip():
        return link.strip()

    atom_link = item.find(f"{{{ATOM_NS}}}link")
    if atom_link is not None and atom_link.get("href"):
        return atom_link.get("href").strip()
    return None


def extract_raw_field(payload: bytes, field: str) -> Dict[str, str]:
    """
    Read a namespaced element from every item of a raw feed document.

    Args:
        payload: Feed document bytes
        field: Element name as ``prefix:local``, e.g. ``content:encoded``

    Returns:
        Mapping of item link to the element's text
    """
    prefix, _, local = field.partition(":")
    parser = etree.XMLParser(recover=True, resolve_entities=False, no_network=True)

    try:
        root = etree.fromstring(payload, parser=parser)
    except etree.XMLSyntaxError as e:
        console.print(f"[yellow]Could not read raw feed XML: {e}[/yellow]")
        return {}

    if root is None:
        return {}

    namespace = root.nsmap.get(prefix) or KNOWN_NAMESPACES.get(prefix)
    if namespace is None:
        console.print(f"[yellow]Unknown namespace prefix '{prefix}' in field {field}[/yellow]")
        return {}

    qname = f"{{{namespace}}}{local}"
    values = {}
    for item in root.iter("item", f"{{{ATOM_NS}}}entry"):
        link = _item_link(item)
        element = item.find(qname)
        if link and element is not None and element.text:
            values[link] = element.text
    return values


class RSSFetcher:
    """Fetch and parse RSS feeds."""

    def __init__(
        self,
        timeout: float = 30.0,
        user_agent: str = "cryptonews/0.1 (RSS aggregator)",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize RSS fetcher.

        Args:
            timeout: Request timeout in seconds
            user_agent: User-Agent header sent to feed hosts
            transport: Optional httpx transport (tests use a mock transport)
        """
        self.timeout = timeout
        self.user_agent = user_agent
        self.transport = transport

    def parse_feed(self, source: SourceConfig, payload: bytes) -> List[FeedItem]:
        """Turn a feed document into feed items using the source's field map."""
        feed = feedparser.parse(payload)

        if feed.bozo and not feed.entries:
            raise ValueError(f"Invalid RSS feed: {feed.get('bozo_exception')}")

        fields: FeedFieldMap = source.fields
        rich_content: Dict[str, str] = {}
        if fields.rich_content:
            rich_content = extract_raw_field(payload, fields.content_field)

        fetched_at = pendulum.now("UTC")
        items = []
        for entry in feed.entries:
            link = (entry.get("link") or "").strip()
            description = entry.get("summary") or entry.get("description")

            content = None
            if link in rich_content:
                content = html_to_text(rich_content[link])
            if not content:
                content = _standard_content(entry) or description

            items.append(
                FeedItem(
                    title=(entry.get("title") or "").strip(),
                    link=link,
                    published=_parse_date(entry) or fetched_at,
                    description=description,
                    content=content,
                    author=_entry_text(entry, fields.author_field),
                    category=_entry_text(entry, fields.category_field),
                    source_name=source.name,
                )
            )

        return items

    async def fetch_feed(self, source: SourceConfig) -> FeedResult:
        """Fetch and parse a single RSS feed."""
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                headers={"User-Agent": self.user_agent},
                transport=self.transport,
            ) as client:
                response = await client.get(source.url)
                response.raise_for_status()

            items = self.parse_feed(source, response.content)

            return FeedResult(
                source_name=source.name,
                source_url=source.url,
                success=True,
                items=items,
                item_count=len(items),
            )

        except httpx.HTTPStatusError as e:
            error = f"HTTP {e.response.status_code}"
        except httpx.TimeoutException:
            error = "Request timed out"
        except httpx.HTTPError as e:
            error = f"HTTP error: {e}"
        except ValueError as e:
            error = str(e)
        except Exception as e:
            error = f"Unexpected error: {e}"

        console.print(f"[red]Error fetching from {source.name}: {error}[/red]")
        return FeedResult(
            source_name=source.name,
            source_url=source.url,
            success=False,
            error=error,
        )

    async def fetch_all_feeds(self, sources: List[SourceConfig]) -> List[FeedResult]:
        """Fetch enabled feeds one after another."""
        results = []
        for source in sources:
            if source.enabled:
                results.append(await self.fetch_feed(source))
        return results

    def fetch_feed_sync(self, source: SourceConfig) -> FeedResult:
        """Synchronous wrapper for fetch_feed."""
        return asyncio.run(self.fetch_feed(source))

    def fetch_feeds_sync(self, sources: List[SourceConfig]) -> List[FeedResult]:
        """Synchronous wrapper for fetch_all_feeds."""
        return asyncio.run(self.fetch_all_feeds(sources))


def print_feed_summary(results: List[FeedResult]) -> None:
    """Print one row per fetched feed, then the totals."""
    table = Table(title="Feed Check")
    table.add_column("Source", style="cyan")
    table.add_column("Status")
    table.add_column("Items", justify="right")
    table.add_column("Error", style="red")

    for result in results:
        table.add_row(
            result.source_name,
            "[green]ok[/green]" if result.success else "[red]failed[/red]",
            str(result.item_count),
            escape(result.error or ""),
        )

    console.print(table)

    failed = sum(1 for r in results if not r.success)
    total_items = sum(r.item_count for r in results)
    console.print(
        f"{len(results) - failed}/{len(results)} feeds reachable, {total_items} items"
        + (f", [red]{failed} failed[/red]" if failed else "")
    )
