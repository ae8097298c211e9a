"""Content cleanup before storage and model calls."""

import html
import re
from typing import Optional

from lxml import etree
from lxml import html as lxml_html

DEFAULT_MAX_CONTENT_CHARS = 4000

_TAG_RE = re.compile(r"<[^>]*>")
_WHITESPACE_RE = re.compile(r"\s+")


def clean_content(text: Optional[str], max_length: Optional[int] = DEFAULT_MAX_CONTENT_CHARS) -> str:
    """Strip markup, collapse whitespace and cap the length."""
    if not text:
        return ""

    cleaned = _TAG_RE.sub(" ", text)
    cleaned = html.unescape(cleaned)
    cleaned = _WHITESPACE_RE.sub(" ", cleaned).strip()

    if max_length is not None:
        cleaned = cleaned[:max_length].rstrip()
    return cleaned


def html_to_text(fragment: Optional[str]) -> str:
    """Convert an HTML fragment from a feed into plain text."""
    if not fragment or not fragment.strip():
        return ""

    try:
        tree = lxml_html.fragment_fromstring(fragment, create_parent="div")
    except (etree.ParserError, ValueError):
        return clean_content(fragment, max_length=None)

    for element in tree.xpath(".//script|.//style"):
        element.drop_tree()

    lines = [line.strip() for line in tree.text_content().splitlines() if line.strip()]
    return "\n".join(lines)
