"""Crypto ticker extraction from headlines."""

from typing import Dict, List, Optional, Tuple

MAX_TAGS = 3

# Matched case-insensitively as substrings; ties at one title position keep this order.
CRYPTO_KEYWORDS: Tuple[str, ...] = (
    "BTC", "Bitcoin", "ETH", "Ethereum", "ADA", "Cardano",
    "SOL", "Solana", "DOGE", "Dogecoin", "XRP", "Ripple",
    "DOT", "Polkadot", "MATIC", "Polygon", "AVAX", "Avalanche",
    "LINK", "Chainlink", "UNI", "Uniswap", "LTC", "Litecoin",
    "AI16Z", "HYPE", "MOVE", "BIO", "VINE", "ONDO", "XLM", "Stellar",
    "AIXBT", "PNUT", "SUSHI", "BAT", "WIF", "EIGEN", "RENDER", "MORPHO",
    "TRX", "TRON", "OP", "Optimism", "LDO", "Lido", "KSM", "Kusama",
    "SUI", "ARB", "Arbitrum", "NEAR", "WLD", "Worldcoin", "PYTH", "TON",
)

NAME_TO_SYMBOL: Dict[str, str] = {
    "Bitcoin": "BTC",
    "Ethereum": "ETH",
    "Cardano": "ADA",
    "Solana": "SOL",
    "Dogecoin": "DOGE",
    "Ripple": "XRP",
    "Polkadot": "DOT",
    "Polygon": "MATIC",
    "Avalanche": "AVAX",
    "Chainlink": "LINK",
    "Uniswap": "UNI",
    "Litecoin": "LTC",
    "Stellar": "XLM",
    "TRON": "TRX",
    "Optimism": "OP",
    "Lido": "LDO",
    "Kusama": "KSM",
    "Arbitrum": "ARB",
    "Worldcoin": "WLD",
}

MAX_PASSTHROUGH_LENGTH = 6


def _symbol_for(keyword: str) -> str:
    """Map a keyword to its ticker, or '' if it has none."""
    if keyword in NAME_TO_SYMBOL:
        return NAME_TO_SYMBOL[keyword]
    if len(keyword) <= MAX_PASSTHROUGH_LENGTH:
        return keyword
    return ""


def extract_crypto_tags(title: str, max_tags: int = MAX_TAGS) -> List[str]:
    """
    Extract crypto ticker symbols mentioned in a title.

    Args:
        title: Headline text
        max_tags: Maximum number of symbols to return

    Returns:
        Distinct symbols ordered by where they first appear in the title
    """
    if not title:
        return []

    upper_title = title.upper()
    matches = []
    for order, keyword in enumerate(CRYPTO_KEYWORDS):
        position = upper_title.find(keyword.upper())
        if position < 0:
            continue
        symbol = _symbol_for(keyword)
        if symbol:
            matches.append((position, order, symbol))

    tags: List[str] = []
    for _, _, symbol in sorted(matches):
        if symbol not in tags:
            tags.append(symbol)

    return tags[:max_tags]


def join_tags(tags: List[str]) -> Optional[str]:
    """Comma-join tags for storage, None when there are none."""
    return ",".join(tags) if tags else None
