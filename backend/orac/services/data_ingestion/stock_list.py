"""
Stock List

Common symbols with display names for search/autocomplete.
"""

COMMON_SYMBOLS = [
    {"symbol": "IBM", "name": "International Business Machines Corporation"},
    {"symbol": "AAPL", "name": "Apple Inc."},
    {"symbol": "GOOGL", "name": "Alphabet Inc."},
    {"symbol": "MSFT", "name": "Microsoft Corporation"},
    {"symbol": "TSLA", "name": "Tesla, Inc."},
    {"symbol": "AMZN", "name": "Amazon.com, Inc."},
    {"symbol": "META", "name": "Meta Platforms, Inc."},
    {"symbol": "NVDA", "name": "NVIDIA Corporation"},
]


def search_symbols(query: str = "", limit: int = 10) -> list[dict]:
    """
    Search symbols by symbol or name.

    Args:
        query: Search query (case-insensitive partial match); empty lists all
        limit: Maximum results to return

    Returns:
        Matching entries, exact symbol match first, then symbol prefix,
        then any other substring match
    """
    query = query.strip().lower()

    if not query:
        return COMMON_SYMBOLS[:limit]

    exact = [s for s in COMMON_SYMBOLS if s["symbol"].lower() == query]
    prefix = [
        s for s in COMMON_SYMBOLS
        if s["symbol"].lower().startswith(query) and s not in exact
    ]
    contains = [
        s for s in COMMON_SYMBOLS
        if (query in s["symbol"].lower() or query in s["name"].lower())
        and s not in exact
        and s not in prefix
    ]
    return (exact + prefix + contains)[:limit]
