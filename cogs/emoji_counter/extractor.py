"""
Emoji occurrence counting for the Emoji Counter.

Counts how many times each tracked symbol appears in a message body.
"""

from typing import Iterable


def count_symbol(text: str, symbol: str) -> int:
    """
    Count non-overlapping literal occurrences of a symbol in a text.

    Args:
        text: The message body
        symbol: The exact symbol text to look for

    Returns:
        Number of occurrences (0 for an empty symbol)
    """
    if not symbol:
        return 0
    return text.count(symbol)


def count_occurrences(text: str, tracked: Iterable[str]) -> dict[str, int]:
    """
    Count every tracked symbol in a message.

    This is a plain substring search, not a grapheme-aware scan, so a symbol
    contained in another tracked symbol is counted on its own as well.

    Args:
        text: The message body to scan
        tracked: The tracking set (any iterable of symbols)

    Returns:
        Sparse mapping of symbol -> count; symbols that do not appear are
        left out. Empty when nothing is tracked.
    """
    symbols = list(tracked)
    if not symbols or not text:
        return {}

    occurrences: dict[str, int] = {}
    for symbol in symbols:
        count = count_symbol(text, symbol)
        if count > 0:
            occurrences[symbol] = count

    return occurrences
