"""
The set of emoji symbols currently being counted.
"""

from typing import Iterable, Iterator


class TrackingSet:
    """
    Insertion-ordered set of tracked symbols.

    Any text token is accepted; there is no emoji validation. Backed by a
    dict so listing order is the order symbols were first added.
    """

    def __init__(self, symbols: Iterable[str] = ()):
        self._symbols: dict[str, None] = {}
        for symbol in symbols:
            self.add(symbol)

    def add(self, symbol: str) -> None:
        self._symbols.setdefault(symbol, None)

    def remove(self, symbol: str) -> None:
        self._symbols.pop(symbol, None)

    def list(self) -> list[str]:
        return list(self._symbols)

    def contains(self, symbol: str) -> bool:
        return symbol in self._symbols

    def is_empty(self) -> bool:
        return not self._symbols

    def __contains__(self, symbol: str) -> bool:
        return self.contains(symbol)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._symbols))

    def __len__(self) -> int:
        return len(self._symbols)

    def __repr__(self) -> str:
        return f"TrackingSet({self.list()!r})"
