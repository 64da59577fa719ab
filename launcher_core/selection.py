from __future__ import annotations

from launcher_core.errors import EmptyCatalogError
from launcher_core.input_debouncer import NavIntent


class SelectionState:
    """Current catalog index with wraparound in both directions."""

    def __init__(self, size: int, index: int = 0) -> None:
        size = int(size)
        if size < 1:
            raise EmptyCatalogError()
        self._size = size
        self._index = int(index) % size

    @property
    def size(self) -> int:
        return self._size

    @property
    def index(self) -> int:
        return self._index

    def advance(self, intent: NavIntent) -> int:
        if intent is NavIntent.NEXT:
            self._index = (self._index + 1) % self._size
        elif intent is NavIntent.PREVIOUS:
            # Operand stays non-negative so the result never depends on modulo sign rules.
            self._index = (self._index - 1 + self._size) % self._size
        return self._index
