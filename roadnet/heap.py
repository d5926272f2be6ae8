"""Priority queue with decrease-key used by the routing searches."""

from __future__ import annotations

import heapq
from dataclasses import dataclass


@dataclass(frozen=True)
class HeapNode:
    """A node in the heap; ordered by value, then by index."""

    index: int
    value: float

    def __lt__(self, other: HeapNode) -> bool:
        return (self.value, self.index) < (other.value, other.index)


class Heap:
    """Min-heap of node indices keyed by a value, supporting decrease_key."""

    def __init__(self) -> None:
        self._entries: list[tuple[float, int]] = []
        self._live: dict[int, float] = {}

    def _discard_stale(self) -> None:
        entries = self._entries
        while entries:
            value, index = entries[0]
            if self._live.get(index) == value:
                return
            heapq.heappop(entries)

    def push(self, index: int, value: float) -> None:
        """Insert a node with the given value."""
        self._live[index] = value
        heapq.heappush(self._entries, (value, index))

    def pop(self) -> HeapNode:
        """Remove and return the node with the smallest value."""
        self._discard_stale()
        if not self._entries:
            raise IndexError("pop from an empty heap")
        value, index = heapq.heappop(self._entries)
        del self._live[index]
        return HeapNode(index, value)

    def top(self) -> HeapNode:
        """Return the node with the smallest value without removing it."""
        self._discard_stale()
        if not self._entries:
            raise IndexError("top of an empty heap")
        value, index = self._entries[0]
        return HeapNode(index, value)

    def decrease_key(self, index: int, value: float) -> None:
        """Set a new value for a node that is in the heap."""
        if index not in self._live:
            raise KeyError(index)
        self._live[index] = value
        heapq.heappush(self._entries, (value, index))

    def __len__(self) -> int:
        return len(self._live)

    def __bool__(self) -> bool:
        return bool(self._live)

    def __contains__(self, index: object) -> bool:
        return index in self._live