"""Random play order over a collection that keeps growing."""

from __future__ import annotations

import random


class IncrementalShuffle:
    """Fisher-Yates play order that accepts new indices mid-playback.

    ``order`` is a permutation of ``range(len(order))`` and ``position`` is
    the cursor of the entry currently on screen. Entries at or before the
    cursor are never moved by :meth:`extend`.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()
        self._order: list[int] = []
        self._position = 0

    @property
    def order(self) -> tuple[int, ...]:
        return tuple(self._order)

    @property
    def position(self) -> int:
        return self._position

    @property
    def current(self) -> int | None:
        if not self._order:
            return None
        return self._order[self._position]

    @property
    def at_end(self) -> bool:
        return self._position + 1 >= len(self._order)

    def __len__(self) -> int:
        return len(self._order)

    def clear(self) -> None:
        self._order = []
        self._position = 0

    def initialize(self, count: int, pinned: int = 0) -> None:
        """Shuffle ``range(count)`` keeping ``pinned`` at the first position."""
        order = list(range(count))
        if count and 0 <= pinned < count:
            order[0], order[pinned] = order[pinned], order[0]
        self._fisher_yates(order, start=1)
        self._order = order
        self._position = 0

    def extend(self, count: int) -> None:
        """Mix indices ``len(order)..count-1`` into the not-yet-played part."""
        for index in range(len(self._order), count):
            insert_at = self._rng.randint(self._position + 1, len(self._order))
            self._order.insert(insert_at, index)

    def advance(self) -> int | None:
        """Move the cursor forward; None when the order is exhausted."""
        if self.at_end:
            return None
        self._position += 1
        return self._order[self._position]

    def reshuffle(self, avoid_first: int | None = None) -> int | None:
        """Start a fresh full permutation and return its first entry."""
        if not self._order:
            return None
        order = list(range(len(self._order)))
        self._fisher_yates(order, start=0)
        if avoid_first is not None and len(order) > 1 and order[0] == avoid_first:
            swap_with = self._rng.randint(1, len(order) - 1)
            order[0], order[swap_with] = order[swap_with], order[0]
        self._order = order
        self._position = 0
        return order[0]

    def locate(self, index: int) -> int | None:
        try:
            return self._order.index(index)
        except ValueError:
            return None

    def move_to(self, position: int) -> None:
        if not self._order:
            self._position = 0
            return
        self._position = min(max(position, 0), len(self._order) - 1)

    def _fisher_yates(self, values: list[int], start: int) -> None:
        for i in range(len(values) - 1, start, -1):
            j = self._rng.randint(start, i)
            values[i], values[j] = values[j], values[i]
