"""Playback position, history and play order over a growing image list."""

from __future__ import annotations

import logging
import random
from collections import deque
from dataclasses import dataclass
from typing import Iterable

from photoflow.core.models import PlayOrder, SequencerPhase
from photoflow.core.shuffle import IncrementalShuffle

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 100


@dataclass(frozen=True, slots=True)
class PlaybackState:
    """Immutable copy of a sequencer's state."""

    items: tuple[str, ...]
    current_index: int
    is_playing: bool
    scan_complete: bool
    order_mode: PlayOrder
    shuffle_order: tuple[int, ...]
    shuffle_position: int
    play_history: tuple[int, ...]

    @property
    def current_path(self) -> str | None:
        if not self.items:
            return None
        return self.items[self.current_index]


class PlaybackSequencer:
    """Owns the discovered items and decides what is shown next.

    Items are only ever appended. In random mode the play order is an
    :class:`IncrementalShuffle` that new items are mixed into as they
    arrive. Until the scan has finished, reaching the end of the known
    items waits instead of wrapping around.

    Not thread-safe: every call must come from the owning thread.
    """

    def __init__(
        self,
        order_mode: PlayOrder = PlayOrder.SEQUENTIAL,
        *,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        rng: random.Random | None = None,
        is_playing: bool = True,
    ) -> None:
        if history_limit < 1:
            raise ValueError("history_limit must be at least 1")
        self._order_mode = order_mode
        self._history_limit = history_limit
        self._shuffle = IncrementalShuffle(rng)
        self._is_playing = is_playing
        self._items: list[str] = []
        self._current_index = 0
        self._history: deque[int] = deque(maxlen=history_limit)
        self._phase = SequencerPhase.IDLE
        self._total_directories = 0
        self._error_message: str | None = None

    # -- read access --

    @property
    def item_count(self) -> int:
        return len(self._items)

    @property
    def has_items(self) -> bool:
        return bool(self._items)

    def item_at(self, index: int) -> str:
        return self._items[index]

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def current_path(self) -> str | None:
        if not self._items:
            return None
        return self._items[self._current_index]

    @property
    def is_playing(self) -> bool:
        return self._is_playing

    @property
    def order_mode(self) -> PlayOrder:
        return self._order_mode

    @property
    def phase(self) -> SequencerPhase:
        return self._phase

    @property
    def scan_complete(self) -> bool:
        return self._phase is SequencerPhase.COMPLETED

    @property
    def scan_running(self) -> bool:
        return self._phase is SequencerPhase.STREAMING

    @property
    def no_media_found(self) -> bool:
        return self.scan_complete and not self._items

    @property
    def total_directories(self) -> int:
        return self._total_directories

    @property
    def error_message(self) -> str | None:
        return self._error_message

    @property
    def history_limit(self) -> int:
        return self._history_limit

    @property
    def play_history(self) -> tuple[int, ...]:
        return tuple(self._history)

    @property
    def shuffle_order(self) -> tuple[int, ...]:
        return self._shuffle.order

    @property
    def shuffle_position(self) -> int:
        return self._shuffle.position

    def state(self) -> PlaybackState:
        return PlaybackState(
            items=tuple(self._items),
            current_index=self._current_index,
            is_playing=self._is_playing,
            scan_complete=self.scan_complete,
            order_mode=self._order_mode,
            shuffle_order=self._shuffle.order,
            shuffle_position=self._shuffle.position,
            play_history=tuple(self._history),
        )

    # -- scan lifecycle --

    def reset(self) -> None:
        """Drop every item and return to the idle phase."""
        self._items = []
        self._current_index = 0
        self._history.clear()
        self._shuffle.clear()
        self._phase = SequencerPhase.IDLE
        self._total_directories = 0
        self._error_message = None

    def begin_streaming(self) -> None:
        self.reset()
        self._phase = SequencerPhase.STREAMING

    def ingest_batch(self, paths: Iterable[str]) -> bool:
        """Append discovered paths.

        Returns True when this batch made the collection non-empty, which
        is the moment playback can start.
        """
        was_empty = not self._items
        self._items.extend(paths)
        if not self._items:
            return False

        if was_empty:
            self._current_index = 0
            self._history.clear()
            self._history.append(0)
            if self._order_mode is PlayOrder.RANDOM:
                self._shuffle.initialize(len(self._items), pinned=0)
            return True

        if self._order_mode is PlayOrder.RANDOM:
            if len(self._shuffle):
                self._shuffle.extend(len(self._items))
            else:
                self._shuffle.initialize(len(self._items), pinned=self._current_index)
        return False

    def mark_complete(self, total_items: int, total_directories: int) -> None:
        self._phase = SequencerPhase.COMPLETED
        self._total_directories = total_directories
        if total_items != len(self._items):
            logger.warning(
                "scan reported %d items but %d were ingested", total_items, len(self._items)
            )

    def mark_error(self, message: str) -> None:
        self._phase = SequencerPhase.ERRORED
        self._error_message = message

    def mark_cancelled(self) -> None:
        """Stop waiting for more items while keeping what was found."""
        if self._phase is SequencerPhase.STREAMING:
            self._phase = SequencerPhase.IDLE

    def set_total_directories(self, count: int) -> None:
        self._total_directories = max(self._total_directories, count)

    # -- navigation --

    def advance(self) -> bool:
        """Move to the next item. Returns False when nothing changed."""
        if not self._items:
            return False
        if self._order_mode is PlayOrder.RANDOM:
            return self._advance_random()
        return self._advance_sequential()

    def _advance_sequential(self) -> bool:
        next_index = self._current_index + 1
        if next_index >= len(self._items):
            if self.scan_running:
                return False
            next_index = 0
        self._visit(next_index)
        return True

    def _advance_random(self) -> bool:
        if not len(self._shuffle):
            self._shuffle.initialize(len(self._items), pinned=self._current_index)
        next_index = self._shuffle.advance()
        if next_index is None:
            if self.scan_running:
                return False
            next_index = self._shuffle.reshuffle(avoid_first=self._current_index)
            if next_index is None:
                return False
        self._visit(next_index)
        return True

    def retreat(self) -> bool:
        """Move to the previous item. Returns False when nothing changed."""
        if not self._items:
            return False
        if self._order_mode is PlayOrder.RANDOM:
            return self._retreat_random()
        prev_index = self._current_index - 1
        if prev_index < 0:
            prev_index = len(self._items) - 1
        self._visit(prev_index)
        return True

    def _retreat_random(self) -> bool:
        if len(self._history) <= 1:
            return False
        self._history.pop()
        restored = self._history[-1]
        self._current_index = restored
        # Never move the cursor forward: that would skip unshown items.
        located = self._shuffle.locate(restored)
        if located is None or located > self._shuffle.position:
            self._shuffle.move_to(self._shuffle.position - 1)
        else:
            self._shuffle.move_to(located)
        return True

    def goto_index(self, index: int) -> bool:
        if not 0 <= index < len(self._items):
            logger.debug("ignoring goto_index(%d) with %d items", index, len(self._items))
            return False
        self._visit(index)
        return True

    def _visit(self, index: int) -> None:
        self._current_index = index
        self._history.append(index)

    # -- playback policy --

    def set_playing(self, playing: bool) -> bool:
        """Set the playing flag. Returns True when it changed."""
        if self._is_playing == playing:
            return False
        self._is_playing = playing
        return True

    def toggle_play_pause(self) -> bool:
        self._is_playing = not self._is_playing
        return self._is_playing

    def set_order_mode(self, mode: PlayOrder) -> None:
        if mode is self._order_mode:
            return
        self._order_mode = mode
        if mode is PlayOrder.RANDOM and self._items:
            self._shuffle.initialize(len(self._items), pinned=self._current_index)
        else:
            self._shuffle.clear()
