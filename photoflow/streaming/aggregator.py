"""Coalesce per-file scan events into batches for the playback side."""

from __future__ import annotations

import logging
from typing import Iterable

from PySide6.QtCore import QObject, QTimer, Signal

from photoflow.core.events import (
    ItemBatch,
    ItemFound,
    ScanComplete,
    ScanError,
    ScanEvent,
    ScanProgress,
    is_terminal,
)
from photoflow.streaming.channel import ScanEventChannel

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 100
DEFAULT_DEBOUNCE_MS = 50


class BatchAggregator(QObject):
    """Buffers discovered paths and forwards them as ``ItemBatch`` events.

    The very first path goes out on its own straight away so the first
    slide can be shown immediately. After that a batch is sent when
    ``batch_size`` paths are waiting or when no new path has arrived for
    ``debounce_ms``. Progress and terminal events flush the buffer before
    they are forwarded, so no path is reordered behind them.
    """

    event_ready = Signal(object)        # ItemBatch | ScanProgress | ScanComplete | ScanError

    def __init__(
        self,
        batch_size: int = DEFAULT_BATCH_SIZE,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self._batch_size = batch_size
        self._pending: list[str] = []
        self._delivered = 0
        self._total_found = 0
        self._channel: ScanEventChannel | None = None
        self._is_terminated = False
        self._is_disposed = False

        self._flush_timer = QTimer(self)
        self._flush_timer.setSingleShot(True)
        self._flush_timer.setInterval(debounce_ms)
        self._flush_timer.timeout.connect(self.flush)

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    @property
    def delivered_count(self) -> int:
        return self._delivered

    @property
    def is_flush_scheduled(self) -> bool:
        return self._flush_timer.isActive()

    @property
    def is_terminated(self) -> bool:
        return self._is_terminated

    def attach(self, channel: ScanEventChannel) -> None:
        if self._channel is not None:
            raise RuntimeError("aggregator is already attached to a channel")
        self._channel = channel
        channel.event_received.connect(self.handle_event)

    def handle_event(self, event: ScanEvent) -> None:
        if self._is_terminated or self._is_disposed:
            return
        if isinstance(event, ItemFound):
            self._add_paths((event.path,), event.total_found)
        elif isinstance(event, ItemBatch):
            self._add_paths(event.paths, event.total_found)
        elif isinstance(event, (ScanProgress, ScanComplete, ScanError)):
            self.flush()
            if is_terminal(event):
                self._is_terminated = True
            self.event_ready.emit(event)
        else:
            logger.warning("dropping unknown scan event %r", event)

    def flush(self) -> None:
        """Send whatever is buffered now."""
        self._flush_timer.stop()
        if not self._pending or self._is_disposed:
            return
        paths = tuple(self._pending)
        self._pending.clear()
        self._delivered += len(paths)
        self.event_ready.emit(
            ItemBatch(paths=paths, total_found=max(self._total_found, self._delivered))
        )

    def dispose(self) -> None:
        """Cancel any pending flush and stop listening."""
        self._flush_timer.stop()
        self._pending.clear()
        self._is_disposed = True
        if self._channel is not None:
            try:
                self._channel.event_received.disconnect(self.handle_event)
            except (RuntimeError, TypeError):
                pass
            self._channel = None

    def _add_paths(self, paths: Iterable[str], total_found: int) -> None:
        self._total_found = max(self._total_found, total_found)
        for path in paths:
            if self._delivered == 0 and not self._pending:
                self._pending.append(path)
                self.flush()
                continue
            self._pending.append(path)
            if len(self._pending) >= self._batch_size:
                self.flush()
        if self._pending:
            self._flush_timer.start()
