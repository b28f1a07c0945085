"""Drives a slideshow while its folder is still being scanned."""

from __future__ import annotations

import logging
import random
from functools import partial

from PySide6.QtCore import QObject, QTimer, Signal

from photoflow.config.settings import SlideshowSettings, StaticSettings
from photoflow.core.events import ItemBatch, ScanComplete, ScanError, ScanEvent, ScanProgress
from photoflow.core.sequencer import DEFAULT_HISTORY_LIMIT, PlaybackSequencer
from photoflow.errors import no_items_message
from photoflow.slideshow.state import SlideshowSnapshot
from photoflow.streaming.aggregator import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_DEBOUNCE_MS,
    BatchAggregator,
)
from photoflow.streaming.tree_scanner import TreeScanner

logger = logging.getLogger(__name__)


class SlideshowController(QObject):
    """Wires scanner, batching and sequencing together on the owner's thread.

    Every call must come from the thread the controller lives on. Views
    observe ``state_changed`` and never touch the sequencer directly.
    """

    state_changed = Signal(object)      # SlideshowSnapshot
    current_changed = Signal(object)    # str | None
    scan_completed = Signal(int, int)   # total items, total folders
    no_media_found = Signal(int)        # folders scanned
    scan_failed = Signal(str)           # error message

    def __init__(
        self,
        settings: SlideshowSettings | None = None,
        *,
        scanner: TreeScanner | None = None,
        rng: random.Random | None = None,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        batch_size: int = DEFAULT_BATCH_SIZE,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._settings: SlideshowSettings = settings if settings is not None else StaticSettings()
        self._scanner = scanner if scanner is not None else TreeScanner(parent=self)
        self._sequencer = PlaybackSequencer(
            self._settings.play_order,
            history_limit=history_limit,
            rng=rng,
        )
        self._batch_size = batch_size
        self._debounce_ms = debounce_ms
        self._aggregator: BatchAggregator | None = None
        self._session = 0
        self._is_scanning = False
        self._scanned_directories = 0
        self._current_scan_directory: str | None = None
        self._is_disposed = False
        self._snapshot = SlideshowSnapshot()

        self._slide_timer = QTimer(self)
        self._slide_timer.timeout.connect(self._on_slide_timeout)

    # -- read access --

    @property
    def sequencer(self) -> PlaybackSequencer:
        return self._sequencer

    @property
    def scanner(self) -> TreeScanner:
        return self._scanner

    @property
    def is_timer_active(self) -> bool:
        return self._slide_timer.isActive()

    @property
    def slide_timer_interval(self) -> int:
        return self._slide_timer.interval()

    def snapshot(self) -> SlideshowSnapshot:
        return self._snapshot

    # -- commands --

    def start(self, root_path: str, recurse: bool | None = None) -> None:
        """Reset everything and start streaming ``root_path``."""
        if self._is_disposed:
            raise RuntimeError("slideshow controller has been disposed")
        if recurse is None:
            recurse = self._settings.include_subfolders

        self._stop_slide_timer()
        self._detach_stream()
        self._session += 1

        self._sequencer.set_order_mode(self._settings.play_order)
        self._sequencer.begin_streaming()
        self._sequencer.set_playing(True)
        self._is_scanning = True
        self._scanned_directories = 0
        self._current_scan_directory = None

        aggregator = BatchAggregator(self._batch_size, self._debounce_ms, parent=self)
        aggregator.event_ready.connect(partial(self._on_stream_event, self._session))
        channel = self._scanner.start_streaming(root_path, recurse)
        aggregator.attach(channel)
        self._aggregator = aggregator
        self._publish()
        channel.start()

    def next_image(self) -> None:
        if self._sequencer.advance():
            self._publish()

    def previous_image(self) -> None:
        if self._sequencer.retreat():
            self._publish()

    def goto_index(self, index: int) -> None:
        if self._sequencer.goto_index(index):
            self._publish()

    def toggle_play_pause(self) -> None:
        self.set_playing(not self._sequencer.is_playing)

    def set_playing(self, playing: bool) -> None:
        if not self._sequencer.set_playing(playing):
            return
        if playing:
            self._start_slide_timer()
        else:
            self._stop_slide_timer()
        self._publish()

    def apply_settings(self) -> None:
        """Pick up changed settings now instead of at the next timer rearm."""
        self._sequencer.set_order_mode(self._settings.play_order)
        if self._slide_timer.isActive():
            self._start_slide_timer()
        self._publish()

    def cancel(self) -> None:
        """Stop scanning but keep browsing whatever was already found."""
        self._detach_stream()
        self._sequencer.mark_cancelled()
        self._is_scanning = False
        self._current_scan_directory = None
        self._publish()

    def dispose(self) -> None:
        if self._is_disposed:
            return
        self._is_disposed = True
        self._stop_slide_timer()
        self._detach_stream()
        self._scanner.dispose()

    # -- stream handling --

    def _on_stream_event(self, session: int, event: ScanEvent) -> None:
        if session != self._session or self._is_disposed:
            logger.debug("discarding event from superseded scan: %r", event)
            return

        if isinstance(event, ItemBatch):
            first_items = self._sequencer.ingest_batch(event.paths)
            if first_items and self._sequencer.is_playing:
                self._start_slide_timer()
        elif isinstance(event, ScanProgress):
            self._scanned_directories = event.directories_scanned
            self._current_scan_directory = event.current_directory
        elif isinstance(event, ScanComplete):
            self._is_scanning = False
            self._scanned_directories = event.total_directories
            self._current_scan_directory = None
            self._sequencer.mark_complete(event.total_items, event.total_directories)
            logger.info(
                "scan complete: %d images in %d folders",
                event.total_items,
                event.total_directories,
            )
        elif isinstance(event, ScanError):
            self._is_scanning = False
            self._current_scan_directory = None
            self._sequencer.mark_error(event.message)
            logger.warning("scan failed: %s", event.message)
        else:
            logger.warning("unexpected stream event %r", event)
            return

        self._publish()

        if isinstance(event, ScanComplete):
            self.scan_completed.emit(event.total_items, event.total_directories)
            if self._sequencer.no_media_found:
                self.no_media_found.emit(event.total_directories)
        elif isinstance(event, ScanError):
            self.scan_failed.emit(event.message)

    def _detach_stream(self) -> None:
        if self._aggregator is not None:
            self._aggregator.dispose()
            self._aggregator.deleteLater()
            self._aggregator = None
        self._scanner.cancel_scan()

    # -- slide timer --

    def _start_slide_timer(self) -> None:
        self._stop_slide_timer()
        if not self._sequencer.is_playing or not self._sequencer.has_items:
            return
        self._sequencer.set_order_mode(self._settings.play_order)
        self._slide_timer.start(self._settings.slide_interval.milliseconds)

    def _stop_slide_timer(self) -> None:
        self._slide_timer.stop()

    def _on_slide_timeout(self) -> None:
        if self._is_disposed:
            self._stop_slide_timer()
            return
        self.next_image()

    # -- publishing --

    def _build_snapshot(self) -> SlideshowSnapshot:
        seq = self._sequencer
        error_message = seq.error_message
        if seq.no_media_found:
            error_message = no_items_message(self._scanned_directories)
        return SlideshowSnapshot(
            current_path=seq.current_path,
            current_index=seq.current_index,
            total_items=seq.item_count,
            is_scanning=self._is_scanning,
            is_scan_complete=seq.scan_complete,
            scanned_directories=self._scanned_directories,
            current_scan_directory=self._current_scan_directory,
            error_message=error_message,
            no_media_found=seq.no_media_found,
            is_playing=seq.is_playing,
            order_mode=seq.order_mode,
        )

    def _publish(self) -> None:
        snapshot = self._build_snapshot()
        if snapshot == self._snapshot:
            return
        previous_path = self._snapshot.current_path
        self._snapshot = snapshot
        self.state_changed.emit(snapshot)
        if snapshot.current_path != previous_path:
            self.current_changed.emit(snapshot.current_path)
