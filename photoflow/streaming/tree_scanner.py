"""Owner of the single active streaming scan."""

from __future__ import annotations

import logging
from functools import partial

from PySide6.QtCore import QObject, Signal

from photoflow.core.events import ScanComplete, ScanError, ScanEvent
from photoflow.core.models import ScanState
from photoflow.streaming.channel import ScanEventChannel

logger = logging.getLogger(__name__)


class TreeScanner(QObject):
    """Starts folder scans, keeping at most one active at a time.

    ``start_streaming`` returns a cold channel: connect to it, then call
    ``start()``. Starting a new scan cancels the previous one. Cancelled
    channels are kept alive until their worker thread has exited.
    """

    state_changed = Signal(object)      # ScanState

    def __init__(self, *, threaded: bool = True, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._threaded = threaded
        self._channel: ScanEventChannel | None = None
        self._retired: list[ScanEventChannel] = []
        self._state = ScanState.IDLE

    @property
    def state(self) -> ScanState:
        return self._state

    @property
    def active_channel(self) -> ScanEventChannel | None:
        return self._channel

    @property
    def retired_count(self) -> int:
        return len(self._retired)

    def start_streaming(self, root_path: str, recurse_subdirectories: bool = True) -> ScanEventChannel:
        self.cancel_scan()
        logger.info("scanning %s (subfolders=%s)", root_path, recurse_subdirectories)
        channel = ScanEventChannel(root_path, recurse_subdirectories, threaded=self._threaded)
        channel.event_received.connect(partial(self._track_event, channel))
        self._channel = channel
        self._set_state(ScanState.SCANNING)
        return channel

    def cancel_scan(self) -> None:
        channel = self._channel
        if channel is None:
            return
        self._channel = None
        channel.cancel()
        if channel.is_started and not channel.is_finished:
            self._retired.append(channel)
            channel.finished.connect(partial(self._release, channel))
        self._set_state(ScanState.IDLE)

    def dispose(self, wait_ms: int = 2000) -> None:
        """Cancel everything and wait briefly for worker threads to exit."""
        self.cancel_scan()
        for channel in list(self._retired):
            if not channel.wait(wait_ms):
                logger.warning("scan thread for %s did not stop in time", channel.root_path)

    def _release(self, channel: ScanEventChannel) -> None:
        if channel in self._retired:
            self._retired.remove(channel)

    def _track_event(self, channel: ScanEventChannel, event: ScanEvent) -> None:
        if channel is not self._channel:
            return
        if isinstance(event, ScanComplete):
            self._set_state(ScanState.COMPLETED)
        elif isinstance(event, ScanError):
            self._set_state(ScanState.ERROR)

    def _set_state(self, state: ScanState) -> None:
        if state is self._state:
            return
        self._state = state
        self.state_changed.emit(state)
