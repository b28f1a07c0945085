"""Ordered, cancellable stream of scan events from a worker thread."""

from __future__ import annotations

import logging

from PySide6.QtCore import QObject, QThread, Qt, Signal

from photoflow.core.events import ScanEvent, is_terminal
from photoflow.core.scanner import ScanSession
from photoflow.workers.scan_worker import ScanWorker

logger = logging.getLogger(__name__)


class ScanEventChannel(QObject):
    """Delivers one scan's events to a single consumer on the owner's thread.

    The worker runs in its own ``QThread`` and its events cross over through
    a queued signal, so they arrive in emission order as ordinary event-loop
    notifications. The channel closes after a terminal event or ``cancel()``
    and drops anything that is still in flight.
    """

    event_received = Signal(object)     # ScanEvent
    closed = Signal()                   # no more events will be delivered
    finished = Signal()                 # the worker has returned

    def __init__(
        self,
        root_path: str,
        recurse: bool = True,
        *,
        threaded: bool = True,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._root_path = root_path
        self._recurse = recurse
        self._threaded = threaded
        self._worker = ScanWorker(root_path, recurse=recurse)
        self._thread: QThread | None = None
        self._is_started = False
        self._is_closed = False
        self._is_finished = False
        self._delivered = 0

    @property
    def root_path(self) -> str:
        return self._root_path

    @property
    def recurse(self) -> bool:
        return self._recurse

    @property
    def session(self) -> ScanSession:
        return self._worker.session

    @property
    def is_started(self) -> bool:
        return self._is_started

    @property
    def is_closed(self) -> bool:
        return self._is_closed

    @property
    def is_finished(self) -> bool:
        return self._is_finished

    @property
    def delivered_count(self) -> int:
        return self._delivered

    def start(self) -> None:
        if self._is_started:
            raise RuntimeError("scan channel already started")
        self._is_started = True
        self._worker.event_emitted.connect(self._on_worker_event)

        if not self._threaded:
            self._worker.run()
            self._on_worker_finished()
            return

        thread = QThread()
        self._worker.moveToThread(thread)
        thread.started.connect(self._worker.run)
        # The owner's loop may be blocked in wait(), so quit from the worker thread.
        self._worker.done.connect(thread.quit, Qt.ConnectionType.DirectConnection)
        thread.finished.connect(self._on_worker_finished)
        self._thread = thread
        thread.start()

    def cancel(self) -> None:
        """Stop the worker, ask its thread to quit and stop delivering events."""
        if not self._is_closed:
            logger.debug("cancelling scan of %s", self._root_path)
        self._worker.cancel()
        if self._thread is not None:
            self._thread.quit()
        self._close()

    def wait(self, msecs: int = 2000) -> bool:
        """Block until the worker thread exits; True when it did."""
        if self._thread is None:
            return True
        if self._worker.cancel_event.is_set():
            self._thread.quit()
        return self._thread.wait(msecs)

    def _on_worker_event(self, event: ScanEvent) -> None:
        if self._is_closed:
            return
        self._delivered += 1
        self.event_received.emit(event)
        if is_terminal(event):
            self._close()

    def _close(self) -> None:
        if self._is_closed:
            return
        self._is_closed = True
        self.closed.emit()

    def _on_worker_finished(self) -> None:
        if self._is_finished:
            return
        self._is_finished = True
        self._close()
        self.finished.emit()
