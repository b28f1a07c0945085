"""Worker for streaming a folder scan off the UI thread."""

from __future__ import annotations

import logging

from PySide6.QtCore import Signal

from photoflow.core.events import ScanError, is_terminal
from photoflow.core.scanner import ScanSession, iter_scan_events
from photoflow.errors import ERROR_MESSAGES, ErrorCode
from photoflow.workers.base_worker import BaseWorker

logger = logging.getLogger(__name__)


class ScanWorker(BaseWorker):
    """Walks a folder tree in a background thread, one event at a time."""

    event_emitted = Signal(object)      # ScanEvent, in discovery order

    def __init__(self, root_dir: str, recurse: bool = True) -> None:
        super().__init__()
        self._root_dir = root_dir
        self._session = ScanSession(root_dir, recurse=recurse, cancel_event=self._cancel_event)

    @property
    def session(self) -> ScanSession:
        return self._session

    def run(self) -> None:
        terminated = False
        try:
            for event in iter_scan_events(self._session):
                if self._is_cancelled:
                    break
                self.event_emitted.emit(event)
                terminated = is_terminal(event)

            if self._is_cancelled and not terminated:
                logger.debug("scan of %s cancelled", self._root_dir)
        except Exception as e:
            if not terminated:
                logger.exception("scan worker for %s failed", self._root_dir)
                message = f"{ERROR_MESSAGES[ErrorCode.SCAN_ABORTED]} {type(e).__name__}: {e}"
                self.event_emitted.emit(
                    ScanError(message=message, cause=e, code=ErrorCode.SCAN_ABORTED)
                )
        finally:
            self.done.emit()
