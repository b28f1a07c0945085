"""Walk directories and find slideshow images."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from threading import Event
from typing import Iterator

from photoflow.core.classifier import is_hidden, is_supported_media
from photoflow.core.events import (
    ItemFound,
    ScanComplete,
    ScanError,
    ScanEvent,
    ScanProgress,
)
from photoflow.errors import ERROR_MESSAGES, ErrorCode, PhotoFlowError, classify_exception

logger = logging.getLogger(__name__)

PROGRESS_EVERY = 100


@dataclass
class ScanSession:
    """One traversal of a folder tree and its running counters."""

    root: str
    recurse: bool = True
    cancel_event: Event = field(default_factory=Event)
    items_found: int = 0
    directories_scanned: int = 0

    def __post_init__(self) -> None:
        self.root = os.path.abspath(os.fspath(self.root))

    def cancel(self) -> None:
        self.cancel_event.set()

    @property
    def is_cancelled(self) -> bool:
        return self.cancel_event.is_set()


def _root_error(root: str) -> ScanError | None:
    if not os.path.exists(root):
        code = ErrorCode.ROOT_NOT_FOUND
    elif not os.path.isdir(root):
        code = ErrorCode.ROOT_NOT_DIRECTORY
    elif not os.access(root, os.R_OK | os.X_OK):
        code = ErrorCode.ROOT_ACCESS_DENIED
    else:
        return None
    error = PhotoFlowError(code, path=Path(root))
    return ScanError(message=f"{error.message} ({root})", code=code)


def iter_scan_events(
    session: ScanSession,
    *,
    progress_every: int = PROGRESS_EVERY,
) -> Iterator[ScanEvent]:
    """Yield discovery, progress and terminal events for ``session``.

    Each folder is listed once: its images are yielded first, then (when
    recursing) its visible subfolders are walked depth-first in listing
    order. Folders that cannot be listed are counted and skipped. Nothing
    is yielded once the session is cancelled.
    """
    root = session.root
    error = _root_error(root)
    if error is not None:
        yield error
        return

    try:
        stack = [root]
        while stack:
            if session.is_cancelled:
                return
            directory = stack.pop()
            subdirs: list[str] = []
            try:
                with os.scandir(directory) as entries:
                    for entry in entries:
                        if session.is_cancelled:
                            return
                        if entry.is_file(follow_symlinks=False):
                            if is_supported_media(entry.name):
                                session.items_found += 1
                                yield ItemFound(path=entry.path, total_found=session.items_found)
                        elif (
                            session.recurse
                            and entry.is_dir(follow_symlinks=False)
                            and not is_hidden(entry.name)
                        ):
                            subdirs.append(entry.path)
            except OSError as exc:
                if directory == root:
                    classified = classify_exception(exc, path=Path(root))
                    yield ScanError(message=classified.message, cause=exc, code=classified.code)
                    return
                # Unreadable or vanished subfolder: skip it but keep counting.
                skipped = PhotoFlowError(
                    ErrorCode.DIRECTORY_UNREADABLE,
                    path=Path(directory),
                    details={"original": str(exc)},
                )
                logger.debug("%s", skipped)

            if session.is_cancelled:
                return
            session.directories_scanned += 1
            count = session.directories_scanned
            if count == 1 or count % progress_every == 0:
                yield ScanProgress(
                    current_directory=directory,
                    directories_scanned=count,
                    items_found=session.items_found,
                )
            stack.extend(reversed(subdirs))
    except Exception as exc:
        logger.exception("scan of %s aborted", root)
        yield ScanError(
            message=f"{ERROR_MESSAGES[ErrorCode.SCAN_ABORTED]} {type(exc).__name__}: {exc}",
            cause=exc,
            code=ErrorCode.SCAN_ABORTED,
        )
        return

    if session.is_cancelled:
        return
    yield ScanComplete(
        total_items=session.items_found,
        total_directories=session.directories_scanned,
    )


@dataclass
class ScanResult:
    """Outcome of a blocking scan."""

    paths: list[str]
    folder_count: int
    root_path: str

    @property
    def image_count(self) -> int:
        return len(self.paths)

    @property
    def is_empty(self) -> bool:
        return not self.paths


class MediaScanner:
    """Blocking scanner for callers that want the full list at once."""

    def __init__(self, root: str | Path, recurse: bool = True) -> None:
        self._root = os.fspath(root)
        self._recurse = recurse

    def scan(self) -> ScanResult:
        """Return every supported image under the root directory."""
        session = ScanSession(self._root, recurse=self._recurse)
        paths = list(self._iter_paths(session))
        return ScanResult(
            paths=paths,
            folder_count=session.directories_scanned,
            root_path=self._root,
        )

    def scan_iter(self) -> Iterator[str]:
        """Yield image paths one at a time."""
        yield from self._iter_paths(ScanSession(self._root, recurse=self._recurse))

    def _iter_paths(self, session: ScanSession) -> Iterator[str]:
        for event in iter_scan_events(session):
            if isinstance(event, ItemFound):
                yield event.path
            elif isinstance(event, ScanError):
                raise PhotoFlowError(
                    event.code or ErrorCode.SCAN_ABORTED,
                    message=event.message,
                    path=Path(session.root),
                )
