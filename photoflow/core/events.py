"""Events emitted by a streaming folder scan."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from photoflow.errors import ErrorCode


@dataclass(frozen=True, slots=True)
class ItemFound:
    """A single supported file was discovered."""

    path: str
    total_found: int


@dataclass(frozen=True, slots=True)
class ItemBatch:
    """Several discovered files, in discovery order."""

    paths: tuple[str, ...]
    total_found: int


@dataclass(frozen=True, slots=True)
class ScanProgress:
    current_directory: str
    directories_scanned: int
    items_found: int


@dataclass(frozen=True, slots=True)
class ScanComplete:
    total_items: int
    total_directories: int


@dataclass(frozen=True, slots=True)
class ScanError:
    """The whole scan was aborted."""

    message: str
    cause: BaseException | None = None
    code: ErrorCode | None = None


ScanEvent = Union[ItemFound, ItemBatch, ScanProgress, ScanComplete, ScanError]


def is_terminal(event: ScanEvent) -> bool:
    """Return True for the events that end a scan stream."""
    return isinstance(event, (ScanComplete, ScanError))
