"""Error codes and error handling utilities for PhotoFlow."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from typing import Any


class ErrorCode(Enum):
    """Standardized error codes for PhotoFlow operations."""

    # Scan root errors
    ROOT_NOT_FOUND = auto()
    ROOT_NOT_DIRECTORY = auto()
    ROOT_ACCESS_DENIED = auto()

    # Traversal errors
    DIRECTORY_UNREADABLE = auto()
    SCAN_ABORTED = auto()

    # Outcomes
    NO_ITEMS_FOUND = auto()

    # Configuration errors
    CONFIG_INVALID = auto()


ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.ROOT_NOT_FOUND: "The selected folder was not found. It may have been moved or deleted.",
    ErrorCode.ROOT_NOT_DIRECTORY: "The selected path is not a folder.",
    ErrorCode.ROOT_ACCESS_DENIED: "Access denied. Check the folder permissions.",

    ErrorCode.DIRECTORY_UNREADABLE: "A folder could not be read and was skipped.",
    ErrorCode.SCAN_ABORTED: "The folder scan stopped unexpectedly.",

    ErrorCode.NO_ITEMS_FOUND: "No images were found in the selected folder.",

    ErrorCode.CONFIG_INVALID: "A saved setting is invalid. Using the default.",
}

_SUGGESTIONS: dict[ErrorCode, str] = {
    ErrorCode.ROOT_NOT_FOUND: "Select the folder again.",
    ErrorCode.ROOT_NOT_DIRECTORY: "Select a folder instead of a file.",
    ErrorCode.ROOT_ACCESS_DENIED: "Select a folder you are allowed to read.",
    ErrorCode.SCAN_ABORTED: "Images found before the failure can still be browsed. Try scanning again.",
    ErrorCode.NO_ITEMS_FOUND: "Supported formats are JPG, JPEG, PNG, GIF and WEBP.",
}


@dataclass
class PhotoFlowError(Exception):
    """Base exception for PhotoFlow with error code and context."""

    code: ErrorCode
    message: str = ""
    path: Path | None = None
    details: dict[str, Any] = field(default_factory=dict)
    suggestion: str = ""

    def __post_init__(self) -> None:
        if not self.message:
            self.message = ERROR_MESSAGES.get(self.code, "An unexpected error occurred.")
        if not self.suggestion:
            self.suggestion = _SUGGESTIONS.get(self.code, "")

    def __str__(self) -> str:
        parts = [self.message]
        if self.path:
            parts.append(f"\nFolder: {self.path}")
        if self.details:
            details_str = " | ".join(f"{k}={v}" for k, v in self.details.items())
            parts.append(f"\nDetails: {details_str}")
        return "".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging or UI display."""
        return {
            "code": self.code.name,
            "message": self.message,
            "path": str(self.path) if self.path else None,
            "details": self.details,
            "suggestion": self.suggestion,
        }


def classify_exception(exc: Exception, path: Path | None = None) -> PhotoFlowError:
    """Classify a generic exception into a PhotoFlowError with appropriate code."""
    if isinstance(exc, PhotoFlowError):
        return exc
    exc_str = str(exc).lower()

    if isinstance(exc, FileNotFoundError):
        return PhotoFlowError(ErrorCode.ROOT_NOT_FOUND, path=path, details={"original": exc_str})
    if isinstance(exc, NotADirectoryError):
        return PhotoFlowError(ErrorCode.ROOT_NOT_DIRECTORY, path=path, details={"original": exc_str})
    if isinstance(exc, PermissionError) or "permission denied" in exc_str or "access is denied" in exc_str:
        return PhotoFlowError(ErrorCode.ROOT_ACCESS_DENIED, path=path, details={"original": exc_str})

    return PhotoFlowError(
        ErrorCode.SCAN_ABORTED,
        message=f"{ERROR_MESSAGES[ErrorCode.SCAN_ABORTED]} {type(exc).__name__}: {exc}",
        path=path,
        details={"original": exc_str},
    )


def no_items_message(directories_scanned: int) -> str:
    """User-facing text for a scan that completed without any images."""
    noun = "folder" if directories_scanned == 1 else "folders"
    return (
        f"{ERROR_MESSAGES[ErrorCode.NO_ITEMS_FOUND]}\n\n"
        f"Scanned {directories_scanned} {noun}."
    )


def format_error_for_user(error: PhotoFlowError | Exception) -> str:
    """Format an error for display to the user with actionable suggestions."""
    if isinstance(error, PhotoFlowError):
        parts = [error.message]
        if error.suggestion and error.suggestion != error.message:
            parts.append(f"\n\n{error.suggestion}")
        if error.path:
            parts.append(f"\n\nFolder: {error.path}")
        return "".join(parts)

    classified = classify_exception(error)
    return format_error_for_user(classified)
