"""Read-only slideshow state handed to the presentation layer."""

from __future__ import annotations

from dataclasses import dataclass

from photoflow.core.models import PlayOrder


@dataclass(frozen=True, slots=True)
class SlideshowSnapshot:
    """Everything a view needs to draw one frame of the slideshow."""

    current_path: str | None = None
    current_index: int = 0
    total_items: int = 0
    is_scanning: bool = False
    is_scan_complete: bool = False
    scanned_directories: int = 0
    current_scan_directory: str | None = None
    error_message: str | None = None
    no_media_found: bool = False
    is_playing: bool = True
    order_mode: PlayOrder = PlayOrder.SEQUENTIAL

    @property
    def has_items(self) -> bool:
        return self.total_items > 0

    @property
    def position_label(self) -> str:
        """``"3 / 120"`` once the scan is done, ``"3 / 120+"`` while it runs."""
        if not self.total_items:
            return ""
        suffix = "" if self.is_scan_complete else "+"
        return f"{self.current_index + 1} / {self.total_items}{suffix}"
