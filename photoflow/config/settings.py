"""Application settings via QSettings."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from PySide6.QtCore import QSettings

from photoflow.core.models import PlayOrder, SlideInterval
from photoflow.errors import ErrorCode, PhotoFlowError

logger = logging.getLogger(__name__)

DEFAULT_SLIDE_INTERVAL = SlideInterval.SEC_5
DEFAULT_PLAY_ORDER = PlayOrder.SEQUENTIAL


class SlideshowSettings(Protocol):
    """Read-only view of the settings the slideshow consults."""

    @property
    def slide_interval(self) -> SlideInterval: ...

    @property
    def play_order(self) -> PlayOrder: ...

    @property
    def include_subfolders(self) -> bool: ...


@dataclass(frozen=True, slots=True)
class StaticSettings:
    """Fixed in-memory settings."""

    slide_interval: SlideInterval = DEFAULT_SLIDE_INTERVAL
    play_order: PlayOrder = DEFAULT_PLAY_ORDER
    include_subfolders: bool = True


class AppSettings:
    """Wraps QSettings for persistent app configuration."""

    def __init__(self, qsettings: QSettings | None = None) -> None:
        self._qs = qsettings if qsettings is not None else QSettings("PhotoFlow", "PhotoFlow")

    # -- slideshow --

    @property
    def slide_interval(self) -> SlideInterval:
        raw = self._qs.value("slideshow/interval_seconds", DEFAULT_SLIDE_INTERVAL.seconds)
        try:
            return SlideInterval.from_seconds(int(raw))
        except (TypeError, ValueError):
            self._report_invalid("slideshow/interval_seconds", raw)
            return DEFAULT_SLIDE_INTERVAL

    @slide_interval.setter
    def slide_interval(self, value: SlideInterval) -> None:
        self._qs.setValue("slideshow/interval_seconds", value.seconds)

    @property
    def play_order(self) -> PlayOrder:
        raw = self._qs.value("slideshow/play_order", DEFAULT_PLAY_ORDER.value, type=str)
        try:
            return PlayOrder((raw or "").strip().lower())
        except ValueError:
            self._report_invalid("slideshow/play_order", raw)
            return DEFAULT_PLAY_ORDER

    @play_order.setter
    def play_order(self, value: PlayOrder) -> None:
        self._qs.setValue("slideshow/play_order", value.value)

    # -- folders --

    @property
    def include_subfolders(self) -> bool:
        return self._qs.value("folders/include_subfolders", True, type=bool)

    @include_subfolders.setter
    def include_subfolders(self, value: bool) -> None:
        self._qs.setValue("folders/include_subfolders", bool(value))

    @property
    def last_folder(self) -> str | None:
        raw = self._qs.value("folders/last_folder", "", type=str)
        value = (raw or "").strip()
        return value or None

    @last_folder.setter
    def last_folder(self, value: str | None) -> None:
        cleaned = (value or "").strip()
        if cleaned:
            self._qs.setValue("folders/last_folder", cleaned)
        else:
            self._qs.remove("folders/last_folder")

    # -- helpers --

    def sync(self) -> None:
        self._qs.sync()

    @property
    def app_data_dir(self) -> Path:
        path = self._app_data_dir()
        path.mkdir(parents=True, exist_ok=True)
        return path

    @staticmethod
    def _app_data_dir() -> Path:
        base = Path(os.environ.get("APPDATA", Path.home() / ".config"))
        return base / "photoflow"

    @staticmethod
    def _report_invalid(key: str, raw: object) -> None:
        error = PhotoFlowError(ErrorCode.CONFIG_INVALID, details={"key": key, "value": raw})
        logger.warning("%s", error)


def validate_saved_folder(settings: AppSettings) -> str | None:
    """Forget a saved folder that is no longer usable.

    Returns the reason it was cleared, or None when it is fine (or unset).
    """
    folder = settings.last_folder
    if folder is None:
        return None
    path = Path(folder)
    if not path.exists():
        reason = PhotoFlowError(ErrorCode.ROOT_NOT_FOUND, path=path).message
    elif not path.is_dir():
        reason = PhotoFlowError(ErrorCode.ROOT_NOT_DIRECTORY, path=path).message
    elif not os.access(path, os.R_OK | os.X_OK):
        reason = PhotoFlowError(ErrorCode.ROOT_ACCESS_DENIED, path=path).message
    else:
        return None
    logger.info("clearing saved folder %s: %s", folder, reason)
    settings.last_folder = None
    return reason
