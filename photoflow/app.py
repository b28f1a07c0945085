"""QCoreApplication bootstrap for the console slideshow."""

from __future__ import annotations

import argparse
import logging
from logging.handlers import RotatingFileHandler
import os
import signal
import sys

from PySide6.QtCore import QCoreApplication, QObject, QTimer

from photoflow import __version__
from photoflow.config.settings import AppSettings, StaticSettings, validate_saved_folder
from photoflow.core.models import PlayOrder, SlideInterval
from photoflow.slideshow.controller import SlideshowController

EXIT_OK = 0
EXIT_SCAN_FAILED = 1
EXIT_NO_MEDIA = 2


def _configure_logger(settings: AppSettings, verbose: bool = False) -> logging.Logger:
    logger = logging.getLogger("photoflow")
    if logger.handlers:
        return logger

    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    log_dir = settings.app_data_dir / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_dir / "photoflow.log",
        maxBytes=512_000,
        backupCount=3,
        encoding="utf-8",
    )
    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    if verbose:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(formatter)
        logger.addHandler(console)
    logger.propagate = False
    return logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="photoflow",
        description="Show the images of a folder as a slideshow while it is still being scanned.",
    )
    parser.add_argument("folder", nargs="?", help="folder to show (defaults to the last one used)")
    parser.add_argument(
        "--no-subfolders",
        action="store_true",
        help="only show images directly inside the folder",
    )
    parser.add_argument(
        "--order",
        choices=[order.value for order in PlayOrder],
        help="play order (defaults to the saved setting)",
    )
    parser.add_argument(
        "--interval",
        type=int,
        choices=[interval.seconds for interval in SlideInterval],
        help="seconds between slides (defaults to the saved setting)",
    )
    parser.add_argument(
        "--slides",
        type=int,
        default=0,
        help="quit after this many slides have been shown (0 = run until interrupted)",
    )
    parser.add_argument("--verbose", action="store_true", help="also log to stderr")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


class _ConsoleRunner(QObject):
    """Prints each slide and ends the event loop on terminal outcomes."""

    def __init__(
        self,
        app: QCoreApplication,
        controller: SlideshowController,
        max_slides: int = 0,
    ) -> None:
        super().__init__(controller)
        self._app = app
        self._controller = controller
        self._max_slides = max_slides
        self._shown = 0
        controller.current_changed.connect(self._on_current_changed)
        controller.no_media_found.connect(self._on_no_media_found)
        controller.scan_failed.connect(self._on_scan_failed)

    @property
    def shown(self) -> int:
        return self._shown

    def _on_current_changed(self, path: object) -> None:
        if not path:
            return
        self._shown += 1
        snapshot = self._controller.snapshot()
        print(f"[{snapshot.position_label}] {path}", flush=True)
        if self._max_slides and self._shown >= self._max_slides:
            self._app.exit(EXIT_OK)

    def _on_no_media_found(self, _directories: int) -> None:
        print(self._controller.snapshot().error_message, file=sys.stderr, flush=True)
        self._app.exit(EXIT_NO_MEDIA)

    def _on_scan_failed(self, message: str) -> None:
        if self._controller.snapshot().has_items:
            logging.getLogger("photoflow").warning("continuing with images found so far: %s", message)
            return
        print(message, file=sys.stderr, flush=True)
        self._app.exit(EXIT_SCAN_FAILED)


def run_app(argv: list[str] | None = None) -> int:
    """Parse arguments and run the console slideshow."""
    args = build_parser().parse_args(argv)

    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    app.setApplicationName("PhotoFlow")
    app.setOrganizationName("PhotoFlow")
    settings = AppSettings()
    logger = _configure_logger(settings, verbose=args.verbose)
    logger.info("startup version=%s", __version__)

    folder = args.folder
    if folder is None:
        reason = validate_saved_folder(settings)
        if reason:
            print(f"The saved folder was reset: {reason}", file=sys.stderr)
        folder = settings.last_folder
    if folder is None:
        print("No folder given and no saved folder to fall back on.", file=sys.stderr)
        return EXIT_SCAN_FAILED

    slideshow_settings = StaticSettings(
        slide_interval=(
            SlideInterval.from_seconds(args.interval) if args.interval else settings.slide_interval
        ),
        play_order=PlayOrder(args.order) if args.order else settings.play_order,
        include_subfolders=False if args.no_subfolders else settings.include_subfolders,
    )
    logger.info(
        "slideshow folder=%s order=%s interval=%ss subfolders=%s",
        folder,
        slideshow_settings.play_order.value,
        slideshow_settings.slide_interval.seconds,
        slideshow_settings.include_subfolders,
    )

    controller = SlideshowController(slideshow_settings)
    runner = _ConsoleRunner(app, controller, max_slides=args.slides)

    # Let Python see Ctrl+C while the Qt loop is running.
    signal.signal(signal.SIGINT, lambda *_: app.exit(EXIT_OK))
    wakeup = QTimer(runner)
    wakeup.timeout.connect(lambda: None)
    wakeup.start(250)

    controller.start(folder)
    settings.last_folder = os.path.abspath(folder)

    exit_code = app.exec()
    wakeup.stop()
    controller.dispose()
    logger.info("exit code=%s slides shown=%d", exit_code, runner.shown)
    return exit_code
