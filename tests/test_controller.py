"""Tests for photoflow.slideshow.controller."""

import os
import random

import pytest
from PySide6.QtCore import QSettings

from photoflow.config.settings import AppSettings, StaticSettings
from photoflow.core.models import PlayOrder, SequencerPhase, SlideInterval
from photoflow.slideshow.controller import SlideshowController
from photoflow.slideshow.state import SlideshowSnapshot
from photoflow.streaming.tree_scanner import TreeScanner

pytestmark = pytest.mark.usefixtures("qapp")


@pytest.fixture
def make_controller():
    created = []

    def _make(settings=None, threaded=False, **kwargs):
        controller = SlideshowController(
            settings or StaticSettings(),
            scanner=TreeScanner(threaded=threaded),
            rng=random.Random(11),
            **kwargs,
        )
        created.append(controller)
        return controller

    yield _make
    for controller in created:
        controller.dispose()


def _record(signal):
    calls = []
    signal.connect(lambda *args: calls.append(args))
    return calls


class TestSnapshot:
    def test_empty_snapshot(self):
        snapshot = SlideshowSnapshot()
        assert not snapshot.has_items
        assert snapshot.position_label == ""

    def test_position_label_while_scanning(self):
        snapshot = SlideshowSnapshot(current_index=2, total_items=120)
        assert snapshot.position_label == "3 / 120+"

    def test_position_label_when_complete(self):
        snapshot = SlideshowSnapshot(current_index=0, total_items=5, is_scan_complete=True)
        assert snapshot.position_label == "1 / 5"


class TestStartAndScan:
    def test_scan_fills_slideshow(self, make_controller, photo_tree):
        controller = make_controller()
        completed = _record(controller.scan_completed)
        controller.start(str(photo_tree))

        snapshot = controller.snapshot()
        assert snapshot.total_items == 3
        assert snapshot.is_scan_complete
        assert not snapshot.is_scanning
        assert snapshot.scanned_directories == 2
        assert snapshot.position_label == "1 / 3"
        assert os.path.basename(snapshot.current_path) in {"a.jpg", "b.PNG"}
        assert completed == [(3, 2)]

    def test_first_image_is_announced_once(self, make_controller, photo_tree):
        controller = make_controller()
        current = _record(controller.current_changed)
        controller.start(str(photo_tree))
        assert len(current) == 1
        assert current[0][0] == controller.snapshot().current_path

    def test_state_changes_are_published(self, make_controller, photo_tree):
        controller = make_controller()
        states = _record(controller.state_changed)
        controller.start(str(photo_tree))
        snapshots = [args[0] for args in states]
        assert snapshots[0].is_scanning and not snapshots[0].has_items
        assert snapshots[-1] == controller.snapshot()
        assert all(a != b for a, b in zip(snapshots, snapshots[1:]))

    def test_slide_timer_runs_while_playing(self, make_controller, photo_tree):
        controller = make_controller(StaticSettings(slide_interval=SlideInterval.SEC_3))
        controller.start(str(photo_tree))
        assert controller.is_timer_active
        assert controller.slide_timer_interval == 3000

    def test_recurse_defaults_to_settings(self, make_controller, photo_tree):
        controller = make_controller(StaticSettings(include_subfolders=False))
        controller.start(str(photo_tree))
        assert controller.snapshot().total_items == 2

    def test_explicit_recurse_wins(self, make_controller, photo_tree):
        controller = make_controller(StaticSettings(include_subfolders=False))
        controller.start(str(photo_tree), recurse=True)
        assert controller.snapshot().total_items == 3

    def test_no_media_found(self, make_controller, tmp_path):
        (tmp_path / "readme.txt").write_text("nothing to see")
        controller = make_controller()
        no_media = _record(controller.no_media_found)
        controller.start(str(tmp_path))

        snapshot = controller.snapshot()
        assert no_media == [(1,)]
        assert snapshot.no_media_found
        assert "No images were found" in snapshot.error_message
        assert "Scanned 1 folder." in snapshot.error_message
        assert not controller.is_timer_active

    def test_scan_failure(self, make_controller, tmp_path):
        controller = make_controller()
        failed = _record(controller.scan_failed)
        controller.start(str(tmp_path / "missing"))

        snapshot = controller.snapshot()
        assert len(failed) == 1
        assert snapshot.error_message == failed[0][0]
        assert not snapshot.has_items
        assert not snapshot.is_scanning
        assert not snapshot.no_media_found

    def test_random_order_starts_with_first_found(self, make_controller, photo_tree):
        controller = make_controller(StaticSettings(play_order=PlayOrder.RANDOM))
        controller.start(str(photo_tree))
        assert controller.snapshot().order_mode is PlayOrder.RANDOM
        assert controller.snapshot().current_index == 0
        assert controller.sequencer.shuffle_order[0] == 0

    def test_start_after_dispose_raises(self, make_controller, photo_tree):
        controller = make_controller()
        controller.dispose()
        with pytest.raises(RuntimeError):
            controller.start(str(photo_tree))


class TestCommands:
    def test_next_and_previous(self, make_controller, photo_tree):
        controller = make_controller()
        controller.start(str(photo_tree))
        controller.next_image()
        assert controller.snapshot().current_index == 1
        controller.previous_image()
        controller.previous_image()
        assert controller.snapshot().current_index == 2

    def test_goto_index(self, make_controller, photo_tree):
        controller = make_controller()
        controller.start(str(photo_tree))
        controller.goto_index(2)
        assert controller.snapshot().position_label == "3 / 3"
        controller.goto_index(7)
        assert controller.snapshot().current_index == 2

    def test_revisiting_current_publishes_nothing(self, make_controller, photo_tree):
        controller = make_controller()
        controller.start(str(photo_tree))
        states = _record(controller.state_changed)
        controller.goto_index(controller.snapshot().current_index)
        assert states == []

    def test_toggle_play_pause(self, make_controller, photo_tree):
        controller = make_controller()
        controller.start(str(photo_tree))
        controller.toggle_play_pause()
        assert not controller.snapshot().is_playing
        assert not controller.is_timer_active
        controller.toggle_play_pause()
        assert controller.snapshot().is_playing
        assert controller.is_timer_active

    def test_paused_start_is_reset_to_playing(self, make_controller, photo_tree):
        controller = make_controller()
        controller.set_playing(False)
        controller.start(str(photo_tree))
        assert controller.snapshot().is_playing
        assert controller.is_timer_active

    def test_apply_settings_switches_order(self, make_controller, photo_tree, tmp_path_factory):
        ini = tmp_path_factory.mktemp("cfg") / "photoflow.ini"
        settings = AppSettings(QSettings(str(ini), QSettings.Format.IniFormat))
        controller = make_controller(settings)
        controller.start(str(photo_tree))
        assert controller.sequencer.order_mode is PlayOrder.SEQUENTIAL

        settings.play_order = PlayOrder.RANDOM
        settings.slide_interval = SlideInterval.SEC_10
        controller.apply_settings()
        assert controller.snapshot().order_mode is PlayOrder.RANDOM
        assert controller.sequencer.shuffle_order[0] == controller.snapshot().current_index
        assert controller.slide_timer_interval == 10_000

    def test_dispose_stops_timer(self, make_controller, photo_tree):
        controller = make_controller()
        controller.start(str(photo_tree))
        controller.dispose()
        assert not controller.is_timer_active
        controller.dispose()


class TestThreadedScan:
    def test_threaded_scan_completes(self, make_controller, photo_tree, wait_until):
        controller = make_controller(threaded=True)
        controller.start(str(photo_tree))
        assert controller.snapshot().is_scanning
        assert wait_until(lambda: controller.snapshot().is_scan_complete)
        assert controller.snapshot().total_items == 3

    def test_restart_ignores_superseded_scan(
        self, make_controller, photo_tree, tmp_path_factory, wait_until
    ):
        other = tmp_path_factory.mktemp("other")
        (other / "only.webp").write_bytes(b"RIFF")
        controller = make_controller(threaded=True)
        controller.start(str(photo_tree))
        controller.start(str(other))
        assert wait_until(lambda: controller.snapshot().is_scan_complete)

        sequencer = controller.sequencer
        paths = [sequencer.item_at(i) for i in range(sequencer.item_count)]
        assert [os.path.basename(path) for path in paths] == ["only.webp"]
        assert controller.snapshot().position_label == "1 / 1"

    def test_cancel_keeps_found_images(self, make_controller, photo_tree, wait_until):
        controller = make_controller(threaded=True)
        controller.start(str(photo_tree))
        controller.cancel()
        snapshot = controller.snapshot()
        assert not snapshot.is_scanning
        assert not snapshot.is_scan_complete
        assert controller.sequencer.phase is SequencerPhase.IDLE
        assert controller.scanner.active_channel is None

    def test_dispose_mid_scan_stops_worker_thread(self, make_controller, tmp_path):
        for index in range(300):
            folder = tmp_path / f"roll{index:03d}"
            folder.mkdir()
            (folder / "frame.png").write_bytes(b"x")
        controller = make_controller(threaded=True)
        controller.start(str(tmp_path))
        channel = controller.scanner.active_channel
        controller.dispose()
        assert not channel._thread.isRunning()
