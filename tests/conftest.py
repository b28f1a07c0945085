"""Shared fixtures for photoflow tests."""

import time

import pytest
from PySide6.QtCore import QCoreApplication


@pytest.fixture(scope="session")
def qapp():
    """One QCoreApplication for every test that needs an event loop."""
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def wait_until(qapp):
    """Pump the event loop until ``predicate()`` holds or the timeout hits."""

    def _wait(predicate, timeout=5.0):
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            QCoreApplication.processEvents()
            if predicate():
                return True
            time.sleep(0.005)
        QCoreApplication.processEvents()
        return predicate()

    return _wait


@pytest.fixture
def photo_tree(tmp_path):
    """A small tree: two root images, one in a subfolder, one in a hidden folder."""
    (tmp_path / "a.jpg").write_bytes(b"\xff\xd8" * 10)
    (tmp_path / "b.PNG").write_bytes(b"\x89PNG" * 10)
    (tmp_path / "notes.txt").write_text("not an image")
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / "c.gif").write_bytes(b"GIF89a")
    trash = tmp_path / ".trash"
    trash.mkdir()
    (trash / "d.jpg").write_bytes(b"\xff\xd8")
    return tmp_path
