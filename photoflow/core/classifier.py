"""Decide which files are slideshow media and which folders to skip."""

from __future__ import annotations

import os
from pathlib import Path

SUPPORTED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}


def is_supported_media(path: str | Path) -> bool:
    """Return True when the file extension is a supported image type."""
    _root, ext = os.path.splitext(str(path))
    return ext.lower() in SUPPORTED_EXTENSIONS


def is_hidden(directory_name: str) -> bool:
    """Dot-prefixed folders (``.git``, ``.trash``) are never scanned."""
    return directory_name.startswith(".")
