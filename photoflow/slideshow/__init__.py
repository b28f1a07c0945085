"""Slideshow playback exports."""

from photoflow.slideshow.controller import SlideshowController
from photoflow.slideshow.state import SlideshowSnapshot

__all__ = [
    "SlideshowController",
    "SlideshowSnapshot",
]
