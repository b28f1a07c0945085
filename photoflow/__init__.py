"""PhotoFlow: streaming folder scanner and slideshow sequencer."""

__version__ = "0.1.0"
