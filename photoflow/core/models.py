"""Shared enums for scanning and playback."""

from __future__ import annotations

from enum import Enum


class PlayOrder(Enum):
    """Order in which discovered images are shown."""

    SEQUENTIAL = "sequential"
    RANDOM = "random"

    @property
    def label(self) -> str:
        return "Sequential" if self is PlayOrder.SEQUENTIAL else "Random"


class SlideInterval(Enum):
    """Delay between automatic slide advances."""

    SEC_3 = 3
    SEC_5 = 5
    SEC_10 = 10
    SEC_15 = 15
    SEC_30 = 30
    MIN_1 = 60

    @property
    def seconds(self) -> int:
        return self.value

    @property
    def milliseconds(self) -> int:
        return self.value * 1000

    @property
    def label(self) -> str:
        if self.value >= 60:
            return f"{self.value // 60} min"
        return f"{self.value} sec"

    @classmethod
    def from_seconds(cls, seconds: int) -> SlideInterval:
        """Return the interval matching ``seconds``; raise ValueError otherwise."""
        return cls(int(seconds))


class ScanState(Enum):
    """Lifecycle of a streaming scanner."""

    IDLE = "idle"
    SCANNING = "scanning"
    COMPLETED = "completed"
    ERROR = "error"


class SequencerPhase(Enum):
    """Scan-related phase of a playback sequencer."""

    IDLE = "idle"
    STREAMING = "streaming"
    COMPLETED = "completed"
    ERRORED = "errored"
