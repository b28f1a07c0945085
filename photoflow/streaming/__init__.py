"""Streaming scan pipeline exports."""

from photoflow.streaming.aggregator import BatchAggregator
from photoflow.streaming.channel import ScanEventChannel
from photoflow.streaming.tree_scanner import TreeScanner

__all__ = [
    "BatchAggregator",
    "ScanEventChannel",
    "TreeScanner",
]
