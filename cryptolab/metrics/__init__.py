"""
CryptoLab Metrics
=================

Caller-owned performance tracking with pluggable storage.
"""

from cryptolab.metrics.sinks import InMemorySink, JsonLinesSink, MetricsSink
from cryptolab.metrics.tracker import (
    Measurement,
    PerformanceTracker,
    efficiency_score,
    tracker_from_config,
)

__all__ = [
    "InMemorySink",
    "JsonLinesSink",
    "Measurement",
    "MetricsSink",
    "PerformanceTracker",
    "efficiency_score",
    "tracker_from_config",
]
