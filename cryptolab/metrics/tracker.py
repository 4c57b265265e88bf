"""
Performance Tracker
====================

Caller-owned timing of cipher operations. There is no process-wide
instance: whoever needs metrics constructs a tracker around a sink and
passes it down (the engine takes one as a constructor argument).

Efficiency heuristic, clamped to ``[0, 100]``::

    100 - min(t_ms / 10, 50) + 5 * log10(max(n, 1))
"""

from __future__ import annotations

import csv
import io
import json
import math
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Generator, Optional

import numpy as np

from labcore.logger import LabLogger

from cryptolab.core.models import PerformanceMetric
from cryptolab.metrics.sinks import InMemorySink, JsonLinesSink, MetricsSink

CSV_HEADERS = (
    "Algorithm",
    "Operation",
    "Timestamp",
    "Execution Time (ms)",
    "Input Size",
    "Output Size",
    "Throughput (chars/s)",
    "Efficiency",
)


def efficiency_score(execution_time_ms: float, input_size: int) -> float:
    time_penalty = min(execution_time_ms / 10.0, 50.0)
    size_bonus = math.log10(max(input_size, 1)) * 5.0
    return max(0.0, min(100.0, 100.0 - time_penalty + size_bonus))


class Measurement:
    """Handle yielded by :meth:`PerformanceTracker.track`.

    Set :attr:`output_size` inside the block; :attr:`metric` is filled
    in once the block exits without an exception.
    """

    def __init__(self) -> None:
        self.output_size: int = 0
        self.metric: Optional[PerformanceMetric] = None


class PerformanceTracker:
    """Records one :class:`PerformanceMetric` per tracked operation.

    Usage::

        tracker = PerformanceTracker(InMemorySink(limit=100))
        with tracker.track("vigenere", len(text)) as m:
            out = cipher.encrypt(text)
            m.output_size = len(out)
        print(tracker.summary())
    """

    def __init__(
        self,
        sink: Optional[MetricsSink] = None,
        *,
        logger: Optional[LabLogger] = None,
    ) -> None:
        self.sink: MetricsSink = sink if sink is not None else InMemorySink()
        self._logger = logger

    # ------------------------------------------------------------------ #
    #  Recording
    # ------------------------------------------------------------------ #

    @contextmanager
    def track(
        self, algorithm: str, input_size: int, operation: str = "encrypt"
    ) -> Generator[Measurement, None, None]:
        """Time the enclosed block; failed blocks are not recorded."""
        measurement = Measurement()
        start = time.perf_counter()
        yield measurement
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        measurement.metric = self.record(
            algorithm,
            execution_time_ms=elapsed_ms,
            input_size=input_size,
            output_size=measurement.output_size,
            operation=operation,
        )

    def record(
        self,
        algorithm: str,
        *,
        execution_time_ms: float,
        input_size: int,
        output_size: int,
        operation: str = "encrypt",
    ) -> PerformanceMetric:
        """Build a metric from raw numbers and write it to the sink."""
        throughput = (
            input_size / (execution_time_ms / 1000.0) if execution_time_ms > 0 else 0.0
        )
        metric = PerformanceMetric(
            algorithm=algorithm,
            operation=operation,
            timestamp=datetime.now(timezone.utc),
            execution_time_ms=execution_time_ms,
            input_size=input_size,
            output_size=output_size,
            throughput=throughput,
            efficiency=efficiency_score(execution_time_ms, input_size),
        )
        self.sink.write(metric)
        if self._logger is not None:
            self._logger.debug(
                "Recorded %s %s in %.3f ms",
                algorithm,
                operation,
                execution_time_ms,
                input_size=input_size,
            )
        return metric

    # ------------------------------------------------------------------ #
    #  Aggregation
    # ------------------------------------------------------------------ #

    def metrics(self) -> list[PerformanceMetric]:
        return self.sink.records()

    def summary(self) -> dict[str, Any]:
        """Totals and averages over every stored record.

        Returns an empty dict when nothing has been recorded.
        """
        records = self.metrics()
        if not records:
            return {}

        times = np.array([m.execution_time_ms for m in records])
        fastest = records[int(np.argmin(times))]
        slowest = records[int(np.argmax(times))]
        return {
            "total_operations": len(records),
            "average_time_ms": float(times.mean()),
            "total_time_ms": float(times.sum()),
            "average_throughput": float(np.mean([m.throughput for m in records])),
            "average_efficiency": float(np.mean([m.efficiency for m in records])),
            "fastest": {"algorithm": fastest.algorithm, "time_ms": fastest.execution_time_ms},
            "slowest": {"algorithm": slowest.algorithm, "time_ms": slowest.execution_time_ms},
            "algorithms_used": sorted({m.algorithm for m in records}),
        }

    def algorithm_comparison(self) -> dict[str, dict[str, float]]:
        """Per-algorithm count and averages, keyed by algorithm name."""
        grouped: dict[str, list[PerformanceMetric]] = {}
        for metric in self.metrics():
            grouped.setdefault(metric.algorithm, []).append(metric)

        return {
            name: {
                "count": len(items),
                "average_time_ms": float(np.mean([m.execution_time_ms for m in items])),
                "average_throughput": float(np.mean([m.throughput for m in items])),
                "average_efficiency": float(np.mean([m.efficiency for m in items])),
            }
            for name, items in grouped.items()
        }

    # ------------------------------------------------------------------ #
    #  Export
    # ------------------------------------------------------------------ #

    def export_json(self) -> str:
        payload = {
            "metrics": [m.model_dump(mode="json") for m in self.metrics()],
            "summary": self.summary(),
            "comparison": self.algorithm_comparison(),
            "exported_at": datetime.now(timezone.utc).isoformat(),
        }
        return json.dumps(payload, indent=2)

    def export_csv(self) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(CSV_HEADERS)
        for m in self.metrics():
            writer.writerow(
                [
                    m.algorithm,
                    m.operation,
                    m.timestamp.isoformat(),
                    f"{m.execution_time_ms:.3f}",
                    m.input_size,
                    m.output_size,
                    f"{m.throughput:.2f}",
                    f"{m.efficiency:.1f}",
                ]
            )
        return buffer.getvalue()

    def clear(self) -> None:
        self.sink.clear()


def tracker_from_config(
    config: Any, *, logger: Optional[LabLogger] = None
) -> Optional[PerformanceTracker]:
    """Build a tracker from a :class:`labcore.config.MetricsConfig`.

    Returns ``None`` when metrics are disabled.

    Raises:
        ValueError: On an unknown sink name.
    """
    if not config.enabled:
        return None
    if config.sink == "memory":
        sink: MetricsSink = InMemorySink(config.history_limit)
    elif config.sink == "jsonl":
        sink = JsonLinesSink(config.path, config.history_limit)
    else:
        raise ValueError(f"Unknown metrics sink: {config.sink!r} (use 'memory' or 'jsonl')")
    return PerformanceTracker(sink, logger=logger)
