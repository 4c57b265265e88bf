"""
Metrics Sinks
=============

Storage backends for :class:`~cryptolab.core.models.PerformanceMetric`
records. The tracker only talks to the :class:`MetricsSink` protocol, so
callers choose where history lives.
"""

from __future__ import annotations

from collections import deque
from pathlib import Path
from typing import Protocol, runtime_checkable

from cryptolab.core.models import PerformanceMetric

DEFAULT_HISTORY_LIMIT = 100


@runtime_checkable
class MetricsSink(Protocol):
    """Append-only store keeping the most recent records."""

    def write(self, metric: PerformanceMetric) -> None: ...

    def records(self) -> list[PerformanceMetric]: ...

    def clear(self) -> None: ...


class InMemorySink:
    """Bounded in-process history (oldest records dropped first)."""

    def __init__(self, limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        self._records: deque[PerformanceMetric] = deque(maxlen=max(1, limit))

    def write(self, metric: PerformanceMetric) -> None:
        self._records.append(metric)

    def records(self) -> list[PerformanceMetric]:
        return list(self._records)

    def clear(self) -> None:
        self._records.clear()

    def __len__(self) -> int:
        return len(self._records)


class JsonLinesSink:
    """One JSON object per line in *path*, trimmed to the last *limit*."""

    def __init__(self, path: str | Path, limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        self.path = Path(path)
        self.limit = max(1, limit)

    def write(self, metric: PerformanceMetric) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "a", encoding="utf-8") as fh:
            fh.write(metric.model_dump_json() + "\n")
        lines = self._lines()
        if len(lines) > self.limit:
            self.path.write_text(
                "".join(line + "\n" for line in lines[-self.limit:]),
                encoding="utf-8",
            )

    def records(self) -> list[PerformanceMetric]:
        return [PerformanceMetric.model_validate_json(line) for line in self._lines()]

    def clear(self) -> None:
        if self.path.exists():
            self.path.write_text("", encoding="utf-8")

    def _lines(self) -> list[str]:
        if not self.path.exists():
            return []
        text = self.path.read_text(encoding="utf-8")
        return [line for line in text.splitlines() if line.strip()]
