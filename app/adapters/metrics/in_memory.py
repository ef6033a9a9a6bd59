"""In-memory request counters and latency totals, keyed by method and path."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any

from app.adapters.metrics.base import AbstractRequestMetrics


@dataclass
class _Series:
    count: int = 0
    total_seconds: float = 0.0
    max_seconds: float = 0.0


class InMemoryRequestMetrics(AbstractRequestMetrics):
    """Thread-safe per-label request counter with duration totals."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._series: dict[tuple[str, str], _Series] = {}

    def record(self, method: str, path: str, duration_seconds: float) -> None:
        duration = max(0.0, duration_seconds)
        with self._lock:
            series = self._series.setdefault((method.upper(), path), _Series())
            series.count += 1
            series.total_seconds += duration
            series.max_seconds = max(series.max_seconds, duration)

    def snapshot(self) -> dict[str, Any]:
        with self._lock:
            requests = [
                {
                    "method": method,
                    "path": path,
                    "count": series.count,
                    "total_seconds": round(series.total_seconds, 6),
                    "max_seconds": round(series.max_seconds, 6),
                }
                for (method, path), series in sorted(self._series.items())
            ]
        return {
            "total_requests": sum(item["count"] for item in requests),
            "requests": requests,
        }

    def clear(self) -> None:
        with self._lock:
            self._series.clear()
