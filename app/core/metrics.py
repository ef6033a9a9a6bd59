"""Process-wide request metrics sink."""

from __future__ import annotations

from app.adapters.metrics.base import AbstractRequestMetrics
from app.adapters.metrics.in_memory import InMemoryRequestMetrics

_request_metrics: AbstractRequestMetrics = InMemoryRequestMetrics()


def get_request_metrics() -> AbstractRequestMetrics:
    """Return the shared metrics sink used by middleware and the /metrics route."""
    return _request_metrics
