"""Request metrics sinks."""

from app.adapters.metrics.base import AbstractRequestMetrics
from app.adapters.metrics.in_memory import InMemoryRequestMetrics

__all__ = [
    "AbstractRequestMetrics",
    "InMemoryRequestMetrics",
]
