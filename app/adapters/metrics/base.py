"""Request metrics interface.

Middleware reports each handled request here. Sinks are write-only from the
request path; nothing in the service reads them back to make decisions.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class AbstractRequestMetrics(ABC):
    """Interface for per-request metrics sinks."""

    @abstractmethod
    def record(self, method: str, path: str, duration_seconds: float) -> None:
        """Record one handled request.

        Args:
            method: HTTP method (e.g., GET).
            path: Route template or raw path used as the label.
            duration_seconds: Observed handling time.
        """
        raise NotImplementedError

    @abstractmethod
    def snapshot(self) -> dict[str, Any]:
        """Return a point-in-time copy of the collected metrics."""
        raise NotImplementedError
