"""Admission limiter interfaces.

The HTTP layer depends on this abstraction (not the concrete implementation)
so the bucket storage can be swapped later with minimal changes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class AdmissionResult:
    """Outcome of a single admission attempt.

    Attributes:
        allowed: Whether the request may proceed.
        capacity: Maximum burst size of the limiter.
        remaining: Whole tokens left after this attempt.
        retry_after_seconds: Seconds until a token is available when blocked;
            None when allowed or when the bucket never refills.
    """

    allowed: bool
    capacity: int
    remaining: int
    retry_after_seconds: int | None


class AbstractAdmissionLimiter(ABC):
    """Interface for admission limiters."""

    @abstractmethod
    def acquire(self) -> AdmissionResult:
        """Try to take one unit of budget without waiting.

        Returns:
            AdmissionResult describing whether the request was admitted.
        """
        raise NotImplementedError

    def try_acquire(self) -> bool:
        """Return True if the request is admitted, False if it must be refused."""
        return self.acquire().allowed
