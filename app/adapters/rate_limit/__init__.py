"""Admission limiting adapters.

This package provides a small abstraction layer so the service can start with
an in-process token bucket and later move to a shared store without changing
the HTTP layer.
"""

from app.adapters.rate_limit.base import AbstractAdmissionLimiter, AdmissionResult
from app.adapters.rate_limit.token_bucket import TokenBucketLimiter

__all__ = [
    "AbstractAdmissionLimiter",
    "AdmissionResult",
    "TokenBucketLimiter",
]
