"""Admission control for the user API.

This module wires the token bucket adapter into the HTTP layer.

Design goals:
- Minimal coupling: the middleware depends on ``check_admission`` only.
- Swap-friendly: the bucket can be replaced behind ``AbstractAdmissionLimiter``.
- Decide before any handler logic runs: a refused request never reaches the
  user store.

Strategy: one global token bucket per process, shared by every caller.
"""

from __future__ import annotations

import logging
import threading

from app.adapters.rate_limit.base import AbstractAdmissionLimiter, AdmissionResult
from app.adapters.rate_limit.token_bucket import TokenBucketLimiter
from app.core.config import settings
from app.core.errors import AdmissionRejectedAppError, ErrorDetails

logger = logging.getLogger(__name__)


_limiter: AbstractAdmissionLimiter | None = None
_limiter_config: tuple[int, float] | None = None
_limiter_lock = threading.Lock()


def get_admission_limiter() -> AbstractAdmissionLimiter:
    """Return the process-wide admission limiter.

    The instance is cached in-module to preserve bucket state across requests.
    If configuration changes (primarily in tests), the limiter is rebuilt.
    """

    global _limiter, _limiter_config

    config = (
        settings.app.rate_limit_capacity,
        settings.app.rate_limit_refill_per_second,
    )

    with _limiter_lock:
        if _limiter is None or _limiter_config != config:
            _limiter = TokenBucketLimiter(
                capacity=settings.app.rate_limit_capacity,
                refill_per_second=settings.app.rate_limit_refill_per_second,
            )
            _limiter_config = config
            logger.info(
                "rate_limit.configured",
                extra={"capacity": config[0], "refill_per_second": config[1]},
            )
        return _limiter


def reset_admission_limiter() -> None:
    """Drop the cached limiter so the next request starts with a full bucket."""

    global _limiter, _limiter_config

    with _limiter_lock:
        _limiter = None
        _limiter_config = None


def rate_limit_headers(exc: AdmissionRejectedAppError) -> dict[str, str]:
    """Build throttling headers for a refused request (empty when disabled)."""

    if not settings.app.rate_limit_include_headers:
        return {}

    details = exc.details or {}
    headers: dict[str, str] = {}
    if "capacity" in details:
        headers["X-RateLimit-Limit"] = str(details["capacity"])
    if "remaining" in details:
        headers["X-RateLimit-Remaining"] = str(details["remaining"])
    if "retry_after" in details:
        headers["Retry-After"] = str(details["retry_after"])
    return headers


def check_admission() -> AdmissionResult | None:
    """Consume one token for the current request.

    Returns:
        The admission result, or None when admission control is disabled.

    Raises:
        AdmissionRejectedAppError: When the bucket is empty.
    """

    if not settings.app.rate_limit_enabled:
        return None

    result = get_admission_limiter().acquire()
    if result.allowed:
        logger.debug(
            "rate_limit.allowed",
            extra={"capacity": result.capacity, "remaining": result.remaining},
        )
        return result

    logger.warning(
        "rate_limit.exceeded",
        extra={
            "capacity": result.capacity,
            "remaining": result.remaining,
            "retry_after_s": result.retry_after_seconds,
        },
    )

    details: ErrorDetails = {"capacity": result.capacity, "remaining": result.remaining}
    if result.retry_after_seconds is not None:
        details["retry_after"] = result.retry_after_seconds

    raise AdmissionRejectedAppError(
        code="too_many_requests",
        message="Rate limit exceeded. Try again later.",
        details=details,
    )
