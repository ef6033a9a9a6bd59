from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from app.adapters.metrics.base import AbstractRequestMetrics
from app.core.metrics import get_request_metrics

router = APIRouter(tags=["Metrics"])


@router.get("/metrics")
def read_metrics(
    metrics: AbstractRequestMetrics = Depends(get_request_metrics),
) -> dict[str, Any]:
    """Per-route request counts and handling durations since startup."""
    return metrics.snapshot()
