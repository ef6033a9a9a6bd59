"""HTTP middleware for correlation, admission control and request metrics.

Registered outermost first:
- request_id_middleware: accepts or generates X-Request-ID and keeps it in
  contextvars for log correlation; unexpected errors are rendered as 500 here
  so the error body and headers still carry the id
- admission_middleware: consumes a token for /api requests and answers 429
  before any routing or body decoding when the bucket is empty
- metrics_middleware: times admitted /api requests and reports them to the
  metrics sink

Usage:
    app.middleware("http")(metrics_middleware)
    app.middleware("http")(admission_middleware)
    app.middleware("http")(request_id_middleware)

``app.middleware`` wraps previously added middleware, so the last one
registered runs first.
"""

from __future__ import annotations

import time
import uuid

from fastapi import Request, Response

from app.core.config import settings
from app.core.errors import AdmissionRejectedAppError
from app.core.exception_handlers import build_error_response, general_exception_handler
from app.core.logging import clear_request_id, set_request_id
from app.core.metrics import get_request_metrics
from app.core.rate_limit import check_admission, rate_limit_headers

API_PREFIX = "/api"


def _is_api_request(request: Request) -> bool:
    path = request.url.path
    return path == API_PREFIX or path.startswith(API_PREFIX + "/")


def _metrics_label(request: Request) -> str:
    """Full route template of the matched /api route, or the raw path.

    Depending on the FastAPI version, routes included under a prefix report
    either the full template or one relative to the prefix.
    """
    route = request.scope.get("route")
    template = getattr(route, "path", None)
    if not template:
        return request.url.path
    if template == API_PREFIX or template.startswith(API_PREFIX + "/"):
        return template
    return API_PREFIX + template


async def request_id_middleware(request: Request, call_next) -> Response:
    """HTTP middleware for request ID generation and propagation.

    If the client provides an X-Request-ID header (configurable via
    LOG_REQUEST_ID_HEADER), that value is used. Otherwise a new UUID is
    generated. The ID is echoed in the response headers and stored in
    contextvars for log correlation.

    Side Effects:
        - Sets request_id in contextvars (accessible via get_request_id())
        - Clears request_id from contextvars after request completes
        - Adds X-Request-ID and X-Request-Duration-ms headers to the response
    """

    header_name = settings.log.request_id_header
    request_id = request.headers.get(header_name) or str(uuid.uuid4())
    set_request_id(request_id)
    start = time.perf_counter()
    try:
        try:
            response: Response = await call_next(request)
        except Exception as exc:
            # Render here while the request id is still in context
            response = await general_exception_handler(request, exc)
    finally:
        clear_request_id()

    duration_ms = (time.perf_counter() - start) * 1000
    response.headers[header_name] = request_id
    response.headers.setdefault("X-Request-Duration-ms", f"{duration_ms:.2f}")
    return response


async def admission_middleware(request: Request, call_next) -> Response:
    """Refuse /api requests with 429 when the admission limiter is empty.

    Runs before routing, so a refused request never decodes its body or
    touches the user store. Health and metrics endpoints are not gated.
    """

    if not _is_api_request(request):
        return await call_next(request)

    try:
        check_admission()
    except AdmissionRejectedAppError as exc:
        return build_error_response(exc, headers=rate_limit_headers(exc))

    return await call_next(request)


async def metrics_middleware(request: Request, call_next) -> Response:
    """Record method, route and handling duration for admitted /api requests.

    The label uses the matched route template (``/api/users/{user_id}``) so
    ids do not explode the label set; unmatched paths fall back to the raw
    path.
    """

    if not _is_api_request(request):
        return await call_next(request)

    start = time.perf_counter()
    try:
        response: Response = await call_next(request)
    finally:
        get_request_metrics().record(
            request.method, _metrics_label(request), time.perf_counter() - start
        )
    return response
