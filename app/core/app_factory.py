"""Application factory for the FastAPI app.

Centralizes app construction (metadata, middleware, handlers, routers) so
tests and the server entry point build the same application.
"""

from __future__ import annotations

from fastapi import FastAPI

from app.api.routes import health_router, metrics_router, users_router
from app.core.config import settings
from app.core.exception_handlers import setup_exception_handlers
from app.core.logging import configure_logging
from app.core.middleware import (
    API_PREFIX,
    admission_middleware,
    metrics_middleware,
    request_id_middleware,
)
from app.core.openapi import apply_openapi_customizations


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance.

    Returns:
        Configured FastAPI app with middleware, handlers, routers and docs.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="User Directory API",
        description=(
            "In-memory CRUD service for user records, protected by a global "
            "token-bucket admission limiter and instrumented with per-route "
            "request metrics."
        ),
        version="0.1.0",
        debug=settings.app.debug,
    )

    # Middleware: last registered runs first (request id → admission → metrics)
    app.middleware("http")(metrics_middleware)
    app.middleware("http")(admission_middleware)
    app.middleware("http")(request_id_middleware)

    setup_exception_handlers(app)

    app.include_router(users_router, prefix=API_PREFIX)
    app.include_router(health_router)
    app.include_router(metrics_router)

    apply_openapi_customizations(app, api_prefix=API_PREFIX)

    return app
