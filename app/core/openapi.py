"""OpenAPI metadata for the user directory API.

Adds tag descriptions and documents the 429 response that admission control
can return on every /api operation, which FastAPI cannot infer because the
limiter runs in middleware.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

TAGS_METADATA = [
    {"name": "Users", "description": "Create, read, update and delete user records."},
    {"name": "Health", "description": "Liveness check."},
    {"name": "Metrics", "description": "Per-route request counts and durations."},
]

_TOO_MANY_REQUESTS = {
    "description": "Too Many Requests: the admission limiter refused the request.",
}


def apply_openapi_customizations(app: FastAPI, *, api_prefix: str = "/api") -> None:
    """Patch FastAPI's OpenAPI generation with tags and throttling responses."""

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        schema = original_openapi()

        tags = schema.setdefault("tags", [])
        existing = {t.get("name") for t in tags}
        tags.extend(t for t in TAGS_METADATA if t["name"] not in existing)

        for path, methods in schema.get("paths", {}).items():
            if not path.startswith(api_prefix):
                continue
            for operation in methods.values():
                if isinstance(operation, dict):
                    operation.setdefault("responses", {}).setdefault("429", _TOO_MANY_REQUESTS)

        app.openapi_schema = schema
        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
