from typing import Any

import uvicorn

from app.core.app_factory import create_app
from app.core.config import AppSettings, settings

app = create_app()


def server_options(app_settings: AppSettings | None = None) -> dict[str, Any]:
    """Build uvicorn keyword arguments from application settings.

    uvicorn has no per-request read/write timeouts; the header size cap,
    keep-alive and shutdown grace period are the limits it exposes.
    """
    cfg = app_settings or settings.app
    return {
        "host": cfg.host,
        "port": cfg.port,
        "log_config": None,
        "timeout_keep_alive": cfg.keep_alive_seconds,
        "timeout_graceful_shutdown": cfg.shutdown_timeout_seconds,
        "h11_max_incomplete_event_size": cfg.max_header_bytes,
    }


if __name__ == "__main__":
    # uvicorn handles SIGINT/SIGTERM with a graceful shutdown
    uvicorn.run(app, **server_options())
