"""Run the Status Portal web server with uvicorn.

Usage::

    python -m status_portal

Host and port come from the ``HOST`` / ``PORT`` settings (default
``0.0.0.0:3000``).  uvicorn handles SIGINT/SIGTERM and shuts down gracefully;
the application's lifespan logs the shutdown.
"""

from __future__ import annotations

import uvicorn

from status_portal.config.settings import get_settings


def main() -> None:
    """Start uvicorn serving ``status_portal.api.main:app``."""
    settings = get_settings()
    uvicorn.run(
        "status_portal.api.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
