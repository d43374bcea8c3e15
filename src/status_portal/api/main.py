"""FastAPI application factory and entry point.

Creates the application instance, registers middleware and exception
handlers, mounts the static assets and includes the route routers.

Usage::

    # Development server (from project root)
    uvicorn status_portal.api.main:app --reload --port 3000

    # Or with host/port taken from the settings
    python -m status_portal
"""

from __future__ import annotations

import time
import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable

import structlog
from fastapi import FastAPI, Request, Response, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from status_portal.config.settings import Settings, get_settings
from status_portal.core.logging_config import configure_logging, request_id_var

logger = structlog.get_logger(__name__)

_UNMATCHED_STATUSES = frozenset(
    {status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED}
)


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Log startup (warning about missing Discord settings) and shutdown."""
    settings: Settings = application.state.settings
    logger.info(
        "application_startup",
        app_name=settings.app_name,
        port=settings.port,
        debug=settings.debug,
        log_level=settings.log_level,
    )
    if not settings.discord_bot_token:
        logger.warning("discord_bot_token_not_set", env_var="DISCORD_BOT_TOKEN")
    if not settings.discord_server_id:
        logger.warning("discord_server_id_not_set", env_var="DISCORD_SERVER_ID")

    yield

    logger.info("application_shutdown")


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build and configure the FastAPI application.

    Separated from the module-level ``app`` singleton so that tests can
    build an application around their own :class:`Settings` instance.

    Args:
        settings: Configuration to serve with.  Defaults to
            :func:`get_settings` (environment and ``.env``).

    Returns:
        A fully configured ``FastAPI`` instance.
    """
    if settings is None:
        settings = get_settings()

    configure_logging(settings.log_level)

    application = FastAPI(
        title=settings.app_name,
        description=(
            "Static site plus JSON endpoints reporting the bot's Discord "
            "status, guild member counts and joined servers."
        ),
        version="1.0.0",
        lifespan=lifespan,
        # /docs is one of the site's own pages.
        docs_url=None,
        redoc_url=None,
    )
    application.state.settings = settings
    application.state.started_at = time.monotonic()

    # ---- Middleware --------------------------------------------------------

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @application.middleware("http")
    async def request_logging_middleware(
        request: Request, call_next: Callable
    ) -> Response:
        """Log every request with its status and duration.

        Binds a unique ``request_id`` into the structlog context for the
        lifetime of the request and echoes it in ``X-Request-ID``.
        """
        request_id = str(uuid.uuid4())
        request_id_var.set(request_id)
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        start = time.perf_counter()
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        try:
            response = await call_next(request)
            status_code = response.status_code
        finally:
            elapsed_ms = round((time.perf_counter() - start) * 1000, 2)
            log_fn = logger.warning if status_code >= 400 else logger.info
            log_fn(
                "request_complete",
                status_code=status_code,
                elapsed_ms=elapsed_ms,
            )

        response.headers["X-Request-ID"] = request_id
        return response

    # ---- Exception handlers -----------------------------------------------

    @application.exception_handler(StarletteHTTPException)
    async def not_found_handler(
        request: Request, exc: StarletteHTTPException
    ) -> Response:
        """Serve ``404.html`` for unmatched paths; defer to FastAPI otherwise.

        A known path requested with the wrong method is also unmatched and
        answers 404, not 405.
        """
        if exc.status_code in _UNMATCHED_STATUSES:
            not_found_page = settings.public_dir / "404.html"
            if not_found_page.is_file():
                return FileResponse(
                    not_found_page,
                    status_code=status.HTTP_404_NOT_FOUND,
                    media_type="text/html",
                )
            exc = StarletteHTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return await http_exception_handler(request, exc)

    @application.exception_handler(Exception)
    async def server_error_handler(request: Request, exc: Exception) -> JSONResponse:
        """Answer any exception that escaped a handler with a generic 500.

        The exception text is only exposed when ``settings.debug`` is set.
        """
        logger.error(
            "unhandled_exception",
            error_type=type(exc).__name__,
            exc_info=exc,
        )
        return JSONResponse(
            {
                "error": "Internal Server Error",
                "message": str(exc) if settings.debug else "Something went wrong",
            },
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    # ---- Static assets -----------------------------------------------------

    static_dir = settings.public_dir / "static"
    if static_dir.is_dir():
        application.mount("/static", StaticFiles(directory=static_dir), name="static")

    # ---- Routers -----------------------------------------------------------

    from status_portal.api.routes import discord, health, pages  # noqa: PLC0415

    application.include_router(health.router)
    application.include_router(discord.router)
    application.include_router(pages.router)

    return application


# ---------------------------------------------------------------------------
# Module-level singleton
# ---------------------------------------------------------------------------

app = create_app()
"""The FastAPI application instance.

This is the ASGI callable passed to Uvicorn.
"""
