"""Structured logging configuration using structlog.

Call ``configure_logging()`` once when the application is created in
``api/main.py``.  Modules then log through structlog::

    import structlog
    logger = structlog.get_logger(__name__)
    logger.warning("discord_upstream_failed", path="/users/@me", status_code=401)

Records emitted through the stdlib ``logging`` API (uvicorn, httpx) pass
through the same processor chain, so every line on stdout has one format.

A ``request_id`` context variable is populated by the request-logging
middleware and merged into every record emitted while that request is handled.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar

import structlog
from structlog.types import EventDict, WrappedLogger

# ---------------------------------------------------------------------------
# Context variable - set by the HTTP middleware, read by the log processor
# ---------------------------------------------------------------------------

request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)
"""Per-request ID propagated from the HTTP middleware to log processors."""


# ---------------------------------------------------------------------------
# Custom processors
# ---------------------------------------------------------------------------


_SECRET_SUBSTRINGS: frozenset[str] = frozenset({
    "token",
    "secret",
    "password",
    "authorization",
    "bearer",
    "credential",
})
"""Lower-cased substrings identifying event-dict keys whose values must never
reach a renderer.  The Discord bot token is the only secret this service holds."""

_REDACTED = "[REDACTED]"


def _redact_secrets(
    logger: WrappedLogger,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: EventDict,
) -> EventDict:
    """Replace values of secret-bearing keys with a redaction marker.

    Top-level keys and the keys of nested dicts one level deep (for example
    ``headers={...}``) are matched case-insensitively.
    """
    for key in list(event_dict.keys()):
        if _is_secret(key):
            event_dict[key] = _REDACTED
            continue
        val = event_dict[key]
        if isinstance(val, dict):
            event_dict[key] = {
                k: (_REDACTED if _is_secret(str(k)) else v) for k, v in val.items()
            }
    return event_dict


def _is_secret(key: str) -> bool:
    key_lower = key.lower()
    return any(secret in key_lower for secret in _SECRET_SUBSTRINGS)


def _inject_request_id(
    logger: WrappedLogger,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: EventDict,
) -> EventDict:
    """Add the current request ID to the event dict if one is set."""
    rid = request_id_var.get()
    if rid is not None and "request_id" not in event_dict:
        event_dict["request_id"] = rid
    return event_dict


# ---------------------------------------------------------------------------
# Processor chain and handler
# ---------------------------------------------------------------------------

_SHARED_PROCESSORS: tuple[structlog.types.Processor, ...] = (
    structlog.contextvars.merge_contextvars,
    _inject_request_id,
    _redact_secrets,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.format_exc_info,
)
"""Applied to structlog events and to records from stdlib loggers alike."""

_QUIET_LOGGERS: tuple[str, ...] = ("uvicorn.access", "httpx", "httpcore")
"""Loggers held at WARNING unless the service runs at DEBUG.

The request-logging middleware already records every request once."""


def _stdout_handler(development: bool) -> logging.Handler:
    """Return a stdout handler rendering console lines or JSON."""
    renderer: structlog.types.Processor = (
        structlog.dev.ConsoleRenderer(colors=True)
        if development
        else structlog.processors.JSONRenderer()
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=list(_SHARED_PROCESSORS),
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )
    return handler


# ---------------------------------------------------------------------------
# Public configuration entry-point
# ---------------------------------------------------------------------------


def configure_logging(log_level: str = "INFO") -> None:
    """Route structlog and stdlib logging through one stdout handler.

    ``DEBUG`` renders coloured console lines; every other level renders one
    JSON object per line with ``timestamp``, ``level``, ``logger``, ``event``
    and, inside a request, ``request_id``.

    Safe to call repeatedly (each test app calls it): the root handler is
    replaced, not added to.

    Args:
        log_level: Level name, case-insensitive.  Unknown names mean INFO.
    """
    level_name = log_level.upper()
    development = level_name == "DEBUG"

    root_logger = logging.getLogger()
    root_logger.handlers[:] = [_stdout_handler(development)]
    root_logger.setLevel(getattr(logging, level_name, logging.INFO))

    quiet_level = logging.NOTSET if development else logging.WARNING
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)

    structlog.configure(
        processors=[
            *_SHARED_PROCESSORS,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
