"""Health check route for Status Portal.

``GET /health``
    Process liveness only; performs no I/O and does not contact Discord.
    Always returns HTTP 200 with ``status``, ``timestamp`` and ``uptime``.
"""

from __future__ import annotations

import time
from datetime import UTC, datetime

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from status_portal.core.schemas.status import HealthResponse, to_payload

router = APIRouter(tags=["system"])


def uptime_seconds(started_at: float) -> float:
    """Seconds elapsed since *started_at*, a ``time.monotonic()`` reading."""
    return time.monotonic() - started_at


@router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> JSONResponse:
    """Return a minimal process-level liveness status.

    Used by Docker health checks and load balancers that need a fast
    ``200 OK``.  Uptime counts from ``app.state.started_at``, recorded by
    :func:`~status_portal.api.main.create_app` when the server builds its
    application at startup.

    Returns:
        JSON with keys ``status`` (always ``"healthy"``), ``timestamp``
        (ISO 8601, UTC) and ``uptime`` (seconds, float).
    """
    payload = HealthResponse(
        status="healthy",
        timestamp=datetime.now(UTC).isoformat(),
        uptime=round(uptime_seconds(request.app.state.started_at), 3),
    )
    return JSONResponse(to_payload(payload))
