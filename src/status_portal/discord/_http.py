"""HTTP dispatch for the Discord integration.

Internal module - not part of the public API. Used exclusively by
:mod:`~status_portal.discord.client`.

Turns every way a Discord call can go wrong into one of two exceptions so
that callers only ever handle :class:`UpstreamError` (Discord answered with
a non-success status) and :class:`UpstreamTransportError` (no usable answer).
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from status_portal.core.exceptions import UpstreamError, UpstreamTransportError

logger = structlog.get_logger(__name__)


async def make_request(
    client: httpx.AsyncClient,
    path: str,
    params: dict[str, Any] | None = None,
) -> Any:
    """Issue a single ``GET`` against the Discord API and decode the JSON body.

    No retry is attempted and rate-limit headers are not interpreted; a 429
    is reported like any other non-success status.

    Args:
        client: HTTP client whose ``base_url`` and headers point at Discord.
        path: API path relative to the base URL (e.g. ``/users/@me``).
        params: Optional query parameters.

    Returns:
        Parsed JSON response (dict or list).

    Raises:
        UpstreamError: On any non-2xx response.
        UpstreamTransportError: On connection errors, timeouts, or a body
            that is not valid JSON.
    """
    try:
        response = await client.get(path, params=params)
    except httpx.RequestError as exc:
        # Some httpx errors (e.g. ReadTimeout from a bare timeout) have no text.
        detail = str(exc) or type(exc).__name__
        raise UpstreamTransportError(
            f"Discord request to {path} failed: {detail}",
            path=path,
        ) from exc

    if not response.is_success:
        logger.debug(
            "discord_http_status",
            path=path,
            status_code=response.status_code,
        )
        raise UpstreamError(response.status_code, path=path)

    try:
        return response.json()
    except ValueError as exc:
        raise UpstreamTransportError(
            f"Discord returned an invalid JSON body for {path}",
            path=path,
        ) from exc
