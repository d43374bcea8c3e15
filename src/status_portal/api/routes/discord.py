"""JSON route handlers proxying the Discord API.

Endpoints:

- ``GET /api/discord/stats`` - member and estimated online counts.
- ``GET /api/bot/status``    - bot online state.
- ``GET /api/servers``       - guilds the bot has joined.

All three always answer HTTP 200.  Missing configuration and upstream
failures are reported in the payload's ``error`` or ``message`` field, never
through the status code; the front end branches on payload content only.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from status_portal.api.dependencies import get_status_proxy
from status_portal.core.schemas.status import (
    BotStatusResponse,
    GuildStatsResponse,
    ServerListResponse,
    to_payload,
)
from status_portal.discord.proxy import StatusProxy

router = APIRouter(prefix="/api", tags=["discord"])


@router.get("/discord/stats", response_model=GuildStatsResponse)
async def discord_stats(
    proxy: Annotated[StatusProxy, Depends(get_status_proxy)],
) -> JSONResponse:
    """Return member count, estimated online count and name of the configured guild."""
    return JSONResponse(to_payload(await proxy.guild_stats()))


@router.get("/bot/status", response_model=BotStatusResponse)
async def bot_status(
    proxy: Annotated[StatusProxy, Depends(get_status_proxy)],
) -> JSONResponse:
    """Return ``online`` with the bot's identity, or ``offline`` with a reason."""
    return JSONResponse(to_payload(await proxy.bot_status()))


@router.get("/servers", response_model=ServerListResponse)
async def servers(
    proxy: Annotated[StatusProxy, Depends(get_status_proxy)],
) -> JSONResponse:
    """Return the guilds the bot has joined."""
    return JSONResponse(to_payload(await proxy.server_list()))
