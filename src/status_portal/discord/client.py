"""Minimal Discord REST client authenticated with a bot token.

Wraps the four Discord API v10 endpoints the status proxy needs:

- ``GET /guilds/{id}?with_counts=true``
- ``GET /guilds/{id}/members?limit=1000``
- ``GET /users/@me``
- ``GET /users/@me/guilds``

Use as an async context manager; the underlying :class:`httpx.AsyncClient`
lives for one proxy operation and is closed on exit::

    async with DiscordClient(token) as discord:
        guild = await discord.get_guild(guild_id)

An :class:`httpx.AsyncClient` may be injected (tests, or callers that manage
their own client).  An injected client is never closed by this class.
"""

from __future__ import annotations

from types import TracebackType
from typing import Any

import httpx

from status_portal.core.exceptions import UpstreamTransportError
from status_portal.discord._http import make_request
from status_portal.discord.config import (
    DISCORD_API_BASE,
    MEMBER_PROBE_LIMIT,
    USER_AGENT,
)


class DiscordClient:
    """Authenticated access to the Discord endpoints used by the site.

    Args:
        bot_token: Discord bot token, sent as ``Authorization: Bot <token>``.
        http_client: Optional injected client. When ``None`` a client is
            created on ``__aenter__`` and closed on ``__aexit__``.
        timeout: Transport timeout in seconds for a created client.
    """

    def __init__(
        self,
        bot_token: str,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._bot_token = bot_token
        self._timeout = timeout
        self._injected = http_client is not None
        self._http_client = http_client

    async def __aenter__(self) -> DiscordClient:
        if self._http_client is None:
            self._http_client = self._build_http_client()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._http_client is not None and not self._injected:
            await self._http_client.aclose()
            self._http_client = None

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    async def get_guild(self, guild_id: str, with_counts: bool = True) -> dict[str, Any]:
        """Fetch a guild object, optionally with approximate member/presence counts."""
        params = {"with_counts": "true"} if with_counts else None
        path = f"/guilds/{guild_id}"
        return _expect_object(await self._get(path, params=params), path)

    async def list_guild_members(
        self,
        guild_id: str,
        limit: int = MEMBER_PROBE_LIMIT,
    ) -> list[dict[str, Any]]:
        """List up to *limit* guild members (Discord caps a page at 1000)."""
        path = f"/guilds/{guild_id}/members"
        return _expect_object_list(await self._get(path, params={"limit": limit}), path)

    async def get_current_user(self) -> dict[str, Any]:
        """Return the user object of the bot account that owns the token."""
        path = "/users/@me"
        return _expect_object(await self._get(path), path)

    async def list_current_user_guilds(self) -> list[dict[str, Any]]:
        """Return partial guild objects for every guild the bot has joined."""
        path = "/users/@me/guilds"
        return _expect_object_list(await self._get(path), path)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        if self._http_client is None:
            raise RuntimeError("DiscordClient must be used as an async context manager")
        return await make_request(self._http_client, path, params=params)

    def _build_http_client(self) -> httpx.AsyncClient:
        """Build an :class:`httpx.AsyncClient` with Discord bot authentication."""
        return httpx.AsyncClient(
            base_url=DISCORD_API_BASE,
            headers={
                "Authorization": f"Bot {self._bot_token}",
                "Content-Type": "application/json",
                "User-Agent": USER_AGENT,
            },
            timeout=self._timeout,
        )


# ---------------------------------------------------------------------------
# Response shape checks
# ---------------------------------------------------------------------------


def _expect_object(body: Any, path: str) -> dict[str, Any]:
    """Return *body* if it is a JSON object, else raise UpstreamTransportError."""
    if not isinstance(body, dict):
        raise UpstreamTransportError(
            f"Discord returned an unexpected {type(body).__name__} body for {path}",
            path=path,
        )
    return body


def _expect_object_list(body: Any, path: str) -> list[dict[str, Any]]:
    """Return *body* if it is a JSON array of objects, else raise UpstreamTransportError."""
    if not isinstance(body, list) or not all(isinstance(item, dict) for item in body):
        raise UpstreamTransportError(
            f"Discord returned an unexpected {type(body).__name__} body for {path}",
            path=path,
        )
    return body
