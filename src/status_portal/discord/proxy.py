"""Discord status proxy.

Implements the three operations behind the site's JSON endpoints:

- :meth:`StatusProxy.guild_stats` - member and estimated online counts for
  the configured guild.
- :meth:`StatusProxy.bot_status` - whether the bot token authenticates.
- :meth:`StatusProxy.server_list` - the guilds the bot has joined.

Every operation returns a response model and never raises for upstream
problems.  Missing configuration, non-success Discord statuses and transport
failures are all turned into descriptive ``error`` / ``message`` fields; the
routes serve them with HTTP 200 and the front end inspects the payload.
"""

from __future__ import annotations

import math
from typing import Any

import httpx
import structlog

from status_portal.config.settings import Settings
from status_portal.core.exceptions import (
    ConfigurationMissingError,
    UpstreamError,
    UpstreamFailure,
)
from status_portal.core.schemas.status import (
    FETCH_FAILED,
    NOT_AVAILABLE,
    NOT_CONFIGURED,
    BotStatusResponse,
    Count,
    GuildStatsResponse,
    ServerInfo,
    ServerListResponse,
)
from status_portal.discord.client import DiscordClient
from status_portal.discord.config import ONLINE_RATIO, guild_icon_url

logger = structlog.get_logger(__name__)

DISCORD_NOT_CONFIGURED = "Discord configuration not found"
BOT_NOT_CONFIGURED = "Bot configuration not found"
BOT_RUNNING = "Bot is running normally"
BOT_AUTH_FAILED = "Bot authentication failed"
SERVERS_FETCH_FAILED = "failed to retrieve server information"


class StatusProxy:
    """Calls the Discord API on behalf of one incoming request.

    Args:
        settings: Immutable application settings holding the bot token and
            guild ID.
        http_client: Optional injected :class:`httpx.AsyncClient` passed
            through to :class:`DiscordClient`.
    """

    def __init__(
        self,
        settings: Settings,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings
        self._http_client = http_client

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def guild_stats(self) -> GuildStatsResponse:
        """Return member count and estimated online count for the configured guild.

        The member-list call is only a permission probe: when it succeeds the
        online count is estimated as 30 % of the member count (floored); when
        it fails the online count is ``"fetch failed"`` and ``success`` is
        left out while the member count is still reported.
        """
        try:
            self._settings.require_discord(guild=True)
        except ConfigurationMissingError as exc:
            logger.info("discord_stats_not_configured", missing=list(exc.missing))
            return GuildStatsResponse(
                member_count=NOT_CONFIGURED,
                online_count=NOT_CONFIGURED,
                error=DISCORD_NOT_CONFIGURED,
            )

        guild_id = str(self._settings.discord_server_id)
        async with self._client() as discord:
            try:
                guild = await discord.get_guild(guild_id, with_counts=True)
            except UpstreamFailure as exc:
                _log_failure("discord_stats_failed", exc)
                return GuildStatsResponse(
                    member_count=FETCH_FAILED,
                    online_count=FETCH_FAILED,
                    error=str(exc),
                )

            member_count: Count = (
                _count_or_none(guild.get("approximate_member_count"))
                or _count_or_none(guild.get("member_count"))
                or FETCH_FAILED
            )
            guild_fields = _present(server_name=_str_or_none(guild.get("name")))

            try:
                await discord.list_guild_members(guild_id)
            except UpstreamFailure as exc:
                _log_failure("discord_member_probe_failed", exc)
                return GuildStatsResponse(
                    member_count=member_count,
                    online_count=FETCH_FAILED,
                    **guild_fields,
                )

        return GuildStatsResponse(
            member_count=member_count,
            online_count=_estimate_online(member_count),
            **guild_fields,
            success=True,
        )

    async def bot_status(self) -> BotStatusResponse:
        """Report whether the configured bot token identifies a live bot account."""
        try:
            self._settings.require_discord()
        except ConfigurationMissingError:
            return BotStatusResponse(status="offline", message=BOT_NOT_CONFIGURED)

        async with self._client() as discord:
            try:
                bot_user = await discord.get_current_user()
            except UpstreamError as exc:
                _log_failure("discord_bot_status_failed", exc)
                return BotStatusResponse(status="offline", message=BOT_AUTH_FAILED)
            except UpstreamFailure as exc:
                _log_failure("discord_bot_status_failed", exc)
                return BotStatusResponse(status="offline", message=str(exc))

        return BotStatusResponse(
            status="online",
            **_present(
                username=_str_or_none(bot_user.get("username")),
                discriminator=_str_or_none(bot_user.get("discriminator")),
                id=_str_or_none(bot_user.get("id")),
            ),
            message=BOT_RUNNING,
        )

    async def server_list(self) -> ServerListResponse:
        """List the guilds the bot has joined with icon URL and member count."""
        try:
            self._settings.require_discord()
        except ConfigurationMissingError:
            return ServerListResponse(servers=[], message=BOT_NOT_CONFIGURED)

        async with self._client() as discord:
            try:
                guilds = await discord.list_current_user_guilds()
            except UpstreamError as exc:
                _log_failure("discord_servers_failed", exc)
                return ServerListResponse(servers=[], message=SERVERS_FETCH_FAILED)
            except UpstreamFailure as exc:
                _log_failure("discord_servers_failed", exc)
                return ServerListResponse(servers=[], message=str(exc))

        servers = [_server_info(guild) for guild in guilds]
        return ServerListResponse(servers=servers, count=len(servers), success=True)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _client(self) -> DiscordClient:
        return DiscordClient(
            str(self._settings.discord_bot_token),
            http_client=self._http_client,
            timeout=self._settings.discord_request_timeout,
        )


# ---------------------------------------------------------------------------
# Module-level helpers
# ---------------------------------------------------------------------------


def _estimate_online(member_count: Count) -> Count:
    """Return ⌊member_count × ONLINE_RATIO⌋, or ``"fetch failed"`` without a number."""
    if isinstance(member_count, bool) or not isinstance(member_count, (int, float)):
        return FETCH_FAILED
    return math.floor(member_count * ONLINE_RATIO)


def _server_info(guild: dict[str, Any]) -> ServerInfo:
    """Map a partial guild object from ``/users/@me/guilds`` to a ServerInfo."""
    guild_id = str(guild.get("id", ""))
    icon_hash = guild.get("icon")
    return ServerInfo(
        id=guild_id,
        name=_str_or_none(guild.get("name")) or "",
        icon=guild_icon_url(guild_id, icon_hash) if icon_hash else None,
        member_count=_count_or_none(guild.get("approximate_member_count")) or NOT_AVAILABLE,
    )


def _str_or_none(value: Any) -> str | None:
    return None if value is None else str(value)


def _count_or_none(value: Any) -> int | None:
    """Return *value* if Discord sent an integer count, else None."""
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def _present(**fields: Any) -> dict[str, Any]:
    """Drop None values so unset optional fields stay out of the payload."""
    return {key: value for key, value in fields.items() if value is not None}


def _log_failure(event: str, exc: UpstreamFailure) -> None:
    logger.warning(
        event,
        path=exc.path,
        status_code=getattr(exc, "status_code", None),
        error=str(exc),
    )
