"""Constants for the Discord REST integration.

Used by :class:`~status_portal.discord.client.DiscordClient` and
:class:`~status_portal.discord.proxy.StatusProxy`.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# API constants
# ---------------------------------------------------------------------------

DISCORD_API_BASE: str = "https://discord.com/api/v10"
"""Base URL for the Discord REST API, pinned to version 10."""

DISCORD_CDN_BASE: str = "https://cdn.discordapp.com"
"""Base URL for guild icons and other Discord-hosted media."""

USER_AGENT: str = "StatusPortal/1.0 (discord-status-proxy)"
"""Sent on every request; Discord rejects clients without a User-Agent."""

MEMBER_PROBE_LIMIT: int = 1_000
"""``limit`` for ``GET /guilds/{id}/members``.

The response body is discarded.  The call only checks that the bot token is
allowed to read the guild's member list (requires the GUILD_MEMBERS intent).
"""

# ---------------------------------------------------------------------------
# Online estimate
# ---------------------------------------------------------------------------

ONLINE_RATIO: float = 0.3
"""Share of the member count reported as online.

Real presence counts need a Gateway connection, which this service does not
hold.  The estimate is floored to an integer.
"""


def guild_icon_url(guild_id: str, icon_hash: str) -> str:
    """Return the PNG CDN URL for a guild icon hash."""
    return f"{DISCORD_CDN_BASE}/icons/{guild_id}/{icon_hash}.png"
