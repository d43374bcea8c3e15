"""Pydantic response schemas for the Discord proxy endpoints.

The browser front end reads camelCase keys (``memberCount``, ``onlineCount``),
so every field declares its wire name as an alias.  Serialise with
:func:`to_payload`, which keeps only the fields that were actually set: a
fallback payload carries ``error`` but no ``serverName``, a full-success
payload carries ``success`` but no ``error``.
"""

from __future__ import annotations

from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

NOT_CONFIGURED = "not configured"
"""Placeholder count shown when the Discord settings are absent."""

FETCH_FAILED = "fetch failed"
"""Placeholder count shown when a Discord call did not succeed."""

NOT_AVAILABLE = "N/A"
"""Placeholder member count for a guild listed without approximate counts."""

Count = Union[int, str]


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class GuildStatsResponse(_CamelModel):
    """Member counts for the configured guild.

    Attributes:
        member_count: Approximate member count, or a placeholder string.
        online_count: Estimated online count (30 % of members), or a placeholder.
        server_name: Guild name; set only when the guild call succeeded.
        error: Failure description; set only on fallback payloads.
        success: ``True`` only when both upstream calls succeeded.
    """

    member_count: Count = Field(..., alias="memberCount")
    online_count: Count = Field(..., alias="onlineCount")
    server_name: Optional[str] = Field(default=None, alias="serverName")
    error: Optional[str] = None
    success: Optional[bool] = None


class BotStatusResponse(_CamelModel):
    """Online state of the bot account behind the configured token."""

    status: Literal["online", "offline"]
    username: Optional[str] = None
    discriminator: Optional[str] = None
    id: Optional[str] = None
    message: str


class ServerInfo(_CamelModel):
    """One guild the bot has joined.

    ``icon`` is always serialised; it is ``None`` when the guild has no icon.
    """

    id: str
    name: str
    icon: Optional[str]
    member_count: Count = Field(..., alias="memberCount")


class ServerListResponse(_CamelModel):
    """Guilds the bot has joined, or an empty list with a message."""

    servers: list[ServerInfo] = Field(default_factory=list)
    count: Optional[int] = None
    success: Optional[bool] = None
    message: Optional[str] = None


class HealthResponse(_CamelModel):
    """Process liveness payload for ``GET /health``."""

    status: Literal["healthy"]
    timestamp: str
    uptime: float


def to_payload(model: BaseModel) -> dict[str, Any]:
    """Serialise *model* to a JSON-ready dict using wire names and set fields only."""
    return model.model_dump(mode="json", by_alias=True, exclude_unset=True)
