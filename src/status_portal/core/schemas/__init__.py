"""Pydantic schemas for response serialisation.

Sub-modules:
    status - GuildStatsResponse, BotStatusResponse, ServerListResponse, HealthResponse
"""

from __future__ import annotations
