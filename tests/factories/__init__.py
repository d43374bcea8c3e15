"""Test data builders.

Available helpers
-----------------
make_settings             - Settings with Discord unset, isolated from .env
make_configured_settings  - Settings with bot token and guild ID set
app_client                - async httpx client bound to a fresh app
load_discord_fixture      - recorded Discord API response bodies
"""

from __future__ import annotations

from tests.factories.discord import load_discord_fixture
from tests.factories.settings import (
    TEST_BOT_TOKEN,
    TEST_GUILD_ID,
    app_client,
    make_configured_settings,
    make_settings,
)

__all__ = [
    "TEST_BOT_TOKEN",
    "TEST_GUILD_ID",
    "app_client",
    "load_discord_fixture",
    "make_configured_settings",
    "make_settings",
]
