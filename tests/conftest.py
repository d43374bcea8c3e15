"""Shared pytest fixtures for Status Portal tests.

Fixture summary
---------------
settings             - Settings with no Discord configuration.
configured_settings  - Settings with a test bot token and guild ID.
client               - httpx.AsyncClient against an app built from ``settings``.
configured_client    - httpx.AsyncClient against an app built from
                       ``configured_settings``.

Every Discord call is stubbed with respx; no test touches the network.
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient

# ---------------------------------------------------------------------------
# Test environment bootstrap
# ---------------------------------------------------------------------------
# A developer shell may export real Discord credentials.  Remove them before
# any application module is imported so the module-level ``app`` singleton
# is built unconfigured and no test can reach Discord with a real token.

for _key in ("DISCORD_BOT_TOKEN", "DISCORD_SERVER_ID"):
    os.environ.pop(_key, None)

from status_portal.config.settings import Settings, get_settings  # noqa: E402
from tests.factories.settings import (  # noqa: E402
    app_client,
    make_configured_settings,
    make_settings,
)

get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    """Settings with neither bot token nor guild ID."""
    return make_settings()


@pytest.fixture
def configured_settings() -> Settings:
    """Settings with the test bot token and guild ID."""
    return make_configured_settings()


@pytest_asyncio.fixture
async def client(settings: Settings) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client for an unconfigured application."""
    async with app_client(settings) as ac:
        yield ac


@pytest_asyncio.fixture
async def configured_client(
    configured_settings: Settings,
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client for an application with Discord configured."""
    async with app_client(configured_settings) as ac:
        yield ac
