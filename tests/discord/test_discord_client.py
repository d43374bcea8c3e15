"""Tests for the Discord REST client and its HTTP dispatch.

Covers:
- Request shape: base URL, ``Authorization: Bot <token>``, Content-Type,
  query parameters for ``with_counts`` and the member probe ``limit``
- Non-2xx responses -> UpstreamError carrying the status code
- Connection errors and invalid JSON bodies -> UpstreamTransportError
- Injected httpx clients are used as-is and left open

These tests run without a network connection (respx).
"""

from __future__ import annotations

import httpx
import pytest
import respx

from status_portal.core.exceptions import (
    UpstreamError,
    UpstreamFailure,
    UpstreamTransportError,
)
from status_portal.discord.client import DiscordClient
from status_portal.discord.config import DISCORD_API_BASE
from tests.factories import TEST_BOT_TOKEN, TEST_GUILD_ID, load_discord_fixture


class TestRequestShape:
    @pytest.mark.asyncio
    async def test_get_guild_requests_counts_with_bot_authorization(self) -> None:
        """get_guild() calls /guilds/{id}?with_counts=true with the bot token header."""
        with respx.mock:
            route = respx.get(
                f"{DISCORD_API_BASE}/guilds/{TEST_GUILD_ID}",
                params={"with_counts": "true"},
            ).mock(return_value=httpx.Response(200, json=load_discord_fixture("guild_response")))

            async with DiscordClient(TEST_BOT_TOKEN) as discord:
                guild = await discord.get_guild(TEST_GUILD_ID)

        assert route.called
        request = route.calls.last.request
        assert request.headers["Authorization"] == f"Bot {TEST_BOT_TOKEN}"
        assert request.headers["Content-Type"] == "application/json"
        assert "User-Agent" in request.headers
        assert guild["approximate_member_count"] == 1000

    @pytest.mark.asyncio
    async def test_list_guild_members_sends_limit_1000(self) -> None:
        """list_guild_members() asks for up to 1000 members by default."""
        with respx.mock:
            route = respx.get(f"{DISCORD_API_BASE}/guilds/{TEST_GUILD_ID}/members").mock(
                return_value=httpx.Response(
                    200, json=load_discord_fixture("guild_members_response")
                )
            )

            async with DiscordClient(TEST_BOT_TOKEN) as discord:
                members = await discord.list_guild_members(TEST_GUILD_ID)

        assert route.calls.last.request.url.params["limit"] == "1000"
        assert len(members) == 2

    @pytest.mark.asyncio
    async def test_get_current_user_and_guilds_paths(self) -> None:
        """get_current_user() and list_current_user_guilds() hit the @me endpoints."""
        with respx.mock:
            me = respx.get(f"{DISCORD_API_BASE}/users/@me").mock(
                return_value=httpx.Response(
                    200, json=load_discord_fixture("current_user_response")
                )
            )
            guilds = respx.get(f"{DISCORD_API_BASE}/users/@me/guilds").mock(
                return_value=httpx.Response(
                    200, json=load_discord_fixture("current_user_guilds_response")
                )
            )

            async with DiscordClient(TEST_BOT_TOKEN) as discord:
                user = await discord.get_current_user()
                guild_list = await discord.list_current_user_guilds()

        assert me.call_count == 1
        assert guilds.call_count == 1
        assert user["username"] == "Akane"
        assert [g["name"] for g in guild_list] == ["Akane & Koharu Lounge", "Quiz Night"]


class TestFailureMapping:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code", [401, 403, 404, 429, 500, 503])
    async def test_non_success_status_raises_upstream_error(self, status_code: int) -> None:
        """Any non-2xx answer raises UpstreamError with that status."""
        with respx.mock:
            respx.get(f"{DISCORD_API_BASE}/users/@me").mock(
                return_value=httpx.Response(status_code, json={"message": "nope", "code": 0})
            )

            async with DiscordClient(TEST_BOT_TOKEN) as discord:
                with pytest.raises(UpstreamError) as exc_info:
                    await discord.get_current_user()

        assert exc_info.value.status_code == status_code
        assert exc_info.value.path == "/users/@me"
        assert str(exc_info.value) == f"Discord API Error: {status_code}"

    @pytest.mark.asyncio
    async def test_connect_error_raises_transport_error(self) -> None:
        """httpx connection errors become UpstreamTransportError."""
        with respx.mock:
            respx.get(f"{DISCORD_API_BASE}/users/@me/guilds").mock(
                side_effect=httpx.ConnectError("connection refused")
            )

            async with DiscordClient(TEST_BOT_TOKEN) as discord:
                with pytest.raises(UpstreamTransportError, match="connection refused"):
                    await discord.list_current_user_guilds()

    @pytest.mark.asyncio
    async def test_timeout_without_text_names_exception_type(self) -> None:
        """A timeout with an empty message still yields a descriptive error."""
        with respx.mock:
            respx.get(f"{DISCORD_API_BASE}/users/@me").mock(
                side_effect=httpx.ReadTimeout("")
            )

            async with DiscordClient(TEST_BOT_TOKEN) as discord:
                with pytest.raises(UpstreamTransportError, match="ReadTimeout"):
                    await discord.get_current_user()

    @pytest.mark.asyncio
    async def test_invalid_json_body_raises_transport_error(self) -> None:
        """A 200 response that is not JSON becomes UpstreamTransportError."""
        with respx.mock:
            respx.get(f"{DISCORD_API_BASE}/users/@me").mock(
                return_value=httpx.Response(200, text="<html>maintenance</html>")
            )

            async with DiscordClient(TEST_BOT_TOKEN) as discord:
                with pytest.raises(UpstreamTransportError, match="invalid JSON"):
                    await discord.get_current_user()

    def test_upstream_exceptions_share_a_base(self) -> None:
        """Both upstream exceptions can be caught as UpstreamFailure."""
        assert issubclass(UpstreamError, UpstreamFailure)
        assert issubclass(UpstreamTransportError, UpstreamFailure)


class TestClientLifecycle:
    @pytest.mark.asyncio
    async def test_injected_client_is_used_and_not_closed(self) -> None:
        """An injected httpx client is used for requests and left open on exit."""
        with respx.mock:
            route = respx.get(f"{DISCORD_API_BASE}/users/@me").mock(
                return_value=httpx.Response(
                    200, json=load_discord_fixture("current_user_response")
                )
            )
            injected = httpx.AsyncClient(
                base_url=DISCORD_API_BASE,
                headers={"Authorization": "Bot injected-token"},
            )
            try:
                async with DiscordClient(TEST_BOT_TOKEN, http_client=injected) as discord:
                    await discord.get_current_user()

                assert not injected.is_closed
                assert route.calls.last.request.headers["Authorization"] == "Bot injected-token"
            finally:
                await injected.aclose()

    @pytest.mark.asyncio
    async def test_calling_outside_context_manager_raises(self) -> None:
        """Endpoints refuse to run before the client has been entered."""
        discord = DiscordClient(TEST_BOT_TOKEN)

        with pytest.raises(RuntimeError, match="context manager"):
            await discord.get_current_user()


class TestResponseShape:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("path", "body", "call", "args"),
        [
            (f"/guilds/{TEST_GUILD_ID}", [], "get_guild", (TEST_GUILD_ID,)),
            ("/users/@me", ["Akane"], "get_current_user", ()),
            ("/users/@me/guilds", {"message": "weird"}, "list_current_user_guilds", ()),
            (f"/guilds/{TEST_GUILD_ID}/members", [1, 2], "list_guild_members", (TEST_GUILD_ID,)),
        ],
    )
    async def test_wrong_shape_raises_transport_error(
        self, path: str, body: object, call: str, args: tuple[str, ...]
    ) -> None:
        """A 2xx body that is not the endpoint's object/array shape is rejected."""
        with respx.mock:
            respx.get(f"{DISCORD_API_BASE}{path}").mock(
                return_value=httpx.Response(200, json=body)
            )

            async with DiscordClient(TEST_BOT_TOKEN) as discord:
                method = getattr(discord, call)
                with pytest.raises(UpstreamTransportError, match="unexpected") as exc_info:
                    await method(*args)

        assert exc_info.value.path == path
