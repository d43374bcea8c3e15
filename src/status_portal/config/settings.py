"""Application settings loaded from environment variables.

Uses Pydantic Settings v2 for validated, type-safe configuration.
The Discord bot token and guild ID are accessed exclusively through this
module - never call ``os.getenv`` directly elsewhere in the codebase.

Usage::

    from status_portal.config.settings import get_settings

    settings = get_settings()
    token = settings.discord_bot_token

The settings object is frozen: it is built once at process start and then
passed to request handlers through FastAPI dependencies.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from status_portal.core.exceptions import ConfigurationMissingError

DEFAULT_PUBLIC_DIR: Path = Path(__file__).resolve().parent.parent / "api" / "public"
"""Bundled static site shipped inside the package."""


class Settings(BaseSettings):
    """Process-wide configuration backed by environment variables and an optional .env file.

    Both Discord fields are optional.  When either is missing the proxy
    endpoints answer with a fixed "not configured" payload instead of calling
    the Discord API.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # ------------------------------------------------------------------
    # Discord
    # ------------------------------------------------------------------

    discord_bot_token: Optional[str] = None
    """Bot token sent as ``Authorization: Bot <token>`` on every Discord call."""

    discord_server_id: Optional[str] = None
    """Snowflake ID of the guild whose member counts are shown on the site."""

    discord_request_timeout: float = 30.0
    """Seconds before an outbound Discord request is abandoned by httpx."""

    # ------------------------------------------------------------------
    # HTTP server
    # ------------------------------------------------------------------

    host: str = "0.0.0.0"
    """Interface uvicorn binds to when started via ``python -m status_portal``."""

    port: int = 3000
    """TCP port uvicorn listens on."""

    allowed_origins: list[str] = ["*"]
    """Origins permitted by the CORS middleware."""

    public_dir: Path = DEFAULT_PUBLIC_DIR
    """Directory holding the HTML pages, ``404.html`` and the ``static/`` assets."""

    # ------------------------------------------------------------------
    # Application behaviour
    # ------------------------------------------------------------------

    app_name: str = "Status Portal"
    """Human-readable application name shown in the OpenAPI docs."""

    debug: bool = False
    """Development mode.  Exposes exception text in 500 responses.  Never True in production."""

    log_level: str = "INFO"
    """Logging verbosity.  One of: DEBUG, INFO, WARNING, ERROR, CRITICAL."""

    @field_validator("discord_bot_token", "discord_server_id", mode="before")
    @classmethod
    def empty_to_none(cls, v: str | None) -> str | None:
        """Coerce empty or whitespace-only strings to None."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def require_discord(self, *, guild: bool = False) -> None:
        """Raise if the Discord settings needed for an upstream call are absent.

        Args:
            guild: Also require ``discord_server_id``.

        Raises:
            ConfigurationMissingError: Naming every missing environment variable.
        """
        missing: list[str] = []
        if not self.discord_bot_token:
            missing.append("DISCORD_BOT_TOKEN")
        if guild and not self.discord_server_id:
            missing.append("DISCORD_SERVER_ID")
        if missing:
            raise ConfigurationMissingError(tuple(missing))


@lru_cache
def get_settings() -> Settings:
    """Return the cached application settings singleton.

    Uses ``functools.lru_cache`` so that Pydantic Settings reads the environment
    and .env file exactly once per process lifetime.  In tests, call
    ``get_settings.cache_clear()`` after patching environment variables.

    Returns:
        Settings: The validated, immutable settings object.
    """
    return Settings()
