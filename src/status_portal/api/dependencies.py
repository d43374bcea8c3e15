"""FastAPI dependency injection providers.

Route handlers never read configuration from the environment.  The settings
instance passed to :func:`~status_portal.api.main.create_app` is stored on
``app.state`` and handed to each request through these providers, so tests can
build an app around any :class:`Settings` they like.

Dependency hierarchy::

    get_app_settings   - the application's immutable Settings
    get_status_proxy   - a StatusProxy bound to those settings
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from status_portal.config.settings import Settings
from status_portal.discord.proxy import StatusProxy


def get_app_settings(request: Request) -> Settings:
    """Return the settings the running application was created with."""
    return request.app.state.settings


def get_status_proxy(
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> StatusProxy:
    """Return a :class:`StatusProxy` for the current request.

    A fresh proxy per request keeps handlers free of shared mutable state;
    the proxy itself holds nothing but a reference to the frozen settings.
    """
    return StatusProxy(settings)
