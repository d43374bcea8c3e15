"""Configuration package for Status Portal.

Re-exports the settings symbols so that callers can write::

    from status_portal.config import get_settings
"""

from __future__ import annotations

from status_portal.config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
