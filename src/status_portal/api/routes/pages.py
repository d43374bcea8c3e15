"""HTML page routes for the static site.

Each page is a plain HTML file in ``settings.public_dir``; nothing is
templated.  Pages are addressed with or without the ``.html`` extension
(``/terms`` and ``/terms.html`` serve the same file).

Routes:
    GET /          → index.html
    GET /index     → index.html
    GET /terms     → terms.html
    GET /privacy   → privacy.html
    GET /docs      → docs.html
    GET /status    → status.html
    GET /servers   → servers.html
    GET /akane     → akane.html
    GET /koharu    → koharu.html

A page whose file is missing answers 404 (rendered by the application's
404 handler).
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Awaitable, Callable

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import FileResponse

from status_portal.api.dependencies import get_app_settings
from status_portal.config.settings import Settings

HTML_PAGES: tuple[str, ...] = (
    "index",
    "terms",
    "privacy",
    "docs",
    "status",
    "servers",
    "akane",
    "koharu",
)
"""Page names served at ``/<name>`` from ``<public_dir>/<name>.html``."""

router = APIRouter(include_in_schema=False)


def page_file(public_dir: Path, page: str) -> Path:
    """Return the HTML file for *page*, raising 404 if it does not exist."""
    path = public_dir / f"{page}.html"
    if not path.is_file():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return path


@router.get("/")
async def root_page(
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> FileResponse:
    """Serve the landing page."""
    return FileResponse(page_file(settings.public_dir, "index"), media_type="text/html")


def _page_handler(page: str) -> Callable[..., Awaitable[FileResponse]]:
    async def serve_page(
        settings: Annotated[Settings, Depends(get_app_settings)],
    ) -> FileResponse:
        return FileResponse(page_file(settings.public_dir, page), media_type="text/html")

    serve_page.__name__ = f"{page}_page"
    return serve_page


for _page in HTML_PAGES:
    for _path in (f"/{_page}", f"/{_page}.html"):
        router.add_api_route(_path, _page_handler(_page), methods=["GET"])
