"""
Page routes.

Routes:
- GET /              - Render index.json
- GET /index.{name}  - Render index.{name}.json
- GET /favicon.ico   - Static favicon
Everything else is a 404. Static assets are mounted under /static by the
application factory.
"""

import asyncio
import functools
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import FileResponse, HTMLResponse

from jsonpage.errors import RenderTimeoutError
from jsonpage.services.page_service import PageService
from jsonpage.settings import Settings


router = APIRouter(tags=["pages"])


# =============================================================================
# Dependencies
# =============================================================================

def get_page_service(request: Request) -> PageService:
    return request.app.state.page_service


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


# =============================================================================
# Helpers
# =============================================================================

async def render_bounded(
    service: PageService,
    name: Optional[str],
    request_id: Optional[str],
    timeout: float,
) -> str:
    """
    Render a page on a worker thread, failing the request after ``timeout`` seconds.

    Raises:
        RenderTimeoutError: If rendering did not finish in time
    """
    loop = asyncio.get_running_loop()
    # An executor future can be abandoned on timeout; the worker thread finishes on its own.
    future = loop.run_in_executor(
        None, functools.partial(service.render_page, name, request_id)
    )
    try:
        page = await asyncio.wait_for(future, timeout=timeout)
    except asyncio.TimeoutError as e:
        raise RenderTimeoutError(
            f"Rendering {name or 'index'} exceeded {timeout:.1f}s"
        ) from e
    return page.html


# =============================================================================
# Routes
# =============================================================================

@router.get("/", response_class=HTMLResponse)
async def index_page(
    request: Request,
    service: PageService = Depends(get_page_service),
    settings: Settings = Depends(get_app_settings),
):
    """Render the default document."""
    html = await render_bounded(
        service,
        None,
        getattr(request.state, "request_id", None),
        settings.request_timeout_seconds,
    )
    return HTMLResponse(html)


@router.get("/index.{name}", response_class=HTMLResponse)
async def named_page(
    name: str,
    request: Request,
    service: PageService = Depends(get_page_service),
    settings: Settings = Depends(get_app_settings),
):
    """Render an alternate named document."""
    html = await render_bounded(
        service,
        name,
        getattr(request.state, "request_id", None),
        settings.request_timeout_seconds,
    )
    return HTMLResponse(html)


@router.get("/favicon.ico", include_in_schema=False)
async def favicon(settings: Settings = Depends(get_app_settings)):
    path = settings.static_dir / "favicon.ico"
    if not path.is_file():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return FileResponse(path)
