"""UI routes returning HTML via Jinja2 templates.

Every action route maps one user event onto the session's controller and
returns the freshly rendered ``#catalog`` partial for HTMX to swap in.
"""

import logging
from pathlib import Path

from fastapi import APIRouter, Form, HTTPException, Request
from fastapi.templating import Jinja2Templates

from app.services.sessions import CatalogSession, registry

router = APIRouter()
logger = logging.getLogger(__name__)

# Templates directory
BASE_DIR = Path(__file__).resolve().parent.parent
templates = Jinja2Templates(directory=BASE_DIR / "templates")


def get_catalog_session(session_id: str) -> CatalogSession:
    """Look up a live session or fail with 404."""
    session = registry.get(session_id)
    if session is None:
        logger.info(f"Unknown or expired session {session_id}")
        raise HTTPException(status_code=404, detail="Session not found")
    return session


def _parse_id(value: str) -> int | None:
    """Parse a selector value; the empty string is the neutral option."""
    value = value.strip()
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid id: {value!r}")


def _catalog(request: Request, session: CatalogSession):
    return templates.TemplateResponse(
        request=request,
        name="partials/catalog.html",
        context={"doc": session.renderer.document, "session_id": session.id},
    )


@router.get("/")
async def index(request: Request):
    """Render the page shell for a new session.

    The shell shows a loading status and asks HTMX to run startup on load.
    """
    session = registry.create()
    return templates.TemplateResponse(
        request=request,
        name="index.html",
        context={"session_id": session.id, "page_title": "TV Shows"},
    )


@router.post("/sessions/{session_id}/startup")
async def startup(request: Request, session_id: str):
    session = get_catalog_session(session_id)
    await session.controller.startup()
    return _catalog(request, session)


@router.post("/sessions/{session_id}/shows/search")
async def search_shows(request: Request, session_id: str, query: str = Form("")):
    session = get_catalog_session(session_id)
    session.controller.set_shows_search(query)
    return _catalog(request, session)


@router.post("/sessions/{session_id}/shows/open")
async def open_show_from_selector(
    request: Request, session_id: str, show_id: str = Form("")
):
    """Handle the "Jump to show" selector; the neutral option does nothing."""
    session = get_catalog_session(session_id)
    parsed = _parse_id(show_id)
    if parsed is None:
        session.controller.render()
    else:
        await session.controller.open_show(parsed)
    return _catalog(request, session)


@router.post("/sessions/{session_id}/shows/{show_id}")
async def open_show(request: Request, session_id: str, show_id: int):
    """Open a show from its card."""
    session = get_catalog_session(session_id)
    await session.controller.open_show(show_id)
    return _catalog(request, session)


@router.post("/sessions/{session_id}/episodes/select")
async def select_episode(
    request: Request, session_id: str, episode_id: str = Form("")
):
    session = get_catalog_session(session_id)
    session.controller.select_episode(_parse_id(episode_id))
    return _catalog(request, session)


@router.post("/sessions/{session_id}/episodes/search")
async def search_episodes(request: Request, session_id: str, query: str = Form("")):
    session = get_catalog_session(session_id)
    session.controller.set_episode_search(query)
    return _catalog(request, session)


@router.post("/sessions/{session_id}/back")
async def back(request: Request, session_id: str):
    session = get_catalog_session(session_id)
    session.controller.back()
    return _catalog(request, session)
