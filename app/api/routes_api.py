"""API routes returning JSON for HTMX or external tools."""

from fastapi import APIRouter

from app.api.routes_ui import get_catalog_session
from app.models.state import AppState
from app.services.renderer import RenderedDocument

router = APIRouter()


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok", "service": "showarr"}


@router.get("/sessions/{session_id}/document", response_model=RenderedDocument)
async def session_document(session_id: str):
    """Return the last rendered document of a session."""
    return get_catalog_session(session_id).renderer.document


@router.get("/sessions/{session_id}/state", response_model=AppState)
async def session_state(session_id: str):
    """Return the raw application state of a session."""
    return get_catalog_session(session_id).state
