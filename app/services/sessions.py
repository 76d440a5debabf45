"""In-memory browser sessions: one controller per page load."""

import logging
import uuid
from dataclasses import dataclass

from cachetools import TTLCache

from app.core.config import get_settings
from app.models.state import AppState
from app.services.cache import CacheStore
from app.services.controller import Controller
from app.services.renderer import DocumentRenderer
from app.services.tvmaze import TVMazeGateway

logger = logging.getLogger(__name__)


@dataclass
class CatalogSession:
    """Everything owned by one page load."""

    id: str
    state: AppState
    cache: CacheStore
    renderer: DocumentRenderer
    controller: Controller


class SessionRegistry:
    """Holds live sessions; idle ones expire after ``session_ttl`` seconds."""

    def __init__(
        self,
        gateway: TVMazeGateway,
        maxsize: int | None = None,
        ttl: int | None = None,
    ) -> None:
        settings = get_settings()
        self.gateway = gateway
        self._sessions: TTLCache = TTLCache(
            maxsize=maxsize or settings.session_max_count,
            ttl=ttl or settings.session_ttl,
        )

    def create(self) -> CatalogSession:
        session_id = uuid.uuid4().hex
        state = AppState()
        cache = CacheStore(self.gateway)
        renderer = DocumentRenderer()
        controller = Controller(state, cache, renderer)
        session = CatalogSession(
            id=session_id,
            state=state,
            cache=cache,
            renderer=renderer,
            controller=controller,
        )
        self._sessions[session_id] = session
        logger.debug("Created session %s", session_id)
        return session

    def get(self, session_id: str) -> CatalogSession | None:
        session = self._sessions.get(session_id)
        if session is not None:
            # Refresh the TTL on activity.
            self._sessions[session_id] = session
        return session

    def __len__(self) -> int:
        return len(self._sessions)

    def clear(self) -> None:
        self._sessions.clear()


registry = SessionRegistry(TVMazeGateway())
