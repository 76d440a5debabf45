"""Controller: the only place AppState is mutated.

Each public method is one row of the transition table and ends with a full
render. Only ``startup`` and ``open_show`` await; the event loop runs one
handler step at a time, so no locking is needed around the state.
"""

import logging
from typing import Optional

from app.models.state import AppState, Status, View
from app.services.cache import CacheStore
from app.services.renderer import Renderer
from app.services.tvmaze import CatalogError

logger = logging.getLogger(__name__)

SHOWS_ERROR_MESSAGE = "Unable to load shows. Please try again."
EPISODES_ERROR_MESSAGE = "Unable to load episodes. Please try again."


class Controller:
    """Translates user events into state transitions, then re-renders."""

    def __init__(self, state: AppState, cache: CacheStore, renderer: Renderer):
        self.state = state
        self.cache = cache
        self.renderer = renderer

    def render(self) -> None:
        self.renderer.render(self.state, self.cache)

    def _mark_loaded(self) -> None:
        self.state.status = Status.LOADED
        self.state.error_message = ""

    def _is_stale(self, show_id: int) -> bool:
        """True if a response for show_id no longer belongs on screen."""
        return (
            self.state.view != View.EPISODES
            or self.state.selected_show_id != show_id
        )

    async def startup(self) -> None:
        """Load the show list and show it."""
        if self.state.status != Status.IDLE:
            logger.debug("Startup already ran (status=%s)", self.state.status.value)
            self.render()
            return

        self.state.status = Status.LOADING
        self.render()

        try:
            await self.cache.get_or_fetch_shows()
        except CatalogError as exc:
            logger.error("Unable to load shows: %s", exc)
            self.state.status = Status.ERROR
            self.state.error_message = SHOWS_ERROR_MESSAGE
            self.render()
            return

        self._mark_loaded()
        self.state.view = View.SHOWS
        self.render()

    def set_shows_search(self, text: str) -> None:
        self.state.shows_search_text = text
        self.render()

    async def open_show(self, show_id: int) -> None:
        """Switch to the episode listing of a show, fetching it if needed."""
        if self.cache.shows is None:
            logger.warning("Ignoring open of show %s before shows loaded", show_id)
            return

        self.state.selected_show_id = show_id
        self.state.view = View.EPISODES
        self.state.selected_episode_id = None
        self.state.episode_search_text = ""

        if not self.cache.has_episodes(show_id):
            self.state.status = Status.LOADING
            self.state.error_message = ""
            self.render()

            try:
                await self.cache.get_or_fetch_episodes(show_id)
            except CatalogError as exc:
                logger.error("Unable to load episodes for show %s: %s", show_id, exc)
                if self._is_stale(show_id):
                    return
                self.state.status = Status.ERROR
                self.state.error_message = EPISODES_ERROR_MESSAGE
                self.render()
                return

            # The user may have opened another show or gone back while this
            # one loaded; the episodes stay cached but must not touch the view.
            if self._is_stale(show_id):
                logger.info("Discarding stale episode response for show %s", show_id)
                return

        self._mark_loaded()
        self.render()

    def select_episode(self, episode_id: Optional[int]) -> None:
        """Pin one episode, or unpin with None."""
        if self.state.view != View.EPISODES:
            logger.debug("Ignoring episode selection outside episodes view")
            return

        self.state.selected_episode_id = episode_id
        if episode_id is not None:
            self.state.episode_search_text = ""
        self.render()

    def set_episode_search(self, text: str) -> None:
        if self.state.view != View.EPISODES:
            logger.debug("Ignoring episode search outside episodes view")
            return

        self.state.episode_search_text = text
        self.state.selected_episode_id = None
        self.render()

    def back(self) -> None:
        """Return to the shows listing."""
        self.state.view = View.SHOWS
        # Episode loading/errors are scoped to the show being left.
        if self.cache.shows is not None and self.state.status != Status.LOADED:
            self._mark_loaded()
        self.render()
