"""Per-session cache of fetched shows and episodes."""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, List, Optional, Union

from app.models.media import Episode, Show
from app.services.filters import sort_shows
from app.services.tvmaze import TVMazeGateway

logger = logging.getLogger(__name__)

ALL_SHOWS = "all-shows"

ResourceKey = Union[str, int]


class CacheStore:
    """Single source of truth for "have we already fetched X".

    Shows are fetched once and stored sorted by name. Episodes are fetched
    lazily per show id and stored in API order. Concurrent requests for the
    same resource share one task, so the gateway is called and the cache is
    written exactly once.
    """

    def __init__(self, gateway: TVMazeGateway):
        self.gateway = gateway
        self._shows: Optional[List[Show]] = None
        self._episodes: Dict[int, List[Episode]] = {}
        self._in_flight: Dict[ResourceKey, asyncio.Task] = {}

    @property
    def shows(self) -> Optional[List[Show]]:
        """Cached shows, or None before the first successful fetch."""
        return self._shows

    def episodes_for(self, show_id: int) -> Optional[List[Episode]]:
        return self._episodes.get(show_id)

    def has_episodes(self, show_id: int) -> bool:
        return show_id in self._episodes

    def find_show(self, show_id: Optional[int]) -> Optional[Show]:
        if show_id is None or not self._shows:
            return None
        for show in self._shows:
            if show.id == show_id:
                return show
        return None

    async def _shared(self, key: ResourceKey, load: Callable[[], Awaitable]):
        """Run ``load`` once per key while it is pending; late callers join it."""
        task = self._in_flight.get(key)
        if task is None:

            async def run():
                try:
                    return await load()
                finally:
                    self._in_flight.pop(key, None)

            task = asyncio.ensure_future(run())
            self._in_flight[key] = task
        return await asyncio.shield(task)

    async def _load_shows(self) -> List[Show]:
        shows = sort_shows(await self.gateway.fetch_shows())
        self._shows = shows
        logger.info("Cached %d shows", len(shows))
        return shows

    async def _load_episodes(self, show_id: int) -> List[Episode]:
        episodes = await self.gateway.fetch_episodes(show_id)
        self._episodes[show_id] = episodes
        logger.info("Cached %d episodes for show %s", len(episodes), show_id)
        return episodes

    async def get_or_fetch_shows(self) -> List[Show]:
        """Return cached shows, fetching them on first use."""
        if self._shows is not None:
            return self._shows
        return await self._shared(ALL_SHOWS, self._load_shows)

    async def get_or_fetch_episodes(self, show_id: int) -> List[Episode]:
        """Return cached episodes for a show, fetching them on first use."""
        cached = self._episodes.get(show_id)
        if cached is not None:
            return cached
        return await self._shared(show_id, lambda: self._load_episodes(show_id))
