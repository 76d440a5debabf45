"""TVMaze gateway for fetching show and episode collections."""

import asyncio
import logging
from typing import Any, Callable, Dict, List, TypeVar

import niquests
from pydantic import ValidationError

from app.core.config import get_settings
from app.models.media import Episode, Show

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CatalogError(Exception):
    """Domain exception for catalog fetch failures."""

    def __init__(self, message: str, original_exception: Exception = None):
        super().__init__(message)
        self.original_exception = original_exception


class NetworkError(CatalogError):
    """Transport failure or non-success HTTP status."""


class MalformedResponseError(CatalogError):
    """Payload is not JSON or does not match the expected shape."""


def _nested(item: dict, key: str, field: str) -> Any:
    """Read ``item[key][field]`` where ``item[key]`` may be null."""
    value = item.get(key)
    if isinstance(value, dict):
        return value.get(field)
    return None


def _parse_show(item: dict) -> Show:
    """Parse a show object from TVMaze."""
    return Show(
        id=item["id"],
        name=item["name"],
        summary=item.get("summary"),
        genres=item.get("genres") or [],
        status=item.get("status"),
        runtime=item.get("runtime"),
        rating_average=_nested(item, "rating", "average"),
        image_medium_url=_nested(item, "image", "medium"),
    )


def _parse_episode(item: dict) -> Episode:
    """Parse an episode object from TVMaze."""
    return Episode(
        id=item["id"],
        season=item["season"],
        number=item["number"],
        name=item["name"],
        summary=item.get("summary"),
        url=item["url"],
        image_medium_url=_nested(item, "image", "medium"),
    )


def _parse_collection(
    payload: Any, parser: Callable[[dict], T], url: str
) -> List[T]:
    """Parse a JSON array, rejecting the whole payload if any item is bad."""
    if not isinstance(payload, list):
        raise MalformedResponseError(f"Expected a JSON array from {url}")

    results = []
    for item in payload:
        if not isinstance(item, dict):
            raise MalformedResponseError(f"Expected JSON objects from {url}")
        try:
            results.append(parser(item))
        except (KeyError, ValidationError) as exc:
            logger.error("Malformed item from %s: %s", url, exc)
            raise MalformedResponseError(f"Malformed item from {url}", exc)
    return results


class TVMazeGateway:
    """Fetches collections from the TVMaze API.

    Concurrent requests for the same URL share one transport call. Results
    are not kept once the request settles; caching is the CacheStore's job.
    """

    def __init__(self, base_url: str | None = None, retries: int | None = None):
        settings = get_settings()
        self._settings = settings
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        if retries is None:
            retries = settings.http_retries
        self.session = niquests.AsyncSession(retries=retries)
        if settings.proxy:
            self.session.proxies = {"http": settings.proxy, "https": settings.proxy}
        self._in_flight: Dict[str, asyncio.Task] = {}

    async def aclose(self) -> None:
        """Properly close the internal HTTP session."""
        if hasattr(self, "session") and self.session:
            await self.session.close()

    def shows_url(self) -> str:
        return f"{self.base_url}/shows"

    def episodes_url(self, show_id: int) -> str:
        return f"{self.base_url}/shows/{show_id}/episodes"

    async def _get_json(self, url: str) -> Any:
        """Perform the GET request and decode the JSON body."""
        logger.info("Fetching %s", url)
        try:
            response = await self.session.get(
                url, timeout=self._settings.request_timeout
            )
            response.raise_for_status()
        except niquests.exceptions.RequestException as exc:
            logger.error("Error fetching %s: %s", url, exc)
            raise NetworkError(f"Failed to fetch: {url}", exc)

        try:
            return response.json()
        except ValueError as exc:
            logger.error("Invalid JSON from %s: %s", url, exc)
            raise MalformedResponseError(f"Invalid JSON from {url}", exc)

    async def _run(self, url: str) -> Any:
        try:
            return await self._get_json(url)
        finally:
            self._in_flight.pop(url, None)

    async def fetch_json(self, url: str) -> Any:
        """Fetch JSON, joining an identical request that is still pending."""
        task = self._in_flight.get(url)
        if task is None:
            task = asyncio.ensure_future(self._run(url))
            self._in_flight[url] = task
        else:
            logger.debug("Joining in-flight request for %s", url)
        return await asyncio.shield(task)

    def pending(self) -> List[str]:
        """URLs with a request currently in flight."""
        return list(self._in_flight.keys())

    async def fetch_shows(self) -> List[Show]:
        """Fetch the full show list."""
        url = self.shows_url()
        payload = await self.fetch_json(url)
        return _parse_collection(payload, _parse_show, url)

    async def fetch_episodes(self, show_id: int) -> List[Episode]:
        """Fetch all episodes of one show, in API order."""
        url = self.episodes_url(show_id)
        payload = await self.fetch_json(url)
        return _parse_collection(payload, _parse_episode, url)
