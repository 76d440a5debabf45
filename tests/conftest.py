import asyncio
from unittest.mock import AsyncMock

import pytest

from app.models.media import Episode, Show
from app.models.state import AppState
from app.services.cache import CacheStore
from app.services.controller import Controller
from app.services.renderer import DocumentRenderer


class FakeGateway:
    """Stands in for TVMazeGateway; fetches can be held open with gates."""

    def __init__(self, shows=None, episodes=None):
        self.shows = shows or []
        self.episodes = episodes or {}
        self.gates: dict[int, asyncio.Event] = {}
        self.errors: dict[int, Exception] = {}
        self.shows_error: Exception | None = None
        self.fetch_shows = AsyncMock(side_effect=self._fetch_shows)
        self.fetch_episodes = AsyncMock(side_effect=self._fetch_episodes)

    async def _fetch_shows(self):
        if self.shows_error is not None:
            raise self.shows_error
        return list(self.shows)

    async def _fetch_episodes(self, show_id):
        gate = self.gates.get(show_id)
        if gate is not None:
            await gate.wait()
        if show_id in self.errors:
            raise self.errors[show_id]
        return list(self.episodes.get(show_id, []))

    async def aclose(self):
        pass


def make_show(show_id, name, summary=None, genres=None, **kwargs):
    return Show(id=show_id, name=name, summary=summary, genres=genres or [], **kwargs)


def make_episode(episode_id, season, number, name, summary=None, **kwargs):
    return Episode(
        id=episode_id,
        season=season,
        number=number,
        name=name,
        summary=summary,
        url=f"https://www.tvmaze.com/episodes/{episode_id}",
        **kwargs,
    )


@pytest.fixture
def shows():
    return [
        make_show(
            10,
            "Under the Dome",
            summary="<p><b>Under the Dome</b> is the story of a small town.</p>",
            genres=["Drama", "Science-Fiction", "Thriller"],
            status="Ended",
            runtime=60,
            rating_average=6.5,
            image_medium_url="https://static.tvmaze.com/uploads/images/medium_portrait/81/202627.jpg",
        ),
        make_show(
            2,
            "Person of Interest",
            summary="<p>You are being watched.</p>",
            genres=["Action", "Crime"],
        ),
    ]


@pytest.fixture
def episodes():
    return [
        make_episode(1, 1, 1, "Pilot", summary="<p>When the dome comes down.</p>"),
        make_episode(2, 1, 2, "The Fire", summary="<p>Duke's house burns.</p>"),
        make_episode(3, 1, 3, "Manhunt", summary="<p>A search for a killer.</p>"),
    ]


@pytest.fixture
def gateway(shows, episodes):
    return FakeGateway(shows=shows, episodes={10: episodes})


@pytest.fixture
def cache(gateway):
    return CacheStore(gateway)


@pytest.fixture
def renderer():
    return DocumentRenderer()


@pytest.fixture
def controller(cache, renderer):
    return Controller(AppState(), cache, renderer)
