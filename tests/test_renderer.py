import pytest
import pytest_asyncio

from app.models.state import AppState, Status, View
from app.services.cache import CacheStore
from app.services.renderer import (
    GENERIC_ERROR_MESSAGE,
    NO_SHOW_MESSAGE,
    build_document,
)
from tests.conftest import FakeGateway, make_episode, make_show


@pytest_asyncio.fixture
async def loaded_cache(cache):
    await cache.get_or_fetch_shows()
    await cache.get_or_fetch_episodes(10)
    return cache


def episodes_state(**kwargs):
    return AppState(
        status=Status.LOADED, view=View.EPISODES, selected_show_id=10, **kwargs
    )


@pytest.mark.asyncio
async def test_render_is_idempotent(loaded_cache):
    state = episodes_state(episode_search_text="the")

    first = build_document(state, loaded_cache)
    second = build_document(state, loaded_cache)

    assert first == second
    assert first.model_dump() == second.model_dump()


@pytest.mark.asyncio
async def test_loading_short_circuits(loaded_cache):
    doc = build_document(AppState(status=Status.LOADING), loaded_cache)

    assert doc.status_message == "Loading…"
    assert doc.show_cards == []
    assert doc.show_options == []
    assert not doc.shows_toolbar_visible
    assert not doc.episodes_toolbar_visible


@pytest.mark.asyncio
async def test_error_uses_message_or_fallback(loaded_cache):
    doc = build_document(
        AppState(status=Status.ERROR, error_message="Nope"), loaded_cache
    )
    assert doc.status_message == "Nope"
    assert doc.episode_cards == []

    doc = build_document(AppState(status=Status.ERROR), loaded_cache)
    assert doc.status_message == GENERIC_ERROR_MESSAGE


@pytest.mark.asyncio
async def test_shows_view(loaded_cache):
    doc = build_document(AppState(status=Status.LOADED), loaded_cache)

    assert doc.status_message is None
    assert doc.shows_toolbar_visible
    assert not doc.episodes_toolbar_visible
    assert doc.shows_count_text == "Found 2 shows"
    assert [o.label for o in doc.show_options] == [
        "Jump to show",
        "Person of Interest",
        "Under the Dome",
    ]
    assert doc.show_options[0].value == ""
    assert doc.episode_cards == []


@pytest.mark.asyncio
async def test_shows_count_singular(loaded_cache):
    state = AppState(status=Status.LOADED, shows_search_text="dome")
    doc = build_document(state, loaded_cache)

    assert doc.shows_count_text == "Found 1 show"
    assert doc.shows_search_text == "dome"


@pytest.mark.asyncio
async def test_show_card_fields(loaded_cache):
    doc = build_document(AppState(status=Status.LOADED), loaded_cache)
    poi, dome = doc.show_cards

    assert dome.summary == "Under the Dome is the story of a small town."
    assert dome.poster_url.startswith("https://static.tvmaze.com/")
    assert {row.label: row.value for row in dome.meta} == {
        "Rated": "6.5",
        "Genres": "Drama | Science-Fiction | Thriller",
        "Status": "Ended",
        "Runtime": "60",
    }

    assert poi.poster_url == (
        "https://placehold.co/320x450/2d1b4e/d4c5f9?text=Person%20of%20Interest"
    )
    assert {row.label: row.value for row in poi.meta} == {
        "Rated": "N/A",
        "Genres": "Action | Crime",
        "Status": "Unknown",
        "Runtime": "N/A",
    }


@pytest.mark.asyncio
async def test_long_summary_truncated():
    show = make_show(1, "Wordy", summary=f"<p>{'x' * 500}</p>")
    gateway = FakeGateway(shows=[show])

    cache = CacheStore(gateway)
    await cache.get_or_fetch_shows()

    doc = build_document(AppState(status=Status.LOADED), cache)

    assert len(doc.show_cards[0].summary) == 420
    assert doc.show_cards[0].summary.endswith("…")


@pytest.mark.asyncio
async def test_episodes_view(loaded_cache):
    doc = build_document(episodes_state(), loaded_cache)

    assert doc.episodes_toolbar_visible
    assert not doc.shows_toolbar_visible
    assert doc.show_cards == []
    assert doc.heading == "Under the Dome"
    assert doc.selected_show_value == "10"
    assert doc.episodes_count_text == "Displaying 3 of 3 episodes"
    assert [o.label for o in doc.episode_options] == [
        "All Episodes",
        "S01-E01 - Pilot",
        "S01-E02 - The Fire",
        "S01-E03 - Manhunt",
    ]
    assert [c.code for c in doc.episode_cards] == ["S01-E01", "S01-E02", "S01-E03"]


@pytest.mark.asyncio
async def test_episode_selection_reflected(loaded_cache):
    doc = build_document(episodes_state(selected_episode_id=2), loaded_cache)

    assert doc.selected_episode_value == "2"
    assert [c.name for c in doc.episode_cards] == ["The Fire"]
    assert doc.episodes_count_text == "Displaying 1 of 3 episodes"


@pytest.mark.asyncio
async def test_episode_card_placeholder(cache):
    cache.gateway.episodes[5] = [
        make_episode(
            50, 2, 4, "No Image Here", image_medium_url=None, summary="<p>Hi</p>"
        ),
        make_episode(51, 2, 5, "Has Image", image_medium_url="https://img/ep.jpg"),
    ]
    await cache.get_or_fetch_shows()
    await cache.get_or_fetch_episodes(5)

    state = AppState(status=Status.LOADED, view=View.EPISODES, selected_show_id=5)
    doc = build_document(state, cache)
    placeholder, real = doc.episode_cards

    assert placeholder.image_url == (
        "https://placehold.co/600x400/2d1b4e/d4c5f9?text=No+Image+Here"
    )
    assert placeholder.image_alt == "Placeholder Image for No Image Here"
    assert placeholder.summary == "Hi"
    assert real.image_url == "https://img/ep.jpg"
    assert real.image_alt == "Has Image thumbnail"
    # Show 5 is not in the show list.
    assert doc.heading == "Episodes"


@pytest.mark.asyncio
async def test_episodes_view_without_show(loaded_cache):
    state = AppState(status=Status.LOADED, view=View.EPISODES)
    doc = build_document(state, loaded_cache)

    assert doc.empty_message == NO_SHOW_MESSAGE
    assert doc.episode_cards == []


@pytest.mark.asyncio
async def test_switching_views_leaves_no_stale_fragments(loaded_cache):
    episodes_doc = build_document(episodes_state(), loaded_cache)
    shows_doc = build_document(AppState(status=Status.LOADED), loaded_cache)

    assert episodes_doc.episode_cards
    assert shows_doc.episode_cards == []
    assert shows_doc.heading == ""
    assert shows_doc.episodes_count_text == ""


def test_empty_cache_renders_without_error(cache):
    doc = build_document(AppState(status=Status.LOADED), cache)
    assert doc.show_cards == []
    assert doc.shows_count_text == "Found 0 shows"

    doc = build_document(episodes_state(), cache)
    assert doc.episode_cards == []
    assert doc.episodes_count_text == "Displaying 0 of 0 episodes"
