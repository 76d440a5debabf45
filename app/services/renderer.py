"""View rendering: projects AppState and the cache onto a document.

``build_document`` is pure and rebuilds everything on each call, so a
document never carries fragments from a previous view. Adapters turn the
document into HTML (see ``app/templates``) or JSON.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from urllib.parse import quote

from pydantic import BaseModel

from app.models.media import Episode, Show
from app.models.state import AppState, Status, View
from app.services.cache import CacheStore
from app.services.filters import (
    episode_option_label,
    extract_text,
    filter_episodes,
    filter_shows,
    format_episode_code,
    truncate_summary,
)

LOADING_MESSAGE = "Loading…"
GENERIC_ERROR_MESSAGE = "An error occurred while loading episodes."
NO_SHOW_MESSAGE = "Select a show to view episodes."
SHOW_PLACEHOLDER_OPTION = "Jump to show"
EPISODE_PLACEHOLDER_OPTION = "All Episodes"

SHOW_SUMMARY_LENGTH = 420
EPISODE_SUMMARY_LENGTH = 200
PLACEHOLDER_BASE = "https://placehold.co"


class SelectOption(BaseModel):
    value: str
    label: str


class MetaRow(BaseModel):
    label: str
    value: str


class ShowCard(BaseModel):
    id: int
    name: str
    summary: str
    poster_url: str
    poster_alt: str
    meta: List[MetaRow]


class EpisodeCard(BaseModel):
    id: int
    name: str
    code: str
    summary: str
    url: str
    image_url: str
    image_alt: str


class RenderedDocument(BaseModel):
    """Everything visible on the page for one state snapshot."""

    status_message: Optional[str] = None
    view: View = View.SHOWS
    shows_toolbar_visible: bool = False
    episodes_toolbar_visible: bool = False
    show_options: List[SelectOption] = []
    selected_show_value: str = ""
    episode_options: List[SelectOption] = []
    selected_episode_value: str = ""
    shows_search_text: str = ""
    episode_search_text: str = ""
    shows_count_text: str = ""
    episodes_count_text: str = ""
    heading: str = ""
    empty_message: str = ""
    show_cards: List[ShowCard] = []
    episode_cards: List[EpisodeCard] = []


class Renderer(ABC):
    """Capability interface the controller calls after every mutation."""

    @abstractmethod
    def render(self, state: AppState, cache: CacheStore) -> None:
        pass


class DocumentRenderer(Renderer):
    """Keeps the latest document for the HTML and JSON adapters."""

    def __init__(self) -> None:
        self.document: RenderedDocument = RenderedDocument()

    def render(self, state: AppState, cache: CacheStore) -> None:
        self.document = build_document(state, cache)


def _value(entity_id: Optional[int]) -> str:
    return "" if entity_id is None else str(entity_id)


def _shows_count_text(count: int) -> str:
    return "Found 1 show" if count == 1 else f"Found {count} shows"


def _show_card(show: Show) -> ShowCard:
    if show.image_medium_url:
        poster_url = show.image_medium_url
    else:
        poster_url = (
            f"{PLACEHOLDER_BASE}/320x450/2d1b4e/d4c5f9"
            f"?text={quote(show.name, safe='')}"
        )

    rating = f"{show.rating_average:g}" if show.rating_average else "N/A"
    meta = [
        MetaRow(label="Rated", value=rating),
        MetaRow(
            label="Genres",
            value=" | ".join(show.genres) if show.genres else "N/A",
        ),
        MetaRow(label="Status", value=show.status or "Unknown"),
        MetaRow(label="Runtime", value=str(show.runtime) if show.runtime else "N/A"),
    ]

    return ShowCard(
        id=show.id,
        name=show.name,
        summary=truncate_summary(extract_text(show.summary), SHOW_SUMMARY_LENGTH),
        poster_url=poster_url,
        poster_alt=show.name,
        meta=meta,
    )


def _episode_card(episode: Episode) -> EpisodeCard:
    if episode.image_medium_url:
        image_url = episode.image_medium_url
        image_alt = f"{episode.name} thumbnail"
    else:
        image_url = (
            f"{PLACEHOLDER_BASE}/600x400/2d1b4e/d4c5f9"
            f"?text={episode.name.replace(' ', '+')}"
        )
        image_alt = f"Placeholder Image for {episode.name}"

    return EpisodeCard(
        id=episode.id,
        name=episode.name,
        code=format_episode_code(episode.season, episode.number),
        summary=truncate_summary(
            extract_text(episode.summary), EPISODE_SUMMARY_LENGTH
        ),
        url=episode.url,
        image_url=image_url,
        image_alt=image_alt,
    )


def build_document(state: AppState, cache: CacheStore) -> RenderedDocument:
    """Project state and cached data onto a full document."""
    if state.status == Status.LOADING:
        return RenderedDocument(status_message=LOADING_MESSAGE, view=state.view)
    if state.status == Status.ERROR:
        return RenderedDocument(
            status_message=state.error_message or GENERIC_ERROR_MESSAGE,
            view=state.view,
        )

    shows = cache.shows or []
    show_options = [SelectOption(value="", label=SHOW_PLACEHOLDER_OPTION)]
    show_options.extend(SelectOption(value=str(s.id), label=s.name) for s in shows)

    document = RenderedDocument(
        view=state.view,
        shows_toolbar_visible=state.view == View.SHOWS,
        episodes_toolbar_visible=state.view == View.EPISODES,
        show_options=show_options,
        selected_show_value=_value(state.selected_show_id),
        episode_options=[SelectOption(value="", label=EPISODE_PLACEHOLDER_OPTION)],
        shows_search_text=state.shows_search_text,
        episode_search_text=state.episode_search_text,
    )

    if state.view == View.SHOWS:
        filtered = filter_shows(shows, state.shows_search_text)
        document.shows_count_text = _shows_count_text(len(filtered))
        document.show_cards = [_show_card(show) for show in filtered]
        return document

    if state.selected_show_id is None:
        document.empty_message = NO_SHOW_MESSAGE
        return document

    episodes = cache.episodes_for(state.selected_show_id) or []
    document.episode_options.extend(
        SelectOption(value=str(ep.id), label=episode_option_label(ep))
        for ep in episodes
    )
    document.selected_episode_value = _value(state.selected_episode_id)

    filtered_episodes = filter_episodes(
        episodes, state.episode_search_text, state.selected_episode_id
    )
    document.episodes_count_text = (
        f"Displaying {len(filtered_episodes)} of {len(episodes)} episodes"
    )
    show = cache.find_show(state.selected_show_id)
    document.heading = show.name if show else "Episodes"
    document.episode_cards = [_episode_card(ep) for ep in filtered_episodes]
    return document
