"""Search filtering and display helpers for shows and episodes.

Everything here is pure: no I/O, no state mutation.
"""

import unicodedata
from typing import List, Optional, Sequence

from bs4 import BeautifulSoup

from app.models.media import Episode, Show


def extract_text(markup: Optional[str]) -> str:
    """Strip HTML tags from a string and return the visible text."""
    if not markup:
        return ""
    return BeautifulSoup(markup, "html.parser").get_text()


def fold(text: Optional[str]) -> str:
    """Normalize text for case-insensitive substring matching."""
    if not text:
        return ""
    return text.strip().casefold()


def show_sort_key(name: str) -> str:
    """Sort key ignoring case and accents ("Élite" sorts with "elite")."""
    decomposed = unicodedata.normalize("NFKD", name)
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return stripped.casefold()


def sort_shows(shows: Sequence[Show]) -> List[Show]:
    """Order shows by display name; ties keep their original order."""
    return sorted(shows, key=lambda show: show_sort_key(show.name))


def _show_matches(show: Show, needle: str) -> bool:
    return (
        needle in fold(show.name)
        or needle in fold(extract_text(show.summary))
        or needle in fold(" ".join(show.genres))
    )


def filter_shows(shows: Sequence[Show], search_text: str) -> List[Show]:
    """Return shows whose name, plain summary or genres contain the search text."""
    needle = fold(search_text)
    if not needle:
        return list(shows)
    return [show for show in shows if _show_matches(show, needle)]


def filter_episodes(
    episodes: Sequence[Episode],
    search_text: str,
    selected_episode_id: Optional[int] = None,
) -> List[Episode]:
    """Return the episodes to display.

    A pinned episode id wins over the search text. An id that matches
    nothing yields an empty list rather than an error.
    """
    if selected_episode_id is not None:
        return [ep for ep in episodes if ep.id == selected_episode_id]

    needle = fold(search_text)
    if not needle:
        return list(episodes)
    return [
        ep
        for ep in episodes
        if needle in fold(ep.name) or needle in fold(extract_text(ep.summary))
    ]


def format_episode_code(season: int, number: int) -> str:
    """Format season/episode numbers as S##-E##."""
    return f"S{season:02d}-E{number:02d}"


def episode_option_label(episode: Episode) -> str:
    return f"{format_episode_code(episode.season, episode.number)} - {episode.name}"


def truncate_summary(text: Optional[str], max_length: int) -> str:
    """Truncate text to ``max_length`` characters, ending with an ellipsis."""
    if not text:
        return ""
    if len(text) <= max_length:
        return text
    return f"{text[: max_length - 1].strip()}…"
