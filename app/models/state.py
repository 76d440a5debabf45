"""Per-session application state (the view-model)."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class Status(str, Enum):
    """Global readiness gate for rendering."""

    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


class View(str, Enum):
    """Which listing is visible."""

    SHOWS = "shows"
    EPISODES = "episodes"


class AppState(BaseModel):
    """Mutable view-model for one browser session.

    Only the Controller mutates it. ``selected_episode_id`` and
    ``episode_search_text`` are never both set after a transition.
    """

    model_config = ConfigDict(validate_assignment=True)

    status: Status = Status.IDLE
    error_message: str = ""
    view: View = View.SHOWS
    shows_search_text: str = ""
    episode_search_text: str = ""
    selected_show_id: Optional[int] = None
    selected_episode_id: Optional[int] = None
