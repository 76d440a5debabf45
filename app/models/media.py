"""Media models for caching TVMaze data."""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class Show(BaseModel):
    """A TV show from the TVMaze catalog."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    summary: Optional[str] = None  # HTML markup as returned by TVMaze
    genres: List[str] = []
    status: Optional[str] = None  # e.g., "Running", "Ended"
    runtime: Optional[int] = None
    rating_average: Optional[float] = None
    image_medium_url: Optional[str] = None


class Episode(BaseModel):
    """An episode belonging to exactly one show."""

    model_config = ConfigDict(frozen=True)

    id: int
    season: int = Field(ge=1)
    number: int = Field(ge=1)
    name: str
    summary: Optional[str] = None
    url: str
    image_medium_url: Optional[str] = None
