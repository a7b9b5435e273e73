"""Episode value type."""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ..timeutil import today, utcnow


class EpisodeType(str, Enum):
    """Episode types reported by TMDB."""

    STANDARD = "standard"
    FINALE = "finale"
    MID_SEASON = "mid_season"


class Episode(BaseModel):
    """A single episode of a TV show.

    ``season_number`` is a lookup key back to the owning season, not a
    reference to it.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    episode_number: int
    season_number: int
    name: str
    overview: Optional[str] = None
    air_date: Optional[date] = None
    still_path: Optional[str] = None
    runtime: Optional[int] = None
    episode_type: EpisodeType = EpisodeType.STANDARD
    watched_date: Optional[datetime] = None

    @field_validator("episode_type", mode="before")
    @classmethod
    def _default_episode_type(cls, value):
        # Older snapshots and unknown TMDB values fall back to standard
        try:
            return EpisodeType(value)
        except ValueError:
            return EpisodeType.STANDARD

    def __eq__(self, other) -> bool:
        if not isinstance(other, Episode):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(("episode", self.id))

    @property
    def is_watched(self) -> bool:
        """Whether this episode has been marked as watched."""
        return self.watched_date is not None

    @property
    def episode_code(self) -> str:
        """Get episode code like S01E01."""
        return f"S{self.season_number:02d}E{self.episode_number:02d}"

    def has_aired(self, now: Optional[datetime] = None) -> bool:
        """Whether this episode has a known air date on or before today."""
        if self.air_date is None:
            return False
        return self.air_date <= today(now)

    def days_until_air(self, now: Optional[datetime] = None) -> Optional[int]:
        """Days until this episode airs (None if already aired or undated)."""
        if self.air_date is None or self.has_aired(now):
            return None
        return (self.air_date - today(now)).days

    def mark_watched(self, watched: bool, now: Optional[datetime] = None) -> "Episode":
        """Return a copy with the watched marker set or cleared."""
        return self.model_copy(update={"watched_date": (now or utcnow()) if watched else None})
