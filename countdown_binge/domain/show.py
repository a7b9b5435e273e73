"""Show value type and its supporting types."""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from .season import Season


class ShowStatus(str, Enum):
    """TMDB show status values."""

    RETURNING = "Returning Series"
    ENDED = "Ended"
    CANCELLED = "Canceled"
    IN_PRODUCTION = "In Production"
    PLANNED = "Planned"
    PILOT = "Pilot"

    @classmethod
    def parse(cls, value) -> "ShowStatus":
        """Decode a TMDB status string, treating unknown values as planned."""
        try:
            return cls(value)
        except ValueError:
            return cls.PLANNED


class Genre(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str


class Network(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    logo_path: Optional[str] = None


class Show(BaseModel):
    """A TV show with all its metadata, seasons and watched markers.

    ``seasons`` is authoritative; ``number_of_seasons`` and
    ``number_of_episodes`` are display caches copied from the catalog.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    overview: Optional[str] = None
    poster_path: Optional[str] = None
    backdrop_path: Optional[str] = None
    logo_path: Optional[str] = None
    first_air_date: Optional[date] = None
    status: ShowStatus = ShowStatus.PLANNED
    genres: tuple[Genre, ...] = ()
    networks: tuple[Network, ...] = ()
    seasons: tuple[Season, ...] = ()
    number_of_seasons: int = 0
    number_of_episodes: int = 0
    in_production: bool = False

    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, value):
        return ShowStatus.parse(value)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Show):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(("show", self.id))

    @property
    def regular_seasons(self) -> list[Season]:
        """Seasons excluding specials (season 0), in season-number order."""
        return sorted(
            (s for s in self.seasons if s.season_number > 0),
            key=lambda s: s.season_number,
        )

    @property
    def current_season(self) -> Optional[Season]:
        """The highest-numbered regular season."""
        regular = self.regular_seasons
        return regular[-1] if regular else None

    def upcoming_season(self, now=None) -> Optional[Season]:
        """The lowest-numbered regular season that has not started yet."""
        for season in self.regular_seasons:
            if not season.has_started(now):
                return season
        return None

    def get_season(self, season_number: int) -> Optional[Season]:
        for season in self.seasons:
            if season.season_number == season_number:
                return season
        return None

    def has_season(self, season_number: int) -> bool:
        return self.get_season(season_number) is not None

    def with_season(self, season: Season) -> "Show":
        """Return a copy with the season of the same number replaced."""
        seasons = tuple(
            season if s.season_number == season.season_number else s
            for s in self.seasons
        )
        return self.model_copy(update={"seasons": seasons})

    def to_snapshot(self) -> str:
        """Serialize the full show, watched markers included, to JSON."""
        return self.model_dump_json()

    @classmethod
    def from_snapshot(cls, snapshot: str) -> "Show":
        return cls.model_validate_json(snapshot)
