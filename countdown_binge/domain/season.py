"""Season value type."""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from ..timeutil import today, utcnow
from .episode import Episode


class Season(BaseModel):
    """A season of a TV show.

    Season 0 holds specials and extras and never takes part in lifecycle or
    binge-readiness computation. For unannounced seasons ``episodes`` may be
    empty while ``episode_count`` is 0.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    season_number: int
    name: str
    overview: Optional[str] = None
    poster_path: Optional[str] = None
    air_date: Optional[date] = None
    episode_count: int = 0
    episodes: tuple[Episode, ...] = ()
    watched_date: Optional[datetime] = None

    def __eq__(self, other) -> bool:
        if not isinstance(other, Season):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(("season", self.id))

    @property
    def is_special(self) -> bool:
        return self.season_number == 0

    @property
    def is_watched(self) -> bool:
        """Whether the user marked the whole season as watched."""
        return self.watched_date is not None

    @property
    def finale(self) -> Optional[Episode]:
        """The last episode of the season by episode number."""
        if not self.episodes:
            return None
        return max(self.episodes, key=lambda ep: ep.episode_number)

    @property
    def finale_date(self) -> Optional[date]:
        """Latest known episode air date, None if no episode is dated."""
        dates = [ep.air_date for ep in self.episodes if ep.air_date is not None]
        return max(dates) if dates else None

    def has_started(self, now: Optional[datetime] = None) -> bool:
        """Whether the season premiere date has passed."""
        if self.air_date is None:
            return False
        return self.air_date <= today(now)

    def is_complete(self, now: Optional[datetime] = None) -> bool:
        """Whether every episode of the season has aired."""
        if self.episode_count <= 0 or not self.episodes:
            return False
        return all(ep.has_aired(now) for ep in self.episodes)

    def is_binge_ready(self, now: Optional[datetime] = None) -> bool:
        """Complete, not a specials season, and not yet marked watched."""
        return not self.is_special and self.is_complete(now) and self.watched_date is None

    def is_airing(self, now: Optional[datetime] = None) -> bool:
        """Started but not yet complete."""
        return self.has_started(now) and not self.is_complete(now)

    def aired_episode_count(self, now: Optional[datetime] = None) -> int:
        return sum(1 for ep in self.episodes if ep.has_aired(now))

    def days_until_finale(self, now: Optional[datetime] = None) -> Optional[int]:
        """Days until the finale airs (None if complete or undated)."""
        finale_date = self.finale_date
        if finale_date is None or self.is_complete(now):
            return None
        return (finale_date - today(now)).days

    def days_until_premiere(self, now: Optional[datetime] = None) -> Optional[int]:
        """Days until the premiere (None if already started or undated)."""
        if self.air_date is None or self.has_started(now):
            return None
        return (self.air_date - today(now)).days

    def get_episode(self, episode_number: int) -> Optional[Episode]:
        for episode in self.episodes:
            if episode.episode_number == episode_number:
                return episode
        return None

    def with_episode(self, episode: Episode) -> "Season":
        """Return a copy with the episode of the same number replaced."""
        episodes = tuple(
            episode if ep.episode_number == episode.episode_number else ep
            for ep in self.episodes
        )
        return self.model_copy(update={"episodes": episodes})

    def mark_watched(self, now: Optional[datetime] = None) -> "Season":
        """Return a copy marked as watched at ``now``."""
        return self.model_copy(update={"watched_date": now or utcnow()})
