"""Watched-state use cases.

Both use cases load the current show, build the complete updated Show value
and write it back with a full snapshot replace.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from ..domain import Show, ShowStatus
from ..errors import (
    EpisodeNotFoundError,
    SaveFailedError,
    SeasonNotFoundError,
    ShowNotFoundError,
    StoreError,
)
from ..timeutil import utcnow
from .repository import ShowRepository

logger = logging.getLogger(__name__)

COMPLETE_STATUSES = frozenset({ShowStatus.ENDED, ShowStatus.CANCELLED})


class MarkWatchedOutcome(str, Enum):
    SHOW_COMPLETE = "show_complete"
    NEXT_SEASON_ADDED = "next_season_added"
    NEXT_SEASON_PLACEHOLDER = "next_season_placeholder"


@dataclass(frozen=True)
class MarkWatchedResult:
    """What follows a watched season.

    - ``show_complete``: the show has ended or was cancelled
    - ``next_season_added``: the next season is already in the catalog data
    - ``next_season_placeholder``: the next season is expected but not listed yet
    """

    outcome: MarkWatchedOutcome
    season_number: Optional[int] = None

    @classmethod
    def show_complete(cls) -> "MarkWatchedResult":
        return cls(MarkWatchedOutcome.SHOW_COMPLETE)

    @classmethod
    def next_season_added(cls, season_number: int) -> "MarkWatchedResult":
        return cls(MarkWatchedOutcome.NEXT_SEASON_ADDED, season_number)

    @classmethod
    def next_season_placeholder(cls, season_number: int) -> "MarkWatchedResult":
        return cls(MarkWatchedOutcome.NEXT_SEASON_PLACEHOLDER, season_number)

    def to_dict(self) -> dict:
        return {"outcome": self.outcome.value, "season_number": self.season_number}


def determine_result(show: Show, watched_season_number: int) -> MarkWatchedResult:
    """Decide what comes after ``watched_season_number`` from the show's status and seasons."""
    if show.status in COMPLETE_STATUSES:
        return MarkWatchedResult.show_complete()

    next_season_number = watched_season_number + 1
    if show.has_season(next_season_number):
        return MarkWatchedResult.next_season_added(next_season_number)
    return MarkWatchedResult.next_season_placeholder(next_season_number)


class MarkWatchedUseCase:
    """Mark a whole season as watched and advance to what comes next."""

    def __init__(self, repository: ShowRepository):
        self.repository = repository

    def execute(self, show_id: int, season_number: int, now: Optional[datetime] = None) -> MarkWatchedResult:
        show = self.repository.fetch_show(show_id)
        if show is None:
            raise ShowNotFoundError()

        season = show.get_season(season_number)
        if season is None:
            raise SeasonNotFoundError()

        updated = show.with_season(season.mark_watched(now or utcnow()))
        try:
            self.repository.update_show(updated)
        except SaveFailedError:
            raise
        except StoreError as e:
            raise SaveFailedError(original_exception=e) from e

        logger.info(f"Marked season {season_number} of show {show_id} watched")
        # Decided from the show as it was before the update
        return determine_result(show, season_number)


class MarkEpisodeWatchedUseCase:
    """Set or clear the watched marker of a single episode."""

    def __init__(self, repository: ShowRepository):
        self.repository = repository

    def execute(
        self,
        show_id: int,
        season_number: int,
        episode_number: int,
        watched: bool,
        now: Optional[datetime] = None,
    ) -> Show:
        show = self.repository.fetch_show(show_id)
        if show is None:
            raise ShowNotFoundError()

        season = show.get_season(season_number)
        if season is None:
            raise SeasonNotFoundError()

        episode = season.get_episode(episode_number)
        if episode is None:
            raise EpisodeNotFoundError()

        updated = show.with_season(season.with_episode(episode.mark_watched(watched, now)))
        try:
            self.repository.update_show(updated)
        except SaveFailedError:
            raise
        except StoreError as e:
            raise SaveFailedError(original_exception=e) from e

        return updated
