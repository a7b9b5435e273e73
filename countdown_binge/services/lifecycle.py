"""Lifecycle and binge-readiness classification.

Everything here is a pure function of the show data and ``now``: no I/O, no
side effects. Season 0 (specials) is ignored throughout.
"""

from datetime import datetime, timedelta
from typing import Callable, Iterable, Optional

from ..domain import Season, Show, ShowLifecycleState, ShowStatus
from ..timeutil import today

# A season premiering within this many days is "premiering soon"
PREMIERING_SOON_DAYS = 30

# Statuses that keep a show on the timeline. This is a policy choice and is
# never inferred from season dates.
TIMELINE_STATUSES = frozenset({ShowStatus.RETURNING, ShowStatus.IN_PRODUCTION})


def timeline_eligible(show: Show) -> bool:
    """Whether the show belongs on the timeline (returning or in production)."""
    return show.status in TIMELINE_STATUSES


def binge_ready_seasons(show: Show, now: Optional[datetime] = None) -> list[Season]:
    """Regular seasons that have fully aired and are not marked watched."""
    return [season for season in show.regular_seasons if season.is_binge_ready(now)]


def sort_by_finale_date(items: Iterable, season_of: Callable = lambda item: item) -> list:
    """Sort seasons by finale date, most recent first.

    Seasons without a finale date go last and keep their relative order.
    ``season_of`` extracts the season when sorting wrapper objects.
    """
    items = list(items)
    dated = [i for i in items if season_of(i).finale_date is not None]
    undated = [i for i in items if season_of(i).finale_date is None]
    # reverse=True keeps equal keys in their original order
    return sorted(dated, key=lambda i: season_of(i).finale_date, reverse=True) + undated


def _is_ending(season: Season, now: Optional[datetime]) -> bool:
    if not season.has_started(now):
        return False
    has_unwatched_aired = any(
        ep.has_aired(now) and not ep.is_watched for ep in season.episodes
    )
    has_still_to_air = any(not ep.has_aired(now) for ep in season.episodes)
    return has_unwatched_aired and has_still_to_air


def _is_premiering_soon(season: Season, now: Optional[datetime], window_days: int) -> bool:
    if season.air_date is None:
        return False
    current = today(now)
    return current < season.air_date <= current + timedelta(days=window_days)


def _has_pending_season(show: Show, now: Optional[datetime]) -> bool:
    # Announced but undated, or dated beyond the premiering-soon window
    return any(
        season.air_date is None or not season.has_started(now)
        for season in show.regular_seasons
    )


def classify(
    show: Show,
    now: Optional[datetime] = None,
    premiering_soon_days: int = PREMIERING_SOON_DAYS,
) -> ShowLifecycleState:
    """Derive the lifecycle state of a show.

    States are checked in precedence order: ending, premiering soon,
    anticipated, binge ready, idle. A returning or in-production show with
    nothing announced is anticipated only once no season is binge-ready.
    """
    seasons = show.regular_seasons

    if any(_is_ending(season, now) for season in seasons):
        return ShowLifecycleState.ENDING

    if any(_is_premiering_soon(season, now, premiering_soon_days) for season in seasons):
        return ShowLifecycleState.PREMIERING_SOON

    if _has_pending_season(show, now):
        return ShowLifecycleState.ANTICIPATED

    if binge_ready_seasons(show, now):
        return ShowLifecycleState.BINGE_READY

    if timeline_eligible(show) or show.in_production:
        return ShowLifecycleState.ANTICIPATED

    return ShowLifecycleState.IDLE
