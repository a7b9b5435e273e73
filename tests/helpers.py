"""Builders for domain values used across the test suite."""

import itertools
from datetime import date, datetime, timedelta
from typing import Optional

from countdown_binge.domain import Episode, Season, Show, ShowStatus

NOW = datetime(2025, 6, 15, 12, 0, 0)
TODAY = NOW.date()

_ids = itertools.count(1)


def day(offset: int) -> date:
    """Date ``offset`` days from the fixed test date."""
    return TODAY + timedelta(days=offset)


def make_episode(
    episode_number: int,
    air_date: Optional[date],
    season_number: int = 1,
    watched_date: Optional[datetime] = None,
) -> Episode:
    return Episode(
        id=next(_ids),
        episode_number=episode_number,
        season_number=season_number,
        name=f"Episode {episode_number}",
        air_date=air_date,
        watched_date=watched_date,
    )


def make_season(
    season_number: int,
    air_dates: list = (),
    watched_date: Optional[datetime] = None,
    episode_count: Optional[int] = None,
    air_date: Optional[date] = "first",
) -> Season:
    """Season with one episode per entry in ``air_dates``."""
    episodes = tuple(
        make_episode(n, d, season_number=season_number)
        for n, d in enumerate(air_dates, start=1)
    )
    if air_date == "first":
        air_date = air_dates[0] if air_dates else None
    return Season(
        id=next(_ids),
        season_number=season_number,
        name=f"Season {season_number}",
        air_date=air_date,
        episode_count=len(episodes) if episode_count is None else episode_count,
        episodes=episodes,
        watched_date=watched_date,
    )


def complete_season(season_number: int, finale: date = None, **kwargs) -> Season:
    """A fully aired three-episode season ending on ``finale``."""
    finale = finale or day(-10)
    return make_season(
        season_number,
        [finale - timedelta(days=14), finale - timedelta(days=7), finale],
        **kwargs,
    )


def make_show(
    show_id: int = 1,
    status: ShowStatus = ShowStatus.RETURNING,
    seasons: list = (),
    name: Optional[str] = None,
    in_production: bool = False,
) -> Show:
    seasons = tuple(seasons)
    return Show(
        id=show_id,
        name=name or f"Show {show_id}",
        status=status,
        seasons=seasons,
        number_of_seasons=len(seasons),
        number_of_episodes=sum(s.episode_count for s in seasons),
        in_production=in_production,
    )
