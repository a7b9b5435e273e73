"""Refreshes cached show snapshots from the catalog."""

import logging
from datetime import datetime, timedelta
from typing import Optional

from ..config import settings
from ..domain import Show
from ..errors import CountdownError, ShowNotFoundError
from .catalog import CatalogService
from .followed_shows_store import FollowedShowsStore

logger = logging.getLogger(__name__)


def carry_watched_state(fresh: Show, cached: Show) -> Show:
    """Copy the user's watched markers from ``cached`` onto ``fresh``.

    Seasons and episodes are matched by number; markers for seasons or
    episodes the catalog no longer lists are dropped.
    """
    seasons = []
    for season in fresh.seasons:
        old_season = cached.get_season(season.season_number)
        if old_season is None:
            seasons.append(season)
            continue

        episodes = []
        for episode in season.episodes:
            old_episode = old_season.get_episode(episode.episode_number)
            if old_episode is not None and old_episode.watched_date is not None:
                episode = episode.model_copy(update={"watched_date": old_episode.watched_date})
            episodes.append(episode)

        seasons.append(season.model_copy(update={
            "episodes": tuple(episodes),
            "watched_date": old_season.watched_date,
        }))

    return fresh.model_copy(update={"seasons": tuple(seasons)})


class StateRefreshService:
    """Refreshes followed shows whose cached data has gone stale."""

    def __init__(self, catalog: CatalogService, store: FollowedShowsStore):
        self.catalog = catalog
        self.store = store

    async def refresh_show(self, show_id: int) -> Show:
        """Fetch fresh details for one followed show and replace its snapshot."""
        followed = self.store.get_followed_show(show_id)
        if followed is None:
            raise ShowNotFoundError()

        fresh = await self.catalog.get_show_details(show_id)

        cached = followed.to_show()
        if cached is not None:
            fresh = carry_watched_state(fresh, cached)

        self.store.update_cache(show_id, fresh)
        return fresh

    async def refresh_stale_shows(
        self,
        now: Optional[datetime] = None,
        stale_after: Optional[timedelta] = None,
    ) -> int:
        """Refresh every followed show that needs it; returns how many succeeded."""
        if stale_after is None:
            stale_after = timedelta(hours=settings.refresh_stale_hours)

        show_ids = [f.tmdb_id for f in self.store.get_shows_needing_refresh(now, stale_after)]
        refreshed = 0
        for show_id in show_ids:
            try:
                await self.refresh_show(show_id)
            except CountdownError as e:
                logger.error(f"Failed to refresh show {show_id}: {e}")
                continue
            refreshed += 1

        logger.info(f"Refreshed {refreshed} of {len(show_ids)} stale shows")
        return refreshed
