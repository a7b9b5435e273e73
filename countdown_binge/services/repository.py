"""Show repository: domain-level access to the followed-shows store."""

import logging
from datetime import datetime
from typing import NamedTuple, Optional

from ..domain import Season, Show, ShowLifecycleState
from .followed_shows_store import FollowedShowsStore
from .lifecycle import (
    PREMIERING_SOON_DAYS,
    binge_ready_seasons,
    classify,
    sort_by_finale_date,
    timeline_eligible,
)

logger = logging.getLogger(__name__)


class BingeReadyEntry(NamedTuple):
    """A binge-ready season together with the show it belongs to."""

    show: Show
    season: Season


class ShowRepository:
    """Translates domain operations into store calls.

    Shows are always re-derived from the cached snapshots, so readers see
    exactly what was last committed.
    """

    def __init__(self, store: FollowedShowsStore):
        self.store = store

    # --- Writes ---

    def save(self, show: Show) -> None:
        """Follow a show and cache it atomically."""
        self.store.follow_with_cache(show.id, show)

    def update_show(self, show: Show) -> None:
        """Overwrite the cached snapshot of an already followed show."""
        self.store.update_cache(show.id, show, mark_refreshed=False)

    def delete(self, show: Show) -> None:
        """Unfollow a show."""
        self.delete_by_id(show.id)

    def delete_by_id(self, show_id: int) -> None:
        """Unfollow a show by ID, whether or not it has cached data."""
        self.store.unfollow(show_id)

    # --- Reads ---

    def fetch_all_shows(self) -> list[Show]:
        """All followed shows that have cached data, most recently followed first."""
        return [
            followed.cached_data.to_show()
            for followed in self.store.get_all_followed()
            if followed.cached_data is not None
        ]

    def fetch_show(self, show_id: int) -> Optional[Show]:
        followed = self.store.get_followed_show(show_id)
        if followed is None:
            return None
        return followed.to_show()

    def is_show_followed(self, show_id: int) -> bool:
        return self.store.is_following(show_id)

    def fetch_timeline_shows(self) -> list[Show]:
        """Followed shows that are returning or in production."""
        return [show for show in self.fetch_all_shows() if timeline_eligible(show)]

    def fetch_binge_ready_entries(self, now: Optional[datetime] = None) -> list[BingeReadyEntry]:
        """Binge-ready seasons of every followed show, latest finale first."""
        entries = [
            BingeReadyEntry(show, season)
            for show in self.fetch_all_shows()
            for season in binge_ready_seasons(show, now)
        ]
        return sort_by_finale_date(entries, season_of=lambda entry: entry.season)

    def fetch_binge_ready_seasons(self, now: Optional[datetime] = None) -> list[Season]:
        return [entry.season for entry in self.fetch_binge_ready_entries(now)]

    def fetch_shows_by_state(
        self,
        now: Optional[datetime] = None,
        premiering_soon_days: int = PREMIERING_SOON_DAYS,
    ) -> dict[ShowLifecycleState, list[Show]]:
        """Group every followed show by its derived lifecycle state."""
        grouped = {state: [] for state in ShowLifecycleState}
        for show in self.fetch_all_shows():
            grouped[classify(show, now, premiering_soon_days)].append(show)
        return grouped
