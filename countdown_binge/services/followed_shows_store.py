"""Cache-of-record store for followed shows.

Every write ends in exactly one ``commit()``; on failure the session is rolled
back so no partial write is ever visible, and ``SaveFailedError`` is raised.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..domain import Show
from ..errors import SaveFailedError, ShowNotFoundError, StoreError
from ..models import CachedShowData, FollowedShow
from ..models.followed_show import DEFAULT_STALE_AFTER
from ..timeutil import utcnow

logger = logging.getLogger(__name__)


class FollowedShowsStore:
    """Persists the follow relationship and the cached show snapshot."""

    def __init__(self, db: Session):
        self.db = db

    def _commit(self) -> None:
        """Commit the pending unit of work, rolling back on failure."""
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Store commit failed: {e}", exc_info=True)
            raise SaveFailedError(original_exception=e) from e

    # --- Follow / unfollow ---

    def follow(self, show_id: int) -> None:
        """Follow a show. Following an already followed show is a no-op."""
        if self.is_following(show_id):
            return

        self.db.add(FollowedShow(tmdb_id=show_id, followed_at=utcnow()))
        self._commit()
        logger.info(f"Followed show {show_id}")

    def follow_with_cache(self, show_id: int, show: Show) -> None:
        """Follow a show and store its snapshot in one transaction.

        If the show is already followed this behaves as ``update_cache``.
        """
        if self.is_following(show_id):
            self.update_cache(show_id, show)
            return

        now = utcnow()
        followed = FollowedShow(tmdb_id=show_id, followed_at=now, last_refreshed_at=now)
        # Link before the commit so both rows become visible together
        followed.cached_data = CachedShowData.from_show(show)
        self.db.add(followed)
        self._commit()
        logger.info(f"Followed show {show_id} ('{show.name}') with cached data")

    def unfollow(self, show_id: int) -> None:
        """Unfollow a show, deleting its cached snapshot with it.

        Unfollowing a show that is not followed is a no-op.
        """
        followed = self.get_followed_show(show_id)
        if followed is None:
            return

        self.db.delete(followed)
        self._commit()
        logger.info(f"Unfollowed show {show_id}")

    # --- Queries ---

    def is_following(self, show_id: int) -> bool:
        return self.get_followed_show(show_id) is not None

    def get_followed_show(self, show_id: int) -> Optional[FollowedShow]:
        """Get a followed show by its TMDB ID."""
        try:
            return (
                self.db.query(FollowedShow)
                .filter(FollowedShow.tmdb_id == show_id)
                .first()
            )
        except SQLAlchemyError as e:
            raise StoreError(original_exception=e) from e

    def get_all_followed(self) -> list[FollowedShow]:
        """Get all followed shows, most recently followed first."""
        try:
            return (
                self.db.query(FollowedShow)
                .order_by(FollowedShow.followed_at.desc(), FollowedShow.id.desc())
                .all()
            )
        except SQLAlchemyError as e:
            raise StoreError(original_exception=e) from e

    def get_followed_count(self) -> int:
        try:
            return self.db.query(FollowedShow).count()
        except SQLAlchemyError as e:
            raise StoreError(original_exception=e) from e

    def get_shows_needing_refresh(
        self,
        now: Optional[datetime] = None,
        stale_after: timedelta = DEFAULT_STALE_AFTER,
    ) -> list[FollowedShow]:
        return [
            followed for followed in self.get_all_followed()
            if followed.needs_refresh(now, stale_after)
        ]

    # --- Cache management ---

    def update_cache(self, show_id: int, show: Show, mark_refreshed: bool = True) -> None:
        """Replace the cached snapshot wholesale with ``show``.

        ``mark_refreshed`` stamps ``last_refreshed_at``; watched-state writes
        pass False so they do not postpone a catalog refresh.
        """
        followed = self.get_followed_show(show_id)
        if followed is None:
            raise ShowNotFoundError()

        if followed.cached_data is None:
            followed.cached_data = CachedShowData.from_show(show)
        else:
            followed.cached_data.update_from(show)
        if mark_refreshed:
            followed.last_refreshed_at = utcnow()

        self._commit()
