"""FollowedShow model: the user's intent to track a show."""

from datetime import datetime, timedelta
from typing import Optional, TYPE_CHECKING

from sqlalchemy import Integer, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..database import Base
from ..timeutil import utcnow

if TYPE_CHECKING:
    from .cached_show_data import CachedShowData

# Cached data older than this is refreshed from the catalog
DEFAULT_STALE_AFTER = timedelta(hours=24)


class FollowedShow(Base):
    """A TV show the user is following.

    Owns exactly one CachedShowData snapshot; deleting the follow deletes the
    snapshot with it.
    """

    __tablename__ = "followed_shows"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tmdb_id: Mapped[int] = mapped_column(Integer, unique=True, nullable=False)

    followed_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, nullable=False
    )
    last_refreshed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    # Relationships
    cached_data: Mapped[Optional["CachedShowData"]] = relationship(
        "CachedShowData",
        back_populates="followed_show",
        uselist=False,
        cascade="all, delete-orphan",
        single_parent=True,
    )

    def __repr__(self) -> str:
        return f"<FollowedShow(id={self.id}, tmdb_id={self.tmdb_id})>"

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "tmdb_id": self.tmdb_id,
            "followed_at": self.followed_at.isoformat() if self.followed_at else None,
            "last_refreshed_at": self.last_refreshed_at.isoformat() if self.last_refreshed_at else None,
            "has_cache": self.cached_data is not None,
        }

    def to_show(self):
        """Re-derive the domain Show from the cached snapshot, if any."""
        if self.cached_data is None:
            return None
        return self.cached_data.to_show()

    def needs_refresh(
        self,
        now: Optional[datetime] = None,
        stale_after: timedelta = DEFAULT_STALE_AFTER,
    ) -> bool:
        """Whether the cached snapshot should be refreshed from the catalog.

        True when it was never refreshed, is older than ``stale_after``, or an
        airing season has an episode that aired since the last refresh.
        """
        now = now or utcnow()
        if self.last_refreshed_at is None:
            return True
        if now - self.last_refreshed_at > stale_after:
            return True

        show = self.to_show()
        if show is None:
            return True

        refreshed_on = self.last_refreshed_at.date()
        for season in show.regular_seasons:
            if not season.is_airing(now):
                continue
            for episode in season.episodes:
                if episode.air_date and refreshed_on < episode.air_date <= now.date():
                    return True
        return False
