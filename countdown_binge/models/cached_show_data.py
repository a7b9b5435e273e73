"""CachedShowData model: persisted snapshot of a followed show."""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import String, Integer, DateTime, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..database import Base
from ..domain import Show
from ..timeutil import utcnow

if TYPE_CHECKING:
    from .followed_show import FollowedShow


class CachedShowData(Base):
    """Serialized copy of a full Show, including every watched marker.

    This is the only place watched state is persisted.
    """

    __tablename__ = "cached_show_data"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    followed_show_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("followed_shows.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )

    # Denormalized for inspection; the snapshot is authoritative
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(String(50), nullable=False)

    snapshot: Mapped[str] = mapped_column(Text, nullable=False)  # JSON Show

    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow, nullable=False
    )

    # Relationships
    followed_show: Mapped["FollowedShow"] = relationship(
        "FollowedShow", back_populates="cached_data"
    )

    def __repr__(self) -> str:
        return f"<CachedShowData(id={self.id}, name='{self.name}')>"

    @classmethod
    def from_show(cls, show: Show) -> "CachedShowData":
        return cls(name=show.name, status=show.status.value, snapshot=show.to_snapshot())

    def update_from(self, show: Show) -> None:
        """Overwrite the whole snapshot from ``show``."""
        self.name = show.name
        self.status = show.status.value
        self.snapshot = show.to_snapshot()

    def to_show(self) -> Show:
        """Convert the snapshot back into a domain Show."""
        return Show.from_snapshot(self.snapshot)
