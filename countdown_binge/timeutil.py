"""Clock helpers shared by the domain model and the store."""

from datetime import date, datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Current time as a naive UTC datetime (the form stored in SQLite)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def today(now: Optional[datetime] = None) -> date:
    """Calendar date of ``now`` (defaults to the current UTC date)."""
    return (now or utcnow()).date()


def parse_date(value: Optional[str]) -> Optional[date]:
    """Parse a TMDB ``YYYY-MM-DD`` string, returning None for blanks or junk."""
    if not value:
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        return None
