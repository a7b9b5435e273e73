"""Show catalog interface consumed by the add-show and refresh flows."""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional

from pydantic import BaseModel

from ..domain import Show


class ShowSummary(BaseModel):
    """A lightweight search result from the catalog."""

    id: int
    name: str
    overview: Optional[str] = None
    poster_path: Optional[str] = None
    backdrop_path: Optional[str] = None
    first_air_date: Optional[date] = None
    vote_average: Optional[float] = None
    genre_ids: list[int] = []


class CatalogService(ABC):
    """Source of full show details (with every season and episode)."""

    @abstractmethod
    async def get_show_details(self, show_id: int) -> Show:
        """Fetch a show with all regular seasons and their episodes."""
        pass

    @abstractmethod
    async def search(self, query: str, page: int = 1) -> list[ShowSummary]:
        """Search the catalog for shows by name."""
        pass

    async def close(self):
        """Release any held resources."""
        pass
