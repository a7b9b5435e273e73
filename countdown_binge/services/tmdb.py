"""TMDB API client service."""

import asyncio
import logging
from typing import Optional
from datetime import datetime, timedelta, timezone

import httpx
from pydantic import ValidationError

from ..config import settings
from ..domain import Season, Show
from ..errors import CatalogError
from ..timeutil import utcnow
from .catalog import CatalogService, ShowSummary
from . import tmdb_mapper

logger = logging.getLogger(__name__)


class TMDBService(CatalogService):
    """Service for interacting with The Movie Database API."""

    def __init__(self, api_key: str = "", base_url: str = "", client: Optional[httpx.AsyncClient] = None):
        self.api_key = api_key or settings.tmdb_api_key
        self.base_url = base_url or settings.tmdb_base_url
        self._client: Optional[httpx.AsyncClient] = client
        self._cache: dict = {}
        self._cache_expiry: dict = {}
        self._rate_limit_remaining = 40
        self._rate_limit_reset: Optional[datetime] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=30.0)
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def _request(self, endpoint: str, params: dict = None) -> dict:
        """Make a request to TMDB API with rate limiting."""
        if not self.api_key:
            raise CatalogError("TMDB API key not configured")

        # Check cache
        cache_key = f"{endpoint}:{params}"
        if cache_key in self._cache:
            if utcnow() < self._cache_expiry.get(cache_key, datetime.min):
                return self._cache[cache_key]

        # Rate limiting
        if self._rate_limit_remaining <= 1 and self._rate_limit_reset:
            wait_time = (self._rate_limit_reset - utcnow()).total_seconds()
            if wait_time > 0:
                await asyncio.sleep(wait_time)

        client = await self._get_client()
        params = dict(params or {})
        params["api_key"] = self.api_key

        try:
            response = await client.get(f"{self.base_url}{endpoint}", params=params)
        except httpx.HTTPError as e:
            raise CatalogError("Network error", e) from e

        # Update rate limit info
        if "X-RateLimit-Remaining" in response.headers:
            self._rate_limit_remaining = int(response.headers["X-RateLimit-Remaining"])
        if "X-RateLimit-Reset" in response.headers:
            self._rate_limit_reset = datetime.fromtimestamp(
                int(response.headers["X-RateLimit-Reset"]), timezone.utc
            ).replace(tzinfo=None)

        if not response.is_success:
            raise CatalogError(f"HTTP error: {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise CatalogError("Failed to decode response", e) from e

        # Cache response for 1 hour
        self._cache[cache_key] = data
        self._cache_expiry[cache_key] = utcnow() + timedelta(hours=1)

        return data

    async def search(self, query: str, page: int = 1) -> list[ShowSummary]:
        """Search for TV shows by name."""
        data = await self._request(
            "/search/tv",
            {"query": query, "page": page, "include_adult": "false"},
        )
        return [tmdb_mapper.map_summary(r) for r in data.get("results", [])]

    async def get_show_details(self, show_id: int) -> Show:
        """Get full show details with every regular season's episodes."""
        details = await self._request(f"/tv/{show_id}", {"append_to_response": "external_ids"})

        logo_task = asyncio.create_task(self.get_show_logo(show_id))
        try:
            seasons = await self._get_regular_seasons(show_id, details)
            logo_path = await logo_task
        finally:
            if not logo_task.done():
                logo_task.cancel()

        try:
            return tmdb_mapper.map_show(details, seasons, logo_path=logo_path)
        except (KeyError, ValidationError) as e:
            raise CatalogError("Failed to decode response", e) from e

    async def _get_regular_seasons(self, show_id: int, details: dict) -> list[Season]:
        """Fetch every regular season, falling back to the embedded summary."""
        seasons: list[Season] = []
        for summary in details.get("seasons", []):
            season_number = summary.get("season_number", 0)
            if season_number <= 0:
                continue
            try:
                seasons.append(await self.get_season_details(show_id, season_number))
                continue
            except CatalogError as e:
                # Season might not have details yet; fall back to the summary
                logger.warning(
                    f"Season {season_number} of show {show_id} unavailable, using summary: {e}"
                )
            try:
                seasons.append(tmdb_mapper.map_season_summary(summary))
            except (KeyError, ValidationError) as e:
                raise CatalogError("Failed to decode season", e) from e
        return seasons

    async def get_season_details(self, show_id: int, season_number: int) -> Season:
        """Get details for a specific season, including episodes."""
        data = await self._request(f"/tv/{show_id}/season/{season_number}")
        try:
            return tmdb_mapper.map_season_details(data)
        except (KeyError, ValidationError) as e:
            raise CatalogError("Failed to decode season", e) from e

    async def get_show_logo(self, show_id: int) -> Optional[str]:
        """Get the best available logo path for a show, None on failure."""
        try:
            images = await self._request(
                f"/tv/{show_id}/images", {"include_image_language": "en,null"}
            )
        except CatalogError:
            return None
        return tmdb_mapper.pick_logo(images)

    def get_image_url(self, path: str, size: str = "w500") -> str:
        """Get full URL for an image path."""
        if not path:
            return ""
        return f"{settings.tmdb_image_base_url}/{size}{path}"
