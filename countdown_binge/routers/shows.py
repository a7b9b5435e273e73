"""API endpoints for followed shows, the timeline and watched state."""

import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..config import settings
from ..database import get_db
from ..domain import Season, Show
from ..errors import (
    AlreadyFollowedError,
    CatalogError,
    CountdownError,
    FetchFailedError,
    NotFoundError,
)
from ..services.add_show import AddShowUseCase
from ..services.catalog import CatalogService
from ..services.followed_shows_store import FollowedShowsStore
from ..services.lifecycle import classify
from ..services.mark_watched import MarkEpisodeWatchedUseCase, MarkWatchedUseCase
from ..services.repository import ShowRepository
from ..services.refresh import StateRefreshService
from ..services.timeline import build_timeline
from ..services.tmdb import TMDBService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/shows", tags=["shows"])


class ShowCreate(BaseModel):
    """Request model for following a show."""

    tmdb_id: int


class EpisodeWatchedUpdate(BaseModel):
    """Request model for toggling an episode's watched state."""

    watched: bool = True


async def get_catalog_service():
    """Get the TMDB catalog service, closing its client afterwards."""
    tmdb = TMDBService(api_key=settings.tmdb_api_key)
    try:
        yield tmdb
    finally:
        await tmdb.close()


def get_repository(db: Session = Depends(get_db)) -> ShowRepository:
    return ShowRepository(FollowedShowsStore(db))


def _http_error(e: CountdownError) -> HTTPException:
    """Map a domain error onto an HTTP error with its description."""
    if isinstance(e, NotFoundError):
        status_code = 404
    elif isinstance(e, AlreadyFollowedError):
        status_code = 409
    elif isinstance(e, (FetchFailedError, CatalogError)):
        status_code = 502
    else:
        status_code = 500
    return HTTPException(status_code=status_code, detail=e.message)


def _show_to_dict(show: Show) -> dict:
    data = show.model_dump(mode="json")
    data["lifecycle_state"] = classify(show, premiering_soon_days=settings.premiering_soon_days).value
    return data


def _season_to_dict(season: Season) -> dict:
    data = season.model_dump(mode="json")
    data["finale_date"] = season.finale_date.isoformat() if season.finale_date else None
    return data


@router.get("")
async def list_shows(repository: ShowRepository = Depends(get_repository)):
    """List all followed shows, most recently followed first."""
    try:
        return [_show_to_dict(show) for show in repository.fetch_all_shows()]
    except CountdownError as e:
        raise _http_error(e)


@router.get("/timeline")
async def get_timeline(repository: ShowRepository = Depends(get_repository)):
    """Timeline shows grouped into sections with countdowns."""
    try:
        shows = repository.fetch_timeline_shows()
    except CountdownError as e:
        raise _http_error(e)

    sections = build_timeline(shows, premiering_soon_days=settings.premiering_soon_days)
    return [
        {
            "state": section.state.value,
            "entries": [
                {
                    "show": _show_to_dict(entry.show),
                    "countdown": entry.countdown.to_dict() if entry.countdown else None,
                }
                for entry in section.entries
            ],
        }
        for section in sections
    ]


@router.get("/binge-ready")
async def get_binge_ready(repository: ShowRepository = Depends(get_repository)):
    """Binge-ready seasons across all followed shows, latest finale first."""
    try:
        entries = repository.fetch_binge_ready_entries()
    except CountdownError as e:
        raise _http_error(e)

    return [
        {
            "show_id": entry.show.id,
            "show_name": entry.show.name,
            "season": _season_to_dict(entry.season),
        }
        for entry in entries
    ]


@router.get("/search/tmdb")
async def search_tmdb(
    q: str = Query(..., min_length=1),
    page: int = Query(1, ge=1),
    catalog: CatalogService = Depends(get_catalog_service),
):
    """Search TMDB for TV shows."""
    try:
        results = await catalog.search(q, page)
    except CountdownError as e:
        raise _http_error(e)
    return [r.model_dump(mode="json") for r in results]


@router.get("/{show_id}")
async def get_show(show_id: int, repository: ShowRepository = Depends(get_repository)):
    """Get a followed show with its seasons and episodes."""
    try:
        show = repository.fetch_show(show_id)
    except CountdownError as e:
        raise _http_error(e)
    if show is None:
        raise HTTPException(status_code=404, detail="Show not found")
    return _show_to_dict(show)


@router.get("/{show_id}/followed")
async def is_followed(show_id: int, repository: ShowRepository = Depends(get_repository)):
    """Check whether a show is followed."""
    try:
        return {"tmdb_id": show_id, "followed": repository.is_show_followed(show_id)}
    except CountdownError as e:
        raise _http_error(e)


@router.post("", status_code=201)
async def create_show(
    data: ShowCreate,
    repository: ShowRepository = Depends(get_repository),
    catalog: CatalogService = Depends(get_catalog_service),
):
    """Follow a new show, fetching its full details from TMDB."""
    try:
        show = await AddShowUseCase(catalog, repository).execute(data.tmdb_id)
    except CountdownError as e:
        raise _http_error(e)
    return _show_to_dict(show)


@router.delete("/{show_id}")
async def delete_show(show_id: int, repository: ShowRepository = Depends(get_repository)):
    """Unfollow a show. Unfollowing a show that is not followed succeeds."""
    try:
        repository.delete_by_id(show_id)
    except CountdownError as e:
        raise _http_error(e)
    return {"message": "Show unfollowed"}


@router.post("/{show_id}/seasons/{season_number}/watched")
async def mark_season_watched(
    show_id: int,
    season_number: int,
    repository: ShowRepository = Depends(get_repository),
):
    """Mark a season watched and report what comes next."""
    try:
        result = MarkWatchedUseCase(repository).execute(show_id, season_number)
    except CountdownError as e:
        raise _http_error(e)
    return result.to_dict()


@router.put("/{show_id}/seasons/{season_number}/episodes/{episode_number}/watched")
async def mark_episode_watched(
    show_id: int,
    season_number: int,
    episode_number: int,
    data: EpisodeWatchedUpdate,
    repository: ShowRepository = Depends(get_repository),
):
    """Set or clear an episode's watched marker."""
    try:
        show = MarkEpisodeWatchedUseCase(repository).execute(
            show_id, season_number, episode_number, data.watched
        )
    except CountdownError as e:
        raise _http_error(e)
    return _show_to_dict(show)


@router.get("/{show_id}/seasons/{season_number}")
async def get_season(
    show_id: int,
    season_number: int,
    repository: ShowRepository = Depends(get_repository),
):
    """Get one season of a followed show."""
    try:
        show = repository.fetch_show(show_id)
    except CountdownError as e:
        raise _http_error(e)
    if show is None:
        raise HTTPException(status_code=404, detail="Show not found")

    season = show.get_season(season_number)
    if season is None:
        raise HTTPException(status_code=404, detail="Season not found")

    data = _season_to_dict(season)
    data["is_binge_ready"] = season.is_binge_ready()
    data["is_complete"] = season.is_complete()
    data["aired_episode_count"] = season.aired_episode_count()
    return data


@router.get("/{show_id}/refresh-status")
async def get_refresh_status(show_id: int, db: Session = Depends(get_db)):
    """Report whether a followed show's cached data is stale."""
    store = FollowedShowsStore(db)
    try:
        followed = store.get_followed_show(show_id)
    except CountdownError as e:
        raise _http_error(e)
    if followed is None:
        raise HTTPException(status_code=404, detail="Show not found")

    data = followed.to_dict()
    data["needs_refresh"] = followed.needs_refresh(
        stale_after=timedelta(hours=settings.refresh_stale_hours)
    )
    return data


@router.post("/refresh")
async def refresh_stale_shows(
    db: Session = Depends(get_db),
    catalog: CatalogService = Depends(get_catalog_service),
):
    """Refresh every followed show whose cached data is stale."""
    service = StateRefreshService(catalog, FollowedShowsStore(db))
    try:
        refreshed = await service.refresh_stale_shows(
            stale_after=timedelta(hours=settings.refresh_stale_hours)
        )
    except CountdownError as e:
        raise _http_error(e)
    return {"refreshed": refreshed}


@router.post("/{show_id}/refresh")
async def refresh_show(
    show_id: int,
    db: Session = Depends(get_db),
    catalog: CatalogService = Depends(get_catalog_service),
):
    """Refresh one followed show from TMDB, keeping its watched markers."""
    service = StateRefreshService(catalog, FollowedShowsStore(db))
    try:
        show = await service.refresh_show(show_id)
    except CountdownError as e:
        raise _http_error(e)
    return _show_to_dict(show)
