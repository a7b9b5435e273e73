import asyncio
from contextlib import contextmanager
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.orm import sessionmaker

from countdown_binge.errors import CatalogError
from countdown_binge.services.background import BackgroundRefresher
from countdown_binge.services.catalog import CatalogService
from countdown_binge.services.followed_shows_store import FollowedShowsStore
from helpers import complete_season, make_show


@pytest.fixture
def session_factory(engine):
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    @contextmanager
    def scope():
        db = SessionLocal()
        try:
            yield db
        finally:
            db.close()

    return scope


def _catalog(show=None, error=None):
    catalog = MagicMock(spec=CatalogService)
    catalog.get_show_details = AsyncMock(return_value=show, side_effect=error)
    catalog.close = AsyncMock()
    return catalog


@pytest.mark.asyncio
async def test_run_once_refreshes_stale_shows_and_closes_catalog(session_factory, store):
    store.follow(7)
    catalog = _catalog(make_show(7, name="Fresh", seasons=[complete_season(1)]))
    refresher = BackgroundRefresher(session_factory, lambda: catalog)

    refreshed = await refresher.run_once()

    assert refreshed == 1
    catalog.close.assert_awaited_once()
    with session_factory() as db:
        assert FollowedShowsStore(db).get_followed_show(7).to_show().name == "Fresh"


@pytest.mark.asyncio
async def test_run_once_closes_catalog_when_fetch_fails(session_factory, store):
    store.follow(7)
    catalog = _catalog(error=CatalogError("HTTP error: 503"))
    refresher = BackgroundRefresher(session_factory, lambda: catalog)

    assert await refresher.run_once() == 0
    catalog.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_start_and_stop(session_factory):
    catalog = _catalog()
    refresher = BackgroundRefresher(
        session_factory, lambda: catalog, interval=timedelta(hours=1)
    )

    await refresher.start()
    assert refresher.is_running
    # Let the first pass run
    await asyncio.sleep(0.05)
    await refresher.stop()

    assert not refresher.is_running
    catalog.close.assert_awaited()


@pytest.mark.asyncio
async def test_loop_survives_unexpected_errors():
    calls = []

    @contextmanager
    def broken_scope():
        calls.append(1)
        raise RuntimeError("database is locked")
        yield  # pragma: no cover

    catalog = _catalog()
    refresher = BackgroundRefresher(
        broken_scope, lambda: catalog, interval=timedelta(milliseconds=10)
    )

    await refresher.start()
    await asyncio.sleep(0.1)
    try:
        assert refresher.is_running
        assert len(calls) >= 2
    finally:
        await refresher.stop()
