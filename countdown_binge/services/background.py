"""Periodic refresh of stale followed shows while the server runs."""

import asyncio
import logging
from contextlib import AbstractContextManager
from datetime import timedelta
from typing import Callable, Optional

from sqlalchemy.orm import Session

from ..errors import CountdownError
from .catalog import CatalogService
from .followed_shows_store import FollowedShowsStore
from .refresh import StateRefreshService

logger = logging.getLogger(__name__)


class BackgroundRefresher:
    """Runs ``refresh_stale_shows`` on a fixed interval.

    Lifecycle:
        start() → a single asyncio task loops until stop()
        stop()  → the task is cancelled and awaited

    Each pass opens its own session and catalog client and closes both
    afterwards, so a failed pass never leaks state into the next one.
    """

    def __init__(
        self,
        session_factory: Callable[[], AbstractContextManager[Session]],
        catalog_factory: Callable[[], CatalogService],
        interval: timedelta = timedelta(hours=1),
        stale_after: timedelta = timedelta(hours=24),
    ):
        self.session_factory = session_factory
        self.catalog_factory = catalog_factory
        self.interval = interval
        self.stale_after = stale_after
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        if self.is_running:
            return
        logger.info(f"Starting background refresh every {self.interval}")
        self._task = asyncio.create_task(self._loop())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        await asyncio.gather(self._task, return_exceptions=True)
        self._task = None
        logger.info("Background refresh stopped")

    async def run_once(self) -> int:
        """Refresh every stale show once; returns how many were refreshed."""
        catalog = self.catalog_factory()
        try:
            with self.session_factory() as db:
                service = StateRefreshService(catalog, FollowedShowsStore(db))
                return await service.refresh_stale_shows(stale_after=self.stale_after)
        finally:
            await catalog.close()

    async def _loop(self) -> None:
        while True:
            try:
                await self.run_once()
            except CountdownError as e:
                logger.error(f"Background refresh failed: {e}")
            except Exception as e:
                # Keep the loop alive; the next pass may succeed
                logger.error(f"Unexpected error in background refresh: {e}", exc_info=True)
            await asyncio.sleep(self.interval.total_seconds())
