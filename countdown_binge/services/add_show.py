"""Use case for adding a new show to the user's followed list."""

import logging

from ..domain import Show
from ..errors import AlreadyFollowedError, CountdownError, FetchFailedError, SaveFailedError
from .catalog import CatalogService
from .repository import ShowRepository

logger = logging.getLogger(__name__)


class AddShowUseCase:
    """Follow a show by its TMDB ID.

    Flow:
    1. Reject shows that are already followed (before any network access)
    2. Fetch full show data from the catalog
    3. Follow and cache it in a single store transaction
    """

    def __init__(self, catalog: CatalogService, repository: ShowRepository):
        self.catalog = catalog
        self.repository = repository

    async def execute(self, show_id: int) -> Show:
        if self.repository.is_show_followed(show_id):
            raise AlreadyFollowedError()

        try:
            show = await self.catalog.get_show_details(show_id)
        except CountdownError as e:
            logger.warning(f"Fetching show {show_id} failed: {e}")
            raise FetchFailedError(original_exception=e) from e

        # The fetch has fully completed; nothing is written before this point
        try:
            self.repository.save(show)
        except SaveFailedError:
            raise
        except CountdownError as e:
            raise SaveFailedError("Failed to save show", e) from e

        return show
