"""Services for countdown-binge."""

from .tmdb import TMDBService
from .followed_shows_store import FollowedShowsStore
from .repository import ShowRepository, BingeReadyEntry
from .add_show import AddShowUseCase
from .mark_watched import MarkWatchedUseCase, MarkEpisodeWatchedUseCase, MarkWatchedResult
from .refresh import StateRefreshService
from .background import BackgroundRefresher

__all__ = [
    "TMDBService", "FollowedShowsStore", "ShowRepository", "BingeReadyEntry",
    "AddShowUseCase", "MarkWatchedUseCase", "MarkEpisodeWatchedUseCase", "MarkWatchedResult",
    "StateRefreshService", "BackgroundRefresher",
]
