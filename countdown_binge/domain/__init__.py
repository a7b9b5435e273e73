"""Immutable domain values for shows, seasons and episodes."""

from .episode import Episode, EpisodeType
from .season import Season
from .show import Show, ShowStatus, Genre, Network
from .lifecycle_state import ShowLifecycleState

__all__ = [
    "Episode", "EpisodeType", "Season", "Show", "ShowStatus", "Genre", "Network",
    "ShowLifecycleState",
]
