"""Database models for countdown-binge."""

from .followed_show import FollowedShow
from .cached_show_data import CachedShowData

__all__ = ["FollowedShow", "CachedShowData"]
