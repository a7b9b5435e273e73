"""Derived lifecycle state of a followed show."""

from enum import Enum


class ShowLifecycleState(str, Enum):
    """Mutually exclusive schedule/watch classification of a show.

    Always derived from show data and watch history; never set by the user.
    """

    # Airing season with unwatched aired episodes and episodes still to come
    ENDING = "ending"
    # A season premieres within the near-term window
    PREMIERING_SOON = "premiering_soon"
    # More content is expected but not datable yet
    ANTICIPATED = "anticipated"
    # At least one fully aired, unwatched season
    BINGE_READY = "binge_ready"
    IDLE = "idle"
