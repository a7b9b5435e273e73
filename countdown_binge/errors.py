"""Domain exceptions for countdown-binge.

Every exception carries a short human-readable ``message`` suitable for the
presentation layer. Exceptions that wrap a lower-level failure keep it on
``original_exception``.
"""

from typing import Optional


class CountdownError(Exception):
    """Base class for all countdown-binge failures."""

    default_message = "Something went wrong"

    def __init__(self, message: Optional[str] = None, original_exception: Exception = None):
        self.message = message or self.default_message
        if original_exception is not None:
            self.message = f"{self.message}: {original_exception}"
        super().__init__(self.message)
        self.original_exception = original_exception


class NotFoundError(CountdownError):
    """A show, season or episode does not exist."""

    default_message = "Not found"


class ShowNotFoundError(NotFoundError):
    default_message = "Show not found"


class SeasonNotFoundError(NotFoundError):
    default_message = "Season not found"


class EpisodeNotFoundError(NotFoundError):
    default_message = "Episode not found"


class AlreadyFollowedError(CountdownError):
    default_message = "You're already following this show"


class FetchFailedError(CountdownError):
    """The catalog could not provide show details while adding a show."""

    default_message = "Failed to fetch show"


class StoreError(CountdownError):
    """The persistence layer failed while reading."""

    default_message = "Failed to fetch"


class SaveFailedError(StoreError):
    """The persistence layer failed while writing; the transaction was rolled back."""

    default_message = "Failed to save"


class CatalogError(CountdownError):
    """Transport or decoding failure talking to the show catalog."""

    default_message = "Catalog request failed"
