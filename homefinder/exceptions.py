"""Custom exception hierarchy for homefinder."""


class HomeFinderError(Exception):
    """Base exception for all homefinder errors."""


class NotFoundError(HomeFinderError):
    """Raised when a requested property or favorite does not exist."""


class ValidationError(HomeFinderError):
    """Raised when a filter, record or argument is malformed."""


class InvalidSortKeyError(ValidationError):
    """Raised when a sort key is not recognised."""


class SelectionFullError(HomeFinderError):
    """Raised when adding to a comparison selection that is already full.

    This is an expected, recoverable condition: callers warn the user and
    keep the current selection.
    """

    def __init__(self, limit: int) -> None:
        super().__init__(f"You can compare up to {limit} properties at once")
        self.limit = limit


class PersistenceError(HomeFinderError):
    """Raised when the backing store or remote API fails.

    The original exception is chained as ``__cause__``.
    """


class ConfigurationError(HomeFinderError):
    """Raised when configuration is invalid or missing."""
