"""Favorite entry model."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class FavoriteEntry:
    """A saved property, keyed by ``property_id``."""

    property_id: str
    saved_at: datetime
