"""Persisted user state: favorites and search filters."""

from homefinder.store.favorites import FavoritesStore
from homefinder.store.filters import SearchFiltersStore

__all__ = ["FavoritesStore", "SearchFiltersStore"]
