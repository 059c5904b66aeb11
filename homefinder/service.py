"""Entry points used by presentation layers."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Iterable, Sequence

from homefinder.engine.comparison import ComparisonRow, compare
from homefinder.engine.filtering import FilterEngine
from homefinder.engine.sorting import SortKey, sort_properties
from homefinder.exceptions import NotFoundError
from homefinder.models import FilterSpec, Property
from homefinder.repository.base import PropertyRepository
from homefinder.store.favorites import FavoritesStore
from homefinder.store.filters import SearchFiltersStore

logger = logging.getLogger(__name__)


def filter_and_sort(
    properties: Iterable[Property],
    filter_spec: FilterSpec,
    search_term: str,
    sort_key: "SortKey | str",
) -> list[Property]:
    """Filter ``properties`` then order them; the input is left untouched."""
    return sort_properties(FilterEngine().apply(properties, filter_spec, search_term), sort_key)


@dataclass(frozen=True)
class FavoriteStatus:
    property_id: str
    is_favorite: bool


class HomeFinder:
    """Wires a repository and the persisted user state together.

    Collaborators are injected so tests can pass in-memory fakes.
    """

    def __init__(
        self,
        repository: PropertyRepository,
        favorites: FavoritesStore,
        filters: SearchFiltersStore,
    ) -> None:
        self.repository = repository
        self.favorites = favorites
        self.filters = filters

    async def init(self) -> None:
        await self.favorites.init()
        await self.filters.init()

    async def browse(
        self,
        search_term: str = "",
        sort_key: "SortKey | str" = SortKey.PRICE_ASC,
        filter_spec: FilterSpec | None = None,
    ) -> list[Property]:
        """Fetch, filter and sort listings.

        Uses the saved filters unless ``filter_spec`` is given. The
        repository may pre-filter, but the client-side filter always runs.
        """
        spec = filter_spec if filter_spec is not None else await self.filters.get()
        candidates = await self.repository.get_all(spec)
        result = filter_and_sort(candidates, spec, search_term, sort_key)
        logger.debug("Browse matched %d of %d properties", len(result), len(candidates))
        return result

    async def featured(self) -> list[Property]:
        return await self.repository.get_featured()

    async def is_favorite(self, property_id: str) -> bool:
        return await self.favorites.is_favorite(property_id)

    async def toggle_favorite(self, property_id: str) -> FavoriteStatus:
        entry = await self.favorites.toggle(property_id)
        return FavoriteStatus(property_id=property_id, is_favorite=entry is not None)

    async def favorite_properties(
        self, sort_key: "SortKey | str" = SortKey.SAVED_NEWEST
    ) -> list[Property]:
        """Favorited listings, each carrying its ``saved_at``, sorted.

        Favorites whose listing no longer exists are left out.
        """
        entries = await self.favorites.list_all()
        properties = await asyncio.gather(*(self._lookup(entry.property_id) for entry in entries))
        joined = [
            prop.with_saved_at(entry.saved_at)
            for prop, entry in zip(properties, entries)
            if prop is not None
        ]
        return sort_properties(joined, sort_key)

    async def _lookup(self, property_id: str) -> Property | None:
        try:
            return await self.repository.get_by_id(property_id)
        except NotFoundError:
            logger.debug("Favorite %s has no listing", property_id, extra={"property_id": property_id})
            return None

    def compare_selection(self, properties: Sequence[Property]) -> list[ComparisonRow]:
        return compare(properties)
