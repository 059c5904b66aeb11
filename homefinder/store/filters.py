"""Persisted last-used search filters."""

import logging

from homefinder.exceptions import ValidationError
from homefinder.models import QUICK_PRICE_RANGES, FilterSpec, PriceRange, PropertyType
from homefinder.persistence.base import KeyValueStore

logger = logging.getLogger(__name__)


class SearchFiltersStore:
    """Load, save and reset the user's ``FilterSpec`` across sessions."""

    def __init__(self, store: KeyValueStore, key: str = "homefinder_search_filters") -> None:
        self.store = store
        self.key = key

    async def init(self) -> None:
        await self.store.init()

    async def get(self) -> FilterSpec:
        """Return the saved spec, or defaults when none is stored.

        Stored data that no longer parses is logged and replaced by
        defaults; storage failures propagate.
        """
        stored = await self.store.read_all(self.key)
        if not stored:
            return FilterSpec()
        if not isinstance(stored, dict):
            logger.warning("Ignoring saved filters of type %s", type(stored).__name__)
            return FilterSpec()
        try:
            return FilterSpec.from_dict(stored)
        except ValidationError as exc:
            logger.warning("Ignoring invalid saved filters: %s", exc)
            return FilterSpec()

    async def save(self, spec: FilterSpec) -> FilterSpec:
        await self.store.write_all(self.key, spec.to_dict())
        logger.debug("Saved filters (%d active)", spec.active_count, extra={"key": self.key, "count": spec.active_count})
        return spec

    async def update(self, **changes: object) -> FilterSpec:
        """Merge UI field changes into the saved spec and persist it."""
        current = (await self.get()).to_dict()
        current.update(changes)
        return await self.save(FilterSpec.from_dict(current))

    async def reset(self) -> FilterSpec:
        return await self.save(FilterSpec())

    @staticmethod
    def property_types() -> list[PropertyType]:
        return list(PropertyType)

    @staticmethod
    def price_ranges() -> list[PriceRange]:
        return list(QUICK_PRICE_RANGES)
