"""Repository over a locally persisted listings table."""

import asyncio
import logging
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

from homefinder.config import IdType
from homefinder.engine.filtering import FilterEngine
from homefinder.exceptions import NotFoundError, ValidationError
from homefinder.models import FilterSpec, Property
from homefinder.persistence.base import KeyValueStore
from homefinder.repository.base import PropertyRepository, apply_changes
from homefinder.repository.normalizers import CanonicalNormalizer, RecordNormalizer

logger = logging.getLogger(__name__)


class LocalPropertyRepository(PropertyRepository):
    """Listings kept in a ``KeyValueStore`` table and mirrored in memory.

    Mutations write the whole table first and only then replace the
    in-memory mirror, so a failed write leaves both unchanged.
    """

    def __init__(
        self,
        store: KeyValueStore,
        key: str = "homefinder_properties",
        normalizer: RecordNormalizer | None = None,
        id_type: IdType = IdType.STRING,
        seed_records: list[dict[str, Any]] | None = None,
    ) -> None:
        """Initialize the repository.

        Parameters
        ----------
        store : KeyValueStore
            Backing store for the listings table.
        key : str
            Store key of the table.
        normalizer : RecordNormalizer | None
            Record shape of the table (default ``CanonicalNormalizer``).
        id_type : IdType
            Id representation used when minting ids.
        seed_records : list[dict[str, Any]] | None
            Records written to the table on first use when it is empty.
        """
        super().__init__(normalizer or CanonicalNormalizer(), id_type)
        self.store = store
        self.key = key
        self._seed_records = seed_records or []
        self._properties: list[Property] | None = None
        self._engine = FilterEngine()
        self._load_lock = asyncio.Lock()
        self._write_lock = asyncio.Lock()

    async def init(self) -> None:
        """Load the table, seeding it when absent."""
        await self.store.init()
        records = await self.store.read_all(self.key)
        if records is None:
            records = list(self._seed_records)
            if records:
                await self.store.write_all(self.key, records)
                logger.info(
                    "Seeded %s with %d properties", self.key, len(records),
                    extra={"key": self.key, "count": len(records)},
                )

        properties = []
        for record in records:
            try:
                properties.append(self.normalizer.normalize(record))
            except ValidationError as exc:
                logger.warning("Skipping record in %s: %s", self.key, exc, extra={"key": self.key})
        self._properties = properties

    async def _loaded(self) -> list[Property]:
        if self._properties is None:
            async with self._load_lock:
                if self._properties is None:
                    await self.init()
        return self._properties

    async def _commit(self, properties: list[Property]) -> None:
        # callers hold _write_lock
        records = [self.normalizer.denormalize(prop) for prop in properties]
        await self.store.write_all(self.key, records)
        self._properties = properties

    async def get_all(self, filters: FilterSpec | None = None) -> list[Property]:
        properties = list(await self._loaded())
        if filters is not None:
            properties = self._engine.apply(properties, filters)
        return properties

    async def get_by_id(self, property_id: str) -> Property:
        property_id = self.check_id(property_id)
        for prop in await self._loaded():
            if prop.id == property_id:
                return prop
        raise NotFoundError(f"Property {property_id} not found")

    async def create(self, draft: Property) -> Property:
        async with self._write_lock:
            properties = await self._loaded()
            created = replace(
                draft,
                id=self._next_id(properties),
                created_at=datetime.now(timezone.utc),
                saved_at=None,
            )
            await self._commit([*properties, created])
            logger.info("Created property %s", created.id, extra={"property_id": created.id, "key": self.key})
            return created

    async def update(self, property_id: str, changes: dict[str, Any]) -> Property:
        async with self._write_lock:
            properties = await self._loaded()
            index = self._index_of(properties, property_id)
            updated = apply_changes(properties[index], changes)
            await self._commit([*properties[:index], updated, *properties[index + 1 :]])
            logger.info("Updated property %s", updated.id, extra={"property_id": updated.id, "key": self.key})
            return updated

    async def delete(self, property_id: str) -> Property:
        async with self._write_lock:
            properties = await self._loaded()
            index = self._index_of(properties, property_id)
            deleted = properties[index]
            await self._commit([*properties[:index], *properties[index + 1 :]])
            logger.info("Deleted property %s", deleted.id, extra={"property_id": deleted.id, "key": self.key})
            return deleted

    def _index_of(self, properties: list[Property], property_id: str) -> int:
        property_id = self.check_id(property_id)
        for index, prop in enumerate(properties):
            if prop.id == property_id:
                return index
        raise NotFoundError(f"Property {property_id} not found")

    def _next_id(self, properties: list[Property]) -> str:
        if self.id_type is IdType.INTEGER:
            numeric = [int(prop.id) for prop in properties if prop.id.isdigit()]
            return str(max(numeric, default=0) + 1)
        return uuid.uuid4().hex
