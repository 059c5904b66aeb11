"""Tests for LocalPropertyRepository."""

import asyncio
from decimal import Decimal
from typing import Any

import pytest

from homefinder.config import IdType
from homefinder.exceptions import NotFoundError, PersistenceError, ValidationError
from homefinder.models import FilterSpec, PropertyType
from homefinder.persistence import InMemoryStore
from homefinder.repository import FEATURED_LIMIT, CanonicalNormalizer, LocalPropertyRepository


class FailingStore(InMemoryStore):
    """Store whose writes fail once armed."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        super().__init__(initial)
        self.fail_writes = False

    async def write_all(self, key: str, value: Any) -> None:
        if self.fail_writes:
            raise PersistenceError("disk full")
        await super().write_all(key, value)


def _records(make_property, count: int, **overrides: Any) -> list[dict]:
    normalizer = CanonicalNormalizer()
    return [
        normalizer.denormalize(make_property(id=str(i), **overrides))
        for i in range(1, count + 1)
    ]


class TestLocalRepositoryReads:
    """Read operations."""

    def test_seeds_empty_table(self, make_property, memory_store: InMemoryStore) -> None:
        repo = LocalPropertyRepository(memory_store, seed_records=_records(make_property, 3))

        async def scenario() -> tuple:
            properties = await repo.get_all()
            return properties, await memory_store.read_all("homefinder_properties")

        properties, stored = asyncio.run(scenario())

        assert [p.id for p in properties] == ["1", "2", "3"]
        assert len(stored) == 3

    def test_existing_table_wins_over_seed(self, make_property) -> None:
        store = InMemoryStore({"homefinder_properties": _records(make_property, 1)})
        repo = LocalPropertyRepository(store, seed_records=_records(make_property, 5))

        assert len(asyncio.run(repo.get_all())) == 1

    def test_malformed_records_are_skipped(self, make_property, canonical_record: dict) -> None:
        bad = dict(canonical_record, id="bad", price="free")
        store = InMemoryStore({"homefinder_properties": [canonical_record, bad]})
        repo = LocalPropertyRepository(store)

        assert [p.id for p in asyncio.run(repo.get_all())] == ["1"]

    def test_records_with_wrong_shape_are_skipped(self, canonical_record: dict) -> None:
        flat_address = dict(canonical_record, id="2", address="12 Main St")
        store = InMemoryStore({"homefinder_properties": [canonical_record, flat_address, "garbage", None]})
        repo = LocalPropertyRepository(store)

        assert [p.id for p in asyncio.run(repo.get_all())] == ["1"]

    def test_get_all_with_filters(self, make_property) -> None:
        records = [
            CanonicalNormalizer().denormalize(make_property(id="1", price=150000)),
            CanonicalNormalizer().denormalize(make_property(id="2", price=500000)),
        ]
        repo = LocalPropertyRepository(InMemoryStore(), seed_records=records)

        result = asyncio.run(repo.get_all(FilterSpec(price_max=Decimal("200000"))))

        assert [p.id for p in result] == ["1"]

    def test_get_by_id(self, make_property, memory_store: InMemoryStore) -> None:
        repo = LocalPropertyRepository(memory_store, seed_records=_records(make_property, 2))

        assert asyncio.run(repo.get_by_id("2")).id == "2"

    def test_get_by_id_missing(self, make_property, memory_store: InMemoryStore) -> None:
        repo = LocalPropertyRepository(memory_store, seed_records=_records(make_property, 2))

        with pytest.raises(NotFoundError):
            asyncio.run(repo.get_by_id("99"))

    def test_integer_ids_reject_non_numeric(self, make_property, memory_store: InMemoryStore) -> None:
        repo = LocalPropertyRepository(
            memory_store, seed_records=_records(make_property, 2), id_type=IdType.INTEGER
        )

        with pytest.raises(NotFoundError):
            asyncio.run(repo.get_by_id("abc"))

    def test_get_featured_is_bounded(self, make_property, memory_store: InMemoryStore) -> None:
        records = _records(make_property, 8, featured=True) + [
            CanonicalNormalizer().denormalize(make_property(id="plain", featured=False))
        ]
        repo = LocalPropertyRepository(memory_store, seed_records=records)

        featured = asyncio.run(repo.get_featured())

        assert len(featured) == FEATURED_LIMIT
        assert all(p.featured for p in featured)
        assert [p.id for p in featured] == ["1", "2", "3", "4", "5", "6"]


class TestLocalRepositoryWrites:
    """Mutating operations."""

    def test_create_assigns_uuid(self, make_property, memory_store: InMemoryStore) -> None:
        repo = LocalPropertyRepository(memory_store)

        async def scenario() -> tuple:
            created = await repo.create(make_property(id="ignored"))
            return created, await repo.get_by_id(created.id)

        created, fetched = asyncio.run(scenario())

        assert created.id != "ignored"
        assert len(created.id) == 32
        assert created.created_at is not None
        assert fetched == created

    def test_create_with_integer_ids(self, make_property, memory_store: InMemoryStore) -> None:
        repo = LocalPropertyRepository(
            memory_store, seed_records=_records(make_property, 3), id_type=IdType.INTEGER
        )

        assert asyncio.run(repo.create(make_property())).id == "4"

    def test_update(self, make_property, memory_store: InMemoryStore) -> None:
        repo = LocalPropertyRepository(memory_store, seed_records=_records(make_property, 2))

        async def scenario() -> tuple:
            updated = await repo.update("2", {"price": "275000", "property_type": "House"})
            return updated, await memory_store.read_all("homefinder_properties")

        updated, stored = asyncio.run(scenario())

        assert updated.price == Decimal("275000")
        assert updated.property_type is PropertyType.HOUSE
        assert stored[1]["price"] == "275000"

    def test_update_rejects_id_change(self, make_property, memory_store: InMemoryStore) -> None:
        repo = LocalPropertyRepository(memory_store, seed_records=_records(make_property, 1))

        with pytest.raises(ValidationError):
            asyncio.run(repo.update("1", {"id": "2"}))

    def test_update_missing(self, make_property, memory_store: InMemoryStore) -> None:
        repo = LocalPropertyRepository(memory_store, seed_records=_records(make_property, 1))

        with pytest.raises(NotFoundError):
            asyncio.run(repo.update("9", {"price": 1}))

    def test_delete(self, make_property, memory_store: InMemoryStore) -> None:
        repo = LocalPropertyRepository(memory_store, seed_records=_records(make_property, 3))

        async def scenario() -> tuple:
            deleted = await repo.delete("2")
            return deleted, await repo.get_all()

        deleted, remaining = asyncio.run(scenario())

        assert deleted.id == "2"
        assert [p.id for p in remaining] == ["1", "3"]

    def test_delete_missing(self, make_property, memory_store: InMemoryStore) -> None:
        repo = LocalPropertyRepository(memory_store, seed_records=_records(make_property, 1))

        with pytest.raises(NotFoundError):
            asyncio.run(repo.delete("2"))

    def test_failed_write_leaves_state_unchanged(self, make_property) -> None:
        store = FailingStore()
        repo = LocalPropertyRepository(store, seed_records=_records(make_property, 2))

        async def scenario() -> tuple:
            await repo.init()
            store.fail_writes = True
            with pytest.raises(PersistenceError):
                await repo.delete("1")
            return await repo.get_all(), await store.read_all("homefinder_properties")

        properties, stored = asyncio.run(scenario())

        assert [p.id for p in properties] == ["1", "2"]
        assert len(stored) == 2

    def test_concurrent_creates_keep_both(self, make_property, memory_store: InMemoryStore) -> None:
        repo = LocalPropertyRepository(memory_store, id_type=IdType.INTEGER)

        async def scenario() -> list:
            await asyncio.gather(repo.create(make_property()), repo.create(make_property()))
            return await repo.get_all()

        assert sorted(p.id for p in asyncio.run(scenario())) == ["1", "2"]
