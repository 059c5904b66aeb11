"""Tests for FavoritesStore."""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from homefinder.exceptions import NotFoundError, PersistenceError, ValidationError
from homefinder.persistence import InMemoryStore
from homefinder.store import FavoritesStore

START = datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)


class TickingClock:
    """Clock that advances one minute per call."""

    def __init__(self) -> None:
        self.calls = 0

    def __call__(self) -> datetime:
        self.calls += 1
        return START + timedelta(minutes=self.calls)


class SlowStore(InMemoryStore):
    """Store that yields to the event loop on every operation."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        super().__init__(initial)
        self.fail_writes = False
        self.writes = 0

    async def read_all(self, key: str) -> Any | None:
        await asyncio.sleep(0)
        return await super().read_all(key)

    async def write_all(self, key: str, value: Any) -> None:
        await asyncio.sleep(0.001)
        if self.fail_writes:
            raise PersistenceError("quota exceeded")
        self.writes += 1
        await super().write_all(key, value)


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


class TestFavoritesBasics:
    """Membership and idempotence."""

    def test_unknown_id_is_not_favorite(self, memory_store: InMemoryStore) -> None:
        assert asyncio.run(FavoritesStore(memory_store).is_favorite("nope")) is False

    def test_add_then_is_favorite(self, memory_store: InMemoryStore, clock: TickingClock) -> None:
        store = FavoritesStore(memory_store, clock=clock)

        async def scenario() -> tuple:
            entry = await store.add("p1")
            return entry, await store.is_favorite("p1")

        entry, is_favorite = asyncio.run(scenario())

        assert entry.property_id == "p1"
        assert entry.saved_at == START + timedelta(minutes=1)
        assert is_favorite is True

    def test_add_twice_keeps_first_saved_at(self, memory_store: InMemoryStore, clock: TickingClock) -> None:
        store = FavoritesStore(memory_store, clock=clock)

        async def scenario() -> tuple:
            first = await store.add("p1")
            second = await store.add("p1")
            return first, second, await store.list_all()

        first, second, entries = asyncio.run(scenario())

        assert second == first
        assert entries == [first]
        assert clock.calls == 1

    def test_add_requires_id(self, memory_store: InMemoryStore) -> None:
        with pytest.raises(ValidationError):
            asyncio.run(FavoritesStore(memory_store).add(""))

    def test_remove_returns_entry(self, memory_store: InMemoryStore, clock: TickingClock) -> None:
        store = FavoritesStore(memory_store, clock=clock)

        async def scenario() -> tuple:
            added = await store.add("p1")
            removed = await store.remove("p1")
            return added, removed, await store.is_favorite("p1")

        added, removed, is_favorite = asyncio.run(scenario())

        assert removed == added
        assert is_favorite is False

    def test_remove_missing(self, memory_store: InMemoryStore) -> None:
        with pytest.raises(NotFoundError):
            asyncio.run(FavoritesStore(memory_store).remove("p1"))

    def test_get(self, memory_store: InMemoryStore) -> None:
        store = FavoritesStore(memory_store)

        async def scenario() -> None:
            added = await store.add("p1")
            assert await store.get("p1") == added
            with pytest.raises(NotFoundError):
                await store.get("p2")

        asyncio.run(scenario())

    def test_list_all_in_saved_order(self, memory_store: InMemoryStore, clock: TickingClock) -> None:
        store = FavoritesStore(memory_store, clock=clock)

        async def scenario() -> list:
            for pid in ("b", "a", "c"):
                await store.add(pid)
            return await store.list_all()

        assert [e.property_id for e in asyncio.run(scenario())] == ["b", "a", "c"]
        assert store.count == 3


class TestFavoritesToggle:
    """Toggle semantics."""

    def test_toggle_adds_then_removes(self, memory_store: InMemoryStore) -> None:
        store = FavoritesStore(memory_store)

        async def scenario() -> tuple:
            first = await store.toggle("p1")
            after_first = await store.is_favorite("p1")
            second = await store.toggle("p1")
            return first, after_first, second, await store.is_favorite("p1")

        first, after_first, second, after_second = asyncio.run(scenario())

        assert first is not None and first.property_id == "p1"
        assert after_first is True
        assert second is None
        assert after_second is False

    def test_double_toggle_restores_membership(self, memory_store: InMemoryStore) -> None:
        store = FavoritesStore(memory_store)

        async def scenario() -> bool:
            await store.add("p1")
            await store.toggle("p1")
            await store.toggle("p1")
            return await store.is_favorite("p1")

        assert asyncio.run(scenario()) is True

    def test_concurrent_toggles_on_same_id_are_serialized(self) -> None:
        backing = SlowStore()
        store = FavoritesStore(backing)

        async def scenario() -> tuple:
            results = await asyncio.gather(store.toggle("p1"), store.toggle("p1"))
            return results, await store.is_favorite("p1")

        (first, second), is_favorite = asyncio.run(scenario())

        assert first is not None
        assert second is None
        assert is_favorite is False
        assert backing.writes == 2

    def test_concurrent_toggles_on_favorited_id_do_not_fail(self) -> None:
        backing = SlowStore()
        store = FavoritesStore(backing)

        async def scenario() -> tuple:
            await store.add("p1")
            results = await asyncio.gather(*(store.toggle("p1") for _ in range(3)))
            return results, await store.is_favorite("p1")

        results, is_favorite = asyncio.run(scenario())

        assert results[0] is None
        assert results[1] is not None
        assert results[2] is None
        assert is_favorite is False

    def test_concurrent_mutations_on_different_ids_keep_all(self) -> None:
        backing = SlowStore()
        store = FavoritesStore(backing)

        async def scenario() -> list:
            await asyncio.gather(*(store.toggle(f"p{i}") for i in range(5)))
            reloaded = FavoritesStore(backing)
            return await reloaded.list_all()

        assert sorted(e.property_id for e in asyncio.run(scenario())) == [f"p{i}" for i in range(5)]

    def test_reads_interleaved_with_toggle(self) -> None:
        store = FavoritesStore(SlowStore())

        async def scenario() -> list:
            await store.init()
            results = await asyncio.gather(
                store.is_favorite("p1"),
                store.toggle("p1"),
                store.is_favorite("p2"),
            )
            return [results[0], results[2], await store.is_favorite("p1")]

        assert asyncio.run(scenario()) == [False, False, True]

    def test_toggle_locks_are_released(self) -> None:
        store = FavoritesStore(SlowStore())

        async def scenario() -> list:
            results = await asyncio.gather(
                *(store.toggle("p1") for _ in range(3)),
                *(store.toggle("p2") for _ in range(2)),
            )
            return [entry is not None for entry in results]

        assert asyncio.run(scenario()) == [True, False, True, True, False]
        assert store._toggle_locks == {}
        assert store._toggle_waiters == {}

    def test_failed_toggle_releases_lock(self) -> None:
        backing = SlowStore()
        backing.fail_writes = True
        store = FavoritesStore(backing)

        with pytest.raises(PersistenceError):
            asyncio.run(store.toggle("p1"))

        assert store._toggle_locks == {}


class TestFavoritesPersistence:
    """Persisted state and failure handling."""

    def test_naive_stored_timestamps_are_utc(self, clock: TickingClock) -> None:
        backing = InMemoryStore(
            {"homefinder_favorites": [{"property_id": "old", "saved_at": "2024-05-01T09:30:00"}]}
        )
        store = FavoritesStore(backing, clock=clock)

        async def scenario() -> list:
            await store.add("new")
            return await store.list_all()

        entries = asyncio.run(scenario())

        assert entries[0].saved_at == datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)
        assert max(entries, key=lambda e: e.saved_at).property_id == "old"

    def test_entries_survive_reload(self, memory_store: InMemoryStore, clock: TickingClock) -> None:
        async def scenario() -> list:
            await FavoritesStore(memory_store, clock=clock).add("p1")
            return await FavoritesStore(memory_store).list_all()

        entries = asyncio.run(scenario())

        assert [e.property_id for e in entries] == ["p1"]
        assert entries[0].saved_at == START + timedelta(minutes=1)

    def test_persisted_shape(self, memory_store: InMemoryStore, clock: TickingClock) -> None:
        async def scenario() -> object:
            await FavoritesStore(memory_store, clock=clock).add("p1")
            return await memory_store.read_all("homefinder_favorites")

        assert asyncio.run(scenario()) == [
            {"property_id": "p1", "saved_at": "2024-05-01T09:01:00+00:00"}
        ]

    def test_malformed_and_duplicate_records_are_dropped(self) -> None:
        backing = InMemoryStore(
            {
                "homefinder_favorites": [
                    {"property_id": "p1", "saved_at": "2024-01-01T00:00:00+00:00"},
                    {"property_id": "p1", "saved_at": "2024-02-01T00:00:00+00:00"},
                    {"saved_at": "2024-01-01T00:00:00+00:00"},
                    {"property_id": "p2", "saved_at": "yesterday"},
                ]
            }
        )

        entries = asyncio.run(FavoritesStore(backing).list_all())

        assert len(entries) == 1
        assert entries[0].saved_at == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_failed_add_changes_nothing(self) -> None:
        backing = SlowStore()
        store = FavoritesStore(backing)

        async def scenario() -> tuple:
            await store.init()
            backing.fail_writes = True
            with pytest.raises(PersistenceError):
                await store.add("p1")
            return await store.is_favorite("p1"), await backing.read_all("homefinder_favorites")

        assert asyncio.run(scenario()) == (False, None)

    def test_failed_toggle_off_keeps_favorite(self) -> None:
        backing = SlowStore()
        store = FavoritesStore(backing)

        async def scenario() -> bool:
            await store.add("p1")
            backing.fail_writes = True
            with pytest.raises(PersistenceError):
                await store.toggle("p1")
            return await store.is_favorite("p1")

        assert asyncio.run(scenario()) is True
