"""Favorites store with per-property serialized toggling."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable

from homefinder.exceptions import NotFoundError, ValidationError
from homefinder.models import FavoriteEntry
from homefinder.persistence.base import KeyValueStore
from homefinder.serialization import parse_datetime, to_dict_fast

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FavoritesStore:
    """Set of favorited property ids, persisted through a ``KeyValueStore``.

    Every view asks the same store instance, so a toggle made in one view
    is what any other view reads next. Reads are served from an in-memory
    mirror that is only replaced after the persisted write succeeds.

    ``toggle`` is a read-then-write composite; it holds a lock keyed by
    property id so that two toggles on the same id cannot both observe the
    same state. All commits additionally share one store-wide lock.
    """

    def __init__(
        self,
        store: KeyValueStore,
        key: str = "homefinder_favorites",
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.store = store
        self.key = key
        self._clock = clock
        self._entries: dict[str, FavoriteEntry] | None = None
        self._load_lock = asyncio.Lock()
        self._commit_lock = asyncio.Lock()
        self._toggle_locks: dict[str, asyncio.Lock] = {}
        self._toggle_waiters: dict[str, int] = {}

    async def init(self) -> None:
        """Load persisted favorites into memory."""
        await self.store.init()
        records = await self.store.read_all(self.key) or []
        entries: dict[str, FavoriteEntry] = {}
        for record in records:
            try:
                entry = FavoriteEntry(
                    property_id=str(record["property_id"]),
                    saved_at=parse_datetime(record["saved_at"]),
                )
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping malformed favorite %r: %s", record, exc)
                continue
            entries.setdefault(entry.property_id, entry)
        self._entries = entries
        logger.debug("Loaded %d favorites", len(entries), extra={"key": self.key, "count": len(entries)})

    async def _loaded(self) -> dict[str, FavoriteEntry]:
        if self._entries is None:
            async with self._load_lock:
                if self._entries is None:
                    await self.init()
        return self._entries

    async def _commit(self, entries: dict[str, FavoriteEntry]) -> None:
        await self.store.write_all(self.key, [to_dict_fast(e) for e in entries.values()])
        self._entries = entries

    @property
    def count(self) -> int:
        return len(self._entries or {})

    async def is_favorite(self, property_id: str) -> bool:
        return property_id in await self._loaded()

    async def get(self, property_id: str) -> FavoriteEntry:
        entry = (await self._loaded()).get(property_id)
        if entry is None:
            raise NotFoundError(f"Favorite {property_id} not found")
        return entry

    async def list_all(self) -> list[FavoriteEntry]:
        """Snapshot of all entries in the order they were saved."""
        return list((await self._loaded()).values())

    async def add(self, property_id: str) -> FavoriteEntry:
        """Save ``property_id``; an existing entry is returned unchanged."""
        if not property_id:
            raise ValidationError("property_id is required")
        async with self._commit_lock:
            entries = await self._loaded()
            existing = entries.get(property_id)
            if existing is not None:
                return existing
            entry = FavoriteEntry(property_id=property_id, saved_at=self._clock())
            await self._commit({**entries, property_id: entry})
        logger.info("Added favorite %s", property_id, extra={"property_id": property_id, "key": self.key})
        return entry

    async def remove(self, property_id: str) -> FavoriteEntry:
        """Delete and return the entry for ``property_id``.

        Raises
        ------
        NotFoundError
            If the property is not a favorite.
        """
        async with self._commit_lock:
            entries = await self._loaded()
            removed = entries.get(property_id)
            if removed is None:
                raise NotFoundError(f"Favorite {property_id} not found")
            await self._commit({pid: e for pid, e in entries.items() if pid != property_id})
        logger.info("Removed favorite %s", property_id, extra={"property_id": property_id, "key": self.key})
        return removed

    async def toggle(self, property_id: str) -> FavoriteEntry | None:
        """Flip the favorite state of ``property_id``.

        Returns
        -------
        FavoriteEntry | None
            The new entry when the property became a favorite, ``None``
            when it was removed.
        """
        lock = self._toggle_locks.setdefault(property_id, asyncio.Lock())
        self._toggle_waiters[property_id] = self._toggle_waiters.get(property_id, 0) + 1
        try:
            async with lock:
                if await self.is_favorite(property_id):
                    await self.remove(property_id)
                    return None
                return await self.add(property_id)
        finally:
            # Drop the lock once no toggle on this id holds or awaits it
            self._toggle_waiters[property_id] -= 1
            if not self._toggle_waiters[property_id]:
                del self._toggle_waiters[property_id]
                del self._toggle_locks[property_id]
