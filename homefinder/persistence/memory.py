"""In-memory store for tests and ephemeral sessions."""

import copy
from typing import Any

from homefinder.persistence.base import KeyValueStore


class InMemoryStore(KeyValueStore):
    """Process-local store; values are deep-copied in and out."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(initial) if initial else {}

    async def read_all(self, key: str) -> Any | None:
        return copy.deepcopy(self._data.get(key))

    async def write_all(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    def keys(self) -> list[str]:
        return list(self._data)
