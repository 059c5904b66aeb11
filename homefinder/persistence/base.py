"""Persistence collaborator interface."""

from abc import ABC, abstractmethod
from typing import Any


class KeyValueStore(ABC):
    """Async key/value store holding JSON-compatible values.

    Implementations raise ``PersistenceError`` on any I/O failure and
    must never leave a partially written value behind.
    """

    async def init(self) -> None:
        """Prepare the backing storage. Safe to call more than once."""

    @abstractmethod
    async def read_all(self, key: str) -> Any | None:
        """Return the value stored under ``key``, or ``None`` if absent."""

    @abstractmethod
    async def write_all(self, key: str, value: Any) -> None:
        """Replace the value stored under ``key``."""
