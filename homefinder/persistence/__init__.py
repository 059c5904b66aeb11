"""Key/value persistence backends for favorites, filters and local listings."""

from homefinder.persistence.base import KeyValueStore
from homefinder.persistence.json_file import JsonFileStore
from homefinder.persistence.memory import InMemoryStore

__all__ = ["InMemoryStore", "JsonFileStore", "KeyValueStore"]
