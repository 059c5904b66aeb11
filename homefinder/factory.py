"""Build configured collaborators."""

from typing import Any

from homefinder.config import Backend, HomeFinderConfig
from homefinder.persistence import JsonFileStore, KeyValueStore
from homefinder.repository import (
    LocalPropertyRepository,
    PropertyRepository,
    RemotePropertyRepository,
)
from homefinder.service import HomeFinder
from homefinder.store import FavoritesStore, SearchFiltersStore


def build_store(config: HomeFinderConfig) -> KeyValueStore:
    return JsonFileStore(config.storage.data_dir, pretty=config.storage.pretty_json)


def build_repository(
    config: HomeFinderConfig,
    store: KeyValueStore,
    seed_records: list[dict[str, Any]] | None = None,
) -> PropertyRepository:
    """Select the repository variant named by ``config.backend``."""
    if config.backend is Backend.REMOTE:
        return RemotePropertyRepository.from_config(config.remote, id_type=config.id_type)
    return LocalPropertyRepository(
        store,
        key=config.storage.properties_key,
        id_type=config.id_type,
        seed_records=seed_records,
    )


def build_app(
    config: HomeFinderConfig,
    store: KeyValueStore | None = None,
    seed_records: list[dict[str, Any]] | None = None,
) -> HomeFinder:
    store = store or build_store(config)
    return HomeFinder(
        repository=build_repository(config, store, seed_records),
        favorites=FavoritesStore(store, key=config.storage.favorites_key),
        filters=SearchFiltersStore(store, key=config.storage.filters_key),
    )
