"""Configuration management for homefinder."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from homefinder.exceptions import ConfigurationError


class Backend(str, Enum):
    LOCAL = "local"
    REMOTE = "remote"


class IdType(str, Enum):
    """How the backing store represents property identifiers.

    Canonical ids are always strings; this only controls id validation
    and how new ids are minted.
    """

    STRING = "string"
    INTEGER = "integer"


@dataclass
class StorageConfig:
    """Local persisted-state configuration."""

    data_dir: Path = field(default_factory=lambda: Path("data"))
    favorites_key: str = "homefinder_favorites"
    filters_key: str = "homefinder_search_filters"
    properties_key: str = "homefinder_properties"
    pretty_json: bool = False


@dataclass
class RemoteConfig:
    """Remote record API configuration."""

    base_url: str = "http://localhost:8000"
    api_key: str | None = None
    table: str = "properties"
    timeout_seconds: float = 15.0

    @property
    def headers(self) -> dict[str, str]:
        """Request headers for the record API."""
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers


@dataclass
class HomeFinderConfig:
    """Main configuration for homefinder."""

    backend: Backend = Backend.LOCAL
    id_type: IdType = IdType.STRING
    storage: StorageConfig = field(default_factory=StorageConfig)
    remote: RemoteConfig = field(default_factory=RemoteConfig)
    log_level: str = "INFO"
    log_format: str = "standard"

    @classmethod
    def from_env(cls) -> "HomeFinderConfig":
        """Create config from environment variables."""
        import os

        storage = StorageConfig(
            data_dir=Path(os.getenv("HOMEFINDER_DATA_DIR", "data")),
            pretty_json=os.getenv("HOMEFINDER_PRETTY_JSON", "false").lower() == "true",
        )

        timeout = os.getenv("HOMEFINDER_API_TIMEOUT", "15")
        try:
            timeout_seconds = float(timeout)
        except ValueError as exc:
            raise ConfigurationError(f"Invalid HOMEFINDER_API_TIMEOUT: {timeout!r}") from exc

        remote = RemoteConfig(
            base_url=os.getenv("HOMEFINDER_API_URL", "http://localhost:8000"),
            api_key=os.getenv("HOMEFINDER_API_KEY") or None,
            table=os.getenv("HOMEFINDER_API_TABLE", "properties"),
            timeout_seconds=timeout_seconds,
        )

        backend = os.getenv("HOMEFINDER_BACKEND", "local").lower()
        id_type = os.getenv("HOMEFINDER_ID_TYPE", "string").lower()
        try:
            parsed_backend = Backend(backend)
            parsed_id_type = IdType(id_type)
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc

        return cls(
            backend=parsed_backend,
            id_type=parsed_id_type,
            storage=storage,
            remote=remote,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
        )
