"""JSON file store: one file per key under a data directory."""

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from homefinder.exceptions import PersistenceError
from homefinder.persistence.base import KeyValueStore

logger = logging.getLogger(__name__)


class JsonFileStore(KeyValueStore):
    """Persist values as JSON files.

    Writes go to a temporary file in the same directory which then
    replaces the target, so readers see either the old or the new value.
    """

    def __init__(self, data_dir: str | Path, pretty: bool = False) -> None:
        """Initialize JSON file store.

        Parameters
        ----------
        data_dir : str | Path
            Directory holding the JSON files.
        pretty : bool
            Pretty-print JSON output.
        """
        self.data_dir = Path(data_dir)
        self.pretty = pretty

    async def init(self) -> None:
        try:
            await asyncio.to_thread(self.data_dir.mkdir, parents=True, exist_ok=True)
        except OSError as exc:
            raise PersistenceError(f"Cannot create data directory {self.data_dir}") from exc

    def path_for(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    async def read_all(self, key: str) -> Any | None:
        return await asyncio.to_thread(self._read, key)

    async def write_all(self, key: str, value: Any) -> None:
        await asyncio.to_thread(self._write, key, value)

    def _read(self, key: str) -> Any | None:
        file_path = self.path_for(key)
        try:
            with open(file_path, encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError:
            return None
        except (OSError, json.JSONDecodeError) as exc:
            raise PersistenceError(f"Failed to read {file_path}") from exc

    def _write(self, key: str, value: Any) -> None:
        file_path = self.path_for(key)
        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(dir=self.data_dir, prefix=f".{key}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                if self.pretty:
                    json.dump(value, f, indent=2, ensure_ascii=False)
                else:
                    json.dump(value, f, ensure_ascii=False)
            os.replace(tmp_name, file_path)
        except (OSError, TypeError, ValueError) as exc:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise PersistenceError(f"Failed to write {file_path}") from exc
        logger.debug("Wrote %s", file_path, extra={"key": key})
