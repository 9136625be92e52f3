"""Storage backends for the metadata cache.

A store holds one flat string-keyed mapping. It is loaded once when the cache
is constructed and saved after every update.
"""

from __future__ import annotations

import contextlib
import copy
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol

import structlog

logger = structlog.get_logger()


class CacheStore(Protocol):
    """Durable backing for MetadataCache."""

    def load(self) -> dict[str, Any]:
        """Return the persisted mapping, or an empty one if there is none."""
        ...

    def save(self, data: dict[str, Any]) -> None:
        """Persist the full mapping."""
        ...


class InMemoryCacheStore:
    """Store that lives only as long as the process. Used in tests.

    Tracks ``save_count`` for assertions.
    """

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(initial) if initial else {}
        self.save_count = 0

    def load(self) -> dict[str, Any]:
        return copy.deepcopy(self._data)

    def save(self, data: dict[str, Any]) -> None:
        self._data = copy.deepcopy(data)
        self.save_count += 1

    @property
    def data(self) -> dict[str, Any]:
        return copy.deepcopy(self._data)


class JsonFileCacheStore:
    """Store persisted as a JSON object in a single file.

    A missing, unreadable or corrupt file loads as an empty mapping; writes go
    through a temporary file and an atomic rename.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path) as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("cache_load_failed", path=str(self.path), error=str(e))
            return {}
        if not isinstance(data, dict):
            logger.warning("cache_load_not_a_mapping", path=str(self.path), type=type(data).__name__)
            return {}
        return data

    def save(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(data, f, sort_keys=True)
            os.replace(tmp_path, self.path)
        except BaseException:
            with contextlib.suppress(OSError):
                os.unlink(tmp_path)
            raise


__all__ = ["CacheStore", "InMemoryCacheStore", "JsonFileCacheStore"]
