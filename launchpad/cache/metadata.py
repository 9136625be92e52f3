"""Address-keyed, field-level cache for immutable on-chain metadata.

Entries are keyed by ``"<network>:<lowercase address>"`` and hold a partial
record of already-known fields. A field, once resolved, is never fetched
again; ``invalidate`` is the explicit bypass for callers that need a fresh
value (e.g. an owner that may have changed).
"""

from __future__ import annotations

import copy
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import structlog

from launchpad.cache.store import CacheStore, InMemoryCacheStore
from launchpad.constants import MAINNET
from launchpad.models.types import normalize_address

logger = structlog.get_logger()

T = TypeVar("T")


class MetadataCache:
    """Persisted mapping of (network, address, field) -> value.

    The cache exclusively owns its mapping: values are deep-copied on the way
    in and out. The store is loaded once here and saved after every update.

    Concurrent ``get`` calls for the same field before the first resolves may
    each call their loader; list views serialize through SingleFlight.
    """

    def __init__(self, store: CacheStore | None = None, network: str = MAINNET) -> None:
        self._store = store if store is not None else InMemoryCacheStore()
        self._data: dict[str, dict[str, Any]] = {
            key: dict(record) for key, record in self._store.load().items() if isinstance(record, dict)
        }
        self.network = network
        self.hits = 0
        self.misses = 0

    def _key(self, address: str) -> str:
        return f"{self.network}:{normalize_address(address)}"

    async def get(self, address: str, field: str, loader: Callable[[], Awaitable[T]]) -> T:
        """Return the cached field, or await ``loader()`` and cache its result.

        A cache hit never calls the loader. Loader errors propagate and
        nothing is stored; a ``None`` result is returned but not cached.
        """
        key = self._key(address)
        record = self._data.get(key)
        if record is not None and record.get(field) is not None:
            self.hits += 1
            return copy.deepcopy(record[field])

        self.misses += 1
        value = await loader()
        if value is not None:
            self.set(address, field, value)
        return value

    def peek(self, address: str, field: str) -> Any | None:
        """Cached value without loading, or None."""
        record = self._data.get(self._key(address))
        if record is None:
            return None
        return copy.deepcopy(record.get(field))

    def set(self, address: str, field: str, value: Any) -> None:
        """Store a field and persist."""
        record = self._data.setdefault(self._key(address), {})
        record[field] = copy.deepcopy(value)
        self._persist()

    def invalidate(self, address: str, field: str | None = None) -> None:
        """Forget one field (or the whole record) so the next get re-fetches."""
        key = self._key(address)
        record = self._data.get(key)
        if record is None:
            return
        if field is None:
            del self._data[key]
        else:
            record.pop(field, None)
        self._persist()

    def record(self, address: str) -> dict[str, Any]:
        """Copy of every known field for an address."""
        return copy.deepcopy(self._data.get(self._key(address), {}))

    def __len__(self) -> int:
        return len(self._data)

    def _persist(self) -> None:
        try:
            self._store.save(self._data)
        except OSError as e:
            # The in-memory mapping stays authoritative for this session
            logger.warning("cache_persist_failed", error=str(e), entries=len(self._data))


__all__ = ["MetadataCache"]
