"""Persisted metadata cache and the typed service built on it."""

from launchpad.cache.metadata import MetadataCache
from launchpad.cache.service import MetadataService
from launchpad.cache.store import CacheStore, InMemoryCacheStore, JsonFileCacheStore

__all__ = [
    "CacheStore",
    "InMemoryCacheStore",
    "JsonFileCacheStore",
    "MetadataCache",
    "MetadataService",
]
