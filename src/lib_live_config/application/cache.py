"""Read-through cache for typed configuration lookups.

Purpose
-------
Serve repeated typed reads of the same dotted key without re-resolving the
path or re-running coercion, until the caller invalidates the entry.

Contents
--------
* :class:`CachedConfig` – decorator around :class:`ConfigStore`.
* :class:`_CacheEntry` – per-key slot holding one coerced value per type.

System Role
-----------
Hot code paths read configuration through :class:`CachedConfig`. The cache
never watches the store; whoever mutates the store (usually
:class:`lib_live_config.watcher.ConfigWatcher`) must invalidate it.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar

from .store import ConfigStore

T = TypeVar("T")


@dataclass(slots=True)
class _CacheEntry:
    """Coerced values cached for one dotted key, keyed by requested type."""

    values: dict[str, Any] = field(default_factory=dict)


class CachedConfig:
    """Cache typed getters of a :class:`ConfigStore`.

    Why
    ----
    Lookups in request handlers should not pay for path resolution and string
    parsing on every call.

    What
    ----
    On a hit the cached value is returned without touching the store. On a
    miss the store's typed getter runs and a successful result is cached.
    Errors are never cached. Attributes not defined here are delegated to the
    wrapped store, so the wrapper can stand in for it.

    Examples
    --------
    >>> cached = CachedConfig(ConfigStore({"db": {"port": "5432"}}))
    >>> cached.get_int("db.port")
    5432
    >>> cached.is_cached("db.port")
    True
    >>> cached.invalidate_key("db.port")
    >>> cached.is_cached("db.port")
    False
    """

    def __init__(self, store: ConfigStore) -> None:
        self._store = store
        self._entries: dict[str, _CacheEntry] = {}
        self._lock = threading.Lock()
        self._generation = 0

    @property
    def store(self) -> ConfigStore:
        """The wrapped store."""

        return self._store

    def __getattr__(self, name: str) -> Any:
        return getattr(self._store, name)

    def __contains__(self, key: object) -> bool:
        return key in self._store

    def get_string(self, key: str) -> str:
        return self._cached(key, "string", self._store.get_string)

    def get_int(self, key: str) -> int:
        return self._cached(key, "int", self._store.get_int)

    def get_float(self, key: str) -> float:
        return self._cached(key, "float", self._store.get_float)

    def get_bool(self, key: str) -> bool:
        return self._cached(key, "bool", self._store.get_bool)

    def invalidate_cache(self) -> None:
        """Drop every cached entry."""

        with self._lock:
            self._entries = {}
            self._generation += 1

    def invalidate_key(self, key: str) -> None:
        """Drop the cached entry for *key* (all types)."""

        with self._lock:
            self._entries.pop(key, None)
            self._generation += 1

    def is_cached(self, key: str) -> bool:
        """Return ``True`` when an entry exists for *key*."""

        with self._lock:
            entry = self._entries.get(key)
            return entry is not None

    def _cached(self, key: str, kind: str, getter: Callable[[str], T]) -> T:
        """Return the cached *kind* value for *key*, computing it with *getter* on a miss."""

        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and kind in entry.values:
                return entry.values[kind]
            generation = self._generation

        value = getter(key)

        with self._lock:
            # an invalidation during the lookup means the value may predate a reload
            if generation == self._generation:
                entry = self._entries.get(key)
                if entry is None:
                    entry = _CacheEntry()
                    self._entries[key] = entry
                entry.values[kind] = value
        return value
