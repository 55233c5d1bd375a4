"""Mutable configuration store with typed, dot-path access.

Purpose
-------
Own the nested configuration mapping and its last-modified timestamp, and
expose the read API (raw and typed getters, validation) plus the single write
path (:meth:`ConfigStore.merge`) used by loaders, the builder, and the
watcher.

Contents
--------
* :data:`ConfigValue` – the recursive value shape held by the store.
* :class:`ConfigStore` – the store itself.

System Role
-----------
Composes the domain rules (:mod:`lib_live_config.domain.paths`,
:mod:`lib_live_config.domain.coercion`) with the merge policy of
:mod:`lib_live_config.application.merge`. Loading from files or the
environment lives in :mod:`lib_live_config.core` so this module stays free of
I/O. A re-entrant lock serialises every read against every merge, which keeps
a watcher reload from interleaving with concurrent getters.
"""

from __future__ import annotations

import json
import threading
import time
from collections.abc import Mapping
from typing import Any, Iterable, Iterator, TypeVar, Union, overload

from ..domain import coercion
from ..domain.errors import ConfigKeyError, MultiError, PathError
from ..domain.paths import contains, resolve
from .merge import clone_tree, merge_into

ConfigValue = Union[str, int, float, bool, None, list, "dict[str, ConfigValue]"]
"""Values allowed in the configuration tree: scalars, opaque lists, or nested mappings."""

T = TypeVar("T")


class ConfigStore:
    """Nested configuration mapping with typed accessors.

    Why
    ----
    Applications read settings by dotted key and want ``int``/``bool`` values
    regardless of whether the source was a JSON number or an environment
    string.

    What
    ----
    Keeps a private ``dict`` tree and a ``last_modified`` timestamp (epoch
    seconds, ``None`` until a source has been loaded). Reads resolve dotted
    keys and coerce lazily; :meth:`merge` is the only mutation besides
    :meth:`set_data`.

    Examples
    --------
    >>> store = ConfigStore({"db": {"host": "localhost", "port": "5432"}})
    >>> store.get_int("db.port")
    5432
    >>> store.merge({"db": {"host": "192.168.1.100"}})
    >>> store.get_string("db.host"), store.get_int("db.port")
    ('192.168.1.100', 5432)
    >>> "db.password" in store
    False
    """

    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        self._lock = threading.RLock()
        self._data: dict[str, Any] = {}
        self.last_modified: float | None = None
        if data:
            merge_into(self._data, data)

    def __repr__(self) -> str:
        return f"ConfigStore(keys={sorted(self._data)!r}, last_modified={self.last_modified!r})"

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        return self.has(key)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    @property
    def lock(self) -> threading.RLock:
        """Lock guarding the mapping; hold it to group several reads atomically."""

        return self._lock

    def keys(self) -> list[str]:
        """Return the top-level keys."""

        with self._lock:
            return list(self._data)

    def get_value(self, key: str) -> Any:
        """Return the raw value at dotted *key*.

        Raises
        ------
        ConfigKeyError
            When any segment is missing.
        PathError
            When an intermediate segment is not a mapping.
        """

        with self._lock:
            return resolve(self._data, key)

    @overload
    def get(self, key: str, *, default: T) -> Any | T: ...

    @overload
    def get(self, key: str, *, default: None = ...) -> Any | None: ...

    def get(self, key: str, *, default: Any = None) -> Any:
        """Resolve *key* and return ``default`` when it is missing or unreachable.

        Examples
        --------
        >>> store = ConfigStore({"service": {"timeout": 5}})
        >>> store.get("service.timeout")
        5
        >>> store.get("service.retries", default=3)
        3
        """

        try:
            return self.get_value(key)
        except (ConfigKeyError, PathError):
            return default

    def get_string(self, key: str) -> str:
        """Return the value at *key* rendered as text (see :func:`coercion.to_string`)."""

        return coercion.to_string(self.get_value(key))

    def get_int(self, key: str) -> int:
        """Return the value at *key* as ``int`` (see :func:`coercion.to_int`)."""

        return coercion.to_int(self.get_value(key), key)

    def get_float(self, key: str) -> float:
        """Return the value at *key* as ``float`` (see :func:`coercion.to_float`)."""

        return coercion.to_float(self.get_value(key), key)

    def get_bool(self, key: str) -> bool:
        """Return the value at *key* as ``bool`` (see :func:`coercion.to_bool`)."""

        return coercion.to_bool(self.get_value(key), key)

    def has(self, key: str) -> bool:
        """Return ``True`` when *key* resolves (explicit ``None`` counts as present)."""

        with self._lock:
            return contains(self._data, key)

    def validate(self, keys: Iterable[str]) -> None:
        """Ensure every key in *keys* resolves, raising the first failure.

        Why
        ----
        Fail fast at start-up when required settings are absent.

        What
        ----
        Resolves keys in order and re-raises the first :class:`ConfigKeyError`
        or :class:`PathError`; remaining keys are not checked. See
        :meth:`validate_all` for aggregated reporting.

        Examples
        --------
        >>> ConfigStore({"a": "string"}).validate(["a.b"])
        Traceback (most recent call last):
        ...
        lib_live_config.domain.errors.PathError: invalid path segment 'a' in key: a.b
        """

        for key in keys:
            self.get_value(key)

    def validate_all(self, keys: Iterable[str]) -> None:
        """Check every key in *keys* and raise one :class:`MultiError` listing all failures.

        Examples
        --------
        >>> ConfigStore({}).validate_all(["a", "b"])
        Traceback (most recent call last):
        ...
        lib_live_config.domain.errors.MultiError: multiple errors: [missing required key: a, missing required key: b]
        """

        errors: list[Exception] = []
        for key in keys:
            try:
                self.get_value(key)
            except (ConfigKeyError, PathError) as exc:
                errors.append(exc)
        if errors:
            raise MultiError(errors)

    def merge(self, other: ConfigStore | Mapping[str, Any] | None) -> None:
        """Merge *other* into this store (later wins, nested mappings merge).

        ``None`` is a no-op. Merging does not touch :attr:`last_modified`;
        loaders and the watcher stamp it explicitly via :meth:`touch`.
        """

        if other is None:
            return
        payload = other.as_dict() if isinstance(other, ConfigStore) else other
        with self._lock:
            merge_into(self._data, payload)

    def set_data(self, data: Mapping[str, Any]) -> None:
        """Replace the whole tree with a copy of *data*."""

        with self._lock:
            self._data = clone_tree(data)

    def touch(self, timestamp: float | None = None) -> None:
        """Set :attr:`last_modified` to *timestamp* (defaults to now)."""

        self.last_modified = time.time() if timestamp is None else timestamp

    def as_dict(self) -> dict[str, Any]:
        """Return a deep, mutable copy of the configuration tree.

        Examples
        --------
        >>> store = ConfigStore({"service": {"timeout": 5}})
        >>> clone = store.as_dict()
        >>> clone["service"]["timeout"] = 10
        >>> store.get("service.timeout")
        5
        """

        with self._lock:
            return clone_tree(self._data)

    def to_json(self, *, indent: int | None = None) -> str:
        """Serialise the configuration to JSON.

        Examples
        --------
        >>> ConfigStore({"service": {"timeout": 5}}).to_json()
        '{"service":{"timeout":5}}'
        """

        return json.dumps(self.as_dict(), indent=indent, separators=(",", ":"), ensure_ascii=False, default=str)
