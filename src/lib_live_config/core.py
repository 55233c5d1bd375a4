"""Composition root wiring source adapters into the configuration store.

Purpose
-------
Provide the operations that feed a :class:`ConfigStore` from the outside
world: structured files, prefixed environment variables, and in-memory
mappings. Adapter failures are translated into the domain error taxonomy here
so callers catch one exception family.

Contents
--------
* :data:`_FILE_LOADERS` – mapping of file suffixes to loader instances.
* :class:`LayerLoadError` – a source could not be materialised.
* :func:`loader_for` – pick the loader for a path.
* :func:`decode_file` – decode one file into a mapping.
* :func:`load_file` / :func:`load_env` / :func:`load_mapping` – merge a source
  into a store.

System Role
-----------
Used directly by applications, by :class:`lib_live_config.builder.ConfigBuilder`
for fluent composition, and by :class:`lib_live_config.watcher.ConfigWatcher`
when it rebuilds the configuration during a reload.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from .adapters.env.default import DefaultEnvLoader, default_env_prefix
from .adapters.file_loaders.structured import JSONFileLoader, TOMLFileLoader, YAMLFileLoader
from .application.ports import FileLoader
from .application.store import ConfigStore
from .domain.errors import ConfigError, ConfigKeyError, InvalidFormat, NotFound, PathError, UnreadableSource
from .domain.paths import SEPARATOR
from .observability import log_debug, make_event

# Supported structured file loaders keyed by suffix. Files with any other
# suffix are decoded as JSON.
_FILE_LOADERS: dict[str, FileLoader] = {
    ".json": JSONFileLoader(),
    ".toml": TOMLFileLoader(),
    ".yaml": YAMLFileLoader(),
    ".yml": YAMLFileLoader(),
}
_DEFAULT_SUFFIX = ".json"


class LayerLoadError(ConfigError):
    """Raised when a configuration source cannot be materialised.

    Why
    ----
    Callers need to know *which* source failed; the adapter error
    (:class:`NotFound`, :class:`UnreadableSource`, :class:`InvalidFormat`)
    remains available as ``__cause__`` and via :attr:`reason`.

    Examples
    --------
    >>> err = LayerLoadError("Failed to load file source a.json: boom", source="a.json")
    >>> err.source
    'a.json'
    """

    def __init__(self, message: str, *, source: str) -> None:
        super().__init__(message)
        self.source = source

    @property
    def reason(self) -> BaseException | None:
        """The adapter error that caused this failure."""

        return self.__cause__


def loader_for(path: str) -> FileLoader:
    """Return the structured loader registered for the suffix of *path*.

    Examples
    --------
    >>> type(loader_for("settings.TOML")).__name__
    'TOMLFileLoader'
    >>> type(loader_for("settings.conf")).__name__
    'JSONFileLoader'
    """

    suffix = Path(path).suffix.lower()
    return _FILE_LOADERS.get(suffix, _FILE_LOADERS[_DEFAULT_SUFFIX])


def decode_file(path: str) -> Mapping[str, Any]:
    """Decode the file at *path* into a mapping.

    Raises
    ------
    LayerLoadError
        Wrapping :class:`NotFound`, :class:`UnreadableSource`, or
        :class:`InvalidFormat`.
    """

    try:
        return loader_for(path).load(path)
    except (NotFound, UnreadableSource, InvalidFormat) as exc:
        log_debug("layer_error", layer="file", path=path, error=str(exc))
        raise LayerLoadError(f"Failed to load file source {path}: {exc}", source=path) from exc


def load_file(store: ConfigStore, path: str | Path) -> None:
    """Decode the file at *path* and merge it into *store*.

    Why
    ----
    Files are the main configuration source; merging keeps values from
    earlier sources that the file does not mention.

    Side Effects
    ------------
    Mutates *store* and stamps its ``last_modified``. On failure *store* is
    left untouched.

    Examples
    --------
    >>> from tempfile import TemporaryDirectory
    >>> tmp = TemporaryDirectory()
    >>> target = Path(tmp.name) / "base.json"
    >>> _ = target.write_text('{"db": {"host": "localhost", "port": 5432}}', encoding="utf-8")
    >>> store = ConfigStore()
    >>> load_file(store, target)
    >>> store.get_int("db.port")
    5432
    >>> tmp.cleanup()
    """

    source = str(path)
    payload = decode_file(source)
    with store.lock:
        store.merge(payload)
        store.touch()
    log_debug("layer_loaded", **make_event("file", source, {"keys": len(payload)}))


def load_env(store: ConfigStore, prefix: str, *, environ: Mapping[str, str] | None = None) -> None:
    """Merge environment variables starting with *prefix* into *store*.

    Why
    ----
    Deployments override file settings through the environment, e.g.
    ``APP_DB__HOST`` for ``db.host``.

    What
    ----
    Values are stored as text. When a variable would nest below a key that
    already holds a scalar in *store* (or in another variable), loading fails
    with :class:`PathError` and *store* is left untouched.

    Examples
    --------
    >>> store = ConfigStore({"db": {"host": "localhost"}})
    >>> load_env(store, "APP", environ={"APP_DB__PORT": "3306", "HOME": "/root"})
    >>> store.get_int("db.port"), store.get_string("db.host")
    (3306, 'localhost')
    >>> load_env(ConfigStore({"db": "sqlite"}), "APP", environ={"APP_DB__PORT": "1"})
    Traceback (most recent call last):
    ...
    lib_live_config.domain.errors.PathError: invalid path segment 'db' in key: db.port
    """

    payload = DefaultEnvLoader(environ=environ).load(prefix)
    with store.lock:
        _ensure_no_conflict(store, payload, ())
        store.merge(payload)
        store.touch()
    log_debug("layer_loaded", **make_event("env", None, {"keys": len(payload)}))


def load_mapping(store: ConfigStore, mapping: Mapping[str, Any] | None) -> None:
    """Merge an in-memory override *mapping* into *store*."""

    store.merge(mapping)
    log_debug("layer_loaded", **make_event("memory", None, {"keys": len(mapping or {})}))


def _ensure_no_conflict(store: ConfigStore, payload: Mapping[str, Any], segments: tuple[str, ...]) -> None:
    """Raise :class:`PathError` when *payload* nests below a scalar already held by *store*."""

    for key, value in payload.items():
        if not isinstance(value, Mapping):
            continue
        path = (*segments, key)
        try:
            existing = store.get_value(SEPARATOR.join(path))
        except ConfigKeyError:
            continue
        if not isinstance(existing, Mapping):
            raise PathError(_first_leaf_key(value, path), key)
        _ensure_no_conflict(store, value, path)


def _first_leaf_key(value: Mapping[str, Any], path: tuple[str, ...]) -> str:
    """Return the dotted key of the first leaf below *path* (used for error messages)."""

    current: Any = value
    segments = list(path)
    while isinstance(current, Mapping) and current:
        child_key = next(iter(current))
        segments.append(child_key)
        current = current[child_key]
    return SEPARATOR.join(segments)


__all__ = [
    "LayerLoadError",
    "decode_file",
    "default_env_prefix",
    "load_env",
    "load_file",
    "load_mapping",
    "loader_for",
]
