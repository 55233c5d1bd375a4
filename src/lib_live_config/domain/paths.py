"""Dot-path resolution over nested configuration mappings.

Purpose
-------
Walk a key such as ``"db.host"`` through a nested mapping and return the raw
value, or raise an error that pinpoints what went wrong.

Contents
--------
* :data:`SEPARATOR` – the path separator (``"."``).
* :func:`split_key` – split a dotted key into segments.
* :func:`resolve` – return the value at a dotted key.
* :func:`contains` – boolean form of :func:`resolve`.

System Role
-----------
Shared by :class:`lib_live_config.application.store.ConfigStore` for every typed
getter and for ``validate``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Final

from .errors import ConfigKeyError, PathError

SEPARATOR: Final[str] = "."


def split_key(key: str) -> list[str]:
    """Split *key* on :data:`SEPARATOR`.

    Examples
    --------
    >>> split_key("db.primary.host")
    ['db', 'primary', 'host']
    """

    return key.split(SEPARATOR)


def resolve(data: Mapping[str, Any], key: str) -> Any:
    """Return the raw value stored at dotted *key* inside *data*.

    Why
    ----
    Callers need to tell "absent" apart from "the tree has the wrong shape",
    so the two failure modes raise different errors.

    What
    ----
    Every non-final segment must resolve to a mapping, otherwise
    :class:`PathError` names the offending segment. A segment missing at any
    level raises :class:`ConfigKeyError`. An explicit ``None`` is a present
    value.

    Examples
    --------
    >>> resolve({"db": {"host": "localhost"}}, "db.host")
    'localhost'
    >>> resolve({"feature": None}, "feature") is None
    True
    >>> resolve({"a": "string"}, "a.b")
    Traceback (most recent call last):
    ...
    lib_live_config.domain.errors.PathError: invalid path segment 'a' in key: a.b
    >>> resolve({}, "db.host")
    Traceback (most recent call last):
    ...
    lib_live_config.domain.errors.ConfigKeyError: missing required key: db.host
    """

    parts = split_key(key)
    current: Mapping[str, Any] = data
    last = len(parts) - 1
    for index, part in enumerate(parts):
        if part not in current:
            raise ConfigKeyError(key)
        value = current[part]
        if index == last:
            return value
        if not isinstance(value, Mapping):
            raise PathError(key, part)
        current = value
    raise ConfigKeyError(key)  # pragma: no cover - split always yields a segment


def contains(data: Mapping[str, Any], key: str) -> bool:
    """Return ``True`` when *key* resolves inside *data*.

    Examples
    --------
    >>> contains({"a": {"b": 1}}, "a.b"), contains({"a": 1}, "a.b")
    (True, False)
    """

    try:
        resolve(data, key)
    except (ConfigKeyError, PathError):
        return False
    return True
