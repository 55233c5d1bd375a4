"""Environment variable adapter.

Purpose
-------
Translate process environment variables into a nested configuration mapping
so they can join the merge pipeline like any other source.

Key behaviours
--------------
* Enforces a prefix (``default_env_prefix``) so only relevant keys are
  captured; the prefix is normalised to end in ``_``.
* Supports ``__`` as a nesting delimiter (``APP_DB__HOST`` → ``{"db":
  {"host": ...}}``); empty segments are ignored and segments are lower-cased.
* Stores values verbatim as text. Typed getters coerce them lazily.
* Rejects a scalar and a nested value for the same key, whatever the
  order or letter case of the variable names.
* Reads from an injected ``environ`` mapping so tests never touch
  :data:`os.environ`.
"""

from __future__ import annotations

import os
from typing import Mapping

from ...domain.errors import PathError
from ...domain.paths import SEPARATOR
from ...observability import log_debug

NESTING_DELIMITER = "__"


def default_env_prefix(slug: str) -> str:
    """Return the canonical environment prefix for *slug*.

    Examples
    --------
    >>> default_env_prefix('lib-live-config')
    'LIB_LIVE_CONFIG'
    """

    return slug.replace("-", "_").upper()


def normalize_prefix(prefix: str) -> str:
    """Return *prefix* with a trailing ``_`` (empty stays empty).

    Examples
    --------
    >>> normalize_prefix("APP"), normalize_prefix("APP_"), normalize_prefix("")
    ('APP_', 'APP_', '')
    """

    return f"{prefix}_" if prefix and not prefix.endswith("_") else prefix


def env_key_segments(name: str) -> list[str]:
    """Split an unprefixed variable *name* into lower-cased path segments.

    Examples
    --------
    >>> env_key_segments("DB__PRIMARY__HOST")
    ['db', 'primary', 'host']
    >>> env_key_segments("__LOG____LEVEL__")
    ['log', 'level']
    """

    return [part.lower() for part in name.split(NESTING_DELIMITER) if part]


class DefaultEnvLoader:
    """Load environment variables that belong to the configuration namespace."""

    def __init__(self, *, environ: Mapping[str, str] | None = None) -> None:
        """Initialise the loader with a specific ``environ`` mapping for testability.

        Parameters
        ----------
        environ:
            Mapping to read from. Defaults to :data:`os.environ`.
        """

        self._environ = os.environ if environ is None else environ

    def load(self, prefix: str) -> dict[str, object]:
        """Return a nested mapping containing variables with the supplied *prefix*.

        Raises
        ------
        PathError
            When two variables disagree about the shape of the tree, e.g.
            ``APP_DB=x`` next to ``APP_DB__HOST=y``.

        Examples
        --------
        >>> env = {
        ...     'DEMO_SERVICE__ENABLED': 'true',
        ...     'DEMO_SERVICE__RETRIES': '3',
        ...     'OTHER': 'ignored',
        ... }
        >>> DefaultEnvLoader(environ=env).load('DEMO')
        {'service': {'enabled': 'true', 'retries': '3'}}
        """

        prefix = normalize_prefix(prefix)
        collected: dict[str, object] = {}
        for name in sorted(self._environ):
            if prefix and not name.startswith(prefix):
                continue
            segments = env_key_segments(name[len(prefix) :])
            if not segments:
                continue
            assign_nested(collected, segments, self._environ[name])
        log_debug("env_variables_loaded", layer="env", path=None, prefix=prefix, keys=sorted(collected.keys()))
        return collected


def assign_nested(target: dict[str, object], segments: list[str], value: object) -> None:
    """Assign ``value`` inside ``target`` following *segments*.

    Examples
    --------
    >>> data: dict[str, object] = {}
    >>> assign_nested(data, ['service', 'timeout'], '5')
    >>> data
    {'service': {'timeout': '5'}}
    >>> assign_nested(data, ['service', 'timeout', 'unit'], 's')
    Traceback (most recent call last):
    ...
    lib_live_config.domain.errors.PathError: invalid path segment 'timeout' in key: service.timeout.unit
    >>> assign_nested(data, ['service'], 'flat')
    Traceback (most recent call last):
    ...
    lib_live_config.domain.errors.PathError: invalid path segment 'service' in key: service
    """

    cursor = target
    for part in segments[:-1]:
        child = cursor.setdefault(part, {})
        if not isinstance(child, dict):
            raise PathError(SEPARATOR.join(segments), part)
        cursor = child
    leaf = segments[-1]
    if isinstance(cursor.get(leaf), dict):
        # an earlier variable already nests below this key
        raise PathError(SEPARATOR.join(segments), leaf)
    cursor[leaf] = value
