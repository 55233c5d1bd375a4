"""Domain-level exception hierarchy.

Purpose
-------
Expose the stable error taxonomy shared by the store, the adapters, the
builder, and the watcher. The hierarchy lives in the domain layer so outer
layers may depend on it without the domain importing anything back.

Contents
--------
* :class:`ConfigError` – umbrella base class for all configuration issues.
* :class:`ConfigKeyError` – a key (or one of its path segments) is absent.
* :class:`PathError` – an intermediate segment resolves to a non-mapping.
* :class:`ConfigTypeError` – a value exists but cannot be coerced.
* :class:`MultiError` – aggregate of independent failures.
* :class:`InvalidFormat` / :class:`NotFound` / :class:`UnreadableSource` –
  loader failures (decode vs. I/O).
* :class:`WatcherStateError` – illegal watcher lifecycle transition.

System Role
-----------
Every error carries the fields needed to explain the failure without walking
the configuration tree again. Callers catch :class:`ConfigError` to handle all
library failures uniformly, or the builtin bases (``KeyError``,
``TypeError``) when they only care about the broad category.
"""

from __future__ import annotations

from typing import Iterable


class ConfigError(Exception):
    """Base type for all exceptions emitted by ``lib_live_config``.

    Why
    ----
    Provide a single catch-all type for consumers that do not need fine-grained
    handling.
    """


class ConfigKeyError(ConfigError, KeyError):
    """Raised when *key* (or any segment on its path) is missing.

    Examples
    --------
    >>> str(ConfigKeyError("db.host"))
    'missing required key: db.host'
    >>> isinstance(ConfigKeyError("x"), KeyError)
    True
    """

    def __init__(self, key: str) -> None:
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"missing required key: {self.key}"


class PathError(ConfigError):
    """Raised when *segment* of *key* holds a scalar where a mapping was required.

    Examples
    --------
    >>> err = PathError("a.b", "a")
    >>> (err.key, err.segment)
    ('a.b', 'a')
    >>> str(err)
    "invalid path segment 'a' in key: a.b"
    """

    def __init__(self, key: str, segment: str) -> None:
        super().__init__(key, segment)
        self.key = key
        self.segment = segment

    def __str__(self) -> str:
        return f"invalid path segment '{self.segment}' in key: {self.key}"


class ConfigTypeError(ConfigError, TypeError):
    """Raised when the value at *key* cannot be converted to *expected*.

    Examples
    --------
    >>> str(ConfigTypeError("port", "int", "list"))
    "invalid type for key 'port': expected int, got list"
    """

    def __init__(self, key: str, expected: str, actual: str) -> None:
        super().__init__(key, expected, actual)
        self.key = key
        self.expected = expected
        self.actual = actual

    def __str__(self) -> str:
        return f"invalid type for key '{self.key}': expected {self.expected}, got {self.actual}"


class MultiError(ConfigError):
    """Aggregate of independent failures, kept in the order they occurred.

    Why
    ----
    Multi-source operations (the builder, ``validate_all``) should report every
    problem at once instead of forcing users through a fix-one-rerun loop.

    Examples
    --------
    >>> str(MultiError([ValueError("error 1"), ValueError("error 2")]))
    'multiple errors: [error 1, error 2]'
    """

    def __init__(self, errors: Iterable[BaseException]) -> None:
        self.errors: tuple[BaseException, ...] = tuple(errors)
        super().__init__(*self.errors)

    def __str__(self) -> str:
        return "multiple errors: [" + ", ".join(str(error) for error in self.errors) + "]"

    def __len__(self) -> int:
        return len(self.errors)


class InvalidFormat(ConfigError):
    """Raised when an input artifact cannot be decoded into a mapping.

    Typical Sources
    ---------------
    Structured file loaders (:mod:`json`, :mod:`tomllib`, :mod:`yaml`).
    """


class NotFound(ConfigError):
    """Raised when a configuration source does not exist."""


class UnreadableSource(ConfigError):
    """Raised when a configuration source exists but cannot be read (permissions, I/O)."""


class WatcherStateError(ConfigError):
    """Raised on an illegal watcher lifecycle transition (e.g. a second ``start``)."""
