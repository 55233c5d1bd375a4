"""Application-layer merge policy.

Purpose
-------
Combine configuration payloads so that later sources override earlier ones
while nested mappings merge key by key. The module is free of I/O so every
source loader, the builder, and the watcher share one definition of
precedence.

Contents
    - ``merge_into``: in-place recursive merge of one mapping into another.
    - ``merge_layers``: fold an ordered sequence of payloads into a fresh dict.
    - ``clone_tree``: detach merged subtrees from their source.

System Role
-----------
Receives decoded payloads from :mod:`lib_live_config.core` and the watcher's
reload cycle, and mutates the mapping owned by
:class:`lib_live_config.application.store.ConfigStore`.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from typing import Any, Iterable


def merge_into(dest: MutableMapping[str, Any], src: Mapping[str, Any] | None) -> MutableMapping[str, Any]:
    """Merge *src* into *dest* node by node and return *dest*.

    Why
    ----
    Configuration layers rarely repeat whole sections; an override file that
    only sets ``db.host`` must keep ``db.port`` from the base file.

    What
    ----
    For each key in *src*: when both sides hold a mapping, recurse; otherwise
    replace the destination value (a scalar may replace a mapping and vice
    versa). ``None`` as *src* is a no-op. *src* is never modified and no
    subtree of it is shared with *dest* afterwards.

    Parameters
    ----------
    dest:
        Mapping updated in place.
    src:
        Higher-precedence payload.

    Returns
    -------
    MutableMapping[str, Any]
        *dest*, for chaining.

    Examples
    --------
    >>> base = {"db": {"host": "localhost", "port": 5432}}
    >>> merge_into(base, {"db": {"host": "192.168.1.100"}})
    {'db': {'host': '192.168.1.100', 'port': 5432}}
    >>> merge_into({"a": 1}, {"a": {"x": 10}})
    {'a': {'x': 10}}
    >>> merge_into({"a": 1}, None)
    {'a': 1}
    """

    if src is None:
        return dest
    for key, incoming in src.items():
        existing = dest.get(key)
        if isinstance(existing, MutableMapping) and isinstance(incoming, Mapping):
            merge_into(existing, incoming)
            continue
        dest[key] = clone_tree(incoming)
    return dest


def merge_layers(payloads: Iterable[Mapping[str, Any] | None]) -> dict[str, Any]:
    """Fold *payloads* (lowest precedence first) into a fresh dictionary.

    Examples
    --------
    >>> merge_layers([{"service": {"timeout": 5}}, {"service": {"timeout": 10, "retries": 2}}])
    {'service': {'timeout': 10, 'retries': 2}}
    """

    merged: dict[str, Any] = {}
    for payload in payloads:
        merge_into(merged, payload)
    return merged


def clone_tree(value: Any) -> Any:
    """Copy mapping and list containers so *dest* never aliases the source payload."""

    if isinstance(value, Mapping):
        return {key: clone_tree(item) for key, item in value.items()}
    if isinstance(value, list):
        return [clone_tree(item) for item in value]
    return value
