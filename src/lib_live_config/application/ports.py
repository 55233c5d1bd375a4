"""Application-layer ports describing adapter responsibilities.

Purpose
-------
Define the structural contracts that adapters must satisfy so the composition
root and the watcher can orchestrate behaviour without depending on concrete
implementations.

Contents
--------
* :class:`FileLoader` – decodes a structured configuration file.
* :class:`EnvLoader` – materialises prefixed environment variables.
* :class:`WatchEvent` – one filesystem change notification.
* :class:`WatchService` – delivers change notifications for directories.

System Role
-----------
These protocols enforce Dependency Inversion. Tests substitute in-memory
fakes (for example a scripted :class:`WatchService`) to drive the watcher
deterministically.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Literal, Mapping, Protocol, Union, runtime_checkable

WatchEventKind = Literal["write", "create", "other"]


@runtime_checkable
class FileLoader(Protocol):
    """Parse a structured configuration file into a mapping.

    Why
    ----
    Segregate parsing concerns (JSON/TOML/YAML) from orchestration logic.
    """

    def load(self, path: str) -> Mapping[str, object]:
        """Read *path*; raise ``NotFound``/``UnreadableSource`` on I/O and ``InvalidFormat`` on decode failures."""


@runtime_checkable
class EnvLoader(Protocol):
    """Translate environment variables into a nested configuration mapping."""

    def load(self, prefix: str) -> dict[str, object]:
        """Return variables that match *prefix* (``__`` for nesting)."""


@dataclass(frozen=True, slots=True)
class WatchEvent:
    """A change observed on *path*.

    Attributes
    ----------
    path:
        Absolute path reported by the notification backend.
    kind:
        ``"write"`` and ``"create"`` can trigger reloads; ``"other"`` is
        ignored by the watcher.
    """

    path: str
    kind: WatchEventKind


WatchSink = Callable[[Union[WatchEvent, Exception]], None]
"""Callback receiving either an event or a backend error."""


@runtime_checkable
class WatchService(Protocol):
    """Deliver change notifications for a set of directories.

    Why
    ----
    The watcher only needs an event stream; keeping the notification backend
    behind this port lets tests inject scripted events and keeps the
    ``watchdog`` dependency inside one adapter.
    """

    def subscribe(self, directories: Iterable[str], sink: WatchSink) -> None:
        """Start delivering events (and errors) for *directories* to *sink*."""

    def close(self) -> None:
        """Stop delivering events and release backend resources."""
