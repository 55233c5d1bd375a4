"""Filesystem watch adapter backed by ``watchdog``.

Purpose
-------
Implement :class:`lib_live_config.application.ports.WatchService` with a
``watchdog`` observer so the watcher receives push notifications instead of
relying on polling alone.

Contents
--------
* :class:`WatchdogWatchService` – schedules directories and forwards events.
* :class:`_ForwardingHandler` – maps ``watchdog`` events onto
  :class:`WatchEvent` kinds.

System Role
-----------
Created by :class:`lib_live_config.watcher.ConfigWatcher` when no other watch
service is injected. Directories that cannot be scheduled are reported to the
sink as errors; the watcher logs them and falls back to polling for the
affected files.
"""

from __future__ import annotations

import os
import threading
from typing import Iterable

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from ...application.ports import WatchEvent, WatchSink
from ...observability import log_debug


class _ForwardingHandler(FileSystemEventHandler):
    """Translate ``watchdog`` events into :class:`WatchEvent` objects for *sink*."""

    def __init__(self, sink: WatchSink) -> None:
        super().__init__()
        self._sink = sink

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        if event.event_type == EVENT_TYPE_MODIFIED:
            self._sink(WatchEvent(os.fsdecode(event.src_path), "write"))
        elif event.event_type == EVENT_TYPE_CREATED:
            self._sink(WatchEvent(os.fsdecode(event.src_path), "create"))
        elif event.event_type == EVENT_TYPE_MOVED:
            # atomic saves write a temp file and rename it over the target
            self._sink(WatchEvent(os.fsdecode(event.dest_path), "create"))
        else:
            self._sink(WatchEvent(os.fsdecode(event.src_path), "other"))


class WatchdogWatchService:
    """Watch directories (non-recursively) with a ``watchdog`` observer.

    Examples
    --------
    >>> from tempfile import TemporaryDirectory
    >>> tmp = TemporaryDirectory()
    >>> received = []
    >>> service = WatchdogWatchService()
    >>> service.subscribe([tmp.name], received.append)
    >>> service.close()
    >>> tmp.cleanup()
    """

    def __init__(self, *, join_timeout: float = 2.0) -> None:
        self._observer: Observer | None = None
        self._join_timeout = join_timeout
        self._lock = threading.Lock()

    def subscribe(self, directories: Iterable[str], sink: WatchSink) -> None:
        """Schedule every distinct directory in *directories* and start observing."""

        with self._lock:
            if self._observer is not None:
                raise RuntimeError("WatchdogWatchService is already subscribed")
            observer = Observer()
            handler = _ForwardingHandler(sink)
            # emitters open their directory when scheduled on a running observer
            observer.start()
            self._observer = observer
            scheduled: list[str] = []
            for directory in dict.fromkeys(directories):
                try:
                    observer.schedule(handler, directory, recursive=False)
                except OSError as exc:
                    sink(exc)
                    continue
                scheduled.append(directory)
        log_debug("watch_subscribed", layer="watch", path=None, directories=scheduled)

    def close(self) -> None:
        """Stop the observer thread and wait briefly for it to exit."""

        with self._lock:
            observer, self._observer = self._observer, None
        if observer is None:
            return
        observer.stop()
        observer.join(self._join_timeout)
        log_debug("watch_closed", layer="watch", path=None)
