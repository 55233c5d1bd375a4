"""Live reload of file-backed configuration.

Purpose
-------
Keep a :class:`ConfigStore` in sync with the files it was loaded from. Push
notifications from a :class:`WatchService` and a periodic modification-time
poll both feed one reload path; reload callbacks run after every applied
reload.

Contents
--------
* :class:`WatcherState` – lifecycle states (``IDLE → RUNNING → STOPPED``).
* :class:`ConfigWatcher` – the event loop, the reload cycle, and callbacks.

System Role
-----------
The only component that writes to a store after start-up. It owns the
invalidation duty for an attached :class:`CachedConfig`, since the cache does
not observe the store by itself.

Concurrency
-----------
The loop is single-threaded per watcher and consumes one queue carrying
watch events, watch errors, and the stop sentinel; a timeout on that queue
drives the poll tick. The stop signal is honoured between iterations, never
in the middle of a reload. Callbacks run synchronously on the loop thread.
"""

from __future__ import annotations

import enum
import os
import queue
import threading
import time
from pathlib import Path
from typing import Any, Callable, Mapping

from .application.cache import CachedConfig
from .application.merge import merge_into
from .application.ports import WatchEvent, WatchService
from .application.store import ConfigStore
from .adapters.watch.observer import WatchdogWatchService
from .core import decode_file
from .domain.errors import ConfigError, WatcherStateError
from .observability import log_debug, log_error, log_info, log_warning, trace_scope

ReloadCallback = Callable[[ConfigStore], Any]

_STOP = object()
_RELOAD_KINDS = frozenset({"write", "create"})


class WatcherState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


def normalize_path(path: str | Path) -> str:
    """Return the absolute, symlink-resolved form of *path* used for event matching."""

    return os.path.realpath(os.path.abspath(os.fspath(path)))


class ConfigWatcher:
    """Reload *config* from *files* whenever they change.

    Why
    ----
    Long-running services should pick up configuration edits without a
    restart, and must never observe a half-applied reload.

    What
    ----
    A relevant push event (write/create on a watched file) is debounced for
    *debounce* seconds so bursts coalesce into one reload. Every *interval*
    seconds each file's modification time is compared with
    ``config.last_modified`` as a fallback. A reload decodes all files into a
    fresh mapping (later files win); if any file fails, nothing is applied and
    no callback fires.

    Parameters
    ----------
    config:
        The live store updated by reloads.
    interval:
        Poll period in seconds.
    files:
        Watched files, lowest precedence first.
    debounce:
        Coalescing window for push events, in seconds.
    watch_service:
        Notification backend; defaults to :class:`WatchdogWatchService`.
    cache:
        Optional cache invalidated after each applied reload.
    decoder:
        Function decoding one file into a mapping; defaults to
        :func:`lib_live_config.core.decode_file`.

    Examples
    --------
    >>> watcher = ConfigWatcher(ConfigStore(), 60.0, "settings.json")
    >>> watcher.state
    <WatcherState.IDLE: 'idle'>
    >>> watcher.stop()
    >>> watcher.state
    <WatcherState.STOPPED: 'stopped'>
    """

    def __init__(
        self,
        config: ConfigStore,
        interval: float,
        *files: str | Path,
        debounce: float = 0.05,
        watch_service: WatchService | None = None,
        cache: CachedConfig | None = None,
        decoder: Callable[[str], Mapping[str, Any]] = decode_file,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        if debounce < 0:
            raise ValueError("debounce must not be negative")
        self._config = config
        self._interval = interval
        self._debounce = debounce
        self._files = [normalize_path(path) for path in files]
        self._watch_service = watch_service
        self._cache = cache
        self._decoder = decoder
        self._callbacks: list[ReloadCallback] = []
        self._queue: queue.Queue[object] = queue.Queue()
        self._stop_event = threading.Event()
        self._state = WatcherState.IDLE
        self._state_lock = threading.Lock()

    @property
    def config(self) -> ConfigStore:
        return self._config

    @property
    def files(self) -> tuple[str, ...]:
        return tuple(self._files)

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def state(self) -> WatcherState:
        return self._state

    def on_reload(self, callback: ReloadCallback) -> ReloadCallback:
        """Register *callback*; callbacks run in registration order.

        Returns *callback* so the method doubles as a decorator.
        """

        self._callbacks.append(callback)
        return callback

    def start(self) -> None:
        """Run the event loop on the calling thread until :meth:`stop` is called.

        Raises
        ------
        WatcherStateError
            When the watcher is not idle (already started or stopped).
        """

        self._begin()
        self._serve()

    def start_in_background(self) -> threading.Thread:
        """Subscribe, then run the event loop on a daemon thread and return it."""

        self._begin()
        thread = threading.Thread(target=self._serve, name="lib-live-config-watcher", daemon=True)
        thread.start()
        return thread

    def stop(self) -> None:
        """Signal the loop to exit; safe to call more than once.

        A watcher stopped before it started moves straight to ``STOPPED``.
        """

        with self._state_lock:
            if self._state is WatcherState.STOPPED:
                return
            self._stop_event.set()
            if self._state is WatcherState.IDLE:
                self._state = WatcherState.STOPPED
                return
        self._queue.put(_STOP)

    def reload(self) -> bool:
        """Rebuild the configuration from every watched file.

        Returns
        -------
        bool
            ``True`` when the reload was applied, ``False`` when it was
            abandoned because a file failed to load.

        Side Effects
        ------------
        On success merges the new mapping into the store, stamps
        ``last_modified``, invalidates the attached cache, and runs callbacks.
        Runs inside a fresh trace scope so all events of the cycle correlate.
        """

        with trace_scope():
            log_debug("reload_started", layer="watch", path=None, files=len(self._files))
            fresh: dict[str, Any] = {}
            failures: list[ConfigError] = []
            for path in self._files:
                try:
                    merge_into(fresh, self._decoder(path))
                except ConfigError as exc:
                    log_error("reload_source_failed", layer="watch", path=path, error=str(exc))
                    failures.append(exc)
            if failures:
                log_warning("reload_abandoned", layer="watch", path=None, failures=len(failures))
                return False

            with self._config.lock:
                self._config.merge(fresh)
                self._config.touch()
            if self._cache is not None:
                self._cache.invalidate_cache()
            log_info("reload_applied", layer="watch", path=None, keys=len(fresh))
            self._notify()
        return True

    def _begin(self) -> None:
        with self._state_lock:
            if self._state is not WatcherState.IDLE:
                raise WatcherStateError(f"Cannot start a watcher in state {self._state.value}")
            self._state = WatcherState.RUNNING
        if self._watch_service is None:
            self._watch_service = WatchdogWatchService()
        try:
            self._watch_service.subscribe(self._directories(), self._queue.put)
        except (OSError, RuntimeError) as exc:
            log_error("watch_error", layer="watch", path=None, error=str(exc))
        log_info("watcher_started", layer="watch", path=None, files=list(self._files), interval=self._interval)

    def _serve(self) -> None:
        try:
            self._loop()
        finally:
            if self._watch_service is not None:
                self._watch_service.close()
            with self._state_lock:
                self._state = WatcherState.STOPPED
            log_info("watcher_stopped", layer="watch", path=None)

    def _loop(self) -> None:
        next_tick = time.monotonic() + self._interval
        while not self._stop_event.is_set():
            try:
                item = self._queue.get(timeout=max(0.0, next_tick - time.monotonic()))
            except queue.Empty:
                next_tick = time.monotonic() + self._interval
                self._poll()
                continue
            if item is _STOP:
                return
            if isinstance(item, BaseException):
                log_error("watch_error", layer="watch", path=None, error=str(item))
                continue
            if isinstance(item, WatchEvent) and self._is_relevant(item):
                if not self._settle():
                    return
                self.reload()

    def _settle(self) -> bool:
        """Drain the queue for the debounce window; ``False`` when stop arrived meanwhile."""

        deadline = time.monotonic() + self._debounce
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return True
            try:
                item = self._queue.get(timeout=remaining)
            except queue.Empty:
                return True
            if item is _STOP:
                return False
            if isinstance(item, BaseException):
                log_error("watch_error", layer="watch", path=None, error=str(item))

    def _poll(self) -> None:
        last = self._config.last_modified
        for path in self._files:
            try:
                modified = os.stat(path).st_mtime
            except OSError:
                continue
            if last is None or modified > last:
                log_debug("watch_poll_changed", layer="watch", path=path)
                self.reload()
                return

    def _is_relevant(self, event: WatchEvent) -> bool:
        return event.kind in _RELOAD_KINDS and normalize_path(event.path) in self._files

    def _directories(self) -> list[str]:
        return list(dict.fromkeys(os.path.dirname(path) for path in self._files))

    def _notify(self) -> None:
        for callback in list(self._callbacks):
            try:
                callback(self._config)
            except Exception as exc:  # noqa: BLE001 - a faulty callback must not stop the watcher
                log_error("reload_callback_failed", layer="watch", path=None, error=str(exc), exc_info=True)
