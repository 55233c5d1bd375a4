"""Structured logging helpers shared by every layer.

Purpose
    Keep every emission of logging data predictable and contextual without
    forcing applications to adopt a specific logging backend.

Contents
    - ``TRACE_ID``: context variable storing the active trace identifier.
    - ``get_logger``: returns the shared package logger (quiet by default).
    - ``bind_trace_id``: binds or clears the active trace identifier.
    - ``trace_scope``: binds an identifier for one block, then restores the
      previous one.
    - ``log_debug`` / ``log_info`` / ``log_warning`` / ``log_error``: emit
      structured entries via a single private emitter.
    - ``make_event``: convenience builder for structured event payloads.

System Integration
    Loaders, the builder, and the watcher all log through this module. The
    watcher binds a fresh trace identifier per reload cycle so every event of
    one reload can be correlated.
"""

from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Final, Iterator, Mapping

TRACE_ID: ContextVar[str | None] = ContextVar("lib_live_config_trace_id", default=None)
"""Current trace identifier propagated through logging helpers."""

_LOGGER: Final[logging.Logger] = logging.getLogger("lib_live_config")
_LOGGER.addHandler(logging.NullHandler())


def get_logger() -> logging.Logger:
    """Expose the package logger so applications may attach handlers.

    Why
        Leaves the library silent by default while giving host applications full
        control over handler and formatter configuration.
    """

    return _LOGGER


def bind_trace_id(trace_id: str | None) -> None:
    """Bind or clear the active trace identifier.

    Examples
    --------
    >>> bind_trace_id('abc123')
    >>> TRACE_ID.get()
    'abc123'
    >>> bind_trace_id(None)
    >>> TRACE_ID.get() is None
    True
    """

    TRACE_ID.set(trace_id)


@contextmanager
def trace_scope(trace_id: str | None = None) -> Iterator[str]:
    """Bind *trace_id* (a fresh identifier by default) for the duration of the block.

    The previous binding is restored on exit, also when the block raises.

    Examples
    --------
    >>> with trace_scope("reload-1") as active:
    ...     print(active, TRACE_ID.get())
    reload-1 reload-1
    >>> TRACE_ID.get() is None
    True
    """

    token = TRACE_ID.set(trace_id or uuid.uuid4().hex)
    try:
        yield TRACE_ID.get()
    finally:
        TRACE_ID.reset(token)


def log_debug(message: str, **fields: Any) -> None:
    """Emit a structured debug log entry that includes the trace context."""

    _emit(logging.DEBUG, message, fields)


def log_info(message: str, **fields: Any) -> None:
    """Emit a structured info log entry that includes the trace context."""

    _emit(logging.INFO, message, fields)


def log_warning(message: str, **fields: Any) -> None:
    """Emit a structured warning log entry that includes the trace context."""

    _emit(logging.WARNING, message, fields)


def log_error(message: str, *, exc_info: bool = False, **fields: Any) -> None:
    """Emit a structured error log entry; ``exc_info=True`` attaches the active traceback."""

    _emit(logging.ERROR, message, fields, exc_info=exc_info)


def make_event(
    layer: str,
    path: str | None,
    payload: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Build a structured logging payload for configuration lifecycle events.

    Examples
    --------
    >>> make_event('env', None, {'keys': 3})
    {'layer': 'env', 'path': None, 'keys': 3}
    """

    event: dict[str, Any] = {"layer": layer, "path": path}
    if payload:
        event |= dict(payload)
    return event


def _emit(level: int, message: str, fields: Mapping[str, Any], *, exc_info: bool = False) -> None:
    """Send a log entry through the shared logger with contextual metadata."""

    _LOGGER.log(level, message, extra={"context": _with_trace(fields)}, exc_info=exc_info)


def _with_trace(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Attach the current trace identifier to the provided structured fields."""

    context = {"trace_id": TRACE_ID.get()}
    context.update(fields)
    return context
