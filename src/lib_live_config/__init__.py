"""Public package surface of ``lib_live_config``.

A hierarchical configuration store: merge JSON/TOML/YAML files, prefixed
environment variables, and in-memory overrides by precedence; read values by
dotted key with typed coercion; and keep the store live-updated from its
files. Everything importable from here is considered stable API.
"""

from __future__ import annotations

from .application.cache import CachedConfig
from .application.merge import merge_into, merge_layers
from .application.ports import WatchEvent, WatchService
from .application.store import ConfigStore
from .builder import BuildResult, ConfigBuilder, read_config
from .core import LayerLoadError, decode_file, default_env_prefix, load_env, load_file, load_mapping
from .domain.errors import (
    ConfigError,
    ConfigKeyError,
    ConfigTypeError,
    InvalidFormat,
    MultiError,
    NotFound,
    PathError,
    UnreadableSource,
    WatcherStateError,
)
from .observability import bind_trace_id, get_logger
from .watcher import ConfigWatcher, WatcherState

__all__ = [
    "BuildResult",
    "CachedConfig",
    "ConfigBuilder",
    "ConfigError",
    "ConfigKeyError",
    "ConfigStore",
    "ConfigTypeError",
    "ConfigWatcher",
    "InvalidFormat",
    "LayerLoadError",
    "MultiError",
    "NotFound",
    "PathError",
    "UnreadableSource",
    "WatchEvent",
    "WatchService",
    "WatcherState",
    "WatcherStateError",
    "bind_trace_id",
    "decode_file",
    "default_env_prefix",
    "get_logger",
    "load_env",
    "load_file",
    "load_mapping",
    "merge_into",
    "merge_layers",
    "read_config",
]
