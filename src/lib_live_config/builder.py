"""Fluent composition of several configuration sources.

Purpose
-------
Accumulate files, environment variables, in-memory mappings, and existing
stores into one :class:`ConfigStore`, collecting failures instead of stopping
at the first one.

Contents
--------
* :class:`BuildResult` – the store plus every recorded error.
* :class:`ConfigBuilder` – the fluent accumulator.
* :func:`read_config` – one-call helper (files → environment → overrides).

System Role
-----------
This is where precedence is defined: every source added later overrides all
earlier sources at the same key, while nested mappings merge.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable

from .application.store import ConfigStore
from .core import load_env, load_file, load_mapping
from .domain.errors import ConfigError, MultiError
from .observability import log_debug, log_info


@dataclass(frozen=True)
class BuildResult:
    """Outcome of :meth:`ConfigBuilder.result`.

    Attributes
    ----------
    config:
        The accumulated store (partially populated when errors occurred).
    errors:
        Every recorded error in call order.
    """

    config: ConfigStore
    errors: tuple[ConfigError, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return not self.errors

    def unwrap(self) -> ConfigStore:
        """Return the store, or raise :class:`MultiError` with every recorded error."""

        if self.errors:
            raise MultiError(self.errors)
        return self.config


class ConfigBuilder:
    """Accumulate configuration sources in precedence order.

    Why
    ----
    Applications usually combine a base file, an environment-specific file,
    and environment variables. Reporting every broken source at once beats
    fixing them one restart at a time.

    What
    ----
    Each ``with_*`` call applies its source immediately to an internal store
    and returns the builder. A failing source is recorded and skipped; later
    calls still run. :meth:`build` returns the store or raises
    :class:`MultiError`.

    Examples
    --------
    >>> builder = ConfigBuilder().with_mapping({"db": {"host": "localhost", "port": 5432}})
    >>> cfg = builder.with_env("APP", environ={"APP_DB__HOST": "env-host"}).build()
    >>> cfg.get_string("db.host"), cfg.get_int("db.port")
    ('env-host', 5432)
    >>> ConfigBuilder().build().as_dict()
    {}
    """

    def __init__(self) -> None:
        self._config = ConfigStore()
        self._errors: list[ConfigError] = []

    @property
    def errors(self) -> tuple[ConfigError, ...]:
        """Errors recorded so far, in call order."""

        return tuple(self._errors)

    def with_file(self, path: str | Path) -> ConfigBuilder:
        """Add a structured file (JSON, TOML, or YAML by suffix)."""

        try:
            load_file(self._config, path)
        except ConfigError as exc:
            self._record("file", str(path), exc)
        return self

    def with_json(self, path: str | Path) -> ConfigBuilder:
        """Add a JSON file; alias of :meth:`with_file`."""

        return self.with_file(path)

    def with_files(self, paths: Iterable[str | Path]) -> ConfigBuilder:
        """Add several files in order."""

        for path in paths:
            self.with_file(path)
        return self

    def with_env(self, prefix: str, *, environ: Mapping[str, str] | None = None) -> ConfigBuilder:
        """Add environment variables starting with *prefix*."""

        try:
            load_env(self._config, prefix, environ=environ)
        except ConfigError as exc:
            self._record("env", None, exc)
        return self

    def with_mapping(self, mapping: Mapping[str, Any]) -> ConfigBuilder:
        """Add an in-memory override mapping."""

        load_mapping(self._config, mapping)
        return self

    def with_config(self, config: ConfigStore) -> ConfigBuilder:
        """Merge an existing store."""

        self._config.merge(config)
        return self

    def result(self) -> BuildResult:
        """Return the accumulated store together with the recorded errors."""

        return BuildResult(self._config, tuple(self._errors))

    def build(self) -> ConfigStore:
        """Return the accumulated store or raise :class:`MultiError`."""

        result = self.result()
        if result.ok:
            log_info("config_built", layer="final", path=None, keys=len(result.config))
        return result.unwrap()

    def _record(self, layer: str, path: str | None, exc: ConfigError) -> None:
        log_debug("builder_source_failed", layer=layer, path=path, error=str(exc))
        self._errors.append(exc)


def read_config(
    *files: str | Path,
    env_prefix: str | None = None,
    environ: Mapping[str, str] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> ConfigStore:
    """Build a store from *files*, then the environment, then *overrides*.

    Raises
    ------
    MultiError
        When any source failed.

    Examples
    --------
    >>> cfg = read_config(env_prefix="DEMO", environ={"DEMO_FEATURE__ENABLED": "yes"}, overrides={"feature": {"level": 2}})
    >>> cfg.get_bool("feature.enabled"), cfg.get_int("feature.level")
    (True, 2)
    """

    builder = ConfigBuilder().with_files(files)
    if env_prefix is not None:
        builder.with_env(env_prefix, environ=environ)
    if overrides:
        builder.with_mapping(overrides)
    return builder.build()
