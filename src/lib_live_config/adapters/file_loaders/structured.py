"""Structured configuration file loaders.

Purpose
-------
Convert on-disk artifacts into Python mappings that the merge layer
understands. Adapters are small wrappers around ``json``/``tomllib``/
``yaml.safe_load`` so error handling and observability live in one place.

Contents
--------
* :class:`BaseFileLoader` – shared helpers for reading files and validating
  mapping outputs.
* :class:`JSONFileLoader` – loader for JSON documents.
* :class:`TOMLFileLoader` – loader for TOML documents.
* :class:`YAMLFileLoader` – loader for YAML documents (PyYAML).

System Role
-----------
Invoked by :func:`lib_live_config.core.load_file` and by the watcher's reload
cycle. I/O failures (:class:`NotFound`, :class:`UnreadableSource`) and decode
failures (:class:`InvalidFormat`) stay distinguishable so callers can react
differently to a missing file and a corrupt one.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping

try:  # Python >= 3.11
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for <3.11
    import tomli as tomllib  # type: ignore[no-redef]

import yaml

from ...domain.errors import InvalidFormat, NotFound, UnreadableSource
from ...observability import log_debug, log_error


class BaseFileLoader:
    """Common utilities shared by the structured file loaders."""

    format_name = "file"

    def _read(self, path: str) -> bytes:
        """Read *path* as bytes.

        Raises
        ------
        NotFound
            When the file does not exist.
        UnreadableSource
            When the file exists but cannot be read.

        Examples
        --------
        >>> from tempfile import NamedTemporaryFile
        >>> tmp = NamedTemporaryFile(delete=False)
        >>> _ = tmp.write(b'{"key": "value"}')
        >>> tmp.close()
        >>> BaseFileLoader()._read(tmp.name)[:6]
        b'{"key"'
        >>> Path(tmp.name).unlink()
        """

        file_path = Path(path)
        try:
            payload = file_path.read_bytes()
        except FileNotFoundError as exc:
            raise NotFound(f"Configuration file not found: {path}") from exc
        except OSError as exc:
            log_error("config_file_unreadable", layer="file", path=path, error=str(exc))
            raise UnreadableSource(f"Cannot read configuration file {path}: {exc}") from exc
        log_debug("config_file_read", layer="file", path=path, size=len(payload))
        return payload

    def _ensure_mapping(self, data: object, *, path: str) -> Mapping[str, object]:
        """Ensure *data* is a mapping, otherwise raise ``InvalidFormat``.

        Examples
        --------
        >>> BaseFileLoader()._ensure_mapping({"key": 1}, path="demo")
        {'key': 1}
        >>> BaseFileLoader()._ensure_mapping([1, 2], path="demo")
        Traceback (most recent call last):
        ...
        lib_live_config.domain.errors.InvalidFormat: File demo did not produce a mapping
        """

        if not isinstance(data, Mapping):
            log_error("config_file_invalid", layer="file", path=path, format=self.format_name, error="not a mapping")
            raise InvalidFormat(f"File {path} did not produce a mapping")
        return data

    def _invalid(self, path: str, exc: Exception) -> InvalidFormat:
        """Log a decode failure and build the matching ``InvalidFormat``."""

        log_error("config_file_invalid", layer="file", path=path, format=self.format_name, error=str(exc))
        return InvalidFormat(f"Invalid {self.format_name.upper()} in {path}: {exc}")


class JSONFileLoader(BaseFileLoader):
    """Load JSON documents."""

    format_name = "json"

    def load(self, path: str) -> Mapping[str, object]:
        """Return mapping extracted from the JSON file at *path*.

        Examples
        --------
        >>> from tempfile import NamedTemporaryFile
        >>> tmp = NamedTemporaryFile('w', delete=False, encoding='utf-8')
        >>> _ = tmp.write('{"enabled": true}')
        >>> tmp.close()
        >>> JSONFileLoader().load(tmp.name)["enabled"]
        True
        >>> Path(tmp.name).unlink()
        """

        raw = self._read(path)
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise self._invalid(path, exc) from exc
        result = self._ensure_mapping(data, path=path)
        log_debug("config_file_loaded", layer="file", path=path, format="json")
        return result


class TOMLFileLoader(BaseFileLoader):
    """Load TOML documents using the standard library parser."""

    format_name = "toml"

    def load(self, path: str) -> Mapping[str, object]:
        """Return mapping extracted from the TOML file at *path*.

        Examples
        --------
        >>> from tempfile import NamedTemporaryFile
        >>> tmp = NamedTemporaryFile('w', delete=False, encoding='utf-8')
        >>> _ = tmp.write('key = "value"')
        >>> tmp.close()
        >>> TOMLFileLoader().load(tmp.name)["key"]
        'value'
        >>> Path(tmp.name).unlink()
        """

        raw = self._read(path)
        try:
            data = tomllib.loads(raw.decode("utf-8"))
        except (tomllib.TOMLDecodeError, UnicodeDecodeError) as exc:
            raise self._invalid(path, exc) from exc
        result = self._ensure_mapping(data, path=path)
        log_debug("config_file_loaded", layer="file", path=path, format="toml")
        return result


class YAMLFileLoader(BaseFileLoader):
    """Load YAML documents with ``yaml.safe_load``; an empty document is an empty mapping."""

    format_name = "yaml"

    def load(self, path: str) -> Mapping[str, object]:
        """Return mapping extracted from the YAML file at *path*.

        Examples
        --------
        >>> from tempfile import NamedTemporaryFile
        >>> tmp = NamedTemporaryFile('w', delete=False, encoding='utf-8', suffix='.yaml')
        >>> _ = tmp.write('db:\\n  port: 5432\\n')
        >>> tmp.close()
        >>> YAMLFileLoader().load(tmp.name)["db"]["port"]
        5432
        >>> Path(tmp.name).unlink()
        """

        raw = self._read(path)
        try:
            data = yaml.safe_load(raw)
        except yaml.YAMLError as exc:
            raise self._invalid(path, exc) from exc
        if data is None:
            data = {}
        result = self._ensure_mapping(data, path=path)
        log_debug("config_file_loaded", layer="file", path=path, format="yaml")
        return result
