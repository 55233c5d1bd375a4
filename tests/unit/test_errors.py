from __future__ import annotations

import pytest

from lib_live_config.domain.errors import (
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


def test_error_hierarchy() -> None:
    for error_type in (ConfigKeyError, PathError, ConfigTypeError, MultiError, InvalidFormat, NotFound, UnreadableSource, WatcherStateError):
        assert issubclass(error_type, ConfigError)
    assert issubclass(ConfigKeyError, KeyError)
    assert issubclass(ConfigTypeError, TypeError)


def test_key_error_message_and_field() -> None:
    err = ConfigKeyError("db.host")
    assert err.key == "db.host"
    assert str(err) == "missing required key: db.host"


def test_path_error_names_the_segment() -> None:
    err = PathError("a.b", "a")
    assert (err.key, err.segment) == ("a.b", "a")
    assert str(err) == "invalid path segment 'a' in key: a.b"


def test_type_error_fields() -> None:
    err = ConfigTypeError("port", "int", "list")
    assert (err.key, err.expected, err.actual) == ("port", "int", "list")
    assert str(err) == "invalid type for key 'port': expected int, got list"


def test_multi_error_lists_members_in_order() -> None:
    err = MultiError([ValueError("error 1"), ValueError("error 2")])
    assert str(err) == "multiple errors: [error 1, error 2]"
    assert len(err) == 2
    assert [str(member) for member in err.errors] == ["error 1", "error 2"]


def test_errors_are_catchable_by_builtin_category() -> None:
    with pytest.raises(KeyError):
        raise ConfigKeyError("missing")
    with pytest.raises(TypeError):
        raise ConfigTypeError("k", "bool", "str")
