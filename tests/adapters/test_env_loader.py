"""Environment loader adapter tests clarifying namespace handling.

The scenarios cover prefix naming, nested assignment, and randomised inputs to
prove the adapter continues to match the documented environment rules.
"""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from lib_live_config.adapters.env.default import (
    DefaultEnvLoader,
    assign_nested,
    default_env_prefix,
    env_key_segments,
    normalize_prefix,
)
from lib_live_config.domain.errors import PathError


def test_default_env_prefix() -> None:
    """Slug values should become upper snake-case prefixes."""

    assert default_env_prefix("lib-live-config") == "LIB_LIVE_CONFIG"


def test_normalize_prefix() -> None:
    assert normalize_prefix("APP") == "APP_"
    assert normalize_prefix("APP_") == "APP_"
    assert normalize_prefix("") == ""


def test_env_loader_nested() -> None:
    """Nest prefixed variables while ignoring out-of-scope keys; values stay text."""

    environ = {
        "APP_DB__HOST": "db.example.com",
        "APP_DB__PORT": "5432",
        "APP_FEATURE__ENABLED": "true",
        "APPLICATION_NAME": "ignored",
        "OTHER": "ignored",
    }
    data = DefaultEnvLoader(environ=environ).load("APP")
    assert data == {"db": {"host": "db.example.com", "port": "5432"}, "feature": {"enabled": "true"}}


def test_prefix_with_trailing_underscore_is_equivalent() -> None:
    environ = {"APP_NAME": "svc"}
    assert DefaultEnvLoader(environ=environ).load("APP_") == DefaultEnvLoader(environ=environ).load("APP") == {"name": "svc"}


def test_empty_segments_are_ignored() -> None:
    assert env_key_segments("__LOG____LEVEL__") == ["log", "level"]
    assert DefaultEnvLoader(environ={"APP_": "x", "APP___": "y"}).load("APP") == {}


def test_scalar_conflict_between_variables_raises() -> None:
    environ = {"APP_DB": "sqlite", "APP_DB__HOST": "localhost"}
    with pytest.raises(PathError) as excinfo:
        DefaultEnvLoader(environ=environ).load("APP")
    assert excinfo.value.segment == "db"


@pytest.mark.parametrize(
    "environ",
    [
        {"APP_db": "x", "APP_DB__HOST": "h"},
        {"APP_DB": "x", "APP_db__host": "h"},
        {"APP_Db": "x", "APP_DB__HOST": "h"},
    ],
)
def test_scalar_conflict_is_caught_whatever_the_letter_case(environ: dict[str, str]) -> None:
    """A scalar and a nested variable for the same key must fail in either sort order."""

    with pytest.raises(PathError) as excinfo:
        DefaultEnvLoader(environ=environ).load("APP")
    assert excinfo.value.segment == "db"


def test_assign_nested_rejects_scalar_over_mapping() -> None:
    container: dict[str, object] = {"db": {"host": "h"}}
    with pytest.raises(PathError):
        assign_nested(container, ["db"], "x")
    assert container == {"db": {"host": "h"}}


def test_assign_nested_overwrites_scalar_raises() -> None:
    """Protect existing scalar values from being replaced by nested assignments."""

    container: dict[str, object] = {"a": "value"}
    with pytest.raises(PathError):
        assign_nested(container, ["a", "b"], "1")


SCALAR_VALUES = st.sampled_from(["0", "1", "true", "false", "3.5", "none", "debug"])
NAMESPACE_KEYS = st.sampled_from(["SERVICE__TIMEOUT", "SERVICE__ENDPOINT", "LOGGING__LEVEL"])


@given(st.dictionaries(NAMESPACE_KEYS, SCALAR_VALUES, max_size=3))
def test_env_loader_handles_random_namespace(entries) -> None:
    """Randomised namespace inputs should map to consistent nested payloads."""

    prefix = "DEMO"
    environ = {f"{prefix}_" + key: value for key, value in entries.items()}
    environ["IGNORED"] = "1"
    payload = DefaultEnvLoader(environ=environ).load(prefix)

    for key, original in entries.items():
        parts = key.lower().split("__")
        node = payload
        for part in parts[:-1]:
            assert part in node
            node = node[part]
        assert node[parts[-1]] == original
    assert "ignored" not in payload
