"""ConfigStore behaviour: typed getters, validation, merging, and serialisation."""

from __future__ import annotations

import json
import threading

import pytest

from lib_live_config import ConfigKeyError, ConfigStore, ConfigTypeError, MultiError, PathError


def _store() -> ConfigStore:
    return ConfigStore(
        {
            "db": {"host": "localhost", "port": 5432, "timeout": "2.5"},
            "feature": {"enabled": "yes", "ratio": 0.25},
            "name": "svc",
            "optional": None,
            "hosts": ["a", "b"],
        }
    )


def test_typed_getters() -> None:
    store = _store()
    assert store.get_string("db.host") == "localhost"
    assert store.get_string("db.port") == "5432"
    assert store.get_int("db.port") == 5432
    assert store.get_float("db.timeout") == 2.5
    assert store.get_bool("feature.enabled") is True
    assert store.get_float("feature.ratio") == 0.25


def test_missing_key_raises_key_error() -> None:
    with pytest.raises(ConfigKeyError) as excinfo:
        _store().get_int("db.password")
    assert str(excinfo.value) == "missing required key: db.password"


def test_type_error_names_key_and_types() -> None:
    with pytest.raises(ConfigTypeError) as excinfo:
        _store().get_int("hosts")
    assert (excinfo.value.key, excinfo.value.expected, excinfo.value.actual) == ("hosts", "int", "list")


def test_path_error_on_scalar_intermediate() -> None:
    with pytest.raises(PathError):
        _store().get_string("name.first")


def test_get_with_default() -> None:
    store = _store()
    assert store.get("db.port") == 5432
    assert store.get("db.password", default="secret") == "secret"
    assert store.get("name.first", default=1) == 1
    assert store.get("optional", default="fallback") is None


def test_has_and_contains() -> None:
    store = _store()
    assert store.has("optional")
    assert "db.host" in store
    assert "db.password" not in store
    assert 5 not in store


def test_validate_first_error_wins() -> None:
    store = _store()
    store.validate(["db.host", "db.port"])
    with pytest.raises(ConfigKeyError) as excinfo:
        store.validate(["db.host", "missing.one", "missing.two"])
    assert excinfo.value.key == "missing.one"


def test_validate_all_collects_every_failure() -> None:
    with pytest.raises(MultiError) as excinfo:
        _store().validate_all(["db.host", "missing", "name.first"])
    kinds = [type(error) for error in excinfo.value.errors]
    assert kinds == [ConfigKeyError, PathError]


def test_validate_empty_key_list_passes() -> None:
    ConfigStore().validate([])
    ConfigStore().validate_all([])


def test_merge_overrides_and_keeps_siblings() -> None:
    store = _store()
    store.merge({"db": {"host": "192.168.1.100"}})
    assert store.get_string("db.host") == "192.168.1.100"
    assert store.get_int("db.port") == 5432


def test_merge_accepts_store_and_none() -> None:
    store = ConfigStore({"a": 1})
    store.merge(ConfigStore({"b": {"c": 2}}))
    store.merge(None)
    assert store.as_dict() == {"a": 1, "b": {"c": 2}}


def test_merge_does_not_alias_the_source() -> None:
    source = {"db": {"hosts": ["a"]}}
    store = ConfigStore()
    store.merge(source)
    source["db"]["hosts"].append("b")
    assert store.get_value("db.hosts") == ["a"]


def test_merge_leaves_timestamp_alone_touch_sets_it() -> None:
    store = ConfigStore()
    assert store.last_modified is None
    store.merge({"a": 1})
    assert store.last_modified is None
    store.touch(123.0)
    assert store.last_modified == 123.0
    store.touch()
    assert store.last_modified > 123.0


def test_set_data_replaces_tree() -> None:
    store = _store()
    store.set_data({"only": True})
    assert store.keys() == ["only"]
    assert len(store) == 1
    assert list(store) == ["only"]


def test_to_json_round_trips_structure() -> None:
    store = _store()
    assert json.loads(store.to_json()) == store.as_dict()
    assert "\n" in store.to_json(indent=2)


def test_concurrent_reads_during_merges() -> None:
    store = ConfigStore({"counter": {"value": 0}})
    errors: list[BaseException] = []

    def writer() -> None:
        for index in range(200):
            store.merge({"counter": {"value": index}})

    def reader() -> None:
        try:
            for _ in range(200):
                assert isinstance(store.get_int("counter.value"), int)
        except BaseException as exc:  # pragma: no cover - surfaced via the assertion below
            errors.append(exc)

    threads = [threading.Thread(target=writer)] + [threading.Thread(target=reader) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert errors == []
    assert store.get_int("counter.value") == 199
