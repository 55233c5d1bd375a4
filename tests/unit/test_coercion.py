"""Coercion rules behind the typed getters.

Covers the documented conversions for file-native values (numbers, booleans)
and environment text, plus randomised inputs for the integer and boolean
paths.
"""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from lib_live_config.domain.coercion import FALSE_WORDS, TRUE_WORDS, to_bool, to_float, to_int, to_string
from lib_live_config.domain.errors import ConfigTypeError


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("hello", "hello"),
        (123, "123"),
        (True, "true"),
        (False, "false"),
        (99.0, "99"),
        (1.5, "1.5"),
        (None, "None"),
    ],
)
def test_to_string(value: object, expected: str) -> None:
    assert to_string(value) == expected


def test_to_string_never_uses_exponent_notation() -> None:
    assert to_string(1e-7) == "0.0000001"
    assert to_string(1e20) == "100000000000000000000"


def test_to_string_uses_shortest_decimal_for_whole_floats() -> None:
    assert to_string(1e23) == "100000000000000000000000"
    assert to_string(99.0) == "99"
    assert to_string(0.0) == "0"
    assert to_string(-250.0) == "-250"


@given(st.floats(allow_nan=False, allow_infinity=False))
def test_to_string_float_reparses_to_same_value(number: float) -> None:
    assert float(to_string(number)) == number


@pytest.mark.parametrize(
    ("value", "expected"),
    [(100, 100), (99.9, 99), (-2.5, -2), ("42", 42), (" 8080 ", 8080), ("7.8", 7)],
)
def test_to_int(value: object, expected: int) -> None:
    assert to_int(value, "k") == expected


@pytest.mark.parametrize("value", ["abc", [1, 2], {"a": 1}, None, True, float("inf"), "nan"])
def test_to_int_rejects(value: object) -> None:
    with pytest.raises(ConfigTypeError) as excinfo:
        to_int(value, "port")
    assert excinfo.value.key == "port"
    assert excinfo.value.expected == "int"


def test_to_float() -> None:
    assert to_float(3, "k") == 3.0
    assert to_float("2.5", "k") == 2.5
    with pytest.raises(ConfigTypeError):
        to_float("fast", "k")
    with pytest.raises(ConfigTypeError):
        to_float(False, "k")


@pytest.mark.parametrize(("value", "expected"), [(True, True), (False, False), (1, True), (0, False), (0.0, False), (2.5, True)])
def test_to_bool_native(value: object, expected: bool) -> None:
    assert to_bool(value, "flag") is expected


@pytest.mark.parametrize("value", ["maybe", "", [True], None])
def test_to_bool_rejects(value: object) -> None:
    with pytest.raises(ConfigTypeError) as excinfo:
        to_bool(value, "flag")
    assert excinfo.value.actual == type(value).__name__


@given(st.sampled_from(sorted(TRUE_WORDS | FALSE_WORDS)), st.sampled_from([str.lower, str.upper, str.title]), st.sampled_from(["", " ", "\t"]))
def test_to_bool_words_ignore_case_and_padding(word: str, case, padding: str) -> None:
    assert to_bool(f"{padding}{case(word)}{padding}", "flag") is (word in TRUE_WORDS)


@given(st.integers(min_value=-(10**12), max_value=10**12))
def test_to_int_accepts_decimal_text(number: int) -> None:
    assert to_int(str(number), "k") == number
    assert to_string(number) == str(number)


@given(st.floats(allow_nan=False, allow_infinity=False, min_value=-1e9, max_value=1e9))
def test_to_int_truncates_floats_toward_zero(number: float) -> None:
    assert to_int(number, "k") == int(number)
