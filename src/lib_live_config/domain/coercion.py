"""Value coercion rules behind the typed getters.

Purpose
-------
Convert an arbitrary stored configuration value into ``str``, ``int``,
``float``, or ``bool``. Values arrive from JSON/TOML/YAML documents (native
numbers and booleans) and from environment variables (always text), so each
converter accepts both shapes and applies one documented rule set.

Contents
--------
* :func:`to_string` – never fails; canonical text for numbers and booleans.
* :func:`to_int` – integers directly, floats truncated toward zero, numeric
  strings parsed.
* :func:`to_float` – numbers directly, numeric strings parsed.
* :func:`to_bool` – booleans directly, numbers by truthiness, a fixed
  vocabulary of strings.
* :func:`type_name` – the type label carried by :class:`ConfigTypeError`.

System Role
-----------
Pure functions used by :class:`lib_live_config.application.store.ConfigStore`.
No I/O and no logging, so they are trivially safe to call from any thread.
"""

from __future__ import annotations

import math
import numbers
from decimal import Decimal
from typing import Any, Final

from .errors import ConfigTypeError

TRUE_WORDS: Final[frozenset[str]] = frozenset({"true", "t", "yes", "y", "on", "1"})
FALSE_WORDS: Final[frozenset[str]] = frozenset({"false", "f", "no", "n", "off", "0"})


def type_name(value: Any) -> str:
    """Return the short type label reported in :class:`ConfigTypeError`.

    Examples
    --------
    >>> type_name([1, 2]), type_name(None)
    ('list', 'NoneType')
    """

    return type(value).__name__


def to_string(value: Any) -> str:
    """Render *value* as text.

    Why
    ----
    String access must always succeed so diagnostics and templates can display
    any configured value.

    What
    ----
    Strings pass through; booleans become ``"true"``/``"false"``; integers use
    their decimal form; floats drop trailing zeros and never use exponent
    notation; anything else falls back to ``str()``.

    Examples
    --------
    >>> to_string("hello"), to_string(123), to_string(True)
    ('hello', '123', 'true')
    >>> to_string(99.0), to_string(1.5), to_string(1e-7)
    ('99', '1.5', '0.0000001')
    """

    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, numbers.Integral):
        return str(int(value))
    if isinstance(value, float):
        return _format_float(value)
    return str(value)


def to_int(value: Any, key: str) -> int:
    """Convert *value* stored under *key* into an ``int``.

    Examples
    --------
    >>> to_int(100, "k"), to_int(99.9, "k"), to_int(-2.5, "k")
    (100, 99, -2)
    >>> to_int(" 42 ", "k"), to_int("7.8", "k")
    (42, 7)
    >>> to_int("abc", "port")
    Traceback (most recent call last):
    ...
    lib_live_config.domain.errors.ConfigTypeError: invalid type for key 'port': expected int, got str
    """

    if isinstance(value, bool):
        raise ConfigTypeError(key, "int", type_name(value))
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, numbers.Real):
        if not math.isfinite(value):
            raise ConfigTypeError(key, "int", type_name(value))
        return int(value)
    if isinstance(value, str):
        clean = value.strip()
        try:
            return int(clean)
        except ValueError:
            pass
        try:
            parsed = float(clean)
        except ValueError:
            raise ConfigTypeError(key, "int", type_name(value)) from None
        if math.isfinite(parsed):
            return int(parsed)
    raise ConfigTypeError(key, "int", type_name(value))


def to_float(value: Any, key: str) -> float:
    """Convert *value* stored under *key* into a ``float``.

    Examples
    --------
    >>> to_float(3, "k"), to_float("2.5", "k")
    (3.0, 2.5)
    """

    if isinstance(value, bool):
        raise ConfigTypeError(key, "float", type_name(value))
    if isinstance(value, numbers.Real):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            raise ConfigTypeError(key, "float", type_name(value)) from None
    raise ConfigTypeError(key, "float", type_name(value))


def to_bool(value: Any, key: str) -> bool:
    """Convert *value* stored under *key* into a ``bool``.

    Why
    ----
    Feature flags arrive as JSON booleans, numbers, or environment strings such
    as ``"yes"``/``"off"``; all of them should answer the same question.

    Examples
    --------
    >>> to_bool(True, "k"), to_bool(0, "k"), to_bool(" YES ", "k"), to_bool("off", "k")
    (True, False, True, False)
    >>> to_bool("maybe", "flag")
    Traceback (most recent call last):
    ...
    lib_live_config.domain.errors.ConfigTypeError: invalid type for key 'flag': expected bool, got str
    """

    if isinstance(value, bool):
        return value
    if isinstance(value, numbers.Real):
        return value != 0
    if isinstance(value, str):
        word = value.strip().lower()
        if word in TRUE_WORDS:
            return True
        if word in FALSE_WORDS:
            return False
    raise ConfigTypeError(key, "bool", type_name(value))


def _format_float(value: float) -> str:
    """Return the shortest fixed-point text for *value*."""

    if not math.isfinite(value):
        return str(value)
    return format(Decimal(repr(value)).normalize(), "f")
