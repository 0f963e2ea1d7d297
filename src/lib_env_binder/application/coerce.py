"""Value coercer: convert raw environment strings into typed values.

Purpose
-------
Apply the single coercion rule that belongs to a classified
:class:`~lib_env_binder.domain.shapes.Shape`. Composite shapes (sequences and
mappings) split the raw text and recurse into the same rule set.

Contents
--------
* :func:`coerce` – dispatch entry point.
* :func:`parse_duration` – Go-style duration grammar (``3m``, ``1h30m``,
  ``500ms``) returning :class:`datetime.timedelta`.
* Private ``_coerce_*`` rules, one per :class:`ShapeKind`.

System Role
-----------
Called by the walker for every resolved value. Failures are raised as
:class:`~lib_env_binder.domain.errors.InvalidValue`; the walker attaches the
field identity and turns them into :class:`ParseError`.
"""

from __future__ import annotations

import math
import re
import struct
from datetime import timedelta
from decimal import Decimal
from typing import Any, Callable, Final

from ..domain.errors import InvalidValue, UnsupportedShape
from ..domain.shapes import Shape, ShapeKind
from ..domain.tags import FALSY, TRUTHY

_SIGNED_INT: Final = re.compile(r"[+-]?[0-9]+")
_UNSIGNED_INT: Final = re.compile(r"[0-9]+")
_FLOAT: Final = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_FLOAT_SPECIAL: Final = re.compile(r"[+-]?(?:inf|infinity|nan)", re.IGNORECASE)
_FLOAT32_MAX: Final[float] = 3.4028234663852886e38

_DURATION_NUMBER: Final[str] = r"(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)"
_DURATION_UNIT: Final[str] = r"(?:ns|us|µs|μs|ms|s|m|h)"
_DURATION: Final = re.compile(rf"(?:{_DURATION_NUMBER}{_DURATION_UNIT})+")
_DURATION_PART: Final = re.compile(rf"({_DURATION_NUMBER})({_DURATION_UNIT})")
_DURATION_UNITS_NS: Final[dict[str, int]] = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,
    "μs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60_000_000_000,
    "h": 3_600_000_000_000,
}
_DURATION_MAX_NS: Final[int] = (1 << 63) - 1


def coerce(shape: Shape, raw: str, current: Any = None) -> Any:
    """Return *raw* converted into the value described by *shape*.

    *current* is the field's present value; hook shapes decode into it when it
    is already an instance of the hook type.

    Examples
    --------
    >>> from lib_env_binder.domain.shapes import classify
    >>> coerce(classify(int), '8080')
    8080
    >>> coerce(classify(list[str]), 'rob,ken,robert')
    ['rob', 'ken', 'robert']
    >>> coerce(classify(dict[str, int]), 'red:1,green:2')
    {'red': 1, 'green': 2}
    """

    return _RULES[shape.kind](shape, raw, current)


def parse_duration(raw: str) -> timedelta:
    """Parse a signed sequence of ``<decimal><unit>`` groups.

    Units: ``ns``, ``us`` (or ``µs``), ``ms``, ``s``, ``m``, ``h``. A lone
    ``0`` needs no unit. Precision below one microsecond is truncated.

    Examples
    --------
    >>> parse_duration('3m')
    datetime.timedelta(seconds=180)
    >>> parse_duration('1h30m')
    datetime.timedelta(seconds=5400)
    >>> parse_duration('-1.5s')
    datetime.timedelta(days=-1, seconds=86398, microseconds=500000)
    """

    text = raw
    negative = False
    if text[:1] in ("+", "-"):
        negative = text[0] == "-"
        text = text[1:]
    if text == "0":
        return timedelta(0)
    if not text or _DURATION.fullmatch(text) is None:
        raise InvalidValue(f"time: invalid duration {raw!r}")

    total = Decimal(0)
    for number, unit in _DURATION_PART.findall(text):
        total += Decimal(number) * _DURATION_UNITS_NS[unit]
    nanoseconds = int(total)
    if nanoseconds > _DURATION_MAX_NS + (1 if negative else 0):
        raise InvalidValue(f"time: invalid duration {raw!r}: out of range")
    result = timedelta(microseconds=nanoseconds // 1_000)
    return -result if negative else result


def _coerce_decoder(shape: Shape, raw: str, current: Any) -> Any:
    instance = _hook_instance(shape, current)
    try:
        instance.decode(raw)
    except Exception as exc:  # noqa: BLE001 - user hooks may raise anything
        raise InvalidValue(str(exc)) from exc
    return instance


def _coerce_setter(shape: Shape, raw: str, current: Any) -> Any:
    instance = _hook_instance(shape, current)
    try:
        instance.set(raw)
    except Exception as exc:  # noqa: BLE001 - user hooks may raise anything
        raise InvalidValue(str(exc)) from exc
    return instance


def _hook_instance(shape: Shape, current: Any) -> Any:
    """Return the instance a hook decodes into: the current value or a new one."""

    cls = shape.python_type
    if isinstance(current, cls):
        return current
    try:
        return cls()
    except TypeError as exc:
        raise InvalidValue(f"cannot construct {cls.__name__} without arguments: {exc}") from exc


def _coerce_duration(shape: Shape, raw: str, current: Any) -> timedelta:
    return parse_duration(raw)


def _coerce_bool(shape: Shape, raw: str, current: Any) -> bool:
    if raw in TRUTHY:
        return True
    if raw in FALSY:
        return False
    raise InvalidValue(f"invalid syntax: {raw!r} is not a boolean")


def _coerce_int(shape: Shape, raw: str, current: Any) -> int:
    bits = shape.int_bits
    pattern = _UNSIGNED_INT if bits is not None and not bits.signed else _SIGNED_INT
    if pattern.fullmatch(raw) is None:
        raise InvalidValue(f"invalid syntax: {raw!r} is not a base-10 integer")
    value = int(raw)
    if bits is not None:
        low, high = bits.bounds
        if not low <= value <= high:
            raise InvalidValue(f"value out of range: {raw} does not fit in {bits.bits} bits")
    if shape.python_type is not int:
        try:
            return shape.python_type(value)
        except ValueError as exc:
            raise InvalidValue(str(exc)) from exc
    return value


def _coerce_float(shape: Shape, raw: str, current: Any) -> float:
    if _FLOAT_SPECIAL.fullmatch(raw):
        return float(raw)
    if _FLOAT.fullmatch(raw) is None:
        raise InvalidValue(f"invalid syntax: {raw!r} is not a float")
    value = float(raw)
    single = shape.float_bits is not None and shape.float_bits.bits == 32
    limit = _FLOAT32_MAX if single else math.inf
    if math.isinf(value) or abs(value) > limit:
        raise InvalidValue(f"value out of range: {raw}")
    if single:
        return struct.unpack("f", struct.pack("f", value))[0]
    return value


def _coerce_str(shape: Shape, raw: str, current: Any) -> str:
    if shape.python_type is str:
        return raw
    return shape.python_type(raw)


def _coerce_bytes(shape: Shape, raw: str, current: Any) -> bytes:
    return raw.encode("utf-8")


def _coerce_sequence(shape: Shape, raw: str, current: Any) -> Any:
    container = shape.python_type
    if not raw.strip():
        return container()
    element = shape.items[0]
    return container(coerce(element, piece) for piece in raw.split(","))


def _coerce_mapping(shape: Shape, raw: str, current: Any) -> dict[Any, Any]:
    result: dict[Any, Any] = {}
    if not raw.strip():
        return result
    key_shape, value_shape = shape.items
    for entry in raw.split(","):
        if ":" not in entry:
            raise InvalidValue(f"invalid map item: {entry!r}")
        key, value = entry.split(":", 1)
        result[coerce(key_shape, key)] = coerce(value_shape, value)
    return result


def _coerce_unsupported(shape: Shape, raw: str, current: Any) -> Any:
    raise UnsupportedShape(f"unsupported type {shape.type_name}")


_RULES: Final[dict[ShapeKind, Callable[[Shape, str, Any], Any]]] = {
    ShapeKind.DECODER: _coerce_decoder,
    ShapeKind.SETTER: _coerce_setter,
    ShapeKind.DURATION: _coerce_duration,
    ShapeKind.BOOL: _coerce_bool,
    ShapeKind.INT: _coerce_int,
    ShapeKind.FLOAT: _coerce_float,
    ShapeKind.STR: _coerce_str,
    ShapeKind.BYTES: _coerce_bytes,
    ShapeKind.SEQUENCE: _coerce_sequence,
    ShapeKind.MAPPING: _coerce_mapping,
    ShapeKind.RECORD: _coerce_unsupported,
    ShapeKind.UNSUPPORTED: _coerce_unsupported,
}
