"""Classify field annotations into coercion target shapes.

Purpose
-------
Map every annotation the binder may meet onto exactly one :class:`Shape`, so
the coercer dispatches on a closed vocabulary instead of re-inspecting typing
constructs at every call.

Contents
--------
* :class:`IntBits` / :class:`FloatBits` – ``Annotated`` markers declaring the
  width of numeric fields, plus ready-made aliases (``Int8`` ... ``Uint64``,
  ``Float32``, ``Float64``).
* :class:`Decoder` / :class:`Setter` – the two extensibility hooks.
* :class:`ShapeKind` / :class:`Shape` – the classified target.
* :func:`classify` – annotation -> :class:`Shape`.
* :func:`describe` – human readable type description used by usage output.
"""

from __future__ import annotations

import collections.abc
import dataclasses
import enum
import types
import typing
from dataclasses import dataclass
from datetime import timedelta
from typing import Annotated, Any, Protocol, Union, runtime_checkable


@dataclass(frozen=True, slots=True)
class IntBits:
    """Declare the bit width and signedness of an ``int`` field."""

    bits: int
    signed: bool = True

    @property
    def bounds(self) -> tuple[int, int]:
        """Return the inclusive ``(low, high)`` range.

        Examples
        --------
        >>> IntBits(8).bounds, IntBits(8, signed=False).bounds
        ((-128, 127), (0, 255))
        """

        if self.signed:
            return -(1 << (self.bits - 1)), (1 << (self.bits - 1)) - 1
        return 0, (1 << self.bits) - 1


@dataclass(frozen=True, slots=True)
class FloatBits:
    """Declare the width of a ``float`` field (32 or 64)."""

    bits: int = 64


Int8 = Annotated[int, IntBits(8)]
Int16 = Annotated[int, IntBits(16)]
Int32 = Annotated[int, IntBits(32)]
Int64 = Annotated[int, IntBits(64)]
Uint8 = Annotated[int, IntBits(8, signed=False)]
Uint16 = Annotated[int, IntBits(16, signed=False)]
Uint32 = Annotated[int, IntBits(32, signed=False)]
Uint64 = Annotated[int, IntBits(64, signed=False)]
Float32 = Annotated[float, FloatBits(32)]
Float64 = Annotated[float, FloatBits(64)]


@runtime_checkable
class Decoder(Protocol):
    """Leaf types that parse their own raw text.

    ``decode`` mutates the instance and raises on invalid input.
    """

    def decode(self, value: str) -> None:
        """Populate ``self`` from *value*."""


@runtime_checkable
class Setter(Protocol):
    """Lower-priority hook: a single-token ``set`` operation."""

    def set(self, value: str) -> None:
        """Populate ``self`` from *value*."""


class ShapeKind(enum.Enum):
    DECODER = "decoder"
    SETTER = "setter"
    DURATION = "duration"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STR = "str"
    BYTES = "bytes"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    RECORD = "record"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class Shape:
    """Classified coercion target.

    Attributes
    ----------
    kind:
        Coercion rule to apply.
    python_type:
        Concrete class behind the annotation (``list`` for sequences, the user
        class for hooks and records).
    annotation:
        The original annotation, kept for error messages.
    optional:
        ``True`` when the annotation allowed ``None``.
    items:
        Element shape for sequences, ``(key, value)`` shapes for mappings.
    int_bits / float_bits:
        Numeric width markers.
    """

    kind: ShapeKind
    python_type: Any
    annotation: Any
    optional: bool = False
    items: tuple["Shape", ...] = ()
    int_bits: IntBits | None = None
    float_bits: FloatBits | None = None

    @property
    def type_name(self) -> str:
        return type_name(self.annotation)


_SEQUENCE_ORIGINS = (list, tuple, collections.abc.Sequence, collections.abc.MutableSequence)
_MAPPING_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)
_UNION_TYPES: tuple[Any, ...] = (Union, types.UnionType)


def classify(annotation: Any) -> Shape:
    """Return the :class:`Shape` for *annotation*.

    Examples
    --------
    >>> classify(int).kind
    <ShapeKind.INT: 'int'>
    >>> classify(list[int]).items[0].kind
    <ShapeKind.INT: 'int'>
    >>> classify(int | None).optional
    True
    >>> classify(Uint8).int_bits
    IntBits(bits=8, signed=False)
    """

    return _classify(annotation, annotation)


def _classify(annotation: Any, original: Any, optional: bool = False) -> Shape:
    origin = typing.get_origin(annotation)

    if origin is Annotated:
        base, *extras = typing.get_args(annotation)
        shape = _classify(base, original, optional)
        for extra in extras:
            if isinstance(extra, IntBits) and shape.kind is ShapeKind.INT:
                shape = dataclasses.replace(shape, int_bits=extra)
            elif isinstance(extra, FloatBits) and shape.kind is ShapeKind.FLOAT:
                shape = dataclasses.replace(shape, float_bits=extra)
        return shape

    if origin in _UNION_TYPES:
        members = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(members) == 1:
            return _classify(members[0], original, optional=True)
        return Shape(ShapeKind.UNSUPPORTED, annotation, original, optional)

    if origin in _SEQUENCE_ORIGINS:
        args = typing.get_args(annotation) or (str, Ellipsis)
        if origin is tuple and not (len(args) == 2 and args[1] is Ellipsis):
            return Shape(ShapeKind.UNSUPPORTED, annotation, original, optional)
        container = tuple if origin is tuple else list
        return Shape(ShapeKind.SEQUENCE, container, original, optional, items=(_classify(args[0], args[0]),))

    if origin in _MAPPING_ORIGINS:
        key, value = typing.get_args(annotation) or (str, str)
        return Shape(ShapeKind.MAPPING, dict, original, optional, items=(_classify(key, key), _classify(value, value)))

    if origin is not None or not isinstance(annotation, type):
        return Shape(ShapeKind.UNSUPPORTED, annotation, original, optional)

    return Shape(_kind_of(annotation), annotation, original, optional, items=_default_items(annotation))


def _kind_of(cls: type) -> ShapeKind:
    if cls not in (bytes, bytearray, str) and callable(getattr(cls, "decode", None)):
        return ShapeKind.DECODER
    if callable(getattr(cls, "set", None)):
        return ShapeKind.SETTER
    if issubclass(cls, timedelta):
        return ShapeKind.DURATION
    if issubclass(cls, bool):
        return ShapeKind.BOOL
    if issubclass(cls, int):
        return ShapeKind.INT
    if issubclass(cls, float):
        return ShapeKind.FLOAT
    if issubclass(cls, str):
        return ShapeKind.STR
    if issubclass(cls, bytes):
        return ShapeKind.BYTES
    if cls in (list, tuple):
        return ShapeKind.SEQUENCE
    if cls is dict:
        return ShapeKind.MAPPING
    if dataclasses.is_dataclass(cls):
        return ShapeKind.RECORD
    return ShapeKind.UNSUPPORTED


def _default_items(cls: type) -> tuple[Shape, ...]:
    if cls in (list, tuple):
        return (_classify(str, str),)
    if cls is dict:
        return (_classify(str, str), _classify(str, str))
    return ()


def type_name(annotation: Any) -> str:
    """Return a short readable name for *annotation*.

    Examples
    --------
    >>> type_name(int), type_name(list[str])
    ('int', 'list[str]')
    """

    if isinstance(annotation, type) and typing.get_origin(annotation) is None:
        return annotation.__name__
    return repr(annotation).replace("typing.", "")


def describe(shape: Shape) -> str:
    """Describe *shape* for humans, as shown in the usage table.

    Examples
    --------
    >>> describe(classify(dict[str, int]))
    'Comma-separated list of String:Integer pairs'
    >>> describe(classify(timedelta))
    'Duration'
    """

    kind = shape.kind
    if kind in (ShapeKind.DECODER, ShapeKind.SETTER, ShapeKind.RECORD):
        return shape.python_type.__name__
    if kind is ShapeKind.SEQUENCE:
        return f"Comma-separated list of {describe(shape.items[0])}"
    if kind is ShapeKind.MAPPING:
        return f"Comma-separated list of {describe(shape.items[0])}:{describe(shape.items[1])} pairs"
    if kind is ShapeKind.INT and shape.int_bits is not None and not shape.int_bits.signed:
        return "Unsigned Integer"
    return _DESCRIPTIONS.get(kind, shape.type_name)


_DESCRIPTIONS = {
    ShapeKind.DURATION: "Duration",
    ShapeKind.BOOL: "True or False",
    ShapeKind.INT: "Integer",
    ShapeKind.FLOAT: "Float",
    ShapeKind.STR: "String",
    ShapeKind.BYTES: "String",
}
