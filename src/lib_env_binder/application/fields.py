"""Field descriptor table built once per record type.

Purpose
-------
Introspect a dataclass type (resolved annotations, tags, classified shapes)
and cache the result so repeated binds of the same type skip ``typing``
introspection. Also provides the type-level traversal shared by the usage
renderer and :func:`lib_env_binder.core.check_disallowed`.

Contents
--------
* :class:`FieldInfo` – descriptor for one field.
* :func:`field_table` – cached descriptor tuple for a dataclass type.
* :func:`nested_prefix` – prefix handed to a nested record's fields.
* :func:`iter_leaves` – depth-first walk over every bindable leaf field.
"""

from __future__ import annotations

import dataclasses
import functools
import typing
from dataclasses import dataclass
from typing import Any, Iterator

from .keys import FieldKeys, resolve_keys
from ..domain.errors import UsageError
from ..domain.shapes import Shape, ShapeKind, classify
from ..domain.tags import TagSet


@dataclass(frozen=True)
class FieldInfo:
    """Descriptor for one dataclass field."""

    name: str
    annotation: Any
    shape: Shape
    tags: TagSet

    @property
    def is_record(self) -> bool:
        return self.shape.kind is ShapeKind.RECORD


@dataclass(frozen=True)
class LeafField:
    """A bindable field reached through :func:`iter_leaves`."""

    qualified_name: str
    info: FieldInfo
    keys: FieldKeys


@functools.lru_cache(maxsize=None)
def field_table(record_type: type) -> tuple[FieldInfo, ...]:
    """Return the descriptors of *record_type*'s public fields in declaration order.

    Private fields (leading underscore) are left out. Ignored fields stay in
    the table; callers skip them.

    Raises
    ------
    UsageError
        When *record_type* is not a dataclass or its annotations cannot be
        resolved.
    """

    if not (isinstance(record_type, type) and dataclasses.is_dataclass(record_type)):
        raise UsageError(f"{record_type!r} is not a dataclass type")
    try:
        hints = typing.get_type_hints(record_type, include_extras=True)
    except (NameError, TypeError) as exc:
        raise UsageError(f"cannot resolve annotations of {record_type.__name__}: {exc}") from exc

    infos = []
    for field in dataclasses.fields(record_type):
        if field.name.startswith("_"):
            continue
        annotation = hints.get(field.name, field.type)
        infos.append(FieldInfo(field.name, annotation, classify(annotation), TagSet.from_metadata(field.metadata)))
    return tuple(infos)


def is_frozen(record_type: type) -> bool:
    params = getattr(record_type, "__dataclass_params__", None)
    return bool(getattr(params, "frozen", False))


def nested_prefix(prefix: str, info: FieldInfo, keys: FieldKeys) -> str:
    """Return the prefix for the fields of the nested record *info*.

    Embedded records share their parent's prefix unless they carry an explicit
    ``envconfig`` tag; every other nested record is namespaced by its own key.

    Examples
    --------
    >>> from lib_env_binder.domain.shapes import classify
    >>> info = FieldInfo('db', object, classify(object), TagSet())
    >>> nested_prefix('APP', info, FieldKeys('APP_DB', ('APP_DB',)))
    'APP_DB'
    >>> embedded = FieldInfo('base', object, classify(object), TagSet(embedded=True))
    >>> nested_prefix('APP', embedded, FieldKeys('APP_BASE', ('APP_BASE',)))
    'APP'
    """

    if info.tags.embedded and not info.tags.envconfig:
        return prefix
    return keys.primary


def iter_leaves(
    prefix: str,
    record_type: type,
    *,
    mutable: bool = False,
    _path: str = "",
    _seen: tuple[type, ...] = (),
) -> Iterator[LeafField]:
    """Yield every non-ignored leaf field of *record_type* with its keys.

    With ``mutable`` set, frozen record types are rejected because the walker
    could not assign into them.

    Raises
    ------
    UsageError
        When a record type contains itself (binding would recurse forever), or
        is frozen while ``mutable`` is requested.
    """

    if record_type in _seen:
        raise UsageError(f"record type {record_type.__name__} contains itself")
    if mutable and is_frozen(record_type):
        raise UsageError(f"record type {record_type.__name__} is frozen and cannot be populated in place")
    seen = (*_seen, record_type)
    path = _path or record_type.__name__
    for info in field_table(record_type):
        if info.tags.ignored:
            continue
        keys = resolve_keys(prefix, info.name, info.tags)
        qualified = f"{path}.{info.name}"
        if info.is_record:
            yield from iter_leaves(
                nested_prefix(prefix, info, keys),
                info.shape.python_type,
                mutable=mutable,
                _path=qualified,
                _seen=seen,
            )
            continue
        yield LeafField(qualified, info, keys)
