"""Struct walker: populate a dataclass instance in place.

Purpose
-------
Visit every field of a record, recursing into nested and embedded records, and
for each leaf run the per-field decision sequence:

1. file fallback (``file_content`` fields only);
2. candidate keys in order, first present value wins;
3. the ``default`` tag;
4. nothing resolved: ``required`` fields record :class:`RequiredMissing`,
   others keep their current value;
5. coerce the raw string; failures record :class:`ParseError` whether or not
   the field is required, except that a required field set to the empty string
   keeps its current value when the empty string does not coerce.

Fields whose annotation has no coercion rule record a :class:`ParseError`
whether or not a value resolves for them.

Failures go to the shared :class:`ErrorCollector`; the walk never stops early.
"""

from __future__ import annotations

from typing import Any

from .aggregate import ErrorCollector
from .coerce import coerce
from .fields import FieldInfo, field_table, nested_prefix
from .files import read_file_value
from .keys import FieldKeys, resolve_keys
from .ports import EnvLookup, FileReader
from ..domain.errors import InvalidValue, ParseError, RequiredMissing, UnsupportedShape
from ..domain.shapes import ShapeKind
from ..observability import log_debug, make_event


class StructWalker:
    """Walk one record tree, resolving and assigning every leaf field."""

    def __init__(self, lookup: EnvLookup, reader: FileReader, collector: ErrorCollector) -> None:
        self._lookup = lookup
        self._reader = reader
        self._collector = collector

    def walk(self, prefix: str, record: Any, path: str) -> None:
        """Populate *record* using keys under *prefix*; *path* names it in errors."""

        for info in field_table(type(record)):
            if info.tags.ignored:
                continue
            keys = resolve_keys(prefix, info.name, info.tags)
            qualified = f"{path}.{info.name}"
            if info.is_record:
                self._walk_nested(prefix, record, info, keys, qualified)
            else:
                self._bind(record, info, keys, qualified)

    def _walk_nested(self, prefix: str, record: Any, info: FieldInfo, keys: FieldKeys, qualified: str) -> None:
        child = getattr(record, info.name)
        if child is None:
            try:
                child = info.shape.python_type()
            except TypeError as exc:
                self._collector.add(
                    ParseError(field=qualified, key=keys.primary, type_name=info.shape.type_name, value="", cause=exc)
                )
                return
            setattr(record, info.name, child)
        self.walk(nested_prefix(prefix, info, keys), child, qualified)

    def _bind(self, record: Any, info: FieldInfo, keys: FieldKeys, qualified: str) -> None:
        raw = self._resolve(info, keys, qualified)
        if info.shape.kind is ShapeKind.UNSUPPORTED:
            cause = UnsupportedShape(f"unsupported type {info.shape.type_name}")
            self._collector.add(
                ParseError(field=qualified, key=keys.primary, type_name=info.shape.type_name, value=raw or "", cause=cause)
            )
            return
        if raw is None:
            if info.tags.required:
                self._collector.add(RequiredMissing(field=qualified, key=keys.primary))
            return
        try:
            value = coerce(info.shape, raw, getattr(record, info.name))
        except InvalidValue as exc:
            if raw == "" and info.tags.required:
                log_debug("required_empty_accepted", **make_event(keys.primary, None, {"field": qualified}))
                return
            cause = exc.__cause__ if exc.__cause__ is not None else exc
            self._collector.add(
                ParseError(field=qualified, key=keys.primary, type_name=info.shape.type_name, value=raw, cause=cause)
            )
            return
        setattr(record, info.name, value)

    def _resolve(self, info: FieldInfo, keys: FieldKeys, qualified: str) -> str | None:
        """Return the raw string for a field, or ``None`` when nothing supplies one."""

        if keys.file_key is not None:
            content = read_file_value(keys.file_key, self._lookup, self._reader)
            if content is not None:
                log_debug("env_value_resolved", **make_event(keys.file_key, "file", {"field": qualified}))
                return content
        for index, key in enumerate(keys.candidates):
            value = self._lookup.lookup(key)
            if value is not None:
                source = "env" if index == 0 else "alt"
                log_debug("env_value_resolved", **make_event(key, source, {"field": qualified}))
                return value
        if info.tags.default is not None:
            log_debug("env_value_resolved", **make_event(keys.primary, "default", {"field": qualified}))
            return info.tags.default
        return None
