"""Composition root for ``lib_env_binder``.

Purpose
-------
Provide the entry points that wire the default adapters (process
environment, filesystem) into the binding engine and return or raise the final
outcome.

Contents
--------
* :func:`process` – populate a dataclass instance from the environment.
* :func:`usage` – describe every variable a record understands.
* :func:`check_disallowed` – reject prefixed variables no field binds.

System Role
-----------
This module is the only place that chooses concrete adapters. The walker,
coercer and key resolver under :mod:`lib_env_binder.application` only see the
ports.
"""

from __future__ import annotations

import collections
import dataclasses
from collections.abc import Iterable, Mapping
from typing import Any

from .adapters.env.default import DefaultEnvLookup
from .adapters.files.default import DefaultFileReader
from .application.aggregate import ErrorCollector
from .application.fields import iter_leaves
from .application.ports import EnvLookup, FileReader
from .application.usage import render_usage
from .application.walker import StructWalker
from .domain.errors import UnknownVariable, UsageError
from .observability import log_debug, log_info


def process(
    prefix: str,
    target: Any,
    *,
    lookup: EnvLookup | Mapping[str, str] | None = None,
    reader: FileReader | None = None,
) -> None:
    """Populate the dataclass instance *target* from environment variables.

    Why
    ----
    Applications describe their configuration once, as a dataclass, and get a
    typed, validated object instead of hand-written ``os.environ`` parsing.

    What
    ----
    Walks every field (nested and embedded records included), resolves its
    value from the file fallback, candidate keys, or the ``default`` tag,
    coerces it into the declared type and assigns it in place. Every field is
    attempted before failures are reported.

    Parameters
    ----------
    prefix:
        Namespace for derived keys; case-insensitive. An empty prefix uses
        bare field keys.
    target:
        Mutable dataclass instance to populate.
    lookup:
        :class:`EnvLookup` or plain mapping. Defaults to :data:`os.environ`.
    reader:
        :class:`FileReader` for file-backed fields. Defaults to the
        filesystem.

    Raises
    ------
    UsageError
        *target* is not a mutable dataclass instance; raised before any field
        is touched.
    RequiredMissing / ParseError
        Exactly one field failed.
    AggregatedError
        More than one field failed.

    Examples
    --------
    >>> from dataclasses import dataclass, field
    >>> @dataclass
    ... class Settings:
    ...     port: int = 0
    ...     debug: bool = False
    ...     users: list = field(default_factory=list)
    >>> settings = Settings()
    >>> process('myapp', settings, lookup={'MYAPP_PORT': '8080', 'MYAPP_USERS': 'rob,ken'})
    >>> settings
    Settings(port=8080, debug=False, users=['rob', 'ken'])
    """

    record_type = _require_record(target)
    prefix = prefix.upper()
    collections.deque(iter_leaves(prefix, record_type, mutable=True), maxlen=0)

    collector = ErrorCollector()
    walker = StructWalker(_as_lookup(lookup), reader or DefaultFileReader(), collector)
    walker.walk(prefix, target, record_type.__name__)
    log_info("process_complete", key=None, source=None, prefix=prefix, record=record_type.__name__, errors=len(collector))
    collector.raise_if_any()


def usage(prefix: str, target: Any, *, style: str = "table") -> str:
    """Return a description of every environment variable *target* reads.

    *target* may be a dataclass instance or a dataclass type. ``style`` is
    ``"table"`` (aligned columns) or ``"list"`` (one block per variable).

    Examples
    --------
    >>> from dataclasses import dataclass
    >>> from lib_env_binder.domain.tags import setting
    >>> @dataclass
    ... class Settings:
    ...     port: int = setting(default='8080', desc='listen port', initial=0)
    >>> print(usage('myapp', Settings))
    This application is configured via the environment. The following environment
    variables can be used:
    <BLANKLINE>
    KEY           TYPE       DEFAULT    REQUIRED    DESCRIPTION
    MYAPP_PORT    Integer    8080                   listen port
    <BLANKLINE>
    """

    record_type = target if isinstance(target, type) else _require_record(target)
    return render_usage(iter_leaves(prefix.upper(), record_type), style=style)


def check_disallowed(prefix: str, target: Any, *, environ: Mapping[str, str] | Iterable[str] | None = None) -> None:
    """Raise :class:`UnknownVariable` for ``PREFIX_*`` variables *target* does not bind.

    Keys of file-backed fields (``PREFIX_SECRET_FILE``) count as bound.

    Examples
    --------
    >>> from dataclasses import dataclass
    >>> @dataclass
    ... class Settings:
    ...     port: int = 0
    >>> check_disallowed('app', Settings, environ={'APP_PORT': '1', 'OTHER': 'x'})
    >>> check_disallowed('app', Settings, environ={'APP_PROT': '1'})
    Traceback (most recent call last):
    ...
    lib_env_binder.domain.errors.UnknownVariable: unknown environment variable(s): APP_PROT
    """

    record_type = target if isinstance(target, type) else _require_record(target)
    prefix = prefix.upper()
    known: set[str] = set()
    for leaf in iter_leaves(prefix, record_type):
        known.add(leaf.keys.primary)
        if leaf.keys.file_key:
            known.add(leaf.keys.file_key)

    keys = DefaultEnvLookup().keys() if environ is None else iter(environ)
    namespace = f"{prefix}_" if prefix else ""
    unknown = [key for key in keys if key.startswith(namespace) and key not in known]
    log_debug("disallowed_checked", key=None, source=None, prefix=prefix, unknown=len(unknown))
    if unknown:
        raise UnknownVariable(unknown)


def _require_record(target: Any) -> type:
    """Return ``type(target)`` or raise :class:`UsageError` for non-dataclass instances."""

    if isinstance(target, type) or not dataclasses.is_dataclass(target):
        raise UsageError(f"target must be a dataclass instance, got {target!r}")
    return type(target)


def _as_lookup(lookup: EnvLookup | Mapping[str, str] | None) -> EnvLookup:
    if lookup is None:
        return DefaultEnvLookup()
    if isinstance(lookup, Mapping):
        return DefaultEnvLookup(environ=lookup)
    if isinstance(lookup, EnvLookup):
        return lookup
    raise UsageError(f"lookup must be an EnvLookup or a mapping, got {lookup!r}")


__all__ = [
    "process",
    "usage",
    "check_disallowed",
]
