"""Key resolver: turn a prefix, a field name and its tags into lookup keys.

Purpose
-------
Produce the ordered candidate keys the walker tries against the environment,
the file-path key for file-backed fields, and the prefix handed down to nested
records.

Contents
--------
* :class:`FieldKeys` – resolved keys for one field.
* :func:`resolve_keys` – main entry point.
* :func:`join_key` – prefix + suffix joining rule.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..domain.names import derive_suffix
from ..domain.tags import TagSet


@dataclass(frozen=True, slots=True)
class FieldKeys:
    """Lookup keys for one field.

    Attributes
    ----------
    primary:
        ``PREFIX_SUFFIX`` (or the bare suffix without a prefix). Also the
        prefix of nested record fields.
    candidates:
        Keys tried in order; the first one set in the environment wins.
    file_key:
        Key naming the file with the field's content, or ``None``.
    """

    primary: str
    candidates: tuple[str, ...]
    file_key: str | None = None


def join_key(prefix: str, suffix: str) -> str:
    """Join *prefix* and *suffix* into an upper-case key.

    Examples
    --------
    >>> join_key('myapp', 'port')
    'MYAPP_PORT'
    >>> join_key('', 'port')
    'PORT'
    """

    if prefix:
        return f"{prefix}_{suffix}".upper()
    return suffix.upper()


def resolve_keys(prefix: str, name: str, tags: TagSet) -> FieldKeys:
    """Return the :class:`FieldKeys` for field *name* under *prefix*.

    Examples
    --------
    >>> resolve_keys('MYAPP', 'AutoSplitVar', TagSet(split_words=True)).candidates
    ('MYAPP_AUTO_SPLIT_VAR',)
    >>> resolve_keys('MYAPP', 'host', TagSet(envconfig='service_host')).candidates
    ('MYAPP_SERVICE_HOST', 'SERVICE_HOST')
    >>> resolve_keys('MYAPP', 'secret', TagSet(file_marker='_FILE')).file_key
    'MYAPP_SECRET_FILE'
    """

    if tags.envconfig:
        suffix = tags.envconfig
    else:
        suffix = derive_suffix(name, tags.split_words)
    primary = join_key(prefix, suffix)

    candidates = [primary]
    if tags.envconfig:
        bare = tags.envconfig.upper()
        if bare != primary:
            candidates.append(bare)

    file_key = primary + tags.file_marker if tags.file_marker else None
    return FieldKeys(primary=primary, candidates=tuple(candidates), file_key=file_key)
