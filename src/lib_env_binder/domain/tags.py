"""Per-field metadata (tags) understood by the binding engine.

Purpose
-------
Read the tag set attached to a dataclass field through
``dataclasses.field(metadata=...)`` and expose it as an immutable value object.
Tags may be written by hand as strings (``{"required": "true"}``) or produced by
the :func:`setting` helper.

Contents
--------
* :data:`DEFAULT_FILE_MARKER` – suffix appended to the file-path key.
* :func:`is_true` / :func:`is_false` – boolean tag grammar.
* :class:`TagSet` – parsed view over a field's metadata.
* :func:`setting` – convenience wrapper around :func:`dataclasses.field`.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Callable, Final, Mapping

DEFAULT_FILE_MARKER: Final[str] = "_FILE"

TAG_ENVCONFIG: Final[str] = "envconfig"
TAG_DEFAULT: Final[str] = "default"
TAG_REQUIRED: Final[str] = "required"
TAG_IGNORED: Final[str] = "ignored"
TAG_SPLIT_WORDS: Final[str] = "split_words"
TAG_FILE_CONTENT: Final[str] = "file_content"
TAG_DESC: Final[str] = "desc"
TAG_EMBEDDED: Final[str] = "embedded"

TRUTHY: Final[frozenset[str]] = frozenset({"1", "t", "T", "TRUE", "true", "True"})
FALSY: Final[frozenset[str]] = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def is_true(value: object) -> bool:
    """Return ``True`` when *value* is a boolean tag that reads as true.

    Examples
    --------
    >>> is_true('T'), is_true(True), is_true('yes'), is_true(None)
    (True, True, False, False)
    """

    if isinstance(value, bool):
        return value
    return isinstance(value, str) and value in TRUTHY


def is_false(value: object) -> bool:
    """Return ``True`` when *value* is a boolean tag that reads as false."""

    if isinstance(value, bool):
        return not value
    return isinstance(value, str) and value in FALSY


@dataclass(frozen=True, slots=True)
class TagSet:
    """Immutable tag view for one field.

    Attributes
    ----------
    envconfig:
        Explicit key override, or ``None``.
    default:
        Raw string used when no candidate key resolves, or ``None`` when the
        field carries no default tag.
    required / ignored / split_words / embedded:
        Boolean tags.
    file_marker:
        Marker appended to the primary key to find the file-path key, or
        ``None`` when file-backed content is disabled.
    desc:
        Free text shown by the usage renderer.
    """

    envconfig: str | None = None
    default: str | None = None
    required: bool = False
    ignored: bool = False
    split_words: bool = False
    file_marker: str | None = None
    desc: str = ""
    embedded: bool = False

    @classmethod
    def from_metadata(cls, metadata: Mapping[str, Any]) -> "TagSet":
        """Parse dataclass field metadata into a :class:`TagSet`.

        Examples
        --------
        >>> TagSet.from_metadata({'envconfig': 'service_host', 'required': 'true'})
        TagSet(envconfig='service_host', default=None, required=True, ignored=False, split_words=False, file_marker=None, desc='', embedded=False)
        >>> TagSet.from_metadata({'file_content': '_path'}).file_marker
        '_PATH'
        """

        envconfig = metadata.get(TAG_ENVCONFIG)
        default = metadata.get(TAG_DEFAULT)
        return cls(
            envconfig=str(envconfig) if envconfig else None,
            default=None if default is None else str(default),
            required=is_true(metadata.get(TAG_REQUIRED)),
            ignored=is_true(metadata.get(TAG_IGNORED)),
            split_words=is_true(metadata.get(TAG_SPLIT_WORDS)),
            file_marker=_file_marker(metadata.get(TAG_FILE_CONTENT)),
            desc=str(metadata.get(TAG_DESC) or ""),
            embedded=is_true(metadata.get(TAG_EMBEDDED)),
        )


def _file_marker(value: object) -> str | None:
    if value is None or value == "" or is_false(value):
        return None
    if is_true(value):
        return DEFAULT_FILE_MARKER
    return str(value).upper()


def setting(
    *,
    envconfig: str | None = None,
    default: str | None = None,
    required: bool = False,
    ignored: bool = False,
    split_words: bool = False,
    file_content: bool | str = False,
    desc: str | None = None,
    embedded: bool = False,
    initial: Any = dataclasses.MISSING,
    initial_factory: Callable[[], Any] | Any = dataclasses.MISSING,
) -> Any:
    """Return a :func:`dataclasses.field` carrying binding tags.

    ``initial`` / ``initial_factory`` become the dataclass default (the value a
    field keeps when nothing resolves); ``default`` is the raw environment
    string used in place of a missing variable.

    Examples
    --------
    >>> from dataclasses import dataclass
    >>> @dataclass
    ... class Settings:
    ...     port: int = setting(default='8080', initial=0)
    >>> Settings().port
    0
    """

    metadata: dict[str, object] = {}
    if envconfig:
        metadata[TAG_ENVCONFIG] = envconfig
    if default is not None:
        metadata[TAG_DEFAULT] = default
    if required:
        metadata[TAG_REQUIRED] = "true"
    if ignored:
        metadata[TAG_IGNORED] = "true"
    if split_words:
        metadata[TAG_SPLIT_WORDS] = "true"
    if file_content:
        metadata[TAG_FILE_CONTENT] = "true" if file_content is True else file_content
    if desc:
        metadata[TAG_DESC] = desc
    if embedded:
        metadata[TAG_EMBEDDED] = "true"
    return dataclasses.field(default=initial, default_factory=initial_factory, metadata=metadata)
