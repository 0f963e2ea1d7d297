"""Testing helpers that keep binding scenarios observable and predictable.

Purpose
    Provide in-memory collaborators for the binding engine and an
    intentionally failing helper that exercises the CLI's error path.

Contents
    - ``MemoryEnv``: ``EnvLookup`` double that records every key asked for.
    - ``MemoryFiles``: ``FileReader`` double backed by a dictionary.
    - ``FAILURE_MESSAGE`` / ``i_should_fail``: deterministic failure.

System Integration
    Used by the test-suite and available to applications that want to unit
    test their own configuration records without touching ``os.environ``.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Final

FAILURE_MESSAGE: Final[str] = "i should fail"
"""Stable message emitted when ``i_should_fail`` triggers a failure sequence."""


class MemoryEnv:
    """Dictionary-backed lookup remembering the order of requested keys.

    Examples
    --------
    >>> env = MemoryEnv({'APP_PORT': '8080'})
    >>> env.lookup('APP_PORT'), env.lookup('APP_HOST')
    ('8080', None)
    >>> env.requested
    ['APP_PORT', 'APP_HOST']
    """

    def __init__(self, values: Mapping[str, str] | None = None) -> None:
        self.values: dict[str, str] = dict(values or {})
        self.requested: list[str] = []

    def lookup(self, key: str) -> str | None:
        self.requested.append(key)
        return self.values.get(key)

    def keys(self) -> Iterator[str]:
        return iter(self.values)


class MemoryFiles:
    """Dictionary-backed file reader; unknown paths raise :class:`FileNotFoundError`.

    Entries mapped to an exception instance raise it, which lets tests simulate
    permission problems.
    """

    def __init__(self, files: Mapping[str, bytes | str | OSError] | None = None) -> None:
        self.files: dict[str, bytes | str | OSError] = dict(files or {})

    def read(self, path: str) -> bytes:
        try:
            content = self.files[path]
        except KeyError:
            raise FileNotFoundError(path) from None
        if isinstance(content, OSError):
            raise content
        if isinstance(content, str):
            return content.encode("utf-8")
        return content


def i_should_fail() -> None:
    """Raise a deterministic :class:`RuntimeError` for failure-path testing.

    Examples
    --------
    >>> i_should_fail()
    Traceback (most recent call last):
    ...
    RuntimeError: i should fail
    """

    raise RuntimeError(FAILURE_MESSAGE)
