"""Application-layer ports describing collaborator responsibilities.

Purpose
-------
Define the structural contracts the binding engine consumes so the walker can
resolve values without depending on ``os.environ`` or the filesystem directly.

Contents
--------
* :class:`EnvLookup` – resolves a single key to an optional string.
* :class:`FileReader` – reads a file into bytes, raising :class:`OSError`.

System Role
-----------
Adapters under :mod:`lib_env_binder.adapters` implement these protocols; tests
substitute the in-memory doubles from :mod:`lib_env_binder.testing`.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class EnvLookup(Protocol):
    """Resolve keys against a flat key/value namespace.

    Why
    ----
    The walker only ever asks "is this key set, and to what?"; keeping the
    contract that small lets dotenv files or secret stores stand in for the
    process environment.
    """

    def lookup(self, key: str) -> str | None:
        """Return the value stored under *key* or ``None`` when unset."""


@runtime_checkable
class FileReader(Protocol):
    """Read file content for file-backed fields.

    Why
    ----
    File-backed secrets degrade gracefully; the walker treats any
    :class:`OSError` from :meth:`read` as "no file".
    """

    def read(self, path: str) -> bytes:
        """Return the bytes stored at *path* or raise :class:`OSError`."""
