"""Filesystem adapter for file-backed fields.

Purpose
-------
Implement the :class:`lib_env_binder.application.ports.FileReader` port with
:mod:`pathlib`. Missing files surface as :class:`FileNotFoundError`, which the
file fallback treats as "no file".
"""

from __future__ import annotations

from pathlib import Path

from ...observability import log_debug


class DefaultFileReader:
    """Read files from the local filesystem."""

    def read(self, path: str) -> bytes:
        """Return the raw bytes stored at *path*.

        Raises
        ------
        OSError
            When the path is missing, is a directory, or cannot be read.

        Examples
        --------
        >>> from tempfile import NamedTemporaryFile
        >>> tmp = NamedTemporaryFile(delete=False)
        >>> _ = tmp.write(b"s3cret\\n")
        >>> tmp.close()
        >>> DefaultFileReader().read(tmp.name)
        b's3cret\\n'
        >>> Path(tmp.name).unlink()
        """

        payload = Path(path).read_bytes()
        log_debug("file_read", key=None, source="file", path=path, size=len(payload))
        return payload
