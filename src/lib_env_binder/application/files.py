"""File fallback: resolve a field from a file whose path lives in the environment.

Purpose
-------
Support the secrets-mount convention where ``MYAPP_SECRET_FILE`` names a file
holding the value of ``MYAPP_SECRET``. File content wins over the plain key,
and every failure on this path degrades silently to plain resolution.

Contents
--------
* :func:`read_file_value` – look up the path key and read the file.
* :func:`strip_trailing_newline` – content normalisation.
"""

from __future__ import annotations

from .ports import EnvLookup, FileReader
from ..observability import log_debug, make_event


def read_file_value(file_key: str, lookup: EnvLookup, reader: FileReader) -> str | None:
    """Return the content of the file named by *file_key*, or ``None``.

    ``None`` means "fall back to the plain key": the path key is unset, the
    file cannot be read (including paths the OS rejects, such as one with an
    embedded NUL), or its content is not UTF-8. None of these are errors.

    Side Effects
    ------------
    Emits ``file_fallback_skipped`` debug events describing why the file was
    not used.
    """

    path = lookup.lookup(file_key)
    if path is None:
        return None
    try:
        payload = reader.read(path)
    except (OSError, ValueError) as exc:
        log_debug("file_fallback_skipped", **make_event(file_key, "file", {"path": path, "reason": str(exc)}))
        return None
    try:
        text = payload.decode("utf-8")
    except UnicodeDecodeError as exc:
        log_debug("file_fallback_skipped", **make_event(file_key, "file", {"path": path, "reason": str(exc)}))
        return None
    return strip_trailing_newline(text)


def strip_trailing_newline(text: str) -> str:
    """Drop one trailing newline (``\\n`` or ``\\r\\n``) from *text*.

    Examples
    --------
    >>> strip_trailing_newline('s3cret\\n')
    's3cret'
    >>> strip_trailing_newline('s3cret\\n\\n')
    's3cret\\n'
    >>> strip_trailing_newline(' padded ')
    ' padded '
    """

    if text.endswith("\r\n"):
        return text[:-2]
    if text.endswith("\n"):
        return text[:-1]
    return text
