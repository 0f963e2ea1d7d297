"""`.env` adapter.

Purpose
-------
Implement the :class:`lib_env_binder.application.ports.EnvLookup` port for
projects that keep local overrides in a ``.env`` file. The process environment
always wins; the first ``.env`` file found walking upwards from the start
directory fills the gaps.

Contents
--------
* :class:`DotEnvLookup` – environment first, dotenv values second.
* Helper functions (``_iter_candidates``, ``_parse_dotenv``, ``_strip_quotes``)
  that perform discovery and parsing.
"""

from __future__ import annotations

import os
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Iterable

from ...domain.errors import InvalidFormat
from ...observability import log_debug, log_error


class DotEnvLookup:
    """Resolve keys from the environment first, then from a discovered ``.env`` file.

    Why
    ----
    `.env` files supply developer overrides and secrets. They need
    deterministic discovery and must never shadow a variable exported by the
    process environment.
    """

    def __init__(self, *, start_dir: str | None = None, environ: Mapping[str, str] | None = None) -> None:
        """Discover and parse the dotenv file eagerly.

        Parameters
        ----------
        start_dir:
            Directory that seeds the upward search (defaults to the CWD).
        environ:
            Mapping consulted before the dotenv values. Defaults to
            :data:`os.environ`.

        Raises
        ------
        InvalidFormat
            When the discovered file contains a malformed line.
        """

        self._environ = os.environ if environ is None else environ
        self.loaded_path: str | None = None
        self._values: dict[str, str] = {}
        for candidate in _iter_candidates(start_dir):
            if candidate.is_file():
                self.loaded_path = str(candidate)
                self._values = _parse_dotenv(candidate)
                log_debug("dotenv_loaded", key=None, source="dotenv", path=self.loaded_path, keys=sorted(self._values))
                break
        else:
            log_debug("dotenv_not_found", key=None, source="dotenv", path=None)

    def lookup(self, key: str) -> str | None:
        """Return the environment value for *key*, else the dotenv value.

        Examples
        --------
        >>> from tempfile import TemporaryDirectory
        >>> tmp = TemporaryDirectory()
        >>> _ = (Path(tmp.name) / '.env').write_text('APP_PORT=9000\\nAPP_HOST=local\\n', encoding='utf-8')
        >>> env = DotEnvLookup(start_dir=tmp.name, environ={'APP_PORT': '8080'})
        >>> env.lookup('APP_PORT'), env.lookup('APP_HOST'), env.lookup('APP_USER')
        ('8080', 'local', None)
        >>> tmp.cleanup()
        """

        value = self._environ.get(key)
        if value is not None:
            return value
        return self._values.get(key)

    def keys(self) -> Iterator[str]:
        """Iterate over every key visible through either layer."""

        return iter(set(self._environ) | set(self._values))


def _iter_candidates(start_dir: str | None) -> Iterable[Path]:
    """Yield candidate dotenv paths walking from ``start_dir`` to filesystem root.

    Examples
    --------
    >>> next(iter(_iter_candidates('.'))).name
    '.env'
    """

    base = Path(start_dir) if start_dir else Path.cwd()
    for directory in [base, *base.parents]:
        yield directory / ".env"


def _parse_dotenv(path: Path) -> dict[str, str]:
    """Parse ``path`` into a flat dictionary, raising ``InvalidFormat`` on malformed lines.

    Blank lines and ``#`` comments are skipped; an optional ``export`` keyword
    before the key is accepted.
    """

    result: dict[str, str] = {}
    with path.open("r", encoding="utf-8") as handle:
        for line_number, raw_line in enumerate(handle, start=1):
            line = raw_line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                log_error("dotenv_invalid_line", key=None, source="dotenv", path=str(path), line=line_number)
                raise InvalidFormat(f"Malformed line {line_number} in {path}")
            key, value = line.split("=", 1)
            key = key.strip()
            if key.startswith("export "):
                key = key[len("export ") :].strip()
            if not key:
                log_error("dotenv_invalid_line", key=None, source="dotenv", path=str(path), line=line_number)
                raise InvalidFormat(f"Missing key on line {line_number} in {path}")
            result[key] = _strip_quotes(value.strip())
    return result


def _strip_quotes(value: str) -> str:
    """Trim surrounding quotes and inline comments from ``value``.

    Examples
    --------
    >>> _strip_quotes('"token"')
    'token'
    >>> _strip_quotes("value # comment")
    'value'
    """

    if len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "'"}:
        return value[1:-1]
    if value.startswith("#"):
        return ""
    if " #" in value:
        return value.split(" #", 1)[0].strip()
    return value
