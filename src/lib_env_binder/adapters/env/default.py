"""Environment variable adapter.

Purpose
-------
Implement the :class:`lib_env_binder.application.ports.EnvLookup` port on top
of the process environment (or any mapping supplied for testability).

Contents
--------
* :func:`default_env_prefix` – canonical prefix for an application slug.
* :class:`DefaultEnvLookup` – mapping-backed lookup.
"""

from __future__ import annotations

import os
from collections.abc import Iterator, Mapping


def default_env_prefix(slug: str) -> str:
    """Return the canonical environment prefix for *slug*.

    Why
    ----
    Namespacing keeps unrelated environment variables out of the binding.

    Examples
    --------
    >>> default_env_prefix('lib-env-binder')
    'LIB_ENV_BINDER'
    """

    return slug.replace("-", "_").upper()


class DefaultEnvLookup:
    """Resolve keys against ``os.environ`` or an explicit mapping."""

    def __init__(self, *, environ: Mapping[str, str] | None = None) -> None:
        """Initialise the lookup with a specific ``environ`` mapping for testability.

        Parameters
        ----------
        environ:
            Mapping to read from. Defaults to :data:`os.environ`, read live on
            every lookup.
        """

        self._environ = os.environ if environ is None else environ

    def lookup(self, key: str) -> str | None:
        """Return the value stored under *key*; an empty string counts as set.

        Examples
        --------
        >>> env = DefaultEnvLookup(environ={'APP_PORT': '8080', 'APP_NAME': ''})
        >>> env.lookup('APP_PORT'), env.lookup('APP_NAME'), env.lookup('APP_HOST')
        ('8080', '', None)
        """

        return self._environ.get(key)

    def keys(self) -> Iterator[str]:
        """Iterate over every key visible to this lookup."""

        return iter(self._environ)
