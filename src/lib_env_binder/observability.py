"""Structured logging for the binding engine.

Purpose
    Report how each field was resolved (which key, which source) so operators
    can diagnose startup configuration without the library choosing a logging
    backend for them.

Contents
    - ``TRACE_ID``: context variable carrying the active trace identifier.
    - ``get_logger``: the package logger, silent until a host attaches handlers.
    - ``bind_trace_id``: set or clear the trace identifier.
    - ``log_debug`` / ``log_info`` / ``log_error``: level-specific emitters.
    - ``make_event``: builds the ``key``/``source`` payload shared by events.

System Integration
    The walker, the file fallback, the adapters and the composition root log
    through these helpers. Resolved values are never part of an event, only
    the key and the source that supplied it.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any, Final, Mapping

TRACE_ID: ContextVar[str | None] = ContextVar("lib_env_binder_trace_id", default=None)
"""Trace identifier attached to every event emitted in the current context."""

_LOGGER: Final[logging.Logger] = logging.getLogger("lib_env_binder")
_LOGGER.addHandler(logging.NullHandler())


def get_logger() -> logging.Logger:
    """Return the package logger so applications can attach handlers."""

    return _LOGGER


def bind_trace_id(trace_id: str | None) -> None:
    """Bind or clear the active trace identifier.

    Why
        Lets a host correlate binding events with its own request or startup
        spans.
    Side Effects
        Mutates :data:`TRACE_ID` for the current context; ``None`` clears it.

    Examples
    --------
    >>> bind_trace_id('boot-1')
    >>> TRACE_ID.get()
    'boot-1'
    >>> bind_trace_id(None)
    >>> TRACE_ID.get() is None
    True
    """

    TRACE_ID.set(trace_id)


def log_debug(message: str, **fields: Any) -> None:
    _emit(logging.DEBUG, message, fields)


def log_info(message: str, **fields: Any) -> None:
    _emit(logging.INFO, message, fields)


def log_error(message: str, **fields: Any) -> None:
    _emit(logging.ERROR, message, fields)


def make_event(
    key: str | None,
    source: str | None,
    payload: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Build the structured payload for a resolution event.

    Inputs
        key: Environment key being resolved, if any.
        source: ``env``, ``alt``, ``file``, ``default`` or ``None``.
        payload: Extra diagnostic fields merged after ``key`` and ``source``.

    Examples
    --------
    >>> make_event('APP_PORT', 'env', {'field': 'Settings.port'})
    {'key': 'APP_PORT', 'source': 'env', 'field': 'Settings.port'}
    """

    event: dict[str, Any] = {"key": key, "source": source}
    if payload:
        event.update(payload)
    return event


def _emit(level: int, message: str, fields: Mapping[str, Any]) -> None:
    """Log *message* with *fields* and the trace identifier under ``extra['context']``."""

    context = {"trace_id": TRACE_ID.get(), **fields}
    _LOGGER.log(level, message, extra={"context": context})
