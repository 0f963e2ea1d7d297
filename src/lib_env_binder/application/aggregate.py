"""Error aggregator collecting per-field binding failures.

Purpose
-------
Let the walker keep going after a field fails so one call reports every
problem, then collapse the collected failures into a single outcome:

* no failure: nothing is raised;
* one failure: that :class:`BindingError` is raised as-is, keeping its precise
  message;
* several failures: an :class:`AggregatedError` listing all of them.
"""

from __future__ import annotations

from ..domain.errors import AggregatedError, BindingError
from ..observability import log_debug, make_event


class ErrorCollector:
    """Accumulate :class:`BindingError` instances during one walk."""

    def __init__(self) -> None:
        self._errors: list[BindingError] = []

    def add(self, error: BindingError) -> None:
        log_debug("field_binding_failed", **make_event(error.key, None, {"field": error.field, "error": type(error).__name__}))
        self._errors.append(error)

    @property
    def errors(self) -> tuple[BindingError, ...]:
        return tuple(self._errors)

    def __len__(self) -> int:
        return len(self._errors)

    def raise_if_any(self) -> None:
        """Raise the collected outcome, if any.

        Examples
        --------
        >>> from lib_env_binder.domain.errors import RequiredMissing
        >>> collector = ErrorCollector()
        >>> collector.raise_if_any()
        >>> collector.add(RequiredMissing(field='S.port', key='APP_PORT'))
        >>> collector.raise_if_any()
        Traceback (most recent call last):
        ...
        lib_env_binder.domain.errors.RequiredMissing: required key APP_PORT missing value
        """

        if not self._errors:
            return
        if len(self._errors) == 1:
            raise self._errors[0]
        raise AggregatedError(self._errors)
