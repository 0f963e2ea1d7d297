"""Domain-level exception hierarchy.

Purpose
-------
Expose the stable error taxonomy shared by the binding engine, the adapters,
and consuming applications. The hierarchy lives in the domain layer so the
application layer and the CLI can depend on it without creating cycles.

Contents
--------
* :class:`ConfigError` – umbrella base class for every library failure.
* :class:`UsageError` – the caller handed over something that cannot be bound.
* :class:`BindingError` – base for per-field failures.
* :class:`RequiredMissing` / :class:`ParseError` – the two field failures.
* :class:`AggregatedError` – several field failures from one call.
* :class:`UnknownVariable` – prefixed variables nothing binds to.
* :class:`InvalidFormat` – malformed dotenv content.
* :class:`InvalidValue` / :class:`UnsupportedShape` – value-level failures
  raised by the coercer before the walker attaches field identity.

System Role
-----------
Callers catch :class:`ConfigError` to treat every library failure uniformly;
callers that want to report individual fields inspect
:attr:`AggregatedError.errors` or the single :class:`BindingError` raised.
"""

from __future__ import annotations

from typing import Iterable


class ConfigError(Exception):
    """Base type for all exceptions emitted by ``lib_env_binder``.

    Why
    ----
    Provide a single catch-all type for consumers that do not need fine-grained
    handling.
    """


class UsageError(ConfigError, TypeError):
    """Raised when the binding target is not a mutable dataclass instance.

    Why
    ----
    A wrong target is a programming mistake rather than a deployment problem,
    so it aborts the call before any field is read. Subclassing
    :class:`TypeError` keeps ``except TypeError`` handlers working.
    """


class BindingError(ConfigError):
    """Base class for failures attached to a single field.

    Attributes
    ----------
    field:
        Qualified field name (``Settings.db.port``).
    key:
        Primary environment key of the field.
    """

    def __init__(self, message: str, *, field: str, key: str) -> None:
        super().__init__(message)
        self.field = field
        self.key = key


class RequiredMissing(BindingError):
    """A required field resolved no value and carries no default."""

    def __init__(self, *, field: str, key: str) -> None:
        super().__init__(f"required key {key} missing value", field=field, key=key)


class ParseError(BindingError):
    """A resolved raw string could not be coerced into the field's shape.

    Attributes
    ----------
    type_name:
        Human readable name of the declared field type.
    value:
        The raw string that failed to coerce.
    cause:
        Underlying exception raised by the coercer or a decode hook.
    """

    def __init__(self, *, field: str, key: str, type_name: str, value: str, cause: BaseException) -> None:
        message = f"assigning {key} to {field}: converting '{value}' to type {type_name}. details: {cause}"
        super().__init__(message, field=field, key=key)
        self.type_name = type_name
        self.value = value
        self.cause = cause


class AggregatedError(ConfigError):
    """Summarise every field failure from one binding call.

    Examples
    --------
    >>> err = AggregatedError([RequiredMissing(field='S.a', key='APP_A'), RequiredMissing(field='S.b', key='APP_B')])
    >>> print(err)
    2 configuration errors:
      - required key APP_A missing value
      - required key APP_B missing value
    """

    def __init__(self, errors: Iterable[BindingError]) -> None:
        self.errors: tuple[BindingError, ...] = tuple(errors)
        lines = [f"{len(self.errors)} configuration errors:"]
        lines.extend(f"  - {error}" for error in self.errors)
        super().__init__("\n".join(lines))


class UnknownVariable(ConfigError):
    """Raised when prefixed variables exist that no field of the record binds.

    Attributes
    ----------
    keys:
        Sorted tuple of unrecognised environment keys.
    """

    def __init__(self, keys: Iterable[str]) -> None:
        self.keys: tuple[str, ...] = tuple(sorted(keys))
        super().__init__("unknown environment variable(s): " + ", ".join(self.keys))


class InvalidFormat(ConfigError):
    """Raised when a dotenv file cannot be parsed into key/value pairs."""


class InvalidValue(ValueError):
    """Raised by the coercer when a raw string does not fit the target shape."""


class UnsupportedShape(InvalidValue):
    """Raised when a field annotation has no coercion rule."""
