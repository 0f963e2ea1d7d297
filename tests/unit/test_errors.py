from __future__ import annotations

from lib_env_binder.domain.errors import (
    AggregatedError,
    BindingError,
    ConfigError,
    InvalidFormat,
    InvalidValue,
    ParseError,
    RequiredMissing,
    UnknownVariable,
    UnsupportedShape,
    UsageError,
)


def test_error_hierarchy() -> None:
    for cls in (UsageError, BindingError, AggregatedError, UnknownVariable, InvalidFormat):
        assert issubclass(cls, ConfigError)
    assert issubclass(RequiredMissing, BindingError)
    assert issubclass(ParseError, BindingError)
    assert issubclass(UsageError, TypeError)
    assert issubclass(UnsupportedShape, InvalidValue)
    assert issubclass(InvalidValue, ValueError)


def test_required_missing_message() -> None:
    error = RequiredMissing(field="Settings.port", key="APP_PORT")
    assert str(error) == "required key APP_PORT missing value"
    assert error.field == "Settings.port"
    assert error.key == "APP_PORT"


def test_parse_error_message_carries_context() -> None:
    cause = ValueError("invalid syntax")
    error = ParseError(field="Settings.port", key="APP_PORT", type_name="int", value="abc", cause=cause)
    assert str(error) == "assigning APP_PORT to Settings.port: converting 'abc' to type int. details: invalid syntax"
    assert error.cause is cause
    assert error.value == "abc"


def test_aggregated_error_lists_every_failure() -> None:
    first = RequiredMissing(field="S.a", key="APP_A")
    second = ParseError(field="S.b", key="APP_B", type_name="int", value="x", cause=ValueError("bad"))
    error = AggregatedError([first, second])
    assert error.errors == (first, second)
    assert str(error).splitlines()[0] == "2 configuration errors:"
    assert "required key APP_A missing value" in str(error)
    assert "converting 'x' to type int" in str(error)


def test_unknown_variable_sorts_keys() -> None:
    error = UnknownVariable(["APP_B", "APP_A"])
    assert error.keys == ("APP_A", "APP_B")
    assert str(error) == "unknown environment variable(s): APP_A, APP_B"
