"""Public package surface for binding environment variables into dataclasses.

Describe configuration as a dataclass, tag fields with :func:`setting`, and
call :func:`process` to populate an instance from the environment. Errors share
the :class:`ConfigError` base so startup code can treat any failure as fatal.
"""

from __future__ import annotations

from .adapters.dotenv.default import DotEnvLookup
from .adapters.env.default import DefaultEnvLookup, default_env_prefix
from .adapters.files.default import DefaultFileReader
from .application.ports import EnvLookup, FileReader
from .core import check_disallowed, process, usage
from .domain.errors import (
    AggregatedError,
    BindingError,
    ConfigError,
    InvalidFormat,
    ParseError,
    RequiredMissing,
    UnknownVariable,
    UsageError,
)
from .domain.shapes import (
    Decoder,
    Float32,
    Float64,
    FloatBits,
    Int8,
    Int16,
    Int32,
    Int64,
    IntBits,
    Setter,
    Uint8,
    Uint16,
    Uint32,
    Uint64,
)
from .domain.tags import setting
from .observability import bind_trace_id, get_logger

__all__ = [
    "process",
    "usage",
    "check_disallowed",
    "setting",
    "Decoder",
    "Setter",
    "IntBits",
    "FloatBits",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "Uint8",
    "Uint16",
    "Uint32",
    "Uint64",
    "Float32",
    "Float64",
    "EnvLookup",
    "FileReader",
    "DefaultEnvLookup",
    "DotEnvLookup",
    "DefaultFileReader",
    "default_env_prefix",
    "ConfigError",
    "UsageError",
    "BindingError",
    "RequiredMissing",
    "ParseError",
    "AggregatedError",
    "UnknownVariable",
    "InvalidFormat",
    "bind_trace_id",
    "get_logger",
]
