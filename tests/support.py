"""Shared configuration records and hook types used across the test-suite.

Records live at module level so ``typing.get_type_hints`` can resolve their
annotations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Optional

from lib_env_binder import Int8, Uint32, setting


@dataclass
class Level:
    """Decoder hook: accepts a fixed set of log level names."""

    name: str = "info"

    def decode(self, value: str) -> None:
        lowered = value.lower()
        if lowered not in {"debug", "info", "warning", "error"}:
            raise ValueError(f"unknown level {value!r}")
        self.name = lowered


class Endpoint:
    """Setter hook: parses ``host:port``."""

    def __init__(self) -> None:
        self.host = ""
        self.port = 0

    def set(self, value: str) -> None:
        host, sep, port = value.partition(":")
        if not sep:
            raise ValueError("expected host:port")
        self.host = host
        self.port = int(port)


class Both:
    """Implements both hooks; ``decode`` must win."""

    def __init__(self) -> None:
        self.via = ""

    def decode(self, value: str) -> None:
        self.via = f"decode:{value}"

    def set(self, value: str) -> None:
        self.via = f"set:{value}"


@dataclass
class Database:
    host: str = "localhost"
    port: int = 5432


@dataclass
class Common:
    region: str = ""


@dataclass
class Scalars:
    debug: bool = False
    port: int = 0
    rate: float = 0.0
    user: str = ""
    timeout: timedelta = timedelta(0)
    token: bytes = b""
    small: Int8 = 0
    count: Uint32 = 0
    ratio: Optional[float] = None


@dataclass
class Composites:
    admin_users: list[str] = field(default_factory=list)
    magic_numbers: list[int] = field(default_factory=list)
    color_codes: dict[str, int] = field(default_factory=dict)
    weights: tuple[float, ...] = ()
    timeouts: list[timedelta] = field(default_factory=list)


@dataclass
class Named:
    AutoSplitVar: str = setting(split_words=True, initial="")
    MultiWordVar: str = ""
    HTTPServerAddr: str = setting(split_words=True, initial="")
    service_host: str = setting(envconfig="SERVICE_HOST", initial="")
    renamed: str = setting(envconfig="other_name", initial="")


@dataclass
class Policies:
    required_var: str = setting(required=True, initial="")
    required_default: str = setting(required=True, default="fallback", initial="")
    default_var: str = setting(default="foobar", initial="")
    default_int: int = setting(default="42", initial=0)
    ignored_var: str = setting(ignored=True, initial="untouched")
    _private: str = "hidden"


@dataclass
class Secrets:
    secret: str = setting(file_content=True, initial="")
    api_key: str = setting(file_content="_PATH", initial="")
    plain: str = ""


@dataclass
class Hooks:
    level: Level = field(default_factory=Level)
    endpoint: Optional[Endpoint] = None
    both: Optional[Both] = None
    levels: list[Level] = field(default_factory=list)


@dataclass
class Service:
    common: Common = setting(embedded=True, initial_factory=Common)
    db: Database = field(default_factory=Database)
    replica: Optional[Database] = None
    name: str = ""


@dataclass
class Derived(Common):
    """Inheritance promotes ``region`` into the same namespace."""

    zone: str = ""


@dataclass
class Broken:
    port: int = setting(required=True, initial=0)
    workers: int = 0
    ratio: float = 0.0


@dataclass
class Unsupported:
    tags: set[int] = field(default_factory=set)


@dataclass(frozen=True)
class FrozenSettings:
    port: int = 0


@dataclass
class Node:
    name: str = ""
    child: Optional["Node"] = None


@dataclass
class NeedsArgs:
    value: str


@dataclass
class HoldsNeedsArgs:
    inner: Optional[NeedsArgs] = None
    other: int = 0
