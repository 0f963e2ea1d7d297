"""End-to-end coverage of :func:`lib_env_binder.process`.

The scenarios exercise the public entry point with the default adapters (a
mapping-backed environment and the real filesystem) and mirror the behaviour
documented in the README.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from pathlib import Path

import pytest

from lib_env_binder import (
    AggregatedError,
    ConfigError,
    ParseError,
    RequiredMissing,
    UsageError,
    check_disallowed,
    process,
)
from lib_env_binder.domain.errors import UnknownVariable, UnsupportedShape
from lib_env_binder.testing import MemoryFiles
from tests.support import (
    Broken,
    Composites,
    Derived,
    FrozenSettings,
    Hooks,
    Named,
    Node,
    Policies,
    Scalars,
    Secrets,
    Service,
    Unsupported,
)


def test_scalars_round_trip() -> None:
    settings = Scalars()
    process(
        "myapp",
        settings,
        lookup={
            "MYAPP_DEBUG": "true",
            "MYAPP_PORT": "8080",
            "MYAPP_RATE": "0.5",
            "MYAPP_USER": "Kelsey",
            "MYAPP_TIMEOUT": "3m",
            "MYAPP_TOKEN": "abc",
            "MYAPP_SMALL": "-5",
            "MYAPP_COUNT": "42",
            "MYAPP_RATIO": "0.25",
        },
    )
    assert settings == Scalars(
        debug=True,
        port=8080,
        rate=0.5,
        user="Kelsey",
        timeout=timedelta(seconds=180),
        token=b"abc",
        small=-5,
        count=42,
        ratio=0.25,
    )


def test_prefix_is_case_insensitive() -> None:
    settings = Scalars()
    process("MyApp", settings, lookup={"MYAPP_PORT": "1"})
    assert settings.port == 1


def test_unset_optional_fields_keep_their_values() -> None:
    settings = Scalars(port=99)
    process("myapp", settings, lookup={})
    assert settings.port == 99
    assert settings.ratio is None


def test_composites() -> None:
    settings = Composites()
    process(
        "myapp",
        settings,
        lookup={
            "MYAPP_ADMIN_USERS": "rob,ken,robert",
            "MYAPP_MAGIC_NUMBERS": "5,10,20",
            "MYAPP_COLOR_CODES": "red:1,green:2,blue:3",
            "MYAPP_WEIGHTS": "0.5,1.5",
            "MYAPP_TIMEOUTS": "1s,1m",
        },
    )
    assert settings.admin_users == ["rob", "ken", "robert"]
    assert settings.magic_numbers == [5, 10, 20]
    assert settings.color_codes == {"red": 1, "green": 2, "blue": 3}
    assert settings.weights == (0.5, 1.5)
    assert settings.timeouts == [timedelta(seconds=1), timedelta(minutes=1)]


def test_empty_sequence_value() -> None:
    settings = Composites(admin_users=["stale"])
    process("myapp", settings, lookup={"MYAPP_ADMIN_USERS": ""})
    assert settings.admin_users == []


def test_mapping_entry_without_colon_is_parse_error() -> None:
    settings = Composites()
    with pytest.raises(ParseError) as excinfo:
        process("myapp", settings, lookup={"MYAPP_COLOR_CODES": "red:1,green"})
    assert excinfo.value.key == "MYAPP_COLOR_CODES"
    assert settings.color_codes == {}


def test_name_derivation() -> None:
    settings = Named()
    process(
        "myapp",
        settings,
        lookup={
            "MYAPP_AUTO_SPLIT_VAR": "split",
            "MYAPP_MULTIWORDVAR": "joined",
            "MYAPP_HTTP_SERVER_ADDR": ":80",
        },
    )
    assert settings.AutoSplitVar == "split"
    assert settings.MultiWordVar == "joined"
    assert settings.HTTPServerAddr == ":80"


def test_split_name_not_bound_to_unsplit_key() -> None:
    settings = Named()
    process("myapp", settings, lookup={"MYAPP_AUTOSPLITVAR": "wrong"})
    assert settings.AutoSplitVar == ""


def test_explicit_tag_falls_back_to_bare_key() -> None:
    settings = Named()
    process("myapp", settings, lookup={"SERVICE_HOST": "db.internal"})
    assert settings.service_host == "db.internal"


def test_file_content_beats_plain_variable(tmp_path: Path) -> None:
    secret = tmp_path / "secret"
    secret.write_text("from-file\n", encoding="utf-8")
    settings = Secrets()
    process("myapp", settings, lookup={"MYAPP_SECRET": "plain", "MYAPP_SECRET_FILE": str(secret)})
    assert settings.secret == "from-file"


def test_missing_file_falls_back_to_plain_variable(tmp_path: Path) -> None:
    settings = Secrets()
    process(
        "myapp",
        settings,
        lookup={"MYAPP_SECRET": "plain", "MYAPP_SECRET_FILE": str(tmp_path / "does-not-exist")},
    )
    assert settings.secret == "plain"


def test_invalid_file_path_falls_back_to_plain_variable() -> None:
    settings = Secrets()
    process("myapp", settings, lookup={"MYAPP_SECRET": "plain", "MYAPP_SECRET_FILE": "bad\x00path"})
    assert settings.secret == "plain"


def test_file_fallback_with_custom_reader() -> None:
    settings = Secrets()
    process(
        "myapp",
        settings,
        lookup={"MYAPP_API_KEY_PATH": "/run/key"},
        reader=MemoryFiles({"/run/key": "k-123\n"}),
    )
    assert settings.api_key == "k-123"


def test_file_path_key_is_not_logged_with_value(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="lib_env_binder")
    secret = tmp_path / "secret"
    secret.write_text("hunter2", encoding="utf-8")
    process("myapp", Secrets(), lookup={"MYAPP_SECRET_FILE": str(secret)})
    resolved = [record for record in caplog.records if record.getMessage() == "env_value_resolved"]
    assert any(record.context["source"] == "file" for record in resolved)
    assert all("hunter2" not in str(record.context) for record in caplog.records)


def test_required_present_but_empty_is_accepted() -> None:
    settings = Policies()
    process("myapp", settings, lookup={"MYAPP_REQUIRED_VAR": ""})
    assert settings.required_var == ""


def test_required_non_text_field_present_but_empty_is_accepted() -> None:
    settings = Broken(port=7)
    process("myapp", settings, lookup={"MYAPP_PORT": "", "MYAPP_WORKERS": "4"})
    assert (settings.port, settings.workers) == (7, 4)


def test_optional_non_text_field_set_empty_is_parse_error() -> None:
    with pytest.raises(ParseError) as excinfo:
        process("myapp", Broken(), lookup={"MYAPP_PORT": "1", "MYAPP_WORKERS": ""})
    assert excinfo.value.key == "MYAPP_WORKERS"


def test_required_missing_is_reported() -> None:
    with pytest.raises(RequiredMissing) as excinfo:
        process("myapp", Policies(), lookup={})
    assert str(excinfo.value) == "required key MYAPP_REQUIRED_VAR missing value"


def test_ignored_field_never_populated() -> None:
    settings = Policies()
    process("myapp", settings, lookup={"MYAPP_REQUIRED_VAR": "x", "MYAPP_IGNORED_VAR": "parseable"})
    assert settings.ignored_var == "untouched"


def test_malformed_optional_value_is_still_an_error() -> None:
    with pytest.raises(ParseError) as excinfo:
        process("myapp", Scalars(), lookup={"MYAPP_PORT": "eighty"})
    assert excinfo.value.field == "Scalars.port"
    assert excinfo.value.value == "eighty"


def test_defaults_apply_only_when_unset() -> None:
    settings = Policies()
    process("myapp", settings, lookup={"MYAPP_REQUIRED_VAR": "x", "MYAPP_DEFAULT_VAR": "override"})
    assert (settings.default_var, settings.default_int, settings.required_default) == ("override", 42, "fallback")


def test_value_overriding_a_default_is_still_coerced() -> None:
    with pytest.raises(ParseError):
        process("myapp", Policies(), lookup={"MYAPP_REQUIRED_VAR": "x", "MYAPP_DEFAULT_INT": "NaN"})


def test_single_failure_is_not_wrapped() -> None:
    with pytest.raises(RequiredMissing):
        process("myapp", Broken(), lookup={"MYAPP_WORKERS": "4"})


def test_multiple_failures_are_aggregated() -> None:
    settings = Broken()
    with pytest.raises(AggregatedError) as excinfo:
        process("myapp", settings, lookup={"MYAPP_WORKERS": "four", "MYAPP_RATIO": "0.75"})
    kinds = [type(error) for error in excinfo.value.errors]
    assert kinds == [RequiredMissing, ParseError]
    assert settings.ratio == 0.75


def test_every_failure_is_a_config_error() -> None:
    with pytest.raises(ConfigError):
        process("myapp", Broken(), lookup={})


def test_nested_and_embedded_records() -> None:
    service = Service()
    process(
        "shop",
        service,
        lookup={"SHOP_REGION": "eu-west", "SHOP_DB_HOST": "pg", "SHOP_DB_PORT": "6543", "SHOP_NAME": "cart"},
    )
    assert service.common.region == "eu-west"
    assert service.db.host == "pg"
    assert service.db.port == 6543
    assert service.replica is not None
    assert service.name == "cart"


def test_inherited_fields_share_prefix() -> None:
    derived = Derived()
    process("shop", derived, lookup={"SHOP_REGION": "us", "SHOP_ZONE": "b"})
    assert (derived.region, derived.zone) == ("us", "b")


def test_hooks() -> None:
    hooks = Hooks()
    process(
        "app",
        hooks,
        lookup={"APP_LEVEL": "WARNING", "APP_ENDPOINT": "cache:6379", "APP_BOTH": "v", "APP_LEVELS": "debug,error"},
    )
    assert hooks.level.name == "warning"
    assert hooks.endpoint is not None and (hooks.endpoint.host, hooks.endpoint.port) == ("cache", 6379)
    assert hooks.both is not None and hooks.both.via == "decode:v"
    assert [level.name for level in hooks.levels] == ["debug", "error"]


def test_hook_failure_surfaces_as_parse_error() -> None:
    with pytest.raises(ParseError) as excinfo:
        process("app", Hooks(), lookup={"APP_LEVEL": "loud"})
    assert isinstance(excinfo.value.cause, ValueError)
    assert "unknown level" in str(excinfo.value)


def test_unsupported_shape_fails_whether_or_not_a_value_resolves() -> None:
    with pytest.raises(ParseError) as unset:
        process("app", Unsupported(), lookup={})
    assert isinstance(unset.value.cause, UnsupportedShape)
    assert unset.value.key == "APP_TAGS"
    with pytest.raises(ParseError) as present:
        process("app", Unsupported(), lookup={"APP_TAGS": "1,2"})
    assert isinstance(present.value.cause, UnsupportedShape)
    assert present.value.value == "1,2"


@pytest.mark.parametrize("target", [Scalars, {"port": 1}, None, "Scalars", 42])
def test_non_record_targets_are_usage_errors(target: object) -> None:
    with pytest.raises(UsageError):
        process("app", target, lookup={})


def test_frozen_record_is_usage_error() -> None:
    with pytest.raises(UsageError, match="frozen"):
        process("app", FrozenSettings(), lookup={"APP_PORT": "1"})


def test_recursive_record_is_usage_error_before_any_field() -> None:
    node = Node()
    with pytest.raises(UsageError):
        process("app", node, lookup={"APP_NAME": "root"})
    assert node.name == ""


def test_invalid_lookup_is_usage_error() -> None:
    with pytest.raises(UsageError):
        process("app", Scalars(), lookup=42)  # type: ignore[arg-type]


def test_reads_process_environment_by_default(monkeypatch) -> None:
    monkeypatch.setenv("LIBENVBINDERTEST_PORT", "7070")
    settings = Scalars()
    process("libenvbindertest", settings)
    assert settings.port == 7070


def test_empty_prefix_uses_bare_keys() -> None:
    settings = Scalars()
    process("", settings, lookup={"PORT": "9"})
    assert settings.port == 9


def test_check_disallowed() -> None:
    check_disallowed("myapp", Secrets, environ={"MYAPP_SECRET": "x", "MYAPP_SECRET_FILE": "/s", "HOME": "/root"})
    with pytest.raises(UnknownVariable) as excinfo:
        check_disallowed("myapp", Secrets(), environ={"MYAPP_SECRET": "x", "MYAPP_SECRT": "typo"})
    assert excinfo.value.keys == ("MYAPP_SECRT",)
