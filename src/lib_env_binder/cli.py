"""CLI adapter for ``lib_env_binder`` built on ``lib_cli_exit_tools``.

Purpose
-------
Let operators inspect how an application reads its environment without writing
Python: which keys a field resolves, which variables a configuration dataclass
understands, and whether the current environment binds cleanly.

Contents
--------
* :data:`CLICK_CONTEXT_SETTINGS` – shared Click settings ensuring ``-h`` works.
* :func:`cli` – root command wiring traceback handling into
  ``lib_cli_exit_tools``.
* :func:`cli_info` – prints distribution metadata.
* :func:`cli_env_prefix` – exposes :func:`default_env_prefix`.
* :func:`cli_key` – shows the candidate keys of a single field.
* :func:`cli_usage` – renders :func:`lib_env_binder.core.usage` for a dataclass.
* :func:`cli_check` – binds a dataclass from the environment and prints it.
* :func:`main` – entry point used by ``console_scripts`` registration.

System Role
-----------
The CLI lives in the outermost layer. It calls the composition root and the
key resolver and never reaches into adapter internals.
"""

from __future__ import annotations

import dataclasses
import importlib
import json
import sys
from datetime import timedelta
from importlib import metadata
from pathlib import Path
from typing import Any, Final, Optional, Sequence

import lib_cli_exit_tools
import rich_click as click

from .adapters.dotenv.default import DotEnvLookup
from .adapters.env.default import DefaultEnvLookup
from .adapters.env.default import default_env_prefix as _default_env_prefix
from .application.keys import resolve_keys
from .application.usage import USAGE_STYLES
from .core import check_disallowed, process, usage
from .domain.tags import TagSet
from .testing import i_should_fail

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_TRACEBACK_SUMMARY_LIMIT: Final[int] = 500
_TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000


def _resolve_version() -> str:
    """Return the installed package version, ``"0.0.0"`` when not installed."""

    try:
        return metadata.version("lib_env_binder")
    except metadata.PackageNotFoundError:
        return "0.0.0"


@click.group(
    help="Bind environment variables into typed dataclasses",
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=False,
)
@click.version_option(
    version=_resolve_version(),
    prog_name="lib_env_binder",
    message="lib_env_binder version %(version)s",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool) -> None:
    """Root command configuring traceback handling for all subcommands.

    Side Effects
        Mutates ``lib_cli_exit_tools.config.traceback`` and
        ``lib_cli_exit_tools.config.traceback_force_color``.
    """

    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print basic distribution metadata so users can confirm installation."""

    try:
        meta = metadata.metadata("lib_env_binder")
    except metadata.PackageNotFoundError:
        click.echo("lib_env_binder (metadata unavailable)")
        return
    click.echo(f"Info for {meta.get('Name', 'lib_env_binder')}:")
    click.echo(f"  Version         : {meta.get('Version', _resolve_version())}")
    click.echo(f"  Requires-Python : {meta.get('Requires-Python', '>=3.10')}")
    summary = meta.get("Summary")
    if summary:
        click.echo(f"  Summary         : {summary}")


@cli.command("env-prefix", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("slug")
def cli_env_prefix(slug: str) -> None:
    """Compute the canonical environment prefix for *slug*."""

    click.echo(_default_env_prefix(slug))


@cli.command("key", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("name")
@click.option("--prefix", default="", help="Prefix prepended to the derived key")
@click.option("--split-words/--no-split-words", default=False, help="Split CamelCase names into words")
@click.option("--tag", "tag", default=None, help="Explicit envconfig override")
@click.option(
    "--file-content",
    "file_content",
    default=None,
    help="Enable the file-backed key; 'true' for the _FILE marker or a custom marker",
)
def cli_key(name: str, prefix: str, split_words: bool, tag: Optional[str], file_content: Optional[str]) -> None:
    """Print the keys a field called *name* is resolved from, as JSON."""

    metadata_tags: dict[str, object] = {"split_words": split_words}
    if tag:
        metadata_tags["envconfig"] = tag
    if file_content:
        metadata_tags["file_content"] = file_content
    keys = resolve_keys(prefix.upper(), name, TagSet.from_metadata(metadata_tags))
    payload = {"primary": keys.primary, "candidates": list(keys.candidates), "file_key": keys.file_key}
    click.echo(json.dumps(payload, indent=2))


@cli.command("usage", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("target")
@click.option("--prefix", required=True, help="Prefix the application passes to process()")
@click.option(
    "--style",
    type=click.Choice(USAGE_STYLES, case_sensitive=False),
    default="table",
    show_default=True,
    help="Layout of the usage text",
)
def cli_usage(target: str, prefix: str, style: str) -> None:
    """Describe the variables read by TARGET (``module:DataclassName``)."""

    click.echo(usage(prefix, _load_target(target), style=style.lower()), nl=False)


@cli.command("check", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("target")
@click.option("--prefix", required=True, help="Prefix the application passes to process()")
@click.option("--dotenv/--no-dotenv", default=False, help="Fill gaps from the nearest .env file")
@click.option(
    "--start-dir",
    type=click.Path(path_type=Path, exists=True, file_okay=False, dir_okay=True, readable=True),
    default=None,
    help="Starting directory for .env upward search (defaults to CWD)",
)
@click.option("--strict/--no-strict", default=False, help="Fail on prefixed variables no field binds")
@click.option("--indent", type=int, default=None, help="Pretty-print JSON output with the provided indent size")
def cli_check(
    target: str,
    prefix: str,
    dotenv: bool,
    start_dir: Optional[Path],
    strict: bool,
    indent: Optional[int],
) -> None:
    """Bind a fresh TARGET instance from the environment and print it as JSON.

    Binding failures propagate to ``lib_cli_exit_tools`` and end the command
    with a non-zero exit code.
    """

    record_type = _load_target(target)
    lookup = DotEnvLookup(start_dir=str(start_dir) if start_dir else None) if dotenv else DefaultEnvLookup()
    if strict:
        check_disallowed(prefix, record_type, environ=list(lookup.keys()))
    try:
        record = record_type()
    except TypeError as exc:
        raise click.BadParameter(f"{target} cannot be constructed without arguments: {exc}", param_hint="TARGET") from exc
    process(prefix, record, lookup=lookup)
    click.echo(json.dumps(dataclasses.asdict(record), indent=indent, default=_json_default))


@cli.command("fail", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_fail() -> None:
    """Trigger a deterministic error for testing traceback handling."""

    i_should_fail()


def _load_target(reference: str) -> type:
    """Import ``module:Name`` and return the dataclass type it names."""

    module_name, _, attribute = reference.partition(":")
    if not module_name or not attribute:
        raise click.BadParameter("expected the form module:DataclassName", param_hint="TARGET")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise click.BadParameter(f"cannot import {module_name}: {exc}", param_hint="TARGET") from exc
    record_type = getattr(module, attribute, None)
    if not (isinstance(record_type, type) and dataclasses.is_dataclass(record_type)):
        raise click.BadParameter(f"{reference} is not a dataclass", param_hint="TARGET")
    return record_type


def _json_default(value: Any) -> Any:
    """Serialise values :mod:`json` does not know natively."""

    if isinstance(value, timedelta):
        return value.total_seconds()
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def main(argv: Optional[Sequence[str]] = None, *, restore_traceback: bool = True) -> int:
    """Execute the CLI with shared exit handling and return the exit code."""

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        try:
            return lib_cli_exit_tools.run_cli(
                cli,
                argv=list(argv) if argv is not None else None,
                prog_name="lib_env_binder",
            )
        except BaseException as exc:  # noqa: BLE001 - funnel through shared printers
            lib_cli_exit_tools.print_exception_message(
                trace_back=lib_cli_exit_tools.config.traceback,
                length_limit=(
                    _TRACEBACK_VERBOSE_LIMIT if lib_cli_exit_tools.config.traceback else _TRACEBACK_SUMMARY_LIMIT
                ),
            )
            return lib_cli_exit_tools.get_system_exit_code(exc)
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


if __name__ == "__main__":  # pragma: no cover - exercised via console entry point
    raise SystemExit(main(sys.argv[1:]))
