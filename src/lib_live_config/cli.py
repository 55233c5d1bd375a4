"""CLI adapter for ``lib_live_config`` built on ``lib_cli_exit_tools``.

Purpose
-------
Let operators inspect merged configuration, check required keys, and follow
live reloads from a shell without writing Python code.

Contents
--------
* :data:`CLICK_CONTEXT_SETTINGS` – shared Click settings ensuring ``-h`` works.
* :func:`cli` – root command that wires traceback handling into
  ``lib_cli_exit_tools``.
* :func:`cli_info` – prints distribution metadata.
* :func:`cli_env_prefix` – exposes :func:`lib_live_config.core.default_env_prefix`.
* :func:`cli_dump` – prints the merged configuration as JSON.
* :func:`cli_get` – prints one typed value.
* :func:`cli_validate` – checks that required keys exist.
* :func:`cli_watch` – prints the configuration after every applied reload.
* :func:`main` – entry point used by ``console_scripts`` registration.

System Role
-----------
The outermost layer. It composes sources through
:func:`lib_live_config.builder.read_config` and
:class:`lib_live_config.watcher.ConfigWatcher` and never reaches into adapters
directly. ``lib_cli_exit_tools`` centralises the exit code strategy.
"""

from __future__ import annotations

import json
import sys
from importlib import metadata
from pathlib import Path
from typing import Any, Final, Optional, Sequence

import lib_cli_exit_tools
import rich_click as click

from .application.store import ConfigStore
from .builder import read_config
from .core import default_env_prefix as _default_env_prefix
from .watcher import ConfigWatcher

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_TRACEBACK_SUMMARY_LIMIT: Final[int] = 500
_TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000

VALUE_TYPES: Final[tuple[str, ...]] = ("string", "int", "float", "bool", "raw")

_file_option = click.option(
    "--file",
    "files",
    multiple=True,
    type=click.Path(path_type=Path, dir_okay=False),
    help="Configuration file (JSON/TOML/YAML); repeat in precedence order, last wins",
)
_env_prefix_option = click.option(
    "--env-prefix",
    default=None,
    help="Also merge environment variables starting with this prefix (APP -> APP_DB__HOST)",
)


def _resolve_version() -> str:
    """Return the installed package version, ``"0.0.0"`` for source checkouts."""

    try:
        return metadata.version("lib_live_config")
    except metadata.PackageNotFoundError:
        return "0.0.0"


def _load(files: Sequence[Path], env_prefix: Optional[str]) -> ConfigStore:
    return read_config(*files, env_prefix=env_prefix)


@click.group(
    help="Hierarchical configuration store with live reload",
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=False,
)
@click.version_option(
    version=_resolve_version(),
    prog_name="lib_live_config",
    message="lib_live_config version %(version)s",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool) -> None:
    """Root command storing the traceback preference for all subcommands.

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
        meta = metadata.metadata("lib_live_config")
    except metadata.PackageNotFoundError:
        click.echo("lib_live_config (metadata unavailable)")
        return
    click.echo(f"Info for {meta.get('Name', 'lib_live_config')}:")
    click.echo(f"  Version         : {meta.get('Version', _resolve_version())}")
    click.echo(f"  Requires-Python : {meta.get('Requires-Python', '>=3.10')}")
    summary = meta.get("Summary")
    if summary:
        click.echo(f"  Summary         : {summary}")


@cli.command("env-prefix", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("slug")
def cli_env_prefix(slug: str) -> None:
    """Compute the canonical environment prefix for *slug*.

    Examples
    --------
    >>> from click.testing import CliRunner
    >>> result = CliRunner().invoke(cli, ["env-prefix", "config-kit"])
    >>> result.output.strip()
    'CONFIG_KIT'
    """

    click.echo(_default_env_prefix(slug))


@cli.command("dump", context_settings=CLICK_CONTEXT_SETTINGS)
@_file_option
@_env_prefix_option
@click.option("--indent", type=int, default=None, help="Pretty-print JSON output with the provided indent size")
def cli_dump(files: Sequence[Path], env_prefix: Optional[str], indent: Optional[int]) -> None:
    """Merge the given sources and print the result as JSON."""

    click.echo(_load(files, env_prefix).to_json(indent=indent))


@cli.command("get", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("key")
@_file_option
@_env_prefix_option
@click.option(
    "--type",
    "value_type",
    type=click.Choice(VALUE_TYPES, case_sensitive=False),
    default="string",
    show_default=True,
    help="Coerce the value before printing; raw prints JSON",
)
def cli_get(key: str, files: Sequence[Path], env_prefix: Optional[str], value_type: str) -> None:
    """Print the value stored at dotted KEY."""

    config = _load(files, env_prefix)
    click.echo(_render(config, key, value_type.lower()))


@cli.command("validate", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("keys", nargs=-1, required=True)
@_file_option
@_env_prefix_option
@click.option("--all/--first", "report_all", default=False, help="Report every missing key instead of the first")
def cli_validate(keys: Sequence[str], files: Sequence[Path], env_prefix: Optional[str], report_all: bool) -> None:
    """Fail unless every KEY resolves in the merged configuration."""

    config = _load(files, env_prefix)
    if report_all:
        config.validate_all(keys)
    else:
        config.validate(keys)
    click.echo(f"ok: {len(keys)} key(s) present")


@cli.command("watch", context_settings=CLICK_CONTEXT_SETTINGS)
@_file_option
@click.option("--interval", type=float, default=1.0, show_default=True, help="Poll interval in seconds")
@click.option("--debounce", type=float, default=0.05, show_default=True, help="Event coalescing window in seconds")
@click.option("--indent", type=int, default=None, help="Pretty-print JSON output with the provided indent size")
def cli_watch(files: Sequence[Path], interval: float, debounce: float, indent: Optional[int]) -> None:
    """Print the merged configuration, then again after every reload (Ctrl+C to exit)."""

    if not files:
        raise click.UsageError("watch requires at least one --file")
    config = _load(files, None)
    click.echo(config.to_json(indent=indent))
    watcher = ConfigWatcher(config, interval, *files, debounce=debounce)
    watcher.on_reload(lambda updated: click.echo(updated.to_json(indent=indent)))
    try:
        watcher.start()
    except KeyboardInterrupt:
        watcher.stop()


def _render(config: ConfigStore, key: str, value_type: str) -> Any:
    """Return the printable form of *key* for the requested *value_type*."""

    if value_type == "int":
        return config.get_int(key)
    if value_type == "float":
        return config.get_float(key)
    if value_type == "bool":
        return "true" if config.get_bool(key) else "false"
    if value_type == "raw":
        return json.dumps(config.get_value(key), ensure_ascii=False, default=str)
    return config.get_string(key)


def main(argv: Optional[Sequence[str]] = None, *, restore_traceback: bool = True) -> int:
    """Execute the CLI with shared exit handling and return the exit code."""

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        try:
            return lib_cli_exit_tools.run_cli(
                cli,
                argv=list(argv) if argv is not None else None,
                prog_name="lib_live_config",
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
