"""CLI adapter for ``lib_config_pipeline`` built on ``lib_cli_exit_tools``.

Purpose
-------
Expose the bootstrap pipeline and the check registry on the command line so
operators can see what a service would resolve, and try route checks, without
writing Python.

Contents
--------
* :data:`CLICK_CONTEXT_SETTINGS` – shared Click settings ensuring ``-h`` works.
* :func:`cli` – root command wiring traceback handling into ``lib_cli_exit_tools``.
* :func:`cli_info` – prints distribution metadata.
* :func:`cli_resolve` – runs :func:`lib_config_pipeline.core.resolve_config`
  and prints the store as JSON, optionally with provenance.
* :func:`cli_check` – evaluates a check expression against a value.
* :func:`cli_runtime_mode` – prints the detected runtime mode.
* :func:`cli_env_key` – shows which key an ``ENV_`` variable maps to.
* :func:`main` – entry point used by ``console_scripts`` registration.

System Role
-----------
Outermost layer. It only calls the composition root and public helpers;
``lib_cli_exit_tools`` turns exceptions into exit codes for every command.
"""

from __future__ import annotations

import json
import sys
from importlib import metadata
from typing import Final, Optional, Sequence

import lib_cli_exit_tools
import rich_click as click

from .adapters.env.default import env_key as _env_key
from .adapters.runtime.default import detect_runtime_mode
from .application.checks import compile_check
from .application.resolve import CONFIG_DATA_KEY
from .core import default_registry, resolve_config
from .domain.errors import ConfigError

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_PASSTHROUGH_CONTEXT_SETTINGS = {**CLICK_CONTEXT_SETTINGS, "ignore_unknown_options": True}
_TRACEBACK_SUMMARY_LIMIT: Final[int] = 500
_TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000


def _resolve_version() -> str:
    """Return the installed package version, ``"0.0.0"`` when not installed."""

    try:
        return metadata.version("lib_config_pipeline")
    except metadata.PackageNotFoundError:
        return "0.0.0"


@click.group(
    help="Bootstrap configuration resolver",
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=False,
)
@click.version_option(
    version=_resolve_version(),
    prog_name="lib_config_pipeline",
    message="lib_config_pipeline version %(version)s",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool) -> None:
    """Root command storing the traceback preference for all subcommands."""

    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print basic distribution metadata so users can confirm installation."""

    try:
        meta = metadata.metadata("lib_config_pipeline")
    except metadata.PackageNotFoundError:
        click.echo("lib_config_pipeline (metadata unavailable)")
        return
    click.echo(f"Info for {meta.get('Name', 'lib_config_pipeline')}:")
    click.echo(f"  Version         : {meta.get('Version', _resolve_version())}")
    click.echo(f"  Requires-Python : {meta.get('Requires-Python', '>=3.10')}")
    summary = meta.get("Summary")
    if summary:
        click.echo(f"  Summary         : {summary}")


@cli.command("resolve", context_settings=_PASSTHROUGH_CONTEXT_SETTINGS)
@click.option(
    "--source",
    "sources",
    multiple=True,
    help="Source descriptor (path, file://, http://, https://); repeat for fallbacks",
)
@click.option(
    "--runtime-mode",
    default=None,
    help="Override the detected runtime mode applied after the enabled modes",
)
@click.option(
    "--indent",
    type=int,
    default=None,
    help="Pretty-print JSON output with the provided indent size",
)
@click.option(
    "--provenance/--no-provenance",
    default=False,
    help="Include the stage that last wrote each key",
)
@click.argument("overrides", nargs=-1, type=click.UNPROCESSED)
def cli_resolve(
    sources: Sequence[str],
    runtime_mode: Optional[str],
    indent: Optional[int],
    provenance: bool,
    overrides: Sequence[str],
) -> None:
    """Resolve configuration and print the result as JSON.

    Extra ``--key=value`` tokens are applied exactly like process arguments,
    and ``ENV_*`` variables from the current environment are honoured. The raw
    ``keys.configdata`` payload is left out of the output.
    """

    store = resolve_config(
        sources=list(sources) if sources else None,
        argv=list(overrides),
        runtime_mode=runtime_mode,
    )
    data = store.as_dict()
    reserved = data.get("keys")
    if isinstance(reserved, dict):
        reserved.pop("configdata", None)
    if provenance:
        meta = {key: info for key, info in store.provenance().items() if key != CONFIG_DATA_KEY}
        payload = {"config": data, "provenance": meta}
        click.echo(json.dumps(payload, indent=indent, separators=(",", ":"), default=str))
        return
    click.echo(json.dumps(data, indent=indent, separators=(",", ":"), default=str))


@cli.command("check", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("expression")
@click.argument("value")
def cli_check(expression: str, value: str) -> None:
    """Evaluate the check EXPRESSION (``isnum``, ``min:5``, ``regexp:^a``) against VALUE.

    Examples
    --------
    >>> from click.testing import CliRunner
    >>> CliRunner().invoke(cli, ["check", "min:5", "10"]).output.strip()
    'true'
    """

    try:
        predicate = compile_check(expression, default_registry())
    except ConfigError as exc:
        raise click.BadParameter(str(exc), param_hint="EXPRESSION") from exc
    click.echo("true" if predicate(value) else "false")


@cli.command("runtime-mode", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_runtime_mode() -> None:
    """Print the runtime mode whose ``mods`` overlay is applied last."""

    click.echo(detect_runtime_mode())


@cli.command("env-key", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("name")
def cli_env_key(name: str) -> None:
    """Print the dotted configuration key the environment variable NAME sets."""

    key = _env_key(name)
    if key is None:
        raise click.BadParameter("environment variables must start with ENV_", param_hint="NAME")
    click.echo(key)


def main(argv: Optional[Sequence[str]] = None, *, restore_traceback: bool = True) -> int:
    """Execute the CLI with shared exit handling and return the exit code."""

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        try:
            return lib_cli_exit_tools.run_cli(
                cli,
                argv=list(argv) if argv is not None else None,
                prog_name="lib_config_pipeline",
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
