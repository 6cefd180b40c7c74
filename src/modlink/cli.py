"""Root CLI group for modlink with global flags and command registration."""

from __future__ import annotations

from pathlib import Path

import click

from modlink import __version__
from modlink.commands import register_commands
from modlink.commands._context import AppContext
from modlink.config.settings import ModlinkSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="modlink")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "-r",
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Projection root (default: directory holding modlink.toml).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    root: Path | None,
) -> None:
    """modlink — project version-controlled modules into a shared directory tree."""
    ctx.ensure_object(dict)
    settings = ModlinkSettings.from_cli(
        config_path=config_path,
        root=root,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
