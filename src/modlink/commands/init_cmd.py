"""Command: projection root initialization (named init_cmd to avoid shadowing builtins)."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from modlink.commands._base import ModlinkCommand
from modlink.infrastructure.vcs import SUPPORTED_CLIENTS

if TYPE_CHECKING:
    from modlink.commands._context import AppContext

_INIT_EXAMPLES = """\
  modlink init
  modlink init /srv/site --repository svn://svn.example.org/modules
  modlink init . --client git --repository https://git.example.org/modules
  modlink init --force"""


@click.command("init", cls=ModlinkCommand, examples=_INIT_EXAMPLES)
@click.argument("path", required=False, default=".")
@click.option("--repository", default="", help="Base URL that module names are appended to.")
@click.option(
    "--client",
    type=click.Choice(list(SUPPORTED_CLIENTS), case_sensitive=False),
    default="svn",
    show_default=True,
    help="Version control client.",
)
@click.option("--force", is_flag=True, help="Overwrite an existing modlink.toml.")
@click.pass_obj
def init_cmd(
    app: AppContext,
    path: str,
    repository: str,
    client: str,
    force: bool,
) -> None:
    """Initialize a projection root."""
    from modlink.plugins.manager import PluginManager
    from modlink.services.init import InitService

    root = Path(path).resolve()
    pm = PluginManager()
    pm.discover_and_load()
    result = InitService.init_root(
        root,
        repository=repository,
        client=client.lower(),
        force=force,
        modules_dir=app.settings.workspace.modules_dir,
        plugin_manager=pm,
    )
    app.emit(result)
