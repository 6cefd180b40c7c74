"""Commands: update one module, or every checked-out module."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from modlink.commands._base import ModlinkCommand, force_option, vcs_passthrough

if TYPE_CHECKING:
    from modlink.commands._context import AppContext

_UPDATE_EXAMPLES = """\
  modlink update blog
  modlink update blog -- -r HEAD
  modlink --json update blog"""

_UPDATE_ALL_EXAMPLES = """\
  modlink update-all
  modlink -q update-all --force"""


@click.command(cls=ModlinkCommand, examples=_UPDATE_EXAMPLES)
@click.argument("module")
@force_option
@vcs_passthrough
@click.pass_obj
def update(app: AppContext, module: str, force: bool, vcs_args: tuple[str, ...]) -> None:
    """Update MODULE and bring its links in line with the new descriptor."""
    from modlink.services.module import ModuleService

    app.emit(ModuleService(app.workspace).update(module, force=force, vcs_args=vcs_args))


@click.command("update-all", cls=ModlinkCommand, examples=_UPDATE_ALL_EXAMPLES)
@force_option
@click.pass_obj
def update_all(app: AppContext, force: bool) -> None:
    """Update every checked-out module, stopping at the first failure."""
    from modlink.services.module import ModuleService

    app.emit(ModuleService(app.workspace).update_all(force=force))
