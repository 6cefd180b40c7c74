"""Commands: re-project a module and sweep dangling links."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from modlink.commands._base import ModlinkCommand, force_option

if TYPE_CHECKING:
    from modlink.commands._context import AppContext

_PROJECT_EXAMPLES = """\
  modlink project blog
  modlink -v project blog --force"""

_SWEEP_EXAMPLES = """\
  modlink sweep
  modlink -q sweep | xargs -r echo removed"""


@click.command(cls=ModlinkCommand, examples=_PROJECT_EXAMPLES)
@click.argument("module")
@force_option
@click.pass_obj
def project(app: AppContext, module: str, force: bool) -> None:
    """Re-link MODULE from its current descriptor without touching VCS."""
    from modlink.services.module import ModuleService

    app.emit(ModuleService(app.workspace).project(module, force=force))


@click.command(cls=ModlinkCommand, examples=_SWEEP_EXAMPLES)
@click.pass_obj
def sweep(app: AppContext) -> None:
    """Remove dangling symlinks under the root."""
    from modlink.services.module import ModuleService

    app.emit(ModuleService(app.workspace).sweep())
