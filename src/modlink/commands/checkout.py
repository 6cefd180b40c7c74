"""Commands: checkout (symlink projection) and export (hardlinked copies)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from modlink.commands._base import ModlinkCommand, force_option, vcs_passthrough

if TYPE_CHECKING:
    from modlink.commands._context import AppContext

_CHECKOUT_EXAMPLES = """\
  modlink checkout blog
  modlink checkout blog --force
  modlink checkout blog -- -r 1234"""

_EXPORT_EXAMPLES = """\
  modlink export blog
  modlink export blog -- -r 1234"""


@click.command(cls=ModlinkCommand, examples=_CHECKOUT_EXAMPLES)
@click.argument("module")
@force_option
@vcs_passthrough
@click.pass_obj
def checkout(app: AppContext, module: str, force: bool, vcs_args: tuple[str, ...]) -> None:
    """Check out MODULE and symlink its files into the root."""
    from modlink.services.module import ModuleService

    app.emit(ModuleService(app.workspace).checkout(module, force=force, vcs_args=vcs_args))


@click.command(cls=ModlinkCommand, examples=_EXPORT_EXAMPLES)
@click.argument("module")
@force_option
@vcs_passthrough
@click.pass_obj
def export(app: AppContext, module: str, force: bool, vcs_args: tuple[str, ...]) -> None:
    """Export MODULE and place hardlinked copies of its files in the root.

    No working copy is kept; the result cannot be updated or committed.
    """
    from modlink.services.module import ModuleService

    app.emit(ModuleService(app.workspace).export(module, force=force, vcs_args=vcs_args))
