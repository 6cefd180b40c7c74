"""Commands: edit and show a module's descriptor (add, delete, list)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from modlink.commands._base import ModlinkCommand, force_option

if TYPE_CHECKING:
    from modlink.commands._context import AppContext

_ADD_EXAMPLES = """\
  modlink add blog htdocs/index.php index.php
  modlink add blog lib lib/blog --force"""

_DELETE_EXAMPLES = """\
  modlink delete blog lib/blog"""

_LIST_EXAMPLES = """\
  modlink list blog
  modlink --json list blog"""


@click.command(cls=ModlinkCommand, examples=_ADD_EXAMPLES)
@click.argument("module")
@click.argument("source")
@click.argument("target")
@force_option
@click.pass_obj
def add(app: AppContext, module: str, source: str, target: str, force: bool) -> None:
    """Map SOURCE (inside MODULE) to TARGET (inside the root) and link it."""
    from modlink.services.module import ModuleService

    app.emit(ModuleService(app.workspace).add(module, source, target, force=force))


@click.command(cls=ModlinkCommand, examples=_DELETE_EXAMPLES)
@click.argument("module")
@click.argument("target")
@click.pass_obj
def delete(app: AppContext, module: str, target: str) -> None:
    """Remove the rule for TARGET from MODULE and unlink it."""
    from modlink.services.module import ModuleService

    app.emit(ModuleService(app.workspace).delete(module, target))


@click.command("list", cls=ModlinkCommand, examples=_LIST_EXAMPLES)
@click.argument("module")
@click.pass_obj
def list_cmd(app: AppContext, module: str) -> None:
    """Print MODULE's descriptor as written."""
    from modlink.services.module import ModuleService

    app.emit_raw(ModuleService(app.workspace).list_rules(module), "content")
