"""Subcommand modules for modlink.

Provides register_commands() which uses deferred imports to keep
``modlink --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register every standalone command on the root CLI group."""
    from modlink.commands.checkout import checkout, export
    from modlink.commands.descriptor import add, delete, list_cmd
    from modlink.commands.init_cmd import init_cmd
    from modlink.commands.maintenance import project, sweep
    from modlink.commands.update import update, update_all
    from modlink.commands.vcs import commit, diff, info, status

    cli.add_command(init_cmd)
    cli.add_command(checkout)
    cli.add_command(export)
    cli.add_command(update)
    cli.add_command(update_all)
    cli.add_command(add)
    cli.add_command(delete)
    cli.add_command(list_cmd)
    cli.add_command(project)
    cli.add_command(sweep)
    cli.add_command(status)
    cli.add_command(diff)
    cli.add_command(commit)
    cli.add_command(info)
