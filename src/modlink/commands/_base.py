"""Click base classes with ``--examples`` support.

``--help`` stays short; ``--examples`` prints usage examples and exits.
Commands that forward arguments to the VCS client use
:func:`vcs_passthrough` to collect everything after ``--``.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, ParamSpec, TypeVar

import click

P = ParamSpec("P")
R = TypeVar("R")


def _add_examples_option(cmd: click.Command, examples: str) -> None:
    """Attach an eager ``--examples`` flag to a Click command or group."""

    def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    cmd.params.append(
        click.Option(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=show_examples,
            help="Show usage examples.",
        )
    )


class ModlinkCommand(click.Command):
    """Click Command subclass that supports an ``--examples`` flag."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)


def vcs_passthrough(func: Callable[P, R]) -> Callable[P, R]:
    """Collect trailing arguments (after ``--``) for the VCS client."""
    return click.argument("vcs_args", nargs=-1, type=click.UNPROCESSED)(func)


def force_option(func: Callable[P, R]) -> Callable[P, R]:
    """``--force``: replace real files that block a projection target."""
    return click.option(
        "-f",
        "--force",
        is_flag=True,
        help="Replace existing files or directories that block a target.",
    )(func)
