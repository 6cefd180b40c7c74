"""Commands: VCS pass-through (status, diff, commit, info).

Arguments after ``--`` reach the client unchanged. Output is printed
verbatim; use ``--json`` to get it wrapped in a result envelope.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from modlink.commands._base import ModlinkCommand, vcs_passthrough

if TYPE_CHECKING:
    from modlink.commands._context import AppContext


def _passthrough(verb: str, summary: str, examples: str) -> click.Command:
    @click.command(verb, cls=ModlinkCommand, examples=examples, help=summary)
    @click.argument("module")
    @vcs_passthrough
    @click.pass_obj
    def command(app: AppContext, module: str, vcs_args: tuple[str, ...]) -> None:
        from modlink.services.vcs import VcsService

        app.emit_raw(VcsService(app.workspace).run(verb, module, vcs_args), "stdout")

    return command


status = _passthrough(
    "status",
    "Show the working-copy status of MODULE.",
    "  modlink status blog\n  modlink status blog -- -u",
)
diff = _passthrough(
    "diff",
    "Show local changes in MODULE.",
    "  modlink diff blog\n  modlink diff blog -- map.txt",
)
commit = _passthrough(
    "commit",
    "Commit local changes in MODULE.",
    '  modlink commit blog -- -m "Fix header links"',
)
info = _passthrough(
    "info",
    "Show repository information for MODULE.",
    "  modlink info blog",
)
