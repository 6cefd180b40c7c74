"""AppContext — shared Click context for all commands.

Created once by the root CLI group and passed to subcommands via
``@click.pass_obj``. Provides lazy Workspace construction and centralized
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from modlink.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from modlink.config.settings import ModlinkSettings
    from modlink.infrastructure.workspace import Workspace
    from modlink.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The workspace (and plugin discovery) is created on first use so that
    ``--help`` and ``--version`` never touch the filesystem.
    """

    def __init__(self, settings: ModlinkSettings) -> None:
        self.settings = settings
        self._workspace: Workspace | None = None

        from modlink.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def workspace(self) -> Workspace:
        """The workspace for the resolved root (created lazily)."""
        if self._workspace is None:
            from modlink.infrastructure.workspace import Workspace

            self._workspace = Workspace(self.settings)
            self._workspace.init_plugins()
        return self._workspace

    @property
    def output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: output to stdout; warnings to stderr so piped output
          stays clean (in JSON mode they are part of the payload).
        * Failure: output to stderr, exit code 1.
        """
        settings = self.output_settings
        output = format_result(result, settings=settings)
        if result.ok:
            if output:
                click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
            raise SystemExit(1)

    def emit_raw(self, result: ServiceResult, key: str) -> None:
        """Print ``result.data[key]`` verbatim on success (pipe-friendly).

        JSON mode and failures go through :meth:`emit`.
        """
        if not result.ok or self.settings.json_output:
            self.emit(result)
            return
        click.echo(result.data.get(key, ""), nl=False)
        stderr = result.data.get("stderr")
        if stderr:
            click.echo(stderr, nl=False, err=True)
