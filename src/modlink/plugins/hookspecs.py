"""Pluggy hook specifications for modlink lifecycle events.

Hooks run synchronously after an operation succeeded. They observe; they
cannot veto or alter the projection.
"""

from __future__ import annotations

import pluggy

hookspec = pluggy.HookspecMarker("modlink")


class ModlinkHookSpec:
    """Hook specifications for the modlink plugin system."""

    @hookspec
    def post_init(self, root: str, repository: str, client: str) -> None:
        """Called after a projection root is initialized."""

    @hookspec
    def post_project(
        self,
        module: str,
        mode: str,
        created: list[str],
        removed: list[str],
    ) -> None:
        """Called after a module was projected (checkout, export, add, delete)."""

    @hookspec
    def post_update(
        self,
        module: str,
        orphans_removed: list[str],
        stale_removed: list[str],
    ) -> None:
        """Called after a module update finished re-projecting."""

    @hookspec
    def post_sweep(self, removed: list[str]) -> None:
        """Called after stale links were swept."""
