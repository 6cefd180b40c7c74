"""Workspace — the projection root and its private working-copy store.

The Workspace is the single dependency injected into every service. It
turns settings into concrete paths and builds the engine components
(resolver, projection engine, stale-link collector, VCS client) with the
configured options.

Layout::

    <root>/
      modlink.toml
      .modlink/modules/<module>/      working copy, holds <descriptor>
      ...projected links/copies...
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from modlink.domain.context import ModuleContext
from modlink.domain.policy import ConflictPolicy
from modlink.infrastructure.projection import ProjectionEngine, ProjectionMode
from modlink.infrastructure.resolver import ImportResolver
from modlink.infrastructure.sweep import StaleLinkCollector
from modlink.infrastructure.vcs import VcsClient

if TYPE_CHECKING:
    from modlink.config.settings import ModlinkSettings
    from modlink.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class InvalidModuleName(ValueError):
    """Module names are single path components."""


def validate_module_name(module: str) -> str:
    name = module.strip()
    if not name or name in (".", "..") or "/" in name or "\\" in name or name.startswith("."):
        msg = f"Invalid module name: {module!r}"
        raise InvalidModuleName(msg)
    return name


class Workspace:
    """Paths and engine factories for one projection root."""

    def __init__(
        self,
        settings: ModlinkSettings,
        *,
        vcs: VcsClient | None = None,
    ) -> None:
        self._settings = settings
        self._root = settings.root
        self._vcs = vcs
        self._plugin_manager: PluginManager | None = None

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    @property
    def settings(self) -> ModlinkSettings:
        return self._settings

    @property
    def root(self) -> Path:
        return self._root

    @property
    def modules_dir(self) -> Path:
        return self._root / self._settings.workspace.modules_dir

    @property
    def descriptor_name(self) -> str:
        return self._settings.workspace.descriptor

    def context(self, module: str, *, working_copy: Path | None = None) -> ModuleContext:
        """Build the immutable context for one module operation.

        *working_copy* overrides the default location (used by export,
        which fetches into a scratch directory).
        """
        name = validate_module_name(module)
        wc = working_copy if working_copy is not None else self.modules_dir / name
        return ModuleContext(
            root=self._root,
            module=name,
            working_copy=wc,
            descriptor=wc / self.descriptor_name,
        )

    def modules(self) -> list[str]:
        """Names of all checked-out modules."""
        if not self.modules_dir.is_dir():
            return []
        return sorted(
            p.name
            for p in self.modules_dir.iterdir()
            if p.is_dir() and not p.is_symlink() and not p.name.startswith(".")
        )

    # ------------------------------------------------------------------
    # Component factories
    # ------------------------------------------------------------------

    @property
    def vcs(self) -> VcsClient:
        """The VCS client (created lazily on first access)."""
        if self._vcs is None:
            self._vcs = VcsClient(self._settings.vcs)
        return self._vcs

    def resolver(self) -> ImportResolver:
        return ImportResolver(self.descriptor_name)

    def engine(self, mode: ProjectionMode, *, force: bool = False) -> ProjectionEngine:
        return ProjectionEngine(
            self._root,
            mode,
            ConflictPolicy(force=force),
            relative_links=self._settings.projection.relative_links,
        )

    def collector(self) -> StaleLinkCollector:
        return StaleLinkCollector(exclude=[self.modules_dir])

    # ------------------------------------------------------------------
    # Plugins
    # ------------------------------------------------------------------

    @property
    def plugin_manager(self) -> PluginManager | None:
        return self._plugin_manager

    def init_plugins(self) -> list[str]:
        """Discover entry-point plugins; return their names."""
        from modlink.plugins.manager import PluginManager

        pm = PluginManager()
        names = pm.discover_and_load()
        self._plugin_manager = pm
        logger.debug("Plugins loaded: %s", names)
        return names

    def attach_plugins(self, manager: PluginManager) -> None:
        self._plugin_manager = manager
