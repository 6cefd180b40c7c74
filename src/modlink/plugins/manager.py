"""Plugin discovery, registration, and synchronous hook dispatch."""

from __future__ import annotations

import inspect
import logging
from typing import Any

import pluggy

from modlink.plugins.hookspecs import ModlinkHookSpec

PROJECT_NAME = "modlink"
ENTRY_POINT_GROUP = "modlink.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Wraps a pluggy manager carrying the modlink hook specs."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(ModlinkHookSpec)

    def discover_and_load(self) -> list[str]:
        """Load plugins from the ``modlink.plugins`` entry-point group.

        Entry points may name a class; those are instantiated so hook
        calls get a bound ``self``. Returns the registered plugin names.
        """
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        for plugin in list(self._pm.get_plugins()):
            if not inspect.isclass(plugin):
                continue
            name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)
            try:
                self._pm.register(plugin(), name=name)
            except Exception:
                logger.warning("Failed to instantiate plugin %s", name, exc_info=True)
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    def list_plugin_names(self) -> list[str]:
        return [self._pm.get_name(p) or p.__class__.__name__ for p in self._pm.get_plugins()]

    def dispatch(self, hook_name: str, payload: dict[str, Any]) -> None:
        """Call *hook_name* on every plugin with *payload* as keyword args."""
        caller = getattr(self._pm.hook, hook_name)
        caller(**payload)
