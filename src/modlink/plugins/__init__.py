"""Extension layer — plugin system via pluggy.

Discovery: entry_points (pip-installed) in the ``modlink.plugins`` group.
INVARIANT: Plugin failures are warnings, never errors.
"""

from modlink.plugins.manager import PluginManager

__all__ = ["PluginManager"]
