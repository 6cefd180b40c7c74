"""BaseService — foundation for services operating on a workspace."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from modlink.infrastructure.workspace import Workspace

logger = logging.getLogger(__name__)


class BaseService:
    """Base for service classes.

    Every service receives a :class:`Workspace` at construction time and
    resolves module contexts, engines, and the VCS client through it.
    """

    def __init__(self, workspace: Workspace) -> None:
        self._workspace = workspace

    def _dispatch_event(
        self,
        hook_name: str,
        payload: dict[str, Any],
        warnings: list[str],
    ) -> None:
        """Run a lifecycle hook. No-op if no plugin manager is attached.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        pm = self._workspace.plugin_manager
        if pm is None:
            return
        try:
            pm.dispatch(hook_name, payload)
        except Exception:
            logger.debug("Plugin hook %s failed", hook_name, exc_info=True)
            warnings.append(f"Plugin hook {hook_name} failed")
