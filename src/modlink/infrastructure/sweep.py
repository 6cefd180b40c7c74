"""StaleLinkCollector — delete dangling symlinks under the root.

Complements the projection engine: links whose sources vanished mid-session
or whose rules were invalidated by an update are removed regardless of
which rule created them. Sweeping is unconditional and idempotent.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from modlink.domain.errors import CreationFailure
from modlink.infrastructure.filesystem import is_dangling

logger = logging.getLogger(__name__)


class StaleLinkCollector:
    """Walk a root and remove every dangling symlink.

    Directories in *exclude* are not descended into (the workspace passes its
    private working-copy store, whose version-controlled symlinks are not
    projections).
    """

    def __init__(self, exclude: Iterable[Path] = ()) -> None:
        self._exclude = {Path(os.path.abspath(p)) for p in exclude}

    def sweep(self, root: Path) -> int:
        """Remove dangling symlinks under *root*; return how many were removed."""
        return len(self.sweep_paths(root))

    def sweep_paths(self, root: Path) -> list[str]:
        """Like :meth:`sweep` but return the removed root-relative paths."""
        removed: list[str] = []
        if not root.is_dir():
            return removed

        for dirpath, dirnames, filenames in os.walk(root, followlinks=False):
            current = Path(dirpath)
            # Symlinked directories show up in dirnames; os.walk never enters them.
            dirnames[:] = [
                d for d in dirnames if Path(os.path.abspath(current / d)) not in self._exclude
            ]
            for name in (*dirnames, *filenames):
                path = current / name
                if not is_dangling(path):
                    continue
                try:
                    path.unlink()
                except OSError as exc:
                    msg = f"Cannot remove stale link {path}: {exc}"
                    raise CreationFailure(msg, target=str(path)) from exc
                rel = path.relative_to(root).as_posix()
                logger.info("Removed stale link %s", rel)
                removed.append(rel)
        return removed
