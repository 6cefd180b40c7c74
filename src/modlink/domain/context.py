"""ModuleContext — which root and module an operation applies to.

Built once per invocation by the workspace and passed explicitly to every
component instead of relying on the process working directory.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ModuleContext:
    root: Path
    module: str
    working_copy: Path
    descriptor: Path

    @property
    def checked_out(self) -> bool:
        return self.working_copy.is_dir()
