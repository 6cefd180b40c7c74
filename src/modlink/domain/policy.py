"""Conflict policy — whether an existing entry may be replaced.

Pure decision, evaluated once per conflicting target. The policy holds no
state, so one conflict never changes the outcome of a later one.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path


class EntryKind(StrEnum):
    """What currently occupies a target path."""

    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    OTHER = "other"

    @classmethod
    def of(cls, path: Path) -> EntryKind:
        """Classify *path* without following a final symlink."""
        if path.is_symlink():
            return cls.SYMLINK
        if path.is_dir():
            return cls.DIRECTORY
        if path.is_file():
            return cls.FILE
        return cls.OTHER


class Decision(StrEnum):
    PROCEED = "proceed"
    ABORT = "abort"


def resolve_conflict(existing_kind: EntryKind, force: bool) -> Decision:
    """Abort unless *force* is set. The entry kind only informs diagnostics."""
    return Decision.PROCEED if force else Decision.ABORT


@dataclass(frozen=True)
class ConflictPolicy:
    """Force-flag policy handed to the projection engine."""

    force: bool = False

    def resolve(self, existing_kind: EntryKind) -> Decision:
        return resolve_conflict(existing_kind, self.force)

    def describe(self, path: Path) -> str:
        kind = EntryKind.of(path)
        return f"existing {kind} at {os.fspath(path)}"
