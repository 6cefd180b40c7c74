"""Error taxonomy for descriptor resolution and projection.

Every exception carries a stable ``code`` that the service layer copies
into :class:`~modlink.services.result.ServiceError`.
"""

from __future__ import annotations

from typing import Any


class ModlinkError(Exception):
    """Base class for all modlink failures."""

    code = "MODLINK_ERROR"

    def __init__(self, message: str, **detail: Any) -> None:
        super().__init__(message)
        self.message = message
        self.detail: dict[str, Any] = detail
        # Declared paths of the imports this error propagated through, outermost first.
        self.import_chain: list[str] = []

    def annotate_import(self, declared_path: str) -> None:
        """Record that the error surfaced while resolving *declared_path*."""
        self.import_chain.insert(0, declared_path)

    def to_detail(self) -> dict[str, Any]:
        detail = dict(self.detail)
        if self.import_chain:
            detail["import_chain"] = list(self.import_chain)
        return detail

    def __str__(self) -> str:
        if not self.import_chain:
            return self.message
        return f"{self.message} (via @import {' -> '.join(self.import_chain)})"


class DescriptorUnreadable(ModlinkError):
    """Descriptor file is missing or cannot be read."""

    code = "DESCRIPTOR_UNREADABLE"


class DescriptorSyntaxError(DescriptorUnreadable):
    """A descriptor line does not hold exactly two tokens."""

    code = "DESCRIPTOR_SYNTAX"


class ImportNotFound(ModlinkError):
    """An ``@import`` rule references a descriptor that does not exist."""

    code = "IMPORT_NOT_FOUND"


class ImportCycle(ModlinkError):
    """An ``@import`` chain re-enters a module already being resolved."""

    code = "IMPORT_CYCLE"


class ConflictError(ModlinkError):
    """A non-projection entry occupies a target and force mode is off."""

    code = "CONFLICT"


class CreationFailure(ModlinkError):
    """Creating or removing a projection entry failed at the filesystem level."""

    code = "CREATION_FAILURE"


class VcsCommandFailure(ModlinkError):
    """The external version-control client exited non-zero or could not run."""

    code = "VCS_COMMAND_FAILURE"
