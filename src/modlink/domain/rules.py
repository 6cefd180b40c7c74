"""Rule types — the parsed form of a module descriptor.

A descriptor is a sequence of two kinds of rules:

- :class:`MappingRule` pairs a module-relative source with a root-relative target.
- :class:`ImportRule` splices in another module's descriptor.

After import resolution only :class:`ResolvedRule` instances remain, each
tagged with the base directory its source resolves against.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass
from pathlib import Path

IMPORT_MARKER = "@import"


def normalize_path(raw: str) -> str:
    """Normalize a descriptor path for comparison.

    Backslashes become ``/``, redundant separators and ``.`` segments are
    collapsed and trailing slashes are stripped.

    Examples:
        >>> normalize_path("lib/python/")
        'lib/python'
        >>> normalize_path("a//b/./c")
        'a/b/c'
        >>> normalize_path("docs\\\\api")
        'docs/api'
    """
    cleaned = raw.replace("\\", "/")
    if not cleaned:
        return cleaned
    return posixpath.normpath(cleaned).rstrip("/") or "/"


@dataclass(frozen=True)
class MappingRule:
    """``source target`` — project *source* at *target*."""

    source: str
    target: str
    line: int = 0
    text: str = ""


@dataclass(frozen=True)
class ImportRule:
    """``@import module_root`` — splice in the rules of a nested module."""

    module_root: str
    line: int = 0
    text: str = ""


Rule = MappingRule | ImportRule


@dataclass(frozen=True)
class ModuleDescriptor:
    """Ordered rules plus the file they were parsed from."""

    path: Path
    rules: tuple[Rule, ...]

    @property
    def base_dir(self) -> Path:
        """Directory relative sources and nested imports resolve against."""
        return self.path.parent

    @property
    def mappings(self) -> list[MappingRule]:
        return [r for r in self.rules if isinstance(r, MappingRule)]

    @property
    def imports(self) -> list[ImportRule]:
        return [r for r in self.rules if isinstance(r, ImportRule)]


@dataclass(frozen=True)
class ResolvedRule:
    """A mapping rule bound to the base directory it came from."""

    source: str
    target: str
    base_dir: Path
    origin: Path

    @property
    def source_path(self) -> Path:
        return self.base_dir / self.source

    @classmethod
    def bind(cls, rule: MappingRule, descriptor: ModuleDescriptor) -> ResolvedRule:
        return cls(
            source=rule.source,
            target=rule.target,
            base_dir=descriptor.base_dir,
            origin=descriptor.path,
        )

    def __str__(self) -> str:
        return f"{self.source} -> {self.target}"


ResolvedRuleSet = tuple[ResolvedRule, ...]
