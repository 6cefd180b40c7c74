"""ProjectionEngine — materialize a resolved rule set under a root.

Two modes:

- **link**: every target is a symlink to its source (development mode).
- **copy**: every target is a hardlinked copy of its source (export mode),
  giving real, non-link files without duplicating data.

INVARIANT: Projection is idempotent, not transactional. A failure aborts
the run but leaves every entry created so far in place; re-running the
same operation after fixing the cause converges on the declared state.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Any

from modlink.domain.differ import removed_mappings
from modlink.domain.errors import ConflictError, CreationFailure
from modlink.domain.policy import ConflictPolicy, Decision, EntryKind
from modlink.domain.rules import ResolvedRule
from modlink.infrastructure.filesystem import (
    hardlink_copy,
    is_hardlinked_copy,
    is_within,
    lexists,
    linked_ancestor,
    make_symlink,
    points_to,
    remove_entry,
    same_content,
)

logger = logging.getLogger(__name__)

ALIAS_GONE = "alias no longer present in working copy"


class ProjectionMode(StrEnum):
    LINK = "link"
    COPY = "copy"


@dataclass
class ProjectionReport:
    """Outcome of one projection run, as root-relative target paths."""

    mode: ProjectionMode
    created: list[str] = field(default_factory=list)
    unchanged: list[str] = field(default_factory=list)
    replaced: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "mode": str(self.mode),
            "created": list(self.created),
            "unchanged": list(self.unchanged),
            "replaced": list(self.replaced),
            "removed": list(self.removed),
        }


def dedupe_targets(
    rules: Iterable[ResolvedRule],
) -> tuple[list[ResolvedRule], list[str]]:
    """Drop earlier rules that share a target with a later one (last wins).

    Returns the surviving rules in order and a warning per dropped rule.
    """
    rules = list(rules)
    last_index = {rule.target: i for i, rule in enumerate(rules)}
    kept: list[ResolvedRule] = []
    warnings: list[str] = []
    for i, rule in enumerate(rules):
        if last_index[rule.target] != i:
            winner = rules[last_index[rule.target]]
            warnings.append(f"Duplicate target {rule.target}: {rule} overridden by {winner}")
            continue
        kept.append(rule)
    return kept, warnings


class ProjectionEngine:
    """Apply resolved rules to *root* in the given mode."""

    def __init__(
        self,
        root: Path,
        mode: ProjectionMode = ProjectionMode.LINK,
        policy: ConflictPolicy | None = None,
        *,
        relative_links: bool = False,
    ) -> None:
        self.root = root
        self.mode = mode
        self.policy = policy or ConflictPolicy()
        self.relative_links = relative_links

    def project(self, rules: Iterable[ResolvedRule]) -> ProjectionReport:
        """Project every rule in order.

        Raises:
            ConflictError: a real entry blocks a target and the policy aborts.
            CreationFailure: a target escapes the root or the filesystem
                refused to remove/create an entry.
        """
        report = ProjectionReport(mode=self.mode)
        kept, duplicate_warnings = dedupe_targets(rules)
        for warning in duplicate_warnings:
            logger.debug(warning)
        report.warnings.extend(duplicate_warnings)

        for rule in kept:
            self._apply(rule, report)

        logger.debug(
            "Projected %d rule(s) in %s mode: %d created, %d unchanged",
            len(kept),
            self.mode,
            len(report.created),
            len(report.unchanged),
        )
        return report

    # ------------------------------------------------------------------
    # Per-rule steps
    # ------------------------------------------------------------------

    def _apply(self, rule: ResolvedRule, report: ProjectionReport) -> None:
        src = rule.source_path
        dest = self._dest_for(rule)

        if not src.exists():
            self._handle_missing_source(rule, dest, report)
            return

        if self._is_current(src, dest):
            report.unchanged.append(rule.target)
            return

        replaced = False
        if dest.is_symlink():
            # A projection entry from an earlier run or another mode.
            self._remove(rule, dest)
        elif lexists(dest):
            kind = EntryKind.of(dest)
            if self.policy.resolve(kind) is Decision.ABORT:
                msg = (
                    f"Conflict at {rule.target}: {self.policy.describe(dest)} "
                    f"blocks {rule} (use --force to replace it)"
                )
                raise ConflictError(
                    msg,
                    target=rule.target,
                    source=rule.source,
                    kind=str(kind),
                    created=list(report.created),
                )
            logger.info("Replacing %s %s", kind, dest)
            self._remove(rule, dest)
            replaced = True

        self._create(rule, src, dest)
        (report.replaced if replaced else report.created).append(rule.target)

    def _dest_for(self, rule: ResolvedRule) -> Path:
        dest = self.root / rule.target
        if rule.target in ("", ".", "/") or not is_within(self.root, dest) or dest == self.root:
            msg = f"Target {rule.target!r} of {rule} escapes the root {self.root}"
            raise CreationFailure(msg, target=rule.target, source=rule.source)
        linked = linked_ancestor(self.root, dest)
        if linked is not None:
            msg = (
                f"Target {rule.target!r} of {rule} lies under the link {linked}; "
                "creating it would write into the link's source"
            )
            raise CreationFailure(msg, target=rule.target, source=rule.source)
        return dest

    def _handle_missing_source(
        self,
        rule: ResolvedRule,
        dest: Path,
        report: ProjectionReport,
    ) -> None:
        if self.mode is ProjectionMode.LINK and dest.is_symlink():
            self._remove(rule, dest)
            report.removed.append(rule.target)
            warning = f"{rule.target}: {ALIAS_GONE} ({rule.source})"
        else:
            warning = f"{rule.target}: source {rule.source} not found in {rule.base_dir}"
        logger.debug(warning)
        report.warnings.append(warning)

    def _is_current(self, src: Path, dest: Path) -> bool:
        if self.mode is ProjectionMode.LINK:
            return points_to(dest, src)
        return is_hardlinked_copy(src, dest) or same_content(src, dest)

    def _remove(self, rule: ResolvedRule, dest: Path) -> None:
        try:
            remove_entry(dest)
        except OSError as exc:
            msg = f"Cannot remove {dest} for {rule}: {exc}"
            raise CreationFailure(msg, target=rule.target, source=rule.source) from exc

    def _create(self, rule: ResolvedRule, src: Path, dest: Path) -> None:
        try:
            if self.mode is ProjectionMode.LINK:
                make_symlink(src, dest, relative=self.relative_links)
            else:
                hardlink_copy(src, dest)
        except OSError as exc:
            msg = f"Cannot create {self.mode} projection {rule}: {exc}"
            raise CreationFailure(msg, target=rule.target, source=rule.source) from exc


def remove_orphans(removed_lines: Iterable[str], root: Path) -> list[str]:
    """Delete the symlinks of mapping rules dropped from a descriptor.

    Only symlinks are removed; a real file at the target is left alone.
    Returns the removed target paths.
    """
    removed: list[str] = []
    for rule in removed_mappings(removed_lines):
        dest = root / rule.target
        if not dest.is_symlink() or not is_within(root, dest):
            continue
        if linked_ancestor(root, dest) is not None:
            continue
        try:
            dest.unlink()
        except OSError as exc:
            msg = f"Cannot remove orphaned link {dest}: {exc}"
            raise CreationFailure(msg, target=rule.target, source=rule.source) from exc
        logger.info("Removed orphaned link %s", dest)
        removed.append(rule.target)
    return removed
