"""ModuleService — checkout, export, update, and descriptor edits.

Each operation follows the same pipeline around the engine:

    VCS step (optional) -> resolve descriptor -> project -> cleanup pass

There is no rollback. A failed operation leaves whatever it already
created in place and reports the offending rule; re-running the same
operation after fixing the cause is the recovery path.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from modlink.domain.context import ModuleContext
from modlink.domain.descriptor import format_rule, is_rule_line, parse_line, read_descriptor
from modlink.domain.differ import diff_descriptors
from modlink.domain.errors import CreationFailure, DescriptorUnreadable, ModlinkError
from modlink.domain.rules import MappingRule, normalize_path
from modlink.infrastructure.projection import ProjectionMode, ProjectionReport, remove_orphans
from modlink.infrastructure.workspace import InvalidModuleName
from modlink.services.base import BaseService
from modlink.services.result import ServiceResult

logger = logging.getLogger(__name__)


class ModuleService(BaseService):
    """Operations on one module's working copy and its projection."""

    # ------------------------------------------------------------------
    # VCS-backed operations
    # ------------------------------------------------------------------

    def checkout(
        self,
        module: str,
        *,
        force: bool = False,
        vcs_args: Sequence[str] = (),
    ) -> ServiceResult:
        """Check out *module* and link-project its descriptor.

        An existing working copy is reused so that a checkout aborted by a
        conflict can simply be re-run.
        """
        op = "checkout"
        try:
            ctx = self._workspace.context(module)
        except InvalidModuleName as exc:
            return ServiceResult.failure(op, "INVALID_MODULE", str(exc))

        data: dict[str, Any] = {"module": ctx.module, "working_copy": str(ctx.working_copy)}
        try:
            if ctx.checked_out:
                logger.info("Working copy %s exists, skipping VCS checkout", ctx.working_copy)
                data["fetched"] = False
            else:
                ctx.working_copy.parent.mkdir(parents=True, exist_ok=True)
                self._workspace.vcs.checkout(ctx.module, ctx.working_copy, vcs_args)
                data["fetched"] = True
            report = self._project(ctx, ProjectionMode.LINK, force=force)
        except ModlinkError as exc:
            return ServiceResult.from_exception(op, exc, data=data)

        return self._projected(op, ctx, report, data)

    def export(
        self,
        module: str,
        *,
        force: bool = False,
        vcs_args: Sequence[str] = (),
    ) -> ServiceResult:
        """Export *module* and project it as hardlinked copies.

        The module is fetched into a scratch directory beside the working
        copies (same filesystem, so hardlinks work) which is discarded
        afterwards; the projected copies keep the data alive.
        """
        op = "export"
        try:
            self._workspace.context(module)
        except InvalidModuleName as exc:
            return ServiceResult.failure(op, "INVALID_MODULE", str(exc))

        modules_dir = self._workspace.modules_dir
        modules_dir.mkdir(parents=True, exist_ok=True)
        scratch = Path(tempfile.mkdtemp(prefix=f".export-{module}-", dir=modules_dir))
        ctx = self._workspace.context(module, working_copy=scratch / module)
        data: dict[str, Any] = {"module": ctx.module}
        try:
            self._workspace.vcs.export(ctx.module, ctx.working_copy, vcs_args)
            report = self._project(ctx, ProjectionMode.COPY, force=force)
        except ModlinkError as exc:
            return ServiceResult.from_exception(op, exc, data=data)
        finally:
            shutil.rmtree(scratch, ignore_errors=True)

        return self._projected(op, ctx, report, data)

    def update(
        self,
        module: str,
        *,
        force: bool = False,
        vcs_args: Sequence[str] = (),
    ) -> ServiceResult:
        """Update a working copy and bring its projection in line.

        Steps: snapshot the descriptor, run the VCS update, delete links of
        rules that disappeared, re-project, then sweep dangling links.
        """
        op = "update"
        ctx = self._checked_out_context(op, module)
        if isinstance(ctx, ServiceResult):
            return ctx

        data: dict[str, Any] = {"module": ctx.module}
        warnings: list[str] = []
        try:
            old_lines = self._descriptor_lines(ctx)
            self._workspace.vcs.update(ctx.working_copy, vcs_args)
            new_lines = self._descriptor_lines(ctx)

            removed_lines = diff_descriptors(old_lines, new_lines)
            data["removed_rules"] = removed_lines
            data["orphans_removed"] = remove_orphans(removed_lines, ctx.root)

            report = self._project(ctx, ProjectionMode.LINK, force=force)
            warnings.extend(report.warnings)
            data.update(report.to_dict())

            stale: list[str] = []
            if self._workspace.settings.projection.sweep_after_update:
                stale = self._workspace.collector().sweep_paths(ctx.root)
            data["stale_removed"] = stale
        except ModlinkError as exc:
            return ServiceResult.from_exception(op, exc, data=data, warnings=warnings)

        self._dispatch_event(
            "post_update",
            {
                "module": ctx.module,
                "orphans_removed": data["orphans_removed"],
                "stale_removed": data["stale_removed"],
            },
            warnings,
        )
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)

    def update_all(self, *, force: bool = False) -> ServiceResult:
        """Update every checked-out module, stopping at the first failure."""
        op = "update_all"
        updated: list[str] = []
        warnings: list[str] = []
        for module in self._workspace.modules():
            result = self.update(module, force=force)
            warnings.extend(f"{module}: {w}" for w in result.warnings)
            if not result.ok:
                assert result.error is not None
                return ServiceResult.failure(
                    op,
                    result.error.code,
                    f"{module}: {result.error.message}",
                    data={"updated": updated, "failed": module},
                    warnings=warnings,
                    **result.error.detail,
                )
            updated.append(module)
        return ServiceResult(ok=True, op=op, data={"updated": updated}, warnings=warnings)

    # ------------------------------------------------------------------
    # Descriptor edits
    # ------------------------------------------------------------------

    def add(
        self,
        module: str,
        source: str,
        target: str,
        *,
        force: bool = False,
    ) -> ServiceResult:
        """Append a ``source target`` rule to the descriptor and re-project."""
        op = "add"
        ctx = self._checked_out_context(op, module)
        if isinstance(ctx, ServiceResult):
            return ctx

        line = format_rule(source, target)
        data: dict[str, Any] = {"module": ctx.module, "rule": line}
        try:
            rule = parse_line(line)
            if not isinstance(rule, MappingRule):
                return ServiceResult.failure(
                    op, "DESCRIPTOR_SYNTAX", f"Not a mapping rule: {line!r}", data=data
                )
            existing = read_descriptor(ctx.descriptor) if ctx.descriptor.exists() else None
            if existing is not None and any(m.target == rule.target for m in existing.mappings):
                return ServiceResult.failure(
                    op,
                    "DUPLICATE_TARGET",
                    f"{ctx.module} already maps a rule to {rule.target}",
                    data=data,
                    target=rule.target,
                )
            self._append_line(ctx.descriptor, line)
            report = self._project(ctx, ProjectionMode.LINK, force=force)
        except ModlinkError as exc:
            return ServiceResult.from_exception(op, exc, data=data)

        return self._projected(op, ctx, report, data)

    def delete(self, module: str, target: str) -> ServiceResult:
        """Drop every mapping rule for *target*, unlink it, and re-project."""
        op = "delete"
        ctx = self._checked_out_context(op, module)
        if isinstance(ctx, ServiceResult):
            return ctx

        wanted = normalize_path(target)
        data: dict[str, Any] = {"module": ctx.module, "target": wanted}
        try:
            text = self._read_text(ctx)
            kept: list[str] = []
            dropped: list[str] = []
            for lineno, line in enumerate(text.splitlines(keepends=True), start=1):
                if is_rule_line(line):
                    rule = parse_line(line, lineno)
                    if isinstance(rule, MappingRule) and rule.target == wanted:
                        dropped.append(line.rstrip("\r\n"))
                        continue
                kept.append(line)

            if not dropped:
                return ServiceResult.failure(
                    op,
                    "RULE_NOT_FOUND",
                    f"{ctx.module} has no rule targeting {wanted}",
                    data=data,
                    target=wanted,
                )

            _write_descriptor(ctx.descriptor, "".join(kept))
            data["removed_rules"] = dropped
            unlinked = remove_orphans(dropped, ctx.root)
            report = self._project(ctx, ProjectionMode.LINK)
            report.removed[:0] = unlinked
        except ModlinkError as exc:
            return ServiceResult.from_exception(op, exc, data=data)

        return self._projected(op, ctx, report, data)

    def list_rules(self, module: str) -> ServiceResult:
        """Return the raw descriptor text of *module*."""
        op = "list"
        ctx = self._checked_out_context(op, module)
        if isinstance(ctx, ServiceResult):
            return ctx

        try:
            descriptor = read_descriptor(ctx.descriptor)
            text = self._read_text(ctx)
        except ModlinkError as exc:
            return ServiceResult.from_exception(op, exc, data={"module": ctx.module})

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "module": ctx.module,
                "descriptor": str(ctx.descriptor),
                "content": text,
                "mappings": len(descriptor.mappings),
                "imports": len(descriptor.imports),
            },
        )

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    def project(self, module: str, *, force: bool = False) -> ServiceResult:
        """Re-resolve and re-link a checked-out module without touching VCS."""
        op = "project"
        ctx = self._checked_out_context(op, module)
        if isinstance(ctx, ServiceResult):
            return ctx

        data: dict[str, Any] = {"module": ctx.module}
        try:
            report = self._project(ctx, ProjectionMode.LINK, force=force)
        except ModlinkError as exc:
            return ServiceResult.from_exception(op, exc, data=data)
        return self._projected(op, ctx, report, data)

    def sweep(self) -> ServiceResult:
        """Remove every dangling symlink under the root."""
        op = "sweep"
        warnings: list[str] = []
        try:
            removed = self._workspace.collector().sweep_paths(self._workspace.root)
        except ModlinkError as exc:
            return ServiceResult.from_exception(op, exc)
        self._dispatch_event("post_sweep", {"removed": removed}, warnings)
        return ServiceResult(
            ok=True,
            op=op,
            data={"removed": removed, "count": len(removed)},
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _project(
        self,
        ctx: ModuleContext,
        mode: ProjectionMode,
        *,
        force: bool = False,
    ) -> ProjectionReport:
        rules = self._workspace.resolver().resolve(ctx.descriptor)
        logger.debug("%s: %d resolved rule(s)", ctx.module, len(rules))
        return self._workspace.engine(mode, force=force).project(rules)

    def _projected(
        self,
        op: str,
        ctx: ModuleContext,
        report: ProjectionReport,
        data: dict[str, Any],
    ) -> ServiceResult:
        warnings = list(report.warnings)
        payload = {**data, **report.to_dict()}
        self._dispatch_event(
            "post_project",
            {
                "module": ctx.module,
                "mode": str(report.mode),
                "created": report.created + report.replaced,
                "removed": report.removed,
            },
            warnings,
        )
        return ServiceResult(ok=True, op=op, data=payload, warnings=warnings)

    def _checked_out_context(
        self,
        op: str,
        module: str,
    ) -> ModuleContext | ServiceResult:
        try:
            ctx = self._workspace.context(module)
        except InvalidModuleName as exc:
            return ServiceResult.failure(op, "INVALID_MODULE", str(exc))
        if not ctx.checked_out:
            return ServiceResult.failure(
                op,
                "NOT_CHECKED_OUT",
                f"Module {ctx.module} is not checked out (expected {ctx.working_copy})",
                module=ctx.module,
            )
        return ctx

    @staticmethod
    def _read_text(ctx: ModuleContext) -> str:
        try:
            return ctx.descriptor.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            msg = f"Cannot read descriptor {ctx.descriptor}: {exc}"
            raise DescriptorUnreadable(msg, path=str(ctx.descriptor)) from exc

    def _descriptor_lines(self, ctx: ModuleContext) -> list[str]:
        """Descriptor lines, or none if the descriptor does not exist (yet)."""
        if not ctx.descriptor.exists():
            return []
        return self._read_text(ctx).splitlines()

    @staticmethod
    def _append_line(descriptor: Path, line: str) -> None:
        text = descriptor.read_text(encoding="utf-8") if descriptor.exists() else ""
        if text and not text.endswith("\n"):
            text += "\n"
        _write_descriptor(descriptor, f"{text}{line}\n")


def _write_descriptor(path: Path, text: str) -> None:
    try:
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        msg = f"Cannot write descriptor {path}: {exc}"
        raise CreationFailure(msg, path=str(path)) from exc
