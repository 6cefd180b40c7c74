"""ImportResolver — flatten a descriptor and its ``@import`` chain.

Each ``@import <root>`` rule is replaced, in place, by the resolved rules of
``<base_dir>/<root>/<descriptor_name>``. Every resulting mapping rule keeps
the base directory of the descriptor that declared it, so sources in deeply
nested modules still resolve correctly.

The resolver tracks the base directories on the current resolution path
and refuses to re-enter one (:class:`ImportCycle`).
"""

from __future__ import annotations

import logging
from pathlib import Path

from modlink.domain.descriptor import read_descriptor
from modlink.domain.errors import ImportCycle, ImportNotFound, ModlinkError
from modlink.domain.rules import ImportRule, ResolvedRule, ResolvedRuleSet

logger = logging.getLogger(__name__)


class ImportResolver:
    """Resolve a descriptor into a flat, order-preserving rule set."""

    def __init__(self, descriptor_name: str) -> None:
        self._descriptor_name = descriptor_name

    def resolve(self, descriptor_path: Path) -> ResolvedRuleSet:
        """Return the flattened mapping rules reachable from *descriptor_path*.

        Raises:
            DescriptorUnreadable: the top-level descriptor cannot be read.
            ImportNotFound: a nested descriptor does not exist.
            ImportCycle: an import re-enters a module on the current path.
        """
        return tuple(self._resolve(descriptor_path, chain=()))

    def _resolve(self, descriptor_path: Path, chain: tuple[Path, ...]) -> list[ResolvedRule]:
        descriptor = read_descriptor(descriptor_path)
        base = descriptor.base_dir.resolve()
        chain = (*chain, base)
        logger.debug("Resolving %s (depth %d)", descriptor_path, len(chain))

        resolved: list[ResolvedRule] = []
        for rule in descriptor.rules:
            if not isinstance(rule, ImportRule):
                resolved.append(ResolvedRule.bind(rule, descriptor))
                continue

            nested = descriptor.base_dir / rule.module_root / self._descriptor_name
            try:
                resolved.extend(self._resolve_import(nested, rule, chain))
            except ModlinkError as exc:
                exc.annotate_import(rule.module_root)
                raise
        return resolved

    def _resolve_import(
        self,
        nested: Path,
        rule: ImportRule,
        chain: tuple[Path, ...],
    ) -> list[ResolvedRule]:
        if not nested.is_file():
            msg = f"Imported descriptor not found: {nested} (line {rule.line})"
            raise ImportNotFound(msg, path=str(nested), line=rule.line)

        nested_base = nested.parent.resolve()
        if nested_base in chain:
            cycle = [str(p) for p in (*chain, nested_base)]
            msg = f"Import cycle: {' -> '.join(cycle)}"
            raise ImportCycle(msg, chain=cycle, line=rule.line)

        return self._resolve(nested, chain)
