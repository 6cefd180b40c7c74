"""Descriptor diffing across a version-control update.

Comparison is by exact line text: reordering an unchanged line is not a
removal, while any textual change (whitespace included) counts as a
removal plus an addition.
"""

from __future__ import annotations

from collections.abc import Iterable

from modlink.domain.descriptor import parse_line, rule_lines
from modlink.domain.errors import DescriptorSyntaxError
from modlink.domain.rules import MappingRule


def diff_descriptors(old_lines: Iterable[str], new_lines: Iterable[str]) -> list[str]:
    """Rule lines of *old_lines* that no longer appear in *new_lines*.

    Examples:
        >>> diff_descriptors(["a b", "c d"], ["c d", "e f"])
        ['a b']
    """
    current = set(rule_lines(new_lines))
    removed: list[str] = []
    seen: set[str] = set()
    for line in rule_lines(old_lines):
        if line in current or line in seen:
            continue
        seen.add(line)
        removed.append(line)
    return removed


def removed_mappings(removed_lines: Iterable[str]) -> list[MappingRule]:
    """Mapping rules among *removed_lines*; imports and malformed lines are skipped."""
    mappings: list[MappingRule] = []
    for line in removed_lines:
        try:
            rule = parse_line(line)
        except DescriptorSyntaxError:
            continue
        if isinstance(rule, MappingRule):
            mappings.append(rule)
    return mappings
