"""Descriptor parsing — text to an ordered rule sequence.

Format, one rule per line::

    <source> <target>
    @import <module-root>
    # comment
    <blank>

Parsing never checks whether paths exist; that belongs to projection.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from modlink.domain.errors import DescriptorSyntaxError, DescriptorUnreadable
from modlink.domain.rules import (
    IMPORT_MARKER,
    ImportRule,
    MappingRule,
    ModuleDescriptor,
    Rule,
    normalize_path,
)


def is_rule_line(line: str) -> bool:
    """True unless *line* is blank or a ``#`` comment."""
    stripped = line.strip()
    return bool(stripped) and not stripped.startswith("#")


def rule_lines(lines: Iterable[str]) -> list[str]:
    """Keep the lines that carry rules, with line terminators removed."""
    return [line.rstrip("\r\n") for line in lines if is_rule_line(line)]


def parse_line(line: str, lineno: int = 0) -> Rule:
    """Parse a single rule line.

    Raises:
        DescriptorSyntaxError: if the line does not hold exactly two tokens.
    """
    tokens = line.split()
    if len(tokens) != 2:
        msg = f"line {lineno}: expected 2 fields, found {len(tokens)}: {line.strip()!r}"
        raise DescriptorSyntaxError(msg, line=lineno, text=line.strip())

    first, second = tokens
    text = line.rstrip("\r\n")
    if first == IMPORT_MARKER:
        return ImportRule(module_root=normalize_path(second), line=lineno, text=text)
    return MappingRule(
        source=normalize_path(first),
        target=normalize_path(second),
        line=lineno,
        text=text,
    )


def parse_descriptor(text: str) -> tuple[Rule, ...]:
    """Parse descriptor *text* into rules, preserving order."""
    rules: list[Rule] = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        if not is_rule_line(line):
            continue
        rules.append(parse_line(line, lineno))
    return tuple(rules)


def read_descriptor(path: Path) -> ModuleDescriptor:
    """Read and parse the descriptor file at *path*.

    Raises:
        DescriptorUnreadable: if the file is missing or unreadable.
        DescriptorSyntaxError: if a line is malformed.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        msg = f"Cannot read descriptor {path}: {exc}"
        raise DescriptorUnreadable(msg, path=str(path)) from exc

    try:
        rules = parse_descriptor(text)
    except DescriptorSyntaxError as exc:
        exc.message = f"{path}: {exc.message}"
        exc.args = (exc.message,)
        exc.detail["path"] = str(path)
        raise
    return ModuleDescriptor(path=path, rules=rules)


def format_rule(source: str, target: str) -> str:
    """Canonical descriptor line for a mapping rule."""
    return f"{normalize_path(source)} {normalize_path(target)}"
