"""Tests for descriptor diffing."""

from modlink.domain.differ import diff_descriptors, removed_mappings


class TestDiffDescriptors:
    def test_removed_line(self) -> None:
        old = ["a b", "c d"]
        new = ["c d", "e f"]
        assert diff_descriptors(old, new) == ["a b"]

    def test_reordering_is_not_removal(self) -> None:
        assert diff_descriptors(["a b", "c d"], ["c d", "a b"]) == []

    def test_whitespace_change_counts(self) -> None:
        assert diff_descriptors(["a  b"], ["a b"]) == ["a  b"]

    def test_comments_and_blanks_ignored(self) -> None:
        assert diff_descriptors(["# old", "", "a b"], ["a b"]) == []

    def test_duplicates_reported_once(self) -> None:
        assert diff_descriptors(["a b", "a b"], []) == ["a b"]

    def test_everything_removed(self) -> None:
        assert diff_descriptors(["a b", "@import x"], []) == ["a b", "@import x"]


class TestRemovedMappings:
    def test_skips_imports_and_malformed(self) -> None:
        rules = removed_mappings(["a b", "@import x", "bad line here"])
        assert [(r.source, r.target) for r in rules] == [("a", "b")]
