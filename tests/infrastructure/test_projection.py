"""Tests for ProjectionEngine — link and copy projections."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from modlink.domain.errors import ConflictError, CreationFailure
from modlink.domain.policy import ConflictPolicy
from modlink.domain.rules import ResolvedRule
from modlink.infrastructure.projection import (
    ProjectionEngine,
    ProjectionMode,
    dedupe_targets,
    remove_orphans,
)


@pytest.fixture
def wc(tmp_path: Path) -> Path:
    """A working copy with one file and one directory."""
    path = tmp_path / "wc"
    (path / "lib").mkdir(parents=True)
    (path / "lib" / "mod.py").write_text("print('hi')\n")
    (path / "index.php").write_text("<?php\n")
    return path


@pytest.fixture
def site(tmp_path: Path) -> Path:
    path = tmp_path / "site"
    path.mkdir()
    return path


def _rule(wc: Path, source: str, target: str) -> ResolvedRule:
    return ResolvedRule(source=source, target=target, base_dir=wc, origin=wc / "modlink.map")


class TestLinkProjection:
    def test_creates_symlinks(self, wc: Path, site: Path) -> None:
        engine = ProjectionEngine(site)
        report = engine.project([_rule(wc, "index.php", "index.php"), _rule(wc, "lib", "a/lib")])
        assert report.created == ["index.php", "a/lib"]
        assert (site / "index.php").resolve() == (wc / "index.php").resolve()
        assert (site / "a" / "lib").is_symlink()
        assert (site / "a" / "lib" / "mod.py").read_text() == "print('hi')\n"

    def test_second_run_is_noop(self, wc: Path, site: Path) -> None:
        rules = [_rule(wc, "index.php", "index.php")]
        ProjectionEngine(site).project(rules)
        before = os.readlink(site / "index.php")
        report = ProjectionEngine(site).project(rules)
        assert report.created == []
        assert report.unchanged == ["index.php"]
        assert os.readlink(site / "index.php") == before

    def test_wrong_symlink_replaced_without_force(self, wc: Path, site: Path) -> None:
        (site / "index.php").symlink_to(wc / "lib")
        report = ProjectionEngine(site).project([_rule(wc, "index.php", "index.php")])
        assert report.created == ["index.php"]
        assert (site / "index.php").resolve() == (wc / "index.php").resolve()

    def test_dangling_symlink_replaced(self, wc: Path, site: Path) -> None:
        (site / "index.php").symlink_to(wc / "gone")
        report = ProjectionEngine(site).project([_rule(wc, "index.php", "index.php")])
        assert report.created == ["index.php"]

    def test_missing_source_removes_link_and_warns(self, wc: Path, site: Path) -> None:
        ProjectionEngine(site).project([_rule(wc, "index.php", "index.php")])
        (wc / "index.php").unlink()
        report = ProjectionEngine(site).project([_rule(wc, "index.php", "index.php")])
        assert report.removed == ["index.php"]
        assert len(report.warnings) == 1
        assert "alias no longer present" in report.warnings[0]
        assert not (site / "index.php").is_symlink()

    def test_missing_source_without_link_only_warns(self, wc: Path, site: Path) -> None:
        report = ProjectionEngine(site).project([_rule(wc, "nope", "nope")])
        assert report.created == []
        assert report.removed == []
        assert report.warnings

    def test_relative_links(self, wc: Path, site: Path) -> None:
        engine = ProjectionEngine(site, relative_links=True)
        engine.project([_rule(wc, "index.php", "index.php")])
        assert not os.path.isabs(os.readlink(site / "index.php"))
        assert (site / "index.php").read_text() == "<?php\n"


class TestConflicts:
    def test_real_file_aborts(self, wc: Path, site: Path) -> None:
        (site / "index.php").write_text("local")
        engine = ProjectionEngine(site)
        rules = [_rule(wc, "lib", "lib"), _rule(wc, "index.php", "index.php")]
        with pytest.raises(ConflictError) as exc_info:
            engine.project(rules)
        err = exc_info.value
        assert err.detail["target"] == "index.php"
        assert err.detail["kind"] == "file"
        # No rollback: the earlier rule stays projected.
        assert err.detail["created"] == ["lib"]
        assert (site / "lib").is_symlink()
        assert (site / "index.php").read_text() == "local"

    def test_real_directory_aborts(self, wc: Path, site: Path) -> None:
        (site / "lib").mkdir()
        with pytest.raises(ConflictError):
            ProjectionEngine(site).project([_rule(wc, "lib", "lib")])

    def test_force_replaces(self, wc: Path, site: Path) -> None:
        (site / "lib").mkdir()
        (site / "lib" / "old").write_text("x")
        engine = ProjectionEngine(site, policy=ConflictPolicy(force=True))
        report = engine.project([_rule(wc, "lib", "lib")])
        assert report.replaced == ["lib"]
        assert (site / "lib").is_symlink()

    def test_rerun_after_fix_converges(self, wc: Path, site: Path) -> None:
        (site / "index.php").write_text("local")
        rules = [_rule(wc, "lib", "lib"), _rule(wc, "index.php", "index.php")]
        with pytest.raises(ConflictError):
            ProjectionEngine(site).project(rules)
        (site / "index.php").unlink()
        report = ProjectionEngine(site).project(rules)
        assert report.unchanged == ["lib"]
        assert report.created == ["index.php"]


class TestCopyProjection:
    def test_hardlinked_copies(self, wc: Path, site: Path) -> None:
        engine = ProjectionEngine(site, ProjectionMode.COPY)
        report = engine.project([_rule(wc, "lib", "lib"), _rule(wc, "index.php", "index.php")])
        assert report.created == ["lib", "index.php"]
        assert not (site / "lib").is_symlink()
        assert os.path.samefile(wc / "lib" / "mod.py", site / "lib" / "mod.py")
        assert os.path.samefile(wc / "index.php", site / "index.php")

    def test_copy_is_idempotent(self, wc: Path, site: Path) -> None:
        rules = [_rule(wc, "lib", "lib")]
        ProjectionEngine(site, ProjectionMode.COPY).project(rules)
        report = ProjectionEngine(site, ProjectionMode.COPY).project(rules)
        assert report.unchanged == ["lib"]

    def test_copy_replaces_symlink(self, wc: Path, site: Path) -> None:
        rules = [_rule(wc, "index.php", "index.php")]
        ProjectionEngine(site).project(rules)
        report = ProjectionEngine(site, ProjectionMode.COPY).project(rules)
        assert report.created == ["index.php"]
        assert not (site / "index.php").is_symlink()

    def test_copy_missing_source_keeps_entry(self, wc: Path, site: Path) -> None:
        (site / "gone").write_text("keep")
        report = ProjectionEngine(site, ProjectionMode.COPY).project([_rule(wc, "gone", "gone")])
        assert report.removed == []
        assert (site / "gone").read_text() == "keep"

    def test_identical_real_copy_is_unchanged(self, wc: Path, site: Path) -> None:
        (site / "index.php").write_text("<?php\n")
        (site / "lib").mkdir()
        (site / "lib" / "mod.py").write_text("print('hi')\n")
        rules = [_rule(wc, "index.php", "index.php"), _rule(wc, "lib", "lib")]
        report = ProjectionEngine(site, ProjectionMode.COPY).project(rules)
        assert report.unchanged == ["index.php", "lib"]
        assert report.created == []

    def test_differing_real_copy_still_conflicts(self, wc: Path, site: Path) -> None:
        (site / "lib").mkdir()
        (site / "lib" / "mod.py").write_text("print('changed')\n")
        with pytest.raises(ConflictError):
            ProjectionEngine(site, ProjectionMode.COPY).project([_rule(wc, "lib", "lib")])
        assert (site / "lib" / "mod.py").read_text() == "print('changed')\n"

    def test_extra_file_in_real_tree_conflicts(self, wc: Path, site: Path) -> None:
        (site / "lib").mkdir()
        (site / "lib" / "mod.py").write_text("print('hi')\n")
        (site / "lib" / "notes.txt").write_text("mine")
        with pytest.raises(ConflictError):
            ProjectionEngine(site, ProjectionMode.COPY).project([_rule(wc, "lib", "lib")])


class TestTargets:
    def test_duplicate_targets_last_wins(self, wc: Path, site: Path) -> None:
        rules = [_rule(wc, "lib", "x"), _rule(wc, "index.php", "x")]
        report = ProjectionEngine(site).project(rules)
        assert report.created == ["x"]
        assert (site / "x").resolve() == (wc / "index.php").resolve()
        assert any("Duplicate target x" in w for w in report.warnings)

    def test_dedupe_keeps_order(self, wc: Path) -> None:
        rules = [_rule(wc, "a", "1"), _rule(wc, "b", "2"), _rule(wc, "c", "1")]
        kept, warnings = dedupe_targets(rules)
        assert [r.source for r in kept] == ["b", "c"]
        assert len(warnings) == 1

    @pytest.mark.parametrize("target", ["../outside", ".", "a/../.."])
    def test_escaping_target(self, wc: Path, site: Path, target: str) -> None:
        with pytest.raises(CreationFailure):
            ProjectionEngine(site).project([_rule(wc, "lib", target)])
        assert not (site.parent / "outside").exists()

    @pytest.mark.parametrize("mode", list(ProjectionMode))
    def test_target_under_linked_directory(
        self, wc: Path, site: Path, mode: ProjectionMode
    ) -> None:
        (wc / "extra.py").write_text("x = 1\n")
        ProjectionEngine(site).project([_rule(wc, "lib", "lib")])
        with pytest.raises(CreationFailure, match="lies under the link"):
            ProjectionEngine(site, mode).project([_rule(wc, "extra.py", "lib/extra.py")])
        assert not (wc / "lib" / "extra.py").exists()


class TestRemoveOrphans:
    def test_unlinks_symlinks_only(self, wc: Path, site: Path) -> None:
        ProjectionEngine(site).project([_rule(wc, "lib", "lib")])
        (site / "real").write_text("x")
        removed = remove_orphans(["lib lib", "real real", "@import x"], site)
        assert removed == ["lib"]
        assert not (site / "lib").is_symlink()
        assert (site / "real").exists()
        assert (wc / "lib" / "mod.py").exists()
