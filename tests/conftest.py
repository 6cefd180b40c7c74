"""Shared pytest fixtures and test helpers for modlink tests."""

from __future__ import annotations

import shutil
from collections.abc import Callable, Sequence
from pathlib import Path

import pytest
from click.testing import CliRunner

from modlink.config.settings import ModlinkSettings
from modlink.infrastructure.vcs import VcsOutput
from modlink.infrastructure.workspace import Workspace

DESCRIPTOR = "modlink.map"


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep MODLINK_* variables from the developer's shell out of tests."""
    for name in (
        "MODLINK_CONFIG",
        "MODLINK_VCS__CLIENT",
        "MODLINK_VCS__REPOSITORY",
        "MODLINK_WORKSPACE__MODULES_DIR",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def root(tmp_path: Path) -> Path:
    """Projection root with a minimal modlink.toml.

    This is the single source of truth for the root layout. The fake
    repository lives next to it, outside the root.
    """
    site = tmp_path / "site"
    site.mkdir()
    (site / "modlink.toml").write_text('[vcs]\nrepository = "svn://example/modules"\n')
    return site


@pytest.fixture
def repository(tmp_path: Path) -> Path:
    """Directory holding one sub-directory per fake upstream module."""
    repo = tmp_path / "repo"
    repo.mkdir()
    return repo


class FakeVcs:
    """In-process stand-in for VcsClient backed by plain directories.

    ``checkout`` and ``export`` copy ``<repository>/<module>``; ``update``
    re-syncs the working copy from the repository so tests can "commit"
    upstream changes by editing the repository directory.
    """

    client = "svn"

    def __init__(self, repository: Path) -> None:
        self.repository = repository
        self.calls: list[tuple[str, ...]] = []
        self.fail_on: set[str] = set()

    def _check(self, verb: str) -> None:
        if verb in self.fail_on:
            from modlink.domain.errors import VcsCommandFailure

            raise VcsCommandFailure(
                f"svn {verb} exited with status 1: E170000: boom",
                command=["svn", verb],
                returncode=1,
                stderr="svn: E170000: boom",
            )

    def checkout(self, module: str, dest: Path, extra: Sequence[str] = ()) -> VcsOutput:
        self.calls.append(("checkout", module, *extra))
        self._check("checkout")
        shutil.copytree(self.repository / module, dest, symlinks=True)
        return VcsOutput(["svn", "checkout"], 0, "", "")

    def export(self, module: str, dest: Path, extra: Sequence[str] = ()) -> VcsOutput:
        self.calls.append(("export", module, *extra))
        self._check("export")
        shutil.copytree(self.repository / module, dest, symlinks=True)
        return VcsOutput(["svn", "export"], 0, "", "")

    def update(self, working_copy: Path, extra: Sequence[str] = ()) -> VcsOutput:
        self.calls.append(("update", working_copy.name, *extra))
        self._check("update")
        shutil.rmtree(working_copy)
        shutil.copytree(self.repository / working_copy.name, working_copy, symlinks=True)
        return VcsOutput(["svn", "update"], 0, "At revision 2.\n", "")

    def run(self, verb: str, working_copy: Path, extra: Sequence[str] = ()) -> VcsOutput:
        self.calls.append((verb, working_copy.name, *extra))
        self._check(verb)
        return VcsOutput(["svn", verb, *extra], 0, f"{verb} of {working_copy.name}\n", "")


@pytest.fixture
def fake_vcs(repository: Path) -> FakeVcs:
    return FakeVcs(repository)


@pytest.fixture
def workspace(root: Path, fake_vcs: FakeVcs) -> Workspace:
    """Workspace on the temp root with the fake VCS client injected."""
    settings = ModlinkSettings.from_cli(root=root)
    return Workspace(settings, vcs=fake_vcs)  # type: ignore[arg-type]


@pytest.fixture
def make_module(repository: Path) -> Callable[..., Path]:
    """Create ``<repository>/<name>`` with files and a descriptor."""
    return lambda name, descriptor, files=None: write_module(
        repository / name, descriptor, files or {}
    )


# ---------------------------------------------------------------------------
# Shared test helpers (used across test modules)
# ---------------------------------------------------------------------------


def write_module(path: Path, descriptor: str, files: dict[str, str]) -> Path:
    """Write *files* (relative path -> content) and the descriptor under *path*."""
    path.mkdir(parents=True, exist_ok=True)
    for rel, content in files.items():
        target = path / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content)
    (path / DESCRIPTOR).write_text(descriptor)
    return path


def checkout_module(workspace: Workspace, name: str) -> dict:
    """Check out *name* via ModuleService, asserting success."""
    from modlink.services.module import ModuleService

    result = ModuleService(workspace).checkout(name)
    assert result.ok, result.error
    return result.data
