"""Fixtures for CLI command tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from tests.conftest import FakeVcs


@pytest.fixture
def _isolated_root(root: Path, fake_vcs: FakeVcs, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run the CLI inside the temp root with the fake VCS client.

    Use via ``@pytest.mark.usefixtures("_isolated_root")`` on command test
    classes.
    """
    monkeypatch.chdir(root)
    monkeypatch.setattr("modlink.infrastructure.workspace.VcsClient", lambda config: fake_vcs)
