"""Tests for VcsService pass-through."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from modlink.infrastructure.workspace import Workspace
from modlink.services.vcs import VcsService
from tests.conftest import FakeVcs, checkout_module


class TestVcsService:
    def test_status(
        self, workspace: Workspace, make_module: Callable[..., Path], fake_vcs: FakeVcs
    ) -> None:
        make_module("blog", "", {})
        checkout_module(workspace, "blog")
        result = VcsService(workspace).run("status", "blog", ["-u"])
        assert result.ok
        assert result.op == "status"
        assert result.data["stdout"] == "status of blog\n"
        assert fake_vcs.calls[-1] == ("status", "blog", "-u")

    def test_not_checked_out(self, workspace: Workspace) -> None:
        result = VcsService(workspace).run("diff", "blog")
        assert result.error is not None
        assert result.error.code == "NOT_CHECKED_OUT"

    def test_unknown_verb(self, workspace: Workspace) -> None:
        result = VcsService(workspace).run("propset", "blog")
        assert result.error is not None
        assert result.error.code == "UNKNOWN_VERB"

    def test_failure_passes_through(
        self, workspace: Workspace, make_module: Callable[..., Path], fake_vcs: FakeVcs
    ) -> None:
        make_module("blog", "", {})
        checkout_module(workspace, "blog")
        fake_vcs.fail_on.add("commit")
        result = VcsService(workspace).run("commit", "blog", ["-m", "msg"])
        assert result.error is not None
        assert result.error.code == "VCS_COMMAND_FAILURE"
        assert "E170000" in result.error.detail["stderr"]
