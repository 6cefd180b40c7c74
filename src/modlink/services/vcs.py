"""VcsService — uninterpreted pass-through to the VCS client."""

from __future__ import annotations

from collections.abc import Sequence

from modlink.domain.errors import ModlinkError
from modlink.infrastructure.vcs import PASSTHROUGH_VERBS
from modlink.infrastructure.workspace import InvalidModuleName
from modlink.services.base import BaseService
from modlink.services.result import ServiceResult


class VcsService(BaseService):
    """Run ``status``, ``diff``, ``commit`` or ``info`` inside a working copy."""

    def run(self, verb: str, module: str, vcs_args: Sequence[str] = ()) -> ServiceResult:
        if verb not in PASSTHROUGH_VERBS:
            return ServiceResult.failure(verb, "UNKNOWN_VERB", f"Unknown VCS verb {verb!r}")
        try:
            ctx = self._workspace.context(module)
        except InvalidModuleName as exc:
            return ServiceResult.failure(verb, "INVALID_MODULE", str(exc))
        if not ctx.checked_out:
            return ServiceResult.failure(
                verb,
                "NOT_CHECKED_OUT",
                f"Module {ctx.module} is not checked out (expected {ctx.working_copy})",
                module=ctx.module,
            )

        try:
            out = self._workspace.vcs.run(verb, ctx.working_copy, vcs_args)
        except ModlinkError as exc:
            return ServiceResult.from_exception(verb, exc, data={"module": ctx.module})

        return ServiceResult(
            ok=True,
            op=verb,
            data={
                "module": ctx.module,
                "command": out.command,
                "stdout": out.stdout,
                "stderr": out.stderr,
            },
        )
