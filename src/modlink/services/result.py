"""ServiceResult and ServiceError — the service contract.

INVARIANT: Every public service method returns a ServiceResult. Engine
exceptions are converted at the service boundary, never leaked to the CLI.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from modlink.domain.errors import ModlinkError


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_exception(cls, exc: ModlinkError) -> ServiceError:
        return cls(code=exc.code, message=str(exc), detail=exc.to_detail())


class ServiceResult(BaseModel):
    """Return type for all service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"checkout"``).
        data: Operation-specific payload.
        warnings: Non-fatal issues (missing sources, duplicate targets).
        error: Structured error if ``ok`` is False.
        meta: Optional metadata.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(
        cls,
        op: str,
        code: str,
        message: str,
        *,
        data: dict[str, Any] | None = None,
        warnings: list[str] | None = None,
        **detail: Any,
    ) -> ServiceResult:
        return cls(
            ok=False,
            op=op,
            data=data or {},
            warnings=warnings or [],
            error=ServiceError(code=code, message=message, detail=detail),
        )

    @classmethod
    def from_exception(
        cls,
        op: str,
        exc: ModlinkError,
        *,
        data: dict[str, Any] | None = None,
        warnings: list[str] | None = None,
    ) -> ServiceResult:
        return cls(
            ok=False,
            op=op,
            data=data or {},
            warnings=warnings or [],
            error=ServiceError.from_exception(exc),
        )
