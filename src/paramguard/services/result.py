"""ServiceResult and ServiceError: what services hand to the CLI.

INVARIANT: CheckService methods never raise for bad input files or
invalid payloads. They return a failed ServiceResult carrying one of the
:class:`ErrorCode` values, and the CLI only formats it.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class ErrorCode(StrEnum):
    """Failure categories reported by the service layer."""

    RULES_ERROR = "RULES_ERROR"
    PAYLOAD_ERROR = "PAYLOAD_ERROR"
    VALIDATION_FAILED = "VALIDATION_FAILED"


class ServiceError(BaseModel):
    """Why a service operation failed."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one service operation.

    Attributes:
        ok: Whether the operation succeeded.
        op: Operation name, used to pick a renderer (``"check"``, ``"rules"``).
        data: Operation payload; failed checks still carry the outcome here.
        warnings: Non-fatal findings, such as skipped rules.
        error: Set when ``ok`` is False.
        meta: Diagnostics shown in verbose mode.
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
        code: ErrorCode | str,
        message: str,
        *,
        detail: dict[str, Any] | None = None,
        **fields: Any,
    ) -> ServiceResult:
        """Shorthand for a failed result; extra *fields* pass through."""
        error = ServiceError(code=str(code), message=message, detail=detail or {})
        return cls(ok=False, op=op, error=error, **fields)
