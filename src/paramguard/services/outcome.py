"""ValidationOutcome — the per-run accumulator of field errors.

Created empty by the engine, appended to during traversal, and handed
back to the caller. The caller chooses whether failures are raised
(first only, or all) or inspected as a list.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from paramguard.domain.errors import Escalation, FieldError, ValidationError
from paramguard.domain.types import ErrorKind, ErrorStatus


class OutcomeStatus(StrEnum):
    """Overall result of one validation run."""

    NO_RULES = "no_rules"
    PASSED = "passed"
    FAILED = "failed"


@dataclass
class ValidationOutcome:
    """Errors found by one ``validate`` call, in rule declaration order.

    ``NO_RULES`` means nothing was checked, which is distinct from
    ``PASSED`` (everything checked, nothing wrong).
    """

    checked: bool = True
    errors: list[FieldError] = field(default_factory=list)

    @property
    def status(self) -> OutcomeStatus:
        if not self.checked:
            return OutcomeStatus.NO_RULES
        return OutcomeStatus.FAILED if self.errors else OutcomeStatus.PASSED

    @property
    def ok(self) -> bool:
        return not self.errors

    def add(self, path: str, kind: ErrorKind, message: str) -> None:
        self.errors.append(FieldError(path=path, kind=kind, message=message))

    def first_error(self) -> FieldError | None:
        return self.errors[0] if self.errors else None

    def paths(self) -> list[str]:
        return [e.path for e in self.errors]

    def raise_for_errors(
        self,
        escalation: Escalation | str = Escalation.FIRST,
        *,
        status: ErrorStatus | str = ErrorStatus.UNPROCESSABLE,
    ) -> None:
        """Raise a :class:`ValidationError` if any error was recorded.

        Args:
            escalation: ``first`` surfaces only the first error; ``all``
                also attaches every error under ``additional_info``.
            status: Status carried by the raised error.
        """
        if self.errors:
            raise ValidationError.from_field_errors(
                self.errors, escalation=escalation, status=status
            )

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "error_count": len(self.errors),
            "errors": [e.model_dump(mode="json") for e in self.errors],
        }
