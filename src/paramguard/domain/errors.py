"""Error model — per-field failures and the caller-facing ValidationError."""

from __future__ import annotations

from collections.abc import Sequence
from enum import StrEnum
from typing import Any

from pydantic import BaseModel

from paramguard.domain.types import HTTP_STATUS_CODES, ErrorKind, ErrorStatus

DEFAULT_MESSAGE = "Something went wrong"
DEFAULT_FIELD = "base"


class Escalation(StrEnum):
    """How a failed outcome is turned into a raised error."""

    FIRST = "first"
    ALL = "all"


class FieldError(BaseModel):
    """One failure at one field path (``users[1].age``)."""

    model_config = {"frozen": True}

    path: str
    kind: ErrorKind
    message: str


class ValidationError(Exception):
    """A validation failure ready to be rendered at an HTTP-style boundary.

    When *message* is omitted the generic ``"Something went wrong"`` text
    is used; *status* defaults to ``unprocessable``.
    """

    def __init__(
        self,
        field: str = DEFAULT_FIELD,
        status: ErrorStatus | str = ErrorStatus.UNPROCESSABLE,
        message: str | None = None,
        *,
        additional_info: Any = None,
    ) -> None:
        self.field = field
        self.status = ErrorStatus(status)
        self.message = message or DEFAULT_MESSAGE
        self.additional_info = additional_info
        super().__init__(self.message)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(field={self.field!r}, status={self.status.value!r}, "
            f"message={self.message!r})"
        )

    @property
    def http_status(self) -> int:
        return HTTP_STATUS_CODES[self.status]

    def to_dict(self) -> dict[str, Any]:
        """Render the structured error body."""
        return {
            "errors": {
                "field": self.field,
                "message": self.message,
                "additional_info": self.additional_info,
            }
        }

    @classmethod
    def from_field_errors(
        cls,
        errors: Sequence[FieldError],
        *,
        escalation: Escalation | str = Escalation.FIRST,
        status: ErrorStatus | str = ErrorStatus.UNPROCESSABLE,
    ) -> ValidationError:
        """Build one error from an outcome's field errors.

        ``first`` reports only the first failure. ``all`` keeps the first
        failure's field and message and lists every failure under
        ``additional_info["errors"]``.

        Raises:
            ValueError: If *errors* is empty.
        """
        if not errors:
            msg = "Cannot build a ValidationError from an empty error list"
            raise ValueError(msg)
        first = errors[0]
        info: dict[str, Any] | None = None
        if Escalation(escalation) is Escalation.ALL:
            info = {"errors": [e.model_dump(mode="json") for e in errors]}
        return cls(first.path, status, first.message, additional_info=info)
