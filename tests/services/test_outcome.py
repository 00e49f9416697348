"""Tests for ValidationOutcome and caller-selected escalation."""

import pytest

from paramguard.domain.errors import Escalation, ValidationError
from paramguard.domain.types import ErrorKind, ErrorStatus
from paramguard.services.outcome import OutcomeStatus, ValidationOutcome


def _failed() -> ValidationOutcome:
    outcome = ValidationOutcome()
    outcome.add("name", ErrorKind.MISSING_REQUIRED, "Parameter name is required")
    outcome.add("age", ErrorKind.OUT_OF_RANGE, "Parameter age must be at least 18")
    return outcome


class TestStatus:
    def test_no_rules(self) -> None:
        outcome = ValidationOutcome(checked=False)
        assert outcome.status is OutcomeStatus.NO_RULES
        assert outcome.ok is True
        assert outcome.first_error() is None

    def test_passed(self) -> None:
        outcome = ValidationOutcome()
        assert outcome.status is OutcomeStatus.PASSED
        assert outcome.ok is True

    def test_failed(self) -> None:
        outcome = _failed()
        assert outcome.status is OutcomeStatus.FAILED
        assert outcome.ok is False
        assert outcome.paths() == ["name", "age"]
        first = outcome.first_error()
        assert first is not None
        assert first.path == "name"


class TestRaiseForErrors:
    def test_no_errors_no_raise(self) -> None:
        ValidationOutcome().raise_for_errors()
        ValidationOutcome(checked=False).raise_for_errors(Escalation.ALL)

    def test_first_error(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            _failed().raise_for_errors()
        err = exc_info.value
        assert err.field == "name"
        assert err.message == "Parameter name is required"
        assert err.status is ErrorStatus.UNPROCESSABLE
        assert err.additional_info is None

    def test_all_errors(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            _failed().raise_for_errors("all", status="bad_request")
        err = exc_info.value
        assert err.field == "name"
        assert err.http_status == 400
        assert [e["path"] for e in err.additional_info["errors"]] == ["name", "age"]


class TestToDict:
    def test_shape(self) -> None:
        data = _failed().to_dict()
        assert data["status"] == "failed"
        assert data["error_count"] == 2
        assert data["errors"][1] == {
            "path": "age",
            "kind": "out_of_range",
            "message": "Parameter age must be at least 18",
        }

    def test_no_rules_shape(self) -> None:
        assert ValidationOutcome(checked=False).to_dict() == {
            "status": "no_rules",
            "error_count": 0,
            "errors": [],
        }
