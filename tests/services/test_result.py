"""Tests for ServiceResult and ServiceError."""

import json

import pytest

from paramguard.services.result import ErrorCode, ServiceError, ServiceResult


class TestServiceResult:
    def test_success_construction(self) -> None:
        result = ServiceResult(ok=True, op="check", data={"status": "passed"})
        assert result.ok is True
        assert result.op == "check"
        assert result.data == {"status": "passed"}
        assert result.warnings == []
        assert result.error is None
        assert result.meta is None

    def test_error_construction(self) -> None:
        error = ServiceError(code="RULES_ERROR", message="cannot read")
        result = ServiceResult(ok=False, op="check", error=error)
        assert result.ok is False
        assert result.error is not None
        assert result.error.code == "RULES_ERROR"

    def test_json_serialization(self) -> None:
        result = ServiceResult(ok=True, op="rules", data={"count": 2}, meta={"duration_ms": 3})
        parsed = json.loads(result.model_dump_json())
        assert parsed["ok"] is True
        assert parsed["data"]["count"] == 2
        assert parsed["meta"]["duration_ms"] == 3

    def test_frozen(self) -> None:
        result = ServiceResult(ok=True, op="test")
        with pytest.raises(Exception):
            result.ok = False  # type: ignore[misc]


class TestServiceError:
    def test_with_detail(self) -> None:
        error = ServiceError(code="VALIDATION_FAILED", message="bad", detail={"field": "age"})
        assert error.detail["field"] == "age"

    def test_default_detail(self) -> None:
        error = ServiceError(code="E001", message="bad")
        assert error.detail == {}


class TestFailure:
    def test_builds_failed_result(self) -> None:
        result = ServiceResult.failure(
            "check", ErrorCode.PAYLOAD_ERROR, "not a mapping", detail={"path": "p.json"}
        )
        assert result.ok is False
        assert result.error is not None
        assert result.error.code == "PAYLOAD_ERROR"
        assert result.error.detail == {"path": "p.json"}

    def test_extra_fields_pass_through(self) -> None:
        result = ServiceResult.failure(
            "check", ErrorCode.VALIDATION_FAILED, "bad", data={"error_count": 1}, warnings=["w"]
        )
        assert result.data == {"error_count": 1}
        assert result.warnings == ["w"]
