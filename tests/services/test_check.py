"""Tests for CheckService (file-level validation)."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from paramguard.config.settings import GuardSettings
from paramguard.domain.errors import Escalation
from paramguard.domain.rules import RuleNode
from paramguard.services.check import CheckService, count_inert


def _service(root: Path, **flags: object) -> CheckService:
    return CheckService(GuardSettings.from_cli(project_root=root, **flags))


def _payload(root: Path, data: object, name: str = "payload.json") -> str:
    path = root / name
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


VALID = {"email": "a@b.io", "user": {"name": "Ann", "age": 30}, "tags": ["x"]}


class TestCheck:
    def test_valid_payload(self, project_root: Path) -> None:
        result = _service(project_root).check("rules/users.yaml", _payload(project_root, VALID))
        assert result.ok is True
        assert result.op == "check"
        assert result.data["status"] == "passed"
        assert result.data["error_count"] == 0
        assert result.warnings == []

    def test_first_error_by_default(self, project_root: Path) -> None:
        payload = {"email": "nope", "user": {"name": " ", "age": 12}, "tags": [1]}
        result = _service(project_root).check("rules/users.yaml", _payload(project_root, payload))
        assert result.ok is False
        assert result.error is not None
        assert result.error.code == "VALIDATION_FAILED"
        assert result.error.message == "Parameter email format is invalid"
        assert result.error.detail["field"] == "email"
        assert result.error.detail["http_status"] == 422
        assert result.error.detail["additional_info"] is None
        assert [e["path"] for e in result.data["errors"]] == [
            "email",
            "user.name",
            "user.age",
            "tags[0]",
        ]

    def test_all_errors_override(self, project_root: Path) -> None:
        payload = {"user": {"name": "Ann"}}
        result = _service(project_root).check(
            "rules/users.yaml",
            _payload(project_root, payload),
            escalation=Escalation.ALL,
        )
        assert result.ok is False
        assert result.error is not None
        info = result.error.detail["additional_info"]
        assert [e["path"] for e in info["errors"]] == ["email"]

    def test_escalation_from_config(self, project_root: Path) -> None:
        (project_root / "paramguard.toml").write_text(
            '[validation]\nescalation = "all"\nstatus = "bad_request"\n'
        )
        result = _service(project_root).check("rules/users.yaml", _payload(project_root, {}))
        assert result.error is not None
        assert result.error.detail["status"] == "bad_request"
        assert result.error.detail["http_status"] == 400
        assert [e["path"] for e in result.error.detail["additional_info"]["errors"]] == [
            "email",
            "user",
        ]

    def test_search_paths(self, project_root: Path) -> None:
        (project_root / "paramguard.toml").write_text('[rules]\nsearch_paths = ["rules"]\n')
        result = _service(project_root).check("users.yaml", _payload(project_root, VALID))
        assert result.ok is True

    def test_missing_rules_file(self, project_root: Path) -> None:
        result = _service(project_root).check("rules/absent.yaml", _payload(project_root, VALID))
        assert result.ok is False
        assert result.error is not None
        assert result.error.code == "RULES_ERROR"

    def test_unreadable_payload(self, project_root: Path) -> None:
        bad = project_root / "bad.json"
        bad.write_text("{not json")
        result = _service(project_root).check("rules/users.yaml", str(bad))
        assert result.error is not None
        assert result.error.code == "PAYLOAD_ERROR"

    def test_non_object_payload(self, project_root: Path) -> None:
        result = _service(project_root).check("rules/users.yaml", _payload(project_root, [1, 2]))
        assert result.error is not None
        assert result.error.code == "PAYLOAD_ERROR"

    def test_empty_rules_warn(self, project_root: Path) -> None:
        (project_root / "rules" / "empty.yaml").write_text("rules: []\n")
        result = _service(project_root).check("rules/empty.yaml", _payload(project_root, {}))
        assert result.ok is True
        assert result.data["status"] == "no_rules"
        assert "No rules declared; nothing was checked" in result.warnings

    def test_inert_rules_warn(self, project_root: Path) -> None:
        (project_root / "rules" / "loose.yaml").write_text(
            "rules:\n  - {field: a}\n  - {field: b, type: string}\n"
        )
        result = _service(project_root).check("rules/loose.yaml", _payload(project_root, {}))
        assert result.ok is True
        assert result.warnings == ["1 rule(s) missing a field or type were skipped"]


class TestDescribe:
    def test_rule_tree(self, project_root: Path) -> None:
        result = _service(project_root).describe("rules/users.yaml")
        assert result.ok is True
        assert result.op == "rules"
        assert result.data["count"] == 3
        user = result.data["items"][1]
        assert user["field"] == "user"
        assert user["type"] == "object"
        assert [c["field"] for c in user["children"]] == ["name", "age"]

    def test_missing_file(self, project_root: Path) -> None:
        result = _service(project_root).describe("nope.yaml")
        assert result.ok is False


def test_count_inert_walks_children() -> None:
    nodes = (
        RuleNode(field="a", type=dict, children=(RuleNode(field="x"), RuleNode(type=str))),
        RuleNode(field="b"),
    )
    assert count_inert(nodes) == 3


class TestMeta:
    def test_resolved_rules_path_and_count(self, project_root: Path) -> None:
        payload = project_root / "ok.json"
        payload.write_text('{"email": "a@b", "user": {"name": "Ann"}}', encoding="utf-8")
        settings = GuardSettings.from_cli(project_root=project_root)
        result = CheckService(settings).check("rules/users.yaml", str(payload))
        assert result.ok
        assert result.meta is not None
        assert Path(result.meta["rules_path"]).name == "users.yaml"
        assert result.meta["rule_count"] == 3


class TestEngineErrors:
    def test_engine_type_error_is_not_a_payload_error(
        self, project_root: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def broken(self: object, payload: object) -> None:
            raise TypeError("engine bug")

        monkeypatch.setattr("paramguard.services.check.Validator.validate", broken)
        payload = _payload(project_root, {"email": "a@b"})
        with pytest.raises(TypeError, match="engine bug"):
            _service(project_root).check("rules/users.yaml", payload)
