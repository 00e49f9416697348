"""Shared pytest fixtures for paramguard tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from paramguard.domain.dsl import RuleBuilder, build_rules
from paramguard.domain.rules import RuleNode

USER_RULES_YAML = """\
rules:
  email:
    type: string
    required: true
    format: "^[^@]+@[^@]+$"
  user:
    type: object
    required: true
    children:
      name: {type: string, required: true, blank: false}
      age: {type: integer, min: 18}
  tags:
    type: list
    element_type: string
"""


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def project_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Temporary project directory with a rule file, used as CWD.

    Clears ``PARAMGUARD_*`` env vars so the host environment cannot leak
    into settings resolution.
    """
    monkeypatch.delenv("PARAMGUARD_CONFIG", raising=False)
    monkeypatch.delenv("PARAMGUARD_VALIDATION__ESCALATION", raising=False)
    (tmp_path / "rules").mkdir()
    (tmp_path / "rules" / "users.yaml").write_text(USER_RULES_YAML, encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _user_children(u: RuleBuilder) -> None:
    u.param("name", str, required=True)
    u.param("age", int, required=False)


@pytest.fixture
def user_rules() -> dict[str, RuleNode]:
    """``user`` object with a required name and an optional age."""
    return build_rules(lambda r: r.param("user", dict, children=_user_children))
