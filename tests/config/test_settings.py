"""Tests for GuardSettings — unified settings with TOML source."""

from pathlib import Path

import click
import pytest

from paramguard.config.settings import GuardSettings
from paramguard.domain.errors import Escalation
from paramguard.domain.types import ErrorStatus


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("PARAMGUARD_CONFIG", raising=False)
    monkeypatch.delenv("PARAMGUARD_VALIDATION__ESCALATION", raising=False)


class TestGuardSettingsDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        settings = GuardSettings.from_cli(project_root=tmp_path)
        assert settings.project_root == tmp_path
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.quiet is False
        assert settings.verbose is False
        assert settings.validation.escalation is Escalation.FIRST
        assert settings.validation.status is ErrorStatus.UNPROCESSABLE
        assert settings.rules.search_paths == []

    def test_frozen(self, tmp_path: Path) -> None:
        settings = GuardSettings.from_cli(project_root=tmp_path)
        with pytest.raises(Exception):
            settings.quiet = True  # type: ignore[misc]


class TestTomlSource:
    def test_loads_from_toml(self, tmp_path: Path) -> None:
        (tmp_path / "paramguard.toml").write_text(
            '[validation]\nescalation = "all"\n[rules]\nsearch_paths = ["api/rules"]\n'
        )
        settings = GuardSettings.from_cli(project_root=tmp_path)
        assert settings.validation.escalation is Escalation.ALL
        assert settings.validation.status is ErrorStatus.UNPROCESSABLE  # default preserved
        assert settings.rules.search_paths == ["api/rules"]
        assert settings.config_path == tmp_path / "paramguard.toml"

    def test_root_from_discovered_config(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "paramguard.toml").write_text("")
        child = tmp_path / "a" / "b"
        child.mkdir(parents=True)
        monkeypatch.chdir(child)
        settings = GuardSettings.from_cli()
        assert settings.project_root == (tmp_path / "paramguard.toml").resolve().parent

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom" / "my.toml"
        custom.parent.mkdir(parents=True)
        custom.write_text('[validation]\nstatus = "bad_request"\n')
        settings = GuardSettings.from_cli(config_path=str(custom), project_root=tmp_path)
        assert settings.validation.status is ErrorStatus.BAD_REQUEST
        assert settings.config_path == custom

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "paramguard.toml").write_text("[validation\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            GuardSettings.from_cli(project_root=tmp_path)


class TestPriority:
    def test_env_beats_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "paramguard.toml").write_text('[validation]\nescalation = "first"\n')
        monkeypatch.setenv("PARAMGUARD_VALIDATION__ESCALATION", "all")
        settings = GuardSettings.from_cli(project_root=tmp_path)
        assert settings.validation.escalation is Escalation.ALL

    def test_cli_flags_beat_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PARAMGUARD_QUIET", "false")
        settings = GuardSettings.from_cli(project_root=tmp_path, quiet=True)
        assert settings.quiet is True


class TestFromCli:
    def test_missing_explicit_config(self, tmp_path: Path) -> None:
        with pytest.raises(click.ClickException, match="Config file not found"):
            GuardSettings.from_cli(config_path=str(tmp_path / "nope.toml"), project_root=tmp_path)

    def test_cli_search_paths_come_first(self, tmp_path: Path) -> None:
        (tmp_path / "paramguard.toml").write_text('[rules]\nsearch_paths = ["config/rules"]\n')
        settings = GuardSettings.from_cli(project_root=tmp_path, search_paths=("extra",))
        assert settings.rules.search_paths == ["extra", "config/rules"]
