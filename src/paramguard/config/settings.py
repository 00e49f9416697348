"""GuardSettings: CLI flags, env vars and ``paramguard.toml`` merged into one object.

Priority chain (highest to lowest):
  1. Init kwargs   (CLI flags passed by Click)
  2. Env vars      (``PARAMGUARD_*``, nested sections split on ``__``)
  3. TOML file     (``paramguard.toml`` found by walk-up, or ``--config``)
  4. Code defaults (the section models)

For example ``PARAMGUARD_VALIDATION__ESCALATION=all`` beats
``[validation] escalation = "first"`` in the TOML file.
"""

from __future__ import annotations

import tomllib
from contextvars import ContextVar
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from paramguard.config.discovery import find_config, read_config_table
from paramguard.config.models import RulesConfig, ValidationConfig

# TOML file chosen by from_cli, read back by the settings source.
_toml_path: ContextVar[Path | None] = ContextVar("paramguard_toml_path", default=None)


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Settings source backed by the sections of one TOML file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._sections: dict[str, Any] = {}
        if toml_path is not None and toml_path.is_file():
            try:
                self._sections = read_config_table(toml_path)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._sections.get(field_name), field_name, field_name in self._sections

    def __call__(self) -> dict[str, Any]:
        return self._sections


class GuardSettings(BaseSettings):
    """Frozen settings for one paramguard invocation.

    Attributes:
        project_root: Directory holding the config file (or CWD if none was
            found). Relative rule paths and search paths resolve against it.
        config_path: The config file actually loaded, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "PARAMGUARD_",
        "env_nested_delimiter": "__",
    }

    project_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    rules: RulesConfig = Field(default_factory=RulesConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, _toml_path.get()),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        project_root: Path | None = None,
        search_paths: tuple[str, ...] | list[str] = (),
        **cli_flags: Any,
    ) -> GuardSettings:
        """Build settings for a CLI invocation.

        An explicit *config_path* must exist. Otherwise the config file is
        discovered by walking up from *project_root* (or CWD). Extra
        *search_paths* from the command line are tried before the
        configured ``[rules] search_paths``.
        """
        if config_path:
            toml_path: Path | None = Path(config_path)
            if not toml_path.is_file():
                msg = f"Config file not found: {config_path}"
                raise click.ClickException(msg)
        else:
            toml_path = find_config(project_root)

        if project_root is None:
            project_root = toml_path.parent if toml_path else Path.cwd()

        token = _toml_path.set(toml_path)
        try:
            settings = cls(project_root=project_root, config_path=toml_path, **cli_flags)
        finally:
            _toml_path.reset(token)

        if search_paths:
            merged = [*search_paths, *settings.rules.search_paths]
            settings = settings.model_copy(update={"rules": RulesConfig(search_paths=merged)})
        return settings
