"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, paramguard.toml only contains
overrides. An empty file (or none at all) is a valid configuration.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from paramguard.domain.errors import Escalation
from paramguard.domain.types import ErrorStatus


class ValidationConfig(BaseModel):
    """[validation] section."""

    model_config = {"frozen": True}

    escalation: Escalation = Escalation.FIRST
    status: ErrorStatus = ErrorStatus.UNPROCESSABLE


class RulesConfig(BaseModel):
    """[rules] section."""

    model_config = {"frozen": True}

    search_paths: list[str] = Field(default_factory=list)


class GuardConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    rules: RulesConfig = Field(default_factory=RulesConfig)
