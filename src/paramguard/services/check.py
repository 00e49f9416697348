"""CheckService: validate payload files against rule files.

Bridges the file loaders and the engine for the CLI. Validation failures
are escalated according to ``[validation] escalation`` (or an explicit
override) and reported as a failed ServiceResult.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from paramguard.domain.errors import Escalation, ValidationError
from paramguard.domain.rules import RuleNode
from paramguard.infrastructure.loader import (
    STDIN,
    RuleFileError,
    find_rules_file,
    load_payload,
    load_rules,
)
from paramguard.services.result import ErrorCode, ServiceResult
from paramguard.services.validator import Validator, normalize_params

if TYPE_CHECKING:
    from paramguard.config.settings import GuardSettings

logger = logging.getLogger(__name__)


def count_inert(nodes: Iterable[RuleNode]) -> int:
    """Count inert nodes anywhere in the tree."""
    total = 0
    for node in nodes:
        if node.is_inert:
            total += 1
        total += count_inert(node.children)
    return total


class CheckService:
    """File-level validation operations."""

    def __init__(self, settings: GuardSettings) -> None:
        self._settings = settings

    def _resolve(self, name: str) -> Path:
        return find_rules_file(
            name,
            self._settings.project_root,
            self._settings.rules.search_paths,
        )

    def _load_rules(self, op: str, name: str) -> tuple[Path, tuple[RuleNode, ...]] | ServiceResult:
        path = self._resolve(name)
        try:
            return path, load_rules(path)
        except RuleFileError as exc:
            return ServiceResult.failure(op, ErrorCode.RULES_ERROR, exc.reason, detail={"path": exc.path})

    def check(
        self,
        rules_file: str,
        payload_file: str,
        *,
        escalation: Escalation | None = None,
    ) -> ServiceResult:
        """Validate the payload in *payload_file* against *rules_file*."""
        op = "check"
        loaded = self._load_rules(op, rules_file)
        if isinstance(loaded, ServiceResult):
            return loaded
        path, rules = loaded

        try:
            payload = load_payload(payload_file if payload_file == STDIN else Path(payload_file))
            params = normalize_params(payload)
        except (RuleFileError, TypeError) as exc:
            return ServiceResult.failure(
                op, ErrorCode.PAYLOAD_ERROR, str(exc), detail={"path": payload_file}
            )
        outcome = Validator(rules).validate(params)

        warnings: list[str] = []
        inert = count_inert(rules)
        if inert:
            warnings.append(f"{inert} rule(s) missing a field or type were skipped")
        if not outcome.checked:
            warnings.append("No rules declared; nothing was checked")

        data = {"rules": rules_file, **outcome.to_dict()}
        meta = {"rules_path": str(path), "rule_count": len(rules)}
        mode = escalation or self._settings.validation.escalation
        try:
            outcome.raise_for_errors(mode, status=self._settings.validation.status)
        except ValidationError as exc:
            logger.debug("Validation failed at %s: %s", exc.field, exc.message)
            return ServiceResult.failure(
                op,
                ErrorCode.VALIDATION_FAILED,
                exc.message,
                detail={
                    "field": exc.field,
                    "status": exc.status.value,
                    "http_status": exc.http_status,
                    "additional_info": exc.additional_info,
                },
                data=data,
                warnings=warnings,
                meta=meta,
            )

        return ServiceResult(ok=True, op=op, data=data, warnings=warnings, meta=meta)

    def describe(self, rules_file: str) -> ServiceResult:
        """Summarize the rule tree declared in *rules_file*."""
        op = "rules"
        loaded = self._load_rules(op, rules_file)
        if isinstance(loaded, ServiceResult):
            return loaded
        path, rules = loaded

        warnings: list[str] = []
        inert = count_inert(rules)
        if inert:
            warnings.append(f"{inert} rule(s) missing a field or type will be skipped")
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "rules": rules_file,
                "count": len(rules),
                "items": [node.describe() for node in rules],
            },
            warnings=warnings,
            meta={"rules_path": str(path)},
        )
