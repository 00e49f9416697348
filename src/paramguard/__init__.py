"""paramguard — declarative, recursive parameter validation.

Build a rule tree once, validate many payloads against it::

    from paramguard import build_rules, validate

    rules = build_rules(lambda r: r.param("name", str, required=True))
    outcome = validate({"name": ""}, rules)
    outcome.raise_for_errors()  # ValidationError: Parameter name is required
"""

from __future__ import annotations

from paramguard.domain.dsl import RuleBuilder, build_rules
from paramguard.domain.errors import Escalation, FieldError, ValidationError
from paramguard.domain.rules import Constraint, RuleNode, coerce_rule, coerce_rules
from paramguard.domain.types import ErrorKind, ErrorStatus, FieldType
from paramguard.services.outcome import OutcomeStatus, ValidationOutcome
from paramguard.services.validator import Validator, normalize_params, validate

__version__ = "0.1.0"

__all__ = [
    "Constraint",
    "ErrorKind",
    "ErrorStatus",
    "Escalation",
    "FieldError",
    "FieldType",
    "OutcomeStatus",
    "RuleBuilder",
    "RuleNode",
    "ValidationError",
    "ValidationOutcome",
    "Validator",
    "__version__",
    "build_rules",
    "coerce_rule",
    "coerce_rules",
    "normalize_params",
    "validate",
]
