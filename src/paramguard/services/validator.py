"""Validation engine — walks a payload against a rule tree.

INVARIANT: The engine never raises for validation failures and never
mutates the payload. Every failure lands in the returned
:class:`ValidationOutcome`, in rule declaration order; escalation is
the caller's choice (see :meth:`ValidationOutcome.raise_for_errors`).

Traversal, per rule node:

1. Each constraint group is applied independently to the value.
2. Object values descend into ``children`` with a ``field.`` prefix.
3. List values descend into each object element with a ``field[i].``
   prefix; non-object elements are not descended into.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from paramguard.domain.rules import Constraint, RuleNode, coerce_rules
from paramguard.domain.types import ErrorKind, FieldType, matches_type
from paramguard.services.outcome import ValidationOutcome

logger = logging.getLogger(__name__)

RuleSupply = Mapping[str, Any] | Iterable[Any]

_NUMERIC_TYPES = frozenset({FieldType.WHOLE_NUMBER, FieldType.DECIMAL})
_SIZED_TYPES = frozenset({FieldType.TEXT, FieldType.LIST})
_TEMPORAL_TYPES = frozenset({FieldType.DATE, FieldType.TIMESTAMP})

# Parameter wrappers expose one of these to hand back a plain mapping.
_UNWRAP_METHODS = ("to_unsafe_dict", "to_dict", "model_dump")


def normalize_params(payload: Any) -> Mapping[str, Any]:
    """Return the plain mapping behind a parameter bag.

    Mappings pass through untouched. Wrapper objects (framework parameter
    containers, pydantic models) are unwrapped through ``to_unsafe_dict``,
    ``to_dict`` or ``model_dump``. ``None`` is an empty payload.

    Raises:
        TypeError: If *payload* is neither a mapping nor unwrappable.
    """
    if payload is None:
        return {}
    if isinstance(payload, Mapping):
        return payload
    for name in _UNWRAP_METHODS:
        unwrap = getattr(payload, name, None)
        if callable(unwrap):
            data = unwrap()
            if isinstance(data, Mapping):
                return data
    msg = f"Cannot validate a payload of type {type(payload).__name__}"
    raise TypeError(msg)


def _is_absent(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def _as_temporal(value: Any, field_type: FieldType) -> date | None:
    """Return *value* as a date (DATE) or datetime (TIMESTAMP), else None."""
    if field_type is FieldType.TIMESTAMP:
        if isinstance(value, datetime):
            return value
        if isinstance(value, str):
            try:
                return datetime.fromisoformat(value)
            except ValueError:
                return None
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError:
            return None
    return None


def _comparable(value: Any, bound: Any, field_type: FieldType) -> tuple[Any, Any] | None:
    """Return ``(measure, bound)`` ready for comparison, or None to skip."""
    if field_type in _NUMERIC_TYPES:
        return (value, bound) if _is_number(bound) else None
    if field_type in _SIZED_TYPES:
        return (len(value), bound) if _is_number(bound) else None
    if field_type in _TEMPORAL_TYPES:
        measure = _as_temporal(value, field_type)
        limit = _as_temporal(bound, field_type)
        if measure is None or limit is None:
            return None
        if isinstance(measure, datetime) and isinstance(limit, datetime):
            # Naive and aware timestamps do not order against each other.
            if (measure.tzinfo is None) != (limit.tzinfo is None):
                return None
        return measure, limit
    return None


class Validator:
    """Reusable engine bound to one rule tree.

    The rule tree is coerced once at construction; :meth:`validate` may
    then be called any number of times, from any number of threads.
    """

    def __init__(self, rules: RuleSupply | None) -> None:
        if rules is None:
            entries: list[Any] = []
        elif isinstance(rules, Mapping):
            entries = list(rules.values())
        else:
            entries = list(rules)
        self._declared = bool(entries)
        self._rules: tuple[RuleNode, ...] = coerce_rules(entries)

    @property
    def rules(self) -> tuple[RuleNode, ...]:
        return self._rules

    def validate(self, payload: Any) -> ValidationOutcome:
        """Check *payload* and return every error found."""
        if not self._declared:
            return ValidationOutcome(checked=False)

        params = normalize_params(payload)
        outcome = ValidationOutcome()
        self._validate_level(self._rules, params, "", outcome)
        logger.debug(
            "Validated %d rule(s): %d error(s)",
            len(self._rules),
            len(outcome.errors),
        )
        return outcome

    # ── Traversal ────────────────────────────────────────────────────

    def _validate_level(
        self,
        nodes: Iterable[RuleNode],
        container: Mapping[str, Any],
        prefix: str,
        outcome: ValidationOutcome,
    ) -> None:
        for node in nodes:
            if node.is_inert:
                logger.debug("Skipping inert rule under %r: %r", prefix or "<root>", node)
                continue
            assert node.field is not None and node.field_type is not None
            path = f"{prefix}{node.field}"
            value = container.get(node.field)

            for group in node.constraints:
                self._apply_group(node.field_type, group, value, path, outcome)

            if node.children:
                self._descend(node.children, value, path, outcome)

    def _descend(
        self,
        children: tuple[RuleNode, ...],
        value: Any,
        path: str,
        outcome: ValidationOutcome,
    ) -> None:
        if isinstance(value, Mapping):
            self._validate_level(children, value, f"{path}.", outcome)
        elif isinstance(value, (list, tuple)):
            for index, item in enumerate(value):
                if isinstance(item, Mapping):
                    self._validate_level(children, item, f"{path}[{index}].", outcome)

    # ── Constraint groups ────────────────────────────────────────────

    def _apply_group(
        self,
        field_type: FieldType,
        group: Constraint,
        value: Any,
        path: str,
        outcome: ValidationOutcome,
    ) -> None:
        if _is_absent(value):
            if group.required:
                message = group.message or f"Parameter {path} is required"
                outcome.add(path, ErrorKind.MISSING_REQUIRED, message)
            return

        if not matches_type(value, field_type):
            message = group.message or f"Parameter {path} must be of type {field_type}"
            outcome.add(path, ErrorKind.TYPE_MISMATCH, message)
            return

        self._check_value(value, field_type, group, path, outcome, group.message)

        if group.element_type is not None and field_type is FieldType.LIST:
            self._check_elements(value, group, path, outcome)

    def _check_elements(
        self,
        items: list[Any] | tuple[Any, ...],
        group: Constraint,
        path: str,
        outcome: ValidationOutcome,
    ) -> None:
        element_type = group.element_type
        assert element_type is not None
        element = group.element
        message = (element.message if element else None) or group.message
        for index, item in enumerate(items):
            item_path = f"{path}[{index}]"
            if not matches_type(item, element_type):
                default = f"Parameter {item_path} must be of type {element_type}"
                outcome.add(item_path, ErrorKind.TYPE_MISMATCH, message or default)
                continue
            if element is not None:
                self._check_value(item, element_type, element, item_path, outcome, message)

    def _check_value(
        self,
        value: Any,
        field_type: FieldType,
        group: Constraint,
        path: str,
        outcome: ValidationOutcome,
        message: str | None,
    ) -> None:
        """Run the independent min/max/format/blank checks on a typed value."""
        if group.min is not None:
            pair = _comparable(value, group.min, field_type)
            if pair is not None and pair[0] < pair[1]:
                default = f"Parameter {path} must be at least {group.min}"
                outcome.add(path, ErrorKind.OUT_OF_RANGE, message or default)

        if group.max is not None:
            pair = _comparable(value, group.max, field_type)
            if pair is not None and pair[0] > pair[1]:
                default = f"Parameter {path} must be at most {group.max}"
                outcome.add(path, ErrorKind.OUT_OF_RANGE, message or default)

        if group.format is not None and isinstance(value, str):
            if not group.format.search(value):
                default = f"Parameter {path} format is invalid"
                outcome.add(path, ErrorKind.FORMAT_MISMATCH, message or default)

        if not group.allow_blank and isinstance(value, str) and not value.strip():
            default = f"Parameter {path} cannot be blank"
            outcome.add(path, ErrorKind.BLANK_DISALLOWED, message or default)


def validate(payload: Any, rules: RuleSupply | None) -> ValidationOutcome:
    """Validate *payload* against *rules* in one call."""
    return Validator(rules).validate(payload)
