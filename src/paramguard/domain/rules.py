"""Rule nodes and constraint groups.

A rule tree is built once (via :class:`~paramguard.domain.dsl.RuleBuilder`
or hand-assembled) and reused across validation runs. All models are
frozen; ownership is strictly parent-to-child.

Hand-assembled rules use plain mappings::

    {"field": "user", "type": dict, "opts": [{"required": True}],
     "items": [{"field": "name", "type": str, "opts": [{"required": True}]}]}

:func:`coerce_rule` turns those into :class:`RuleNode` instances. Entries
that cannot be understood are dropped, never reported as errors.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, ValidationError, field_validator

from paramguard.domain.types import FieldType, resolve_type

logger = logging.getLogger(__name__)

# Keys that may appear flat on a raw rule instead of inside "opts".
CONSTRAINT_KEYS: frozenset[str] = frozenset(
    {
        "required",
        "message",
        "min",
        "max",
        "format",
        "blank",
        "allow_blank",
        "element_type",
        "element",
    }
)


class Constraint(BaseModel):
    """One independent group of checks applied to a field.

    Attributes:
        required: Absent values (missing, None, or ``""``) are errors.
        message: Overrides every default message produced by this group.
        min: Lower bound. Numeric for numbers, length for text and lists,
            chronological for dates when the bound is a date.
        max: Upper bound, same semantics as ``min``.
        format: Pattern that text values must contain a match for.
        allow_blank: When False, whitespace-only text is rejected.
            Raw rules may spell this ``blank: false``.
        element_type: For LIST fields, the type every element must have.
        element: Checks applied to each list element that passed
            ``element_type``.
    """

    model_config = {"frozen": True}

    required: bool = False
    message: str | None = None
    min: Any = None
    max: Any = None
    format: re.Pattern[str] | None = None
    allow_blank: bool = Field(
        default=True,
        validation_alias=AliasChoices("allow_blank", "blank"),
    )
    element_type: FieldType | None = None
    element: Constraint | None = None

    @field_validator("element_type", mode="before")
    @classmethod
    def _resolve_element_type(cls, value: Any) -> FieldType | None:
        if value is None:
            return None
        return resolve_type(value)


class RuleNode(BaseModel):
    """One field's validation contract.

    A node missing ``field`` or ``field_type`` is inert: the engine skips
    it without reporting anything.
    """

    model_config = {"frozen": True}

    field: str | None = None
    field_type: FieldType | None = Field(
        default=None,
        validation_alias=AliasChoices("field_type", "type"),
    )
    constraints: tuple[Constraint, ...] = ()
    children: tuple[RuleNode, ...] = ()

    @field_validator("field_type", mode="before")
    @classmethod
    def _resolve_field_type(cls, value: Any) -> FieldType | None:
        if value is None:
            return None
        return resolve_type(value)

    @property
    def is_inert(self) -> bool:
        return not self.field or self.field_type is None

    def describe(self) -> dict[str, Any]:
        """Return a JSON-friendly summary of this node and its subtree."""
        data: dict[str, Any] = {
            "field": self.field,
            "type": self.field_type.value if self.field_type else None,
        }
        if self.constraints:
            data["constraints"] = [
                c.model_dump(mode="json", exclude_defaults=True) for c in self.constraints
            ]
        if self.children:
            data["children"] = [child.describe() for child in self.children]
        return data


# ---------------------------------------------------------------------------
# Raw rule coercion
# ---------------------------------------------------------------------------


def _input_keys(name: str) -> set[str]:
    """Every raw key that feeds the Constraint field *name*."""
    keys = {name}
    info = Constraint.model_fields.get(name)
    alias = info.validation_alias if info is not None else None
    if isinstance(alias, AliasChoices):
        keys.update(choice for choice in alias.choices if isinstance(choice, str))
    elif isinstance(alias, str):
        keys.add(alias)
    return keys


def coerce_constraint(raw: Any) -> Constraint | None:
    """Return a :class:`Constraint` for *raw*, or None if it is unusable.

    Keys that fail validation are dropped on their own, so a bad
    ``format`` never takes a valid ``required`` down with it. A group
    left with no usable keys is dropped entirely.
    """
    if isinstance(raw, Constraint):
        return raw
    if not isinstance(raw, Mapping):
        return None
    data = dict(raw)
    try:
        return Constraint.model_validate(data)
    except ValidationError as exc:
        failed = {str(err["loc"][0]) for err in exc.errors() if err["loc"]}

    bad = set(failed)
    for name in Constraint.model_fields:
        if _input_keys(name) & failed:
            bad |= _input_keys(name)
    dropped = sorted(bad & data.keys())
    kept = {k: v for k, v in data.items() if k not in bad}
    if not dropped or not kept:
        logger.debug("Dropping malformed constraint group: %r", raw)
        return None

    logger.debug("Dropping malformed constraint key(s) %s from %r", dropped, raw)
    try:
        return Constraint.model_validate(kept)
    except ValidationError:
        logger.debug("Dropping malformed constraint group: %r", raw)
        return None


def coerce_constraints(raw: Any) -> tuple[Constraint, ...]:
    """Coerce a single group or a list of groups, dropping unusable entries."""
    if raw is None:
        return ()
    if isinstance(raw, (Constraint, Mapping)):
        raw = [raw]
    if not isinstance(raw, (list, tuple)):
        return ()
    groups = (coerce_constraint(entry) for entry in raw)
    return tuple(g for g in groups if g is not None)


def coerce_rule(raw: Any) -> RuleNode | None:
    """Turn a hand-assembled rule into a :class:`RuleNode`.

    Accepts an existing node or a mapping with ``field``, ``type``,
    ``opts``/``constraints`` and ``items``/``children`` keys. Constraint
    keys may also sit directly on the mapping, in which case they form a
    single group. Returns None for anything that is not a rule at all.
    """
    if isinstance(raw, RuleNode):
        return raw
    if not isinstance(raw, Mapping):
        return None

    name = raw.get("field")
    if name is not None and not isinstance(name, str):
        logger.debug("Ignoring non-text field name: %r", name)
        name = None

    if "opts" in raw or "constraints" in raw:
        groups = coerce_constraints(raw.get("opts", raw.get("constraints")))
    else:
        flat = {k: v for k, v in raw.items() if k in CONSTRAINT_KEYS}
        groups = coerce_constraints(flat) if flat else ()

    children_raw = raw.get("items", raw.get("children"))
    children = coerce_rules(children_raw) if isinstance(children_raw, (list, tuple)) else ()

    return RuleNode(
        field=name,
        field_type=raw.get("type", raw.get("field_type")),
        constraints=groups,
        children=children,
    )


def coerce_rules(raw: Iterable[Any] | Mapping[str, Any] | None) -> tuple[RuleNode, ...]:
    """Coerce a rule list or a name-to-rule mapping into nodes, in order.

    Mapping values are used; their keys are only labels. Entries that are
    not rules are dropped.
    """
    if raw is None:
        return ()
    entries = raw.values() if isinstance(raw, Mapping) else raw
    nodes: list[RuleNode] = []
    for entry in entries:
        node = coerce_rule(entry)
        if node is None:
            logger.debug("Skipping malformed rule entry: %r", entry)
            continue
        nodes.append(node)
    return tuple(nodes)
