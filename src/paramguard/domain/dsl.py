"""Fluent rule-building DSL.

Usage::

    rules = build_rules(
        lambda r: (
            r.param("name", str, required=True, blank=False),
            r.param(
                "user",
                dict,
                required=True,
                children=lambda u: u.param("age", int, min=18),
            ),
        )
    )

The builder performs no semantic checks on the schema it assembles; an
unknown type marker simply produces an inert node.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from paramguard.domain.rules import Constraint, RuleNode, coerce_constraint


class RuleBuilder:
    """Collects field declarations into an ordered name-to-node mapping."""

    def __init__(self) -> None:
        self._rules: dict[str, RuleNode] = {}

    def param(
        self,
        name: str,
        type_: Any,
        *groups: Constraint | Mapping[str, Any],
        children: Callable[[RuleBuilder], Any] | None = None,
        **opts: Any,
    ) -> RuleBuilder:
        """Declare a field.

        Keyword options (``required``, ``min``, ``format``...) form one
        constraint group; positional *groups* add further groups after it.
        A bare declaration still gets one empty group, so its value is
        type-checked whenever present.
        *children* receives a fresh builder whose declarations become this
        node's children. Redeclaring *name* replaces the earlier node.
        """
        declared: list[Constraint | Mapping[str, Any]] = []
        if opts or not groups:
            declared.append(opts)
        declared.extend(groups)
        constraints = tuple(c for c in map(coerce_constraint, declared) if c is not None)

        nested: tuple[RuleNode, ...] = ()
        if children is not None:
            sub = RuleBuilder()
            children(sub)
            nested = tuple(sub.build().values())

        self._rules[name] = RuleNode(
            field=name,
            field_type=type_,
            constraints=constraints,
            children=nested,
        )
        return self

    def build(self) -> dict[str, RuleNode]:
        return dict(self._rules)


def build_rules(define: Callable[[RuleBuilder], Any]) -> dict[str, RuleNode]:
    """Run *define* against a fresh builder and return its rules."""
    builder = RuleBuilder()
    define(builder)
    return builder.build()
