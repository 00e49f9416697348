"""Command: show the rule tree declared in a rule file."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from paramguard.commands._base import GuardCommand

if TYPE_CHECKING:
    from paramguard.commands._context import AppContext


@click.command(
    cls=GuardCommand,
    examples="""\
  paramguard rules rules/users.yaml
  paramguard --json rules rules/users.yaml""",
)
@click.argument("rules_file")
@click.pass_obj
def rules(app: AppContext, rules_file: str) -> None:
    """Show the rules declared in RULES_FILE."""
    from paramguard.services.check import CheckService

    app.emit(CheckService(app.settings).describe(rules_file))
