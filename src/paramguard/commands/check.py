"""Command: validate a payload file against a rule file."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from paramguard.commands._base import GuardCommand
from paramguard.domain.errors import Escalation

if TYPE_CHECKING:
    from paramguard.commands._context import AppContext


@click.command(
    cls=GuardCommand,
    examples="""\
  paramguard check rules/users.yaml request.json
  paramguard check rules/users.yaml request.json --all-errors
  cat request.json | paramguard --json check rules/users.yaml -""",
)
@click.argument("rules_file")
@click.argument("payload_file")
@click.option(
    "--all-errors/--first-error",
    "all_errors",
    default=None,
    help="Report every error, or only the first (default: [validation] escalation).",
)
@click.pass_obj
def check(app: AppContext, rules_file: str, payload_file: str, all_errors: bool | None) -> None:
    """Validate PAYLOAD_FILE (JSON/YAML, '-' for stdin) against RULES_FILE."""
    from paramguard.services.check import CheckService

    escalation: Escalation | None = None
    if all_errors is not None:
        escalation = Escalation.ALL if all_errors else Escalation.FIRST
    app.emit(CheckService(app.settings).check(rules_file, payload_file, escalation=escalation))
