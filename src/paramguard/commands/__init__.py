"""paramguard subcommands.

Command modules are imported inside :func:`register_commands` so that the
service and engine imports they pull in stay off the ``--help`` path.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Attach ``check`` and ``rules`` to the root group."""
    from paramguard.commands.check import check
    from paramguard.commands.rules import rules

    for command in (check, rules):
        cli.add_command(command)
