"""AppContext: per-invocation state shared by every command.

The root group builds one from the resolved settings; commands receive
it through ``@click.pass_obj`` and hand their ServiceResult to
:meth:`AppContext.emit`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from paramguard.config.logging import configure_logging
from paramguard.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from paramguard.config.settings import GuardSettings
    from paramguard.services.result import ServiceResult


class AppContext:
    """Settings plus result emission for one CLI run."""

    def __init__(self, settings: GuardSettings) -> None:
        self.settings = settings
        self.output = OutputSettings(
            json_output=settings.json_output,
            quiet=settings.quiet,
            verbose=settings.verbose,
        )
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    def emit(self, result: ServiceResult) -> None:
        """Print *result* and set the exit status.

        Successes go to stdout; failures go to stderr and exit with status 1.
        Warnings go to stderr in both cases, unless the output is JSON
        (which already carries them) or quiet.
        """
        text = format_result(result, settings=self.output)
        click.echo(text, err=not result.ok)
        if not (self.output.json_output or self.output.quiet):
            for warning in result.warnings:
                click.echo(f"WARNING: {warning}", err=True)
        if not result.ok:
            click.get_current_context().exit(1)
