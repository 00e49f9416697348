"""Root ``paramguard`` command group: global flags and settings resolution."""

from __future__ import annotations

import click

from paramguard import __version__
from paramguard.commands import register_commands
from paramguard.commands._context import AppContext
from paramguard.config.settings import GuardSettings


@click.group(
    invoke_without_command=True,
    epilog="Settings also come from PARAMGUARD_* variables and paramguard.toml.",
)
@click.version_option(version=__version__, prog_name="paramguard")
@click.option("--json", "json_output", is_flag=True, help="Print results as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Print only OK/ERROR lines.")
@click.option("-v", "--verbose", is_flag=True, help="Show every error and debug logs.")
@click.option("--log-json", is_flag=True, help="Write logs to stderr as JSON lines.")
@click.option("-c", "--config", "config_path", default=None, help="Use this config file.")
@click.option(
    "-I",
    "--search-path",
    "search_paths",
    multiple=True,
    help="Extra directory to look for rule files in (repeatable).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    search_paths: tuple[str, ...],
) -> None:
    """Validate request parameters against declarative rule files."""
    settings = GuardSettings.from_cli(
        config_path=config_path,
        search_paths=search_paths,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
