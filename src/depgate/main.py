"""CLI entry point for depgate.

This module defines the Click-based command-line interface for depgate.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click
from dotenv import load_dotenv

# Load environment variables from .env before any setting is read
load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)

from depgate import __version__  # noqa: E402
from depgate.cli.commands.check import check  # noqa: E402
from depgate.cli.commands.list_handlers import list_handlers  # noqa: E402
from depgate.cli.context import CLIContext, ExitCode  # noqa: E402
from depgate.cli.output import format_error  # noqa: E402
from depgate.config import load_config  # noqa: E402
from depgate.exceptions import ConfigError  # noqa: E402
from depgate.logging import configure_logging  # noqa: E402

VERBOSITY_LEVELS = {
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="depgate")
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(exists=False, path_type=str),
    default=None,
    help="Path to config file (overrides ./depgate.yaml).",
)
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Increase verbosity (-v for INFO, -vv for DEBUG).",
)
@click.option(
    "-q",
    "--quiet",
    is_flag=True,
    default=False,
    help="Suppress non-essential output (ERROR level only).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config_file: str | None,
    verbose: int,
    quiet: bool,
) -> None:
    """depgate - verify that component prerequisites are satisfied."""
    ctx.ensure_object(dict)

    # Route log output to stderr until the configured level is known
    configure_logging()

    config_path = Path(config_file) if config_file else None
    try:
        config = load_config(config_path)
    except ConfigError as e:
        details = []
        if e.field:
            details.append(f"Field: {e.field}")
        if e.value is not None:
            details.append(f"Value: {e.value}")
        click.echo(format_error(e.message, details=details), err=True)
        ctx.exit(ExitCode.FAILURE)

    ctx.obj["cli_ctx"] = CLIContext(
        config=config,
        config_path=config_path,
        verbosity=verbose,
        quiet=quiet,
    )

    # Priority: quiet > verbose > config
    if quiet:
        level = logging.ERROR
    elif verbose > 0:
        level = logging.INFO if verbose == 1 else logging.DEBUG
    else:
        level = VERBOSITY_LEVELS.get(config.verbosity, logging.WARNING)

    configure_logging(level=level)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


cli.add_command(check)
cli.add_command(list_handlers)

if __name__ == "__main__":
    cli()
