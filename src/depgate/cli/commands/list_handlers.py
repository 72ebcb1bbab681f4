from __future__ import annotations

import click

from depgate.cli.console import console
from depgate.cli.context import CLIContext
from depgate.cli.output import OutputFormat, format_json


@click.command(name="list")
@click.option(
    "-f",
    "--format",
    "fmt",
    type=click.Choice([f.value for f in OutputFormat]),
    default=OutputFormat.TEXT.value,
    help="Output format.",
)
@click.pass_context
def list_handlers(ctx: click.Context, fmt: str) -> None:
    """List configured dependencies handlers and their checkers.

    Examples:
        depgate list
        depgate list --format json
    """
    cli_ctx: CLIContext = ctx.obj["cli_ctx"]
    handlers = cli_ctx.config.handlers

    if fmt == OutputFormat.JSON.value:
        click.echo(
            format_json(
                {
                    handler_id: [
                        {
                            "id": checker.id,
                            "kind": checker.kind.value,
                            "optional": checker.optional,
                        }
                        for checker in handler_config.checkers
                    ]
                    for handler_id, handler_config in sorted(handlers.items())
                }
            )
        )
        return

    if not handlers:
        console.print("No dependencies handlers configured.")
        return

    for handler_id, handler_config in sorted(handlers.items()):
        console.print(f"[bold]{handler_id}[/bold]")
        for checker in handler_config.checkers:
            console.print(f"  {checker.id} ({checker.kind.value})")
