from __future__ import annotations

from typing import Any

import click
from rich.markup import escape

from depgate.cli.console import console
from depgate.cli.context import CLIContext, ExitCode
from depgate.cli.output import (
    OutputFormat,
    build_results_table,
    format_json,
    notice_to_dict,
)
from depgate.dependencies.factory import build_service
from depgate.logging import bind_context, clear_context, get_logger
from depgate.reporting import MissingDependenciesReporter


@click.command()
@click.argument("handler_ids", nargs=-1)
@click.option(
    "-f",
    "--format",
    "fmt",
    type=click.Choice([f.value for f in OutputFormat]),
    default=OutputFormat.TEXT.value,
    help="Output format.",
)
@click.pass_context
def check(ctx: click.Context, handler_ids: tuple[str, ...], fmt: str) -> None:
    """Check whether configured handlers have their dependencies fulfilled.

    Checks every configured handler when no HANDLER_IDS are given. An
    unknown handler id is reported as fulfilled.

    Examples:
        depgate check
        depgate check shop_active shop_disabled
        depgate check --format json
    """
    logger = get_logger(__name__)
    cli_ctx: CLIContext = ctx.obj["cli_ctx"]

    service = build_service(cli_ctx.config)
    reporter = MissingDependenciesReporter(cli_ctx.config.registrant_name)
    ids = list(handler_ids) or service.list_ids()

    results: list[dict[str, Any]] = []
    for handler_id in ids:
        bind_context(handler_id=handler_id)
        try:
            if not service.has_handler(handler_id):
                logger.warning("Unknown handler id, nothing to check")

            handler = service.get_handler(handler_id)
            notices = reporter.build_notices(handler)
            results.append(
                {
                    "id": handler_id,
                    "fulfilled": handler.is_fulfilled(),
                    "notices": notices,
                }
            )
        finally:
            clear_context()

    all_fulfilled = all(result["fulfilled"] for result in results)

    if fmt == OutputFormat.JSON.value:
        click.echo(
            format_json(
                {
                    "fulfilled": all_fulfilled,
                    "handlers": [
                        {
                            "id": result["id"],
                            "fulfilled": result["fulfilled"],
                            "notices": [notice_to_dict(n) for n in result["notices"]],
                        }
                        for result in results
                    ],
                }
            )
        )
    else:
        if not results:
            console.print("No dependencies handlers configured.")
        elif not cli_ctx.quiet:
            console.print(
                build_results_table(
                    [(r["id"], r["fulfilled"], len(r["notices"])) for r in results]
                )
            )

        for result in results:
            for notice in result["notices"]:
                style = "yellow" if notice.is_optional else "red"
                console.print(f"[{style}]{escape(notice.message)}[/{style}]")

    if not all_fulfilled:
        raise SystemExit(ExitCode.FAILURE)
