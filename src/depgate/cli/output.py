"""Output formatting for depgate CLI commands."""

from __future__ import annotations

import json
from enum import Enum
from typing import Any

from rich.table import Table

from depgate.reporting import DependencyNotice

__all__ = [
    "OutputFormat",
    "format_error",
    "format_json",
    "build_results_table",
    "notice_to_dict",
]


class OutputFormat(str, Enum):
    """Supported output formats for CLI commands.

    Values:
        TEXT: Rich table and notices for humans (default).
        JSON: Machine-readable JSON output.
    """

    TEXT = "text"
    JSON = "json"


def format_error(
    message: str, details: list[str] | None = None, suggestion: str | None = None
) -> str:
    """Format an error message with optional details and suggestion.

    Example:
        >>> print(format_error("Invalid configuration", details=["Field: x"]))
        Error: Invalid configuration
          Field: x
    """
    lines = [f"Error: {message}"]

    if details:
        for detail in details:
            lines.append(f"  {detail}")

    if suggestion:
        lines.append(f"Suggestion: {suggestion}")

    return "\n".join(lines)


def format_json(data: Any) -> str:
    """Format data as indented JSON. Non-JSON values are stringified."""
    return json.dumps(data, indent=2, default=str)


def notice_to_dict(notice: DependencyNotice) -> dict[str, Any]:
    """Convert a notice to a JSON-friendly dict."""
    return {
        "handle": notice.handle,
        "kind": notice.kind,
        "checker_id": notice.checker_id,
        "optional": notice.is_optional,
        "dismissible": notice.dismissible,
        "missing": [m.key for m in notice.missing],
        "message": notice.message,
    }


def build_results_table(rows: list[tuple[str, bool, int]]) -> Table:
    """Build the summary table for checked handlers.

    Args:
        rows: ``(handler_id, fulfilled, notice_count)`` per handler.

    Returns:
        A Rich table ready to print.
    """
    table = Table(title="Dependencies")
    table.add_column("Handler", style="bold")
    table.add_column("Status")
    table.add_column("Notices", justify="right")

    for handler_id, fulfilled, notice_count in rows:
        status = "[green]fulfilled[/green]" if fulfilled else "[red]unfulfilled[/red]"
        table.add_row(handler_id, status, str(notice_count))

    return table
