"""CLI utilities for depgate.

This module provides CLI-specific context, exit codes and output formatting.
"""

from __future__ import annotations

from depgate.cli.context import CLIContext, ExitCode
from depgate.cli.output import OutputFormat, format_error, format_json

__all__ = [
    "CLIContext",
    "ExitCode",
    "OutputFormat",
    "format_error",
    "format_json",
]
