"""CLI context and exit codes for depgate."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path

from depgate.config import DepgateConfig

__all__ = ["ExitCode", "CLIContext"]


class ExitCode(IntEnum):
    """Exit codes for the depgate CLI.

    - 0 when every checked handler is fulfilled
    - 1 when any handler is not fulfilled, or configuration is invalid
    - 130 for keyboard interrupt (128 + SIGINT=2)
    """

    SUCCESS = 0
    FAILURE = 1
    INTERRUPTED = 130


@dataclass(frozen=True, slots=True)
class CLIContext:
    """Global options and configuration shared by subcommands.

    Attributes:
        config: Loaded depgate configuration.
        config_path: Path to config file (if specified via --config).
        verbosity: Verbosity level (0=default, 1=INFO, 2+=DEBUG).
        quiet: Suppress non-essential output.
    """

    config: DepgateConfig
    config_path: Path | None = None
    verbosity: int = 0
    quiet: bool = False
