"""Constants shared across depgate."""

from __future__ import annotations

__all__ = [
    "DEFAULT_COMPONENT_VERSION",
    "OPTIONAL_MARKER",
    "SIZE_MULTIPLIERS",
    "SIZE_UNITS",
    "NULL_HANDLER_ID",
    "PROJECT_CONFIG_FILENAME",
]

# Reported for a present component whose version cannot be read
DEFAULT_COMPONENT_VERSION = "0.0.0"

# Identity substring that marks a checker as optional when no flag is given
OPTIONAL_MARKER = "optional"

# Size suffixes accepted in live setting values ("128M")
SIZE_MULTIPLIERS: dict[str, int] = {
    "K": 1024,
    "M": 1024**2,
    "G": 1024**3,
    "T": 1024**4,
    "P": 1024**5,
}

# Units used when rendering byte counts for humans, smallest first
SIZE_UNITS: tuple[str, ...] = ("B", "KB", "MB", "GB", "TB", "PB")

NULL_HANDLER_ID = "null"

PROJECT_CONFIG_FILENAME = "depgate.yaml"
