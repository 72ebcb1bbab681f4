"""Size-suffixed value helpers ("128M" <-> 134217728)."""

from __future__ import annotations

from depgate.constants import SIZE_MULTIPLIERS, SIZE_UNITS

__all__ = ["is_size_value", "parse_size", "format_size"]


def is_size_value(value: str) -> bool:
    """Check whether a live value carries a non-numeric unit suffix.

    Args:
        value: Raw setting value (e.g., "128M", "512").

    Returns:
        True if the last character is not a digit.
    """
    value = value.strip()
    return bool(value) and not value[-1].isdigit()


def parse_size(value: str) -> int:
    """Convert a size-suffixed value to a byte count.

    Suffixes are case-insensitive powers of 1024 (K, M, G, T, P). A value
    without a suffix is parsed as a plain integer.

    Args:
        value: Raw value such as "64M" or "1g".

    Returns:
        Number of bytes.

    Raises:
        ValueError: If the value has an unknown suffix or a non-numeric body.

    Example:
        >>> parse_size("128M")
        134217728
    """
    value = value.strip()
    if not is_size_value(value):
        return int(value)

    suffix = value[-1].upper()
    if suffix not in SIZE_MULTIPLIERS:
        raise ValueError(f"Unknown size suffix '{value[-1]}' in '{value}'")

    return int(value[:-1].strip()) * SIZE_MULTIPLIERS[suffix]


def format_size(num_bytes: int, decimals: int = 0) -> str:
    """Render a byte count for humans.

    Args:
        num_bytes: Number of bytes.
        decimals: Digits after the decimal point.

    Returns:
        Formatted size such as "128 MB".
    """
    size = float(num_bytes)
    for unit in SIZE_UNITS:
        if abs(size) < 1024 or unit == SIZE_UNITS[-1]:
            return f"{size:.{decimals}f} {unit}"
        size /= 1024
    return f"{num_bytes} B"  # pragma: no cover
