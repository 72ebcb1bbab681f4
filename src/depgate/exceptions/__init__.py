"""depgate exception hierarchy.

All exceptions can be imported from this package:
    from depgate.exceptions import ConfigError, DepgateError
"""

from __future__ import annotations

from depgate.exceptions.base import DepgateError
from depgate.exceptions.config import ConfigError
from depgate.exceptions.dependencies import (
    HandlerResolutionError,
    UnsupportedDependencyKindError,
)

__all__ = [
    # Base
    "DepgateError",
    # Configuration
    "ConfigError",
    # Dependencies
    "HandlerResolutionError",
    "UnsupportedDependencyKindError",
]
