"""Exceptions raised by the dependency verification engine."""

from __future__ import annotations

from depgate.exceptions.base import DepgateError

__all__ = ["HandlerResolutionError", "UnsupportedDependencyKindError"]


class HandlerResolutionError(DepgateError):
    """Raised when a registered handler factory cannot produce a handler.

    The dependencies service raises and catches this internally so that
    the failure is logged once and the null handler is substituted. It never
    reaches callers of the query API.

    Attributes:
        handler_id: Identifier the factory was registered under.
        reason: Short description of what went wrong.
    """

    def __init__(self, handler_id: str, reason: str) -> None:
        self.handler_id = handler_id
        self.reason = reason
        super().__init__(
            f"Failed to resolve dependencies handler '{handler_id}': {reason}"
        )


class UnsupportedDependencyKindError(DepgateError, NotImplementedError):
    """Raised when a reporting path is requested for an unknown kind or shape.

    This indicates an integration bug (a reporter asked to describe something
    it has no message for), not an environment condition.

    Attributes:
        kind: The dependency kind or handler type that is not supported.
    """

    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__(
            f"Missing dependencies reporting not supported for '{kind}'"
        )
