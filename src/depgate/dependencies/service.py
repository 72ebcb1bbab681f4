"""Dependencies service: the registry callers query by handler id.

Handlers are registered eagerly or through a factory that is invoked at
most once, on first lookup. Unknown ids, failing factories and factories
that return something other than a handler all resolve to the null handler,
so a misconfigured check never takes down an unrelated caller.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any

from depgate.dependencies.handlers import NULL_HANDLER, DependenciesHandler
from depgate.dependencies.status import FulfillmentStatus, StatusTransform
from depgate.exceptions import HandlerResolutionError
from depgate.logging import bound_context, get_logger

__all__ = ["DependenciesService", "HandlerFactory"]

logger = get_logger(__name__)

HandlerFactory = Callable[[], DependenciesHandler]


class DependenciesService:
    """Registry mapping caller-chosen identifiers to dependency handlers.

    Example:
        ```python
        service = DependenciesService()
        service.register_handler(
            "shop_active",
            SingleCheckerHandler(
                "shop_active", ModulesChecker("shop_modules", ["sqlite3"])
            ),
        )
        service.register_factory("shop_disabled", build_disabled_handler)

        if service.is_fulfilled("shop_active"):
            ...

        # Never registered: the null handler answers
        service.are_dependencies_fulfilled("unknown")  # SingleStatus(True)
        ```
    """

    def __init__(self) -> None:
        self._handlers: dict[str, DependenciesHandler] = {}
        self._factories: dict[str, HandlerFactory] = {}
        # Guards the registry dicts; factories run outside it
        self._lock = threading.Lock()
        # One lock per pending factory so it runs at most once
        self._resolution_locks: dict[str, threading.RLock] = {}
        self._building: set[str] = set()

    def register_handler(self, handler_id: str, handler: DependenciesHandler) -> None:
        """Register a handler eagerly.

        Args:
            handler_id: Lookup identifier, conventionally
                ``<component_id>_<context>``.
            handler: The handler to return for this id.

        Raises:
            ValueError: If the id is already registered.
        """
        with self._lock:
            self._ensure_unregistered(handler_id)
            self._handlers[handler_id] = handler
        logger.debug("Registered dependencies handler", handler_id=handler_id)

    def register_factory(self, handler_id: str, factory: HandlerFactory) -> None:
        """Register a factory that builds the handler on first lookup.

        Args:
            handler_id: Lookup identifier.
            factory: Zero-argument callable returning a DependenciesHandler.

        Raises:
            ValueError: If the id is already registered.
        """
        with self._lock:
            self._ensure_unregistered(handler_id)
            self._factories[handler_id] = factory
        logger.debug("Registered dependencies handler factory", handler_id=handler_id)

    def has_handler(self, handler_id: str) -> bool:
        """Check whether a handler or factory is registered for an id."""
        return handler_id in self._handlers or handler_id in self._factories

    def list_ids(self) -> list[str]:
        """List all registered identifiers, sorted."""
        return sorted(set(self._handlers) | set(self._factories))

    def get_handler(self, handler_id: str) -> DependenciesHandler:
        """Resolve the handler for an identifier.

        Returns the eagerly registered handler if any; otherwise runs and
        caches the registered factory; otherwise returns the null handler.
        A factory that raises or returns a non-handler is logged and
        replaced, permanently, by the null handler.

        Factories run outside the registry lock, so a factory may itself
        look up or register other handlers. A factory that looks up its own
        id gets the null handler for that inner lookup.

        Args:
            handler_id: Lookup identifier.

        Returns:
            The resolved handler. Never raises.
        """
        handler = self._handlers.get(handler_id)
        if handler is not None:
            return handler

        with self._lock:
            handler = self._handlers.get(handler_id)
            if handler is not None:
                return handler
            if handler_id not in self._factories:
                return NULL_HANDLER
            resolution_lock = self._resolution_locks.setdefault(
                handler_id, threading.RLock()
            )

        with resolution_lock:
            return self._resolve(handler_id)

    def get_dependencies(self, handler_id: str) -> dict[str, Any]:
        """Get the declarations of the handler registered under an id."""
        return self.get_handler(handler_id).get_dependencies()

    def get_missing_dependencies(self, handler_id: str) -> dict[str, Any]:
        """Get the unmet declarations of the handler registered under an id."""
        return self.get_handler(handler_id).get_missing_dependencies()

    def are_dependencies_fulfilled(self, handler_id: str) -> FulfillmentStatus:
        """Get the fulfillment status of the handler registered under an id."""
        return self.get_handler(handler_id).are_dependencies_fulfilled()

    def is_fulfilled(
        self, handler_id: str, transform: StatusTransform | None = None
    ) -> bool:
        """Get a single go/no-go answer for the handler registered under an id."""
        return self.get_handler(handler_id).is_fulfilled(transform)

    def _resolve(self, handler_id: str) -> DependenciesHandler:
        # Caller holds the resolution lock for handler_id
        handler = self._handlers.get(handler_id)
        if handler is not None:
            return handler

        if handler_id in self._building:
            logger.warning(
                "Dependencies handler factory looked up its own id",
                handler_id=handler_id,
            )
            return NULL_HANDLER

        factory = self._factories.get(handler_id)
        if factory is None:
            return NULL_HANDLER

        self._building.add(handler_id)
        try:
            handler = self._build(handler_id, factory)
        except HandlerResolutionError as e:
            logger.warning(e.message, handler_id=handler_id)
            handler = NULL_HANDLER
        finally:
            self._building.discard(handler_id)

        with self._lock:
            self._handlers[handler_id] = handler
            del self._factories[handler_id]
            self._resolution_locks.pop(handler_id, None)
        return handler

    def _build(self, handler_id: str, factory: HandlerFactory) -> DependenciesHandler:
        with bound_context(handler_id=handler_id):
            try:
                handler = factory()
            except Exception as e:
                raise HandlerResolutionError(handler_id, f"factory raised {e!r}") from e

            if not isinstance(handler, DependenciesHandler):
                raise HandlerResolutionError(
                    handler_id,
                    f"factory returned {type(handler).__name__}, not a handler",
                )

            logger.debug("Resolved dependencies handler")
        return handler

    def _ensure_unregistered(self, handler_id: str) -> None:
        if handler_id in self._handlers or handler_id in self._factories:
            raise ValueError(
                f"Dependencies handler '{handler_id}' is already registered"
            )
