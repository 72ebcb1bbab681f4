"""Human-readable reporting of missing dependencies.

The engine hands the reporter ``(kind, missing, is_optional)`` per failing
checker; the reporter owns every user-facing word. Required failures produce
"requires" wording and non-dismissible notices, optional failures produce
"may behave unexpectedly" wording and dismissible notices.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from depgate.dependencies.handlers import (
    DependenciesHandler,
    MultiCheckerHandler,
    NullHandler,
    SingleCheckerHandler,
)
from depgate.dependencies.models import (
    Comparison,
    ComponentDependency,
    DependencyKind,
    MissingDependency,
    SettingDependency,
)
from depgate.dependencies.sizes import format_size
from depgate.exceptions import UnsupportedDependencyKindError
from depgate.logging import get_logger

__all__ = ["DependencyNotice", "MissingDependenciesReporter"]

logger = get_logger(__name__)

MessageComposer = Callable[[Sequence[MissingDependency], bool], str]


@dataclass(frozen=True, slots=True)
class DependencyNotice:
    """A user-facing notice about one checker's missing dependencies.

    Attributes:
        handle: Stable identifier derived from the kind and the missing keys.
        message: Plain-text explanation.
        kind: Dependency kind value.
        checker_id: Checker that reported the missing dependencies.
        is_optional: Whether the failure degrades rather than blocks.
        missing: The missing dependencies described by the message.
    """

    handle: str
    message: str
    kind: str
    checker_id: str
    is_optional: bool
    missing: tuple[MissingDependency, ...] = ()

    @property
    def dismissible(self) -> bool:
        """Optional failures may be dismissed; required ones persist."""
        return self.is_optional


class MissingDependenciesReporter:
    """Compose notices and messages for missing dependencies.

    Example:
        ```python
        reporter = MissingDependenciesReporter("Shop")
        for notice in reporter.build_notices(service.get_handler("shop_active")):
            print(notice.message)
        ```
    """

    def __init__(self, registrant_name: str) -> None:
        """Initialize the reporter.

        Args:
            registrant_name: Name of the component the notices are about.
        """
        self._registrant_name = registrant_name
        self._composers: dict[str, MessageComposer] = {
            DependencyKind.MODULES.value: self._compose_missing_modules,
            DependencyKind.FUNCTIONS.value: self._compose_missing_functions,
            DependencyKind.SETTINGS.value: self._compose_incompatible_settings,
            DependencyKind.COMPONENTS.value: self._compose_missing_components,
        }

    @property
    def registrant_name(self) -> str:
        return self._registrant_name

    def build_notices(self, handler: DependenciesHandler) -> list[DependencyNotice]:
        """Build one notice per checker of a handler that has missing dependencies.

        Args:
            handler: A single, multi or null handler.

        Returns:
            Notices in checker order. Empty when nothing is missing.

        Raises:
            UnsupportedDependencyKindError: For an unknown handler type or a
                kind with no message.
        """
        if isinstance(handler, NullHandler):
            return []
        if isinstance(handler, MultiCheckerHandler):
            grouped = handler.get_missing_dependencies()
        elif isinstance(handler, SingleCheckerHandler):
            grouped = {handler.checker.kind.value: handler.get_missing_dependencies()}
        else:
            raise UnsupportedDependencyKindError(type(handler).__name__)

        optional_by_id = {
            checker.id: checker.optional for checker in handler.get_checkers()
        }

        notices: list[DependencyNotice] = []
        for kind, by_checker in grouped.items():
            for checker_id, missing in by_checker.items():
                if not missing:
                    continue
                notices.append(
                    self.build_notice(
                        kind, checker_id, missing, optional_by_id.get(checker_id, False)
                    )
                )

        logger.debug(
            "Built missing dependency notices",
            handler_id=handler.id,
            count=len(notices),
        )
        return notices

    def build_notice(
        self,
        kind: str,
        checker_id: str,
        missing: Sequence[MissingDependency],
        is_optional: bool,
    ) -> DependencyNotice:
        """Build the notice for one checker's missing dependencies."""
        keys = json.dumps(sorted(m.key for m in missing))
        digest = hashlib.md5(keys.encode("utf-8")).hexdigest()
        return DependencyNotice(
            handle=f"missing-{kind}-{digest}",
            message=self.compose_message(kind, missing, is_optional),
            kind=kind,
            checker_id=checker_id,
            is_optional=is_optional,
            missing=tuple(missing),
        )

    def compose_message(
        self,
        kind: DependencyKind | str,
        missing: Sequence[MissingDependency],
        is_optional: bool = False,
    ) -> str:
        """Compose the message for missing dependencies of one kind.

        Raises:
            UnsupportedDependencyKindError: If there is no message for ``kind``.
        """
        kind_value = kind.value if isinstance(kind, DependencyKind) else kind
        composer = self._composers.get(kind_value)
        if composer is None:
            raise UnsupportedDependencyKindError(kind_value)
        return composer(missing, is_optional)

    def _compose_missing_modules(
        self, missing: Sequence[MissingDependency], is_optional: bool
    ) -> str:
        names = ", ".join(m.key for m in missing)
        if len(missing) == 1:
            subject = f"the {names} Python module"
        else:
            subject = f"the following Python modules: {names}"

        if is_optional:
            return (
                f"{self._registrant_name} may behave unexpectedly because {subject} "
                f"{'is' if len(missing) == 1 else 'are'} missing. Install the "
                f"missing {'module' if len(missing) == 1 else 'modules'} to "
                "enable all features."
            )
        return (
            f"{self._registrant_name} requires {subject} to function. Install the "
            f"missing {'module' if len(missing) == 1 else 'modules'} first."
        )

    def _compose_missing_functions(
        self, missing: Sequence[MissingDependency], is_optional: bool
    ) -> str:
        names = ", ".join(m.key for m in missing)
        if len(missing) == 1:
            subject = f"the {names} function"
        else:
            subject = f"the following functions: {names}"

        if is_optional:
            return (
                f"{self._registrant_name} may behave unexpectedly because {subject} "
                f"{'is' if len(missing) == 1 else 'are'} not available on this "
                "platform."
            )
        return (
            f"{self._registrant_name} requires {subject} to exist. Contact your "
            "system administrator to provide the missing "
            f"{'function' if len(missing) == 1 else 'functions'}."
        )

    def _compose_incompatible_settings(
        self, missing: Sequence[MissingDependency], is_optional: bool
    ) -> str:
        settings = "\n".join(f"  - {self._format_setting(m)}" for m in missing)
        if is_optional:
            return (
                f"{self._registrant_name} may behave unexpectedly because the "
                f"following configuration settings are expected:\n{settings}\n"
                "It will attempt to run despite this warning."
            )
        return (
            f"{self._registrant_name} cannot run because the following "
            f"configuration settings are expected:\n{settings}\n"
            "Update these settings and restart."
        )

    def _compose_missing_components(
        self, missing: Sequence[MissingDependency], is_optional: bool
    ) -> str:
        names = ", ".join(self._format_component(m) for m in missing)
        if is_optional:
            if len(missing) == 1:
                return (
                    f"{self._registrant_name} may behave unexpectedly because the "
                    f"{names} component is either not installed or not active."
                )
            return (
                f"{self._registrant_name} may behave unexpectedly because the "
                f"following components are either not installed or not active: "
                f"{names}."
            )
        if len(missing) == 1:
            return (
                f"{self._registrant_name} requires the {names} component to be "
                "installed and active."
            )
        return (
            f"{self._registrant_name} requires the following components to be "
            f"installed and active: {names}."
        )

    @staticmethod
    def _format_setting(missing: MissingDependency) -> str:
        declaration = missing.declaration
        assert isinstance(declaration, SettingDependency)

        expected = declaration.expected
        observed = missing.observed
        if missing.is_size and isinstance(expected, int):
            expected = format_size(expected)
            if isinstance(observed, int):
                observed = format_size(observed)

        line = f"{declaration.key} = {expected}"
        if declaration.mode is Comparison.MINIMUM:
            line += " or higher"
        return f"{line} (currently {observed})"

    @staticmethod
    def _format_component(missing: MissingDependency) -> str:
        declaration = missing.declaration
        assert isinstance(declaration, ComponentDependency)

        name = declaration.display_name
        if declaration.minimum_version:
            name += f" {declaration.minimum_version}+"
        if missing.observed is not None:
            name += f" (You're running version {missing.observed})"
        return name
