"""Default environment probes used by the built-in checkers.

Each probe is cheap local introspection. Checkers accept replacements for
all of them, which is how tests and host integrations supply their own view
of the environment.
"""

from __future__ import annotations

import builtins
import importlib
import importlib.util
import os
from collections.abc import Iterable
from importlib import metadata

from packaging.utils import canonicalize_name

from depgate.constants import DEFAULT_COMPONENT_VERSION
from depgate.logging import get_logger

__all__ = [
    "is_module_available",
    "is_callable_available",
    "read_environment_setting",
    "installed_components",
    "read_component_version",
]

logger = get_logger(__name__)


def is_module_available(name: str) -> bool:
    """Check that a module can be imported without importing it.

    Args:
        name: Fully qualified module name.

    Returns:
        True if an import spec is found.
    """
    try:
        return importlib.util.find_spec(name) is not None
    except Exception as e:
        # find_spec imports parent packages, which may raise anything
        logger.debug("Module lookup failed", module=name, error=repr(e))
        return False


def is_callable_available(path: str) -> bool:
    """Check that a dotted path resolves to a callable.

    Accepts "package.module.attr", "package.module:attr.sub" or a bare name
    which is looked up in builtins.

    Args:
        path: Dotted path to the callable.

    Returns:
        True if the path resolves and the target is callable.
    """
    if ":" in path:
        module_name, _, attr_path = path.partition(":")
        candidates = [(module_name, attr_path)]
    elif "." not in path:
        return callable(getattr(builtins, path, None))
    else:
        # Try the longest importable module prefix first
        parts = path.split(".")
        candidates = [
            (".".join(parts[:i]), ".".join(parts[i:]))
            for i in range(len(parts) - 1, 0, -1)
        ]

    for module_name, attr_path in candidates:
        if not is_module_available(module_name):
            continue
        try:
            target: object = importlib.import_module(module_name)
        except Exception as e:
            logger.debug("Module import failed", module=module_name, error=repr(e))
            continue

        for attr in attr_path.split("."):
            target = getattr(target, attr, None)
            if target is None:
                break
        if target is not None and callable(target):
            return True

    return False


def read_environment_setting(key: str) -> str | None:
    """Read a live setting value from the process environment.

    Args:
        key: Environment variable name.

    Returns:
        The value, or None when the variable is not set.
    """
    return os.environ.get(key)


def installed_components() -> Iterable[str]:
    """List the canonical names of installed distributions.

    Returns:
        Canonicalized distribution names (PEP 503 normalization).
    """
    names: set[str] = set()
    for dist in metadata.distributions():
        name = dist.metadata["Name"] if dist.metadata else None
        if name:
            names.add(canonicalize_name(name))
    return names


def read_component_version(identifier: str) -> str:
    """Best-effort read of an installed distribution's version.

    Args:
        identifier: Distribution name.

    Returns:
        The installed version, or "0.0.0" when it cannot be determined.
    """
    try:
        version = metadata.version(identifier)
    except metadata.PackageNotFoundError:
        logger.debug(f"No metadata found for component '{identifier}'")
        return DEFAULT_COMPONENT_VERSION
    return version or DEFAULT_COMPONENT_VERSION
