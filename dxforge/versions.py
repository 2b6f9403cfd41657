"""Version governance: tool version declarations and forge version checks."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

import semver

logger = logging.getLogger(__name__)

FORGE_VERSION = "0.1.3"


class VersionMismatchError(RuntimeError):
    """Raised when a tool's version differs from the one required."""


def _parse(version: str) -> semver.Version:
    return semver.Version.parse(version)


def declare_tool_version(tool_name: str, version: str) -> None:
    """Record a tool's semantic version; raises ValueError if it is not semver."""
    try:
        _parse(version)
    except ValueError as exc:
        raise ValueError(
            f"Invalid version '{version}' for tool '{tool_name}': {exc}"
        ) from exc
    logger.info("Tool '%s' declares version: %s", tool_name, version)


def enforce_exact_version(tool_name: str, expected: str, actual: str) -> None:
    """Raise VersionMismatchError unless ``expected`` equals ``actual`` exactly."""
    if expected != actual:
        raise VersionMismatchError(
            f"VERSION MISMATCH for '{tool_name}': expected '{expected}', "
            f"found '{actual}'. Zero tolerance policy enforced."
        )
    logger.debug("Version verified for '%s': %s", tool_name, expected)


def require_forge_minimum(min_version: str) -> str:
    """Return a build-time snippet declaring a minimum forge version."""
    _parse(min_version)
    return (
        "import warnings\n"
        "\n"
        f'MIN_REQUIRED = "{min_version}"\n'
        'warnings.warn(f"Requiring forge >= {MIN_REQUIRED}")\n'
        "\n"
        "# Add this to the project's dependencies to enforce it:\n"
        f'# "dxforge>={min_version}"\n'
    )


def current_forge_version() -> semver.Version:
    return _parse(FORGE_VERSION)


def query_active_package_variant() -> str:
    """The active package variant id; ``"default"`` when none is set."""
    return "default"


def activate_package_variant(variant_id: str, preview_only: bool) -> List[Path]:
    """Switch to a package variant and return the files it modifies."""
    logger.info("Activating package variant: %s (preview: %s)", variant_id, preview_only)
    if preview_only:
        logger.info("Preview mode - no changes applied")
    else:
        logger.info("Variant '%s' activated", variant_id)
    return []