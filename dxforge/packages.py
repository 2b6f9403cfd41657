"""Package management: installing, updating and publishing variants."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from .events import emit_package_installation_begin, emit_package_installation_success

logger = logging.getLogger(__name__)


@dataclass
class PackageInfo:
    """An installed package and the files it brought in."""

    id: str
    name: str
    version: str
    variant: str
    installed_files: List[Path] = field(default_factory=list)


def install_package_with_variant(package_id: str, variant: str) -> List[Path]:
    """Install a package variant, announcing start and success on the event bus."""
    logger.info("Installing package '%s' with variant '%s'", package_id, variant)
    emit_package_installation_begin(package_id)
    installed: List[Path] = []
    emit_package_installation_success(package_id)
    return installed


def uninstall_package_safely(package_id: str) -> List[Path]:
    logger.info("Uninstalling package: %s", package_id)
    return []


def update_package_intelligently(package_id: str) -> List[Path]:
    logger.info("Intelligently updating package: %s", package_id)
    return []


def list_all_installed_packages() -> List[PackageInfo]:
    return []


def search_dx_package_registry(query: str) -> List[PackageInfo]:
    logger.info("Searching package registry: %s", query)
    return []


def pin_package_to_exact_version(package_id: str, version: str) -> None:
    logger.info("Pinning '%s' to version %s", package_id, version)


def fork_existing_variant(package_id: str, variant: str, new_variant_name: str) -> str:
    """Fork a variant under a new name and return that name."""
    logger.info(
        "Forking variant '%s' from '%s' to '%s'", variant, package_id, new_variant_name
    )
    return new_variant_name


def publish_your_variant(package_id: str, variant: str) -> str:
    """Publish a variant and return its published id, ``<package>-<variant>``."""
    logger.info("Publishing variant '%s' for package '%s'", variant, package_id)
    return f"{package_id}-{variant}"