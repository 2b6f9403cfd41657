"""Governance of generated code: marked regions and file ownership."""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


@dataclass
class GeneratedRegion:
    """An inclusive line range written by a generator tool."""

    start_line: int
    end_line: int
    generator_tool: str
    allow_manual_edit: bool = False

    def contains(self, line: int) -> bool:
        return self.start_line <= line <= self.end_line


_lock = threading.Lock()
_regions: Dict[Path, List[GeneratedRegion]] = {}
_owners: Dict[Path, str] = {}


def mark_code_region_as_dx_generated(
    file: PathLike, start_line: int, end_line: int, generator_tool: str
) -> None:
    region = GeneratedRegion(start_line, end_line, generator_tool)
    with _lock:
        _regions.setdefault(Path(file), []).append(region)
    logger.debug(
        "Marked lines %d-%d in %s as generated by %s",
        start_line,
        end_line,
        file,
        generator_tool,
    )


def is_region_dx_generated(file: PathLike, line: int) -> bool:
    with _lock:
        return any(region.contains(line) for region in _regions.get(Path(file), ()))


def allow_safe_manual_edit_of_generated_code(file: PathLike, line: int) -> GeneratedRegion:
    """Allow manual edits of the first generated region holding ``line``.

    Returns that region; raises LookupError if no region holds the line.
    """
    with _lock:
        for region in _regions.get(Path(file), ()):
            if region.contains(line):
                region.allow_manual_edit = True
                logger.info("Allowed manual editing of generated region in %s", file)
                return region
    raise LookupError(f"No generated region found at line {line} in {file}")


def claim_full_ownership_of_file(file: PathLike, owner_tool: str) -> None:
    logger.info("Tool '%s' claimed ownership of %s", owner_tool, file)
    with _lock:
        _owners[Path(file)] = owner_tool


def release_ownership_of_file(file: PathLike) -> bool:
    """Release a claim; returns whether the file had an owner."""
    with _lock:
        released = _owners.pop(Path(file), None) is not None
    if released:
        logger.info("Released ownership of %s", file)
    return released


def get_file_owner(file: PathLike) -> Optional[str]:
    with _lock:
        return _owners.get(Path(file))