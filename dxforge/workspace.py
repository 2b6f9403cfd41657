"""CI/CD and workspace orchestration helpers."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, List, Optional, Union

logger = logging.getLogger(__name__)

_ROOT_MARKERS = (".dx", ".git")


def trigger_ci_cd_pipeline(pipeline_name: str) -> None:
    logger.info("Triggering CI/CD pipeline: %s", pipeline_name)


def register_ci_stage(stage_name: str, command: str) -> None:
    logger.info("Registered CI stage '%s': %s", stage_name, command)


def query_current_ci_status() -> Dict[str, str]:
    """Return the status of known CI jobs, keyed by job id."""
    return {}


def abort_running_ci_job(job_id: str) -> None:
    logger.warning("Aborting CI job: %s", job_id)


def synchronize_monorepo_workspace() -> Path:
    """Synchronize the workspace and return the root it was synchronized from."""
    root = detect_workspace_root()
    logger.info("Synchronizing monorepo workspace at %s", root)
    return root


def detect_workspace_root(start: Optional[Union[str, os.PathLike]] = None) -> Path:
    """Walk up from ``start`` (default: the current directory) to the first
    directory holding ``.dx`` or ``.git``; fall back to ``start`` itself."""
    origin = Path(start).resolve() if start is not None else Path.cwd()
    for candidate in (origin, *origin.parents):
        if any((candidate / marker).exists() for marker in _ROOT_MARKERS):
            return candidate
    return origin


def list_all_workspace_members() -> List[Path]:
    return []


def broadcast_change_to_workspace(change_description: str) -> None:
    logger.info("Broadcasting change: %s", change_description)