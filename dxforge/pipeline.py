"""Pipeline execution state: active pipeline, ordering and suspension."""

from __future__ import annotations

import logging
import threading
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)


class PipelineSuspendedError(RuntimeError):
    """Raised when a pipeline is started while execution is suspended."""


class Pipeline:
    """Holds the state of pipeline execution behind a lock."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._active: Optional[str] = None
        self._execution_order: List[str] = []
        self._suspended = False
        self._override: Optional[List[str]] = None

    @property
    def active_pipeline(self) -> Optional[str]:
        with self._lock:
            return self._active

    @property
    def is_suspended(self) -> bool:
        with self._lock:
            return self._suspended

    def execute(self, pipeline_name: str) -> None:
        """Run the named pipeline, making it the active one."""
        with self._lock:
            if self._suspended:
                raise PipelineSuspendedError("Pipeline execution is suspended")
            logger.info("Executing pipeline: %s", pipeline_name)
            self._active = pipeline_name

    def execute_tool_immediately(self, tool_id: str) -> None:
        """Run one tool at once, bypassing the queue and debouncing."""
        logger.info("Immediate execution: %s", tool_id)

    def resolved_execution_order(self) -> List[str]:
        """The tool order in effect: the override if set, else the resolved order."""
        with self._lock:
            order = self._override if self._override is not None else self._execution_order
            return list(order)

    def override_order(self, new_order: Iterable[str]) -> None:
        with self._lock:
            logger.info("Temporarily overriding pipeline order")
            self._override = list(new_order)

    def restart(self) -> None:
        """Run the active pipeline again from scratch."""
        with self._lock:
            name = self._active
            if name is None:
                raise RuntimeError("No active pipeline to restart")
            logger.info("Restarting pipeline: %s", name)
            self.execute(name)

    def suspend(self) -> None:
        with self._lock:
            logger.info("Pipeline execution suspended")
            self._suspended = True

    def resume(self) -> None:
        with self._lock:
            logger.info("Pipeline execution resumed")
            self._suspended = False


_DEFAULT = Pipeline()


def execute_pipeline(pipeline_name: str) -> None:
    _DEFAULT.execute(pipeline_name)


def execute_tool_immediately(tool_id: str) -> None:
    _DEFAULT.execute_tool_immediately(tool_id)


def get_resolved_execution_order() -> List[str]:
    return _DEFAULT.resolved_execution_order()


def temporarily_override_pipeline_order(new_order: Iterable[str]) -> None:
    _DEFAULT.override_order(new_order)


def restart_current_pipeline() -> None:
    _DEFAULT.restart()


def suspend_pipeline_execution() -> None:
    _DEFAULT.suspend()


def resume_pipeline_execution() -> None:
    _DEFAULT.resume()