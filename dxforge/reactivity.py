"""Three reaction paths for file changes: realtime, debounced and idle."""

from __future__ import annotations

import asyncio
import logging
import os
import threading
import time
from typing import Optional, Union

logger = logging.getLogger(__name__)

DEBOUNCE_DELAY = 0.3
IDLE_DELAY = 2.0

PathLike = Union[str, os.PathLike]

_lock = threading.Lock()
_batch_start: Optional[float] = None


def trigger_realtime_event(file: PathLike, content: str) -> None:
    """Instant path, run on every document change."""
    logger.debug("Realtime event: %s", file)


async def trigger_debounced_event(file: PathLike, content: str) -> None:
    """Debounced path: react after a short quiet period."""
    logger.debug("Debounced event: %s (%.0fms)", file, DEBOUNCE_DELAY * 1000)
    await asyncio.sleep(DEBOUNCE_DELAY)


async def trigger_idle_event(file: PathLike) -> None:
    """Idle path: react only once the user has been idle."""
    logger.debug("Idle event: %s (>=%.0fs idle)", file, IDLE_DELAY)
    await asyncio.sleep(IDLE_DELAY)


def begin_batch_operation() -> None:
    """Mark the start of an atomic multi-file operation."""
    global _batch_start
    with _lock:
        logger.info("Beginning batch operation")
        _batch_start = time.monotonic()


def end_batch_operation() -> Optional[float]:
    """End the current batch; return its duration in seconds, or None if none was open."""
    global _batch_start
    with _lock:
        start, _batch_start = _batch_start, None
    if start is None:
        return None
    elapsed = time.monotonic() - start
    logger.info("Batch operation completed in %.2fs", elapsed)
    return elapsed


def is_batch_active() -> bool:
    with _lock:
        return _batch_start is not None