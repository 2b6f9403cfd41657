"""Process-wide event bus for forge lifecycle notifications."""

from __future__ import annotations

import enum
import logging
import threading
import time
import weakref
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, Mapping, Optional

logger = logging.getLogger(__name__)

CHANNEL_CAPACITY = 10000


class EventKind(enum.Enum):
    """The kinds of event the bus carries."""

    TOOL_STARTED = "ToolStarted"
    TOOL_COMPLETED = "ToolCompleted"
    PIPELINE_STARTED = "PipelineStarted"
    PIPELINE_COMPLETED = "PipelineCompleted"
    PACKAGE_INSTALLATION_BEGIN = "PackageInstallationBegin"
    PACKAGE_INSTALLATION_SUCCESS = "PackageInstallationSuccess"
    SECURITY_VIOLATION_DETECTED = "SecurityViolationDetected"
    MAGICAL_CONFIG_INJECTION = "MagicalConfigInjection"
    CUSTOM = "Custom"


@dataclass(frozen=True)
class ForgeEvent:
    """A single event: its kind, its fields and a Unix timestamp in seconds."""

    kind: EventKind
    payload: Mapping[str, Any] = field(default_factory=dict)
    timestamp: int = field(default_factory=lambda: int(time.time()))


class EventSubscription:
    """A receiver that gets every event published after it was created.

    When more than ``CHANNEL_CAPACITY`` events are waiting, the oldest are
    dropped and counted in ``lagged``.
    """

    def __init__(self, bus: "_EventBus") -> None:
        self._bus = bus
        self._queue: Deque[ForgeEvent] = deque(maxlen=CHANNEL_CAPACITY)
        self._cond = threading.Condition()
        self._closed = False
        self.lagged = 0

    def _deliver(self, event: ForgeEvent) -> None:
        with self._cond:
            if self._closed:
                return
            if len(self._queue) == self._queue.maxlen:
                self.lagged += 1
            self._queue.append(event)
            self._cond.notify()

    def recv(self, timeout: Optional[float] = None) -> ForgeEvent:
        """Wait for the next event.

        Raises TimeoutError if none arrives within ``timeout`` seconds and
        RuntimeError if the subscription is closed and drained.
        """
        with self._cond:
            ready = self._cond.wait_for(
                lambda: bool(self._queue) or self._closed, timeout=timeout
            )
            if self._queue:
                return self._queue.popleft()
            if self._closed:
                raise RuntimeError("event subscription is closed")
            if not ready:
                raise TimeoutError("no event received before timeout")
            raise TimeoutError("no event received")

    def try_recv(self) -> Optional[ForgeEvent]:
        """Return the next waiting event, or None if there is none."""
        with self._cond:
            return self._queue.popleft() if self._queue else None

    def close(self) -> None:
        """Stop receiving events."""
        with self._cond:
            self._closed = True
            self._cond.notify_all()
        self._bus.detach(self)

    def __enter__(self) -> "EventSubscription":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class _EventBus:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subscribers: "weakref.WeakSet[EventSubscription]" = weakref.WeakSet()

    def publish(self, event: ForgeEvent) -> None:
        with self._lock:
            subscribers = list(self._subscribers)
        for subscriber in subscribers:
            subscriber._deliver(event)

    def subscribe(self) -> EventSubscription:
        subscription = EventSubscription(self)
        with self._lock:
            self._subscribers.add(subscription)
        return subscription

    def detach(self, subscription: EventSubscription) -> None:
        with self._lock:
            self._subscribers.discard(subscription)


_BUS = _EventBus()


def publish_event(event: ForgeEvent) -> None:
    """Send an event to every current subscriber; with none it is dropped."""
    logger.debug("publishing event %s", event.kind.value)
    _BUS.publish(event)


def subscribe_to_event_stream() -> EventSubscription:
    """Open a new subscription to the event bus."""
    return _BUS.subscribe()


def _emit(kind: EventKind, **payload: Any) -> None:
    publish_event(ForgeEvent(kind=kind, payload=payload, timestamp=int(time.time())))


def emit_tool_started_event(tool_id: str) -> None:
    _emit(EventKind.TOOL_STARTED, tool_id=tool_id)


def emit_tool_completed_event(tool_id: str, duration_ms: int) -> None:
    _emit(EventKind.TOOL_COMPLETED, tool_id=tool_id, duration_ms=duration_ms)


def emit_pipeline_started_event(pipeline_id: str) -> None:
    _emit(EventKind.PIPELINE_STARTED, pipeline_id=pipeline_id)


def emit_pipeline_completed_event(pipeline_id: str, duration_ms: int) -> None:
    _emit(EventKind.PIPELINE_COMPLETED, pipeline_id=pipeline_id, duration_ms=duration_ms)


def emit_package_installation_begin(package_id: str) -> None:
    _emit(EventKind.PACKAGE_INSTALLATION_BEGIN, package_id=package_id)


def emit_package_installation_success(package_id: str) -> None:
    _emit(EventKind.PACKAGE_INSTALLATION_SUCCESS, package_id=package_id)


def emit_security_violation_detected(description: str, severity: str) -> None:
    _emit(
        EventKind.SECURITY_VIOLATION_DETECTED,
        description=description,
        severity=severity,
    )


def emit_magical_config_injection(config_section: str) -> None:
    _emit(EventKind.MAGICAL_CONFIG_INJECTION, config_section=config_section)