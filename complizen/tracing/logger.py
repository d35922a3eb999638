"""Tracing and logging for Complizen engine events."""

import logging
import sys
import threading
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from complizen.models._time import utc_now

DEFAULT_CAPACITY = 500


@dataclass(frozen=True)
class EngineEvent:
    """One ledger write or schedule tick, as seen by the tracer."""

    component: str  # "ledger", "scheduler", ...
    event_type: str
    message: str
    document_id: str | None = None
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=utc_now)

    def format(self) -> str:
        line = f"[{self.component}] {self.event_type}: {self.message}"
        if self.document_id:
            line += f" document={self.document_id}"
        if self.data:
            line += f" | {self.data}"
        return line

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "component": self.component,
            "event_type": self.event_type,
            "message": self.message,
            "document_id": self.document_id,
            "data": dict(self.data),
        }


class EngineTracer:
    """Keeps the most recent engine events and mirrors them to the log.

    Only the last `capacity` events are retained, so a long-running
    scheduler worker does not accumulate history in memory. The ledger
    and the store remain the durable record.
    """

    def __init__(self, name: str = "complizen", capacity: int = DEFAULT_CAPACITY):
        self.logger = logging.getLogger(name)
        self._setup_handler()
        self._events: deque[EngineEvent] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    def _setup_handler(self) -> None:
        """Setup console handler with formatting."""
        if not self.logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            formatter = logging.Formatter(
                "[%(asctime)s] %(levelname)s - %(name)s - %(message)s",
                datefmt="%H:%M:%S",
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)
            self.logger.setLevel(logging.INFO)

    @property
    def capacity(self) -> int | None:
        return self._events.maxlen

    def record(self, event: EngineEvent, level: int = logging.INFO) -> EngineEvent:
        with self._lock:
            self._events.append(event)
        self.logger.log(level, event.format())
        return event

    def recent(
        self,
        component: str | None = None,
        document_id: str | None = None,
        limit: int | None = None,
    ) -> list[EngineEvent]:
        """Newest-first events, optionally filtered by component and document."""
        with self._lock:
            events = list(reversed(self._events))
        if component:
            events = [e for e in events if e.component == component]
        if document_id:
            events = [e for e in events if e.document_id == document_id]
        return events[: max(limit, 0)] if limit is not None else events


# Global tracer instance
_tracer: EngineTracer | None = None


def setup_tracing(log_level: str = "INFO", capacity: int = DEFAULT_CAPACITY) -> EngineTracer:
    """Setup global tracing.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        capacity: Number of recent engine events kept in memory.

    Returns:
        The configured EngineTracer instance.
    """
    global _tracer
    _tracer = EngineTracer(capacity=capacity)
    _tracer.logger.setLevel(getattr(logging, log_level.upper()))
    return _tracer


def get_tracer() -> EngineTracer:
    """Get the global tracer instance."""
    global _tracer
    if _tracer is None:
        _tracer = EngineTracer()
    return _tracer


def log_engine_event(
    component: str,
    event_type: str,
    message: str,
    document_id: str | None = None,
    level: int = logging.INFO,
    **data: Any,
) -> EngineEvent:
    """Record an engine event on the global tracer."""
    event = EngineEvent(
        component=component,
        event_type=event_type,
        message=message,
        document_id=document_id,
        data=data,
    )
    return get_tracer().record(event, level)
