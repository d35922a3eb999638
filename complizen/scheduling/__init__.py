"""Recurring scan scheduling."""

from complizen.scheduling.schedule_engine import (
    Dispatcher,
    ScheduleEngine,
    TickOutcome,
    TickResult,
    add_months,
)

__all__ = [
    "Dispatcher",
    "ScheduleEngine",
    "TickOutcome",
    "TickResult",
    "add_months",
]
