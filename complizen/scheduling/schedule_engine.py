"""Recurring scan scheduler: next-run computation and notification dispatch."""

import calendar
import logging
import threading
import uuid
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

from complizen.errors import ComplizenError, DispatchFailure, InvalidInput
from complizen.ledger import AuditLedger
from complizen.models import AuditEvent, AuditStatus, Frequency, Schedule
from complizen.models._time import parse_dt, utc_now
from complizen.persistence import ScheduleStore
from complizen.tracing import log_engine_event

logger = logging.getLogger(__name__)

Dispatcher = Callable[[Schedule], bool]


class TickOutcome(str, Enum):
    """What a single tick did with a schedule."""

    SKIPPED = "skipped"  # Disabled schedule
    NOT_DUE = "not_due"
    DISPATCHED = "dispatched"
    FAILED = "failed"  # Dispatch failed, retried next tick


@dataclass
class TickResult:
    """Outcome of evaluating one schedule."""

    document_id: str
    outcome: TickOutcome
    next_run_at: datetime | None
    error: str | None = None

    @property
    def dispatched(self) -> bool:
        return self.outcome == TickOutcome.DISPATCHED


def add_months(value: datetime, months: int) -> datetime:
    """Shift by calendar months, clamping the day to the target month's end."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


class ScheduleEngine:
    """Evaluates recurring schedules on externally driven ticks.

    The engine is the only writer of `next_run_at`. A failed dispatch
    leaves `next_run_at` untouched so the schedule is retried on the next
    tick. Ticks on one schedule are serialized by a per-schedule lock.
    """

    def __init__(
        self,
        store: ScheduleStore | None = None,
        ledger: AuditLedger | None = None,
    ):
        self.store = store or ScheduleStore()
        self.ledger = ledger
        self._registry_lock = threading.Lock()
        self._schedule_locks: dict[str, threading.Lock] = defaultdict(threading.Lock)

    def _lock_for(self, document_id: str) -> threading.Lock:
        with self._registry_lock:
            return self._schedule_locks[document_id]

    @staticmethod
    def is_due(schedule: Schedule, now: datetime) -> bool:
        """True when `now` has reached the schedule's next run time.

        A naive `now` is taken as UTC.
        """
        return schedule.next_run_at is not None and parse_dt(now) >= schedule.next_run_at

    @staticmethod
    def advance(frequency: Frequency | str, from_time: datetime) -> datetime:
        """Next run time one period after `from_time`."""
        frequency = Frequency(frequency)
        if frequency == Frequency.DAILY:
            return from_time + timedelta(days=1)
        if frequency == Frequency.WEEKLY:
            return from_time + timedelta(days=7)
        return add_months(from_time, 1)

    # ------------------------------------------------------------------
    # Schedule management
    # ------------------------------------------------------------------

    def register(self, schedule: Schedule, now: datetime | None = None) -> Schedule:
        """Store a schedule, assigning its first run one period from `now`."""
        if not schedule.document_id:
            raise InvalidInput("Schedule requires a document_id")
        if schedule.enabled and not schedule.email:
            raise InvalidInput("Email is required for notifications")

        with self._lock_for(schedule.document_id):
            if schedule.next_run_at is None:
                schedule.next_run_at = self.advance(
                    schedule.frequency, parse_dt(now) if now else utc_now()
                )
            self.store.set(schedule)

        logger.info(
            "Registered %s schedule for document=%s, next run %s",
            schedule.frequency.value,
            schedule.document_id,
            schedule.next_run_at.isoformat(),
        )
        return schedule

    def get(self, document_id: str) -> Schedule | None:
        return self.store.get(document_id)

    def _set_enabled(self, document_id: str, enabled: bool) -> Schedule:
        with self._lock_for(document_id):
            schedule = self.store.get(document_id)
            if schedule is None:
                raise InvalidInput(f"No schedule for document {document_id}")
            schedule.enabled = enabled
            self.store.set(schedule)
        return schedule

    def enable(self, document_id: str) -> Schedule:
        return self._set_enabled(document_id, True)

    def disable(self, document_id: str) -> Schedule:
        """Halt future ticks. The stored schedule and its history are kept."""
        return self._set_enabled(document_id, False)

    # ------------------------------------------------------------------
    # Ticks
    # ------------------------------------------------------------------

    def _run_dispatch(self, schedule: Schedule, dispatch: Dispatcher) -> DispatchFailure | None:
        try:
            ok = dispatch(schedule)
        except Exception as e:
            return DispatchFailure(schedule.document_id, f"{type(e).__name__}: {e}")
        if not ok:
            return DispatchFailure(schedule.document_id)
        return None

    def _record(self, schedule: Schedule, now: datetime, failure: DispatchFailure | None) -> None:
        if self.ledger is None:
            return
        event = AuditEvent(
            id=f"sched-{uuid.uuid4().hex[:12]}",
            document_id=schedule.document_id,
            document_name=schedule.document_name or schedule.document_id,
            action="Scheduled scan dispatch failed" if failure else "Scheduled scan dispatched",
            timestamp=now,
            status=AuditStatus.PENDING if failure else AuditStatus.COMPLETED,
            actor_id="scheduler",
        )
        try:
            self.ledger.append(event)
        except ComplizenError as e:
            logger.warning("Could not record tick for document=%s: %s", schedule.document_id, e)

    def tick(self, schedule: Schedule, now: datetime, dispatch: Dispatcher) -> TickResult:
        """Evaluate one schedule and dispatch it when due.

        Never raises for dispatch problems: a falsy result or an exception
        from `dispatch` is normalized into a FAILED result. A schedule is
        skipped when either the given copy or the stored one is disabled.
        """
        now = parse_dt(now)
        with self._lock_for(schedule.document_id):
            current = self.store.get(schedule.document_id) or schedule

            if not (schedule.enabled and current.enabled):
                return TickResult(current.document_id, TickOutcome.SKIPPED, current.next_run_at)

            if current.next_run_at is None:
                current.next_run_at = self.advance(current.frequency, now)
                self.store.set(current)
                schedule.next_run_at = current.next_run_at
                return TickResult(current.document_id, TickOutcome.NOT_DUE, current.next_run_at)

            if not self.is_due(current, now):
                return TickResult(current.document_id, TickOutcome.NOT_DUE, current.next_run_at)

            failure = self._run_dispatch(current, dispatch)
            if failure is None:
                current.last_run_at = now
                current.next_run_at = self.advance(current.frequency, current.next_run_at)
                self.store.set(current)
                schedule.last_run_at = current.last_run_at
                schedule.next_run_at = current.next_run_at

        if failure is not None:
            log_engine_event(
                "scheduler",
                "dispatch_failed",
                failure.reason,
                document_id=current.document_id,
                level=logging.WARNING,
            )
            self._record(current, now, failure)
            return TickResult(
                current.document_id, TickOutcome.FAILED, current.next_run_at, error=str(failure)
            )

        log_engine_event(
            "scheduler",
            "dispatched",
            f"next run {current.next_run_at.isoformat()}",
            document_id=current.document_id,
        )
        self._record(current, now, None)
        return TickResult(current.document_id, TickOutcome.DISPATCHED, current.next_run_at)

    def tick_all(self, now: datetime, dispatch: Dispatcher) -> list[TickResult]:
        """Tick every stored schedule sequentially."""
        return [self.tick(s, now, dispatch) for s in self.store.list_schedules()]
