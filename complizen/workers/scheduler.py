"""Scheduler worker - drives schedule ticks on a polling timer."""

import logging
import time
from datetime import datetime

from complizen.models._time import utc_now
from complizen.scheduling import Dispatcher, ScheduleEngine, TickOutcome
from complizen.workers.config import SCHEDULER_POLL_INTERVAL

logger = logging.getLogger(__name__)


class SchedulerWorker:
    """Ticks all stored schedules once per poll interval."""

    def __init__(
        self,
        engine: ScheduleEngine,
        dispatch: Dispatcher,
        poll_interval: int = SCHEDULER_POLL_INTERVAL,
    ):
        self.engine = engine
        self.dispatch = dispatch
        self.poll_interval = poll_interval

    def run_once(self, now: datetime | None = None) -> int:
        """Tick every schedule; return how many were dispatched."""
        now = now or utc_now()
        results = self.engine.tick_all(now, self.dispatch)

        dispatched = sum(1 for r in results if r.outcome == TickOutcome.DISPATCHED)
        failed = sum(1 for r in results if r.outcome == TickOutcome.FAILED)
        if dispatched or failed:
            logger.info(
                "Tick at %s: %d dispatched, %d failed (will retry)",
                now.isoformat(),
                dispatched,
                failed,
            )
        return dispatched

    def run_loop(self) -> None:
        """Run the scheduler in a continuous loop."""
        logger.info("Scheduler worker started (interval=%ss)", self.poll_interval)
        while True:
            try:
                self.run_once()
            except Exception:
                logger.exception("Scheduler error")
            time.sleep(self.poll_interval)
