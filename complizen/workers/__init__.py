"""Worker processes for scheduled compliance scans."""

from complizen.workers.config import SCHEDULER_POLL_INTERVAL, WORKER_ID
from complizen.workers.scheduler import SchedulerWorker

__all__ = [
    "SCHEDULER_POLL_INTERVAL",
    "WORKER_ID",
    "SchedulerWorker",
]
