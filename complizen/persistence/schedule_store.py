"""Schedule persistence: get/set by document id."""

from dataclasses import dataclass, field

from complizen.models import Schedule
from complizen.persistence.kv_store import InMemoryStore, KeyValueStore

SCHEDULE_PREFIX = "complizen_schedule_"


@dataclass
class ScheduleStore:
    """Stores one schedule per document."""

    kv: KeyValueStore = field(default_factory=InMemoryStore)

    def get(self, document_id: str) -> Schedule | None:
        row = self.kv.get(f"{SCHEDULE_PREFIX}{document_id}")
        return Schedule.from_dict(row) if row else None

    def set(self, schedule: Schedule) -> None:
        self.kv.set(f"{SCHEDULE_PREFIX}{schedule.document_id}", schedule.to_dict())

    def list_schedules(self) -> list[Schedule]:
        schedules = []
        for key in self.kv.keys(SCHEDULE_PREFIX):
            row = self.kv.get(key)
            if row:
                schedules.append(Schedule.from_dict(row))
        return schedules
