"""Recurring scan schedule models."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from complizen.models._time import format_dt, parse_dt


class Frequency(str, Enum):
    """How often a scheduled scan recurs."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


@dataclass
class Schedule:
    """Automated scanning configuration for one document.

    `next_run_at` is written only by the schedule engine. Disabling a
    schedule halts future ticks but keeps its history.
    """

    document_id: str
    frequency: Frequency
    email: str
    enabled: bool = True
    next_run_at: datetime | None = None
    last_run_at: datetime | None = None
    document_name: str | None = None

    def __post_init__(self):
        self.frequency = Frequency(self.frequency)
        if self.next_run_at is not None:
            self.next_run_at = parse_dt(self.next_run_at)
        if self.last_run_at is not None:
            self.last_run_at = parse_dt(self.last_run_at)

    def to_dict(self) -> dict[str, Any]:
        return {
            "document_id": self.document_id,
            "document_name": self.document_name,
            "frequency": self.frequency.value,
            "enabled": self.enabled,
            "email": self.email,
            "next_run_at": format_dt(self.next_run_at),
            "last_run_at": format_dt(self.last_run_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Schedule":
        return cls(
            document_id=data["document_id"],
            document_name=data.get("document_name"),
            frequency=Frequency(data["frequency"]),
            enabled=bool(data.get("enabled", False)),
            email=data.get("email", ""),
            next_run_at=data.get("next_run_at") or None,
            last_run_at=data.get("last_run_at") or None,
        )
