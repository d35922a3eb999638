"""Audit event models."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from complizen.models._time import format_dt, parse_dt


class AuditStatus(str, Enum):
    """Lifecycle status of an audit event."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CRITICAL = "critical"  # Serious violation, terminal


@dataclass
class AuditEvent:
    """A single entry in a document's audit trail.

    Events form a per-document append-only sequence. Only the ledger
    changes `status`.
    """

    id: str
    document_id: str
    document_name: str
    action: str  # e.g. "Document uploaded", "Compliance report generated"
    timestamp: datetime
    status: AuditStatus = AuditStatus.PENDING
    actor_id: str | None = None

    def __post_init__(self):
        self.status = AuditStatus(self.status)
        self.timestamp = parse_dt(self.timestamp)

    @property
    def is_completed(self) -> bool:
        return self.status == AuditStatus.COMPLETED

    def integrity_fields(self) -> tuple[str, str, str, str]:
        """The tuple folded into the integrity token."""
        return (self.id, self.action, self.status.value, self.timestamp.isoformat())

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "document_id": self.document_id,
            "document_name": self.document_name,
            "action": self.action,
            "status": self.status.value,
            "timestamp": format_dt(self.timestamp),
            "actor_id": self.actor_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AuditEvent":
        return cls(
            id=data["id"],
            document_id=data["document_id"],
            document_name=data.get("document_name", ""),
            action=data["action"],
            timestamp=parse_dt(data["timestamp"]),
            status=AuditStatus(data.get("status", AuditStatus.PENDING.value)),
            actor_id=data.get("actor_id"),
        )
