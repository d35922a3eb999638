"""Audit ledger persistence: append/read by document id."""

from dataclasses import dataclass, field

from complizen.models import AuditEvent
from complizen.persistence.kv_store import InMemoryStore, KeyValueStore

LEDGER_PREFIX = "complizen_ledger_"
TOKEN_PREFIX = "complizen_token_"


@dataclass
class LedgerStore:
    """Stores each document's event sequence and its sealed integrity token."""

    kv: KeyValueStore = field(default_factory=InMemoryStore)

    def read(self, document_id: str) -> list[AuditEvent]:
        rows = self.kv.get(f"{LEDGER_PREFIX}{document_id}") or []
        return [AuditEvent.from_dict(row) for row in rows]

    def write(self, document_id: str, events: list[AuditEvent]) -> None:
        """Replace the stored sequence (used for status updates)."""
        self.kv.set(f"{LEDGER_PREFIX}{document_id}", [e.to_dict() for e in events])

    def append(self, event: AuditEvent) -> None:
        rows = self.kv.get(f"{LEDGER_PREFIX}{event.document_id}") or []
        rows.append(event.to_dict())
        self.kv.set(f"{LEDGER_PREFIX}{event.document_id}", rows)

    def document_ids(self) -> list[str]:
        return [k[len(LEDGER_PREFIX):] for k in self.kv.keys(LEDGER_PREFIX)]

    def get_token(self, document_id: str) -> str | None:
        return self.kv.get(f"{TOKEN_PREFIX}{document_id}")

    def set_token(self, document_id: str, token: str) -> None:
        self.kv.set(f"{TOKEN_PREFIX}{document_id}", token)
