"""Append-only audit ledger with status transitions and tamper evidence."""

import json
import logging
import math
import threading
from collections import defaultdict

from complizen.errors import InvalidInput, InvalidTransition, OutOfOrderTimestamp
from complizen.integrity import EMPTY_DIGEST, compute_digest
from complizen.models import AuditEvent, AuditStatus
from complizen.persistence import LedgerStore
from complizen.tracing import log_engine_event

logger = logging.getLogger(__name__)

# Forward-only moves. CRITICAL is reachable from every state and is terminal.
ALLOWED_TRANSITIONS: dict[AuditStatus, frozenset[AuditStatus]] = {
    AuditStatus.PENDING: frozenset({AuditStatus.IN_PROGRESS, AuditStatus.CRITICAL}),
    AuditStatus.IN_PROGRESS: frozenset({AuditStatus.COMPLETED, AuditStatus.CRITICAL}),
    AuditStatus.COMPLETED: frozenset({AuditStatus.CRITICAL}),
    AuditStatus.CRITICAL: frozenset(),
}


def can_transition(current: AuditStatus, new: AuditStatus) -> bool:
    """Check whether an event may move from `current` to `new`.

    Re-applying the current status is allowed as a no-op.
    """
    return new == current or new in ALLOWED_TRANSITIONS[current]


def fold_integrity_token(events: list[AuditEvent]) -> str:
    """Chain SHA-256 over the ordered (id, action, status, timestamp) tuples."""
    token = EMPTY_DIGEST
    for event in events:
        payload = json.dumps([token, *event.integrity_fields()], separators=(",", ":"))
        token = compute_digest(payload.encode("utf-8"))
    return token


class AuditLedger:
    """Per-document append-only sequences of audit events.

    The ledger is the single writer of event status. Writes to one
    document are serialized by a per-document lock; writes to different
    documents proceed independently. After each write the integrity token
    is re-sealed in the store, so an edit made to the store behind the
    ledger's back is detected by `verify_integrity`.
    """

    def __init__(self, store: LedgerStore | None = None):
        self.store = store or LedgerStore()
        self._registry_lock = threading.Lock()
        self._document_locks: dict[str, threading.Lock] = defaultdict(threading.Lock)
        self._event_index: dict[str, str] = {}
        self._load_index()

    def _load_index(self) -> None:
        for document_id in self.store.document_ids():
            for event in self.store.read(document_id):
                self._event_index[event.id] = document_id

    def _lock_for(self, document_id: str) -> threading.Lock:
        with self._registry_lock:
            return self._document_locks[document_id]

    def _seal(self, document_id: str, events: list[AuditEvent]) -> str:
        token = fold_integrity_token(events)
        self.store.set_token(document_id, token)
        return token

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def append(self, event: AuditEvent) -> AuditEvent:
        """Append an event to its document's sequence.

        Raises:
            OutOfOrderTimestamp: If the event is older than the last one
                recorded for the same document.
            InvalidInput: If an event with the same id already exists.
        """
        if not event.id or not event.document_id:
            raise InvalidInput("Audit event requires an id and a document_id")

        with self._lock_for(event.document_id):
            with self._registry_lock:
                if event.id in self._event_index:
                    raise InvalidInput(f"Duplicate audit event id: {event.id}")

            events = self.store.read(event.document_id)
            if events and event.timestamp < events[-1].timestamp:
                raise OutOfOrderTimestamp(
                    event.document_id, event.timestamp, events[-1].timestamp
                )

            self.store.append(event)
            events.append(event)
            with self._registry_lock:
                self._event_index[event.id] = event.document_id
            self._seal(event.document_id, events)

        log_engine_event(
            "ledger",
            "append",
            f"{event.action} ({event.status.value})",
            document_id=event.document_id,
            event_id=event.id,
        )
        return event

    def update_status(self, event_id: str, new_status: AuditStatus | str) -> AuditEvent:
        """Apply a status transition and return the updated event.

        Raises:
            InvalidInput: Unknown event id or status value.
            InvalidTransition: The move is not allowed (e.g. completed -> pending).
        """
        try:
            target = AuditStatus(new_status)
        except ValueError as e:
            raise InvalidInput(f"Unknown audit status: {new_status!r}") from e

        with self._registry_lock:
            document_id = self._event_index.get(event_id)
        if document_id is None:
            raise InvalidInput(f"Unknown audit event id: {event_id}")

        with self._lock_for(document_id):
            events = self.store.read(document_id)
            event = next(e for e in events if e.id == event_id)
            if not can_transition(event.status, target):
                raise InvalidTransition(event_id, event.status.value, target.value)

            previous = event.status
            event.status = target
            self.store.write(document_id, events)
            self._seal(document_id, events)

        log_engine_event(
            "ledger",
            "transition",
            f"{previous.value} -> {target.value}",
            document_id=document_id,
            event_id=event_id,
            level=logging.WARNING if target == AuditStatus.CRITICAL else logging.INFO,
        )
        return event

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def events(self, document_id: str) -> list[AuditEvent]:
        """Get a document's events in append order."""
        return self.store.read(document_id)

    def get_event(self, event_id: str) -> AuditEvent | None:
        with self._registry_lock:
            document_id = self._event_index.get(event_id)
        if document_id is None:
            return None
        return next((e for e in self.store.read(document_id) if e.id == event_id), None)

    def completed_count(self, document_id: str) -> int:
        return sum(1 for e in self.store.read(document_id) if e.is_completed)

    def compute_compliance_score(self, document_id: str) -> int:
        """Percentage of completed events, rounded half up.

        A document with no events is vacuously compliant (100).
        """
        events = self.store.read(document_id)
        if not events:
            return 100
        completed = sum(1 for e in events if e.is_completed)
        return math.floor(completed / len(events) * 100 + 0.5)

    def compute_integrity_token(self, document_id: str) -> str:
        """Digest over the document's ordered event sequence."""
        return fold_integrity_token(self.store.read(document_id))

    def store_integrity_token(self, document_id: str) -> str:
        """Seal the current sequence and return the stored token."""
        with self._lock_for(document_id):
            return self._seal(document_id, self.store.read(document_id))

    def verify_integrity(self, document_id: str) -> bool:
        """Compare the current token with the sealed one.

        When nothing has been sealed yet, the current token is stored and
        the trail is reported as intact. A mismatch is returned, not raised.
        """
        with self._lock_for(document_id):
            current = self.compute_integrity_token(document_id)
            stored = self.store.get_token(document_id)
            if stored is None:
                self.store.set_token(document_id, current)
                return True
        if stored != current:
            logger.warning("Audit trail integrity mismatch for document=%s", document_id)
            return False
        return True
