"""Error taxonomy for the Complizen core."""


class ComplizenError(Exception):
    """Base class for all Complizen errors."""


class InvalidInput(ComplizenError, ValueError):
    """Malformed bytes, risk items or identifiers."""


class InvalidTransition(ComplizenError):
    """Illegal audit event status change."""

    def __init__(self, event_id: str, current: str, requested: str):
        self.event_id = event_id
        self.current = current
        self.requested = requested
        super().__init__(
            f"Event {event_id}: cannot move from '{current}' to '{requested}'"
        )


class OutOfOrderTimestamp(ComplizenError):
    """Ledger append would break the non-decreasing timestamp order."""

    def __init__(self, document_id: str, timestamp, last_timestamp):
        self.document_id = document_id
        self.timestamp = timestamp
        self.last_timestamp = last_timestamp
        super().__init__(
            f"Document {document_id}: event at {timestamp.isoformat()} "
            f"precedes last event at {last_timestamp.isoformat()}"
        )


class DispatchFailure(ComplizenError):
    """Schedule notification failed. Recoverable, retried on the next tick."""

    def __init__(self, document_id: str, reason: str = "dispatch returned failure"):
        self.document_id = document_id
        self.reason = reason
        super().__init__(f"Schedule {document_id}: {reason}")
