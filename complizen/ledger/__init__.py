"""Audit ledger."""

from complizen.ledger.audit_ledger import (
    ALLOWED_TRANSITIONS,
    AuditLedger,
    can_transition,
    fold_integrity_token,
)

__all__ = [
    "ALLOWED_TRANSITIONS",
    "AuditLedger",
    "can_transition",
    "fold_integrity_token",
]
