"""Domain models for the Complizen core."""

from complizen.models.audit_event import AuditEvent, AuditStatus
from complizen.models.risk import (
    ComplianceReport,
    ComplianceStatus,
    RiskItem,
    Severity,
)
from complizen.models.schedule import Frequency, Schedule
from complizen.models.verification import VerificationOutcome, VerificationResult

__all__ = [
    # Risk
    "RiskItem",
    "Severity",
    "ComplianceReport",
    "ComplianceStatus",
    # Audit
    "AuditEvent",
    "AuditStatus",
    # Verification
    "VerificationResult",
    "VerificationOutcome",
    # Schedule
    "Schedule",
    "Frequency",
]
