"""Shared fixtures."""

from datetime import datetime, timezone

import pytest

from complizen.ledger import AuditLedger
from complizen.models import AuditEvent, AuditStatus, RiskItem, Severity
from complizen.persistence import InMemoryStore, LedgerStore


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def make_risk(severity, regulation, risk_id="r-1", **kwargs) -> RiskItem:
    return RiskItem(
        id=risk_id,
        description=kwargs.pop("description", "Test risk"),
        severity=severity,
        regulation=regulation,
        **kwargs,
    )


def make_event(event_id, timestamp, status=AuditStatus.PENDING, document_id="doc-1", action=None):
    return AuditEvent(
        id=event_id,
        document_id=document_id,
        document_name="Policy.pdf",
        action=action or f"Action {event_id}",
        timestamp=timestamp,
        status=status,
    )


@pytest.fixture
def kv():
    return InMemoryStore()


@pytest.fixture
def ledger(kv):
    return AuditLedger(LedgerStore(kv))


@pytest.fixture
def gdpr_hipaa_risks():
    return [
        make_risk(Severity.HIGH, "GDPR", "gdpr-1"),
        make_risk(Severity.LOW, "HIPAA", "hipaa-1"),
    ]
