"""Audit ledger tests."""

import threading
from datetime import timedelta

import pytest

from complizen.errors import InvalidInput, InvalidTransition, OutOfOrderTimestamp
from complizen.integrity import EMPTY_DIGEST
from complizen.ledger import AuditLedger, can_transition
from complizen.models import AuditStatus
from complizen.persistence import LedgerStore

from conftest import make_event, utc

T0 = utc(2024, 6, 1, 9, 0)


class TestAppend:
    """append() unit tests."""

    def test_increasing_timestamps_succeed(self, ledger):
        for i in range(5):
            ledger.append(make_event(f"e{i}", T0 + timedelta(minutes=i)))

        assert [e.id for e in ledger.events("doc-1")] == ["e0", "e1", "e2", "e3", "e4"]

    def test_equal_timestamp_allowed(self, ledger):
        ledger.append(make_event("e1", T0))
        ledger.append(make_event("e2", T0))

        assert len(ledger.events("doc-1")) == 2

    def test_earlier_timestamp_rejected(self, ledger):
        ledger.append(make_event("e1", T0))

        with pytest.raises(OutOfOrderTimestamp):
            ledger.append(make_event("e2", T0 - timedelta(seconds=1)))
        assert len(ledger.events("doc-1")) == 1

    def test_ordering_is_per_document(self, ledger):
        ledger.append(make_event("e1", T0, document_id="doc-1"))
        ledger.append(make_event("e2", T0 - timedelta(days=1), document_id="doc-2"))

        assert len(ledger.events("doc-2")) == 1

    def test_duplicate_id_rejected(self, ledger):
        ledger.append(make_event("e1", T0))

        with pytest.raises(InvalidInput, match="Duplicate"):
            ledger.append(make_event("e1", T0 + timedelta(minutes=1)))

    def test_concurrent_appends_serialized(self, ledger):
        def worker(start):
            for i in range(start, start + 20):
                ledger.append(make_event(f"e{i}", T0))

        threads = [threading.Thread(target=worker, args=(n * 20,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        events = ledger.events("doc-1")
        assert len(events) == 80
        assert len({e.id for e in events}) == 80


class TestUpdateStatus:
    """Status transition tests."""

    def test_forward_path(self, ledger):
        ledger.append(make_event("e1", T0))

        assert ledger.update_status("e1", AuditStatus.IN_PROGRESS).status == AuditStatus.IN_PROGRESS
        assert ledger.update_status("e1", "completed").status == AuditStatus.COMPLETED
        assert ledger.get_event("e1").status == AuditStatus.COMPLETED

    def test_completed_to_pending_fails(self, ledger):
        ledger.append(make_event("e1", T0, status=AuditStatus.COMPLETED))

        with pytest.raises(InvalidTransition):
            ledger.update_status("e1", AuditStatus.PENDING)
        assert ledger.get_event("e1").status == AuditStatus.COMPLETED

    def test_pending_cannot_skip_in_progress(self, ledger):
        ledger.append(make_event("e1", T0))

        with pytest.raises(InvalidTransition):
            ledger.update_status("e1", AuditStatus.COMPLETED)

    @pytest.mark.parametrize("start", list(AuditStatus))
    def test_any_state_to_critical(self, ledger, start):
        ledger.append(make_event("e1", T0, status=start))

        assert ledger.update_status("e1", AuditStatus.CRITICAL).status == AuditStatus.CRITICAL

    def test_critical_is_terminal(self, ledger):
        ledger.append(make_event("e1", T0, status=AuditStatus.CRITICAL))

        with pytest.raises(InvalidTransition):
            ledger.update_status("e1", AuditStatus.IN_PROGRESS)

    def test_unknown_event(self, ledger):
        with pytest.raises(InvalidInput):
            ledger.update_status("missing", AuditStatus.COMPLETED)

    def test_unknown_status(self, ledger):
        ledger.append(make_event("e1", T0))
        with pytest.raises(InvalidInput):
            ledger.update_status("e1", "archived")


def test_can_transition_same_status_is_noop():
    assert can_transition(AuditStatus.PENDING, AuditStatus.PENDING)
    assert not can_transition(AuditStatus.IN_PROGRESS, AuditStatus.PENDING)


class TestComplianceScore:
    """compute_compliance_score tests."""

    def test_no_events_is_100(self, ledger):
        assert ledger.compute_compliance_score("doc-1") == 100

    def test_three_of_four_completed(self, ledger):
        statuses = [AuditStatus.COMPLETED] * 3 + [AuditStatus.PENDING]
        for i, status in enumerate(statuses):
            ledger.append(make_event(f"e{i}", T0 + timedelta(minutes=i), status=status))

        assert ledger.compute_compliance_score("doc-1") == 75
        assert ledger.completed_count("doc-1") == 3

    def test_rounds_to_nearest(self, ledger):
        statuses = [AuditStatus.COMPLETED] * 2 + [AuditStatus.IN_PROGRESS]
        for i, status in enumerate(statuses):
            ledger.append(make_event(f"e{i}", T0 + timedelta(minutes=i), status=status))

        # 66.67 -> 67
        assert ledger.compute_compliance_score("doc-1") == 67


class TestIntegrity:
    """Integrity token tests."""

    def test_empty_sequence_token(self, ledger):
        assert ledger.compute_integrity_token("doc-1") == EMPTY_DIGEST

    def test_token_is_deterministic(self, kv):
        a = AuditLedger(LedgerStore(kv))
        a.append(make_event("e1", T0))
        b = AuditLedger(LedgerStore())
        b.append(make_event("e1", T0))

        assert a.compute_integrity_token("doc-1") == b.compute_integrity_token("doc-1")

    def test_token_changes_with_status(self, ledger):
        ledger.append(make_event("e1", T0))
        before = ledger.compute_integrity_token("doc-1")
        ledger.update_status("e1", AuditStatus.IN_PROGRESS)

        assert ledger.compute_integrity_token("doc-1") != before

    def test_ledger_writes_keep_trail_verified(self, ledger):
        ledger.append(make_event("e1", T0))
        ledger.update_status("e1", AuditStatus.CRITICAL)

        assert ledger.verify_integrity("doc-1") is True

    def test_store_tampering_detected(self, kv, ledger):
        ledger.append(make_event("e1", T0, action="Document uploaded"))
        ledger.append(make_event("e2", T0 + timedelta(minutes=1), action="Report viewed"))

        rows = kv.get("complizen_ledger_doc-1")
        rows[0]["action"] = "Document deleted"
        kv.set("complizen_ledger_doc-1", rows)

        assert ledger.verify_integrity("doc-1") is False

    def test_first_verification_seals_token(self, kv):
        store = LedgerStore(kv)
        store.append(make_event("e1", T0))
        ledger = AuditLedger(store)

        assert store.get_token("doc-1") is None
        assert ledger.verify_integrity("doc-1") is True
        assert store.get_token("doc-1") == ledger.compute_integrity_token("doc-1")

    def test_store_integrity_token(self, ledger):
        ledger.append(make_event("e1", T0))
        assert ledger.store_integrity_token("doc-1") == ledger.compute_integrity_token("doc-1")


def test_index_rebuilt_from_store(kv):
    AuditLedger(LedgerStore(kv)).append(make_event("e1", T0))

    reopened = AuditLedger(LedgerStore(kv))
    reopened.update_status("e1", AuditStatus.IN_PROGRESS)
    assert reopened.get_event("e1").status == AuditStatus.IN_PROGRESS
