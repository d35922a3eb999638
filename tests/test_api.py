"""API endpoint tests."""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from api.main import app, get_dispatcher, get_engine, get_ledger
from complizen.integrity import compute_digest
from complizen.ledger import AuditLedger
from complizen.persistence import InMemoryStore, LedgerStore, ScheduleStore
from complizen.scheduling import ScheduleEngine


@pytest.fixture
def dispatch():
    return MagicMock(return_value=True)


@pytest.fixture
def client(dispatch):
    kv = InMemoryStore()
    ledger = AuditLedger(LedgerStore(kv))
    engine = ScheduleEngine(ScheduleStore(kv), ledger=ledger)
    app.dependency_overrides[get_ledger] = lambda: ledger
    app.dependency_overrides[get_engine] = lambda: engine
    app.dependency_overrides[get_dispatcher] = lambda: dispatch
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    assert client.get("/").json() == {"status": "ok", "service": "complizen"}


class TestScoreEndpoint:
    def test_scores_risks(self, client):
        response = client.post("/api/score", json={
            "document_id": "doc-1",
            "document_name": "Policy.pdf",
            "regulations": ["SOX"],
            "risks": [
                {"id": "1", "description": "a", "severity": "high", "regulation": "GDPR"},
                {"id": "2", "description": "b", "severity": "low", "regulation": "HIPAA"},
            ],
        })

        assert response.status_code == 200
        body = response.json()
        assert body["overall_score"] == 94
        assert body["per_regulation_scores"] == {"GDPR": 95, "HIPAA": 99, "SOX": 100}
        assert body["status"] == "Compliant"
        assert body["report_markdown"] is None

    def test_strict_unknown_severity_is_422(self, client):
        response = client.post("/api/score", json={
            "document_id": "doc-1",
            "document_name": "Policy.pdf",
            "strict": True,
            "risks": [{"description": "a", "severity": "urgent", "regulation": "GDPR"}],
        })

        assert response.status_code == 422


class TestVerifyEndpoint:
    def test_match(self, client):
        response = client.post(
            "/api/verify",
            files={"file": ("policy.pdf", b"content", "application/pdf")},
            data={"comparison_hash": compute_digest(b"content"), "verified_by": "alice"},
        )

        assert response.status_code == 200
        assert response.json()["integrity_verified"] is True

    def test_mismatch_is_not_an_error(self, client):
        response = client.post(
            "/api/verify",
            files={"file": ("policy.pdf", b"content", "application/pdf")},
            data={"comparison_hash": compute_digest(b"other")},
        )

        assert response.status_code == 200
        assert response.json()["result"] == "mismatch"


class TestLedgerEndpoints:
    def _append(self, client, event_id, timestamp, status="pending"):
        return client.post("/api/ledger/doc-1/events", json={
            "id": event_id,
            "document_name": "Policy.pdf",
            "action": "Document uploaded",
            "status": status,
            "timestamp": timestamp,
        })

    def test_append_update_and_read(self, client):
        assert self._append(client, "e1", "2024-01-01T09:00:00Z", "completed").status_code == 201
        assert self._append(client, "e2", "2024-01-01T10:00:00Z").status_code == 201

        patched = client.patch("/api/ledger/events/e2", json={"status": "in-progress"})
        assert patched.json()["status"] == "in-progress"

        state = client.get("/api/ledger/doc-1").json()
        assert state["total_events"] == 2
        assert state["compliance_score"] == 50
        assert state["integrity_verified"] is True
        assert len(state["integrity_token"]) == 64

    def test_out_of_order_is_409(self, client):
        self._append(client, "e1", "2024-01-01T09:00:00Z")

        response = self._append(client, "e2", "2024-01-01T08:00:00Z")

        assert response.status_code == 409

    def test_backward_transition_is_409(self, client):
        self._append(client, "e1", "2024-01-01T09:00:00Z", "completed")

        response = client.patch("/api/ledger/events/e1", json={"status": "pending"})

        assert response.status_code == 409
        assert response.json()["current"] == "completed"


class TestScheduleEndpoints:
    def test_upsert_and_tick(self, client, dispatch):
        created = client.put("/api/schedules/doc-1", json={
            "frequency": "daily",
            "email": "officer@example.com",
            "document_name": "Policy.pdf",
        })
        assert created.status_code == 200
        next_run = created.json()["next_run_at"]

        results = client.post("/api/schedules/tick", params={"now": next_run}).json()

        assert results[0]["outcome"] == "dispatched"
        dispatch.assert_called_once()

    def test_disable_keeps_next_run(self, client):
        created = client.put("/api/schedules/doc-1", json={
            "frequency": "weekly", "email": "officer@example.com",
        }).json()

        disabled = client.put("/api/schedules/doc-1", json={
            "frequency": "weekly", "email": "officer@example.com", "enabled": False,
        }).json()

        assert disabled["enabled"] is False
        assert disabled["next_run_at"] == created["next_run_at"]

    def test_missing_email_is_422(self, client):
        response = client.put("/api/schedules/doc-1", json={"frequency": "daily"})
        assert response.status_code == 422

    def test_unknown_schedule_404(self, client):
        assert client.get("/api/schedules/nope").status_code == 404


class TestLedgerExport:
    def test_markdown_audit_log(self, client):
        client.post("/api/ledger/doc-md/events", json={
            "id": "md-1",
            "document_name": "Policy.pdf",
            "action": "Document uploaded",
            "status": "completed",
            "timestamp": "2024-01-01T09:00:00Z",
        })

        plain = client.get("/api/ledger/doc-md").json()
        exported = client.get("/api/ledger/doc-md", params={"markdown": True}).json()

        assert plain["report_markdown"] is None
        md = exported["report_markdown"]
        assert "# Audit Trail: Policy.pdf" in md
        assert "**Compliance score**: 100%" in md
        assert exported["integrity_token"] in md


class TestActivityEndpoint:
    def test_recent_ledger_activity(self, client):
        client.post("/api/ledger/doc-act/events", json={
            "id": "act-1",
            "document_name": "Policy.pdf",
            "action": "Document uploaded",
            "status": "pending",
            "timestamp": "2024-01-01T09:00:00Z",
        })

        response = client.get(
            "/api/activity", params={"component": "ledger", "document_id": "doc-act"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body[0]["event_type"] == "append"
        assert body[0]["data"] == {"event_id": "act-1"}
