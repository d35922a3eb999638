"""FastAPI server for the Complizen compliance core."""

from datetime import datetime

from fastapi import Depends, FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from complizen.errors import InvalidInput, InvalidTransition, OutOfOrderTimestamp
from complizen.guardrails import parse_risk_items
from complizen.integrity import verify_document
from complizen.ledger import AuditLedger
from complizen.models import AuditEvent, AuditStatus, Frequency, Schedule
from complizen.models._time import parse_dt, utc_now
from complizen.notifications import EmailDispatcher
from complizen.persistence import (
    InMemoryStore,
    KeyValueStore,
    LedgerStore,
    ScheduleStore,
    SupabaseStore,
)
from complizen.reporting import render_audit_log, render_compliance_report
from complizen.scheduling import Dispatcher, ScheduleEngine
from complizen.scoring import build_report
from complizen.tracing import get_tracer, setup_tracing
from config.settings import settings

from api.schemas import (
    AuditEventCreate,
    AuditEventResponse,
    AuditStatusUpdate,
    ComplianceReportResponse,
    EngineEventResponse,
    LedgerResponse,
    RiskItemResponse,
    ScheduleResponse,
    ScheduleUpsert,
    ScoreRequest,
    TickResultResponse,
    VerificationResponse,
)

app = FastAPI(
    title="Complizen API",
    description="Audit integrity and compliance scoring engine",
    version="0.1.0",
)

# CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://localhost:5173", "http://localhost:8080"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

if settings.tracing_enabled:
    setup_tracing(settings.log_level, capacity=settings.trace_capacity)

# Global state
_kv: KeyValueStore | None = None
_ledger: AuditLedger | None = None
_engine: ScheduleEngine | None = None


def get_kv_store() -> KeyValueStore:
    """Supabase-backed store when configured, in-memory otherwise."""
    global _kv
    if _kv is None:
        if settings.supabase_url and settings.supabase_service_role_key:
            from supabase import create_client

            client = create_client(settings.supabase_url, settings.supabase_service_role_key)
            _kv = SupabaseStore(client, table=settings.kv_table)
        else:
            _kv = InMemoryStore()
    return _kv


def get_ledger() -> AuditLedger:
    global _ledger
    if _ledger is None:
        _ledger = AuditLedger(LedgerStore(get_kv_store()))
    return _ledger


def get_engine() -> ScheduleEngine:
    global _engine
    if _engine is None:
        _engine = ScheduleEngine(ScheduleStore(get_kv_store()), ledger=get_ledger())
    return _engine


def get_dispatcher() -> Dispatcher:
    return EmailDispatcher(
        url=settings.notification_url,
        api_key=settings.notification_api_key,
        timeout=settings.notification_timeout,
    )


# ============ Error Mapping ============

@app.exception_handler(InvalidInput)
async def invalid_input_handler(request: Request, exc: InvalidInput):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(InvalidTransition)
async def invalid_transition_handler(request: Request, exc: InvalidTransition):
    return JSONResponse(
        status_code=409,
        content={"detail": str(exc), "current": exc.current, "requested": exc.requested},
    )


@app.exception_handler(OutOfOrderTimestamp)
async def out_of_order_handler(request: Request, exc: OutOfOrderTimestamp):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


def _event_response(event: AuditEvent) -> AuditEventResponse:
    return AuditEventResponse(**event.to_dict())


def _schedule_response(schedule: Schedule) -> ScheduleResponse:
    return ScheduleResponse(**schedule.to_dict())


# ============ Health Check ============

@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "complizen"}


# ============ Scoring ============

@app.post("/api/score", response_model=ComplianceReportResponse)
async def score_risks(request: ScoreRequest, markdown: bool = False):
    """Score the risks of a completed scan."""
    strict = settings.strict_severity if request.strict is None else request.strict
    risks = parse_risk_items(request.risks, strict=strict)
    regulations = (
        settings.default_regulations if request.regulations is None else request.regulations
    )
    report = build_report(request.document_id, request.document_name, risks, regulations)

    return ComplianceReportResponse(
        document_id=report.document_id,
        document_name=report.document_name,
        timestamp=report.timestamp,
        overall_score=report.overall_score,
        status=report.status.value,
        per_regulation_scores=report.per_regulation_scores,
        risks=[RiskItemResponse(**r.to_dict()) for r in report.risks],
        report_markdown=render_compliance_report(report) if markdown else None,
    )


# ============ Verification ============

@app.post("/api/verify", response_model=VerificationResponse)
def verify_file(
    file: UploadFile = File(...),
    comparison_hash: str = Form(...),
    verified_by: str = Form("anonymous"),
):
    """Verify an uploaded file against a recorded hash."""
    data = file.file.read()
    result = verify_document(file.filename or "upload", data, comparison_hash, verified_by)
    return VerificationResponse(
        file_name=result.file_name,
        computed_hash=result.computed_hash,
        comparison_hash=result.comparison_hash,
        result=result.result.value,
        integrity_verified=result.integrity_verified,
        verified_at=result.verified_at,
        verified_by=result.verified_by,
    )


# ============ Ledger ============
# Store and dispatch calls block, so these routes are plain `def` (threadpool).

@app.post("/api/ledger/{document_id}/events", response_model=AuditEventResponse, status_code=201)
def append_event(
    document_id: str,
    body: AuditEventCreate,
    ledger: AuditLedger = Depends(get_ledger),
):
    """Append an audit event to a document's trail."""
    event = AuditEvent(
        id=body.id,
        document_id=document_id,
        document_name=body.document_name,
        action=body.action,
        timestamp=body.timestamp,
        status=AuditStatus(body.status.value),
        actor_id=body.actor_id,
    )
    return _event_response(ledger.append(event))


@app.patch("/api/ledger/events/{event_id}", response_model=AuditEventResponse)
def update_event_status(
    event_id: str,
    body: AuditStatusUpdate,
    ledger: AuditLedger = Depends(get_ledger),
):
    """Move an audit event to a new status."""
    return _event_response(ledger.update_status(event_id, body.status.value))


@app.get("/api/ledger/{document_id}", response_model=LedgerResponse)
def get_ledger_state(
    document_id: str,
    markdown: bool = False,
    ledger: AuditLedger = Depends(get_ledger),
):
    """Get a document's audit trail with its score and integrity state."""
    events = ledger.events(document_id)
    score = ledger.compute_compliance_score(document_id)
    token = ledger.compute_integrity_token(document_id)
    verified = ledger.verify_integrity(document_id)
    return LedgerResponse(
        document_id=document_id,
        events=[_event_response(e) for e in events],
        total_events=len(events),
        completed_events=sum(1 for e in events if e.is_completed),
        compliance_score=score,
        integrity_token=token,
        integrity_verified=verified,
        report_markdown=render_audit_log(document_id, events, token, verified, score)
        if markdown
        else None,
    )


# ============ Schedules ============

@app.put("/api/schedules/{document_id}", response_model=ScheduleResponse)
def upsert_schedule(
    document_id: str,
    body: ScheduleUpsert,
    engine: ScheduleEngine = Depends(get_engine),
):
    """Create or update a document's automated scan schedule."""
    existing = engine.get(document_id)
    if existing is not None and existing.frequency.value == body.frequency.value:
        # Same cadence: keep next_run_at
        existing.email = body.email
        existing.document_name = body.document_name
        existing.enabled = body.enabled
        return _schedule_response(engine.register(existing))

    schedule = Schedule(
        document_id=document_id,
        document_name=body.document_name,
        frequency=Frequency(body.frequency.value),
        email=body.email,
        enabled=body.enabled,
    )
    return _schedule_response(engine.register(schedule))


@app.get("/api/schedules/{document_id}", response_model=ScheduleResponse)
def get_schedule(document_id: str, engine: ScheduleEngine = Depends(get_engine)):
    schedule = engine.get(document_id)
    if schedule is None:
        raise HTTPException(status_code=404, detail="Schedule not found")
    return _schedule_response(schedule)


@app.post("/api/schedules/tick", response_model=list[TickResultResponse])
def tick_schedules(
    now: datetime | None = None,
    engine: ScheduleEngine = Depends(get_engine),
    dispatch: Dispatcher = Depends(get_dispatcher),
):
    """Evaluate all schedules once (driven by an external cron)."""
    results = engine.tick_all(parse_dt(now) if now else utc_now(), dispatch)
    return [
        TickResultResponse(
            document_id=r.document_id,
            outcome=r.outcome.value,
            next_run_at=r.next_run_at,
            error=r.error,
        )
        for r in results
    ]


# ============ Activity ============

@app.get("/api/activity", response_model=list[EngineEventResponse])
def recent_activity(
    component: str | None = None,
    document_id: str | None = None,
    limit: int = 50,
):
    """Recent ledger writes and schedule ticks, newest first."""
    events = get_tracer().recent(component=component, document_id=document_id, limit=limit)
    return [EngineEventResponse(**e.to_dict()) for e in events]
