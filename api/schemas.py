"""Pydantic schemas for API request/response models."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


# === Enums ===
class AuditStatusEnum(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CRITICAL = "critical"


class FrequencyEnum(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


# === Scoring Schemas ===
class ScoreRequest(BaseModel):
    """Risks from a completed scan.

    Risks stay loosely typed here; severity is normalized by the
    risk guardrail so unknown values follow one policy.
    """

    document_id: str
    document_name: str
    risks: list[dict[str, Any]] = Field(default_factory=list)
    regulations: list[str] | None = None
    strict: bool | None = None


class RiskItemResponse(BaseModel):
    id: str
    description: str
    severity: str
    regulation: str
    section: str | None = None
    remediation: str | None = None


class ComplianceReportResponse(BaseModel):
    document_id: str
    document_name: str
    timestamp: datetime
    overall_score: int
    status: str
    per_regulation_scores: dict[str, int]
    risks: list[RiskItemResponse]
    report_markdown: str | None = None


# === Verification Schemas ===
class VerificationResponse(BaseModel):
    file_name: str
    computed_hash: str
    comparison_hash: str
    result: str
    integrity_verified: bool
    report_markdown: str | None = None
    verified_at: datetime
    verified_by: str


# === Ledger Schemas ===
class AuditEventCreate(BaseModel):
    id: str
    document_name: str
    action: str
    status: AuditStatusEnum = AuditStatusEnum.PENDING
    timestamp: datetime
    actor_id: str | None = None


class AuditStatusUpdate(BaseModel):
    status: AuditStatusEnum


class AuditEventResponse(BaseModel):
    id: str
    document_id: str
    document_name: str
    action: str
    status: AuditStatusEnum
    timestamp: datetime
    actor_id: str | None = None


class LedgerResponse(BaseModel):
    document_id: str
    events: list[AuditEventResponse]
    total_events: int
    completed_events: int
    compliance_score: int
    integrity_token: str
    integrity_verified: bool


# === Schedule Schemas ===
class ScheduleUpsert(BaseModel):
    frequency: FrequencyEnum
    email: str = ""
    enabled: bool = True
    document_name: str | None = None


class ScheduleResponse(BaseModel):
    document_id: str
    document_name: str | None = None
    frequency: FrequencyEnum
    enabled: bool
    email: str
    next_run_at: datetime | None = None
    last_run_at: datetime | None = None


class TickResultResponse(BaseModel):
    document_id: str
    outcome: str
    next_run_at: datetime | None = None
    error: str | None = None


# === Activity Schemas ===
class EngineEventResponse(BaseModel):
    timestamp: datetime
    component: str
    event_type: str
    message: str
    document_id: str | None = None
    data: dict[str, Any] = Field(default_factory=dict)
