"""Deterministic risk-to-score aggregation."""

import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from complizen.models import ComplianceReport, ComplianceStatus, RiskItem, Severity
from complizen.models._time import utc_now

MAX_SCORE = 100
MIN_SCORE = 0

SEVERITY_WEIGHTS: dict[Severity, float] = {
    Severity.HIGH: 5.0,
    Severity.MEDIUM: 2.0,
    Severity.LOW: 0.5,
}

# Base remediation effort in hours per issue
FIX_HOURS: dict[str, int] = {
    "high": 16,
    "medium": 8,
    "low": 4,
}
DEFAULT_FIX_HOURS = 2
WORK_DAY_HOURS = 8


@dataclass(frozen=True)
class ScoreResult:
    """Overall and per-regulation scores for a risk list."""

    overall: int
    by_regulation: dict[str, int] = field(default_factory=dict)

    def for_regulation(self, regulation: str) -> int:
        """Score for a regulation; a regulation without risks scores 100."""
        return self.by_regulation.get(regulation, MAX_SCORE)


def severity_weight(severity: Severity | str | None) -> float:
    """Penalty for one risk. Values outside the enum weigh as medium."""
    return SEVERITY_WEIGHTS[Severity.coerce(severity)]


def _penalty_score(risks: Iterable[RiskItem]) -> int:
    penalty = sum(severity_weight(r.severity) for r in risks)
    clamped = max(MIN_SCORE, min(MAX_SCORE - penalty, MAX_SCORE))
    return math.floor(clamped)


def score(risks: Iterable[RiskItem], regulations: Iterable[str] = ()) -> ScoreResult:
    """Score a list of risks.

    Starts from 100 and subtracts a severity-weighted penalty per risk,
    clamped to [0, 100] and floored. Each regulation is scored with the
    same formula over the risks tagged with it (exact, case-sensitive).

    Args:
        risks: Risks detected by a scan.
        regulations: Regulations that must appear in the result even when
            no risk names them.

    Returns:
        ScoreResult. Independent of the order of `risks`.
    """
    risk_list = list(risks)

    grouped: dict[str, list[RiskItem]] = {name: [] for name in regulations}
    for risk in risk_list:
        grouped.setdefault(risk.regulation, []).append(risk)

    by_regulation = {
        name: _penalty_score(items) for name, items in sorted(grouped.items())
    }
    return ScoreResult(overall=_penalty_score(risk_list), by_regulation=by_regulation)


def build_report(
    document_id: str,
    document_name: str,
    risks: Iterable[RiskItem],
    regulations: Iterable[str] = (),
    now: datetime | None = None,
) -> ComplianceReport:
    """Score a completed scan and wrap it in an immutable report."""
    risk_tuple = tuple(risks)
    result = score(risk_tuple, regulations)
    return ComplianceReport(
        document_id=document_id,
        document_name=document_name,
        overall_score=result.overall,
        per_regulation_scores=result.by_regulation,
        risks=risk_tuple,
        timestamp=now or utc_now(),
    )


def determine_compliance_status(overall_score: float) -> ComplianceStatus:
    if overall_score >= 90:
        return ComplianceStatus.COMPLIANT
    if overall_score >= 70:
        return ComplianceStatus.NEEDS_REMEDIATION
    return ComplianceStatus.CRITICAL


def score_label(value: float) -> str:
    """Descriptive label for a score."""
    if value >= 90:
        return "Excellent"
    if value >= 80:
        return "Good"
    if value >= 70:
        return "Satisfactory"
    if value >= 60:
        return "Needs Improvement"
    return "Critical"


def estimate_time_to_fix(severity: Severity | str, count: int) -> str:
    """Rough remediation effort for `count` issues of one severity."""
    key = severity.value if isinstance(severity, Severity) else str(severity).lower()
    total_hours = FIX_HOURS.get(key, DEFAULT_FIX_HOURS) * count
    if total_hours >= 40:
        # Round half up
        return f"{math.floor(total_hours / WORK_DAY_HOURS + 0.5)} work days"
    return f"{total_hours} hours"
