"""Risk scoring."""

from complizen.scoring.risk_scorer import (
    SEVERITY_WEIGHTS,
    ScoreResult,
    build_report,
    determine_compliance_status,
    estimate_time_to_fix,
    score,
    score_label,
    severity_weight,
)

__all__ = [
    "SEVERITY_WEIGHTS",
    "ScoreResult",
    "score",
    "severity_weight",
    "build_report",
    "determine_compliance_status",
    "score_label",
    "estimate_time_to_fix",
]
