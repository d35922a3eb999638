"""Markdown exports for reports, verifications and audit logs."""

from collections import Counter
from datetime import datetime, timezone

from complizen.integrity import generate_verification_code
from complizen.models import (
    AuditEvent,
    AuditStatus,
    ComplianceReport,
    Severity,
    VerificationResult,
)
from complizen.scoring import estimate_time_to_fix, score_label

SEVERITY_EMOJI = {
    Severity.HIGH: "\U0001f534",
    Severity.MEDIUM: "\U0001f7e0",
    Severity.LOW: "\U0001f7e1",
}
STATUS_EMOJI = {
    AuditStatus.COMPLETED: "✅",
    AuditStatus.IN_PROGRESS: "⏳",
    AuditStatus.PENDING: "❓",
    AuditStatus.CRITICAL: "❌",
}


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def render_compliance_report(report: ComplianceReport) -> str:
    """Render a scan report as Markdown.

    Args:
        report: The scored report.

    Returns:
        Markdown formatted report string.
    """
    lines = [
        "# Complizen Compliance Report",
        "",
        f"- **Document**: {report.document_name} ({report.document_id})",
        f"- **Scanned**: {report.timestamp.isoformat()}",
        f"- **Overall score**: {report.overall_score} ({score_label(report.overall_score)})",
        f"- **Status**: {report.status.value}",
        "",
        "## Scores by Regulation",
        "",
        "| Regulation | Score | Rating |",
        "|---|---|---|",
    ]
    for regulation, value in report.per_regulation_scores.items():
        lines.append(f"| {regulation} | {value} | {score_label(value)} |")

    lines.extend(["", "## Risks", ""])
    if not report.risks:
        lines.append("No risks detected.")
        return "\n".join(lines)

    counts = Counter(r.severity for r in report.risks)
    for severity in Severity:
        if counts.get(severity):
            lines.append(
                f"- {SEVERITY_EMOJI[severity]} **{severity.value}**: {counts[severity]} "
                f"(est. {estimate_time_to_fix(severity, counts[severity])})"
            )
    lines.append("")

    ordered = sorted(report.risks, key=lambda r: (-r.severity.rank, r.regulation, r.id))
    for risk in ordered:
        section = f" {risk.section}" if risk.section else ""
        lines.append(f"### {SEVERITY_EMOJI[risk.severity]} {risk.regulation}{section}: {risk.id}")
        lines.append(f"- **Severity**: {risk.severity.value}")
        lines.append(f"- **Description**: {risk.description}")
        if risk.remediation:
            lines.append(f"- **Remediation**: {risk.remediation}")
        lines.append("")

    return "\n".join(lines)


def render_verification_report(result: VerificationResult) -> str:
    """Render a hash verification as a Markdown attestation."""
    verdict = (
        "✅ Integrity verified"
        if result.integrity_verified
        else "❌ Verification failed: the document does not match the recorded hash"
    )
    return "\n".join([
        "# Document Hash Verification Report",
        "",
        f"- **File name**: {result.file_name}",
        f"- **Verified at**: {result.verified_at.isoformat()}",
        f"- **Verified by**: {result.verified_by}",
        "",
        "## Hashes (SHA-256)",
        "",
        f"- **Computed**: `{result.computed_hash}`",
        f"- **Comparison**: `{result.comparison_hash}`",
        "",
        f"**Result**: {verdict}",
        "",
    ])


def render_audit_log(
    document_id: str,
    events: list[AuditEvent],
    token: str,
    verified: bool,
    compliance_score: int,
) -> str:
    """Render a document's audit trail with its integrity attestation."""
    document_name = events[0].document_name if events else document_id
    lines = [
        f"# Audit Trail: {document_name}",
        "",
        f"- **Exported**: {_utc_now()}",
        f"- **Compliance score**: {compliance_score}%",
        f"- **Integrity token**: `{token}`",
        f"- **Integrity**: {'verified' if verified else 'FAILED - trail was modified'}",
        f"- **Verification code**: {generate_verification_code(document_name, token)}",
        "",
        "| # | Time | Action | Status | Actor |",
        "|---|---|---|---|---|",
    ]
    for i, event in enumerate(events, 1):
        lines.append(
            f"| {i} | {event.timestamp.isoformat()} | {event.action} | "
            f"{STATUS_EMOJI[event.status]} {event.status.value} | {event.actor_id or '-'} |"
        )
    return "\n".join(lines)
