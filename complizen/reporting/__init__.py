"""Report exports."""

from complizen.reporting.markdown import (
    render_audit_log,
    render_compliance_report,
    render_verification_report,
)

__all__ = [
    "render_compliance_report",
    "render_verification_report",
    "render_audit_log",
]
