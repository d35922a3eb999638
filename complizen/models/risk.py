"""Risk and compliance report models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from complizen.models._time import utc_now


class Severity(str, Enum):
    """Ordinal risk classification."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        """Ordering key: high > medium > low."""
        return {"high": 3, "medium": 2, "low": 1}[self.value]

    @classmethod
    def coerce(cls, value: object) -> "Severity":
        """Map a raw value onto the enum. Anything unrecognized is medium."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.MEDIUM


class ComplianceStatus(str, Enum):
    """Overall verdict derived from a compliance score."""

    COMPLIANT = "Compliant"
    NEEDS_REMEDIATION = "Needs Remediation"
    CRITICAL = "Critical"


@dataclass(frozen=True)
class RiskItem:
    """A single risk produced by a document scan.

    Items are immutable once produced. No numeric weight is stored here;
    weights live in the scorer. A severity outside the enum is stored as
    medium.
    """

    id: str
    description: str
    severity: Severity
    regulation: str  # Compliance framework tag, e.g. "GDPR"
    section: str | None = None  # Article / clause reference
    remediation: str | None = None

    def __post_init__(self):
        object.__setattr__(self, "severity", Severity.coerce(self.severity))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "description": self.description,
            "severity": self.severity.value,
            "regulation": self.regulation,
            "section": self.section,
            "remediation": self.remediation,
        }


@dataclass(frozen=True)
class ComplianceReport:
    """Scores for one scan of one document.

    Created once per scan and never mutated; a re-scan produces a new report.
    """

    document_id: str
    document_name: str
    overall_score: int
    per_regulation_scores: dict[str, int]
    risks: tuple[RiskItem, ...] = ()
    timestamp: datetime = field(default_factory=utc_now)

    @property
    def status(self) -> ComplianceStatus:
        from complizen.scoring import determine_compliance_status

        return determine_compliance_status(self.overall_score)

    @property
    def high_risk_count(self) -> int:
        return sum(1 for r in self.risks if r.severity == Severity.HIGH)

    def to_dict(self) -> dict:
        return {
            "documentId": self.document_id,
            "documentName": self.document_name,
            "timestamp": self.timestamp.isoformat(),
            "overallScore": self.overall_score,
            "perRegulationScores": dict(self.per_regulation_scores),
            "status": self.status.value,
            "risks": [r.to_dict() for r in self.risks],
        }
