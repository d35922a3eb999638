"""Document hash verification results."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from complizen.models._time import utc_now


class VerificationOutcome(str, Enum):
    """Result of comparing two digests. A mismatch is a value, not an error."""

    MATCH = "match"
    MISMATCH = "mismatch"


@dataclass(frozen=True)
class VerificationResult:
    """One verification request. A re-verify creates a new result."""

    file_name: str
    computed_hash: str
    comparison_hash: str
    result: VerificationOutcome
    verified_by: str = "anonymous"
    verified_at: datetime = field(default_factory=utc_now)

    @property
    def integrity_verified(self) -> bool:
        return self.result == VerificationOutcome.MATCH

    def to_dict(self) -> dict:
        return {
            "fileName": self.file_name,
            "computedHash": self.computed_hash,
            "comparisonHash": self.comparison_hash,
            "result": self.result.value,
            "verifiedAt": self.verified_at.isoformat(),
            "verifiedBy": self.verified_by,
        }
