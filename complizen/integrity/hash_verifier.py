"""Content digests and digest comparison for document integrity checks."""

import hashlib
import hmac
import logging
from datetime import datetime

from complizen.errors import InvalidInput
from complizen.models import VerificationOutcome, VerificationResult
from complizen.models._time import utc_now

logger = logging.getLogger(__name__)

DIGEST_ALGORITHM = "sha256"
EMPTY_DIGEST = hashlib.sha256(b"").hexdigest()


def compute_digest(data: bytes | bytearray | memoryview) -> str:
    """Compute the SHA-256 hex digest of a byte buffer.

    Zero-length input is valid and yields the digest of the empty string.

    Raises:
        InvalidInput: If `data` is not byte-like.
    """
    if isinstance(data, str) or not isinstance(data, (bytes, bytearray, memoryview)):
        raise InvalidInput(
            f"compute_digest expects bytes, got {type(data).__name__}"
        )
    return hashlib.sha256(data).hexdigest()


def _normalize(digest: str) -> str:
    if not isinstance(digest, str):
        raise InvalidInput(f"Digest must be a hex string, got {type(digest).__name__}")
    return digest.strip().lower()


def verify(digest_a: str, digest_b: str) -> VerificationOutcome:
    """Compare two hex digests."""
    a = _normalize(digest_a)
    b = _normalize(digest_b)
    if hmac.compare_digest(a.encode(), b.encode()):
        return VerificationOutcome.MATCH
    return VerificationOutcome.MISMATCH


def verify_document(
    file_name: str,
    data: bytes,
    comparison_hash: str,
    verified_by: str = "anonymous",
    now: datetime | None = None,
) -> VerificationResult:
    """Digest uploaded bytes and compare them against a recorded digest.

    Args:
        file_name: Name of the uploaded file, for display.
        data: Raw file content.
        comparison_hash: Previously recorded digest (pasted or selected).
        verified_by: Identity of the requesting user.
        now: Verification time; defaults to the current UTC time.

    Returns:
        A new VerificationResult. A mismatch is reported, not raised.
    """
    if not comparison_hash or not comparison_hash.strip():
        raise InvalidInput("No comparison hash provided")

    computed = compute_digest(data)
    outcome = verify(computed, comparison_hash)
    if outcome == VerificationOutcome.MISMATCH:
        logger.warning("Integrity mismatch for file=%s", file_name)
    else:
        logger.info("Integrity verified for file=%s", file_name)

    return VerificationResult(
        file_name=file_name,
        computed_hash=computed,
        comparison_hash=comparison_hash.strip(),
        result=outcome,
        verified_by=verified_by,
        verified_at=now or utc_now(),
    )


def generate_verification_code(
    document_name: str,
    token: str,
    issued_at: datetime | None = None,
) -> str:
    """Build a short attestation code printed on exported reports.

    Format: ``CZ-<name digest[:6]>-<token[:8]>-<epoch seconds in hex>``.
    """
    issued_at = issued_at or utc_now()
    name_digest = compute_digest(document_name.encode("utf-8"))
    epoch_hex = format(int(issued_at.timestamp()), "x")
    return f"CZ-{name_digest[:6]}-{token[:8]}-{epoch_hex}"
