"""Document integrity verification."""

from complizen.integrity.hash_verifier import (
    DIGEST_ALGORITHM,
    EMPTY_DIGEST,
    compute_digest,
    generate_verification_code,
    verify,
    verify_document,
)

__all__ = [
    "DIGEST_ALGORITHM",
    "EMPTY_DIGEST",
    "compute_digest",
    "verify",
    "verify_document",
    "generate_verification_code",
]
