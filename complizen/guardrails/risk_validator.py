"""Boundary validation for risk items supplied by the scan collaborator."""

import logging
import uuid
from collections.abc import Iterable
from typing import Any

from complizen.errors import InvalidInput
from complizen.models import RiskItem, Severity

logger = logging.getLogger(__name__)


def normalize_severity(value: Any, strict: bool = False) -> Severity:
    """Map a raw severity onto the closed Severity enum.

    Matching is case-insensitive. A missing or unrecognized value raises
    in strict mode and is otherwise normalized to medium with a warning.
    """
    if isinstance(value, Severity):
        return value
    if isinstance(value, str):
        try:
            return Severity(value.strip().lower())
        except ValueError:
            pass
    if strict:
        raise InvalidInput(f"Unknown severity: {value!r}")
    logger.warning("Unknown severity %r normalized to medium", value)
    return Severity.MEDIUM


def _required_text(raw: dict[str, Any], key: str) -> str:
    value = raw.get(key)
    if not isinstance(value, str) or not value.strip():
        raise InvalidInput(f"Risk item is missing '{key}'")
    return value


def parse_risk_item(raw: dict[str, Any], strict: bool = False) -> RiskItem:
    """Build a RiskItem from a scan payload.

    Args:
        raw: Risk as produced by the scanner. `mitigation` is accepted as
            an alias of `remediation`; `title` is used when `description`
            is absent.
        strict: Reject unknown severities instead of normalizing them.

    Returns:
        A validated, immutable RiskItem.
    """
    if not isinstance(raw, dict):
        raise InvalidInput(f"Risk item must be an object, got {type(raw).__name__}")

    description = raw.get("description") or raw.get("title")
    if not isinstance(description, str) or not description.strip():
        raise InvalidInput("Risk item is missing 'description'")

    risk_id = raw.get("id") or f"risk-{uuid.uuid4().hex[:8]}"

    return RiskItem(
        id=str(risk_id),
        description=description,
        severity=normalize_severity(raw.get("severity"), strict=strict),
        regulation=_required_text(raw, "regulation"),
        section=raw.get("section"),
        remediation=raw.get("remediation") or raw.get("mitigation"),
    )


def parse_risk_items(raws: Iterable[dict[str, Any]], strict: bool = False) -> list[RiskItem]:
    """Validate a batch of raw risks."""
    return [parse_risk_item(raw, strict=strict) for raw in raws]
