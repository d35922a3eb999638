"""Guardrails for validating collaborator input."""

from .risk_validator import normalize_severity, parse_risk_item, parse_risk_items

__all__ = [
    "normalize_severity",
    "parse_risk_item",
    "parse_risk_items",
]
