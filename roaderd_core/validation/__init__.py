"""RoadERD validation: per-relationship checks and the whole-schema engine."""

from roaderd_core.validation.engine import ValidationEngine, validate_schema
from roaderd_core.validation.relationship import RelationshipValidator
from roaderd_core.validation.result import (
    IssueCode,
    Severity,
    ValidationError,
    ValidationIssue,
    ValidationResult,
    ValidationWarning,
)

__all__ = [
    "ValidationEngine",
    "validate_schema",
    "RelationshipValidator",
    "IssueCode",
    "Severity",
    "ValidationIssue",
    "ValidationError",
    "ValidationWarning",
    "ValidationResult",
]
