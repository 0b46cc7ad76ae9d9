"""RoadERD validation results.

Every check reports through a :class:`ValidationResult` holding two ordered
buckets: errors, which make the schema invalid, and warnings, which are
advisory. Findings are identified by a closed set of string codes.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, List, Union


class Severity(Enum):
    """Bucket a finding belongs to."""

    ERROR = "error"
    WARNING = "warning"


class IssueCode(str, Enum):
    """Codes attached to validation findings.

    Members compare equal to their string value.
    """

    # Lookup failures
    TABLE_NOT_FOUND = "TABLE_NOT_FOUND"
    RELATIONSHIP_NOT_FOUND = "RELATIONSHIP_NOT_FOUND"

    # Table pass (whole schema)
    DUPLICATE_TABLE_NAME = "DUPLICATE_TABLE_NAME"
    TABLE_EMPTY_NAME = "TABLE_EMPTY_NAME"
    TABLE_NO_COLUMNS = "TABLE_NO_COLUMNS"
    TABLE_NO_PRIMARY_KEY = "TABLE_NO_PRIMARY_KEY"
    DUPLICATE_COLUMN_NAME = "DUPLICATE_COLUMN_NAME"
    EMPTY_COLUMN_NAME = "EMPTY_COLUMN_NAME"
    EMPTY_COLUMN_TYPE = "EMPTY_COLUMN_TYPE"
    PRIMARY_KEY_NULLABLE = "PRIMARY_KEY_NULLABLE"
    AUTO_INCREMENT_NON_NUMERIC = "AUTO_INCREMENT_NON_NUMERIC"

    # Single-table entry point
    COLUMN_EMPTY_NAME = "COLUMN_EMPTY_NAME"
    COLUMN_EMPTY_TYPE = "COLUMN_EMPTY_TYPE"

    # Relationships
    SOURCE_TABLE_NOT_FOUND = "SOURCE_TABLE_NOT_FOUND"
    TARGET_TABLE_NOT_FOUND = "TARGET_TABLE_NOT_FOUND"
    SOURCE_COLUMN_NOT_FOUND = "SOURCE_COLUMN_NOT_FOUND"
    TARGET_COLUMN_NOT_FOUND = "TARGET_COLUMN_NOT_FOUND"
    TYPE_MISMATCH = "TYPE_MISMATCH"
    TARGET_NOT_PRIMARY_KEY = "TARGET_NOT_PRIMARY_KEY"
    SOURCE_NO_INDEX = "SOURCE_NO_INDEX"
    NAMING_CONVENTION = "NAMING_CONVENTION"

    # Graph analyses
    CIRCULAR_DEPENDENCY = "CIRCULAR_DEPENDENCY"
    ORPHAN_TABLE = "ORPHAN_TABLE"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ValidationIssue:
    """A single validation finding.

    ``field`` names the implicated entity id or relationship attribute.
    """

    code: IssueCode
    message: str
    field: str
    suggestion: str

    severity: ClassVar[Severity]

    def to_dict(self) -> Dict[str, Any]:
        """Convert finding to dictionary."""
        return {
            "code": str(self.code),
            "message": self.message,
            "field": self.field,
            "suggestion": self.suggestion,
        }


@dataclass(frozen=True)
class ValidationError(ValidationIssue):
    """Finding that makes the schema invalid."""

    severity: ClassVar[Severity] = Severity.ERROR


@dataclass(frozen=True)
class ValidationWarning(ValidationIssue):
    """Advisory finding; never affects validity."""

    severity: ClassVar[Severity] = Severity.WARNING


@dataclass
class ValidationResult:
    """Outcome of a validation run."""

    errors: List[ValidationError] = field(default_factory=list)
    warnings: List[ValidationWarning] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        """True iff there are no errors."""
        return not self.errors

    @classmethod
    def failure(cls, error: ValidationError) -> ValidationResult:
        """Result holding a single error."""
        return cls(errors=[error])

    def add(self, issue: Union[ValidationError, ValidationWarning]) -> ValidationResult:
        """Append a finding to the bucket matching its severity."""
        if issue.severity is Severity.ERROR:
            self.errors.append(issue)
        else:
            self.warnings.append(issue)
        return self

    def extend(self, other: ValidationResult) -> ValidationResult:
        """Append all findings of another result, preserving order."""
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        return self

    def error_codes(self) -> List[str]:
        """Codes of all errors, in order."""
        return [str(e.code) for e in self.errors]

    def warning_codes(self) -> List[str]:
        """Codes of all warnings, in order."""
        return [str(w.code) for w in self.warnings]

    def has_error(self, code: Union[IssueCode, str]) -> bool:
        return any(e.code == code for e in self.errors)

    def has_warning(self, code: Union[IssueCode, str]) -> bool:
        return any(w.code == code for w in self.warnings)

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary."""
        return {
            "valid": self.valid,
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
        }


__all__ = [
    "Severity",
    "IssueCode",
    "ValidationIssue",
    "ValidationError",
    "ValidationWarning",
    "ValidationResult",
]
