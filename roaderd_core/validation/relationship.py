"""RoadERD relationship validation.

Checks a single relationship against the schema it lives in. The checks
run in order and stop early when a later check would have nothing to
look at:

1. Both endpoint tables resolve (both reported together if missing)
2. Both endpoint columns resolve (both reported together if missing)
3. Column types are compatible
4. Target column is a primary key or unique (warning)
5. Source column is indexed, approximated by primary key/unique (warning)
6. Source column follows the ``<target table>_id`` naming convention for
   one-to-many and many-to-many relationships (warning)

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from roaderd_core.config import ValidatorConfig
from roaderd_core.schema import RelationType
from roaderd_core.types import are_types_compatible
from roaderd_core.validation.result import (
    IssueCode,
    ValidationError,
    ValidationResult,
    ValidationWarning,
)

if TYPE_CHECKING:
    from roaderd_core.schema import Relationship, Schema

# Relationship attributes a finding can point at
FIELD_SOURCE_TABLE = "sourceTableId"
FIELD_TARGET_TABLE = "targetTableId"
FIELD_SOURCE_COLUMN = "sourceColumnId"
FIELD_TARGET_COLUMN = "targetColumnId"

NAMING_CHECKED_TYPES = (RelationType.ONE_TO_MANY, RelationType.MANY_TO_MANY)


def _folded(value: Optional[str]) -> str:
    return (value or "").lower()


class RelationshipValidator:
    """Validates relationships against a schema."""

    def __init__(self, config: Optional[ValidatorConfig] = None):
        """Initialize validator.

        Args:
            config: Validator settings (defaults apply when omitted)
        """
        self.config = config or ValidatorConfig()

    def validate(self, relationship: Relationship, schema: Schema) -> ValidationResult:
        """Validate a relationship.

        Args:
            relationship: Relationship to check
            schema: Schema its endpoint ids are resolved in

        Returns:
            Validation result; never raises for dangling references
        """
        result = ValidationResult()

        source_table = schema.get_table(relationship.source_table_id)
        target_table = schema.get_table(relationship.target_table_id)

        if source_table is None:
            result.add(ValidationError(
                IssueCode.SOURCE_TABLE_NOT_FOUND,
                f"Source table '{relationship.source_table_id}' not found",
                FIELD_SOURCE_TABLE,
                "Select an existing source table or remove the relationship",
            ))
        if target_table is None:
            result.add(ValidationError(
                IssueCode.TARGET_TABLE_NOT_FOUND,
                f"Target table '{relationship.target_table_id}' not found",
                FIELD_TARGET_TABLE,
                "Select an existing target table or remove the relationship",
            ))
        if source_table is None or target_table is None:
            return result

        source_column = source_table.get_column(relationship.source_column_id)
        target_column = target_table.get_column(relationship.target_column_id)

        if source_column is None:
            result.add(ValidationError(
                IssueCode.SOURCE_COLUMN_NOT_FOUND,
                f"Source column '{relationship.source_column_id}' not found in table '{source_table.name}'",
                FIELD_SOURCE_COLUMN,
                f"Select an existing column of '{source_table.name}'",
            ))
        if target_column is None:
            result.add(ValidationError(
                IssueCode.TARGET_COLUMN_NOT_FOUND,
                f"Target column '{relationship.target_column_id}' not found in table '{target_table.name}'",
                FIELD_TARGET_COLUMN,
                f"Select an existing column of '{target_table.name}'",
            ))
        if source_column is None or target_column is None:
            return result

        if not are_types_compatible(source_column.type, target_column.type):
            result.add(ValidationError(
                IssueCode.TYPE_MISMATCH,
                (
                    f"Type mismatch: '{source_table.name}.{source_column.name}' ({source_column.type}) "
                    f"is not compatible with '{target_table.name}.{target_column.name}' ({target_column.type})"
                ),
                FIELD_SOURCE_COLUMN,
                f"Change '{source_column.name}' to a type compatible with {target_column.type}",
            ))

        if not (target_column.primary_key or target_column.unique):
            result.add(ValidationWarning(
                IssueCode.TARGET_NOT_PRIMARY_KEY,
                f"Target column '{target_table.name}.{target_column.name}' is neither a primary key nor unique",
                FIELD_TARGET_COLUMN,
                "Reference a primary key column or mark the target column as unique",
            ))

        if not (source_column.primary_key or source_column.unique):
            result.add(ValidationWarning(
                IssueCode.SOURCE_NO_INDEX,
                f"Source column '{source_table.name}.{source_column.name}' has no index",
                FIELD_SOURCE_COLUMN,
                f"Add an index on '{source_column.name}' to speed up joins",
            ))

        if self.config.check_naming_convention and relationship.type in NAMING_CHECKED_TYPES:
            expected = f"{_folded(target_table.name)}{self.config.foreign_key_suffix}"
            if _folded(source_column.name) != expected:
                result.add(ValidationWarning(
                    IssueCode.NAMING_CONVENTION,
                    (
                        f"Foreign key column '{source_column.name}' does not follow the naming "
                        f"convention (expected '{expected}')"
                    ),
                    FIELD_SOURCE_COLUMN,
                    f"Rename '{source_column.name}' to '{expected}'",
                ))

        return result


__all__ = [
    "RelationshipValidator",
    "FIELD_SOURCE_TABLE",
    "FIELD_TARGET_TABLE",
    "FIELD_SOURCE_COLUMN",
    "FIELD_TARGET_COLUMN",
]
