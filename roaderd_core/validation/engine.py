"""RoadERD Validation Engine - Whole-schema consistency checks.

The engine runs four independent passes and aggregates their findings.
Unlike relationship validation, no pass short-circuits another: every
pass runs even when earlier ones found errors.

Architecture:
    ┌─────────────────────────────────────────────────────────────────────┐
    │                       Validation Engine                            │
    ├─────────────────────────────────────────────────────────────────────┤
    │  ┌─────────────┐  ┌─────────────┐  ┌─────────────┐  ┌───────────┐  │
    │  │   Table     │  │Relationship │  │  Circular   │  │  Orphan   │  │
    │  │   Pass      │──│    Pass     │──│ Dependency  │──│  Tables   │  │
    │  │  (errors)   │  │ (delegated) │  │ (warnings)  │  │(warnings) │  │
    │  └─────────────┘  └─────────────┘  └─────────────┘  └───────────┘  │
    └─────────────────────────────────────────────────────────────────────┘

Validation is a pure function of the current schema: the engine keeps no
state between runs and never mutates the schema it inspects. Callers must
not mutate the schema concurrently with a run.

Usage:
    from roaderd_core.validation import ValidationEngine

    engine = ValidationEngine(schema)
    result = engine.validate_schema()
    if not result.valid:
        for error in result.errors:
            print(error.code, error.message)

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Optional, Set, Tuple

from roaderd_core.config import ValidatorConfig
from roaderd_core.schema import Schema, Table
from roaderd_core.types import is_numeric_type
from roaderd_core.validation.relationship import RelationshipValidator
from roaderd_core.validation.result import (
    IssueCode,
    ValidationError,
    ValidationResult,
    ValidationWarning,
)

logger = logging.getLogger(__name__)

CYCLE_SEPARATOR = " → "

# (empty column name, empty column type) codes per entry point
SCHEMA_COLUMN_CODES = (IssueCode.EMPTY_COLUMN_NAME, IssueCode.EMPTY_COLUMN_TYPE)
TABLE_COLUMN_CODES = (IssueCode.COLUMN_EMPTY_NAME, IssueCode.COLUMN_EMPTY_TYPE)


def _is_blank(value: Optional[str]) -> bool:
    return not value or not value.strip()


def _folded(value: Optional[str]) -> str:
    return (value or "").lower()


class ValidationEngine:
    """Validates a schema graph."""

    def __init__(self, schema: Schema, config: Optional[ValidatorConfig] = None):
        """Initialize engine.

        Args:
            schema: Schema to validate (inspected, never modified)
            config: Validator settings (defaults apply when omitted)
        """
        self.schema = schema
        self.config = config or ValidatorConfig()
        self.relationship_validator = RelationshipValidator(self.config)

    # =========================================================================
    # Entry Points
    # =========================================================================

    def validate_schema(self) -> ValidationResult:
        """Validate the whole schema.

        Returns:
            Aggregated result of the table, relationship, circular
            dependency and orphan table passes, in that order
        """
        result = ValidationResult()
        result.extend(self._validate_tables())
        result.extend(self._validate_relationships())

        if self.config.check_circular_dependencies:
            result.extend(self._check_circular_dependencies())
        if self.config.check_orphan_tables:
            result.extend(self._check_orphan_tables())

        logger.debug(
            f"Validated schema {self.schema.name!r}: "
            f"{len(result.errors)} error(s), {len(result.warnings)} warning(s)"
        )
        return result

    def validate_table(self, table_id: str) -> ValidationResult:
        """Validate a single table.

        Runs the per-table checks of the table pass, reporting empty column
        names and types as ``COLUMN_EMPTY_NAME`` / ``COLUMN_EMPTY_TYPE``.
        Duplicate table names are a whole-schema concern and are not
        checked here.

        Args:
            table_id: Id of the table to validate

        Returns:
            Validation result, or a single ``TABLE_NOT_FOUND`` error
        """
        table = self.schema.get_table(table_id)
        if table is None:
            return ValidationResult.failure(ValidationError(
                IssueCode.TABLE_NOT_FOUND,
                f"Table with ID '{table_id}' not found",
                table_id,
                "Check if the table exists",
            ))

        result = ValidationResult()
        self._check_table(table, result, TABLE_COLUMN_CODES)
        return result

    def validate_relationship(self, relationship_id: str) -> ValidationResult:
        """Validate a single relationship.

        Args:
            relationship_id: Id of the relationship to validate

        Returns:
            Validation result, or a single ``RELATIONSHIP_NOT_FOUND`` error
        """
        relationship = self.schema.get_relationship(relationship_id)
        if relationship is None:
            return ValidationResult.failure(ValidationError(
                IssueCode.RELATIONSHIP_NOT_FOUND,
                f"Relationship with ID '{relationship_id}' not found",
                relationship_id,
                "Check if the relationship exists",
            ))

        return self.relationship_validator.validate(relationship, self.schema)

    # =========================================================================
    # Table Pass
    # =========================================================================

    def _validate_tables(self) -> ValidationResult:
        result = ValidationResult()
        seen_names: Set[str] = set()

        for table in self.schema.tables.values():
            lowered = _folded(table.name)
            if lowered in seen_names:
                result.add(ValidationError(
                    IssueCode.DUPLICATE_TABLE_NAME,
                    f"Duplicate table name: '{table.name}'",
                    table.id,
                    "Rename one of the tables with duplicate names",
                ))
            seen_names.add(lowered)

            self._check_table(table, result, SCHEMA_COLUMN_CODES)

        return result

    def _check_table(
        self,
        table: Table,
        result: ValidationResult,
        column_codes: Tuple[IssueCode, IssueCode],
    ) -> None:
        """Run the per-table and per-column checks for one table."""
        empty_name_code, empty_type_code = column_codes

        if _is_blank(table.name):
            result.add(ValidationError(
                IssueCode.TABLE_EMPTY_NAME,
                "Table has empty name",
                table.id,
                "Provide a name for the table",
            ))

        if not table.columns:
            result.add(ValidationError(
                IssueCode.TABLE_NO_COLUMNS,
                f"Table '{table.name}' has no columns",
                table.id,
                "Add at least one column to the table",
            ))

        if not table.primary_keys():
            result.add(ValidationError(
                IssueCode.TABLE_NO_PRIMARY_KEY,
                f"Table '{table.name}' has no primary key",
                table.id,
                "Add a primary key to the table",
            ))

        column_names: Set[str] = set()
        for column in table.columns:
            lowered = _folded(column.name)
            if lowered in column_names:
                result.add(ValidationError(
                    IssueCode.DUPLICATE_COLUMN_NAME,
                    f"Duplicate column name '{column.name}' in table '{table.name}'",
                    column.id,
                    "Rename one of the columns with duplicate names",
                ))
            column_names.add(lowered)

            if _is_blank(column.name):
                result.add(ValidationError(
                    empty_name_code,
                    f"Column in table '{table.name}' has empty name",
                    column.id,
                    "Provide a name for the column",
                ))

            if _is_blank(column.type):
                result.add(ValidationError(
                    empty_type_code,
                    f"Column '{column.name}' in table '{table.name}' has empty type",
                    column.id,
                    "Specify a data type for the column",
                ))

            if column.primary_key and column.nullable:
                result.add(ValidationError(
                    IssueCode.PRIMARY_KEY_NULLABLE,
                    f"Primary key column '{column.name}' in table '{table.name}' cannot be nullable",
                    column.id,
                    "Set the column as NOT NULL",
                ))

            if column.auto_increment and not is_numeric_type(column.type):
                result.add(ValidationError(
                    IssueCode.AUTO_INCREMENT_NON_NUMERIC,
                    f"Auto increment column '{column.name}' in table '{table.name}' must be numeric",
                    column.id,
                    "Change the column type to a numeric type (INT, BIGINT, etc.)",
                ))

    # =========================================================================
    # Relationship Pass
    # =========================================================================

    def _validate_relationships(self) -> ValidationResult:
        result = ValidationResult()
        for relationship in self.schema.relationships.values():
            result.extend(self.relationship_validator.validate(relationship, self.schema))
        return result

    # =========================================================================
    # Circular Dependency Pass
    # =========================================================================

    def _outgoing_edges(self) -> Dict[str, List[str]]:
        """Map each source table id to its target ids, in relationship order."""
        edges: Dict[str, List[str]] = {}
        for rel in self.schema.relationships.values():
            edges.setdefault(rel.source_table_id, []).append(rel.target_table_id)
        return edges

    def _table_label(self, table_id: str) -> str:
        table = self.schema.get_table(table_id)
        return table.name if table is not None else table_id

    def _check_circular_dependencies(self) -> ValidationResult:
        """Depth-first search for cycles along source -> target edges.

        The visited set is shared across all start tables, so a fully
        explored region is never walked twice. Cycles are not deduplicated:
        one warning is emitted every time an edge closes back onto the
        active path, so a table on several cycles can be reported more
        than once.
        """
        result = ValidationResult()
        edges = self._outgoing_edges()
        visited: Set[str] = set()

        for table_id in self.schema.tables:
            if table_id not in visited:
                self._walk(table_id, edges, visited, result)

        return result

    def _walk(
        self,
        start: str,
        edges: Dict[str, List[str]],
        visited: Set[str],
        result: ValidationResult,
    ) -> None:
        # Iterative DFS; each frame owns its copy of the path from the root.
        on_stack: Set[str] = set()
        frames: List[Tuple[str, List[str], Iterator[str]]] = []

        def enter(table_id: str, path: List[str]) -> None:
            if table_id in on_stack:
                cycle = path[path.index(table_id):] + [table_id]
                result.add(ValidationWarning(
                    IssueCode.CIRCULAR_DEPENDENCY,
                    "Circular dependency detected: "
                    + CYCLE_SEPARATOR.join(self._table_label(t) for t in cycle),
                    table_id,
                    "Review the relationships to break the circular dependency",
                ))
                return
            if table_id in visited:
                return

            visited.add(table_id)
            on_stack.add(table_id)
            frames.append((table_id, path + [table_id], iter(edges.get(table_id, ()))))

        enter(start, [])
        while frames:
            table_id, path, targets = frames[-1]
            target = next(targets, None)
            if target is None:
                frames.pop()
                on_stack.discard(table_id)
            else:
                enter(target, path)

    # =========================================================================
    # Orphan Table Pass
    # =========================================================================

    def _check_orphan_tables(self) -> ValidationResult:
        result = ValidationResult()

        if len(self.schema.tables) <= 1:
            return result

        connected: Set[str] = set()
        for rel in self.schema.relationships.values():
            connected.add(rel.source_table_id)
            connected.add(rel.target_table_id)

        for table in self.schema.tables.values():
            if table.id not in connected:
                result.add(ValidationWarning(
                    IssueCode.ORPHAN_TABLE,
                    f"Table '{table.name}' has no relationships with other tables",
                    table.id,
                    "Consider adding relationships or removing the table if not needed",
                ))

        return result


def validate_schema(schema: Schema, config: Optional[ValidatorConfig] = None) -> ValidationResult:
    """Validate a schema with a one-off engine."""
    return ValidationEngine(schema, config).validate_schema()


__all__ = ["ValidationEngine", "validate_schema"]
