"""RoadERD Schema - In-memory schema graph.

Models a database design as a mutable graph:
- Tables with ordered columns, opaque indexes and constraints
- Columns with free-form types and key/nullability flags
- Relationships linking a source column to a target column

Architecture:
    ┌─────────────────────────────────────────────────────────────────────┐
    │                          Schema Graph                              │
    ├─────────────────────────────────────────────────────────────────────┤
    │  ┌─────────────┐  ┌─────────────┐  ┌─────────────┐                 │
    │  │   Schema    │  │    Table    │  │   Column    │                 │
    │  │ (owns all)  │──│  (by id)    │──│  (ordered)  │                 │
    │  └─────────────┘  └─────────────┘  └─────────────┘                 │
    │         │                                                           │
    │  ┌─────────────┐                                                    │
    │  │Relationship │  weak references: table/column ids only           │
    │  │  (by id)    │                                                    │
    │  └─────────────┘                                                    │
    └─────────────────────────────────────────────────────────────────────┘

Relationships hold ids, never objects. A relationship may point at a table
or column that no longer exists; the graph accepts that and the validator
reports it.

Usage:
    from roaderd_core.schema import Schema, Table, Column, Relationship, RelationType

    users = Table.create("users", 0, 0)
    user_id = Column.create("id", "INT", primary_key=True, nullable=False)
    users.add_column(user_id)

    posts = Table.create("posts", 200, 0)
    post_user = Column.create("user_id", "INT", foreign_key=True)
    posts.add_column(post_user)

    schema = Schema(name="blog")
    schema.add_table(users)
    schema.add_table(posts)
    schema.add_relationship(Relationship.create(
        RelationType.ONE_TO_MANY, posts.id, users.id, post_user.id, user_id.id,
    ))

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import hashlib
import json
import logging
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional

if TYPE_CHECKING:
    from roaderd_core.validation.result import ValidationResult

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA_NAME = "Untitled Schema"


def generate_id() -> str:
    """Generate a unique entity id."""
    return str(uuid.uuid4())


# =============================================================================
# Enumerations
# =============================================================================


class RelationType(Enum):
    """Cardinality of a relationship."""

    ONE_TO_ONE = "one-to-one"
    ONE_TO_MANY = "one-to-many"
    MANY_TO_MANY = "many-to-many"


class OnAction(Enum):
    """Referential action for foreign keys."""

    CASCADE = "CASCADE"
    SET_NULL = "SET NULL"
    RESTRICT = "RESTRICT"
    NO_ACTION = "NO ACTION"


class ConstraintType(Enum):
    """Types of table-level constraints."""

    CHECK = "CHECK"
    UNIQUE = "UNIQUE"
    FOREIGN_KEY = "FOREIGN_KEY"


def _text(value: Any) -> str:
    """Coerce a decoded name or type to a string; missing values become empty."""
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _optional_action(value: Any) -> Optional[OnAction]:
    if value is None or isinstance(value, OnAction):
        return value
    return OnAction(value)


# =============================================================================
# Column Definition
# =============================================================================


@dataclass
class Column:
    """Column definition.

    ``type`` is a free-form string; it is only interpreted by the type
    resolver in :mod:`roaderd_core.types`.
    """

    id: str
    name: str
    type: str
    nullable: bool = True
    primary_key: bool = False
    foreign_key: bool = False
    unique: bool = False
    auto_increment: bool = False
    default_value: Optional[str] = None
    comment: Optional[str] = None

    @classmethod
    def create(cls, name: str, type: str, **flags: Any) -> Column:
        """Create a column with a freshly generated id."""
        return cls(generate_id(), name, type, **flags)

    def to_dict(self) -> Dict[str, Any]:
        """Convert column definition to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "nullable": self.nullable,
            "primaryKey": self.primary_key,
            "foreignKey": self.foreign_key,
            "unique": self.unique,
            "autoIncrement": self.auto_increment,
            "defaultValue": self.default_value,
            "comment": self.comment,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Column:
        """Build a column from its dictionary form."""
        return cls(
            id=data["id"],
            name=_text(data.get("name")),
            type=_text(data.get("type")),
            nullable=bool(data.get("nullable", True)),
            primary_key=bool(data.get("primaryKey", False)),
            foreign_key=bool(data.get("foreignKey", False)),
            unique=bool(data.get("unique", False)),
            auto_increment=bool(data.get("autoIncrement", False)),
            default_value=data.get("defaultValue"),
            comment=data.get("comment"),
        )


# =============================================================================
# Table Metadata
# =============================================================================


@dataclass
class Index:
    """Index definition (carried as metadata, never validated)."""

    name: str
    columns: List[str]
    unique: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "columns": list(self.columns), "unique": self.unique}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Index:
        return cls(data["name"], list(data.get("columns", [])), bool(data.get("unique", False)))


@dataclass
class Constraint:
    """Table-level constraint (carried as metadata, never validated)."""

    type: ConstraintType
    definition: str

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type.value, "definition": self.definition}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Constraint:
        return cls(ConstraintType(data["type"]), data.get("definition", ""))


@dataclass
class Position:
    """Canvas position of a table. Irrelevant to validation."""

    x: float = 0
    y: float = 0


# =============================================================================
# Table Definition
# =============================================================================


@dataclass
class Table:
    """Table definition.

    Column order is meaningful: it is the display and iteration order.
    Table names are not required to be unique here; duplicates are a
    validation finding.
    """

    id: str
    name: str
    position: Position = field(default_factory=Position)
    columns: List[Column] = field(default_factory=list)
    indexes: List[Index] = field(default_factory=list)
    constraints: List[Constraint] = field(default_factory=list)
    comment: Optional[str] = None

    @classmethod
    def create(cls, name: str, x: float = 0, y: float = 0) -> Table:
        """Create a table with a freshly generated id."""
        return cls(generate_id(), name, Position(x, y))

    def add_column(self, column: Column) -> Table:
        """Append a column to the table."""
        self.columns.append(column)
        return self

    def remove_column(self, column_id: str) -> Table:
        """Remove a column by id.

        Relationships referencing the column are left in place.
        """
        self.columns = [c for c in self.columns if c.id != column_id]
        return self

    def get_column(self, column_id: str) -> Optional[Column]:
        """Get column by id."""
        for col in self.columns:
            if col.id == column_id:
                return col
        return None

    def get_column_by_name(self, name: str) -> Optional[Column]:
        """Get the first column whose name matches, ignoring case."""
        lowered = name.lower()
        for col in self.columns:
            if (col.name or "").lower() == lowered:
                return col
        return None

    def primary_keys(self) -> List[Column]:
        """Get primary key columns in column order."""
        return [c for c in self.columns if c.primary_key]

    def foreign_keys(self) -> List[Column]:
        """Get columns flagged as foreign keys."""
        return [c for c in self.columns if c.foreign_key]

    def to_dict(self) -> Dict[str, Any]:
        """Convert table definition to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "position": {"x": self.position.x, "y": self.position.y},
            "columns": [c.to_dict() for c in self.columns],
            "indexes": [i.to_dict() for i in self.indexes],
            "constraints": [c.to_dict() for c in self.constraints],
            "comment": self.comment,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Table:
        """Build a table from its dictionary form."""
        position = data.get("position") or {}
        return cls(
            id=data["id"],
            name=_text(data.get("name")),
            position=Position(position.get("x", 0), position.get("y", 0)),
            columns=[Column.from_dict(c) for c in data.get("columns") or []],
            indexes=[Index.from_dict(i) for i in data.get("indexes") or []],
            constraints=[Constraint.from_dict(c) for c in data.get("constraints") or []],
            comment=data.get("comment"),
        )


# =============================================================================
# Relationship Definition
# =============================================================================


@dataclass
class Relationship:
    """Directed reference from a source column to a target column.

    Endpoints are ids looked up against the owning schema at validation
    time; the relationship never holds the tables or columns themselves.
    """

    id: str
    type: RelationType
    source_table_id: str
    target_table_id: str
    source_column_id: str
    target_column_id: str
    name: Optional[str] = None
    comment: Optional[str] = None
    on_delete: Optional[OnAction] = None
    on_update: Optional[OnAction] = None

    def __post_init__(self):
        if not isinstance(self.type, RelationType):
            self.type = RelationType(self.type)
        self.on_delete = _optional_action(self.on_delete)
        self.on_update = _optional_action(self.on_update)

    @classmethod
    def create(
        cls,
        type: RelationType,
        source_table_id: str,
        target_table_id: str,
        source_column_id: str,
        target_column_id: str,
        **options: Any,
    ) -> Relationship:
        """Create a relationship with a freshly generated id."""
        return cls(
            generate_id(),
            type,
            source_table_id,
            target_table_id,
            source_column_id,
            target_column_id,
            **options,
        )

    def touches(self, table_id: str) -> bool:
        """Check whether either endpoint is the given table."""
        return self.source_table_id == table_id or self.target_table_id == table_id

    def validate(self, schema: Schema) -> ValidationResult:
        """Validate this relationship against a schema.

        Args:
            schema: Schema the endpoint ids are resolved in

        Returns:
            Validation result for this relationship alone
        """
        from roaderd_core.validation.relationship import RelationshipValidator

        return RelationshipValidator().validate(self, schema)

    def to_dict(self) -> Dict[str, Any]:
        """Convert relationship to dictionary."""
        return {
            "id": self.id,
            "type": self.type.value,
            "sourceTableId": self.source_table_id,
            "targetTableId": self.target_table_id,
            "sourceColumnId": self.source_column_id,
            "targetColumnId": self.target_column_id,
            "onDelete": self.on_delete.value if self.on_delete else None,
            "onUpdate": self.on_update.value if self.on_update else None,
            "name": self.name,
            "comment": self.comment,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Relationship:
        """Build a relationship from its dictionary form.

        Endpoint ids are accepted whether or not they resolve.
        """
        return cls(
            id=data["id"],
            type=RelationType(data["type"]),
            source_table_id=data.get("sourceTableId", ""),
            target_table_id=data.get("targetTableId", ""),
            source_column_id=data.get("sourceColumnId", ""),
            target_column_id=data.get("targetColumnId", ""),
            name=_text(data.get("name")) or None,
            comment=data.get("comment"),
            on_delete=_optional_action(data.get("onDelete")),
            on_update=_optional_action(data.get("onUpdate")),
        )


# =============================================================================
# Schema Definition
# =============================================================================


@dataclass
class Schema:
    """Database schema definition.

    Owns every table and relationship, each keyed by id. The only
    automatic cleanup is the cascade in :meth:`remove_table`.

    Not thread-safe: callers must not mutate a schema while it is being
    validated.
    """

    name: str = DEFAULT_SCHEMA_NAME
    tables: Dict[str, Table] = field(default_factory=dict)
    relationships: Dict[str, Relationship] = field(default_factory=dict)
    metadata: Dict[str, Any] = field(default_factory=dict)

    # -------------------------------------------------------------------------
    # Tables
    # -------------------------------------------------------------------------

    def add_table(self, table: Table) -> Schema:
        """Add a table, replacing any table with the same id."""
        self.tables[table.id] = table
        logger.debug(f"Added table {table.name!r} ({table.id})")
        return self

    def remove_table(self, table_id: str) -> Schema:
        """Remove a table and every relationship touching it."""
        table = self.tables.pop(table_id, None)
        if table is None:
            return self

        doomed = [rel_id for rel_id, rel in self.relationships.items() if rel.touches(table_id)]
        for rel_id in doomed:
            del self.relationships[rel_id]

        logger.debug(f"Removed table {table.name!r} ({table_id}) and {len(doomed)} relationship(s)")
        return self

    def get_table(self, table_id: str) -> Optional[Table]:
        """Get table by id."""
        return self.tables.get(table_id)

    def find_table_by_name(self, name: str) -> Optional[Table]:
        """Get the first table whose name matches, ignoring case."""
        lowered = name.lower()
        for table in self.tables.values():
            if (table.name or "").lower() == lowered:
                return table
        return None

    # -------------------------------------------------------------------------
    # Relationships
    # -------------------------------------------------------------------------

    def add_relationship(self, relationship: Relationship) -> Schema:
        """Add a relationship, replacing any with the same id.

        Endpoints are not checked here.
        """
        self.relationships[relationship.id] = relationship
        logger.debug(f"Added relationship {relationship.id}")
        return self

    def remove_relationship(self, relationship_id: str) -> Schema:
        """Remove a relationship by id."""
        if self.relationships.pop(relationship_id, None) is not None:
            logger.debug(f"Removed relationship {relationship_id}")
        return self

    def get_relationship(self, relationship_id: str) -> Optional[Relationship]:
        """Get relationship by id."""
        return self.relationships.get(relationship_id)

    def relationships_for_table(self, table_id: str) -> List[Relationship]:
        """Get relationships with the table at either end."""
        return [rel for rel in self.relationships.values() if rel.touches(table_id)]

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Convert schema to its persisted dictionary form."""
        return {
            "name": self.name,
            "metadata": dict(self.metadata),
            "tables": [t.to_dict() for t in self.tables.values()],
            "relationships": [r.to_dict() for r in self.relationships.values()],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Schema:
        """Build a schema from its persisted dictionary form."""
        schema = cls(
            name=_text(data.get("name")) or DEFAULT_SCHEMA_NAME,
            metadata=dict(data.get("metadata") or {}),
        )
        for table_data in data.get("tables") or []:
            schema.add_table(Table.from_dict(table_data))
        for rel_data in data.get("relationships") or []:
            schema.add_relationship(Relationship.from_dict(rel_data))
        return schema

    def clone(self) -> Schema:
        """Deep copy through the serialized form."""
        return Schema.from_dict(self.to_dict())

    def fingerprint(self) -> str:
        """Generate a content fingerprint for this schema."""
        json_str = json.dumps(self.to_dict(), sort_keys=True, default=str)
        return hashlib.sha256(json_str.encode()).hexdigest()[:16]


__all__ = [
    "Schema",
    "Table",
    "Column",
    "Relationship",
    "Index",
    "Constraint",
    "Position",
    "RelationType",
    "OnAction",
    "ConstraintType",
    "generate_id",
    "DEFAULT_SCHEMA_NAME",
]
