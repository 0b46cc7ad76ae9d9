"""RoadERD - Schema design validation for BlackRoad OS.

RoadERD models a relational database design as an in-memory graph and
checks its structural integrity:
- Tables, ordered columns and id-linked relationships
- Type compatibility across free-form column types
- Per-relationship checks gating relationship creation
- Whole-schema checks: duplicates, missing keys, cycles, orphan tables

Architecture:
    ┌─────────────────────────────────────────────────────────────────┐
    │                         RoadERD Core                           │
    ├─────────────────────────────────────────────────────────────────┤
    │  ┌─────────────┐  ┌─────────────┐  ┌─────────────┐             │
    │  │   Schema    │  │    Type     │  │Relationship │             │
    │  │   Graph     │──│  Resolver   │──│  Validator  │             │
    │  └─────────────┘  └─────────────┘  └─────────────┘             │
    │         │                                 │                     │
    │  ┌─────────────┐                   ┌─────────────┐             │
    │  │  Documents  │                   │ Validation  │             │
    │  │ (JSON/YAML) │                   │   Engine    │             │
    │  └─────────────┘                   └─────────────┘             │
    └─────────────────────────────────────────────────────────────────┘

Usage:
    from roaderd_core import Schema, Table, Column, ValidationEngine

    users = Table.create("users")
    users.add_column(Column.create("id", "INT", primary_key=True, nullable=False))

    schema = Schema(name="blog")
    schema.add_table(users)

    result = ValidationEngine(schema).validate_schema()
    assert result.valid

CLI:
    $ roaderd validate schema.json
    $ roaderd info schema.json

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

__version__ = "1.0.0"
__author__ = "BlackRoad OS, Inc."
__email__ = "engineering@blackroad.io"

# Core exports
from roaderd_core.schema import (
    Column, Constraint, ConstraintType, Index, OnAction, Position,
    RelationType, Relationship, Schema, Table, generate_id,
)
from roaderd_core.types import TypeCategory, are_types_compatible, is_numeric_type, normalize_type
from roaderd_core.config import ValidatorConfig
from roaderd_core.document import SchemaDocumentError, load_schema, save_schema

# Validation exports
from roaderd_core.validation import (
    IssueCode, RelationshipValidator, ValidationEngine, ValidationError,
    ValidationResult, ValidationWarning, validate_schema,
)

__all__ = [
    # Version
    "__version__",

    # Schema
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

    # Types
    "TypeCategory",
    "are_types_compatible",
    "is_numeric_type",
    "normalize_type",

    # Config
    "ValidatorConfig",

    # Documents
    "SchemaDocumentError",
    "load_schema",
    "save_schema",

    # Validation
    "ValidationEngine",
    "validate_schema",
    "RelationshipValidator",
    "IssueCode",
    "ValidationError",
    "ValidationWarning",
    "ValidationResult",
]
