"""RoadERD Types - Column type classification and compatibility.

Column types in a RoadERD schema are free-form strings ("VARCHAR(50)",
"int", "Timestamp"), so vendor spellings are accepted as-is. To compare
them, each type string is normalized and mapped onto a small, closed set
of categories:

- Numeric types (INT, BIGINT, DECIMAL, FLOAT, NUMBER, ...)
- String types (VARCHAR, CHAR, TEXT, STRING, CLOB)
- Temporal types (DATE, DATETIME, TIMESTAMP, TIME)

Two types are compatible when their normalized names are identical or
when both fall into the same category. Anything else (INT vs VARCHAR,
BLOB vs TEXT) is incompatible.

Usage:
    from roaderd_core.types import are_types_compatible, is_numeric_type

    are_types_compatible("INT", "bigint")           # True
    are_types_compatible("VARCHAR(50)", "CHAR(10)") # True
    are_types_compatible("INT", "VARCHAR(50)")      # False
    is_numeric_type("DECIMAL(10, 2)")               # True

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from enum import Enum as PyEnum
from typing import Dict, FrozenSet, Optional


class TypeCategory(PyEnum):
    """Compatibility groups for column types."""

    NUMERIC = "numeric"
    STRING = "string"
    TEMPORAL = "temporal"


# =============================================================================
# Type Registry
# =============================================================================


class TypeRegistry:
    """Closed registry of the type names belonging to each category.

    The groups are fixed; nothing can be registered at runtime.
    """

    _groups: Dict[TypeCategory, FrozenSet[str]] = {
        TypeCategory.NUMERIC: frozenset({
            "INT", "INTEGER", "BIGINT", "SMALLINT", "TINYINT",
            "DECIMAL", "NUMERIC", "FLOAT", "DOUBLE", "NUMBER",
        }),
        TypeCategory.STRING: frozenset({
            "VARCHAR", "CHAR", "TEXT", "STRING", "CLOB",
        }),
        TypeCategory.TEMPORAL: frozenset({
            "DATE", "DATETIME", "TIMESTAMP", "TIME",
        }),
    }

    @classmethod
    def get(cls, type_name: str) -> Optional[TypeCategory]:
        """Get the category of a normalized type name."""
        for category, names in cls._groups.items():
            if type_name in names:
                return category
        return None

    @classmethod
    def members(cls, category: TypeCategory) -> FrozenSet[str]:
        """Get the type names in a category."""
        return cls._groups[category]

    @classmethod
    def all_groups(cls) -> Dict[TypeCategory, FrozenSet[str]]:
        """Get all categories and their members."""
        return dict(cls._groups)


# =============================================================================
# Classification
# =============================================================================


def normalize_type(type_string: Optional[str]) -> str:
    """Normalize a type string for comparison.

    Takes the part before the first ``(``, strips whitespace and
    upper-cases it, so ``" varchar(255)"`` becomes ``"VARCHAR"``.

    Args:
        type_string: Free-form column type

    Returns:
        Normalized type name (empty string for an empty/missing type)
    """
    if not type_string:
        return ""
    return type_string.split("(", 1)[0].strip().upper()


def classify_type(type_string: Optional[str]) -> Optional[TypeCategory]:
    """Return the category of a type string, or None if it has none."""
    return TypeRegistry.get(normalize_type(type_string))


def is_numeric_type(type_string: Optional[str]) -> bool:
    """Check whether a type string names a numeric type."""
    return classify_type(type_string) is TypeCategory.NUMERIC


def are_types_compatible(type_a: Optional[str], type_b: Optional[str]) -> bool:
    """Check whether two column types can be linked by a relationship.

    The check is symmetric and has no side effects.

    Args:
        type_a: First column type
        type_b: Second column type

    Returns:
        True if the normalized names match or share a category
    """
    normalized_a = normalize_type(type_a)
    normalized_b = normalize_type(type_b)

    if normalized_a == normalized_b:
        return True

    category_a = TypeRegistry.get(normalized_a)
    return category_a is not None and category_a is TypeRegistry.get(normalized_b)


__all__ = [
    "TypeCategory",
    "TypeRegistry",
    "normalize_type",
    "classify_type",
    "is_numeric_type",
    "are_types_compatible",
]
