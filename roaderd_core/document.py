"""RoadERD documents - Reading and writing persisted schemas.

A schema document is a mapping with ``name``, ``metadata``, ``tables`` and
``relationships`` (see :meth:`Schema.to_dict`), stored as JSON or YAML
depending on the file suffix. Relationships pointing at missing tables
or columns load without complaint; finding them is the validator's job.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from roaderd_core.schema import Schema

logger = logging.getLogger(__name__)

JSON_SUFFIXES = {".json"}
YAML_SUFFIXES = {".yaml", ".yml"}


class SchemaDocumentError(ValueError):
    """Raised when a schema document cannot be read or parsed."""


def schema_from_dict(data: Any) -> Schema:
    """Build a schema from a decoded document.

    Raises:
        SchemaDocumentError: If the document is not a schema mapping
    """
    if not isinstance(data, dict):
        raise SchemaDocumentError("Schema document must be a mapping at the top level")

    try:
        return Schema.from_dict(data)
    except KeyError as e:
        raise SchemaDocumentError(f"Schema document missing required field: {e.args[0]}") from e
    except (TypeError, ValueError, AttributeError) as e:
        raise SchemaDocumentError(f"Invalid schema document: {e}") from e


def schema_to_json(schema: Schema, indent: int = 2) -> str:
    """Serialize a schema to a JSON string."""
    return json.dumps(schema.to_dict(), indent=indent, ensure_ascii=False)


def schema_from_json(text: str) -> Schema:
    """Parse a schema from a JSON string."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SchemaDocumentError(f"Invalid JSON: {e}") from e
    return schema_from_dict(data)


def schema_to_yaml(schema: Schema) -> str:
    """Serialize a schema to a YAML string."""
    return yaml.safe_dump(schema.to_dict(), sort_keys=False, allow_unicode=True)


def schema_from_yaml(text: str) -> Schema:
    """Parse a schema from a YAML string."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise SchemaDocumentError(f"Invalid YAML: {e}") from e
    return schema_from_dict(data)


def _format_for(path: Path) -> str:
    suffix = path.suffix.lower()
    if suffix in JSON_SUFFIXES:
        return "json"
    if suffix in YAML_SUFFIXES:
        return "yaml"
    raise SchemaDocumentError(f"Unsupported schema file type: {path.suffix or '(none)'}")


def load_schema(path: Union[str, Path]) -> Schema:
    """Load a schema document from disk.

    Args:
        path: ``.json``, ``.yaml`` or ``.yml`` file

    Returns:
        Loaded schema

    Raises:
        SchemaDocumentError: If the file is missing, unsupported or malformed
    """
    path = Path(path)
    fmt = _format_for(path)

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise SchemaDocumentError(f"Cannot read {path}: {e}") from e

    schema = schema_from_json(text) if fmt == "json" else schema_from_yaml(text)
    logger.debug(
        f"Loaded schema {schema.name!r} from {path} "
        f"({len(schema.tables)} tables, {len(schema.relationships)} relationships)"
    )
    return schema


def save_schema(schema: Schema, path: Union[str, Path]) -> Path:
    """Write a schema document to disk.

    Args:
        schema: Schema to write
        path: Destination; the suffix picks JSON or YAML

    Returns:
        Path written
    """
    path = Path(path)
    fmt = _format_for(path)
    text = schema_to_json(schema) if fmt == "json" else schema_to_yaml(schema)

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    logger.debug(f"Saved schema {schema.name!r} to {path}")
    return path


def document_summary(schema: Schema) -> Dict[str, Any]:
    """Counts and fingerprint of a schema, for display."""
    return {
        "name": schema.name,
        "tables": len(schema.tables),
        "relationships": len(schema.relationships),
        "fingerprint": schema.fingerprint(),
    }


__all__ = [
    "SchemaDocumentError",
    "schema_from_dict",
    "schema_to_json",
    "schema_from_json",
    "schema_to_yaml",
    "schema_from_yaml",
    "load_schema",
    "save_schema",
    "document_summary",
]
