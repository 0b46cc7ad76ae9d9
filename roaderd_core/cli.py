"""RoadERD CLI - Command-line interface for schema validation.

Provides schema checks from the command line:
- Whole-schema validation with errors and warnings
- Single table or relationship validation
- Schema summaries
- Creating empty schema documents

Usage:
    roaderd validate schema.json
    roaderd validate schema.yaml --table 3f2a... --json
    roaderd --config roaderd.yaml validate schema.json --strict
    roaderd info schema.json
    roaderd init new_schema.json --name "Blog"

Exit codes:
    0  valid
    1  validation errors (or warnings with --strict)
    2  the document or config could not be loaded

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from roaderd_core import __version__
from roaderd_core.config import ValidatorConfig
from roaderd_core.document import SchemaDocumentError, document_summary, load_schema, save_schema
from roaderd_core.schema import Schema
from roaderd_core.validation import ValidationEngine, ValidationResult

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_LOAD_FAILED = 2


# =============================================================================
# Output Formatting
# =============================================================================


class OutputFormatter:
    """Formats output for CLI display."""

    COLORS = {
        "reset": "\033[0m",
        "bold": "\033[1m",
        "dim": "\033[2m",
        "red": "\033[31m",
        "green": "\033[32m",
        "yellow": "\033[33m",
        "blue": "\033[34m",
        "cyan": "\033[36m",
    }

    def __init__(self, color: bool = True, json_output: bool = False):
        """Initialize formatter.

        Args:
            color: Enable colored output
            json_output: Output as JSON
        """
        self.color = color and sys.stdout.isatty()
        self.json_output = json_output

    def _c(self, text: str, color: str) -> str:
        """Colorize text if color enabled."""
        if self.color:
            return f"{self.COLORS.get(color, '')}{text}{self.COLORS['reset']}"
        return text

    def emit_json(self, payload: Dict[str, Any]) -> None:
        print(json.dumps(payload, indent=2, ensure_ascii=False))

    def success(self, message: str) -> None:
        """Print success message."""
        if self.json_output:
            self.emit_json({"status": "success", "message": message})
        else:
            print(self._c("✓", "green"), message)

    def error(self, message: str) -> None:
        """Print error message."""
        if self.json_output:
            self.emit_json({"status": "error", "message": message})
        else:
            print(self._c("✗", "red"), message, file=sys.stderr)

    def header(self, text: str) -> None:
        """Print header."""
        if not self.json_output:
            print()
            print(self._c(f"═══ {text} ═══", "bold"))
            print()

    def table(self, headers: List[str], rows: List[List[Any]], title: Optional[str] = None) -> None:
        """Print formatted table."""
        if title:
            print(self._c(title, "bold"))
            print()

        if not rows:
            print(self._c("(empty)", "dim"))
            print()
            return

        widths = [len(h) for h in headers]
        for row in rows:
            for i, cell in enumerate(row):
                widths[i] = max(widths[i], len(str(cell)))

        header_line = " │ ".join(h.ljust(widths[i]) for i, h in enumerate(headers))
        separator = "─┼─".join("─" * w for w in widths)

        print(self._c(header_line, "bold"))
        print(separator)

        for row in rows:
            print(" │ ".join(str(cell).ljust(widths[i]) for i, cell in enumerate(row)))

        print()

    def kv(self, data: Dict[str, Any], title: Optional[str] = None) -> None:
        """Print key-value pairs."""
        if title:
            print(self._c(title, "bold"))
            print()

        max_key_len = max(len(k) for k in data.keys()) if data else 0

        for key, value in data.items():
            key_str = self._c(f"{key}:", "cyan").ljust(max_key_len + 10)
            print(f"  {key_str} {value}")
        print()

    def validation(self, result: ValidationResult) -> None:
        """Print a validation result."""
        if self.json_output:
            self.emit_json(result.to_dict())
            return

        for issue in result.errors:
            print(self._c("✗", "red"), f"[{issue.code}] {issue.message}")
            print(self._c(f"    → {issue.suggestion}", "dim"))

        for issue in result.warnings:
            print(self._c("⚠", "yellow"), f"[{issue.code}] {issue.message}")
            print(self._c(f"    → {issue.suggestion}", "dim"))

        summary = f"{len(result.errors)} error(s), {len(result.warnings)} warning(s)"
        if result.valid:
            print(self._c("✓", "green"), f"Schema is valid ({summary})")
        else:
            print(self._c("✗", "red"), f"Schema is invalid ({summary})")


# =============================================================================
# Helpers
# =============================================================================


def load_config(args: argparse.Namespace) -> ValidatorConfig:
    """Resolve configuration: --config file, else environment."""
    if getattr(args, "config", None):
        return ValidatorConfig.from_yaml(Path(args.config))
    return ValidatorConfig.from_env()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


# =============================================================================
# Command Handlers
# =============================================================================


def cmd_validate(args: argparse.Namespace, formatter: OutputFormatter, config: ValidatorConfig) -> int:
    """Validate a schema document."""
    try:
        schema = load_schema(args.file)
    except SchemaDocumentError as e:
        formatter.error(str(e))
        return EXIT_LOAD_FAILED

    engine = ValidationEngine(schema, config)

    if args.table:
        formatter.header(f"Table {args.table}")
        result = engine.validate_table(args.table)
    elif args.relationship:
        formatter.header(f"Relationship {args.relationship}")
        result = engine.validate_relationship(args.relationship)
    else:
        formatter.header(f"Schema: {schema.name}")
        result = engine.validate_schema()

    formatter.validation(result)

    if not result.valid or (args.strict and result.warnings):
        return EXIT_INVALID
    return EXIT_OK


def cmd_info(args: argparse.Namespace, formatter: OutputFormatter, config: ValidatorConfig) -> int:
    """Show a schema summary."""
    try:
        schema = load_schema(args.file)
    except SchemaDocumentError as e:
        formatter.error(str(e))
        return EXIT_LOAD_FAILED

    summary = document_summary(schema)
    table_rows = [
        [
            table.name,
            len(table.columns),
            ", ".join(c.name for c in table.primary_keys()) or "-",
        ]
        for table in schema.tables.values()
    ]
    relationship_rows = [
        [
            rel.name or rel.id,
            rel.type.value,
            _endpoint(schema, rel.source_table_id, rel.source_column_id),
            _endpoint(schema, rel.target_table_id, rel.target_column_id),
        ]
        for rel in schema.relationships.values()
    ]

    if formatter.json_output:
        formatter.emit_json({**summary, "table_list": table_rows, "relationship_list": relationship_rows})
        return EXIT_OK

    formatter.header(f"Schema: {schema.name}")
    formatter.kv(summary)
    formatter.table(["Table", "Columns", "Primary Key"], table_rows, title="Tables")
    formatter.table(["Relationship", "Type", "Source", "Target"], relationship_rows, title="Relationships")
    return EXIT_OK


def _endpoint(schema: Schema, table_id: str, column_id: str) -> str:
    table = schema.get_table(table_id)
    if table is None:
        return f"?{table_id}"
    column = table.get_column(column_id)
    return f"{table.name}.{column.name if column else '?' + column_id}"


def cmd_init(args: argparse.Namespace, formatter: OutputFormatter, config: ValidatorConfig) -> int:
    """Write an empty schema document."""
    path = Path(args.file)
    if path.exists() and not args.force:
        formatter.error(f"{path} already exists (use --force to overwrite)")
        return EXIT_INVALID

    schema = Schema(name=args.name) if args.name else Schema()
    try:
        save_schema(schema, path)
    except (SchemaDocumentError, OSError) as e:
        formatter.error(f"Initialization failed: {e}")
        return EXIT_LOAD_FAILED

    formatter.success(f"Created schema {schema.name!r} at {path}")
    return EXIT_OK


# =============================================================================
# Main CLI
# =============================================================================


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog="roaderd",
        description="RoadERD - Schema design validation for BlackRoad OS",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  roaderd validate schema.json
  roaderd validate schema.yaml --relationship rel-42
  roaderd --json info schema.json
  roaderd init blog.json --name Blog
        """,
    )

    parser.add_argument("--version", action="version", version=f"RoadERD {__version__}")
    parser.add_argument("--json", action="store_true", help="Output as JSON")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("--config", "-c", help="Validator config (YAML)")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Validate
    validate_parser = subparsers.add_parser("validate", help="Validate a schema document")
    validate_parser.add_argument("file", help="Schema document (.json, .yaml, .yml)")
    target = validate_parser.add_mutually_exclusive_group()
    target.add_argument("--table", "-t", help="Validate only this table id")
    target.add_argument("--relationship", "-r", help="Validate only this relationship id")
    validate_parser.add_argument("--strict", action="store_true", help="Treat warnings as failures")

    # Info
    info_parser = subparsers.add_parser("info", help="Show schema summary")
    info_parser.add_argument("file", help="Schema document")

    # Init
    init_parser = subparsers.add_parser("init", help="Create an empty schema document")
    init_parser.add_argument("file", help="Destination (.json, .yaml, .yml)")
    init_parser.add_argument("--name", "-n", help="Schema name")
    init_parser.add_argument("--force", "-f", action="store_true", help="Overwrite an existing file")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    formatter = OutputFormatter(color=not args.no_color, json_output=args.json)

    try:
        config = load_config(args)
    except (OSError, ValueError) as e:
        formatter.error(f"Cannot load config: {e}")
        return EXIT_LOAD_FAILED

    configure_logging("DEBUG" if args.verbose else config.log_level)

    commands = {
        "validate": cmd_validate,
        "info": cmd_info,
        "init": cmd_init,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args, formatter, config)

    parser.print_help()
    return EXIT_INVALID


if __name__ == "__main__":
    sys.exit(main())
