"""RoadERD configuration.

Settings for the validation engine, loadable from a YAML file or from
``ROADERD_*`` environment variables. The defaults run every check.

Example ``roaderd.yaml``:

    check_circular_dependencies: true
    check_orphan_tables: false
    foreign_key_suffix: _id
    log_level: INFO

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

TRUTHY = {"1", "true", "yes", "on"}
FALSY = {"0", "false", "no", "off"}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in TRUTHY:
        return True
    if value in FALSY:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


@dataclass
class ValidatorConfig:
    """Configuration for schema validation."""

    check_circular_dependencies: bool = True
    check_orphan_tables: bool = True
    check_naming_convention: bool = True
    foreign_key_suffix: str = "_id"
    log_level: str = "WARNING"

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> ValidatorConfig:
        """Build configuration from a mapping, rejecting unknown keys."""
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise ValueError("Validator config must be a mapping at the top level")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown validator config key(s): {', '.join(unknown)}")

        expected = {f.name: f.type for f in fields(cls)}
        for key, value in data.items():
            kind = bool if expected[key] == "bool" else str
            if not isinstance(value, kind):
                raise ValueError(
                    f"Validator config key '{key}' must be a {kind.__name__}, got {value!r}"
                )

        return cls(**data)

    @classmethod
    def from_yaml(cls, path: Path) -> ValidatorConfig:
        """Load configuration from YAML file."""
        with path.open("r", encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid validator config {path}: {e}") from e
        return cls.from_mapping(data)

    @classmethod
    def from_env(cls) -> ValidatorConfig:
        """Load configuration from environment variables."""
        defaults = cls()
        return cls(
            check_circular_dependencies=_env_bool("ROADERD_CHECK_CYCLES", defaults.check_circular_dependencies),
            check_orphan_tables=_env_bool("ROADERD_CHECK_ORPHANS", defaults.check_orphan_tables),
            check_naming_convention=_env_bool("ROADERD_CHECK_NAMING", defaults.check_naming_convention),
            foreign_key_suffix=os.getenv("ROADERD_FK_SUFFIX", defaults.foreign_key_suffix),
            log_level=os.getenv("ROADERD_LOG_LEVEL", defaults.log_level).upper(),
        )


__all__ = ["ValidatorConfig"]
