"""
Schema Validation Utilities

Validates build metadata against the JSON schemas shipped next to this
module. Fails fast with every schema violation collected in one error.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema

from ..errors import ManifestValidationError

MANIFEST_SCHEMA_VERSION = 1

# Load schemas lazily
_SCHEMAS: dict[str, dict] = {}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


def validate_manifest(data: dict[str, Any]) -> None:
    """
    Validate a build manifest record.

    Args:
        data: Manifest dictionary to validate.

    Raises:
        ManifestValidationError: If data is invalid.
    """
    schema = _load_schema("build_manifest")
    validator = jsonschema.Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(data), key=lambda e: list(e.path))
    if errors:
        messages = []
        for error in errors:
            location = "/".join(str(p) for p in error.path) or "<root>"
            messages.append(f"{location}: {error.message}")
        raise ManifestValidationError(
            f"Manifest failed validation ({len(messages)} errors)",
            errors=messages,
        )
    if data["schema_version"] > MANIFEST_SCHEMA_VERSION:
        raise ManifestValidationError(
            f"Manifest schema_version {data['schema_version']} is newer than "
            f"supported version {MANIFEST_SCHEMA_VERSION}"
        )
