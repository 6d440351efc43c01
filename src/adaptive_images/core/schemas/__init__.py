"""JSON schemas for files written by the generator."""

from .validator import MANIFEST_SCHEMA_VERSION, validate_manifest

__all__ = ["MANIFEST_SCHEMA_VERSION", "validate_manifest"]
