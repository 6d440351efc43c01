"""
Unit Tests for build manifest schema validation
"""

import pytest

from adaptive_images.core.errors import ManifestValidationError
from adaptive_images.core.schemas import MANIFEST_SCHEMA_VERSION, validate_manifest


def _record(**overrides):
    record = {
        "schema_version": MANIFEST_SCHEMA_VERSION,
        "quality": 80,
        "fit_edge": "long",
        "tiers": [{"name": "wide", "max_width": None, "target_width": 1440}],
        "sources": {
            "hero.jpg": {"derivatives": ["hero-wide.jpg", "hero-wide.webp"], "copied": False},
        },
        "source_count": 1,
        "derivative_count": 2,
    }
    record.update(overrides)
    return record


class TestValidateManifest:
    """Tests for validate_manifest()."""

    def test_validate_when_valid_then_passes(self):
        validate_manifest(_record())

    def test_validate_when_quality_out_of_range_then_raises(self):
        with pytest.raises(ManifestValidationError) as exc_info:
            validate_manifest(_record(quality=101))
        assert any("quality" in e for e in exc_info.value.errors)

    def test_validate_when_missing_sources_then_raises(self):
        record = _record()
        del record["sources"]
        with pytest.raises(ManifestValidationError):
            validate_manifest(record)

    def test_validate_when_unknown_key_then_raises(self):
        with pytest.raises(ManifestValidationError):
            validate_manifest(_record(built_at="2024-01-01"))

    def test_validate_when_newer_schema_version_then_raises(self):
        with pytest.raises(ManifestValidationError, match="newer"):
            validate_manifest(_record(schema_version=MANIFEST_SCHEMA_VERSION + 1))
