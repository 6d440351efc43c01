"""
Tests for build metadata written after a generation run
"""

import json

import pytest

from adaptive_images.core.errors import ManifestValidationError
from adaptive_images.generator import GeneratorConfig, discover_sources, generate_derivatives
from adaptive_images.generator.manifest import (
    build_manifest_record,
    load_manifest,
    locked_file,
    write_manifest,
)


class TestBuildManifestRecord:
    """Tests for build_manifest_record()."""

    def test_record_when_tree_then_relative_posix_paths(self, asset_tree):
        config = GeneratorConfig(asset_tree)
        record = build_manifest_record(discover_sources(asset_tree), config)

        assert record["source_count"] == 4
        assert record["derivative_count"] == 48
        logo = record["sources"]["icons/logo.png"]
        assert logo["copied"] is False
        assert "icons/logo-wide@2x.webp" in logo["derivatives"]
        assert record["sources"]["loader.gif"]["copied"] is True
        assert [t["name"] for t in record["tiers"]] == ["mobile", "tablet", "desktop", "wide"]
        assert record["tiers"][-1]["max_width"] is None


class TestWriteManifest:
    """Tests for write_manifest() and load_manifest()."""

    def test_generate_when_enabled_then_manifest_written(self, asset_tree):
        result = generate_derivatives(GeneratorConfig(asset_tree))
        assert result.manifest_path == asset_tree / "derivatives.json"
        data = load_manifest(result.manifest_path)
        assert data["quality"] == 80
        assert set(data["sources"]) == {
            "hero.jpg", "icons/logo.png", "loader.gif", "photo.webp",
        }

    def test_generate_when_disabled_then_no_manifest(self, asset_tree):
        result = generate_derivatives(GeneratorConfig(asset_tree, write_manifest=False))
        assert result.manifest_path is None
        assert not (asset_tree / "derivatives.json").exists()

    def test_write_when_existing_file_then_replaced(self, tmp_path, asset_tree):
        path = tmp_path / "meta" / "derivatives.json"
        path.parent.mkdir()
        path.write_text(json.dumps({"stale": True, "padding": "x" * 10000}))
        record = build_manifest_record(discover_sources(asset_tree), GeneratorConfig(asset_tree))

        write_manifest(path, record)

        assert json.loads(path.read_text()) == record

    def test_write_when_invalid_record_then_raises_before_writing(self, tmp_path):
        path = tmp_path / "derivatives.json"
        with pytest.raises(ManifestValidationError):
            write_manifest(path, {"schema_version": 1})
        assert not path.exists()

    def test_load_when_missing_then_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_manifest(tmp_path / "derivatives.json")

    def test_locked_file_when_append_then_creates_parent(self, tmp_path):
        path = tmp_path / "nested" / "log.txt"
        with locked_file(path, "a") as f:
            f.write("line\n")
        assert path.read_text() == "line\n"
