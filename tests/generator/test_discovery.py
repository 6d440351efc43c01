"""
Unit Tests for source discovery
"""

from pathlib import Path

import pytest

from adaptive_images.core.errors import UnsupportedFormatError
from adaptive_images.generator.discovery import as_source, discover_sources


class TestDiscoverSources:
    """Tests for discover_sources()."""

    def test_discover_when_tree_then_finds_every_supported_format(self, asset_tree):
        sources = discover_sources(asset_tree)
        names = [s.path.relative_to(asset_tree).as_posix() for s in sources]
        assert names == ["hero.jpg", "icons/logo.png", "loader.gif", "photo.webp"]

    def test_discover_when_derivatives_present_then_excluded(self, asset_tree, make_image):
        make_image(asset_tree / "hero-mobile.jpg")
        make_image(asset_tree / "hero-wide@2x.webp", fmt="WEBP")
        names = [s.path.name for s in discover_sources(asset_tree)]
        assert "hero-mobile.jpg" not in names
        assert "hero-wide@2x.webp" not in names

    def test_discover_when_unsupported_extension_then_skipped(self, asset_tree):
        (asset_tree / "notes.txt").write_text("not an image")
        (asset_tree / "vector.svg").write_text("<svg/>")
        names = [s.path.name for s in discover_sources(asset_tree)]
        assert "notes.txt" not in names
        assert "vector.svg" not in names

    def test_discover_when_uppercase_extension_then_included(self, tmp_path, make_image):
        make_image(tmp_path / "PHOTO.JPG", fmt="JPEG")
        assert [s.path.name for s in discover_sources(tmp_path)] == ["PHOTO.JPG"]

    def test_discover_when_hidden_files_then_skipped(self, asset_tree, make_image):
        make_image(asset_tree / ".cache" / "thumb.jpg")
        make_image(asset_tree / ".tmp.png")
        names = [s.path.name for s in discover_sources(asset_tree)]
        assert "thumb.jpg" not in names
        assert ".tmp.png" not in names

    def test_discover_when_root_missing_then_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Source directory not found"):
            discover_sources(tmp_path / "missing")


class TestAsSource:
    """Tests for as_source()."""

    def test_as_source_when_unsupported_then_raises(self):
        with pytest.raises(UnsupportedFormatError) as exc_info:
            as_source(Path("diagram.bmp"))
        assert exc_info.value.extension == "bmp"

    def test_as_source_when_supported_then_source_image(self):
        assert as_source(Path("a/b.jpeg")).ext == "jpeg"
