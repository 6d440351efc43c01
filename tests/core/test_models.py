"""
Unit Tests for core models

SourceImage format rules, CandidateSet serialisation and ViewportContext.
"""

from pathlib import Path

import pytest

from adaptive_images.core.models import (
    CandidateEntry,
    CandidateSet,
    SourceImage,
    ViewportContext,
)


class TestSourceImage:
    """Tests for SourceImage."""

    def test_formats_when_jpg_then_original_and_webp(self):
        src = SourceImage(Path("assets/hero.jpg"))
        assert src.formats == ("jpg", "webp")
        assert src.base == str(Path("assets/hero"))
        assert src.transcodable is True

    def test_formats_when_gif_then_original_only(self):
        src = SourceImage(Path("assets/loader.gif"))
        assert src.formats == ("gif",)
        assert src.is_gif is True
        assert src.transcodable is False

    def test_formats_when_webp_then_single_format(self):
        assert SourceImage(Path("photo.webp")).formats == ("webp",)

    def test_ext_when_uppercase_then_preserved(self):
        """Names use the extension as written, matching what the page references."""
        src = SourceImage(Path("HERO.JPG"))
        assert src.ext == "JPG"
        assert src.kind == "jpg"
        assert src.formats == ("JPG", "webp")


class TestCandidateSet:
    """Tests for CandidateSet."""

    def test_to_srcset_when_entries_then_comma_joined_descriptors(self):
        cs = CandidateSet((
            CandidateEntry("a-mobile.jpg", 480),
            CandidateEntry("a-mobile@2x.jpg", 960),
        ))
        assert cs.to_srcset() == "a-mobile.jpg 480w, a-mobile@2x.jpg 960w"
        assert len(cs) == 2

    def test_from_srcset_when_valid_then_parses_entries(self):
        cs = CandidateSet.from_srcset("a-mobile.jpg 480w, a-tablet.jpg 768w")
        assert cs.urls == ("a-mobile.jpg", "a-tablet.jpg")
        assert [e.width for e in cs] == [480, 768]

    def test_from_srcset_when_density_descriptor_then_raises(self):
        with pytest.raises(ValueError, match="Invalid srcset entry"):
            CandidateSet.from_srcset("a.jpg 2x")


class TestViewportContext:
    """Tests for ViewportContext."""

    @pytest.mark.parametrize("ratio", [0, -1, None])
    def test_pixel_ratio_when_missing_then_one(self, ratio):
        assert ViewportContext(400, ratio).pixel_ratio == 1.0

    def test_init_when_negative_width_then_raises(self):
        with pytest.raises(ValueError, match="width must be >= 0"):
            ViewportContext(-1)
