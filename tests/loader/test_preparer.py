"""
Unit Tests for placeholder preparation
"""

from adaptive_images.loader.placeholder import (
    DATA_SRC,
    DATA_SRCSET,
    SIZES,
    SRC,
    Placeholder,
    PlaceholderState,
)
from adaptive_images.loader.preparer import prepare_placeholder


class TestPreparePlaceholder:
    """Tests for prepare_placeholder()."""

    def test_prepare_when_eager_src_then_moved_to_data_src(self):
        img = Placeholder({SRC: "assets/hero.jpg"})

        assert prepare_placeholder(img) is True

        assert img.src is None
        assert img.get_attribute(DATA_SRC) == "assets/hero.jpg"
        assert img.get_attribute(DATA_SRCSET).startswith("assets/hero-mobile.jpg 480w, ")
        assert img.get_attribute(SIZES).endswith(", 100vw")
        assert img.base_source == "assets/hero.jpg"
        assert img.state is PlaceholderState.PREPARED

    def test_prepare_when_deferred_src_then_candidate_set_has_eight_entries(self):
        img = Placeholder({DATA_SRC: "a/b.png"})
        prepare_placeholder(img)
        assert len(img.get_attribute(DATA_SRCSET).split(", ")) == 8

    def test_prepare_when_no_source_then_skipped_silently(self):
        img = Placeholder({"alt": "decorative"})
        assert prepare_placeholder(img) is False
        assert img.state is PlaceholderState.UNPREPARED
        assert img.attributes == {"alt": "decorative"}

    def test_prepare_when_source_without_extension_then_skipped(self):
        img = Placeholder({DATA_SRC: "assets/hero"})
        assert prepare_placeholder(img) is False
        assert not img.has_attribute(DATA_SRCSET)

    def test_prepare_when_already_prepared_then_idempotent(self):
        img = Placeholder({DATA_SRC: "a.jpg"})
        prepare_placeholder(img)
        before = dict(img.attributes)
        assert prepare_placeholder(img) is True
        assert img.attributes == before
