"""
Unit Tests for the Placeholder lifecycle
"""

import pytest

from adaptive_images.core.errors import PlaceholderStateError
from adaptive_images.loader.placeholder import Placeholder, PlaceholderState


class TestPlaceholderTransitions:
    """Tests for Placeholder.transition()."""

    def test_transition_when_forward_sequence_then_allowed(self):
        img = Placeholder({"data-src": "a.jpg"})
        for state in (
            PlaceholderState.PREPARED,
            PlaceholderState.LOADING,
            PlaceholderState.LOADED,
        ):
            img.transition(state)
        assert img.state is PlaceholderState.LOADED

    def test_transition_when_loaded_to_loading_then_raises(self):
        img = Placeholder()
        img.transition(PlaceholderState.PREPARED)
        img.transition(PlaceholderState.LOADING)
        img.transition(PlaceholderState.LOADED)
        with pytest.raises(PlaceholderStateError, match="cannot go from loaded to loading"):
            img.transition(PlaceholderState.LOADING)

    def test_transition_when_skipping_prepare_then_raises(self):
        with pytest.raises(PlaceholderStateError):
            Placeholder().transition(PlaceholderState.LOADING)

    def test_attributes_when_removed_twice_then_no_error(self):
        img = Placeholder({"data-src": "a.jpg"})
        img.remove_attribute("data-src")
        img.remove_attribute("data-src")
        assert img.has_deferred_source is False
