"""
Module: loader.placeholder

Purpose:
    Model of an image placeholder: an element whose real source is
    deferred until it is loaded. Holds markup attributes, CSS classes and
    the lifecycle state. The page owns placeholders; the loader only moves
    them through their states.

Key Classes:
    - PlaceholderState: unprepared -> prepared -> loading -> loaded
    - Placeholder: Attributes, classes and state of one image slot

Key Constants:
    - SRC, SRCSET, DATA_SRC, DATA_SRCSET, SIZES: Attribute names
    - LOADING_CLASS, LOADED_CLASS: Visual affordance classes

Used By:
    - loader.preparer, loader.loader
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Iterable, Mapping, Optional, Set

from adaptive_images.core.errors import PlaceholderStateError

SRC = "src"
SRCSET = "srcset"
DATA_SRC = "data-src"
DATA_SRCSET = "data-srcset"
SIZES = "sizes"

LOADING_CLASS = "img-loading"
LOADED_CLASS = "img-loaded"


class PlaceholderState(Enum):
    UNPREPARED = "unprepared"
    PREPARED = "prepared"
    LOADING = "loading"
    LOADED = "loaded"


_TRANSITIONS = {
    PlaceholderState.UNPREPARED: {PlaceholderState.PREPARED},
    PlaceholderState.PREPARED: {PlaceholderState.LOADING},
    PlaceholderState.LOADING: {PlaceholderState.LOADED},
    PlaceholderState.LOADED: set(),
}


class Placeholder:
    """
    One image slot on a page.

    ``base_source`` keeps the original source reference after the
    data-src attribute has been cleaned up on load, so loaded images can
    still be re-resolved when the viewport changes.

    Example:
        >>> img = Placeholder({"data-src": "assets/hero.jpg"})
        >>> img.has_deferred_source
        True
        >>> img.state
        <PlaceholderState.UNPREPARED: 'unprepared'>
    """

    def __init__(
        self,
        attributes: Optional[Mapping[str, str]] = None,
        classes: Optional[Iterable[str]] = None,
        name: Optional[str] = None,
    ):
        self.attributes: Dict[str, str] = dict(attributes or {})
        self.classes: Set[str] = set(classes or ())
        self.name = name
        self.state = PlaceholderState.UNPREPARED
        self.base_source: Optional[str] = None

    def __repr__(self) -> str:
        label = self.name or self.attributes.get(DATA_SRC) or self.base_source
        return f"Placeholder({label!r}, state={self.state.value})"

    # ─────────────────────────────────────────────────────────────────────────
    # Attributes
    # ─────────────────────────────────────────────────────────────────────────

    def get_attribute(self, name: str) -> Optional[str]:
        return self.attributes.get(name)

    def set_attribute(self, name: str, value: str) -> None:
        self.attributes[name] = value

    def remove_attribute(self, name: str) -> None:
        self.attributes.pop(name, None)

    def has_attribute(self, name: str) -> bool:
        return name in self.attributes

    @property
    def src(self) -> Optional[str]:
        return self.attributes.get(SRC)

    @property
    def srcset(self) -> Optional[str]:
        return self.attributes.get(SRCSET)

    @property
    def has_deferred_source(self) -> bool:
        return bool(self.attributes.get(DATA_SRC))

    # ─────────────────────────────────────────────────────────────────────────
    # Lifecycle
    # ─────────────────────────────────────────────────────────────────────────

    def transition(self, new_state: PlaceholderState) -> None:
        """
        Move to new_state.

        Raises:
            PlaceholderStateError: If the transition is not allowed.
        """
        if new_state not in _TRANSITIONS[self.state]:
            raise PlaceholderStateError(
                f"{self!r}: cannot go from {self.state.value} to {new_state.value}"
            )
        self.state = new_state
