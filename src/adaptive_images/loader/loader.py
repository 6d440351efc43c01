"""
Module: loader.loader

Purpose:
    Visibility-driven loading of prepared placeholders. Each placeholder
    moves through unprepared -> prepared -> loading -> loaded exactly once;
    loaded placeholders are re-resolved when the viewport is resized.

    The host runtime (a browser bridge, a headless driver, a test) owns
    the event loop and calls on_intersection(), on_load() and on_resize().
    Callbacks never overlap, and nothing here relies on state shared
    between placeholders.

Key Classes:
    - AdaptiveImageLoader: The per-page loader
    - ObservedLoading / ImmediateLoading: Loading strategies, chosen once
    - ObserverOptions: Pre-emptive margin and trigger threshold
    - IntersectionEntry: One visibility notification

Dependencies:
    - loader.resolver: Source selection
    - loader.preparer: Candidate sets
    - loader.capabilities: WebP flag

Used By:
    - Host integrations and tests
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Protocol, Sequence

from adaptive_images.core.breakpoints import BreakpointPolicy
from adaptive_images.core.models import ViewportContext
from .capabilities import Capabilities
from .placeholder import (
    DATA_SRC,
    DATA_SRCSET,
    LOADED_CLASS,
    LOADING_CLASS,
    SRC,
    SRCSET,
    Placeholder,
    PlaceholderState,
)
from .preparer import prepare_placeholder
from .resolver import SourceResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ObserverOptions:
    """
    Visibility observation settings.

    Attributes:
        root_margin: Margin around the viewport, so images start loading
            slightly before they scroll into view.
        threshold: Visible fraction that triggers a notification.
    """
    root_margin: str = "50px 0px"
    threshold: float = 0.1

    def __post_init__(self) -> None:
        if not 0.0 <= self.threshold <= 1.0:
            raise ValueError(f"threshold must be in [0, 1]: {self.threshold}")


@dataclass(frozen=True)
class IntersectionEntry:
    """One visibility notification for a placeholder."""
    target: Placeholder
    is_intersecting: bool
    intersection_ratio: float = 0.0


class VisibilityObserver(Protocol):
    """Runtime object that reports placeholders entering the viewport."""

    def observe(self, target: Placeholder) -> None: ...

    def unobserve(self, target: Placeholder) -> None: ...


IntersectionCallback = Callable[[Sequence[IntersectionEntry]], None]
ObserverFactory = Callable[[IntersectionCallback, ObserverOptions], VisibilityObserver]
ViewportProvider = Callable[[], ViewportContext]


# ─────────────────────────────────────────────────────────────────────────────
# Loading strategies
# ─────────────────────────────────────────────────────────────────────────────

class LoadingStrategy(ABC):
    """How prepared placeholders get to the loading state."""

    name = "base"

    @abstractmethod
    def register(self, loader: "AdaptiveImageLoader", placeholder: Placeholder) -> None:
        """Start tracking a prepared placeholder."""

    def release(self, placeholder: Placeholder) -> None:
        """Stop tracking a placeholder that has left the prepared state."""


class ObservedLoading(LoadingStrategy):
    """Load placeholders as the observer reports them visible."""

    name = "observed"

    def __init__(self, observer: VisibilityObserver):
        self.observer = observer

    def register(self, loader: "AdaptiveImageLoader", placeholder: Placeholder) -> None:
        self.observer.observe(placeholder)

    def release(self, placeholder: Placeholder) -> None:
        self.observer.unobserve(placeholder)


class ImmediateLoading(LoadingStrategy):
    """Degraded mode for runtimes without visibility observation."""

    name = "immediate"

    def register(self, loader: "AdaptiveImageLoader", placeholder: Placeholder) -> None:
        loader.load(placeholder)


# ─────────────────────────────────────────────────────────────────────────────
# Loader
# ─────────────────────────────────────────────────────────────────────────────

class AdaptiveImageLoader:
    """
    Loads one derivative per placeholder when it becomes visible.

    Args:
        viewport: Returns the current viewport; sampled at decision time.
        capabilities: Runtime feature flags.
        observer_factory: Builds the runtime's visibility observer. Ignored
            when capabilities report no visibility observation.
        policy: Breakpoint policy shared with the generator.
        options: Observer margin and threshold.

    Example:
        >>> loader = AdaptiveImageLoader(
        ...     viewport=lambda: ViewportContext(400, 1),
        ...     capabilities=Capabilities(webp=True, visibility_observer=False),
        ... )
        >>> img = Placeholder({"data-src": "assets/hero.jpg"})
        >>> loader.init([img])
        [Placeholder('assets/hero.jpg', state=loading)]
        >>> img.src
        'assets/hero-mobile.webp'
    """

    def __init__(
        self,
        viewport: ViewportProvider,
        capabilities: Capabilities,
        observer_factory: Optional[ObserverFactory] = None,
        policy: Optional[BreakpointPolicy] = None,
        options: Optional[ObserverOptions] = None,
    ):
        self.policy = policy or BreakpointPolicy()
        self.options = options or ObserverOptions()
        self.capabilities = capabilities
        self.resolver = SourceResolver(capabilities.webp, self.policy)
        self._viewport = viewport
        self._observer_factory = observer_factory
        self.strategy: Optional[LoadingStrategy] = None
        self.placeholders: List[Placeholder] = []

    def _select_strategy(self) -> LoadingStrategy:
        if self.capabilities.visibility_observer and self._observer_factory is not None:
            observer = self._observer_factory(self.on_intersection, self.options)
            return ObservedLoading(observer)
        return ImmediateLoading()

    def init(self, placeholders: Iterable[Placeholder]) -> List[Placeholder]:
        """
        Prepare and register every placeholder carrying a deferred source.

        Placeholders already tracked by this loader are skipped, so calling
        init again after new content is added never observes one twice.

        Returns:
            The placeholders registered by this call.
        """
        if self.strategy is None:
            self.strategy = self._select_strategy()
            logger.debug(f"Using {self.strategy.name} loading strategy")

        registered = []
        for placeholder in placeholders:
            if placeholder in self.placeholders:
                continue
            if not placeholder.has_deferred_source:
                continue
            if not prepare_placeholder(placeholder, self.policy):
                continue
            self.placeholders.append(placeholder)
            registered.append(placeholder)
            self.strategy.register(self, placeholder)
        logger.debug(f"Registered {len(registered)} placeholders")
        return registered

    def resolve(self, placeholder: Placeholder) -> Optional[str]:
        """Optimal derivative for the placeholder at the current viewport."""
        base_src = placeholder.base_source or placeholder.get_attribute(DATA_SRC)
        return self.resolver.resolve(base_src, self._viewport())

    def load(self, placeholder: Placeholder) -> bool:
        """
        Start fetching the optimal derivative of a prepared placeholder.

        Returns:
            True if the placeholder moved to loading. Placeholders that are
            not prepared are left alone, so each loads exactly once.
        """
        if placeholder.state is not PlaceholderState.PREPARED:
            return False
        src = self.resolve(placeholder)
        if not src:
            return False

        placeholder.set_attribute(SRC, src)
        srcset = placeholder.get_attribute(DATA_SRCSET)
        if srcset:
            placeholder.set_attribute(SRCSET, srcset)
        placeholder.classes.add(LOADING_CLASS)
        placeholder.transition(PlaceholderState.LOADING)
        if self.strategy is not None:
            self.strategy.release(placeholder)
        logger.debug(f"Loading {src}")
        return True

    def on_intersection(self, entries: Sequence[IntersectionEntry]) -> None:
        """Visibility callback: load every placeholder that became visible."""
        for entry in entries:
            if entry.is_intersecting:
                self.load(entry.target)

    def on_load(self, placeholder: Placeholder) -> bool:
        """
        Load-completion callback.

        Returns:
            True if the placeholder moved to loaded. Later load events
            (for example after a resize swaps the source) are no-ops.
        """
        if placeholder.state is not PlaceholderState.LOADING:
            return False
        placeholder.transition(PlaceholderState.LOADED)
        placeholder.remove_attribute(DATA_SRC)
        placeholder.remove_attribute(DATA_SRCSET)
        placeholder.classes.discard(LOADING_CLASS)
        placeholder.classes.add(LOADED_CLASS)
        return True

    def on_resize(self) -> List[Placeholder]:
        """
        Re-resolve loaded placeholders for the current viewport.

        Placeholders that are prepared or loading have not committed to a
        source yet and are not touched.

        Returns:
            Placeholders whose source changed.
        """
        changed = []
        for placeholder in self.placeholders:
            if placeholder.state is not PlaceholderState.LOADED:
                continue
            src = self.resolve(placeholder)
            if src and src != placeholder.src:
                placeholder.set_attribute(SRC, src)
                changed.append(placeholder)
        if changed:
            logger.debug(f"Resize re-resolved {len(changed)} placeholders")
        return changed
