"""
Module: loader

Purpose:
    Runtime side of adaptive images: prepares placeholders, picks one
    derivative per image from the viewport and format support, and
    re-adapts loaded images on resize. Paths come from core.naming, the
    same function the generator writes with.

Key Classes:
    - AdaptiveImageLoader: Visibility-driven loader
    - Placeholder / PlaceholderState: Image slot model
    - Capabilities / CapabilityCache: Runtime feature detection
    - SourceResolver: Policy-bound resolution

Key Functions:
    - resolve_optimal_source(), build_candidate_set(), sizes_hint()
    - prepare_placeholder()
    - probe_webp_support()
"""

from .capabilities import Capabilities, CapabilityCache, probe_webp_support
from .loader import (
    AdaptiveImageLoader,
    ImmediateLoading,
    IntersectionEntry,
    ObservedLoading,
    ObserverOptions,
)
from .placeholder import Placeholder, PlaceholderState
from .preparer import prepare_placeholder
from .resolver import SourceResolver, build_candidate_set, resolve_optimal_source, sizes_hint

__all__ = [
    "AdaptiveImageLoader",
    "Capabilities",
    "CapabilityCache",
    "ImmediateLoading",
    "IntersectionEntry",
    "ObservedLoading",
    "ObserverOptions",
    "Placeholder",
    "PlaceholderState",
    "SourceResolver",
    "build_candidate_set",
    "prepare_placeholder",
    "probe_webp_support",
    "resolve_optimal_source",
    "sizes_hint",
]
