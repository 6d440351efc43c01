"""
Module: loader.resolver

Purpose:
    Pure resolution logic: which derivative to request for a viewport, and
    the full candidate set for a placeholder. Viewport and capability are
    explicit inputs, so everything here is testable without a rendering
    surface. All paths come from core.naming, the same function the
    generator writes with.

Key Functions:
    - resolve_optimal_source(): One derivative path for a viewport
    - build_candidate_set(): 8-entry srcset in the original format
    - sizes_hint(): The sizes attribute value

Key Classes:
    - SourceResolver: Policy + WebP flag bound once at initialisation

Used By:
    - loader.preparer: Candidate sets and sizes
    - loader.loader: Source selection on visibility and resize
    - cli: `resolve` command
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from adaptive_images.core.breakpoints import BreakpointPolicy
from adaptive_images.core.errors import MissingSourceError
from adaptive_images.core.models import CandidateEntry, CandidateSet, ViewportContext
from adaptive_images.core.naming import WEBP_FORMAT, derivative_name, output_formats, split_source

FULL_VIEWPORT = "100vw"


def resolve_optimal_source(
    base_src: Optional[str],
    viewport: ViewportContext,
    webp_supported: bool,
    policy: Optional[BreakpointPolicy] = None,
) -> Optional[str]:
    """
    Resolve the single derivative to request.

    Tier comes from the viewport width, @2x from a pixel ratio >= 2, and
    WebP is chosen only when the runtime supports it and the generator
    writes a WebP variant for this extension (GIFs are never transcoded).

    Args:
        base_src: Original source reference ("assets/hero.jpg").
        viewport: Current viewport sample.
        webp_supported: Result of capability detection.
        policy: Breakpoint policy (default tiers if omitted).

    Returns:
        Derivative path, or None when base_src is missing or has no
        extension.

    Example:
        >>> resolve_optimal_source("assets/hero.jpg", ViewportContext(400, 1), True)
        'assets/hero-mobile.webp'
        >>> resolve_optimal_source("assets/hero.jpg", ViewportContext(1600, 2), False)
        'assets/hero-wide@2x.jpg'
    """
    if not base_src:
        return None
    try:
        base, ext = split_source(base_src)
    except MissingSourceError:
        return None
    policy = policy or BreakpointPolicy()
    tier = policy.select_tier(viewport.width)
    density = policy.density_for(viewport.pixel_ratio)
    fmt = WEBP_FORMAT if webp_supported and WEBP_FORMAT in output_formats(ext) else ext
    return derivative_name(base, ext, tier, density.is_high, fmt)


def build_candidate_set(
    base_src: str,
    policy: Optional[BreakpointPolicy] = None,
) -> CandidateSet:
    """
    Build the candidate set for a source in its original format.

    Standard-density entries come first (one per tier), then the @2x
    entries, each tagged with its nominal width.

    Raises:
        MissingSourceError: If base_src is empty or has no extension.

    Example:
        >>> build_candidate_set("a/b.png").to_srcset().split(", ")[0]
        'a/b-mobile.png 480w'
    """
    base, ext = split_source(base_src)
    policy = policy or BreakpointPolicy()
    entries = []
    for density in policy.densities:
        for tier in policy.tiers:
            entries.append(
                CandidateEntry(
                    url=derivative_name(base, ext, tier, density.is_high),
                    width=policy.target_width(tier, density),
                )
            )
    return CandidateSet(tuple(entries))


def sizes_hint(policy: Optional[BreakpointPolicy] = None, slot: str = FULL_VIEWPORT) -> str:
    """
    Build the sizes attribute: the same slot width at every breakpoint.

    Example:
        >>> sizes_hint()
        '(max-width: 480px) 100vw, (max-width: 768px) 100vw, (max-width: 1024px) 100vw, 100vw'
    """
    policy = policy or BreakpointPolicy()
    parts = [
        f"(max-width: {tier.max_width}px) {slot}"
        for tier in policy.tiers
        if not tier.is_catch_all
    ]
    parts.append(slot)
    return ", ".join(parts)


@dataclass(frozen=True)
class SourceResolver:
    """
    Resolution bound to a policy and a WebP capability.

    The capability is fixed at construction, so the format branch is
    chosen once rather than on every call.
    """
    webp_supported: bool
    policy: BreakpointPolicy = field(default_factory=BreakpointPolicy)

    def resolve(self, base_src: Optional[str], viewport: ViewportContext) -> Optional[str]:
        return resolve_optimal_source(base_src, viewport, self.webp_supported, self.policy)

    def candidates(self, base_src: str) -> CandidateSet:
        return build_candidate_set(base_src, self.policy)

    def sizes(self) -> str:
        return sizes_hint(self.policy)
