"""
Module: core.breakpoints

Purpose:
    Static breakpoint table mapping viewport widths to named tiers, plus the
    pixel-density rule. Both the generator (which widths to produce) and the
    loader (which width to request) read the same policy object.

Key Classes:
    - Tier: Named viewport bucket with its threshold and derivative width
    - Density: Standard (x1) or high (x2) pixel density
    - BreakpointPolicy: Ordered tiers with selection helpers

Key Constants:
    - DEFAULT_TIERS: mobile/tablet/desktop/wide
    - HIGH_DENSITY_RATIO: Pixel ratio at which @2x derivatives are chosen

Used By:
    - core.naming: Tier names and densities
    - generator.pipeline: Target widths per tier/density
    - loader.resolver: Tier selection from the viewport
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

HIGH_DENSITY_RATIO = 2.0


class Density(Enum):
    """Display pixel-ratio class."""

    STANDARD = 1
    HIGH = 2

    @property
    def multiplier(self) -> int:
        return self.value

    @property
    def is_high(self) -> bool:
        return self is Density.HIGH


@dataclass(frozen=True, slots=True)
class Tier:
    """
    Named viewport-width bucket.

    Attributes:
        name: Tier name used in derivative file names (e.g. "mobile").
        max_width: Largest viewport width (inclusive) served by this tier.
            None marks the catch-all tier.
        target_width: Derivative width at standard density.

    Example:
        >>> Tier("mobile", 480, 480).matches(320)
        True
    """

    name: str
    max_width: Optional[int]
    target_width: int

    def __post_init__(self) -> None:
        if not self.name or not self.name.replace("_", "").isalnum():
            raise ValueError(f"tier name must be alphanumeric: {self.name!r}")
        if self.target_width <= 0:
            raise ValueError(f"target_width must be > 0: {self.target_width}")
        if self.max_width is not None and self.max_width <= 0:
            raise ValueError(f"max_width must be > 0: {self.max_width}")

    @property
    def is_catch_all(self) -> bool:
        return self.max_width is None

    def matches(self, viewport_width: float) -> bool:
        """True when a viewport of this width falls at or below the threshold."""
        return self.max_width is None or viewport_width <= self.max_width

    def width_for(self, density: Density) -> int:
        """Derivative width for the given density."""
        return self.target_width * density.multiplier


DEFAULT_TIERS: Tuple[Tier, ...] = (
    Tier("mobile", 480, 480),
    Tier("tablet", 768, 768),
    Tier("desktop", 1024, 1024),
    Tier("wide", None, 1440),
)


@dataclass(frozen=True)
class BreakpointPolicy:
    """
    Total-ordered tier table plus the density rule.

    Tiers must be sorted by ascending ``max_width`` and end with exactly one
    catch-all tier. The default table is mobile <=480, tablet <=768,
    desktop <=1024 and wide (>1024).

    Example:
        >>> policy = BreakpointPolicy()
        >>> policy.select_tier(400).name
        'mobile'
        >>> policy.select_tier(1600).name
        'wide'
        >>> policy.density_for(2.0)
        <Density.HIGH: 2>
    """

    tiers: Tuple[Tier, ...] = field(default=DEFAULT_TIERS)
    high_density_ratio: float = HIGH_DENSITY_RATIO

    def __post_init__(self) -> None:
        tiers = tuple(self.tiers)
        object.__setattr__(self, "tiers", tiers)
        if not tiers:
            raise ValueError("policy needs at least one tier")
        names = [t.name for t in tiers]
        if len(set(names)) != len(names):
            raise ValueError(f"tier names must be unique: {names}")
        if not tiers[-1].is_catch_all:
            raise ValueError("last tier must be the catch-all (max_width=None)")
        if any(t.is_catch_all for t in tiers[:-1]):
            raise ValueError("only the last tier may be a catch-all")
        bounded = [t.max_width for t in tiers[:-1]]
        if bounded != sorted(bounded) or len(set(bounded)) != len(bounded):
            raise ValueError(f"tier thresholds must be strictly ascending: {bounded}")
        if self.high_density_ratio <= 1:
            raise ValueError(f"high_density_ratio must be > 1: {self.high_density_ratio}")

    # ─────────────────────────────────────────────────────────────────────────
    # Lookup
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def tier_names(self) -> Tuple[str, ...]:
        return tuple(t.name for t in self.tiers)

    @property
    def densities(self) -> Tuple[Density, ...]:
        return (Density.STANDARD, Density.HIGH)

    def tier_named(self, name: str) -> Tier:
        for tier in self.tiers:
            if tier.name == name:
                return tier
        raise KeyError(f"Unknown tier: {name}")

    # ─────────────────────────────────────────────────────────────────────────
    # Selection
    # ─────────────────────────────────────────────────────────────────────────

    def select_tier(self, viewport_width: float) -> Tier:
        """First tier whose threshold is >= width, else the highest tier."""
        for tier in self.tiers:
            if tier.matches(viewport_width):
                return tier
        return self.tiers[-1]

    def density_for(self, pixel_ratio: float) -> Density:
        """Single best density for a device pixel ratio."""
        if pixel_ratio >= self.high_density_ratio:
            return Density.HIGH
        return Density.STANDARD

    def target_width(self, tier: Tier, density: Density) -> int:
        return tier.width_for(density)
