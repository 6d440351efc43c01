"""
Module: core.naming

Purpose:
    The derivative naming scheme. This is the only place that builds or
    parses derivative file names; the generator uses it to decide where to
    write and the loader uses it to decide what to request. Any drift
    between the two shows up as a silent 404, so nothing else in the
    package formats these strings.

    Canonical shape:
        {base}-{tier}[@2x].{format}
    where format is the source extension or "webp".

Key Functions:
    - derivative_name(): Build a derivative path
    - split_source(): Split a source reference into base and extension
    - output_formats(): Formats written for a source extension
    - parse_derivative_name(): Recover tier/density/format from a path
    - is_derivative_path(): Detect tier-suffixed files
    - derivative_names(): Every name for one source

Dependencies:
    - core.breakpoints: Tier and density definitions

Used By:
    - generator.discovery / generator.pipeline: Output paths
    - loader.resolver: Requested paths and candidate sets
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import PurePath
from typing import Iterable, List, Optional, Tuple, Union

from .breakpoints import BreakpointPolicy, Density, Tier
from .errors import MissingSourceError

WEBP_FORMAT = "webp"
GIF_FORMAT = "gif"
DENSITY_SUFFIX = "@2x"

_DERIVATIVE_PATTERN = re.compile(
    r"^(?P<base>.+)-(?P<tier>[A-Za-z0-9_]+)(?P<density>@2x)?\.(?P<fmt>[A-Za-z0-9]+)$"
)

TierLike = Union[Tier, str]


@dataclass(frozen=True, slots=True)
class DerivativeName:
    """Parsed components of a derivative path."""

    base: str
    tier: str
    density: Density
    fmt: str

    @property
    def is_high_density(self) -> bool:
        return self.density is Density.HIGH


def _tier_name(tier: TierLike) -> str:
    return tier.name if isinstance(tier, Tier) else tier


def derivative_name(
    base_no_ext: str,
    ext: str,
    tier: TierLike,
    high_density: bool,
    fmt: Optional[str] = None,
) -> str:
    """
    Build the path of one derivative.

    Args:
        base_no_ext: Source path without its extension ("assets/hero").
        ext: Source extension without the dot ("jpg").
        tier: Tier or tier name.
        high_density: Whether this is the @2x variant.
        fmt: Output format; defaults to the source extension.

    Returns:
        Derivative path as a string.

    Example:
        >>> derivative_name("assets/hero", "jpg", "wide", True)
        'assets/hero-wide@2x.jpg'
        >>> derivative_name("assets/hero", "jpg", "mobile", False, "webp")
        'assets/hero-mobile.webp'
    """
    suffix = DENSITY_SUFFIX if high_density else ""
    return f"{base_no_ext}-{_tier_name(tier)}{suffix}.{fmt or ext}"


def output_formats(ext: str) -> Tuple[str, ...]:
    """
    Formats the generator writes for a source extension.

    GIF is copied as-is and a WebP source needs no transcode; everything
    else gets its original format plus WebP. The resolver only requests
    WebP when it appears here.

    Example:
        >>> output_formats("png"), output_formats("gif")
        (('png', 'webp'), ('gif',))
    """
    if ext.lower() in (GIF_FORMAT, WEBP_FORMAT):
        return (ext,)
    return (ext, WEBP_FORMAT)


def split_source(source: str) -> Tuple[str, str]:
    """
    Split a source reference at its last dot.

    Only the final path component is searched, so a dotted directory name
    never becomes the extension.

    Raises:
        MissingSourceError: If the reference is empty or has no extension.

    Example:
        >>> split_source("assets/hero.jpg")
        ('assets/hero', 'jpg')
    """
    if not source:
        raise MissingSourceError("Empty source reference")
    slash = max(source.rfind("/"), source.rfind("\\"))
    dot = source.rfind(".")
    if dot <= slash + 1 or dot == len(source) - 1:
        raise MissingSourceError(f"Source has no extension: {source}")
    return source[:dot], source[dot + 1:]


def parse_derivative_name(
    path: Union[str, PurePath],
    policy: Optional[BreakpointPolicy] = None,
) -> Optional[DerivativeName]:
    """
    Recover base, tier, density and format from a derivative path.

    Returns None when the name does not end in a known tier suffix.

    Example:
        >>> parsed = parse_derivative_name("assets/hero-tablet@2x.webp")
        >>> parsed.tier, parsed.is_high_density, parsed.fmt
        ('tablet', True, 'webp')
    """
    policy = policy or BreakpointPolicy()
    match = _DERIVATIVE_PATTERN.match(str(path))
    if not match:
        return None
    tier = match.group("tier")
    if tier not in policy.tier_names:
        return None
    density = Density.HIGH if match.group("density") else Density.STANDARD
    return DerivativeName(
        base=match.group("base"),
        tier=tier,
        density=density,
        fmt=match.group("fmt"),
    )


def is_derivative_path(
    path: Union[str, PurePath],
    policy: Optional[BreakpointPolicy] = None,
) -> bool:
    """True when the file name already carries a tier suffix."""
    name = PurePath(path).name
    return parse_derivative_name(name, policy) is not None


def derivative_names(
    base_no_ext: str,
    ext: str,
    policy: BreakpointPolicy,
    formats: Iterable[str],
) -> List[str]:
    """Every derivative name for a source, ordered tier, density, format."""
    formats = tuple(formats)
    names = []
    for tier in policy.tiers:
        for density in policy.densities:
            for fmt in formats:
                names.append(
                    derivative_name(base_no_ext, ext, tier, density.is_high, fmt)
                )
    return names
