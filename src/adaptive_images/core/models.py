"""
Module: core.models

Purpose:
    Immutable data models shared by both subsystems: discovered source
    images, planned derivatives, candidate sets and the viewport context.

Key Classes:
    - SourceImage: A discovered source file (base path + extension)
    - DerivativeSpec: One planned derivative of a source
    - CandidateEntry / CandidateSet: srcset entries for a placeholder
    - ViewportContext: Width and pixel ratio sampled at decision time

Dependencies:
    - dataclasses (std)
    - core.breakpoints, core.naming

Used By:
    - generator.discovery, generator.pipeline
    - loader.resolver, loader.loader
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Tuple

from .breakpoints import Density, Tier
from .naming import GIF_FORMAT, output_formats


@dataclass(frozen=True, slots=True)
class SourceImage:
    """
    A source image discovered at build time. Never mutated.

    Attributes:
        path: Absolute or root-relative path to the file.

    Example:
        >>> src = SourceImage(Path("assets/hero.jpg"))
        >>> src.ext, src.formats
        ('jpg', ('jpg', 'webp'))
    """

    path: Path

    @property
    def ext(self) -> str:
        """Extension exactly as it appears on disk, without the dot."""
        return self.path.suffix[1:]

    @property
    def kind(self) -> str:
        return self.ext.lower()

    @property
    def base(self) -> str:
        """Path without the extension, as a string."""
        return str(self.path.with_suffix(""))

    @property
    def is_gif(self) -> bool:
        return self.kind == GIF_FORMAT

    @property
    def transcodable(self) -> bool:
        """Animated GIF resizing is out of scope; GIFs are copied."""
        return not self.is_gif

    @property
    def formats(self) -> Tuple[str, ...]:
        """Output formats: GIF is copied as-is and WebP needs no transcode."""
        return output_formats(self.ext)


@dataclass(frozen=True, slots=True)
class DerivativeSpec:
    """
    One derivative to produce for a source.

    Attributes:
        source: The source image.
        tier: Breakpoint tier.
        density: Standard or high density.
        fmt: Output format (source extension or "webp").
        path: Output path built by core.naming.
        target_width: Width bound for the resize (already density-scaled).
    """

    source: SourceImage
    tier: Tier
    density: Density
    fmt: str
    path: Path
    target_width: int

    @property
    def transcode(self) -> bool:
        """GIF derivatives are identity copies; everything else is encoded."""
        return self.source.transcodable


@dataclass(frozen=True, slots=True)
class CandidateEntry:
    """One srcset entry: a derivative URL and its nominal intrinsic width."""

    url: str
    width: int

    def descriptor(self) -> str:
        return f"{self.url} {self.width}w"


@dataclass(frozen=True)
class CandidateSet:
    """
    Ordered candidate derivatives attached to a prepared placeholder.

    Example:
        >>> cs = CandidateSet((CandidateEntry("a-mobile.jpg", 480),))
        >>> cs.to_srcset()
        'a-mobile.jpg 480w'
    """

    entries: Tuple[CandidateEntry, ...]

    def __iter__(self) -> Iterator[CandidateEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def urls(self) -> Tuple[str, ...]:
        return tuple(e.url for e in self.entries)

    def to_srcset(self) -> str:
        return ", ".join(e.descriptor() for e in self.entries)

    @classmethod
    def from_srcset(cls, srcset: str) -> "CandidateSet":
        """Parse a "url 480w, url 768w" attribute value."""
        entries = []
        for chunk in srcset.split(","):
            chunk = chunk.strip()
            if not chunk:
                continue
            url, _, descriptor = chunk.rpartition(" ")
            if not url or not descriptor.endswith("w"):
                raise ValueError(f"Invalid srcset entry: {chunk!r}")
            entries.append(CandidateEntry(url.strip(), int(descriptor[:-1])))
        return cls(tuple(entries))


@dataclass(frozen=True, slots=True)
class ViewportContext:
    """
    Viewport state read at decision time.

    A missing or non-positive pixel ratio is treated as 1.

    Example:
        >>> ViewportContext(width=400, pixel_ratio=0).pixel_ratio
        1.0
    """

    width: float
    pixel_ratio: float = 1.0

    def __post_init__(self) -> None:
        if self.width < 0:
            raise ValueError(f"width must be >= 0: {self.width}")
        if not self.pixel_ratio or self.pixel_ratio <= 0:
            object.__setattr__(self, "pixel_ratio", 1.0)
