"""
Module: generator.config

Purpose:
    Configuration dataclass for the derivative generation pipeline.
    Immutable settings for encoding quality, resize policy and parallelism.

Key Classes:
    - GeneratorConfig: Main configuration for a generation run

Dependencies:
    - dataclasses: For frozen dataclass support
    - core.breakpoints: Tier table

Used By:
    - generator.pipeline: Uses GeneratorConfig for every run
    - generator.writer: Encoder settings
    - cli: Maps command-line flags onto GeneratorConfig
"""

from dataclasses import dataclass, field
from pathlib import Path

from adaptive_images.core.breakpoints import BreakpointPolicy

FIT_EDGES = ("long", "width")


@dataclass(frozen=True)
class GeneratorConfig:
    """
    Configuration for a derivative generation run.

    Attributes:
        source_root: Directory scanned recursively for source images.
        quality: Compression level applied to every lossy encode (default 80).
        progressive: Progressive encoding where the format supports it (JPEG).
        webp_method: WebP encoder effort, 0 (fast) to 6 (small). Default 6.
        fit_edge: "long" bounds the longest edge by the target width,
            "width" bounds only the width.
        workers: Sources processed concurrently (default 1 = sequential).
        skip_existing: Leave sources whose derivatives all exist untouched.
        write_manifest: Write build metadata after a successful run.
        manifest_name: File name of the build metadata in source_root.
        policy: Breakpoint policy driving tiers and target widths.
    """
    source_root: Path
    quality: int = 80
    progressive: bool = True
    webp_method: int = 6
    fit_edge: str = "long"
    workers: int = 1
    skip_existing: bool = False
    write_manifest: bool = True
    manifest_name: str = "derivatives.json"
    policy: BreakpointPolicy = field(default_factory=BreakpointPolicy)

    def __post_init__(self) -> None:
        object.__setattr__(self, "source_root", Path(self.source_root))
        if not 1 <= self.quality <= 100:
            raise ValueError(f"quality must be in 1..100: {self.quality}")
        if not 0 <= self.webp_method <= 6:
            raise ValueError(f"webp_method must be in 0..6: {self.webp_method}")
        if self.fit_edge not in FIT_EDGES:
            raise ValueError(f"fit_edge must be one of {FIT_EDGES}: {self.fit_edge!r}")
        if self.workers < 1:
            raise ValueError(f"workers must be >= 1: {self.workers}")

    @property
    def manifest_path(self) -> Path:
        return self.source_root / self.manifest_name
