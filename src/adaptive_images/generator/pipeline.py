"""
Module: generator.pipeline

Purpose:
    Main pipeline orchestrator for derivative generation. For every source
    image it produces one file per (tier x density x format), named by
    core.naming, so that every path the loader can request exists.

Key Functions:
    - generate_derivatives(): Main entry point for a batch run
    - generate_for_source(): All derivatives of one source
    - plan_derivatives(): Ordered DerivativeSpecs for a source
    - check_derivative_collisions(): Two sources claiming one derivative name
    - verify_derivatives(): Paths the loader could request that are missing

Key Classes:
    - GenerationResult: Container for run output

Dependencies:
    - PIL: Decoding and resizing
    - concurrent.futures: Optional parallel per-source processing
    - adaptive_images.core: Naming scheme and breakpoint policy

Used By:
    - cli: `generate` and `verify` commands
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from itertools import groupby
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from PIL import Image

from adaptive_images.core.breakpoints import BreakpointPolicy
from adaptive_images.core.errors import GenerationError
from adaptive_images.core.models import DerivativeSpec, SourceImage
from adaptive_images.core.naming import derivative_name, derivative_names
from .config import GeneratorConfig
from .discovery import discover_sources
from .resize import fit_inside, resize_image
from .timing import TimingLog, timed_phase
from .writer import copy_derivative, save_derivative

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """
    Result of a generation run.

    Attributes:
        source_count: Number of sources discovered.
        derivatives: Mapping of source path -> derivative paths written.
        skipped: Sources left untouched because skip_existing was set.
        elapsed_seconds: Wall-clock duration of the run.
        timing: Per-phase timings.
        manifest_path: Build metadata file, if written.
    """
    source_count: int
    derivatives: Dict[Path, List[Path]] = field(default_factory=dict)
    skipped: List[Path] = field(default_factory=list)
    elapsed_seconds: float = 0.0
    timing: TimingLog = field(default_factory=TimingLog)
    manifest_path: Optional[Path] = None

    @property
    def derivative_count(self) -> int:
        return sum(len(paths) for paths in self.derivatives.values())


def plan_derivatives(
    source: SourceImage,
    policy: Optional[BreakpointPolicy] = None,
) -> List[DerivativeSpec]:
    """
    List every derivative of a source, ordered tier, density, format.

    JPEG/PNG sources get 16 specs (4 tiers x 2 densities x {ext, webp});
    GIF and WebP sources get 8.

    Example:
        >>> specs = plan_derivatives(SourceImage(Path("assets/hero.jpg")))
        >>> specs[0].path, specs[-1].path
        (PosixPath('assets/hero-mobile.jpg'), PosixPath('assets/hero-wide@2x.webp'))
    """
    policy = policy or BreakpointPolicy()
    specs = []
    for tier in policy.tiers:
        for density in policy.densities:
            for fmt in source.formats:
                path = derivative_name(source.base, source.ext, tier, density.is_high, fmt)
                specs.append(
                    DerivativeSpec(
                        source=source,
                        tier=tier,
                        density=density,
                        fmt=fmt,
                        path=Path(path),
                        target_width=policy.target_width(tier, density),
                    )
                )
    return specs


def generate_for_source(
    source: SourceImage,
    config: GeneratorConfig,
    timing: Optional[TimingLog] = None,
) -> List[Path]:
    """
    Write every derivative of one source.

    GIF sources are copied unchanged to each tier/density name. Other
    sources are decoded once, resized once per (tier, density) and encoded
    once per output format.

    Args:
        source: Source to process.
        config: Generation settings.
        timing: Optional TimingLog for per-phase metrics.

    Returns:
        Paths written, in plan order.

    Raises:
        GenerationError: On any decode, resize, encode or copy failure.
    """
    timing = timing or TimingLog()
    key = _relative(source.path, config.source_root)
    specs = plan_derivatives(source, config.policy)
    written: List[Path] = []
    current: Optional[Path] = None

    try:
        if not source.transcodable:
            with timed_phase(timing, "copy", key):
                for spec in specs:
                    current = spec.path
                    written.append(copy_derivative(source.path, spec.path))
            return written

        with Image.open(source.path) as opened:
            with timed_phase(timing, "decode", key):
                opened.load()
            for (tier, density), group in groupby(specs, key=lambda s: (s.tier, s.density)):
                group = list(group)
                size = fit_inside(opened.size, group[0].target_width, config.fit_edge)
                with timed_phase(timing, "resize", key):
                    resized = resize_image(opened, size)
                with timed_phase(timing, "encode", key):
                    for spec in group:
                        current = spec.path
                        written.append(save_derivative(resized, spec.path, spec.fmt, config))
    except GenerationError:
        raise
    except Exception as exc:
        raise GenerationError(source.path, str(exc) or type(exc).__name__, current) from exc

    return written


def check_derivative_collisions(
    sources: Iterable[SourceImage],
    policy: Optional[BreakpointPolicy] = None,
) -> None:
    """
    Fail when two sources would write the same derivative.

    hero.jpg and hero.png both map to hero-{tier}[@2x].webp, and a
    hero.webp source maps there too. Names are compared case-insensitively
    so hero.JPG and hero.jpg also clash on case-insensitive file systems.

    Raises:
        GenerationError: Naming both sources and the shared derivative.
    """
    policy = policy or BreakpointPolicy()
    owners: Dict[str, SourceImage] = {}
    for source in sources:
        for name in derivative_names(source.base, source.ext, policy, source.formats):
            owner = owners.setdefault(name.casefold(), source)
            if owner is not source:
                raise GenerationError(
                    source.path,
                    f"{Path(name).name} is also a derivative of {owner.path}",
                )


def _is_complete(source: SourceImage, policy: BreakpointPolicy) -> bool:
    return all(spec.path.exists() for spec in plan_derivatives(source, policy))


def generate_derivatives(config: GeneratorConfig) -> GenerationResult:
    """
    Generate derivatives for every source under config.source_root.

    Pipeline:
    1. Discover sources (derivatives of earlier runs are excluded)
    2. For each source, write all tier/density/format derivatives
    3. Write build metadata (if enabled)

    The run is fail-fast: the first failing source raises GenerationError
    and, in parallel mode, cancels sources not yet started. Re-running over
    an unchanged tree rewrites identical bytes.

    Args:
        config: Generation settings.

    Returns:
        GenerationResult with per-source derivative paths.

    Raises:
        FileNotFoundError: If the source root does not exist.
        GenerationError: If any source fails, or two sources share a
            derivative name (checked before anything is written).

    Example:
        >>> result = generate_derivatives(GeneratorConfig(Path("Static/images/assets")))
        >>> print(f"Generated {result.derivative_count} derivatives")
        Generated 16 derivatives
    """
    start = time.perf_counter()
    timing = TimingLog()
    root = config.source_root

    with timed_phase(timing, "discovery"):
        sources = discover_sources(root, config.policy)
    logger.info(f"Found {len(sources)} images to process")
    check_derivative_collisions(sources, config.policy)

    result = GenerationResult(source_count=len(sources), timing=timing)

    pending: List[SourceImage] = []
    for source in sources:
        if config.skip_existing and _is_complete(source, config.policy):
            logger.debug(f"Skipping {_relative(source.path, root)}: derivatives exist")
            result.skipped.append(source.path)
        else:
            pending.append(source)

    with timed_phase(timing, "generation"):
        if config.workers > 1 and len(pending) > 1:
            _generate_parallel(pending, config, result)
        else:
            for source in pending:
                written = generate_for_source(source, config, timing)
                _record(result, source, written, root)

    if config.write_manifest:
        from .manifest import build_manifest_record, write_manifest

        record = build_manifest_record(sources, config)
        result.manifest_path = write_manifest(config.manifest_path, record)

    result.elapsed_seconds = time.perf_counter() - start
    logger.info(
        f"Image optimization complete: {result.derivative_count} derivatives "
        f"for {len(result.derivatives)} sources "
        f"({len(result.skipped)} skipped) in {result.elapsed_seconds:.2f}s"
    )
    logger.debug(timing.summary())
    return result


def _generate_parallel(
    sources: List[SourceImage],
    config: GeneratorConfig,
    result: GenerationResult,
) -> None:
    """Process sources on a thread pool, stopping at the first failure."""
    with ThreadPoolExecutor(max_workers=config.workers) as executor:
        futures: Dict[Future, SourceImage] = {
            executor.submit(generate_for_source, source, config, result.timing): source
            for source in sources
        }
        done, not_done = wait(futures, return_when=FIRST_EXCEPTION)
        for future in not_done:
            future.cancel()
        failed = [f for f in done if not f.cancelled() and f.exception() is not None]
        if failed:
            # Sources already running finish before the pool shuts down
            wait(not_done)
            raise failed[0].exception()
        # Record in discovery order, not completion order
        for future, source in futures.items():
            _record(result, source, future.result(), config.source_root)


def _record(
    result: GenerationResult,
    source: SourceImage,
    written: List[Path],
    root: Path,
) -> None:
    result.derivatives[source.path] = written
    logger.info(f"Processed: {_relative(source.path, root)} ({len(written)} derivatives)")


def _relative(path: Path, root: Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return str(path)


def verify_derivatives(
    root: Path,
    policy: Optional[BreakpointPolicy] = None,
) -> List[Path]:
    """
    List derivative paths the loader could request that do not exist.

    Every source must have every tier/density name in each of its output
    formats. An empty list means the tree satisfies the naming contract.

    Raises:
        FileNotFoundError: If root does not exist.
        GenerationError: If two sources share a derivative name.
    """
    policy = policy or BreakpointPolicy()
    sources = discover_sources(root, policy)
    check_derivative_collisions(sources, policy)
    missing: List[Path] = []
    for source in sources:
        for name in derivative_names(source.base, source.ext, policy, source.formats):
            path = Path(name)
            if not path.exists():
                missing.append(path)
    if missing:
        logger.warning(f"{len(missing)} derivatives missing under {root}")
    return missing
