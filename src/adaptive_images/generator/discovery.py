"""
Module: generator.discovery

Purpose:
    Locates source images under a root directory. Derivatives produced by
    earlier runs carry a tier suffix and are never treated as sources.

Key Functions:
    - discover_sources(): Sorted list of SourceImage under a root
    - is_supported(): Extension check
    - as_source(): Validated SourceImage construction

Used By:
    - generator.pipeline: Builds the work list
    - generator.pipeline.verify_derivatives: Contract check
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from adaptive_images.core.breakpoints import BreakpointPolicy
from adaptive_images.core.errors import UnsupportedFormatError
from adaptive_images.core.models import SourceImage
from adaptive_images.core.naming import is_derivative_path

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "webp", "gif"})


def is_supported(path: Path) -> bool:
    """True for extensions the generator can process (case-insensitive)."""
    return path.suffix[1:].lower() in SUPPORTED_EXTENSIONS


def as_source(path: Path) -> SourceImage:
    """
    Wrap path as a SourceImage.

    Raises:
        UnsupportedFormatError: If the extension is outside SUPPORTED_EXTENSIONS.
    """
    if not is_supported(path):
        raise UnsupportedFormatError(path, path.suffix[1:])
    return SourceImage(path)


def _is_hidden(path: Path, root: Path) -> bool:
    return any(part.startswith(".") for part in path.relative_to(root).parts)


def discover_sources(
    root: Path,
    policy: Optional[BreakpointPolicy] = None,
) -> List[SourceImage]:
    """
    Find every source image under root.

    Skips hidden files and directories, unsupported extensions and files
    that already carry a tier suffix. Results are sorted so runs are
    deterministic.

    Args:
        root: Directory to scan recursively.
        policy: Breakpoint policy whose tier names mark derivatives.

    Returns:
        List of SourceImage sorted by path.

    Raises:
        FileNotFoundError: If root does not exist or is not a directory.

    Example:
        >>> [s.path.name for s in discover_sources(Path("assets"))]
        ['hero.jpg', 'loader.gif']
    """
    policy = policy or BreakpointPolicy()
    if not root.is_dir():
        raise FileNotFoundError(f"Source directory not found: {root}")

    sources: List[SourceImage] = []
    for path in sorted(root.rglob("*")):
        if not path.is_file() or _is_hidden(path, root):
            continue
        if is_derivative_path(path, policy):
            continue
        try:
            sources.append(as_source(path))
        except UnsupportedFormatError as exc:
            logger.debug(f"Skipping {path.relative_to(root)}: {exc}")

    logger.debug(f"Discovered {len(sources)} source images under {root}")
    return sources
