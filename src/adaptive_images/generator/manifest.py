"""
Module: generator.manifest

Purpose:
    Minimal build metadata written next to the sources after a successful
    run: the tier table, encoder quality and the derivative names of every
    source. Contains no timestamps, so re-running over an unchanged tree
    rewrites an identical file.

Key Functions:
    - build_manifest_record(): Assemble the metadata dictionary
    - write_manifest(): Validate and write under an exclusive lock
    - load_manifest(): Read under a shared lock
    - locked_file(): Context manager for locked file access

Dependencies:
    - portalocker: Cross-platform file locking
    - core.schemas: JSON schema validation

Used By:
    - generator.pipeline: Final step of generate_derivatives()
"""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Generator, Iterable

import portalocker

from adaptive_images.core.models import SourceImage
from adaptive_images.core.schemas import MANIFEST_SCHEMA_VERSION, validate_manifest
from .config import GeneratorConfig
from .pipeline import plan_derivatives

logger = logging.getLogger(__name__)


@contextmanager
def locked_file(
    path: Path,
    mode: str = 'r',
    lock_type: int = portalocker.LOCK_EX,
) -> Generator:
    """
    Context manager for cross-platform locked file access.

    Args:
        path: Path to file.
        mode: File open mode ('r', 'r+', 'a', etc.).
        lock_type: Lock type (LOCK_EX for exclusive, LOCK_SH for shared).

    Yields:
        Open file handle with lock held.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    # Ensure file exists for read modes
    if 'r' in mode and not path.exists():
        path.touch()

    with open(path, mode, encoding='utf-8') as f:
        portalocker.lock(f, lock_type)
        try:
            yield f
        finally:
            portalocker.unlock(f)


def build_manifest_record(
    sources: Iterable[SourceImage],
    config: GeneratorConfig,
) -> Dict[str, Any]:
    """
    Build the metadata dictionary for a run.

    Paths are POSIX and relative to the source root so the file is
    portable between machines.
    """
    root = config.source_root
    entries: Dict[str, Dict[str, Any]] = {}
    for source in sources:
        specs = plan_derivatives(source, config.policy)
        entries[source.path.relative_to(root).as_posix()] = {
            "derivatives": [spec.path.relative_to(root).as_posix() for spec in specs],
            "copied": not source.transcodable,
        }

    return {
        "schema_version": MANIFEST_SCHEMA_VERSION,
        "quality": config.quality,
        "fit_edge": config.fit_edge,
        "tiers": [
            {
                "name": tier.name,
                "max_width": tier.max_width,
                "target_width": tier.target_width,
            }
            for tier in config.policy.tiers
        ],
        "sources": entries,
        "source_count": len(entries),
        "derivative_count": sum(len(e["derivatives"]) for e in entries.values()),
    }


def write_manifest(path: Path, record: Dict[str, Any]) -> Path:
    """
    Validate record and write it to path under an exclusive lock.

    Raises:
        ManifestValidationError: If record does not match the schema.
    """
    validate_manifest(record)
    with locked_file(path, 'r+', portalocker.LOCK_EX) as f:
        f.seek(0)
        f.truncate()
        json.dump(record, f, indent=2, sort_keys=True, ensure_ascii=False)
        f.write("\n")
    logger.debug(f"Wrote build manifest to {path}")
    return path


def load_manifest(path: Path) -> Dict[str, Any]:
    """
    Read and validate a manifest written by write_manifest().

    Raises:
        FileNotFoundError: If path does not exist.
        ManifestValidationError: If the content does not match the schema.
    """
    if not path.exists():
        raise FileNotFoundError(f"Manifest not found: {path}")
    with locked_file(path, 'r', portalocker.LOCK_SH) as f:
        data = json.load(f)
    validate_manifest(data)
    return data
