"""
Module: core.errors

Purpose:
    Exception taxonomy shared by the generator and the loader.

Key Classes:
    - AdaptiveImagesError: Base class for all package errors
    - MissingSourceError: No usable source reference
    - UnsupportedFormatError: Extension outside the supported set
    - GenerationError: Resize/encode/copy failure (fatal to a build)
    - PlaceholderStateError: Forbidden placeholder lifecycle transition
    - ManifestValidationError: Build metadata failed schema validation

Used By:
    - core.naming: MissingSourceError on extension-less paths
    - generator.pipeline: GenerationError wraps every per-source failure
    - generator.manifest: ManifestValidationError
    - loader.placeholder: PlaceholderStateError
    - cli: Maps GenerationError to a non-zero exit status

Notes:
    A missing browser capability (no visibility observer, no WebP) is an
    expected condition with a fallback path and has no exception type.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional


class AdaptiveImagesError(Exception):
    """Base class for adaptive-images errors."""


class MissingSourceError(AdaptiveImagesError):
    """Raised when a source reference is empty or has no file extension."""


class UnsupportedFormatError(AdaptiveImagesError):
    """Raised when a source extension is outside the supported set."""

    def __init__(self, path: Path | str, extension: str):
        super().__init__(f"Unsupported image format '{extension}': {path}")
        self.path = Path(path)
        self.extension = extension


class GenerationError(AdaptiveImagesError):
    """
    Raised when a source image cannot be turned into its derivatives.

    The whole batch aborts on the first GenerationError: a partial
    derivative set cannot be told apart from "not generated yet" at
    runtime.

    Attributes:
        source: Source image path that failed.
        target: Derivative being written when the failure happened, if known.
    """

    def __init__(self, source: Path, message: str, target: Optional[Path] = None):
        detail = f"{source}: {message}"
        if target is not None:
            detail += f" (while writing {target.name})"
        super().__init__(detail)
        self.source = source
        self.target = target


class PlaceholderStateError(AdaptiveImagesError):
    """Raised on a lifecycle transition the placeholder state machine forbids."""


class ManifestValidationError(AdaptiveImagesError):
    """Raised when build metadata fails schema validation."""

    def __init__(self, message: str, errors: List[str] | None = None):
        super().__init__(message)
        self.errors = errors or []
