"""
Core Package

The contract shared by the offline generator and the runtime loader.

Everything that decides *which file name* a derivative has lives here, so
the two subsystems cannot drift apart:

| Concern | Module |
|---------|--------|
| Viewport tiers, density rule | `breakpoints` |
| Derivative file names | `naming` |
| Sources, derivatives, candidate sets, viewport | `models` |
| Error taxonomy | `errors` |
"""

from .breakpoints import DEFAULT_TIERS, BreakpointPolicy, Density, Tier
from .errors import (
    AdaptiveImagesError,
    GenerationError,
    ManifestValidationError,
    MissingSourceError,
    PlaceholderStateError,
    UnsupportedFormatError,
)
from .models import CandidateEntry, CandidateSet, DerivativeSpec, SourceImage, ViewportContext
from .naming import (
    WEBP_FORMAT,
    DerivativeName,
    derivative_name,
    derivative_names,
    is_derivative_path,
    output_formats,
    parse_derivative_name,
    split_source,
)

__all__ = [
    "AdaptiveImagesError",
    "BreakpointPolicy",
    "CandidateEntry",
    "CandidateSet",
    "DEFAULT_TIERS",
    "Density",
    "DerivativeName",
    "DerivativeSpec",
    "GenerationError",
    "ManifestValidationError",
    "MissingSourceError",
    "PlaceholderStateError",
    "SourceImage",
    "Tier",
    "UnsupportedFormatError",
    "ViewportContext",
    "WEBP_FORMAT",
    "derivative_name",
    "derivative_names",
    "is_derivative_path",
    "output_formats",
    "parse_derivative_name",
    "split_source",
]
