"""
Module: generator

Purpose:
    Offline derivative generation. Turns every source image under a root
    directory into the full tier x density x format derivative set that
    the loader can request.

Key Functions:
    - generate_derivatives(): Main entry point for a batch run
    - verify_derivatives(): Missing derivative paths under a root
    - discover_sources(): Source images under a root

Key Classes:
    - GeneratorConfig: Configuration for a run
    - GenerationResult: Container for run output

Dependencies:
    - PIL: Image decoding, resizing and encoding
    - portalocker: Locked build metadata writes
    - adaptive_images.core: Naming scheme and breakpoint policy

Used By:
    - adaptive_images.cli: `generate` and `verify` commands
"""

from .config import GeneratorConfig
from .discovery import SUPPORTED_EXTENSIONS, discover_sources
from .pipeline import (
    GenerationResult,
    check_derivative_collisions,
    generate_derivatives,
    generate_for_source,
    plan_derivatives,
    verify_derivatives,
)

__all__ = [
    "GenerationResult",
    "GeneratorConfig",
    "SUPPORTED_EXTENSIONS",
    "check_derivative_collisions",
    "discover_sources",
    "generate_derivatives",
    "generate_for_source",
    "plan_derivatives",
    "verify_derivatives",
]
