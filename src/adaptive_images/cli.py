"""Command-line entry point for adaptive-images."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

from adaptive_images.core.errors import GenerationError, ManifestValidationError
from adaptive_images.core.models import ViewportContext
from adaptive_images.generator import GeneratorConfig, generate_derivatives, verify_derivatives
from adaptive_images.generator.config import FIT_EDGES
from adaptive_images.loader.capabilities import CapabilityCache
from adaptive_images.loader.resolver import resolve_optimal_source

logger = logging.getLogger("adaptive_images.cli")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )


def _add_generate_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("root", type=Path, help="Directory of source images")
    parser.add_argument(
        "--quality",
        type=int,
        default=80,
        help="Compression quality for JPEG and WebP output (default: 80)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Number of sources processed in parallel (default: 1)",
    )
    parser.add_argument(
        "--fit-edge",
        choices=FIT_EDGES,
        default="long",
        help="Edge bounded by the tier width: the longest edge or only the width",
    )
    parser.add_argument(
        "--no-progressive",
        action="store_true",
        help="Disable progressive JPEG encoding",
    )
    parser.add_argument(
        "--skip-existing",
        action="store_true",
        help="Leave sources whose derivatives already exist untouched",
    )
    parser.add_argument(
        "--no-manifest",
        action="store_true",
        help="Do not write derivatives.json build metadata",
    )


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Generate and verify responsive image derivatives.",
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate", parents=[common], help="Write every tier/density/format derivative under a directory"
    )
    _add_generate_arguments(generate_parser)

    verify_parser = subparsers.add_parser(
        "verify", parents=[common], help="Report derivatives the loader could request that are missing"
    )
    verify_parser.add_argument("root", type=Path, help="Directory of source images")

    resolve_parser = subparsers.add_parser(
        "resolve", parents=[common], help="Print the derivative the loader would request for a viewport"
    )
    resolve_parser.add_argument("src", help="Source reference, e.g. assets/hero.jpg")
    resolve_parser.add_argument("--width", type=float, required=True, help="Viewport width")
    resolve_parser.add_argument("--dpr", type=float, default=1.0, help="Device pixel ratio")
    webp = resolve_parser.add_mutually_exclusive_group()
    webp.add_argument(
        "--webp", dest="webp", action="store_true", default=None,
        help="Assume WebP support (default: probe with Pillow)",
    )
    webp.add_argument(
        "--no-webp", dest="webp", action="store_false", default=None,
        help="Assume no WebP support",
    )

    return parser.parse_args(argv)


def _run_generate(args: argparse.Namespace) -> int:
    try:
        config = GeneratorConfig(
            source_root=args.root.resolve(),
            quality=args.quality,
            progressive=not args.no_progressive,
            fit_edge=args.fit_edge,
            workers=args.workers,
            skip_existing=args.skip_existing,
            write_manifest=not args.no_manifest,
        )
    except ValueError as exc:
        logger.error(f"Invalid configuration: {exc}")
        return 2

    try:
        result = generate_derivatives(config)
    except FileNotFoundError as exc:
        logger.error(str(exc))
        return 1
    except (GenerationError, ManifestValidationError) as exc:
        logger.error(f"Error optimizing images: {exc}")
        return 1

    if result.manifest_path:
        logger.info(f"Build metadata: {result.manifest_path}")
    return 0


def _run_verify(args: argparse.Namespace) -> int:
    try:
        missing = verify_derivatives(args.root.resolve())
    except (FileNotFoundError, GenerationError) as exc:
        logger.error(str(exc))
        return 1
    for path in missing:
        sys.stdout.write(f"{path}\n")
    if missing:
        return 1
    logger.info("All derivatives present")
    return 0


def _run_resolve(args: argparse.Namespace) -> int:
    webp = args.webp if args.webp is not None else CapabilityCache().webp
    try:
        viewport = ViewportContext(width=args.width, pixel_ratio=args.dpr)
    except ValueError as exc:
        logger.error(str(exc))
        return 2
    path = resolve_optimal_source(args.src, viewport, webp)
    if path is None:
        logger.error(f"No usable source reference: {args.src!r}")
        return 1
    sys.stdout.write(f"{path}\n")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    _configure_logging(args.verbose)
    if args.command == "generate":
        return _run_generate(args)
    if args.command == "verify":
        return _run_verify(args)
    return _run_resolve(args)


if __name__ == "__main__":
    raise SystemExit(main())
