"""
Module: generator.writer

Purpose:
    Writes derivatives to disk. Every write goes to a hidden temp file in
    the destination directory and is then moved into place, so a crash
    never leaves a truncated derivative behind and re-runs simply replace
    the previous output.

Key Functions:
    - save_derivative(): Encode an image in the requested format
    - copy_derivative(): Identity copy (GIF sources)
    - encoder_options(): Pillow save() keyword arguments per format

Dependencies:
    - PIL.Image: Image saving
    - generator.config: Quality and encoder settings

Used By:
    - generator.pipeline: Per-derivative output step
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict

from PIL import Image

from .config import GeneratorConfig
from .resize import prepare_mode

logger = logging.getLogger(__name__)

DERIVATIVE_MODE = 0o644

# Pillow format identifiers per file extension
PIL_FORMATS = {
    "jpg": "JPEG",
    "jpeg": "JPEG",
    "png": "PNG",
    "webp": "WEBP",
    "gif": "GIF",
}


def encoder_options(fmt: str, config: GeneratorConfig) -> Dict[str, Any]:
    """
    Build Pillow save() options for a format.

    JPEG gets quality, optimize and progressive; PNG is lossless so only
    optimize applies; WebP gets quality and the encoder method.

    Example:
        >>> encoder_options("jpg", GeneratorConfig(Path(".")))
        {'format': 'JPEG', 'quality': 80, 'optimize': True, 'progressive': True}
    """
    fmt = fmt.lower()
    if fmt not in PIL_FORMATS:
        raise ValueError(f"No encoder for format: {fmt}")
    options: Dict[str, Any] = {"format": PIL_FORMATS[fmt]}
    if options["format"] == "JPEG":
        options.update(
            quality=config.quality,
            optimize=True,
            progressive=config.progressive,
        )
    elif options["format"] == "PNG":
        options.update(optimize=True)
    elif options["format"] == "WEBP":
        options.update(quality=config.quality, method=config.webp_method)
    return options


def save_derivative(
    image: Image.Image,
    path: Path,
    fmt: str,
    config: GeneratorConfig,
) -> Path:
    """
    Encode image to path in the given format.

    Metadata (EXIF, ICC, timestamps) is not carried over, so identical
    input always produces identical bytes.

    Args:
        image: Resized image.
        path: Destination derivative path.
        fmt: Output format ("jpg", "png", "webp", ...).
        config: Encoder settings.

    Returns:
        The destination path.
    """
    options = encoder_options(fmt, config)
    encoded = prepare_mode(image, fmt)
    _atomic_write(path, lambda f: encoded.save(f, **options))
    logger.debug(f"Wrote {path.name} ({encoded.width}x{encoded.height})")
    return path


def copy_derivative(source: Path, path: Path) -> Path:
    """Copy source bytes unchanged to path."""
    def _copy(f) -> None:
        with open(source, "rb") as src:
            shutil.copyfileobj(src, f)

    _atomic_write(path, _copy)
    logger.debug(f"Copied {source.name} -> {path.name}")
    return path


def _atomic_write(path: Path, write) -> None:
    """Run write(file) against a temp file, then move it onto path."""
    path.parent.mkdir(parents=True, exist_ok=True)

    with tempfile.NamedTemporaryFile(
        mode="wb",
        prefix=".",
        suffix=".part",
        dir=path.parent,
        delete=False,
    ) as f:
        temp_path = Path(f.name)
        try:
            write(f)
        except BaseException:
            f.close()
            temp_path.unlink(missing_ok=True)
            raise

    # Temp files are created 0600; derivatives are served as static assets
    temp_path.chmod(DERIVATIVE_MODE)
    # Use replace() instead of rename() for Windows compatibility
    temp_path.replace(path)
