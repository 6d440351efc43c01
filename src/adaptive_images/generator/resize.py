"""
Module: generator.resize

Purpose:
    "Fit inside, never enlarge" resizing for derivative generation.

Key Functions:
    - fit_inside(): Compute the bounded output size
    - resize_image(): Pillow resize to a bounded size
    - prepare_mode(): Convert modes an encoder cannot store

Dependencies:
    - PIL: Image manipulation

Used By:
    - generator.pipeline: One resize per (tier, density)
"""

from __future__ import annotations

from typing import Tuple

from PIL import Image


def fit_inside(
    size: Tuple[int, int],
    target_width: int,
    fit_edge: str = "long",
) -> Tuple[int, int]:
    """
    Compute the output size for a derivative.

    The bounded edge (the longest edge, or only the width) is reduced to
    target_width when it is larger; images already within bounds keep
    their native size. Aspect ratio is preserved and neither dimension
    drops below one pixel.

    Args:
        size: Source (width, height).
        target_width: Bound for the constrained edge.
        fit_edge: "long" or "width".

    Returns:
        Output (width, height).

    Example:
        >>> fit_inside((1920, 1080), 480)
        (480, 270)
        >>> fit_inside((300, 200), 480)  # never upscaled
        (300, 200)
        >>> fit_inside((1000, 2000), 480)
        (240, 480)
    """
    width, height = size
    if width <= 0 or height <= 0:
        raise ValueError(f"Invalid image size: {size}")
    if target_width <= 0:
        raise ValueError(f"target_width must be > 0: {target_width}")

    edge = max(width, height) if fit_edge == "long" else width
    if edge <= target_width:
        return width, height

    scale = target_width / edge
    return max(1, round(width * scale)), max(1, round(height * scale))


def resize_image(image: Image.Image, size: Tuple[int, int]) -> Image.Image:
    """
    Resize to size with LANCZOS filtering.

    Returns a copy when size already matches so callers can always
    mutate the result.
    """
    if image.size == size:
        return image.copy()
    if image.mode in ("1", "P"):
        # Palette images only support nearest-neighbour resampling
        has_alpha = "transparency" in image.info
        image = image.convert("RGBA" if has_alpha else "RGB")
    return image.resize(size, Image.Resampling.LANCZOS)


def prepare_mode(image: Image.Image, fmt: str) -> Image.Image:
    """
    Convert image to a mode the target format can encode.

    JPEG has no alpha channel, so transparent pixels are flattened onto
    white. WebP stores RGB or RGBA only. PNG accepts the source mode as-is
    apart from exotic high bit-depth modes.
    """
    fmt = fmt.lower()
    if fmt in ("jpg", "jpeg"):
        if image.mode in ("RGBA", "LA", "P", "PA"):
            rgba = image.convert("RGBA")
            background = Image.new("RGB", rgba.size, (255, 255, 255))
            background.paste(rgba, mask=rgba.split()[-1])
            return background
        if image.mode not in ("RGB", "L", "CMYK"):
            return image.convert("RGB")
        return image
    if fmt == "webp":
        if image.mode in ("RGBA", "RGB"):
            return image
        has_alpha = image.mode in ("LA", "PA") or (
            image.mode == "P" and "transparency" in image.info
        )
        return image.convert("RGBA" if has_alpha else "RGB")
    if fmt == "png" and image.mode in ("I;16", "I", "F"):
        return image.convert("RGB")
    return image
