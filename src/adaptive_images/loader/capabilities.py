"""
Module: loader.capabilities

Purpose:
    Runtime feature detection for the loader: WebP support and the
    availability of visibility observation. Both are probed once and
    cached for the lifetime of the loader; a missing feature is a normal
    outcome with a fallback, never an exception.

Key Functions:
    - probe_webp_support(): Encode-and-inspect WebP probe
    - looks_like_webp(): Inspect encoded bytes or a data URL
    - pillow_webp_encoder(): Default encoder for Python hosts

Key Classes:
    - CapabilityCache: Lazily computed, cached WebP support flag
    - Capabilities: Snapshot of runtime features for the loader

Dependencies:
    - PIL: Default WebP encoder

Used By:
    - loader.loader: Strategy selection and format choice
    - cli: `resolve` command auto-detection
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Callable, Optional, Union

from PIL import Image

logger = logging.getLogger(__name__)

WEBP_DATA_URL_PREFIX = "data:image/webp"

# Returns encoded bytes, or a data URL as produced by canvas.toDataURL()
WebPEncoder = Callable[[], Union[bytes, str, None]]


def pillow_webp_encoder() -> bytes:
    """Encode a 1x1 image to WebP with Pillow."""
    buffer = io.BytesIO()
    Image.new("RGB", (1, 1), (255, 255, 255)).save(buffer, format="WEBP")
    return buffer.getvalue()


def looks_like_webp(payload: Union[bytes, str, None]) -> bool:
    """
    True when payload is a WebP data URL or carries the RIFF/WEBP header.

    A runtime that cannot encode WebP silently falls back to another
    format (browsers return a PNG data URL), so the output has to be
    inspected rather than trusted.

    Example:
        >>> looks_like_webp("data:image/png;base64,iVBOR")
        False
    """
    if payload is None:
        return False
    if isinstance(payload, str):
        return payload.startswith(WEBP_DATA_URL_PREFIX)
    return len(payload) >= 12 and payload[:4] == b"RIFF" and payload[8:12] == b"WEBP"


def probe_webp_support(encode: Optional[WebPEncoder] = None) -> bool:
    """
    Probe whether the runtime can encode WebP.

    Args:
        encode: Encoder to probe. Defaults to Pillow.

    Returns:
        True only if the encoder produced WebP output. Any exception from
        the encoder counts as unsupported.
    """
    encode = encode or pillow_webp_encoder
    try:
        payload = encode()
    except Exception as exc:
        logger.debug(f"WebP probe failed, treating as unsupported: {exc}")
        return False
    return looks_like_webp(payload)


class CapabilityCache:
    """
    Computes WebP support once and returns the cached answer afterwards.

    Capability does not change during a session, so there is no
    invalidation.

    Example:
        >>> cache = CapabilityCache(lambda: "data:image/webp;base64,UklG")
        >>> cache.webp
        True
    """

    def __init__(self, encode: Optional[WebPEncoder] = None):
        self._encode = encode
        self._webp: Optional[bool] = None

    @property
    def webp(self) -> bool:
        if self._webp is None:
            self._webp = probe_webp_support(self._encode)
            logger.debug(f"WebP support detected: {self._webp}")
        return self._webp


@dataclass(frozen=True)
class Capabilities:
    """
    Runtime features consumed by the loader.

    Attributes:
        webp: The runtime can decode/encode WebP.
        visibility_observer: The runtime can report viewport intersection.
    """
    webp: bool
    visibility_observer: bool

    @classmethod
    def detect(
        cls,
        *,
        visibility_observer: bool,
        cache: Optional[CapabilityCache] = None,
    ) -> "Capabilities":
        cache = cache or CapabilityCache()
        return cls(webp=cache.webp, visibility_observer=visibility_observer)
