"""
Module: loader.preparer

Purpose:
    Annotates a placeholder with its candidate set and sizes hint and
    strips any eager source so nothing is fetched until the loader
    triggers it.
"""

from __future__ import annotations

import logging
from typing import Optional

from adaptive_images.core.breakpoints import BreakpointPolicy
from adaptive_images.core.errors import MissingSourceError
from .placeholder import DATA_SRC, DATA_SRCSET, SIZES, SRC, Placeholder, PlaceholderState
from .resolver import build_candidate_set, sizes_hint

logger = logging.getLogger(__name__)


def prepare_placeholder(
    placeholder: Placeholder,
    policy: Optional[BreakpointPolicy] = None,
) -> bool:
    """
    Prepare a placeholder for deferred loading.

    Takes the source from ``src`` or, failing that, ``data-src``; writes
    ``data-src``, ``data-srcset`` and ``sizes``; removes ``src``.

    Args:
        placeholder: Placeholder to prepare.
        policy: Breakpoint policy for the candidate set.

    Returns:
        True if the placeholder is prepared (including when it already
        was), False if it has no usable source or is already loading.
    """
    if placeholder.state is PlaceholderState.PREPARED:
        return True
    if placeholder.state is not PlaceholderState.UNPREPARED:
        return False

    base_src = placeholder.get_attribute(SRC) or placeholder.get_attribute(DATA_SRC)
    try:
        candidates = build_candidate_set(base_src or "", policy)
    except MissingSourceError as exc:
        logger.debug(f"Skipping {placeholder!r}: {exc}")
        return False

    placeholder.set_attribute(DATA_SRC, base_src)
    placeholder.set_attribute(DATA_SRCSET, candidates.to_srcset())
    placeholder.set_attribute(SIZES, sizes_hint(policy))
    placeholder.remove_attribute(SRC)
    placeholder.base_source = base_src
    placeholder.transition(PlaceholderState.PREPARED)
    return True
