"""Depth limiting for recursive grammars.

Recursive grammars (see :mod:`combparse.recursive`) recurse on the Python
call stack once per nesting level of the input. The depth counter lives in
the immutable :class:`~combparse.context.ParseContext`; this module clamps
the configured limit against the interpreter recursion limit and raises
when a parse nests too deeply.

Thread-safe: uses explicit state, no thread-local storage.
Python 3.13+.
"""

from __future__ import annotations

import logging
import sys

from combparse.constants import DEPTH_RESERVE_FRAMES
from combparse.diagnostics import DepthLimitExceededError, ErrorTemplate

__all__ = ["depth_clamp", "raise_depth_exceeded"]

logger = logging.getLogger(__name__)

# Python frames consumed per nesting level of a typical recursive grammar
# (deferred parser -> choice -> sequence -> repetition -> deferred parser).
_FRAMES_PER_LEVEL: int = 16


def depth_clamp(
    requested_depth: int,
    reserve_frames: int = DEPTH_RESERVE_FRAMES,
    frames_per_level: int = _FRAMES_PER_LEVEL,
) -> int:
    """Clamp requested depth against Python recursion limit.

    Validates requested depth against sys.getrecursionlimit() to prevent
    RecursionError on systems with constrained stack limits. Logs warning
    if clamping occurs.

    Args:
        requested_depth: Desired maximum depth
        reserve_frames: Stack frames to reserve for call overhead (default: 50)
        frames_per_level: Stack frames one nesting level is expected to use

    Returns:
        Safe depth value, clamped if necessary

    Example:
        >>> import sys
        >>> sys.setrecursionlimit(1000)
        >>> depth_clamp(50)  # OK, within limit
        50
        >>> depth_clamp(500)  # Exceeds limit, clamped to 59
        59
    """
    max_safe_depth = max(1, (sys.getrecursionlimit() - reserve_frames) // frames_per_level)
    if requested_depth > max_safe_depth:
        logger.warning(
            "Requested depth %d exceeds Python recursion limit (%d). "
            "Clamping to %d to prevent RecursionError. "
            "Consider increasing sys.setrecursionlimit() if needed.",
            requested_depth,
            sys.getrecursionlimit(),
            max_safe_depth,
        )
        return max_safe_depth
    return requested_depth


def raise_depth_exceeded(max_depth: int) -> None:
    """Raise DepthLimitExceededError for the given limit.

    Raises:
        DepthLimitExceededError: Always
    """
    logger.debug("Recursive parser depth limit %d reached", max_depth)
    raise DepthLimitExceededError(ErrorTemplate.depth_exceeded(max_depth))
