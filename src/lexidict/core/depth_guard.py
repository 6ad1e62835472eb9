"""Depth limiting for recursive module parsing.

Every `mod name;` declaration parses another source file in a nested call.
DepthGuard bounds that nesting so a resolver that keeps producing fresh
modules cannot exhaust the Python stack.

Python 3.13+.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field

from lexidict.constants import MAX_DEPTH
from lexidict.diagnostics import ModuleResolutionError
from lexidict.diagnostics.templates import ErrorTemplate

__all__ = ["DepthGuard", "DepthLimitExceededError", "depth_clamp"]

logger = logging.getLogger(__name__)


class DepthLimitExceededError(ModuleResolutionError):
    """Raised when module nesting exceeds the configured depth."""


@dataclass(slots=True)
class DepthGuard:
    """Context manager for tracking and limiting recursion depth.

    Usage:
        guard = DepthGuard(max_depth=config.max_module_depth)
        with guard:
            module_items = self._parse_module_file(resolved)

    Intentionally mutable: current_depth is incremented on __enter__ and
    decremented on __exit__.

    Attributes:
        max_depth: Maximum allowed depth (default: MAX_DEPTH)
        current_depth: Current recursion depth
    """

    max_depth: int = MAX_DEPTH
    current_depth: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        """Clamp max_depth against Python recursion limit."""
        self.max_depth = depth_clamp(self.max_depth)

    def __enter__(self) -> DepthGuard:
        """Enter guarded section, increment depth.

        The limit is checked BEFORE incrementing: __exit__ is not called when
        __enter__ raises, so incrementing first would leave the guard elevated.
        """
        self.check()
        self.current_depth += 1
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Exit guarded section, decrement depth."""
        self.current_depth -= 1

    @property
    def depth(self) -> int:
        """Current depth (alias for current_depth)."""
        return self.current_depth

    def is_exceeded(self) -> bool:
        """Check if depth limit has been reached."""
        return self.current_depth >= self.max_depth

    def check(self) -> None:
        """Raise if the depth limit has been reached.

        Raises:
            DepthLimitExceededError: If depth limit exceeded
        """
        if self.is_exceeded():
            raise DepthLimitExceededError(
                ErrorTemplate.module_depth_exceeded(self.max_depth)
            )


def depth_clamp(requested_depth: int, reserve_frames: int = 50) -> int:
    """Clamp requested depth against Python recursion limit.

    Each module level costs several parser frames, so the usable depth is
    the recursion limit divided by a per-level estimate, minus a reserve.

    Args:
        requested_depth: Desired maximum depth
        reserve_frames: Stack frames to reserve for call overhead (default: 50)

    Returns:
        Safe depth value, clamped if necessary
    """
    frames_per_level = 8
    max_safe_depth = max(1, (sys.getrecursionlimit() - reserve_frames) // frames_per_level)
    if requested_depth > max_safe_depth:
        logger.warning(
            "Requested module depth %d exceeds what the Python recursion limit (%d) "
            "allows. Clamping to %d to prevent RecursionError.",
            requested_depth,
            sys.getrecursionlimit(),
            max_safe_depth,
        )
        return max_safe_depth
    return requested_depth
