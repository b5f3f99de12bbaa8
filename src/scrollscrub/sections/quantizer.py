"""
Progress Quantizer
==================

Maps continuous scroll progress onto discrete content sections.

Breakpoints are ascending and half-open on the lower side:

    [0, 0.18) -> 0
    [0.18, 0.36) -> 1
    [0.36, 0.54) -> 2
    [0.54, 0.72) -> 3
    [0.72, 0.88) -> 4
    [0.88, ...) -> 5

Values below 0 fall into the first section and values above 1 into the
last, so every real progress maps to exactly one section.
"""

import bisect
import logging
from typing import Callable, Sequence, Tuple

from scrollscrub.observability.observable import ObservableValue


logger = logging.getLogger(__name__)


SECTION_BREAKPOINTS: Tuple[float, ...] = (0.18, 0.36, 0.54, 0.72, 0.88)
SECTION_COUNT = len(SECTION_BREAKPOINTS) + 1


def validate_breakpoints(breakpoints: Sequence[float]) -> Tuple[float, ...]:
    """
    Check that breakpoints are strictly ascending within (0, 1].

    Returns:
        The breakpoints as a tuple

    Raises:
        ValueError: If the sequence is empty, unordered or out of range
    """
    points = tuple(float(p) for p in breakpoints)
    if not points:
        raise ValueError("at least one breakpoint is required")
    for lower, upper in zip(points, points[1:]):
        if upper <= lower:
            raise ValueError(f"breakpoints must be strictly ascending: {points}")
    if points[0] <= 0 or points[-1] > 1:
        raise ValueError(f"breakpoints must lie in (0, 1]: {points}")
    return points


def section_for(
    progress: float,
    breakpoints: Sequence[float] = SECTION_BREAKPOINTS,
) -> int:
    """
    Return the section index for a scroll progress value.

    Args:
        progress: Smoothed scroll progress, nominally in [0, 1]
        breakpoints: Ascending lower bounds of sections 1..S-1

    Returns:
        Section index in [0, len(breakpoints)]
    """
    return bisect.bisect_right(breakpoints, progress)


class SectionTracker:
    """
    Remembers the last emitted section and notifies on change.

    The section itself is a pure function of progress; the tracker only
    exists so consumers can compare other sections against the active one.

    Example:
        tracker = SectionTracker()
        tracker.subscribe(lambda section: print("now in", section))
        tracker.update(0.4)   # prints "now in 2"
        tracker.update(0.41)  # no change, no notification
    """

    def __init__(self, breakpoints: Sequence[float] = SECTION_BREAKPOINTS) -> None:
        self.breakpoints = validate_breakpoints(breakpoints)
        self.active_section: ObservableValue[int] = ObservableValue("active_section", 0)

    @property
    def active(self) -> int:
        """Last emitted section index."""
        return self.active_section.value

    @property
    def section_count(self) -> int:
        return len(self.breakpoints) + 1

    @property
    def change_count(self) -> int:
        return self.active_section.publish_count

    def subscribe(self, observer: Callable[[int], None]) -> Callable[[], None]:
        """Register an observer for section changes."""
        return self.active_section.subscribe(observer)

    def update(self, progress: float) -> int:
        """Quantize progress, store it as the active section, and notify on change."""
        section = section_for(progress, self.breakpoints)
        previous = self.active_section.value
        if self.active_section.publish(section):
            logger.debug(f"Section changed: {previous} -> {section} (progress={progress:.3f})")
        return section
