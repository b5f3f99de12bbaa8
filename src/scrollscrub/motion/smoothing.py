"""
Exponential Smoothing
=====================

First-order IIR smoothing used by the motion loop.

Each step closes a fixed fraction of the remaining gap:

    current = current + (target - current) * alpha

After k steps from `start` toward a constant `target`:

    current_k = target - (target - start) * (1 - alpha) ** k

so the output converges exponentially, never overshoots for alpha in
(0, 1], and keeps moving smoothly even when the target jumps.
"""

import math


SCROLL_ALPHA = 0.08
FRAME_ALPHA = 0.12


def validate_alpha(alpha: float) -> float:
    if not 0 < alpha <= 1:
        raise ValueError("alpha must be in (0, 1]")
    return alpha


def approach(current: float, target: float, alpha: float) -> float:
    """One smoothing step from current toward target."""
    return current + (target - current) * alpha


def closed_form(start: float, target: float, alpha: float, steps: int) -> float:
    """Value after `steps` smoothing steps toward a constant target."""
    return target - (target - start) * (1 - alpha) ** steps


def steps_to_within(gap: float, tolerance: float, alpha: float) -> int:
    """
    Number of steps until a gap of `gap` shrinks below `tolerance`.

    Useful for sizing how long the loop needs to settle after a jump.
    """
    gap = abs(gap)
    if gap < tolerance:
        return 0
    if alpha >= 1:
        return 1
    return math.floor(math.log(tolerance / gap) / math.log(1 - alpha)) + 1

