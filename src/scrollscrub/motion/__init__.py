"""
Motion Module
=============

Exponential smoothing and the recurring motion loop.

Components:
    - approach / closed_form: first-order smoothing step and its closed form
    - MotionController: per-tick update, run loop with start/stop
"""

from scrollscrub.motion.smoothing import (
    FRAME_ALPHA,
    SCROLL_ALPHA,
    approach,
    closed_form,
    steps_to_within,
)
from scrollscrub.motion.controller import MotionController


__all__ = [
    "FRAME_ALPHA",
    "SCROLL_ALPHA",
    "approach",
    "closed_form",
    "steps_to_within",
    "MotionController",
]
