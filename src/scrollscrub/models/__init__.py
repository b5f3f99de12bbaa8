"""
Data Models
===========

Typed records shared across the scene.

Models:
    Frames:
        - DecodedFrame: One decoded still (RGB numpy array)
        - FrameSequence: Fixed-length, monotonically filled frame store

    State:
        - ScrollState: Current/target scroll and frame values
        - SurfaceDescriptor: Logical size + device pixel ratio
        - Viewport: Window geometry, scroll offset, event listeners

    Input:
        - ScrollEvent, ResizeEvent: Presentation-layer events

    Output:
        - SceneSnapshot: Everything the presentation layer reads
"""

from scrollscrub.models.frames import (
    PRIORITY_FRAMES,
    TOTAL_FRAMES,
    DecodedFrame,
    FrameSequence,
    clamp_frame_index,
    round_half_up,
)
from scrollscrub.models.state import ScrollState, SurfaceDescriptor
from scrollscrub.models.viewport import Viewport
from scrollscrub.models.input import ResizeEvent, ScrollEvent
from scrollscrub.models.output import SceneSnapshot

__all__ = [
    # Frames
    "PRIORITY_FRAMES",
    "TOTAL_FRAMES",
    "DecodedFrame",
    "FrameSequence",
    "clamp_frame_index",
    "round_half_up",
    # State
    "ScrollState",
    "SurfaceDescriptor",
    "Viewport",
    # Input
    "ScrollEvent",
    "ResizeEvent",
    # Output
    "SceneSnapshot",
]
