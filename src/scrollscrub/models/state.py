"""
Scroll and Surface State
========================

Mutable records shared between event handlers and the motion tick.

Ownership:
    ScrollState.target_*   written only by scroll handlers
    ScrollState.current_*  written only by the motion tick
    SurfaceDescriptor      replaced only by the surface lifecycle
"""

from dataclasses import dataclass


@dataclass(slots=True)
class ScrollState:
    """
    Smoothed and target values for scroll position and frame index.

    Scroll values are in scroll pixels; frame values are continuous
    frame-index units (not rounded).
    """

    current_scroll: float = 0.0
    target_scroll: float = 0.0
    current_frame: float = 0.0
    target_frame: float = 0.0

    def reset(self, scroll: float = 0.0, frame: float = 0.0) -> None:
        """Snap current and target values. Only valid at initialization."""
        self.current_scroll = scroll
        self.target_scroll = scroll
        self.current_frame = frame
        self.target_frame = frame

    def to_dict(self) -> dict:
        return {
            "current_scroll": round(self.current_scroll, 3),
            "target_scroll": round(self.target_scroll, 3),
            "current_frame": round(self.current_frame, 3),
            "target_frame": round(self.target_frame, 3),
        }


@dataclass(frozen=True, slots=True)
class SurfaceDescriptor:
    """
    Logical size of a square drawing surface and its pixel density.

    The backing buffer is logical_size x device_pixel_ratio, truncated to
    whole pixels the way a canvas truncates its width/height.
    """

    logical_size: float
    device_pixel_ratio: float = 1.0

    def __post_init__(self) -> None:
        """Validate invariants."""
        if self.logical_size < 0:
            raise ValueError("logical_size must be non-negative")
        if self.device_pixel_ratio <= 0:
            raise ValueError("device_pixel_ratio must be positive")

    @property
    def backing_width(self) -> int:
        return int(self.logical_size * self.device_pixel_ratio)

    @property
    def backing_height(self) -> int:
        return int(self.logical_size * self.device_pixel_ratio)
