"""
Compositor
==========

Draws one frame of the sequence onto the drawing surface.

draw(frame_value):
    1. No-op if the surface has no context (not mounted yet)
    2. Round to nearest index (half up), clamp to [0, N-1]
    3. No-op if that slot is unresolved or was the last one drawn
    4. Fill the backing buffer with the opaque background, then draw the
       image centered at min(surface_w / image_w, surface_h / image_h)

The skip in step 3 means a converged motion loop costs nothing, and a
missing frame leaves the last good frame on screen.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from scrollscrub.models.frames import FrameSequence, clamp_frame_index
from scrollscrub.render.context import Color, DrawingSurface


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Placement:
    """Destination rect of a fitted image, in logical units."""

    x: float
    y: float
    width: float
    height: float


def fit_centered(
    surface_width: float,
    surface_height: float,
    image_width: int,
    image_height: int,
) -> Placement:
    """
    Scale an image to fit entirely inside the surface and center it.

    Example:
        fit_centered(500, 500, 1000, 500)
        # -> Placement(x=0.0, y=125.0, width=500.0, height=250.0)
    """
    scale = min(surface_width / image_width, surface_height / image_height)
    width = image_width * scale
    height = image_height * scale
    return Placement(
        x=(surface_width - width) / 2,
        y=(surface_height - height) / 2,
        width=width,
        height=height,
    )


class Compositor:
    """
    Letterboxing frame compositor with a last-drawn-frame cache.

    Attributes:
        frames: Frame store to read from
        surface: Surface to draw onto
        background: Opaque fill colour (RGB)
        last_drawn: Index most recently painted, or None
        paint_count: Number of paints actually performed
    """

    def __init__(
        self,
        frames: FrameSequence,
        surface: DrawingSurface,
        background: Color = (0, 0, 0),
    ) -> None:
        self.frames = frames
        self.surface = surface
        self.background: Color = tuple(background)
        self._last_drawn: Optional[int] = None
        self._paint_count: int = 0
        self._skipped_unresolved: int = 0
        self._last_placement: Optional[Placement] = None

    @property
    def last_drawn(self) -> Optional[int]:
        return self._last_drawn

    @property
    def paint_count(self) -> int:
        return self._paint_count

    @property
    def last_placement(self) -> Optional[Placement]:
        return self._last_placement

    def invalidate(self) -> None:
        """Forget the last drawn frame so the next draw always paints."""
        self._last_drawn = None

    def draw(self, frame_value: float) -> bool:
        """
        Composite the frame nearest to frame_value.

        Returns:
            True if a paint happened, False if the call was a no-op.
        """
        context = self.surface.get_context()
        if context is None:
            return False

        index = clamp_frame_index(frame_value, len(self.frames))
        frame = self.frames[index]
        if frame is None:
            self._skipped_unresolved += 1
            return False
        if index == self._last_drawn:
            return False
        self._last_drawn = index

        descriptor = self.surface.descriptor
        dpr = descriptor.device_pixel_ratio if descriptor else 1.0
        surface_w = self.surface.width / dpr
        surface_h = self.surface.height / dpr

        context.fill_style = self.background
        context.fill_rect(0, 0, self.surface.width, self.surface.height)

        placement = fit_centered(surface_w, surface_h, frame.width, frame.height)
        context.image_smoothing_enabled = True
        context.image_smoothing_quality = "high"
        context.draw_image(
            frame.pixels,
            placement.x,
            placement.y,
            placement.width,
            placement.height,
        )

        self._last_placement = placement
        self._paint_count += 1
        return True

    def get_metrics(self) -> dict:
        """Get compositor metrics for observability."""
        return {
            "paint_count": self._paint_count,
            "last_drawn": self._last_drawn,
            "skipped_unresolved": self._skipped_unresolved,
            "surface_width": self.surface.width,
            "surface_height": self.surface.height,
        }
