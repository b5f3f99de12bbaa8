"""
Surface Lifecycle
=================

Sizes the drawing surface from the viewport and keeps the compositor's
cache honest across resizes.

resize():
    size = min(width_fraction * viewport_w, height_fraction * viewport_h, max_size)
    backing buffer = size * device_pixel_ratio (square)
    transform = scale(device_pixel_ratio)
    compositor.invalidate()

Runs once at attach and again on every viewport resize.
"""

import logging

from scrollscrub.models.state import SurfaceDescriptor
from scrollscrub.models.viewport import Viewport
from scrollscrub.render.compositor import Compositor
from scrollscrub.render.context import DrawingSurface


logger = logging.getLogger(__name__)


class SurfaceLifecycle:
    """
    Keeps the surface's logical size, backing buffer and transform in step
    with the viewport.

    Attributes:
        surface: Surface being sized
        viewport: Source of viewport size and device pixel ratio
        compositor: Compositor whose cache is invalidated on resize
        width_fraction: Max share of viewport width the surface may take
        height_fraction: Max share of viewport height the surface may take
        max_size: Absolute cap on the logical size
    """

    def __init__(
        self,
        surface: DrawingSurface,
        viewport: Viewport,
        compositor: Compositor,
        width_fraction: float = 0.5,
        height_fraction: float = 0.55,
        max_size: float = 500.0,
    ) -> None:
        if width_fraction <= 0 or height_fraction <= 0:
            raise ValueError("viewport fractions must be positive")
        if max_size <= 0:
            raise ValueError("max_size must be positive")

        self.surface = surface
        self.viewport = viewport
        self.compositor = compositor
        self.width_fraction = width_fraction
        self.height_fraction = height_fraction
        self.max_size = max_size
        self._resize_count: int = 0

    @property
    def resize_count(self) -> int:
        return self._resize_count

    def logical_size(self) -> float:
        return min(
            self.viewport.width * self.width_fraction,
            self.viewport.height * self.height_fraction,
            self.max_size,
        )

    def resize(self) -> SurfaceDescriptor:
        """
        Recompute size from the viewport and reset the drawing transform.

        Returns:
            The new surface descriptor
        """
        dpr = self.viewport.device_pixel_ratio or 1.0
        descriptor = SurfaceDescriptor(
            logical_size=self.logical_size(),
            device_pixel_ratio=dpr,
        )
        self.surface.set_descriptor(descriptor)

        context = self.surface.get_context()
        if context is not None:
            context.set_transform(dpr, 0, 0, dpr, 0, 0)

        self.compositor.invalidate()
        self._resize_count += 1

        logger.debug(
            f"Surface resized: logical={descriptor.logical_size:.1f}, dpr={dpr}, "
            f"backing={descriptor.backing_width}x{descriptor.backing_height}"
        )
        return descriptor
