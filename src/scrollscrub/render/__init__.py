"""
Render Module
=============

Drawing surface abstraction, frame compositing and surface sizing.

Components:
    - DrawingSurface / DrawingContext: canvas-like protocols
    - RasterSurface: numpy + OpenCV backed implementation
    - Compositor: letterboxed frame drawing with a redraw-skip cache
    - SurfaceLifecycle: viewport-driven sizing and cache invalidation
"""

from scrollscrub.render.context import (
    DrawingContext,
    DrawingSurface,
    RasterContext,
    RasterSurface,
)
from scrollscrub.render.compositor import Compositor, Placement, fit_centered
from scrollscrub.render.surface import SurfaceLifecycle


__all__ = [
    "DrawingContext",
    "DrawingSurface",
    "RasterContext",
    "RasterSurface",
    "Compositor",
    "Placement",
    "fit_centered",
    "SurfaceLifecycle",
]
