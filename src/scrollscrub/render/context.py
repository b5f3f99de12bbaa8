"""
Drawing Surface and Context
===========================

A 2D immediate-mode drawing API and an in-memory raster implementation.

The compositor and the surface lifecycle only talk to the DrawingSurface
and DrawingContext protocols, so any backend with a canvas-like API can
host the scene. RasterSurface keeps its backing buffer as a numpy RGB array
and resamples with OpenCV.

Design Rules:
    - Draw calls take logical units; the context transform maps them to pixels
    - Resizing the backing buffer clears it and resets context state
    - A fresh context starts scaled by the descriptor device pixel ratio
    - get_context() returns None while the surface is not mounted
"""

import logging
from typing import Optional, Protocol, Tuple

import cv2
import numpy as np

from scrollscrub.models.state import SurfaceDescriptor


logger = logging.getLogger(__name__)


Color = Tuple[int, int, int]


class DrawingContext(Protocol):
    """Canvas-like 2D context used by the compositor."""

    fill_style: Color
    image_smoothing_enabled: bool
    image_smoothing_quality: str

    def set_transform(
        self, a: float, b: float, c: float, d: float, e: float, f: float
    ) -> None:
        ...

    def fill_rect(self, x: float, y: float, width: float, height: float) -> None:
        ...

    def draw_image(
        self, image: np.ndarray, x: float, y: float, width: float, height: float
    ) -> None:
        ...


class DrawingSurface(Protocol):
    """Surface whose backing buffer is sized by the surface lifecycle."""

    width: int
    height: int
    descriptor: Optional[SurfaceDescriptor]

    def set_descriptor(self, descriptor: SurfaceDescriptor) -> None:
        ...

    def get_context(self) -> Optional[DrawingContext]:
        ...


class RasterContext:
    """
    DrawingContext backed by a numpy array.

    Only axis-aligned transforms (scale + translate) are supported, which
    is all the device-pixel-ratio scaling needs.
    """

    def __init__(self, buffer: np.ndarray) -> None:
        self._buffer = buffer
        self.fill_style: Color = (0, 0, 0)
        self.image_smoothing_enabled: bool = True
        self.image_smoothing_quality: str = "low"
        self._transform: Tuple[float, float, float, float, float, float] = (1.0, 0.0, 0.0, 1.0, 0.0, 0.0)

    @property
    def transform(self) -> Tuple[float, float, float, float, float, float]:
        return self._transform

    def set_transform(
        self, a: float, b: float, c: float, d: float, e: float, f: float
    ) -> None:
        if b != 0 or c != 0:
            raise ValueError("RasterContext only supports axis-aligned transforms")
        self._transform = (float(a), 0.0, 0.0, float(d), float(e), float(f))

    def _device_rect(
        self, x: float, y: float, width: float, height: float
    ) -> Tuple[int, int, int, int]:
        a, _, _, d, e, f = self._transform
        x0 = int(round(a * x + e))
        y0 = int(round(d * y + f))
        x1 = int(round(a * (x + width) + e))
        y1 = int(round(d * (y + height) + f))
        return min(x0, x1), min(y0, y1), max(x0, x1), max(y0, y1)

    def _clip(self, x0: int, y0: int, x1: int, y1: int) -> Tuple[int, int, int, int]:
        h, w = self._buffer.shape[:2]
        return max(x0, 0), max(y0, 0), min(x1, w), min(y1, h)

    def fill_rect(self, x: float, y: float, width: float, height: float) -> None:
        cx0, cy0, cx1, cy1 = self._clip(*self._device_rect(x, y, width, height))
        if cx0 >= cx1 or cy0 >= cy1:
            return
        self._buffer[cy0:cy1, cx0:cx1] = self.fill_style

    def _interpolation(self, src_w: int, src_h: int, dst_w: int, dst_h: int) -> int:
        if not self.image_smoothing_enabled:
            return cv2.INTER_NEAREST
        if self.image_smoothing_quality == "high":
            downscaling = dst_w < src_w or dst_h < src_h
            return cv2.INTER_AREA if downscaling else cv2.INTER_CUBIC
        return cv2.INTER_LINEAR

    def draw_image(
        self, image: np.ndarray, x: float, y: float, width: float, height: float
    ) -> None:
        x0, y0, x1, y1 = self._device_rect(x, y, width, height)
        dst_w, dst_h = x1 - x0, y1 - y0
        if dst_w <= 0 or dst_h <= 0:
            return

        cx0, cy0, cx1, cy1 = self._clip(x0, y0, x1, y1)
        if cx0 >= cx1 or cy0 >= cy1:
            return

        src_h, src_w = image.shape[:2]
        if (src_w, src_h) == (dst_w, dst_h):
            resized = image
        else:
            resized = cv2.resize(
                image,
                (dst_w, dst_h),
                interpolation=self._interpolation(src_w, src_h, dst_w, dst_h),
            )
        self._buffer[cy0:cy1, cx0:cx1] = resized[cy0 - y0:cy1 - y0, cx0 - x0:cx1 - x0]


class RasterSurface:
    """
    In-memory drawing surface with an opaque RGB backing buffer.

    Example:
        surface = RasterSurface()
        surface.set_descriptor(SurfaceDescriptor(500, 2.0))
        surface.width       # -> 1000
        ctx = surface.get_context()
    """

    def __init__(self, mounted: bool = True) -> None:
        self.width: int = 0
        self.height: int = 0
        self.descriptor: Optional[SurfaceDescriptor] = None
        self._mounted = mounted
        self._buffer: np.ndarray = np.zeros((0, 0, 3), dtype=np.uint8)
        self._context: Optional[RasterContext] = None

    @property
    def mounted(self) -> bool:
        return self._mounted

    def mount(self) -> None:
        self._mounted = True

    def unmount(self) -> None:
        self._mounted = False

    def set_descriptor(self, descriptor: SurfaceDescriptor) -> None:
        """Resize the backing buffer. Clears pixels and resets context state."""
        self.descriptor = descriptor
        self.width = descriptor.backing_width
        self.height = descriptor.backing_height
        self._buffer = np.zeros((self.height, self.width, 3), dtype=np.uint8)
        self._context = RasterContext(self._buffer)
        dpr = descriptor.device_pixel_ratio
        self._context.set_transform(dpr, 0, 0, dpr, 0, 0)

        logger.debug(
            f"Backing buffer reset: {self.width}x{self.height}, mounted={self._mounted}"
        )

    def get_context(self) -> Optional[RasterContext]:
        if not self._mounted or self._context is None:
            return None
        return self._context

    def snapshot(self) -> np.ndarray:
        """Copy of the backing buffer (RGB)."""
        return self._buffer.copy()

    def encode_png(self) -> bytes:
        """PNG-encode the backing buffer."""
        if self._buffer.size == 0:
            raise ValueError("surface has no backing buffer")
        ok, encoded = cv2.imencode(".png", cv2.cvtColor(self._buffer, cv2.COLOR_RGB2BGR))
        if not ok:
            raise ValueError("PNG encoding failed")
        return encoded.tobytes()
