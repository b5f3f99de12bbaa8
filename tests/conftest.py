"""
Test Configuration
==================

Pytest fixtures and test doubles for ScrollScrub.
"""

import asyncio
import io
import random
from typing import Callable, Iterable, List, Optional, Tuple

import numpy as np
import pytest
from PIL import Image

from scrollscrub.assets.source import FrameFetchError
from scrollscrub.models.frames import DecodedFrame, FrameSequence
from scrollscrub.models.state import SurfaceDescriptor


# =============================================================================
# Image helpers
# =============================================================================

def gif_bytes(width: int = 16, height: int = 16, color: Tuple[int, int, int] = (200, 40, 40)) -> bytes:
    """Encode a solid-colour GIF."""
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format="GIF")
    return buffer.getvalue()


def solid_frame(index: int, width: int = 16, height: int = 16, value: int = 255) -> DecodedFrame:
    pixels = np.full((height, width, 3), value, dtype=np.uint8)
    return DecodedFrame(index=index, pixels=pixels)


def filled_sequence(length: int, width: int = 16, height: int = 16, skip: Iterable[int] = ()) -> FrameSequence:
    """FrameSequence with every slot resolved except `skip`."""
    frames = FrameSequence(length)
    skipped = set(skip)
    for i in range(length):
        if i not in skipped:
            frames.resolve(i, solid_frame(i, width, height))
    return frames


# =============================================================================
# Test doubles
# =============================================================================

class FakeFrameSource:
    """
    In-memory frame source.

    Indices in `fail` raise FrameFetchError, indices in `corrupt` return
    bytes that cannot be decoded. With max_delay > 0 each fetch sleeps a
    random amount so completions arrive out of order.
    """

    def __init__(
        self,
        fail: Iterable[int] = (),
        corrupt: Iterable[int] = (),
        max_delay: float = 0.0,
        seed: int = 7,
        size: Tuple[int, int] = (16, 16),
    ) -> None:
        self.fail = set(fail)
        self.corrupt = set(corrupt)
        self.max_delay = max_delay
        self._random = random.Random(seed)
        self._gif = gif_bytes(*size)
        self.fetch_order: List[int] = []
        self.in_flight: int = 0
        self.peak_in_flight: int = 0

    async def fetch(self, index: int) -> bytes:
        self.fetch_order.append(index)
        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        try:
            if self.max_delay:
                await asyncio.sleep(self._random.uniform(0, self.max_delay))
            else:
                await asyncio.sleep(0)
            if index in self.fail:
                raise FrameFetchError(f"frame {index} unavailable")
            if index in self.corrupt:
                return b"not an image"
            return self._gif
        finally:
            self.in_flight -= 1


class RecordingContext:
    """DrawingContext that records calls instead of rasterizing."""

    def __init__(self) -> None:
        self.fill_style = (0, 0, 0)
        self.image_smoothing_enabled = False
        self.image_smoothing_quality = "low"
        self.transforms: List[Tuple[float, ...]] = []
        self.fills: List[Tuple[float, float, float, float]] = []
        self.draws: List[Tuple[np.ndarray, float, float, float, float]] = []

    def set_transform(self, a, b, c, d, e, f) -> None:
        self.transforms.append((a, b, c, d, e, f))

    def fill_rect(self, x, y, width, height) -> None:
        self.fills.append((x, y, width, height))

    def draw_image(self, image, x, y, width, height) -> None:
        self.draws.append((image, x, y, width, height))


class RecordingSurface:
    """DrawingSurface whose context is a RecordingContext."""

    def __init__(self, mounted: bool = True) -> None:
        self.width = 0
        self.height = 0
        self.descriptor: Optional[SurfaceDescriptor] = None
        self.mounted = mounted
        self.context = RecordingContext()
        self.descriptors: List[SurfaceDescriptor] = []

    def set_descriptor(self, descriptor: SurfaceDescriptor) -> None:
        self.descriptor = descriptor
        self.width = descriptor.backing_width
        self.height = descriptor.backing_height
        self.descriptors.append(descriptor)

    def get_context(self) -> Optional[RecordingContext]:
        return self.context if self.mounted else None


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def make_gif() -> Callable[..., bytes]:
    """Factory for solid-colour GIF bytes."""
    return gif_bytes


@pytest.fixture
def frame_dir(tmp_path) -> Callable[..., str]:
    """
    Factory that writes a frames/NNN.gif tree and returns its root.

    Indices in `missing` are not written.
    """
    def _make(count: int, missing: Iterable[int] = (), size: Tuple[int, int] = (20, 10)) -> str:
        frames = tmp_path / "frames"
        frames.mkdir(exist_ok=True)
        skipped = set(missing)
        for i in range(count):
            if i not in skipped:
                shade = int(255 * i / max(count - 1, 1))
                (frames / f"{i:03d}.gif").write_bytes(gif_bytes(size[0], size[1], (shade, 0, 255 - shade)))
        return str(tmp_path)

    return _make


@pytest.fixture
def fake_source() -> Callable[..., FakeFrameSource]:
    return FakeFrameSource


@pytest.fixture
def recording_surface() -> RecordingSurface:
    return RecordingSurface()


@pytest.fixture
def frames_factory() -> Callable[..., FrameSequence]:
    return filled_sequence


@pytest.fixture
def sample_frames() -> FrameSequence:
    """Fully resolved 128-frame sequence of 16x16 stills."""
    return filled_sequence(128)


@pytest.fixture
def small_config(tmp_path) -> str:
    """Write a minimal config.yaml and return its path."""
    path = tmp_path / "config.yaml"
    path.write_text(
        "assets:\n"
        "  backend: http\n"
        "  frame_count: 24\n"
        "motion:\n"
        "  tick_rate_hz: 30\n"
        "logging:\n"
        "  format: text\n"
    )
    return str(path)
