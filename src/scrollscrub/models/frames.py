"""
Frame Models
============

Decoded frame handles and the fixed-length frame store.

Design Rules:
    - FrameSequence length is fixed at construction
    - Slots only move from empty to resolved, never back
    - Readers must tolerate permanently empty slots
"""

import math
from dataclasses import dataclass
from typing import Iterator, List, Optional

import numpy as np


TOTAL_FRAMES = 128
PRIORITY_FRAMES = 10


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (not banker's rounding)."""
    return math.floor(value + 0.5)


def clamp_frame_index(value: float, frame_count: int) -> int:
    """Round a continuous frame value and clamp it into [0, frame_count - 1]."""
    return max(0, min(frame_count - 1, round_half_up(value)))


@dataclass(frozen=True, slots=True)
class DecodedFrame:
    """
    A single decoded still from the sequence.

    Attributes:
        index: Position of the frame in the sequence
        pixels: RGB image as np.ndarray (H, W, 3), dtype=uint8
    """

    index: int
    pixels: np.ndarray

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    def __repr__(self) -> str:
        """Compact repr that doesn't dump the pixels."""
        return f"DecodedFrame(index={self.index}, size={self.width}x{self.height})"


class FrameSequence:
    """
    Fixed-length store of optional decoded frames.

    Slots are populated in whatever order loads complete. A slot whose
    source failed stays None for the rest of the session.

    Example:
        frames = FrameSequence(128)
        frames.resolve(3, decoded)
        frames[3]       # -> decoded
        frames[4]       # -> None
    """

    def __init__(self, length: int = TOTAL_FRAMES) -> None:
        if length < 1:
            raise ValueError("length must be >= 1")
        self._slots: List[Optional[DecodedFrame]] = [None] * length

    def __len__(self) -> int:
        return len(self._slots)

    def __getitem__(self, index: int) -> Optional[DecodedFrame]:
        return self._slots[index]

    def __iter__(self) -> Iterator[Optional[DecodedFrame]]:
        return iter(self._slots)

    def resolve(self, index: int, frame: DecodedFrame) -> None:
        """
        Fill an empty slot.

        Raises:
            IndexError: If index is outside the sequence
            ValueError: If frame is None or the slot is already resolved
        """
        if not 0 <= index < len(self._slots):
            raise IndexError(f"frame index {index} out of range 0..{len(self._slots) - 1}")
        if frame is None:
            raise ValueError("cannot resolve a slot with None")
        if self._slots[index] is not None:
            raise ValueError(f"slot {index} is already resolved")
        self._slots[index] = frame

    def is_resolved(self, index: int) -> bool:
        return self._slots[index] is not None

    @property
    def resolved_count(self) -> int:
        return sum(1 for slot in self._slots if slot is not None)

    def empty_indices(self) -> List[int]:
        """Indices that have not been resolved (yet, or ever)."""
        return [i for i, slot in enumerate(self._slots) if slot is None]
