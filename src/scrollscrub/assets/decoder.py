"""
Image Decoder
=============

Dedicated module for decoding frame bytes into RGB numpy arrays.

Design Rules:
    - This is the ONLY place in the codebase that decodes images
    - Animated sources (GIF) contribute their first frame only
    - Validates shape and dtype
    - Fails fast on corrupt data with ImageDecodeError
"""

import io
import logging

import numpy as np
from PIL import Image, UnidentifiedImageError

from scrollscrub.models.frames import DecodedFrame


logger = logging.getLogger(__name__)


class ImageDecodeError(Exception):
    """Raised when image decoding fails."""
    pass


def decode_frame(index: int, data: bytes) -> DecodedFrame:
    """
    Decode encoded image bytes to an RGB frame.

    Args:
        index: Sequence position the bytes belong to
        data: Encoded image (GIF, PNG, JPEG, ...)

    Returns:
        DecodedFrame with pixels of shape (H, W, 3), dtype=uint8

    Raises:
        ImageDecodeError: If decoding fails or the image is invalid
    """
    if not data:
        raise ImageDecodeError(f"Frame {index}: no image data")

    try:
        with Image.open(io.BytesIO(data)) as image:
            image.seek(0)
            rgb = image.convert("RGB")
            pixels = np.array(rgb, dtype=np.uint8)
    except (UnidentifiedImageError, OSError, EOFError, ValueError) as e:
        logger.debug(f"Decode failed for frame {index} ({len(data)} bytes): {e}")
        raise ImageDecodeError(f"Failed to decode frame {index}: {e}")

    if pixels.ndim != 3 or pixels.shape[2] != 3:
        raise ImageDecodeError(f"Invalid image shape for frame {index}: {pixels.shape}")
    if pixels.shape[0] == 0 or pixels.shape[1] == 0:
        raise ImageDecodeError(f"Empty image for frame {index}")

    return DecodedFrame(index=index, pixels=pixels)
