"""
Assets Module
=============

Fetching, decoding and preloading the frame sequence.

This module provides:
    - FrameSource protocol with directory and HTTP implementations
    - decode_frame: the only image decoder
    - AssetLoader: priority/background batched preloading

Example:
    from scrollscrub.assets import AssetLoader, DirectoryFrameSource
    from scrollscrub.models import FrameSequence

    frames = FrameSequence(128)
    loader = AssetLoader(DirectoryFrameSource("./public"), frames)
    await loader.load()
"""

from scrollscrub.assets.decoder import ImageDecodeError, decode_frame
from scrollscrub.assets.source import (
    DEFAULT_PATH_TEMPLATE,
    DirectoryFrameSource,
    FrameFetchError,
    FrameSource,
    HttpFrameSource,
    frame_path,
)
from scrollscrub.assets.loader import AssetLoader, LoadOutcome, LoaderMetrics


__all__ = [
    "ImageDecodeError",
    "decode_frame",
    "DEFAULT_PATH_TEMPLATE",
    "DirectoryFrameSource",
    "FrameFetchError",
    "FrameSource",
    "HttpFrameSource",
    "frame_path",
    "AssetLoader",
    "LoadOutcome",
    "LoaderMetrics",
]
