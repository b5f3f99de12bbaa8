"""
ScrollScrub
===========

Scroll-driven frame sequence scrubbing engine.

This package maps a page's vertical scroll position onto an indexed image
sequence, eases the visible frame toward the scroll target, paints it onto
a device-pixel-ratio aware surface, and quantizes scroll progress into
narrative sections.

Components:
    - assets: Frame sources, decoding and priority preloading
    - render: Drawing surface, compositor and surface lifecycle
    - motion: Exponential smoothing and the tick loop
    - sections: Progress quantization and per-section transforms
    - scene: Orchestration of all of the above around one viewport

Example:
    from scrollscrub.config import settings
    from scrollscrub.scene import ScrubScene

    # The service is started via the FastAPI application
    # See main.py for entry point
"""

__version__ = "0.1.0"
__author__ = "ScrollScrub Project"

__all__ = [
    "__version__",
]
