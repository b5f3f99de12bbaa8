"""
Observability Module
====================

Values and metrics the scene exposes to its presentation layer.

This module provides:
    - ObservableValue: read-only-to-consumers value with change notification

DESIGN RULES:
    - Observers never feed back into the motion loop
    - Publishing is synchronous and happens on the event loop thread
"""

from scrollscrub.observability.observable import ObservableValue


__all__ = [
    "ObservableValue",
]
