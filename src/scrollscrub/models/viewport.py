"""
Viewport
========

The presentation layer's window: geometry, scroll offset and the scroll /
resize listener registry.

The scene never polls the presentation layer directly. It reads these
values and registers listeners here, and whoever hosts the scene (the
HTTP service, a demo script, a test) drives scroll_to() and resize().
"""

from typing import Callable, Dict, List, Optional


SCROLL = "scroll"
RESIZE = "resize"
EVENTS = (SCROLL, RESIZE)

Listener = Callable[[], None]


class Viewport:
    """
    Window geometry with scroll and resize listeners.

    Attributes:
        width: Viewport width in CSS pixels
        height: Viewport height in CSS pixels
        device_pixel_ratio: Physical pixels per CSS pixel
        document_height: Height of the full scrollable document
        scroll_y: Current vertical scroll offset

    Example:
        viewport = Viewport(1440, 900, device_pixel_ratio=2.0, document_height=5400)
        viewport.add_listener("scroll", on_scroll)
        viewport.scroll_to(1200)    # calls on_scroll()
    """

    def __init__(
        self,
        width: float,
        height: float,
        device_pixel_ratio: float = 1.0,
        document_height: Optional[float] = None,
        scroll_y: float = 0.0,
    ) -> None:
        self.width = width
        self.height = height
        self.device_pixel_ratio = device_pixel_ratio
        self.document_height = height if document_height is None else document_height
        self.scroll_y = scroll_y
        self._listeners: Dict[str, List[Listener]] = {event: [] for event in EVENTS}

    @property
    def max_scroll(self) -> float:
        """Scrollable distance: document height minus viewport height."""
        return self.document_height - self.height

    def add_listener(self, event: str, listener: Listener) -> None:
        self._check_event(event)
        self._listeners[event].append(listener)

    def remove_listener(self, event: str, listener: Listener) -> None:
        self._check_event(event)
        if listener in self._listeners[event]:
            self._listeners[event].remove(listener)

    def listener_count(self, event: str) -> int:
        self._check_event(event)
        return len(self._listeners[event])

    def scroll_to(self, scroll_y: float) -> None:
        """Move the scroll offset and dispatch a scroll event."""
        self.scroll_y = scroll_y
        self._dispatch(SCROLL)

    def resize(
        self,
        width: float,
        height: float,
        device_pixel_ratio: Optional[float] = None,
        document_height: Optional[float] = None,
    ) -> None:
        """Change viewport geometry and dispatch a resize event."""
        self.width = width
        self.height = height
        if device_pixel_ratio is not None:
            self.device_pixel_ratio = device_pixel_ratio
        if document_height is not None:
            self.document_height = document_height
        self._dispatch(RESIZE)

    def _dispatch(self, event: str) -> None:
        for listener in list(self._listeners[event]):
            listener()

    @staticmethod
    def _check_event(event: str) -> None:
        if event not in EVENTS:
            raise ValueError(f"Unknown viewport event: {event}")

    def to_dict(self) -> dict:
        return {
            "width": self.width,
            "height": self.height,
            "device_pixel_ratio": self.device_pixel_ratio,
            "document_height": self.document_height,
            "scroll_y": self.scroll_y,
        }
