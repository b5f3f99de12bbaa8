"""
Presentation Event Schemas
==========================

Pydantic models for the events a remote presentation layer sends to the
scene service.

Input Contract:
    POST /scroll  {"scroll_y": 1830.5}
    POST /resize  {"width": 1440, "height": 900, "device_pixel_ratio": 2.0}

Example:
    from scrollscrub.models.input import ScrollEvent

    event = ScrollEvent.model_validate_json(raw)
    viewport.scroll_to(event.scroll_y)
"""

from typing import Optional

from pydantic import BaseModel, Field


class ScrollEvent(BaseModel):
    """
    Scroll offset reported by the presentation layer.

    Negative values (elastic overscroll) are accepted here; whether they
    are clamped is decided by the scene's scroll policy.
    """

    scroll_y: float = Field(
        ...,
        description="Vertical scroll offset in scroll pixels",
    )


class ResizeEvent(BaseModel):
    """
    Viewport geometry reported by the presentation layer.

    Attributes:
        width: Viewport width in CSS pixels
        height: Viewport height in CSS pixels
        device_pixel_ratio: Physical pixels per CSS pixel (keeps current if omitted)
        document_height: Full scrollable content height (derived from the
            configured scroll track if omitted)
    """

    width: float = Field(..., gt=0, description="Viewport width")
    height: float = Field(..., gt=0, description="Viewport height")
    device_pixel_ratio: Optional[float] = Field(
        default=None,
        gt=0,
        description="Device pixel ratio",
    )
    document_height: Optional[float] = Field(
        default=None,
        ge=0,
        description="Total document height",
    )

    class Config:
        """Pydantic model configuration."""

        json_schema_extra = {
            "example": {
                "width": 1440,
                "height": 900,
                "device_pixel_ratio": 2.0,
                "document_height": 5400,
            }
        }
