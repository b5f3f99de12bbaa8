"""
Scene Output Models
===================

The read-only contract the scene exposes to its presentation layer.

Output Contract:
    {
        "loading_progress": 100,
        "images_ready": true,
        "scroll_progress": 0.93,
        "active_section": 5,
        "cta": {"visible": true, "opacity": 1.0, "y": 0.0, "interactive": true},
        "sections": [
            {"relation": "past", "opacity": 0.0, "y": -80.0, "scale": 0.9, "blur": 12.0, ...},
            ...
        ],
        "stage": {"perspective": 1500.0, "rotate_x": 7.44, ...},
        "glow": {"opacity": 0.87, "scale": 1.28},
        "scroll_indicator_opacity": 0.0,
        "loader_ring_offset": 0.0,
        "progress_dots": [false, false, false, false, false],
        "frame": {"last_drawn": 127, "paint_count": 412, ...}
    }

Design Rules:
    - Everything here is derived; nothing is written back by consumers
    - All values are deterministic for a given event sequence
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from scrollscrub.sections.transforms import SectionRelation


class TextTransformOut(BaseModel):
    """Visual state of one text panel."""

    relation: SectionRelation
    opacity: float = Field(..., ge=0.0, le=1.0)
    y: float
    scale: float = Field(..., gt=0.0)
    blur: float = Field(..., ge=0.0)
    interactive: bool

    class Config:
        """Pydantic model configuration."""

        from_attributes = True


class StageTransformOut(BaseModel):
    """3D transform of the element hosting the surface."""

    perspective: float
    rotate_x: float
    rotate_y: float
    translate_z: float
    scale: float

    class Config:
        """Pydantic model configuration."""

        from_attributes = True


class GlowStyleOut(BaseModel):
    """Ambient glow behind the surface."""

    opacity: float
    scale: float

    class Config:
        """Pydantic model configuration."""

        from_attributes = True


class CtaTransformOut(BaseModel):
    """Call-to-action panel state."""

    visible: bool
    opacity: float
    y: float
    interactive: bool

    class Config:
        """Pydantic model configuration."""

        from_attributes = True


class FrameStatus(BaseModel):
    """
    Compositing status.

    Attributes:
        last_drawn: Index of the frame currently on the surface
        current_frame: Smoothed (continuous) frame value
        target_frame: Frame value the smoothing is chasing
        paint_count: Paints performed since attach
        resolved_frames: Frames decoded so far
    """

    last_drawn: Optional[int] = Field(default=None, ge=0)
    current_frame: float = Field(default=0.0)
    target_frame: float = Field(default=0.0)
    paint_count: int = Field(default=0, ge=0)
    resolved_frames: int = Field(default=0, ge=0)


class SceneSnapshot(BaseModel):
    """
    Complete presentation-facing state of the scene.

    Attributes:
        loading_progress: Settled loads as an integer percentage
        images_ready: True once the priority batch has settled
        scroll_progress: Smoothed scroll progress in [0, 1]
        active_section: Section index in [0, 5]
        cta: Call-to-action panel state
        sections: One transform per text panel
        stage: Surface host transform
        glow: Glow style
        scroll_indicator_opacity: "Scroll to explore" hint opacity
        loader_ring_offset: Loader ring stroke-dash offset
        progress_dots: Active flag per text panel
        frame: Compositing status
    """

    loading_progress: int = Field(..., ge=0, le=100)
    images_ready: bool
    scroll_progress: float = Field(..., ge=0.0, le=1.0)
    active_section: int = Field(..., ge=0)
    cta: CtaTransformOut
    sections: List[TextTransformOut]
    stage: StageTransformOut
    glow: GlowStyleOut
    scroll_indicator_opacity: float = Field(..., ge=0.0, le=1.0)
    loader_ring_offset: float
    progress_dots: List[bool]
    frame: FrameStatus
