"""
Sections Module
===============

Progress quantization and the per-section presentation derivations.

Components:
    - section_for / SectionTracker: progress -> discrete section index
    - text_transform and friends: pure (section, active) -> visual state
"""

from scrollscrub.sections.quantizer import (
    SECTION_BREAKPOINTS,
    SECTION_COUNT,
    SectionTracker,
    section_for,
    validate_breakpoints,
)
from scrollscrub.sections.transforms import (
    CTA_SECTION,
    CtaTransform,
    GlowStyle,
    SectionRelation,
    StageTransform,
    TextTransform,
    cta_transform,
    glow_style,
    loader_ring_offset,
    progress_dots,
    relation,
    scroll_indicator_opacity,
    stage_transform,
    text_transform,
    text_transforms,
)


__all__ = [
    "SECTION_BREAKPOINTS",
    "SECTION_COUNT",
    "SectionTracker",
    "section_for",
    "validate_breakpoints",
    "CTA_SECTION",
    "CtaTransform",
    "GlowStyle",
    "SectionRelation",
    "StageTransform",
    "TextTransform",
    "cta_transform",
    "glow_style",
    "loader_ring_offset",
    "progress_dots",
    "relation",
    "scroll_indicator_opacity",
    "stage_transform",
    "text_transform",
    "text_transforms",
]
