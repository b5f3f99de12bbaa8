"""
Section Transforms
==================

Pure presentation derivations from (section, active section) and from
scroll progress. Nothing here holds state, so each function can be
checked in isolation.

Text panel states:
    ACTIVE  fully visible, no transform
    PAST    exits upward, shrunk and blurred
    FUTURE  waits below, shrunk and blurred
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import List

from scrollscrub.sections.quantizer import SECTION_COUNT


CTA_SECTION = SECTION_COUNT - 1
SCROLL_INDICATOR_CUTOFF = 0.05
LOADER_RING_CIRCUMFERENCE = 283.0


class SectionRelation(str, Enum):
    """Position of a section relative to the active one."""

    ACTIVE = "active"
    PAST = "past"
    FUTURE = "future"


@dataclass(frozen=True, slots=True)
class TextTransform:
    """
    Visual state of one text panel.

    Attributes:
        relation: ACTIVE, PAST or FUTURE
        opacity: 0 (hidden) to 1 (visible)
        y: Vertical offset in logical pixels (negative is up)
        scale: Uniform scale factor
        blur: Blur radius in logical pixels
        interactive: Whether the panel accepts pointer input
    """

    relation: SectionRelation
    opacity: float
    y: float
    scale: float
    blur: float
    interactive: bool


@dataclass(frozen=True, slots=True)
class StageTransform:
    """3D transform of the element that hosts the drawing surface."""

    perspective: float
    rotate_x: float
    rotate_y: float
    translate_z: float
    scale: float


@dataclass(frozen=True, slots=True)
class GlowStyle:
    """Ambient glow behind the surface."""

    opacity: float
    scale: float


@dataclass(frozen=True, slots=True)
class CtaTransform:
    """Call-to-action panel shown in the final section."""

    visible: bool
    opacity: float
    y: float
    interactive: bool


_ACTIVE_TRANSFORM = TextTransform(SectionRelation.ACTIVE, 1.0, 0.0, 1.0, 0.0, True)
_PAST_TRANSFORM = TextTransform(SectionRelation.PAST, 0.0, -80.0, 0.9, 12.0, False)
_FUTURE_TRANSFORM = TextTransform(SectionRelation.FUTURE, 0.0, 80.0, 0.9, 12.0, False)


def relation(section: int, active: int) -> SectionRelation:
    if section == active:
        return SectionRelation.ACTIVE
    if section < active:
        return SectionRelation.PAST
    return SectionRelation.FUTURE


def text_transform(section: int, active: int) -> TextTransform:
    """Transform for text panel `section` while `active` is the active section."""
    rel = relation(section, active)
    if rel is SectionRelation.ACTIVE:
        return _ACTIVE_TRANSFORM
    if rel is SectionRelation.PAST:
        return _PAST_TRANSFORM
    return _FUTURE_TRANSFORM


def text_transforms(active: int, count: int = CTA_SECTION) -> List[TextTransform]:
    """Transforms for panels 0..count-1. The last section belongs to the CTA, not a panel."""
    return [text_transform(i, active) for i in range(count)]


def cta_transform(active: int, cta_section: int = CTA_SECTION) -> CtaTransform:
    visible = active == cta_section
    return CtaTransform(
        visible=visible,
        opacity=1.0 if visible else 0.0,
        y=0.0 if visible else 40.0,
        interactive=visible,
    )


def progress_dots(active: int, count: int = CTA_SECTION) -> List[bool]:
    return [i == active for i in range(count)]


def scroll_indicator_opacity(progress: float) -> float:
    """The "scroll to explore" hint disappears once scrolling has begun."""
    return 1.0 if progress < SCROLL_INDICATOR_CUTOFF else 0.0


def stage_transform(progress: float) -> StageTransform:
    return StageTransform(
        perspective=1500.0,
        rotate_x=progress * 8.0,
        rotate_y=math.sin(progress * math.pi) * 3.0,
        translate_z=progress * 120.0,
        scale=1.0 + progress * 0.15,
    )


def glow_style(progress: float) -> GlowStyle:
    return GlowStyle(
        opacity=0.5 + progress * 0.4,
        scale=1.0 + progress * 0.3,
    )


def loader_ring_offset(percent: int) -> float:
    """Stroke-dash offset of the loading ring: full circumference at 0%, zero at 100%."""
    return LOADER_RING_CIRCUMFERENCE - (LOADER_RING_CIRCUMFERENCE * percent / 100)
