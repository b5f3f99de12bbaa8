"""
Scrub Scene
===========

Wires the engine together around one drawing surface.

Lifecycle:
    1. load_assets()   start preloading; returns when the priority batch settled
    2. attach(surface) size the surface, draw frame 0, register scroll/resize
                       listeners, start the motion loop
    3. scroll / resize events update targets and the surface descriptor only
    4. detach()        stop the motion loop and unregister listeners together
    5. close()         detach and cancel outstanding loads

Exposed to the presentation layer (read-only observables):
    loading_progress, images_ready, scroll_progress, active_section, cta_visible

Scroll policy:
    With clamp_scroll enabled (default), the scroll offset is clamped to
    [0, max_scroll] before targets are derived, so elastic overscroll never
    pushes progress below 0 or beyond 1. The frame index is always clamped
    by the compositor regardless of this policy.
"""

import logging
from typing import Optional, Sequence

from scrollscrub.assets.loader import AssetLoader
from scrollscrub.assets.source import FrameSource
from scrollscrub.models.frames import PRIORITY_FRAMES, TOTAL_FRAMES, FrameSequence
from scrollscrub.models.output import (
    CtaTransformOut,
    FrameStatus,
    GlowStyleOut,
    SceneSnapshot,
    StageTransformOut,
    TextTransformOut,
)
from scrollscrub.models.state import ScrollState
from scrollscrub.models.viewport import RESIZE, SCROLL, Viewport
from scrollscrub.motion.controller import MotionController
from scrollscrub.motion.smoothing import FRAME_ALPHA, SCROLL_ALPHA
from scrollscrub.observability.observable import ObservableValue
from scrollscrub.render.compositor import Compositor
from scrollscrub.render.context import Color, DrawingSurface
from scrollscrub.render.surface import SurfaceLifecycle
from scrollscrub.sections.quantizer import SECTION_BREAKPOINTS, SectionTracker
from scrollscrub.sections.transforms import (
    cta_transform,
    glow_style,
    loader_ring_offset,
    progress_dots,
    scroll_indicator_opacity,
    stage_transform,
    text_transforms,
)


logger = logging.getLogger(__name__)


class ScrubScene:
    """
    Scroll-scrubbed frame sequence bound to a viewport.

    Example:
        viewport = Viewport(1440, 900, device_pixel_ratio=2.0, document_height=5400)
        scene = ScrubScene(viewport, DirectoryFrameSource("./public"))

        await scene.load_assets()
        await scene.attach(RasterSurface())

        viewport.scroll_to(4500)       # targets move, loop catches up
        print(scene.active_section.value)

        await scene.close()
    """

    def __init__(
        self,
        viewport: Viewport,
        source: FrameSource,
        frame_count: int = TOTAL_FRAMES,
        priority_count: int = PRIORITY_FRAMES,
        max_concurrency: int = 16,
        scroll_alpha: float = SCROLL_ALPHA,
        frame_alpha: float = FRAME_ALPHA,
        tick_rate_hz: float = 60.0,
        breakpoints: Sequence[float] = SECTION_BREAKPOINTS,
        width_fraction: float = 0.5,
        height_fraction: float = 0.55,
        max_size: float = 500.0,
        background: Color = (0, 0, 0),
        clamp_scroll: bool = True,
    ) -> None:
        self.viewport = viewport
        self.frames = FrameSequence(frame_count)
        self.loader = AssetLoader(
            source,
            self.frames,
            priority_count=priority_count,
            max_concurrency=max_concurrency,
        )
        self.tracker = SectionTracker(breakpoints)

        self.scroll_alpha = scroll_alpha
        self.frame_alpha = frame_alpha
        self.tick_rate_hz = tick_rate_hz
        self.width_fraction = width_fraction
        self.height_fraction = height_fraction
        self.max_size = max_size
        self.background = background
        self.clamp_scroll = clamp_scroll

        self.scroll_progress: ObservableValue[float] = ObservableValue("scroll_progress", 0.0)
        self.cta_visible: ObservableValue[bool] = ObservableValue("cta_visible", False)
        self.tracker.subscribe(self._on_section_change)

        self.state: Optional[ScrollState] = None
        self.compositor: Optional[Compositor] = None
        self.lifecycle: Optional[SurfaceLifecycle] = None
        self.controller: Optional[MotionController] = None

    # -------------------------------------------------------------------------
    # Exposed values
    # -------------------------------------------------------------------------

    @property
    def loading_progress(self) -> ObservableValue[int]:
        return self.loader.loading_progress

    @property
    def images_ready(self) -> ObservableValue[bool]:
        return self.loader.images_ready

    @property
    def active_section(self) -> ObservableValue[int]:
        return self.tracker.active_section

    @property
    def attached(self) -> bool:
        return self.controller is not None

    @property
    def cta_section(self) -> int:
        return self.tracker.section_count - 1

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def load_assets(self) -> None:
        """Start preloading; returns once the priority batch has settled."""
        await self.loader.load()

    async def attach(self, surface: DrawingSurface, autostart: bool = True) -> None:
        """
        Bind the scene to a drawing surface.

        Waits for the priority batch, sizes the surface, draws frame 0,
        registers listeners and (unless autostart is False) starts the
        motion loop. With autostart=False the host drives tick() itself.
        """
        if self.attached:
            raise RuntimeError("ScrubScene is already attached")

        await self.loader.wait_ready()

        self.state = ScrollState()
        self.compositor = Compositor(self.frames, surface, background=self.background)
        self.lifecycle = SurfaceLifecycle(
            surface,
            self.viewport,
            self.compositor,
            width_fraction=self.width_fraction,
            height_fraction=self.height_fraction,
            max_size=self.max_size,
        )
        self.controller = MotionController(
            self.state,
            self.compositor,
            self.tracker,
            lambda: self.viewport.max_scroll,
            scroll_alpha=self.scroll_alpha,
            frame_alpha=self.frame_alpha,
            tick_rate_hz=self.tick_rate_hz,
            scroll_progress=self.scroll_progress,
        )

        self.lifecycle.resize()
        self.compositor.draw(0)

        if autostart:
            self.controller.start()
        self.viewport.add_listener(SCROLL, self.on_scroll)
        self.viewport.add_listener(RESIZE, self.on_resize)
        self.on_scroll()

        logger.info(
            f"Scene attached: surface={surface.width}x{surface.height}, "
            f"max_scroll={self.viewport.max_scroll}"
        )

    async def detach(self) -> None:
        """Stop the motion loop and unregister listeners."""
        if not self.attached:
            return
        await self.controller.stop()
        self.viewport.remove_listener(SCROLL, self.on_scroll)
        self.viewport.remove_listener(RESIZE, self.on_resize)

        self.controller = None
        self.lifecycle = None
        self.compositor = None
        self.state = None
        logger.info("Scene detached")

    async def close(self) -> None:
        """Detach and cancel any loads still in flight."""
        await self.detach()
        await self.loader.cancel()

    # -------------------------------------------------------------------------
    # Event handlers (write targets only)
    # -------------------------------------------------------------------------

    def on_scroll(self) -> None:
        max_scroll = self.viewport.max_scroll
        scroll_y = self.viewport.scroll_y
        if self.clamp_scroll:
            scroll_y = min(max(scroll_y, 0.0), max(max_scroll, 0.0))

        self.state.target_scroll = scroll_y
        if max_scroll > 0:
            self.state.target_frame = (scroll_y / max_scroll) * (len(self.frames) - 1)
        else:
            self.state.target_frame = 0.0

    def on_resize(self) -> None:
        self.lifecycle.resize()

    def tick(self) -> float:
        """Run one motion tick (for hosts that drive the loop manually)."""
        if self.controller is None:
            raise RuntimeError("ScrubScene is not attached")
        return self.controller.tick()

    def _on_section_change(self, section: int) -> None:
        self.cta_visible.publish(section == self.cta_section)

    # -------------------------------------------------------------------------
    # Read-side
    # -------------------------------------------------------------------------

    def snapshot(self) -> SceneSnapshot:
        """Everything the presentation layer renders from, in one model."""
        active = self.active_section.value
        progress = self.scroll_progress.value
        panels = self.cta_section

        frame = FrameStatus(resolved_frames=self.frames.resolved_count)
        if self.attached:
            frame = FrameStatus(
                last_drawn=self.compositor.last_drawn,
                current_frame=self.state.current_frame,
                target_frame=self.state.target_frame,
                paint_count=self.compositor.paint_count,
                resolved_frames=self.frames.resolved_count,
            )

        return SceneSnapshot(
            loading_progress=self.loading_progress.value,
            images_ready=self.images_ready.value,
            scroll_progress=progress,
            active_section=active,
            cta=CtaTransformOut.model_validate(
                cta_transform(active, self.cta_section), from_attributes=True
            ),
            sections=[
                TextTransformOut.model_validate(t, from_attributes=True)
                for t in text_transforms(active, panels)
            ],
            stage=StageTransformOut.model_validate(stage_transform(progress), from_attributes=True),
            glow=GlowStyleOut.model_validate(glow_style(progress), from_attributes=True),
            scroll_indicator_opacity=scroll_indicator_opacity(progress),
            loader_ring_offset=loader_ring_offset(self.loading_progress.value),
            progress_dots=progress_dots(active, panels),
            frame=frame,
        )

    def get_metrics(self) -> dict:
        """Get scene metrics for observability."""
        metrics = {
            "attached": self.attached,
            "viewport": self.viewport.to_dict(),
            "loader": self.loader.get_metrics(),
        }
        if self.attached:
            metrics["compositor"] = self.compositor.get_metrics()
            metrics["controller"] = self.controller.get_metrics()
            metrics["surface_resizes"] = self.lifecycle.resize_count
        return metrics
