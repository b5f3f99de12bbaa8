"""
Motion Controller
=================

The single recurring task that turns scroll targets into rendered frames.

Each tick:
    1. Smooth current_scroll toward target_scroll (alpha 0.08)
    2. Smooth current_frame toward target_frame (alpha 0.12)
    3. Ask the compositor to draw current_frame
    4. Compute progress = current_scroll / max_scroll (0 if max_scroll <= 0)
    5. Publish progress and feed it to the section tracker

Design Rules:
    - Event handlers write targets; only the tick writes current values
    - Ticks never overlap (one task, one loop)
    - The loop never ends on its own; stop() cancels it
    - A failing tick is logged and counted, never fatal
"""

import asyncio
import logging
from typing import Callable, Optional

from scrollscrub.models.state import ScrollState
from scrollscrub.motion.smoothing import (
    FRAME_ALPHA,
    SCROLL_ALPHA,
    approach,
    validate_alpha,
)
from scrollscrub.observability.observable import ObservableValue
from scrollscrub.render.compositor import Compositor
from scrollscrub.sections.quantizer import SectionTracker


logger = logging.getLogger(__name__)


class MotionController:
    """
    Smooths scroll state and drives compositing on a fixed cadence.

    Attributes:
        state: Shared scroll state record
        scroll_alpha: Smoothing factor for scroll position
        frame_alpha: Smoothing factor for frame index
        tick_rate_hz: Nominal ticks per second of the run loop
        scroll_progress: Observable smoothed progress, clamped to [0, 1]

    Example:
        controller = MotionController(state, compositor, tracker, lambda: viewport.max_scroll)
        controller.start()
        ...
        await controller.stop()

    Tests drive the controller with tick() instead of start().
    """

    def __init__(
        self,
        state: ScrollState,
        compositor: Compositor,
        tracker: SectionTracker,
        max_scroll: Callable[[], float],
        scroll_alpha: float = SCROLL_ALPHA,
        frame_alpha: float = FRAME_ALPHA,
        tick_rate_hz: float = 60.0,
        log_every_n_ticks: int = 600,
        scroll_progress: Optional[ObservableValue[float]] = None,
    ) -> None:
        """
        Initialize motion controller.

        Args:
            state: Scroll state shared with the event handlers
            compositor: Compositor to draw the smoothed frame with
            tracker: Section tracker fed with smoothed progress
            max_scroll: Returns the current scrollable distance
            scroll_alpha: Smoothing factor for scroll position in (0, 1]
            frame_alpha: Smoothing factor for frame index in (0, 1]
            tick_rate_hz: Run loop cadence
            log_every_n_ticks: Log a progress summary every N ticks
            scroll_progress: Observable to publish progress into (created if None)
        """
        if tick_rate_hz <= 0:
            raise ValueError("tick_rate_hz must be positive")

        self.state = state
        self.compositor = compositor
        self.tracker = tracker
        self.max_scroll = max_scroll
        self.scroll_alpha = validate_alpha(scroll_alpha)
        self.frame_alpha = validate_alpha(frame_alpha)
        self.tick_rate_hz = tick_rate_hz
        self.log_every_n_ticks = log_every_n_ticks

        if scroll_progress is None:
            scroll_progress = ObservableValue("scroll_progress", 0.0)
        self.scroll_progress: ObservableValue[float] = scroll_progress

        self._task: Optional[asyncio.Task] = None
        self._tick_count: int = 0
        self._tick_errors: int = 0
        self._late_ticks: int = 0

        logger.info(
            f"MotionController initialized: scroll_alpha={scroll_alpha}, "
            f"frame_alpha={frame_alpha}, rate={tick_rate_hz}Hz"
        )

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def tick_count(self) -> int:
        return self._tick_count

    def tick(self) -> float:
        """
        Advance the smoothing filters by one step and render.

        Returns:
            The unclamped progress computed this tick.
        """
        state = self.state
        state.current_scroll = approach(state.current_scroll, state.target_scroll, self.scroll_alpha)
        state.current_frame = approach(state.current_frame, state.target_frame, self.frame_alpha)

        self.compositor.draw(state.current_frame)

        max_scroll = self.max_scroll()
        progress = state.current_scroll / max_scroll if max_scroll > 0 else 0.0

        self.scroll_progress.publish(min(1.0, max(0.0, progress)))
        self.tracker.update(progress)

        self._tick_count += 1
        if self.log_every_n_ticks and self._tick_count % self.log_every_n_ticks == 0:
            logger.info(
                f"Motion [tick {self._tick_count}]: progress={progress:.3f}, "
                f"frame={state.current_frame:.2f}->{state.target_frame:.2f}, "
                f"section={self.tracker.active}"
            )
        return progress

    async def run(self) -> None:
        """
        Tick at tick_rate_hz until cancelled.

        Deadlines advance by a fixed interval; when a tick runs late the
        schedule restarts from now instead of bursting to catch up.
        """
        loop = asyncio.get_running_loop()
        interval = 1.0 / self.tick_rate_hz
        deadline = loop.time()

        logger.info("Motion loop started")
        try:
            while True:
                try:
                    self.tick()
                except Exception as e:
                    self._tick_errors += 1
                    logger.error(f"Tick error (tick={self._tick_count}): {e}")

                deadline += interval
                delay = deadline - loop.time()
                if delay < 0:
                    self._late_ticks += 1
                    deadline = loop.time()
                    delay = 0.0
                await asyncio.sleep(delay)
        except asyncio.CancelledError:
            logger.info("Motion loop cancelled")
            raise

    def start(self) -> asyncio.Task:
        """Schedule the run loop on the running event loop."""
        if self.running:
            raise RuntimeError("MotionController is already running")
        self._task = asyncio.create_task(self.run(), name="motion_loop")
        return self._task

    async def stop(self) -> None:
        """Cancel the run loop and wait for it to finish."""
        if self._task is None:
            return
        task, self._task = self._task, None
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info(f"Motion loop stopped after {self._tick_count} ticks")

    def get_metrics(self) -> dict:
        """Get controller metrics for observability."""
        return {
            "running": self.running,
            "tick_count": self._tick_count,
            "tick_errors": self._tick_errors,
            "late_ticks": self._late_ticks,
            "tick_rate_hz": self.tick_rate_hz,
            "scroll_progress": round(self.scroll_progress.value, 4),
            "active_section": self.tracker.active,
            **self.state.to_dict(),
        }
