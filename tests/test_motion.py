"""
Motion Tests
============

Exponential smoothing and the motion controller tick.
"""

import asyncio

import pytest


class TestSmoothing:
    """Tests for the first-order smoothing step."""

    def test_single_step(self):
        """One step from 0 toward 100 with alpha 0.08 lands at 8."""
        from scrollscrub.motion import SCROLL_ALPHA, approach

        assert approach(0.0, 100.0, SCROLL_ALPHA) == pytest.approx(8.0)

    def test_matches_closed_form(self):
        """Iterated steps agree with target - gap * (1 - alpha) ** k."""
        from scrollscrub.motion import FRAME_ALPHA, approach, closed_form

        value = 10.0
        for _ in range(25):
            value = approach(value, 127.0, FRAME_ALPHA)

        assert value == pytest.approx(closed_form(10.0, 127.0, FRAME_ALPHA, 25))

    def test_monotone_without_overshoot(self):
        """The sequence climbs toward the target and never passes it."""
        from scrollscrub.motion import approach

        value, previous = 0.0, -1.0
        for _ in range(500):
            value = approach(value, 50.0, 0.12)
            assert previous <= value <= 50.0
            previous = value

    def test_alpha_one_snaps(self):
        from scrollscrub.motion import approach

        assert approach(3.0, 9.0, 1.0) == 9.0

    def test_steps_to_within(self):
        """Step count agrees with the closed form at the boundary."""
        from scrollscrub.motion import closed_form, steps_to_within

        steps = steps_to_within(127.0, 0.5, 0.12)

        assert abs(127.0 - closed_form(0.0, 127.0, 0.12, steps)) < 0.5
        assert abs(127.0 - closed_form(0.0, 127.0, 0.12, steps - 1)) >= 0.5
        assert steps_to_within(0.1, 0.5, 0.12) == 0

    @pytest.mark.parametrize("alpha", [0.0, -0.1, 1.5])
    def test_invalid_alpha(self, alpha):
        from scrollscrub.motion.smoothing import validate_alpha

        with pytest.raises(ValueError):
            validate_alpha(alpha)


def _controller(frames, surface, max_scroll=1000.0, **kwargs):
    from scrollscrub.models import ScrollState, SurfaceDescriptor
    from scrollscrub.motion import MotionController
    from scrollscrub.render import Compositor
    from scrollscrub.sections import SectionTracker

    surface.set_descriptor(SurfaceDescriptor(100))
    state = ScrollState()
    compositor = Compositor(frames, surface)
    tracker = SectionTracker()
    controller = MotionController(state, compositor, tracker, lambda: max_scroll, **kwargs)
    return controller, state, compositor, tracker


class TestMotionController:
    """Tests for the per-tick update."""

    def test_tick_smooths_both_values(self, sample_frames, recording_surface):
        from scrollscrub.motion import FRAME_ALPHA, SCROLL_ALPHA

        controller, state, _, _ = _controller(sample_frames, recording_surface)
        state.target_scroll = 1000.0
        state.target_frame = 127.0

        controller.tick()

        assert state.current_scroll == pytest.approx(1000.0 * SCROLL_ALPHA)
        assert state.current_frame == pytest.approx(127.0 * FRAME_ALPHA)

    def test_progress_and_section(self, sample_frames, recording_surface):
        """Progress is smoothed scroll over max scroll; the tracker follows it."""
        controller, state, _, tracker = _controller(sample_frames, recording_surface)
        state.target_scroll = 1000.0
        state.target_frame = 127.0

        for _ in range(300):
            progress = controller.tick()

        assert progress == pytest.approx(1.0, abs=1e-6)
        assert tracker.active == 5
        assert controller.scroll_progress.value == pytest.approx(1.0, abs=1e-6)

    def test_zero_extent(self, sample_frames, recording_surface):
        """A page with nothing to scroll reports progress 0."""
        controller, state, _, tracker = _controller(sample_frames, recording_surface, max_scroll=0.0)
        state.target_scroll = 50.0

        assert controller.tick() == 0.0
        assert tracker.active == 0

    def test_published_progress_is_clamped(self, sample_frames, recording_surface):
        """Overscroll never publishes progress outside [0, 1]."""
        controller, state, _, _ = _controller(sample_frames, recording_surface)
        state.current_scroll = -200.0
        state.target_scroll = -200.0

        assert controller.tick() < 0
        assert controller.scroll_progress.value == 0.0

    def test_draws_rounded_frame(self, sample_frames, recording_surface):
        controller, state, compositor, _ = _controller(sample_frames, recording_surface)
        state.current_frame = 41.6
        state.target_frame = 41.6

        controller.tick()

        assert compositor.last_drawn == 42

    def test_metrics(self, sample_frames, recording_surface):
        controller, _, _, _ = _controller(sample_frames, recording_surface)
        controller.tick()
        controller.tick()

        metrics = controller.get_metrics()
        assert metrics["tick_count"] == 2
        assert metrics["running"] is False
        assert metrics["active_section"] == 0

    def test_invalid_arguments(self, sample_frames, recording_surface):
        with pytest.raises(ValueError):
            _controller(sample_frames, recording_surface, scroll_alpha=0.0)
        with pytest.raises(ValueError):
            _controller(sample_frames, recording_surface, tick_rate_hz=0)


class TestMotionLoop:
    """Tests for the scheduled run loop."""

    def test_start_and_stop(self, sample_frames, recording_surface):
        """The loop ticks on its own and stops when asked."""
        controller, state, _, _ = _controller(
            sample_frames, recording_surface, tick_rate_hz=200.0
        )
        state.target_scroll = 1000.0

        async def run():
            controller.start()
            assert controller.running
            with pytest.raises(RuntimeError):
                controller.start()
            await asyncio.sleep(0.1)
            await controller.stop()
            ticks = controller.tick_count
            await asyncio.sleep(0.05)
            return ticks

        ticks = asyncio.run(run())

        assert ticks > 0
        assert controller.tick_count == ticks
        assert not controller.running

    def test_tick_errors_do_not_end_loop(self, sample_frames, recording_surface):
        """A failing tick is counted and the loop keeps going."""
        controller, _, _, _ = _controller(
            sample_frames, recording_surface, tick_rate_hz=200.0
        )

        def broken_max_scroll():
            raise ZeroDivisionError("boom")

        controller.max_scroll = broken_max_scroll

        async def run():
            controller.start()
            await asyncio.sleep(0.05)
            still_running = controller.running
            await controller.stop()
            return still_running

        assert asyncio.run(run())
        assert controller.get_metrics()["tick_errors"] > 0
