"""
Section Tests
=============

Progress quantization, the section tracker, and the presentation
derivations computed from the active section and scroll progress.
"""

import math

import pytest


class TestSectionFor:
    """Tests for progress quantization."""

    @pytest.mark.parametrize(
        "progress, expected",
        [
            (0.0, 0),
            (0.17, 0),
            (0.18, 1),
            (0.359, 1),
            (0.36, 2),
            (0.54, 3),
            (0.71, 3),
            (0.72, 4),
            (0.879, 4),
            (0.88, 5),
            (1.0, 5),
        ],
    )
    def test_default_breakpoints(self, progress, expected):
        """Breakpoints are inclusive lower bounds of the next section."""
        from scrollscrub.sections import section_for

        assert section_for(progress) == expected

    def test_out_of_range_progress(self):
        """Progress outside [0, 1] lands in the first or last section."""
        from scrollscrub.sections import section_for

        assert section_for(-0.2) == 0
        assert section_for(1.4) == 5

    def test_monotone(self):
        """Section never decreases as progress increases."""
        from scrollscrub.sections import section_for

        sections = [section_for(i / 1000) for i in range(1001)]
        assert sections == sorted(sections)
        assert sections[0] == 0
        assert sections[-1] == 5


class TestValidateBreakpoints:
    """Tests for breakpoint validation."""

    def test_valid(self):
        from scrollscrub.sections import validate_breakpoints

        assert validate_breakpoints([0.5, 1.0]) == (0.5, 1.0)

    @pytest.mark.parametrize(
        "breakpoints",
        [[], [0.3, 0.3], [0.5, 0.2], [0.0, 0.5], [0.5, 1.2]],
    )
    def test_invalid(self, breakpoints):
        from scrollscrub.sections import validate_breakpoints

        with pytest.raises(ValueError):
            validate_breakpoints(breakpoints)


class TestSectionTracker:
    """Tests for change-only section notification."""

    def test_notifies_only_on_change(self):
        """Repeated progress within a section does not re-notify."""
        from scrollscrub.sections import SectionTracker

        tracker = SectionTracker()
        seen = []
        tracker.subscribe(seen.append)

        for progress in (0.0, 0.1, 0.2, 0.25, 0.4, 0.41, 0.9, 0.95):
            tracker.update(progress)

        assert seen == [1, 2, 5]
        assert tracker.active == 5
        assert tracker.change_count == 3

    def test_backwards_scroll(self):
        """Scrolling back up walks sections back down."""
        from scrollscrub.sections import SectionTracker

        tracker = SectionTracker()
        tracker.update(0.95)
        assert tracker.update(0.1) == 0
        assert tracker.active == 0

    def test_unsubscribe(self):
        from scrollscrub.sections import SectionTracker

        tracker = SectionTracker()
        seen = []
        unsubscribe = tracker.subscribe(seen.append)
        tracker.update(0.2)
        unsubscribe()
        tracker.update(0.5)

        assert seen == [1]

    def test_custom_breakpoints(self):
        from scrollscrub.sections import SectionTracker

        tracker = SectionTracker([0.5])
        assert tracker.section_count == 2
        assert tracker.update(0.75) == 1


class TestTextTransforms:
    """Tests for per-panel transforms."""

    def test_active_past_future(self):
        """Panels before the active one exit up, panels after wait below."""
        from scrollscrub.sections import SectionRelation, text_transforms

        transforms = text_transforms(2)

        assert len(transforms) == 5
        assert [t.relation for t in transforms] == [
            SectionRelation.PAST,
            SectionRelation.PAST,
            SectionRelation.ACTIVE,
            SectionRelation.FUTURE,
            SectionRelation.FUTURE,
        ]

        active = transforms[2]
        assert (active.opacity, active.y, active.scale, active.blur) == (1.0, 0.0, 1.0, 0.0)
        assert active.interactive

        past = transforms[0]
        assert (past.opacity, past.y, past.scale, past.blur) == (0.0, -80.0, 0.9, 12.0)
        assert not past.interactive

        future = transforms[4]
        assert (future.opacity, future.y, future.scale, future.blur) == (0.0, 80.0, 0.9, 12.0)

    def test_cta_section_hides_every_panel(self):
        """In the last section no text panel is active."""
        from scrollscrub.sections import CTA_SECTION, SectionRelation, text_transforms

        transforms = text_transforms(CTA_SECTION)
        assert all(t.relation is SectionRelation.PAST for t in transforms)
        assert not any(t.interactive for t in transforms)


class TestCtaAndIndicators:
    """Tests for the call-to-action, dots and scroll hint."""

    def test_cta_visibility(self):
        from scrollscrub.sections import cta_transform

        hidden = cta_transform(4)
        shown = cta_transform(5)

        assert (hidden.visible, hidden.opacity, hidden.y, hidden.interactive) == (False, 0.0, 40.0, False)
        assert (shown.visible, shown.opacity, shown.y, shown.interactive) == (True, 1.0, 0.0, True)

    def test_progress_dots(self):
        from scrollscrub.sections import progress_dots

        assert progress_dots(1) == [False, True, False, False, False]
        assert progress_dots(5) == [False] * 5

    def test_scroll_indicator(self):
        from scrollscrub.sections import scroll_indicator_opacity

        assert scroll_indicator_opacity(0.0) == 1.0
        assert scroll_indicator_opacity(0.049) == 1.0
        assert scroll_indicator_opacity(0.05) == 0.0

    def test_loader_ring(self):
        from scrollscrub.sections import loader_ring_offset

        assert loader_ring_offset(0) == 283.0
        assert loader_ring_offset(50) == pytest.approx(141.5)
        assert loader_ring_offset(100) == 0.0


class TestStageAndGlow:
    """Tests for progress-driven stage transform and glow."""

    def test_stage_endpoints(self):
        from scrollscrub.sections import stage_transform

        start = stage_transform(0.0)
        end = stage_transform(1.0)

        assert start.perspective == 1500.0
        assert (start.rotate_x, start.rotate_y, start.translate_z, start.scale) == (0.0, 0.0, 0.0, 1.0)
        assert end.rotate_x == pytest.approx(8.0)
        assert end.rotate_y == pytest.approx(0.0, abs=1e-9)
        assert end.translate_z == pytest.approx(120.0)
        assert end.scale == pytest.approx(1.15)

    def test_stage_sway_peaks_midway(self):
        from scrollscrub.sections import stage_transform

        assert stage_transform(0.5).rotate_y == pytest.approx(3.0)
        assert stage_transform(0.25).rotate_y == pytest.approx(3.0 * math.sin(math.pi / 4))

    def test_glow(self):
        from scrollscrub.sections import glow_style

        glow = glow_style(1.0)
        assert glow.opacity == pytest.approx(0.9)
        assert glow.scale == pytest.approx(1.3)
        assert glow_style(0.0).opacity == 0.5
