"""Tests for the pan/zoom viewport."""

import pytest

from ideaweaver.config import ViewportConfig
from ideaweaver.mindmap.viewport import ScrollAction, ViewportController


def world_under(vp, anchor):
    return (anchor[0] / vp.zoom - vp.pan[0], anchor[1] / vp.zoom - vp.pan[1])


class TestZoom:
    """Tests for anchored zooming."""

    def test_wheel_example(self):
        """zoom_at_point(-120, (100, 100)) from zoom 1 gives 1.045."""
        vp = ViewportController()
        before = world_under(vp, (100, 100))
        assert vp.zoom_at_point(-120, (100, 100)) == pytest.approx(1.045)
        assert world_under(vp, (100, 100)) == pytest.approx(before)

    def test_positive_delta_zooms_out(self):
        vp = ViewportController()
        assert vp.zoom_at_point(120, (0, 0)) == pytest.approx(0.955)

    def test_small_delta_step(self):
        vp = ViewportController()
        assert vp.zoom_at_point(-16, (0, 0)) == pytest.approx(1.02)

    def test_zero_delta_is_noop(self):
        vp = ViewportController()
        vp.pan = (3.0, 4.0)
        vp.zoom_at_point(0, (100, 100))
        assert vp.state() == (1.0, (3.0, 4.0))

    def test_zoom_bounds(self):
        vp = ViewportController()
        for _ in range(100):
            vp.zoom_in()
        assert vp.zoom == pytest.approx(1.6)
        for _ in range(100):
            vp.zoom_out()
        assert vp.zoom == pytest.approx(0.6)

    def test_clamped_zoom_keeps_pan(self):
        vp = ViewportController(ViewportConfig(zoom_initial=1.6))
        vp.pan = (5.0, 5.0)
        vp.zoom_in()
        assert vp.pan == (5.0, 5.0)

    def test_anchor_falls_back_to_last_pointer(self):
        vp = ViewportController()
        vp.note_pointer((300, 200))
        before = world_under(vp, (300, 200))
        vp.zoom_at_point(-120)
        assert world_under(vp, (300, 200)) == pytest.approx(before)

    def test_anchor_falls_back_to_centre(self):
        vp = ViewportController(size=(1200, 700))
        before = world_under(vp, (600, 350))
        vp.zoom_at_point(-120)
        assert world_under(vp, (600, 350)) == pytest.approx(before)

    def test_anchor_invariant_over_many_steps(self):
        vp = ViewportController()
        anchor = (640.0, 123.0)
        before = world_under(vp, anchor)
        for delta in (-300, -40, 200, -1000, 7, 120):
            vp.zoom_at_point(delta, anchor)
            assert world_under(vp, anchor) == pytest.approx(before)


class TestPan:
    """Tests for panning and centring."""

    def test_pan_by_divides_by_zoom(self):
        vp = ViewportController()
        vp.zoom = 1.25
        vp.pan_by((50, -20))
        assert vp.pan == pytest.approx((-40.0, 16.0))

    def test_center_on(self):
        vp = ViewportController(size=(1200, 700))
        vp.center_on((100, 50))
        assert vp.pan == pytest.approx((500.0, 300.0))
        assert vp.screen_from_world((100, 50)) == pytest.approx((600.0, 350.0))

    def test_screen_world_inverse(self):
        vp = ViewportController()
        vp.zoom, vp.pan = 1.3, (12.0, -7.0)
        assert vp.world_from_screen(vp.screen_from_world((33.0, 44.0))) == pytest.approx((33.0, 44.0))

    def test_fit_small_layout_caps_zoom_at_one(self):
        vp = ViewportController(size=(1200, 700))
        vp.fit((-100, -100, 100, 100))
        assert vp.zoom == pytest.approx(1.0)
        assert vp.pan == pytest.approx((600.0, 350.0))

    def test_fit_large_layout_respects_min_zoom(self):
        vp = ViewportController(size=(1200, 700))
        vp.fit((-2000, -1000, 2000, 1000))
        assert vp.zoom == pytest.approx(0.6)
        assert vp.pan == pytest.approx((1000.0, 700 / 1.2))

    def test_fit_empty_centres_origin(self):
        vp = ViewportController(size=(1200, 700))
        vp.fit(None)
        assert vp.pan == pytest.approx((600.0, 350.0))


class TestScroll:
    """Tests for wheel/trackpad classification."""

    def test_plain_scroll_pans(self):
        vp = ViewportController()
        assert vp.handle_scroll(10, 20) is ScrollAction.PAN
        assert vp.pan == pytest.approx((-10.0, -20.0))
        assert vp.zoom == 1.0

    @pytest.mark.parametrize('kwargs', [{'ctrl': True}, {'meta': True}, {'dz': 1.0}])
    def test_modifier_or_pinch_zooms(self, kwargs):
        vp = ViewportController()
        action = vp.handle_scroll(0, -120, at=(100, 100), **kwargs)
        assert action is ScrollAction.ZOOM
        assert vp.zoom == pytest.approx(1.045)
        assert world_under(vp, (100, 100)) == pytest.approx((100.0, 100.0))

    def test_pinch_without_vertical_scroll_uses_dz(self):
        vp = ViewportController()
        action = vp.handle_scroll(0, 0, dz=-120, at=(100, 100))
        assert action is ScrollAction.ZOOM
        assert vp.zoom == pytest.approx(1.045)
        assert world_under(vp, (100, 100)) == pytest.approx((100.0, 100.0))

    def test_scroll_records_pointer(self):
        vp = ViewportController()
        vp.handle_scroll(1, 1, at=(5, 6))
        assert vp.last_pointer == (5.0, 6.0)

    def test_empty_scroll(self):
        vp = ViewportController()
        assert vp.handle_scroll(0, 0) is ScrollAction.NONE
        assert vp.handle_scroll(5, 0, ctrl=True) is ScrollAction.NONE
