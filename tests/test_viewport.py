"""
Tests for the viewport controller.

Covers:
- Zoom bounds for wheel, pinch, double-click and buttons
- Pointer-anchored zoom keeping the logical point under the cursor
- Drag lifecycle (press/move/release, leave, cancel, context manager)
- Derived presentation: transform, cursor, zoom percent
"""

import pytest

from silsilah.services.viewport import ORIGIN, Mode, Point, ViewportController, ViewportState


@pytest.fixture
def vp():
    return ViewportController()


class TestConstruction:

    def test_defaults(self, vp):
        assert vp.state.scale == 1.0
        assert vp.state.offset == ORIGIN
        assert vp.mode is Mode.IDLE

    @pytest.mark.parametrize("lo,hi", [(0, 2.0), (1.2, 2.0), (0.3, 0.9), (-1, 2.0)])
    def test_rejects_bounds_that_exclude_one(self, lo, hi):
        with pytest.raises(ValueError):
            ViewportController(min_zoom=lo, max_zoom=hi)

    def test_rejects_non_positive_step(self):
        with pytest.raises(ValueError):
            ViewportController(zoom_step=0)

    def test_initial_state_is_clamped(self):
        vp = ViewportController(state=ViewportState(scale=5.0))

        assert vp.state.scale == 2.0


class TestZoom:

    def test_wheel_up_zooms_in(self, vp):
        vp.wheel((0, 0), -100)

        assert vp.state.scale == pytest.approx(1.1)

    def test_wheel_down_zooms_out(self, vp):
        vp.wheel((0, 0), 100)

        assert vp.state.scale == pytest.approx(0.9)

    def test_zero_delta_is_ignored(self, vp):
        vp.wheel((10, 10), 0)

        assert vp.state.scale == 1.0

    def test_wheel_never_exceeds_max(self, vp):
        for _ in range(50):
            vp.wheel((0, 0), -1)

        assert vp.state.scale == 2.0
        assert not vp.can_zoom_in

    def test_wheel_never_drops_below_min(self, vp):
        for _ in range(50):
            vp.wheel((0, 0), 1)

        assert vp.state.scale == 0.3
        assert not vp.can_zoom_out

    def test_double_click_steps_by_three_tenths(self, vp):
        vp.double_click((0, 0))

        assert vp.state.scale == pytest.approx(1.3)

    def test_double_click_clamps(self, vp):
        for _ in range(10):
            vp.double_click((5, 5))

        assert vp.state.scale == 2.0

    def test_pinch_out_zooms_in(self, vp):
        vp.pinch((0, 0), 1)

        assert vp.state.scale == pytest.approx(1.1)

    def test_pinch_in_zooms_out(self, vp):
        vp.pinch((0, 0), -1)

        assert vp.state.scale == pytest.approx(0.9)

    @pytest.mark.parametrize("point", [(0, 0), (200, 150), (640, 10)])
    def test_wheel_keeps_point_under_cursor(self, vp, point):
        vp.state.offset = Point(40, -25)
        before = vp.to_logical(point)

        vp.wheel(point, -1)

        after = vp.to_logical(point)
        assert after.x == pytest.approx(before.x)
        assert after.y == pytest.approx(before.y)

    def test_double_click_keeps_point_under_cursor(self, vp):
        before = vp.to_logical((300, 200))

        vp.double_click((300, 200))

        after = vp.to_logical((300, 200))
        assert after.x == pytest.approx(before.x)
        assert after.y == pytest.approx(before.y)

    def test_zoom_at_bound_leaves_offset_alone(self, vp):
        vp.state.scale = 2.0
        vp.state.offset = Point(10, 20)

        vp.wheel((300, 300), -1)

        assert vp.state.offset == Point(10, 20)

    def test_buttons_step_without_moving(self, vp):
        vp.state.offset = Point(7, 8)

        vp.zoom_in()
        vp.zoom_in()
        vp.zoom_out()

        assert vp.state.scale == pytest.approx(1.1)
        assert vp.state.offset == Point(7, 8)

    def test_buttons_respect_bounds(self, vp):
        for _ in range(30):
            vp.zoom_out()

        assert vp.state.scale == 0.3

    def test_wheel_ignored_while_dragging(self, vp):
        vp.press((0, 0))

        vp.wheel((0, 0), -1)

        assert vp.state.scale == 1.0

    def test_reset_restores_identity(self, vp):
        vp.wheel((100, 100), -1)
        vp.press((0, 0))
        vp.move((50, 50))

        vp.reset()

        assert vp.state.scale == 1.0
        assert vp.state.offset == ORIGIN
        assert vp.mode is Mode.IDLE


class TestDrag:

    def test_drag_moves_offset_by_pointer_delta(self, vp):
        vp.state.offset = Point(10, 10)

        vp.press((100, 100))
        vp.move((130, 90))

        assert vp.mode is Mode.DRAGGING
        assert vp.state.offset == Point(40, 0)

    def test_release_returns_to_idle(self, vp):
        vp.press((0, 0))
        vp.release()

        vp.move((500, 500))

        assert vp.mode is Mode.IDLE
        assert vp.state.offset == ORIGIN

    @pytest.mark.parametrize("exit_name", ["leave", "cancel"])
    def test_leave_and_cancel_end_the_drag(self, vp, exit_name):
        vp.press((0, 0))

        getattr(vp, exit_name)()

        assert vp.mode is Mode.IDLE
        assert vp.cursor == "grab"

    def test_secondary_button_does_not_drag(self, vp):
        vp.press((0, 0), button=2)
        vp.move((40, 40))

        assert vp.mode is Mode.IDLE
        assert vp.state.offset == ORIGIN

    def test_move_without_press_is_ignored(self, vp):
        vp.move((40, 40))

        assert vp.state.offset == ORIGIN

    def test_cursor_follows_mode(self, vp):
        assert vp.cursor == "grab"
        vp.press((0, 0))
        assert vp.cursor == "grabbing"

    def test_drag_context_releases_on_error(self, vp):
        with pytest.raises(RuntimeError):
            with vp.drag((0, 0)) as ctl:
                ctl.move((20, 30))
                raise RuntimeError("pointer lost")

        assert vp.mode is Mode.IDLE
        assert vp.state.offset == Point(20, 30)


class TestProjection:

    def test_round_trip_between_spaces(self, vp):
        vp.state.scale = 1.5
        vp.state.offset = Point(-30, 12)

        screen = vp.to_screen((100, 40))

        assert screen == Point(120, 72)
        assert vp.to_logical(screen) == pytest.approx(Point(100, 40))

    def test_transform_string(self, vp):
        vp.state.scale = 1.5
        vp.state.offset = Point(12, -4)

        assert vp.transform() == "translate(12, -4) scale(1.5)"

    def test_snapshot(self, vp):
        vp.zoom_in()

        snap = vp.snapshot()

        assert snap["zoomPercent"] == 110
        assert snap["mode"] == "idle"
        assert snap["offset"] == {"x": 0.0, "y": 0.0}
        assert snap["canZoomIn"] and snap["canZoomOut"]
