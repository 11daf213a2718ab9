"""
Unit tests for the geometry kernel.

Tests:
- Angle measurement from a center (0 = up, clockwise)
- Angle normalization and snapping
- Axis constraint for shift-drag
- Point rotation and handle positions
"""

import pytest

from conftest import assert_point_close
from models.geometry import Bounds, Point
from models.interaction import HandleType, RESIZE_HANDLES
from services.geometry_kernel import (
    angle_from_center,
    bounds_center,
    constrain_to_axis,
    get_handle_positions,
    get_rotation_handle_position,
    normalize_angle,
    rotate_point,
    snap_angle,
)


class TestAngleFromCenter:
    """Tests for angle_from_center."""

    def test_point_to_the_right_is_90(self):
        """Test the documented example: right of center reads 90 degrees."""
        assert angle_from_center(Point(100, 100), Point(150, 100)) == pytest.approx(90)

    def test_point_above_is_zero(self):
        """Test that straight up reads 0."""
        assert angle_from_center(Point(100, 100), Point(100, 50)) == pytest.approx(0)

    def test_point_below_is_180(self):
        assert angle_from_center(Point(100, 100), Point(100, 150)) == pytest.approx(180)

    def test_point_to_the_left_is_270(self):
        assert angle_from_center(Point(100, 100), Point(50, 100)) == pytest.approx(270)

    def test_result_is_in_range(self):
        """Test that every direction lands in [0, 360)."""
        center = Point(0, 0)
        for x, y in [(1, -1), (1, 1), (-1, 1), (-1, -1), (0.001, -1000)]:
            angle = angle_from_center(center, Point(x, y))
            assert 0 <= angle < 360


class TestNormalizeAngle:
    """Tests for normalize_angle."""

    def test_negative_angle(self):
        assert normalize_angle(-90) == 270

    def test_full_turns(self):
        assert normalize_angle(720) == 0
        assert normalize_angle(360) == 0

    def test_overflow(self):
        assert normalize_angle(370) == 10

    def test_periodicity(self):
        """Test that adding a full turn never changes the result."""
        for angle in range(-1000, 1000, 7):
            assert normalize_angle(angle) == normalize_angle(angle + 360)

    def test_negative_zero(self):
        """Test that -0.0 normalizes to a plain 0."""
        result = normalize_angle(-0.0)
        assert result == 0
        assert str(result) == "0.0"


class TestSnapAngle:
    """Tests for snap_angle."""

    def test_snaps_down(self):
        assert snap_angle(22, 15) == 15

    def test_snaps_up(self):
        assert snap_angle(23, 15) == 30

    def test_half_rounds_up(self):
        assert snap_angle(7.5, 15) == 15

    def test_idempotent(self):
        """Test that snapping an already snapped angle changes nothing."""
        for value in [0, 3.3, 7.5, 22, 44.9, 181.2, 359.9]:
            once = snap_angle(value, 15)
            assert snap_angle(once, 15) == once

    def test_non_positive_increment_is_noop(self):
        assert snap_angle(22, 0) == 22


class TestConstrainToAxis:
    """Tests for constrain_to_axis."""

    def test_horizontal_movement(self):
        assert constrain_to_axis(Point(20, 3)) == Point(20, 0)

    def test_vertical_movement(self):
        assert constrain_to_axis(Point(3, 20)) == Point(0, 20)

    def test_near_diagonal_prefers_larger_axis(self):
        """Test that within the threshold the dominant axis still wins."""
        assert constrain_to_axis(Point(10, 8)) == Point(10, 0)
        assert constrain_to_axis(Point(8, -10)) == Point(0, -10)

    def test_exact_diagonal_keeps_x(self):
        assert constrain_to_axis(Point(10, 10)) == Point(10, 0)


class TestRotatePoint:
    """Tests for rotate_point."""

    def test_quarter_turn_is_clockwise(self):
        """Test that +90 turns +x into +y (clockwise on screen)."""
        assert_point_close(rotate_point(Point(10, 0), Point(0, 0), 90), Point(0, 10))

    def test_about_offset_center(self):
        assert_point_close(rotate_point(Point(150, 100), Point(100, 100), 180), Point(50, 100))

    def test_zero_rotation_returns_copy(self):
        point = Point(3, 4)
        rotated = rotate_point(point, Point(0, 0), 0)
        assert rotated == point
        assert rotated is not point


class TestHandlePositions:
    """Tests for handle placement."""

    def test_all_eight_handles(self):
        positions = get_handle_positions(Bounds(0, 0, 100, 50))
        assert [handle for handle, _ in positions] == list(RESIZE_HANDLES)

    def test_corner_and_edge_positions(self):
        positions = dict(get_handle_positions(Bounds(0, 0, 100, 50)))
        assert positions[HandleType.NW] == Point(0, 0)
        assert positions[HandleType.N] == Point(50, 0)
        assert positions[HandleType.E] == Point(100, 25)
        assert positions[HandleType.SE] == Point(100, 50)

    def test_rotation_handle_above_top_center(self):
        assert get_rotation_handle_position(Bounds(0, 0, 100, 50), 30) == Point(50, -30)

    def test_bounds_center(self):
        assert bounds_center(Bounds(10, 20, 100, 50)) == Point(60, 45)
