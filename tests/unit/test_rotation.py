"""
Unit tests for single-shape rotation.
"""

import pytest

from models.geometry import Point
from services.rotation import rotate, rotation_delta, rotation_from_pointer


class TestRotate:
    """Tests for rotate."""

    def test_plain_delta(self):
        assert rotate(10, 20) == 30

    def test_snaps_the_delta_not_the_result(self):
        """Test that a shape starting off-grid keeps its offset when snapping."""
        assert rotate(10, 20, snap_enabled=True) == 25
        assert rotate(10, 37, snap_enabled=True) == 40

    def test_wraps_past_360(self):
        assert rotate(350, 20) == 10

    def test_wraps_below_zero(self):
        assert rotate(0, -30) == 330

    def test_custom_increment(self):
        assert rotate(0, 44, snap_enabled=True, increment=45) == 45


class TestRotationFromPointer:
    """Tests for pointer-driven rotation."""

    CENTER = Point(100, 100)
    TOP = Point(100, 50)

    def test_quarter_turn(self):
        result = rotation_from_pointer(self.CENTER, self.TOP, Point(150, 100), 0)
        assert result == pytest.approx(90)

    def test_delta_adds_to_start_rotation(self):
        result = rotation_from_pointer(self.CENTER, self.TOP, Point(150, 100), 30)
        assert result == pytest.approx(120)

    def test_snapping(self):
        result = rotation_from_pointer(self.CENTER, self.TOP, Point(150, 104), 0, snap_enabled=True)
        assert result == 90

    def test_counter_clockwise_drag(self):
        result = rotation_from_pointer(self.CENTER, self.TOP, Point(50, 100), 0)
        assert result == pytest.approx(270)

    def test_delta(self):
        assert rotation_delta(self.CENTER, self.TOP, Point(100, 150)) == pytest.approx(180)
