"""
Unit tests for hit-testing and box selection.
"""

import pytest

from models.connection import CurveType
from models.geometry import Bounds, Point
from models.shape import Shape, ShapeType
from services.hit_test import (
    find_connection_at_point,
    find_shape_at_point,
    get_selection_bounds,
    get_selection_box_bounds,
    get_shapes_in_box,
    hit_test_shape,
    hit_threshold,
    is_point_near_segment,
)


class TestHitTestShape:
    """Tests for hit_test_shape."""

    def test_rectangle_includes_half_stroke(self, rect_shape):
        assert hit_test_shape(Point(99.5, 100), rect_shape)
        assert not hit_test_shape(Point(98.5, 100), rect_shape)

    def test_rectangle_interior(self, rect_shape):
        assert hit_test_shape(Point(200, 150), rect_shape)

    def test_ellipse(self):
        ellipse = Shape(shape_type=ShapeType.ELLIPSE, x=0, y=0, width=100, height=50, stroke_width=0)
        assert hit_test_shape(Point(50, 25), ellipse)
        assert hit_test_shape(Point(100, 25), ellipse)
        assert not hit_test_shape(Point(2, 2), ellipse)

    def test_other_kinds_use_bounds(self):
        diamond = Shape(shape_type=ShapeType.DIAMOND, x=0, y=0, width=100, height=100, stroke_width=0)
        assert hit_test_shape(Point(2, 2), diamond)

    def test_rotated_shape(self):
        """Test that a rotated bar is hit along its rotated extent only."""
        bar = Shape(x=0, y=0, width=100, height=20, rotation=90, stroke_width=0)
        assert hit_test_shape(Point(50, 50), bar)
        assert not hit_test_shape(Point(90, 10), bar)


class TestFindShapeAtPoint:
    """Tests for find_shape_at_point."""

    def test_topmost_wins(self):
        below = Shape(id="below", x=0, y=0, width=100, height=100, z_index=0)
        above = Shape(id="above", x=50, y=50, width=100, height=100, z_index=1)
        assert find_shape_at_point(Point(75, 75), [below, above]).id == "above"

    def test_hidden_shapes_skipped(self):
        below = Shape(id="below", x=0, y=0, width=100, height=100, z_index=0)
        hidden = Shape(id="hidden", x=0, y=0, width=100, height=100, z_index=5, visible=False)
        assert find_shape_at_point(Point(50, 50), [below, hidden]).id == "below"

    def test_empty_canvas(self, two_shapes):
        assert find_shape_at_point(Point(200, 200), two_shapes.values()) is None


class TestConnectionHits:
    """Tests for connector picking."""

    def test_threshold_scales_with_zoom(self):
        assert hit_threshold(2.0) == 4
        assert hit_threshold(0.5) == 16
        assert hit_threshold(0) == 8

    def test_near_segment(self):
        assert is_point_near_segment(Point(50, 5), Point(0, 0), Point(100, 0))
        assert not is_point_near_segment(Point(120, 0), Point(0, 0), Point(100, 0))

    def test_find_connection(self, two_shapes, straight_connection):
        assert find_connection_at_point(Point(200, 34), [straight_connection], two_shapes) is straight_connection
        assert find_connection_at_point(Point(200, 60), [straight_connection], two_shapes) is None

    def test_zoomed_out_widens_pick(self, two_shapes, straight_connection):
        found = find_connection_at_point(Point(200, 60), [straight_connection], two_shapes, zoom=0.25)
        assert found is straight_connection

    def test_last_connection_wins(self, two_shapes, straight_connection):
        other = straight_connection.copy(id="c2", curve_type=CurveType.ORTHOGONAL)
        found = find_connection_at_point(Point(200, 30), [straight_connection, other], two_shapes)
        assert found.id == "c2"

    def test_unresolved_connection_skipped(self, straight_connection):
        assert find_connection_at_point(Point(200, 30), [straight_connection], {}) is None


class TestBoxSelection:
    """Tests for box selection helpers."""

    def test_selection_bounds(self, three_shapes):
        assert get_selection_bounds(three_shapes.values()) == Bounds(0, 0, 300, 70)
        assert get_selection_bounds([]) == Bounds(0, 0, 0, 0)

    def test_box_is_normalized(self):
        assert get_selection_box_bounds(Point(100, 80), Point(20, 10)) == Bounds(20, 10, 80, 70)

    def test_shapes_in_box(self, three_shapes):
        ids = get_shapes_in_box(three_shapes, Point(-10, -10), Point(80, 45))
        assert ids == ["s1", "s2"]

    def test_touching_counts(self, three_shapes):
        assert get_shapes_in_box(three_shapes, Point(50, 50), Point(60, 60)) == ["s1"]

    @pytest.mark.parametrize("flag", ["locked", "visible"])
    def test_locked_and_hidden_skipped(self, three_shapes, flag):
        value = flag == "locked"
        three_shapes["s1"] = three_shapes["s1"].copy(**{flag: value})
        assert get_shapes_in_box(three_shapes, Point(-10, -10), Point(60, 60)) == []
