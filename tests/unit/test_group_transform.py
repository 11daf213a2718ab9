"""
Unit tests for group scaling and rotation.

Tests:
- Group bounds and anchor points
- Proportional scaling with the minimum size floor
- Rotation of members around a shared center
- Relative layout preservation
"""

import itertools
import math

import pytest

from conftest import assert_point_close
from models.geometry import Bounds, Point
from models.interaction import HandleType
from models.shape import Shape
from services.group_transform import (
    ShapeState,
    apply_shape_updates,
    calculate_group_bounds,
    capture_shape_states,
    get_anchor_point,
    rotate_shapes_around_center,
    scale_shapes_in_group,
)


def centers(updates, states):
    """Member centers after applying updates to the captured states."""
    result = {}
    for shape_id, state in states.items():
        fields = updates[shape_id]
        width = fields.get("width", state.width)
        height = fields.get("height", state.height)
        result[shape_id] = Point(fields["x"] + width / 2, fields["y"] + height / 2)
    return result


def pairwise_distances(points):
    return {
        (a, b): math.hypot(points[a].x - points[b].x, points[a].y - points[b].y)
        for a, b in itertools.combinations(sorted(points), 2)
    }


class TestGroupBounds:
    """Tests for calculate_group_bounds and get_anchor_point."""

    def test_bounds_of_two_shapes(self):
        shapes = [Shape(x=0, y=0, width=50, height=50), Shape(x=100, y=20, width=50, height=50)]
        assert calculate_group_bounds(shapes) == Bounds(0, 0, 150, 70)

    def test_empty_group(self):
        assert calculate_group_bounds([]) == Bounds(0, 0, 0, 0)

    def test_anchor_is_opposite_corner(self):
        bounds = Bounds(0, 0, 100, 50)
        assert get_anchor_point(bounds, HandleType.SE) == Point(0, 0)
        assert get_anchor_point(bounds, HandleType.NW) == Point(100, 50)
        assert get_anchor_point(bounds, HandleType.NE) == Point(0, 50)

    def test_anchor_is_opposite_edge_midpoint(self):
        bounds = Bounds(0, 0, 100, 50)
        assert get_anchor_point(bounds, HandleType.N) == Point(50, 50)
        assert get_anchor_point(bounds, HandleType.E) == Point(0, 25)

    def test_rotation_handle_anchors_at_center(self):
        assert get_anchor_point(Bounds(0, 0, 100, 50), HandleType.ROTATION) == Point(50, 25)

    def test_capture_skips_missing(self, two_shapes):
        states = capture_shape_states(two_shapes, ["a", "missing"])
        assert list(states) == ["a"]
        assert states["a"] == ShapeState(0, 0, 100, 60, 0)


class TestScaleShapesInGroup:
    """Tests for scale_shapes_in_group."""

    STATES = {
        "a": ShapeState(0, 0, 50, 50, 0),
        "b": ShapeState(100, 0, 50, 50, 0),
    }
    START = Bounds(0, 0, 150, 50)

    def test_uniform_double(self):
        updates = scale_shapes_in_group(self.STATES, self.START, Bounds(0, 0, 300, 100), HandleType.SE)
        assert updates["a"] == {"x": 0, "y": 0, "width": 100, "height": 100}
        assert updates["b"] == {"x": 200, "y": 0, "width": 100, "height": 100}

    def test_nw_handle_keeps_bottom_right(self):
        updates = scale_shapes_in_group(self.STATES, self.START, Bounds(-150, -50, 300, 100), HandleType.NW)
        assert updates["b"]["x"] + updates["b"]["width"] == pytest.approx(150)
        assert updates["b"]["y"] + updates["b"]["height"] == pytest.approx(50)

    def test_min_size_floor(self):
        updates = scale_shapes_in_group(self.STATES, self.START, Bounds(0, 0, 15, 5), HandleType.SE)
        for fields in updates.values():
            assert fields["width"] == 10
            assert fields["height"] == 10

    def test_degenerate_start_bounds(self):
        """Test that a zero-width group scales by 1 on that axis."""
        states = {"a": ShapeState(0, 0, 0, 50, 0)}
        updates = scale_shapes_in_group(states, Bounds(0, 0, 0, 50), Bounds(0, 0, 40, 100), HandleType.SE)
        assert updates["a"]["height"] == 100

    def test_distance_ratios_preserved(self, three_shapes):
        """Test that a uniform scale multiplies every member distance by the same factor."""
        states = capture_shape_states(three_shapes, three_shapes)
        start = calculate_group_bounds(three_shapes.values())
        new = Bounds(start.x, start.y, start.width * 1.5, start.height * 1.5)

        updates = scale_shapes_in_group(states, start, new, HandleType.SE)
        before = pairwise_distances({sid: s.center for sid, s in states.items()})
        after = pairwise_distances(centers(updates, states))
        for pair in before:
            assert after[pair] / before[pair] == pytest.approx(1.5)


class TestRotateShapesAroundCenter:
    """Tests for rotate_shapes_around_center."""

    def test_quarter_turn(self):
        states = {"a": ShapeState(75, -25, 50, 50, 0)}
        updates = rotate_shapes_around_center(states, Point(0, 0), 90)
        assert updates["a"]["x"] == pytest.approx(-25)
        assert updates["a"]["y"] == pytest.approx(75)
        assert updates["a"]["rotation"] == 90

    def test_rotation_is_normalized(self):
        states = {"a": ShapeState(0, 0, 10, 10, 350)}
        updates = rotate_shapes_around_center(states, Point(5, 5), 20)
        assert updates["a"]["rotation"] == pytest.approx(10)

    def test_member_at_center_stays(self):
        states = {"a": ShapeState(0, 0, 10, 10, 0)}
        updates = rotate_shapes_around_center(states, Point(5, 5), 123)
        assert updates["a"]["x"] == pytest.approx(0)
        assert updates["a"]["y"] == pytest.approx(0)

    def test_distances_preserved(self, three_shapes):
        """Test that pairwise center distances are unchanged by rotation."""
        states = capture_shape_states(three_shapes, three_shapes)
        center = calculate_group_bounds(three_shapes.values()).center

        updates = rotate_shapes_around_center(states, center, 37)
        before = pairwise_distances({sid: s.center for sid, s in states.items()})
        after = pairwise_distances(centers(updates, states))
        for pair in before:
            assert after[pair] == pytest.approx(before[pair])

    def test_distance_to_center_preserved(self, three_shapes):
        states = capture_shape_states(three_shapes, three_shapes)
        center = Point(10, 20)
        updates = rotate_shapes_around_center(states, center, 200)
        after = centers(updates, states)
        for sid, state in states.items():
            assert after[sid].distance_to(center) == pytest.approx(state.center.distance_to(center))


class TestApplyShapeUpdates:
    """Tests for apply_shape_updates."""

    def test_returns_new_dict(self, two_shapes):
        result = apply_shape_updates(two_shapes, {"a": {"x": 5}})
        assert result is not two_shapes
        assert result["a"].x == 5
        assert two_shapes["a"].x == 0

    def test_untouched_shapes_are_shared(self, two_shapes):
        result = apply_shape_updates(two_shapes, {"a": {"x": 5}})
        assert result["b"] is two_shapes["b"]

    def test_unknown_ids_ignored(self, two_shapes):
        result = apply_shape_updates(two_shapes, {"zzz": {"x": 5}})
        assert set(result) == {"a", "b"}

    def test_center_helper(self):
        assert_point_close(ShapeState(10, 10, 20, 40, 0).center, Point(20, 30))
