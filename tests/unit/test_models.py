"""
Unit tests for model classes.

Tests:
- Point and Bounds helpers
- Shape creation, copy and serialization
- Connection anchors, copy and serialization
- Handle classification
- History deltas
"""

import pytest
from models.geometry import Point, Bounds
from models.shape import Shape, ShapeType, Group, DEFAULT_SHAPE_WIDTH, DEFAULT_SHAPE_HEIGHT
from models.connection import (
    AnchorPosition, Connection, ControlPoints, CurveType, Waypoint, ANCHOR_ORDER
)
from models.interaction import HandleType, RESIZE_HANDLES, ResizeOptions
from models.history import Delta, EMPTY_DELTA, Modification, HistoryEntry, ActionType


class TestGeometry:
    """Tests for Point and Bounds."""

    def test_point_offset(self):
        p = Point(1, 2)
        assert p.offset(3, 4) == Point(4, 6)
        assert p == Point(1, 2)

    def test_point_distance(self):
        assert Point(0, 0).distance_to(Point(3, 4)) == 5

    def test_bounds_edges(self):
        b = Bounds(10, 20, 100, 50)
        assert b.right == 110
        assert b.bottom == 70
        assert b.center == Point(60, 45)

    def test_aspect_ratio(self):
        assert Bounds(0, 0, 200, 100).aspect_ratio == 2
        assert Bounds(0, 0, 200, 0).aspect_ratio == 1.0
        assert Bounds(0, 0, 0, 100).aspect_ratio == 1.0

    def test_bounds_from_dict_defaults(self):
        assert Bounds.from_dict({"x": 5}) == Bounds(5, 0, 0, 0)


class TestShape:
    """Tests for Shape class."""

    def test_defaults(self):
        shape = Shape()
        assert len(shape.id) == 8
        assert shape.shape_type == ShapeType.RECTANGLE
        assert (shape.width, shape.height) == (DEFAULT_SHAPE_WIDTH, DEFAULT_SHAPE_HEIGHT)
        assert shape.visible
        assert not shape.locked

    def test_string_type_coerced(self):
        shape = Shape(id="e", shape_type="ellipse")
        assert shape.shape_type == ShapeType.ELLIPSE

    def test_bounds_and_center(self, rect_shape):
        assert rect_shape.bounds == Bounds(100, 100, 200, 100)
        assert rect_shape.center == Point(200, 150)

    def test_copy(self, rect_shape):
        moved = rect_shape.copy(x=0)
        assert moved.x == 0
        assert rect_shape.x == 100
        assert moved.id == rect_shape.id

    def test_get_fields(self, rect_shape):
        assert rect_shape.get_fields(("x", "rotation")) == {"x": 100, "rotation": 0.0}

    def test_serialization(self):
        shape = Shape(id="s1", shape_type=ShapeType.DIAMOND, x=5, y=6, rotation=30,
                      z_index=3, group_id="g1")
        data = shape.to_dict()
        assert data["shape_type"] == "diamond"
        assert Shape.from_dict(data) == shape

    def test_from_dict_defaults(self):
        shape = Shape.from_dict({"id": "s1"})
        assert shape.width == DEFAULT_SHAPE_WIDTH
        assert shape.group_id is None


class TestGroup:
    """Tests for Group class."""

    def test_copy_does_not_share_members(self):
        group = Group(id="g1", member_ids=["a", "b"])
        clone = group.copy()
        clone.member_ids.append("c")
        assert group.member_ids == ["a", "b"]

    def test_serialization(self):
        group = Group(id="g2", member_ids=["a"], parent_group_id="g1")
        assert Group.from_dict(group.to_dict()) == group
        assert "parent_group_id" not in Group(id="g3").to_dict()


class TestAnchors:
    """Tests for AnchorPosition."""

    def test_order(self):
        assert [a.value for a in ANCHOR_ORDER] == ["top", "right", "bottom", "left"]

    def test_opposite(self):
        assert AnchorPosition.TOP.opposite == AnchorPosition.BOTTOM
        assert AnchorPosition.LEFT.opposite == AnchorPosition.RIGHT

    def test_is_horizontal(self):
        assert AnchorPosition.LEFT.is_horizontal
        assert AnchorPosition.RIGHT.is_horizontal
        assert not AnchorPosition.TOP.is_horizontal


class TestConnection:
    """Tests for Connection class."""

    def test_string_enums_coerced(self):
        conn = Connection(source_anchor="top", target_anchor="bottom", curve_type="bezier")
        assert conn.source_anchor == AnchorPosition.TOP
        assert conn.target_anchor == AnchorPosition.BOTTOM
        assert conn.curve_type == CurveType.BEZIER

    def test_end_anchor_for_floating_end(self):
        conn = Connection(source_anchor=AnchorPosition.BOTTOM, target_anchor=None)
        assert conn.end_anchor == AnchorPosition.TOP

    def test_copy_does_not_share_waypoints(self, straight_connection):
        clone = straight_connection.copy()
        clone.waypoints.append(Waypoint(t=0.5))
        assert straight_connection.waypoints == []
        assert not straight_connection.has_waypoints

    def test_relative_values_kept_verbatim(self):
        """Test that waypoints and control offsets survive serialization unchanged."""
        conn = Connection(
            id="c1",
            source_shape_id="a",
            target_shape_id="b",
            curve_type=CurveType.BEZIER,
            control_points=ControlPoints(cp1=Point(12.5, -3), cp2=Point(-40, 7.25)),
            waypoints=[Waypoint(id="w1", t=0.3, offset=Point(0, 20))],
            label="yes",
            label_position=0.25,
        )
        data = conn.to_dict()
        assert data["waypoints"] == [{"id": "w1", "t": 0.3, "offset": {"x": 0, "y": 20}}]
        assert data["control_points"]["cp2"] == {"x": -40, "y": 7.25}
        assert Connection.from_dict(data) == conn

    def test_floating_serialization(self):
        conn = Connection(id="c2", source_shape_id="a", target_shape_id=None, target_anchor=None,
                          target_attached=False, floating_target_point=Point(400, 300))
        data = conn.to_dict()
        assert data["target_anchor"] is None
        assert "control_points" not in data
        restored = Connection.from_dict(data)
        assert restored.floating_target_point == Point(400, 300)
        assert not restored.target_attached


class TestHandles:
    """Tests for HandleType classification."""

    def test_resize_handles(self):
        assert len(RESIZE_HANDLES) == 8
        assert HandleType.ROTATION not in RESIZE_HANDLES

    def test_corners(self):
        corners = [h for h in RESIZE_HANDLES if h.is_corner]
        assert corners == [HandleType.NW, HandleType.NE, HandleType.SW, HandleType.SE]

    @pytest.mark.parametrize("handle, left, top", [
        (HandleType.NW, True, True),
        (HandleType.N, False, True),
        (HandleType.E, False, False),
        (HandleType.SW, True, False),
        (HandleType.ROTATION, False, False),
    ])
    def test_moving_edges(self, handle, left, top):
        assert handle.moves_left_edge == left
        assert handle.moves_top_edge == top

    def test_resize_options_defaults(self):
        options = ResizeOptions()
        assert not options.maintain_aspect_ratio
        assert options.min_size == 10


class TestHistoryModels:
    """Tests for history deltas and entries."""

    def test_delta_of(self):
        delta = Delta.of(modified=[Modification("a", {"x": 0}, {"x": 1})])
        assert isinstance(delta.modified, tuple)
        assert not delta.is_empty
        assert EMPTY_DELTA.is_empty

    def test_entry_is_frozen(self):
        entry = HistoryEntry(
            id="e1", action_type=ActionType.MOVE_SHAPES, description="Move",
            timestamp=1.0, shape_delta=EMPTY_DELTA, connection_delta=EMPTY_DELTA,
            selection_before=(), selection_after=(),
        )
        with pytest.raises(AttributeError):
            entry.description = "changed"
