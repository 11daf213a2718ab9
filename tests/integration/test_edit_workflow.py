"""
Integration tests for editing workflows.

Tests:
- Manipulation sessions recorded in history and replayed
- Connectors following the shapes they are attached to
- Waypoints keeping their place relative to moving endpoints
- Grouping and group rotation with undo
- Loading and routing a diagram from the command line helpers
"""

import json

import pytest

from conftest import assert_point_close
from models.connection import AnchorPosition, CurveType
from models.geometry import Point
from models.history import ActionType, Delta, DiagramState, HistoryEntryInput
from models.interaction import HandleType
from services.anchors import get_anchor_position, resolve_endpoints
from services.connection_edit import WAYPOINT_FIELDS, add_waypoint, connection_entry
from services.connector_path import build_path_for_connection
from services.groups import create_group
from services.history_manager import build_shape_modifications
from services.manipulation import GroupRotateSession, MoveSession, ResizeSession
from services.settings_manager import get_settings, reset_settings_manager


def with_shapes(state: DiagramState, shapes) -> DiagramState:
    return DiagramState(
        shapes=dict(shapes),
        connections=dict(state.connections),
        groups=dict(state.groups),
        selected_shape_ids=list(state.selected_shape_ids),
    )


class TestMoveResizeHistory:
    """Tests for manipulation gestures recorded in history."""

    def test_connector_follows_moved_shape(self, diagram_state):
        session = MoveSession(diagram_state.shapes, ["b"], Point(350, 30))
        moved = session.update(Point(450, 80))
        start, end = resolve_endpoints(diagram_state.connections["c1"], moved)
        assert start == Point(100, 30)
        assert end == Point(400, 80)

    def test_undo_redo_chain(self, history, diagram_state):
        state = diagram_state

        move = MoveSession(state.shapes, ["b"], Point(350, 30))
        state = with_shapes(state, move.update(Point(450, 80)))
        history.push(move.commit(state.shapes, selection=["b"]))

        resize = ResizeSession(state.shapes, "a", HandleType.E, Point(100, 30))
        state = with_shapes(state, resize.update(Point(150, 30)))
        history.push(resize.commit(state.shapes, selection=["a"]))

        final = state
        assert history.undo_description() == "Resize 1 shape"

        state = history.undo_state(state)
        assert state.shapes["a"].width == 100
        assert state.shapes["b"].x == 400
        assert state.selected_shape_ids == ["a"]

        state = history.undo_state(state)
        assert state.shapes == diagram_state.shapes
        assert resolve_endpoints(state.connections["c1"], state.shapes) == (Point(100, 30), Point(300, 30))
        assert not history.can_undo()

        state = history.redo_state(state)
        state = history.redo_state(state)
        assert state.shapes == final.shapes
        assert resolve_endpoints(state.connections["c1"], state.shapes) == (Point(150, 30), Point(400, 80))

    def test_new_action_after_undo_drops_redo(self, history, diagram_state):
        move = MoveSession(diagram_state.shapes, ["a"], Point(0, 0))
        history.push(move.commit(move.update(Point(10, 0))))
        state = history.undo_state(with_shapes(diagram_state, move.update(Point(10, 0))))

        again = MoveSession(state.shapes, ["a"], Point(0, 0))
        history.push(again.commit(again.update(Point(0, 10))))
        assert not history.can_redo()
        assert len(history.past) == 1


class TestWaypointWorkflow:
    """Tests for waypoints combined with shape moves."""

    def test_waypoint_moves_with_endpoints(self, history, diagram_state):
        before = diagram_state.connections["c1"]
        after = add_waypoint(before, diagram_state.shapes, Point(200, 60))
        history.push(connection_entry(ActionType.MOVE_WAYPOINT, "Add waypoint", before, after, WAYPOINT_FIELDS))

        state = DiagramState(shapes=dict(diagram_state.shapes), connections={"c1": after})
        path = build_path_for_connection(after, state.shapes)
        assert path.points == [Point(100, 30), Point(200, 60), Point(300, 30)]

        move = MoveSession(state.shapes, ["b"], Point(350, 30))
        moved = move.update(Point(350, 130))
        path = build_path_for_connection(after, moved)
        # baseline midpoint (200, 80) plus the stored (0, 30) offset
        assert path.points[1] == Point(200, 110)

        undone = history.undo_state(state)
        assert build_path_for_connection(undone.connections["c1"], undone.shapes).points == \
            [Point(100, 30), Point(300, 30)]

    @pytest.mark.parametrize("curve", [CurveType.ORTHOGONAL, CurveType.BEZIER])
    def test_every_curve_passes_through_endpoints(self, diagram_state, curve):
        connection = diagram_state.connections["c1"].copy(curve_type=curve)
        connection = add_waypoint(connection, diagram_state.shapes, Point(200, 90))
        path = build_path_for_connection(connection, diagram_state.shapes)
        assert_point_close(path.start, Point(100, 30))
        assert_point_close(path.end, Point(300, 30))


class TestGroupWorkflow:
    """Tests for grouping followed by a group rotation."""

    def test_group_then_rotate(self, history, diagram_state):
        groups, group_id = create_group(diagram_state.groups, ["a", "b"], group_id="g1")
        grouped_shapes = {sid: s.copy(group_id=group_id) for sid, s in diagram_state.shapes.items()}
        history.push(HistoryEntryInput(
            action_type=ActionType.GROUP,
            description="Group",
            shape_delta=Delta.of(modified=build_shape_modifications(
                diagram_state.shapes, grouped_shapes, fields=("group_id",))),
            selection_before=("a", "b"),
            selection_after=("a", "b"),
        ))
        state = DiagramState(
            shapes=grouped_shapes,
            connections=dict(diagram_state.connections),
            groups=groups,
        )
        assert state.groups["g1"].member_ids == ["a", "b"]

        session = GroupRotateSession(state.shapes, ["a", "b"], Point(200, -70), group_id="g1")
        rotated = session.update(Point(300, 30))
        history.push(session.commit(rotated, selection=["a", "b"]))
        state = with_shapes(state, rotated)

        start, _ = resolve_endpoints(state.connections["c1"], state.shapes)
        assert_point_close(start, get_anchor_position(state.shapes["a"], AnchorPosition.RIGHT))
        assert_point_close(start, Point(200, -70))

        state = history.undo_state(state)
        assert state.shapes["a"].rotation == 0
        assert "g1" in state.groups

        state = history.undo_state(state)
        assert state.groups == {}
        assert state.shapes["a"].group_id is None


class TestCommandLine:
    """Tests for the command line helpers."""

    @pytest.fixture(autouse=True)
    def isolated_settings(self, temp_dir):
        reset_settings_manager()
        get_settings(str(temp_dir / "settings.json"))
        yield
        reset_settings_manager()

    def test_sample_diagram_routes(self, capsys):
        from main import print_paths, sample_diagram

        print_paths(sample_diagram())
        out = capsys.readouterr().out
        assert "c1 (orthogonal" in out
        assert "c2 (bezier" in out
        assert "c3 (straight, length 200.0)" in out
        assert "label at (60.0, 160.0)" in out

    def test_load_diagram(self, temp_dir, diagram_state):
        from main import load_diagram

        path = temp_dir / "diagram.json"
        path.write_text(json.dumps({
            "shapes": [s.to_dict() for s in diagram_state.shapes.values()],
            "connections": [c.to_dict() for c in diagram_state.connections.values()],
        }))
        loaded = load_diagram(str(path))
        assert loaded.shapes == diagram_state.shapes
        assert loaded.connections == diagram_state.connections

    def test_curve_override(self, diagram_state, capsys):
        from main import print_paths

        print_paths(diagram_state, CurveType.ORTHOGONAL)
        assert "c1 (orthogonal" in capsys.readouterr().out
