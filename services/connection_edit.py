"""
Connector edits.

Waypoint, control point, endpoint and label edits. Every function takes a
connection plus the current shapes and returns an updated copy (None when
the connection's endpoints cannot be resolved). connection_entry() turns a
before/after pair into a history entry input.
"""

import logging
from enum import Enum
from typing import Mapping, Optional, Sequence, Tuple

from models.connection import AnchorPosition, Connection
from models.geometry import Point
from models.history import ActionType, Delta, HistoryEntryInput
from models.shape import Shape
from .anchors import (
    ANCHOR_SNAP_THRESHOLD,
    BestAnchor,
    calculate_best_anchor,
    get_anchor_position,
    resolve_endpoints,
)
from .bezier import (
    CATMULL_ROM_TENSION,
    DEFAULT_BEZIER_SAMPLES,
    control_points_to_offsets,
    get_absolute_control_points,
)
from .connector_path import build_connector_path
from .hit_test import find_shape_at_point
from .history_manager import build_connection_modification
from .orthogonal import EXIT_OFFSET
from .path_utils import absolute_to_waypoint, clamp_label_position, insert_waypoint

logger = logging.getLogger(__name__)


# Fields recorded in history for each kind of edit
WAYPOINT_FIELDS = ("waypoints",)
CONTROL_POINT_FIELDS = ("control_points",)
LABEL_FIELDS = ("label_position",)
ENDPOINT_FIELDS = (
    "source_shape_id", "source_anchor", "source_attached", "floating_source_point",
    "target_shape_id", "target_anchor", "target_attached", "floating_target_point",
)


class Endpoint(Enum):
    SOURCE = "source"
    TARGET = "target"


class ControlHandle(Enum):
    CP1 = "cp1"
    CP2 = "cp2"


# ==================== Waypoints ====================

def add_waypoint(connection: Connection, shapes: Mapping[str, Shape], point: Point) -> Optional[Connection]:
    """Insert a waypoint at a canvas point, in path order."""
    endpoints = resolve_endpoints(connection, shapes)
    if endpoints is None:
        return None
    start, end = endpoints
    waypoints, waypoint = insert_waypoint(connection.waypoints, point, start, end)
    logger.debug(f"Added waypoint {waypoint.id} to {connection.id} at t={waypoint.t:.3f}")
    return connection.copy(waypoints=waypoints)


def move_waypoint(
    connection: Connection,
    shapes: Mapping[str, Shape],
    waypoint_id: str,
    point: Point,
) -> Optional[Connection]:
    """Move a waypoint to a canvas point, re-deriving its relative form."""
    endpoints = resolve_endpoints(connection, shapes)
    if endpoints is None:
        return None
    start, end = endpoints

    waypoints = [
        absolute_to_waypoint(point, start, end, wp.id) if wp.id == waypoint_id else wp
        for wp in connection.waypoints
    ]
    return connection.copy(waypoints=waypoints)


def remove_waypoint(connection: Connection, waypoint_id: str) -> Connection:
    waypoints = [wp for wp in connection.waypoints if wp.id != waypoint_id]
    return connection.copy(waypoints=waypoints)


def clear_waypoints(connection: Connection) -> Connection:
    return connection.copy(waypoints=[])


# ==================== Control points ====================

def move_control_point(
    connection: Connection,
    shapes: Mapping[str, Shape],
    handle: ControlHandle,
    point: Point,
) -> Optional[Connection]:
    """
    Drag one bezier control point to a canvas point.

    Automatic control points are materialized first so the other handle
    keeps its current position. Both are stored as offsets.
    """
    endpoints = resolve_endpoints(connection, shapes)
    if endpoints is None:
        return None
    start, end = endpoints

    cp1, cp2 = get_absolute_control_points(
        connection.control_points, start, end, connection.source_anchor, connection.end_anchor
    )
    if handle == ControlHandle.CP1:
        cp1 = point
    else:
        cp2 = point
    return connection.copy(control_points=control_points_to_offsets(cp1, cp2, start, end))


def reset_control_points(connection: Connection) -> Connection:
    """Go back to automatic control points."""
    return connection.copy(control_points=None)


# ==================== Endpoints ====================

def get_endpoint_info(
    connection: Connection,
    shapes: Mapping[str, Shape],
    endpoint: Endpoint,
) -> Optional[Tuple[Point, Optional[AnchorPosition]]]:
    """Position and anchor (None when floating) of one end of a connection."""
    if endpoint == Endpoint.SOURCE:
        if connection.source_attached:
            shape = shapes.get(connection.source_shape_id) if connection.source_shape_id else None
            if shape is None:
                return None
            return get_anchor_position(shape, connection.source_anchor), connection.source_anchor
        if connection.floating_source_point is not None:
            return connection.floating_source_point, None
        return None

    if connection.target_attached:
        shape = shapes.get(connection.target_shape_id) if connection.target_shape_id else None
        if shape is None or connection.target_anchor is None:
            return None
        return get_anchor_position(shape, connection.target_anchor), connection.target_anchor
    if connection.floating_target_point is not None:
        return connection.floating_target_point, None
    return None


def detach_endpoint(connection: Connection, endpoint: Endpoint, point: Point) -> Connection:
    """Leave one end floating at a canvas point."""
    if endpoint == Endpoint.SOURCE:
        return connection.copy(source_attached=False, floating_source_point=point)
    return connection.copy(target_attached=False, floating_target_point=point)


def attach_endpoint(
    connection: Connection,
    endpoint: Endpoint,
    shape_id: str,
    anchor: AnchorPosition,
) -> Connection:
    """Attach one end to a shape anchor."""
    if endpoint == Endpoint.SOURCE:
        return connection.copy(
            source_shape_id=shape_id,
            source_anchor=anchor,
            source_attached=True,
            floating_source_point=None,
        )
    return connection.copy(
        target_shape_id=shape_id,
        target_anchor=anchor,
        target_attached=True,
        floating_target_point=None,
    )


def predict_endpoint_anchor(
    connection: Connection,
    shapes: Mapping[str, Shape],
    endpoint: Endpoint,
    point: Point,
    snap_threshold: float = ANCHOR_SNAP_THRESHOLD,
) -> Optional[Tuple[Shape, BestAnchor]]:
    """
    Predict where a dragged end would attach if released at point.

    Returns:
        Tuple of (shape under point, predicted anchor), or None when the
        point is over empty canvas
    """
    target_shape = find_shape_at_point(point, shapes.values())
    if target_shape is None:
        return None

    other = Endpoint.TARGET if endpoint == Endpoint.SOURCE else Endpoint.SOURCE
    info = get_endpoint_info(connection, shapes, other)
    if info is None:
        opposite_point, opposite_anchor = point, None
    else:
        opposite_point, opposite_anchor = info
    return target_shape, calculate_best_anchor(
        target_shape, point, opposite_point, opposite_anchor, snap_threshold
    )


def drop_endpoint(
    connection: Connection,
    shapes: Mapping[str, Shape],
    endpoint: Endpoint,
    point: Point,
    snap_threshold: float = ANCHOR_SNAP_THRESHOLD,
) -> Connection:
    """
    Release a dragged end at point.

    Over a shape the end attaches to the predicted anchor; over empty
    canvas it stays floating at point.
    """
    prediction = predict_endpoint_anchor(connection, shapes, endpoint, point, snap_threshold)
    if prediction is None:
        logger.debug(f"Connection {connection.id} {endpoint.value} left floating")
        return detach_endpoint(connection, endpoint, point)

    shape, best = prediction
    logger.debug(f"Connection {connection.id} {endpoint.value} attached to {shape.id}:{best.anchor.value}")
    return attach_endpoint(connection, endpoint, shape.id, best.anchor)


# ==================== Label ====================

def move_label(
    connection: Connection,
    shapes: Mapping[str, Shape],
    point: Point,
    exit_offset: float = EXIT_OFFSET,
    samples: int = DEFAULT_BEZIER_SAMPLES,
    tension: float = CATMULL_ROM_TENSION,
) -> Optional[Connection]:
    """
    Slide the label to the path position closest to point.

    The path options must match the ones used to draw the label so the
    stored position lands under the pointer.
    """
    endpoints = resolve_endpoints(connection, shapes)
    if endpoints is None:
        return None
    start, end = endpoints
    path = build_connector_path(connection, start, end, exit_offset, samples, tension)
    nearest = path.nearest_t(point)
    return connection.copy(label_position=clamp_label_position(nearest.t))


# ==================== History ====================

def connection_entry(
    action_type: ActionType,
    description: str,
    before: Connection,
    after: Connection,
    fields: Sequence[str],
    selection: Sequence[str] = (),
) -> Optional[HistoryEntryInput]:
    """Build a history entry for one edited connection, or None when nothing changed."""
    modification = build_connection_modification(before, after, fields)
    if modification is None:
        return None
    return HistoryEntryInput(
        action_type=action_type,
        description=description,
        connection_delta=Delta.of(modified=[modification]),
        selection_before=tuple(selection),
        selection_after=tuple(selection),
    )
