"""
Connector path construction.

Every connector is built into one of three path variants that share the
same measuring interface, so label placement, waypoint insertion and
hit-testing do not care which routing produced the path:

    StraightPath     start -> waypoints -> end as a polyline
    OrthogonalPath   horizontal/vertical routing through the waypoints
    BezierPath       one or more cubic segments

All variants expose points (a polyline), point_at(t), nearest_t(point),
length, is_near(point, threshold) and to_painter_path().
"""

import logging
from typing import List, Mapping, Optional, Sequence

from PyQt6.QtCore import QPointF
from PyQt6.QtGui import QPainterPath

from models.connection import Connection, CurveType
from models.geometry import Point
from models.shape import Shape
from .anchors import resolve_endpoints
from .bezier import (
    CATMULL_ROM_TENSION,
    DEFAULT_BEZIER_SAMPLES,
    BezierCurve,
    catmull_rom_to_bezier,
    get_absolute_control_points,
    sample_segments,
    split_at_waypoint,
)
from .orthogonal import EXIT_OFFSET, route_orthogonal_with_waypoints
from .path_utils import (
    NearestPoint,
    is_point_near_polyline,
    nearest_t_on_polyline,
    point_on_polyline,
    polyline_length,
    waypoints_to_absolute,
)

logger = logging.getLogger(__name__)


class ConnectorPath:
    """Base class for the path variants. Subclasses set curve_type and points."""

    curve_type: CurveType = CurveType.STRAIGHT

    def __init__(self, points: Sequence[Point]):
        self.points: List[Point] = list(points)

    @property
    def start(self) -> Point:
        return self.points[0]

    @property
    def end(self) -> Point:
        return self.points[-1]

    @property
    def length(self) -> float:
        return polyline_length(self.points)

    def point_at(self, t: float) -> Point:
        """Point at fraction t (0-1) of the path."""
        return point_on_polyline(self.points, t)

    def nearest_t(self, point: Point) -> NearestPoint:
        """Closest position on the path to point."""
        return nearest_t_on_polyline(self.points, point)

    def is_near(self, point: Point, threshold: float) -> bool:
        """Exact perpendicular distance test against every segment."""
        return is_point_near_polyline(point, self.points, threshold)

    def to_painter_path(self) -> QPainterPath:
        path = QPainterPath()
        if not self.points:
            return path
        path.moveTo(QPointF(self.points[0].x, self.points[0].y))
        for pt in self.points[1:]:
            path.lineTo(QPointF(pt.x, pt.y))
        return path

    def __repr__(self) -> str:
        return f"{type(self).__name__}({len(self.points)} points, length={self.length:.1f})"


class StraightPath(ConnectorPath):
    curve_type = CurveType.STRAIGHT


class OrthogonalPath(ConnectorPath):
    curve_type = CurveType.ORTHOGONAL


class BezierPath(ConnectorPath):
    """
    A path made of cubic segments.

    points holds the sampled polyline. point_at and nearest_t both measure
    arc length along the samples, so one inverts the other; hit-testing
    compares against the samples only.
    """

    curve_type = CurveType.BEZIER

    def __init__(self, segments: Sequence[BezierCurve], samples: int = DEFAULT_BEZIER_SAMPLES):
        self.segments: List[BezierCurve] = list(segments)
        self.samples = samples
        super().__init__(sample_segments(self.segments, samples))

    def is_near(self, point: Point, threshold: float) -> bool:
        return any(point.distance_to(sample) < threshold for sample in self.points)

    def to_painter_path(self) -> QPainterPath:
        path = QPainterPath()
        if not self.segments:
            return path
        first = self.segments[0].start
        path.moveTo(QPointF(first.x, first.y))
        for seg in self.segments:
            path.cubicTo(
                QPointF(seg.cp1.x, seg.cp1.y),
                QPointF(seg.cp2.x, seg.cp2.y),
                QPointF(seg.end.x, seg.end.y),
            )
        return path


def build_straight_path(start: Point, end: Point, waypoints: Sequence[Point] = ()) -> StraightPath:
    return StraightPath([start, *waypoints, end])


def build_bezier_path(
    connection: Connection,
    start: Point,
    end: Point,
    waypoints: Sequence[Point] = (),
    samples: int = DEFAULT_BEZIER_SAMPLES,
    tension: float = CATMULL_ROM_TENSION,
) -> BezierPath:
    """
    Build the cubic segments of a curved connector.

    No waypoint: one curve using stored or automatic control points.
    One waypoint: two curves meeting at it. More: a Catmull-Rom spline
    through all points with anchor-aligned outer control points.
    """
    start_anchor = connection.source_anchor
    end_anchor = connection.end_anchor

    if not waypoints:
        cp1, cp2 = get_absolute_control_points(connection.control_points, start, end, start_anchor, end_anchor)
        return BezierPath([BezierCurve(start, cp1, cp2, end)], samples)

    if len(waypoints) == 1:
        cp1, cp2 = get_absolute_control_points(connection.control_points, start, end, start_anchor, end_anchor)
        return BezierPath(split_at_waypoint(start, cp1, waypoints[0], cp2, end), samples)

    segments = catmull_rom_to_bezier([start, *waypoints, end], start_anchor, end_anchor, tension)
    return BezierPath(segments, samples)


def build_connector_path(
    connection: Connection,
    start: Point,
    end: Point,
    exit_offset: float = EXIT_OFFSET,
    samples: int = DEFAULT_BEZIER_SAMPLES,
    tension: float = CATMULL_ROM_TENSION,
) -> ConnectorPath:
    """
    Build the path variant for a connection's curve type.

    Args:
        connection: Connection to route
        start: Resolved start point
        end: Resolved end point
        exit_offset: Perpendicular exit distance for orthogonal routing
        samples: Samples per bezier segment
        tension: Catmull-Rom tension for curves through several waypoints
    """
    waypoints = waypoints_to_absolute(connection.waypoints, start, end)

    if connection.curve_type == CurveType.ORTHOGONAL:
        points = route_orthogonal_with_waypoints(
            start, end, waypoints, connection.source_anchor, connection.end_anchor, exit_offset
        )
        return OrthogonalPath(points)

    if connection.curve_type == CurveType.BEZIER:
        return build_bezier_path(connection, start, end, waypoints, samples, tension)

    return build_straight_path(start, end, waypoints)


def build_path_for_connection(
    connection: Connection,
    shapes: Mapping[str, Shape],
    exit_offset: float = EXIT_OFFSET,
    samples: int = DEFAULT_BEZIER_SAMPLES,
    tension: float = CATMULL_ROM_TENSION,
) -> Optional[ConnectorPath]:
    """Resolve the endpoints and build the path, or None when they cannot be resolved."""
    endpoints = resolve_endpoints(connection, shapes)
    if endpoints is None:
        logger.debug(f"Connection {connection.id} has unresolved endpoints")
        return None
    start, end = endpoints
    return build_connector_path(connection, start, end, exit_offset, samples, tension)


def label_point(
    connection: Connection,
    shapes: Mapping[str, Shape],
    exit_offset: float = EXIT_OFFSET,
    samples: int = DEFAULT_BEZIER_SAMPLES,
    tension: float = CATMULL_ROM_TENSION,
) -> Optional[Point]:
    """Canvas position of the connection label along its path."""
    path = build_path_for_connection(connection, shapes, exit_offset, samples, tension)
    if path is None:
        return None
    return path.point_at(connection.label_position)
