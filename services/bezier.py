"""
Cubic bezier helpers for curved connectors.

Control points of a single-curve connector are stored as offsets (cp1 from
the start point, cp2 from the end point). When none are stored, they are
derived from the anchor directions so the curve leaves and enters each
shape perpendicular to its side.
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from models.connection import AnchorPosition, ControlPoints
from models.geometry import Point
from .anchors import get_anchor_vector


# Auto control point distance: this fraction of the endpoint distance...
AUTO_CONTROL_FACTOR = 0.4
# ...capped at this many units
AUTO_CONTROL_MAX = 100

CATMULL_ROM_TENSION = 0.3
DEFAULT_BEZIER_SAMPLES = 20


@dataclass(frozen=True)
class BezierCurve:
    """A cubic bezier segment with absolute control points."""
    start: Point
    cp1: Point
    cp2: Point
    end: Point

    def point_at(self, t: float) -> Point:
        return point_on_bezier(self, t)

    def tangent_angle(self, t: float) -> float:
        return tangent_angle(self, t)

    def sample(self, samples: int = DEFAULT_BEZIER_SAMPLES) -> List[Point]:
        return sample_bezier(self, samples)


def point_on_bezier(curve: BezierCurve, t: float) -> Point:
    """
    Evaluate the curve at parameter t (0-1).

    B(t) = (1-t)^3 P0 + 3(1-t)^2 t P1 + 3(1-t) t^2 P2 + t^3 P3
    """
    t2 = t * t
    t3 = t2 * t
    mt = 1 - t
    mt2 = mt * mt
    mt3 = mt2 * mt
    return Point(
        mt3 * curve.start.x + 3 * mt2 * t * curve.cp1.x + 3 * mt * t2 * curve.cp2.x + t3 * curve.end.x,
        mt3 * curve.start.y + 3 * mt2 * t * curve.cp1.y + 3 * mt * t2 * curve.cp2.y + t3 * curve.end.y,
    )


def tangent_angle(curve: BezierCurve, t: float) -> float:
    """Direction of the curve at t in radians, from the first derivative."""
    mt = 1 - t
    mt2 = mt * mt
    t2 = t * t
    dx = (3 * mt2 * (curve.cp1.x - curve.start.x)
          + 6 * mt * t * (curve.cp2.x - curve.cp1.x)
          + 3 * t2 * (curve.end.x - curve.cp2.x))
    dy = (3 * mt2 * (curve.cp1.y - curve.start.y)
          + 6 * mt * t * (curve.cp2.y - curve.cp1.y)
          + 3 * t2 * (curve.end.y - curve.cp2.y))
    return math.atan2(dy, dx)


def sample_bezier(curve: BezierCurve, samples: int = DEFAULT_BEZIER_SAMPLES) -> List[Point]:
    """Sample the curve at samples + 1 evenly spaced parameters (both ends included)."""
    return [point_on_bezier(curve, i / samples) for i in range(samples + 1)]


def sample_segments(segments: Sequence[BezierCurve], samples: int = DEFAULT_BEZIER_SAMPLES) -> List[Point]:
    """Sample consecutive segments into one polyline without duplicating the joints."""
    points: List[Point] = []
    for index, segment in enumerate(segments):
        sampled = sample_bezier(segment, samples)
        points.extend(sampled if index == 0 else sampled[1:])
    return points


def _anchor_offset(point: Point, anchor: AnchorPosition, distance: float) -> Point:
    vector = get_anchor_vector(anchor)
    return Point(point.x + vector.x * distance, point.y + vector.y * distance)


def auto_control_distance(start: Point, end: Point) -> float:
    return min(start.distance_to(end) * AUTO_CONTROL_FACTOR, AUTO_CONTROL_MAX)


def calculate_auto_control_points(
    start: Point,
    start_anchor: AnchorPosition,
    end: Point,
    end_anchor: AnchorPosition,
) -> Tuple[Point, Point]:
    """
    Derive absolute control points from the anchor directions.

    Each control point sits on the anchor's outward normal at 40% of the
    endpoint distance, capped at 100 units.
    """
    offset = auto_control_distance(start, end)
    return _anchor_offset(start, start_anchor, offset), _anchor_offset(end, end_anchor, offset)


def get_absolute_control_points(
    control_points: Optional[ControlPoints],
    start: Point,
    end: Point,
    start_anchor: AnchorPosition,
    end_anchor: AnchorPosition,
) -> Tuple[Point, Point]:
    """Resolve stored control point offsets, falling back to automatic ones."""
    if control_points is not None:
        return (
            Point(start.x + control_points.cp1.x, start.y + control_points.cp1.y),
            Point(end.x + control_points.cp2.x, end.y + control_points.cp2.y),
        )
    return calculate_auto_control_points(start, start_anchor, end, end_anchor)


def control_points_to_offsets(cp1: Point, cp2: Point, start: Point, end: Point) -> ControlPoints:
    """Convert absolute control points back into stored offsets."""
    return ControlPoints(
        cp1=Point(cp1.x - start.x, cp1.y - start.y),
        cp2=Point(cp2.x - end.x, cp2.y - end.y),
    )


def split_at_waypoint(
    start: Point,
    cp1: Point,
    waypoint: Point,
    cp2: Point,
    end: Point,
) -> List[BezierCurve]:
    """
    Build two cubic segments that meet at a single waypoint.

    The outer control points are the connector's own cp1 and cp2. At the
    waypoint both segments share a tangent parallel to start->end, so the
    joint is smooth; each handle length follows the auto control rule for
    its own segment.
    """
    dx = end.x - start.x
    dy = end.y - start.y
    length = math.hypot(dx, dy)
    if length == 0:
        ux, uy = 0.0, 0.0
    else:
        ux, uy = dx / length, dy / length

    in_distance = auto_control_distance(start, waypoint)
    out_distance = auto_control_distance(waypoint, end)
    handle_in = Point(waypoint.x - ux * in_distance, waypoint.y - uy * in_distance)
    handle_out = Point(waypoint.x + ux * out_distance, waypoint.y + uy * out_distance)

    return [
        BezierCurve(start, cp1, handle_in, waypoint),
        BezierCurve(waypoint, handle_out, cp2, end),
    ]


def catmull_rom_to_bezier(
    points: Sequence[Point],
    start_anchor: Optional[AnchorPosition] = None,
    end_anchor: Optional[AnchorPosition] = None,
    tension: float = CATMULL_ROM_TENSION,
) -> List[BezierCurve]:
    """
    Convert a Catmull-Rom spline through points into cubic bezier segments.

    For segment Pi -> Pi+1 the control points are
        Pi + (Pi+1 - Pi-1) * tension  and  Pi+1 - (Pi+2 - Pi) * tension
    with the missing neighbours at both ends clamped to the end points.

    When an anchor is given, the first (or last) outward control point is
    replaced by one on the anchor's normal so the curve meets the shape
    side perpendicularly.
    """
    if len(points) < 2:
        return []

    last = len(points) - 1
    segments = []
    for i in range(last):
        p0 = points[max(i - 1, 0)]
        p1 = points[i]
        p2 = points[i + 1]
        p3 = points[min(i + 2, last)]

        c1 = Point(p1.x + (p2.x - p0.x) * tension, p1.y + (p2.y - p0.y) * tension)
        c2 = Point(p2.x - (p3.x - p1.x) * tension, p2.y - (p3.y - p1.y) * tension)

        if i == 0 and start_anchor is not None:
            c1 = _anchor_offset(p1, start_anchor, auto_control_distance(p1, p2))
        if i == last - 1 and end_anchor is not None:
            c2 = _anchor_offset(p2, end_anchor, auto_control_distance(p1, p2))

        segments.append(BezierCurve(p1, c1, c2, p2))
    return segments
