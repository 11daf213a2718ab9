"""
Path utilities for connection labels and waypoints.

Waypoint conversion between the stored relative form (t along the
start-end baseline plus an offset) and absolute canvas points, and the
polyline measurements that label placement and hit-testing share across
all connector types.
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from models.connection import LABEL_POSITION_MAX, LABEL_POSITION_MIN, Waypoint, _generate_id
from models.geometry import Point


@dataclass(frozen=True)
class NearestPoint:
    """Closest point on a path to a query point."""
    t: float
    distance: float
    point: Point


# ==================== Waypoint conversion ====================

def waypoint_to_absolute(waypoint: Waypoint, start: Point, end: Point) -> Point:
    """Convert a relative waypoint to its canvas position."""
    base_x = start.x + waypoint.t * (end.x - start.x)
    base_y = start.y + waypoint.t * (end.y - start.y)
    return Point(base_x + waypoint.offset.x, base_y + waypoint.offset.y)


def waypoints_to_absolute(waypoints: Sequence[Waypoint], start: Point, end: Point) -> List[Point]:
    """Convert all waypoints to canvas positions, keeping their order."""
    return [waypoint_to_absolute(wp, start, end) for wp in waypoints]


def absolute_to_waypoint(
    point: Point,
    start: Point,
    end: Point,
    waypoint_id: Optional[str] = None,
) -> Waypoint:
    """
    Convert a canvas position to a relative waypoint.

    t is the projection of the point onto the start-end baseline clamped
    to [0, 1]; the offset is whatever remains. A zero-length baseline
    gives t = 0.
    """
    dx = end.x - start.x
    dy = end.y - start.y
    length_sq = dx * dx + dy * dy

    if length_sq == 0:
        t = 0.0
    else:
        t = ((point.x - start.x) * dx + (point.y - start.y) * dy) / length_sq
        t = max(0.0, min(1.0, t))

    base_x = start.x + t * dx
    base_y = start.y + t * dy
    return Waypoint(
        id=waypoint_id or _generate_id(),
        t=t,
        offset=Point(point.x - base_x, point.y - base_y),
    )


def calculate_waypoint_insert_index(
    click_point: Point,
    waypoint_positions: Sequence[Point],
    start: Point,
    end: Point,
) -> int:
    """
    Find where a new waypoint belongs in the waypoint list.

    Segment i of [start, *waypoints, end] runs into waypoint i, so the
    index of the closest segment is the insert index.
    """
    if not waypoint_positions:
        return 0

    all_points = [start, *waypoint_positions, end]
    min_distance = math.inf
    insert_index = 0
    for i in range(len(all_points) - 1):
        distance = point_to_segment_distance(click_point, all_points[i], all_points[i + 1])
        if distance < min_distance:
            min_distance = distance
            insert_index = i
    return insert_index


def insert_waypoint(
    waypoints: Sequence[Waypoint],
    click_point: Point,
    start: Point,
    end: Point,
    waypoint_id: Optional[str] = None,
) -> Tuple[List[Waypoint], Waypoint]:
    """
    Insert a waypoint at a clicked canvas position.

    Returns:
        Tuple of (new waypoint list, inserted waypoint)
    """
    positions = waypoints_to_absolute(waypoints, start, end)
    index = calculate_waypoint_insert_index(click_point, positions, start, end)
    waypoint = absolute_to_waypoint(click_point, start, end, waypoint_id)

    new_waypoints = list(waypoints)
    new_waypoints.insert(index, waypoint)
    return new_waypoints, waypoint


def clamp_label_position(t: float) -> float:
    """Keep a dragged label away from the very ends of the path."""
    return max(LABEL_POSITION_MIN, min(LABEL_POSITION_MAX, t))


# ==================== Segment helpers ====================

def segment_length(p1: Point, p2: Point) -> float:
    return math.hypot(p2.x - p1.x, p2.y - p1.y)


def nearest_point_on_segment(point: Point, seg_start: Point, seg_end: Point) -> Tuple[Point, float]:
    """Project point onto a segment, returning (closest point, clamped t)."""
    dx = seg_end.x - seg_start.x
    dy = seg_end.y - seg_start.y
    length_sq = dx * dx + dy * dy

    if length_sq == 0:
        return seg_start, 0.0

    t = ((point.x - seg_start.x) * dx + (point.y - seg_start.y) * dy) / length_sq
    t = max(0.0, min(1.0, t))
    return Point(seg_start.x + t * dx, seg_start.y + t * dy), t


def point_to_segment_distance(point: Point, seg_start: Point, seg_end: Point) -> float:
    nearest, _ = nearest_point_on_segment(point, seg_start, seg_end)
    return point.distance_to(nearest)


# ==================== Polyline measurement ====================

def polyline_length(points: Sequence[Point]) -> float:
    return sum(segment_length(points[i], points[i + 1]) for i in range(len(points) - 1))


def point_on_polyline(points: Sequence[Point], t: float) -> Point:
    """Get the point at fraction t (0-1) of the polyline's arc length."""
    if not points:
        return Point(0, 0)
    if len(points) < 2:
        return points[0]

    if t <= 0:
        return points[0]
    if t >= 1:
        return points[-1]
    total = polyline_length(points)
    if total == 0:
        return points[0]

    target = t * total
    accumulated = 0.0
    for i in range(len(points) - 1):
        length = segment_length(points[i], points[i + 1])
        if accumulated + length >= target:
            seg_t = 0.0 if length == 0 else (target - accumulated) / length
            return Point(
                points[i].x + (points[i + 1].x - points[i].x) * seg_t,
                points[i].y + (points[i + 1].y - points[i].y) * seg_t,
            )
        accumulated += length

    return points[-1]


def nearest_t_on_polyline(points: Sequence[Point], target: Point) -> NearestPoint:
    """Find the arc-length fraction of the polyline point closest to target."""
    if not points:
        origin = Point(0, 0)
        return NearestPoint(0.0, target.distance_to(origin), origin)
    if len(points) < 2:
        return NearestPoint(0.0, target.distance_to(points[0]), points[0])

    total = polyline_length(points)
    accumulated = 0.0
    best = NearestPoint(0.0, math.inf, points[0])

    for i in range(len(points) - 1):
        seg_start, seg_end = points[i], points[i + 1]
        nearest, _ = nearest_point_on_segment(target, seg_start, seg_end)
        distance = target.distance_to(nearest)
        if distance < best.distance:
            along = accumulated + segment_length(seg_start, nearest)
            best = NearestPoint(0.0 if total == 0 else along / total, distance, nearest)
        accumulated += segment_length(seg_start, seg_end)

    return best


def is_point_near_polyline(point: Point, points: Sequence[Point], threshold: float) -> bool:
    """Check whether point is strictly within threshold of any segment."""
    if len(points) == 1:
        return point.distance_to(points[0]) < threshold
    return any(
        point_to_segment_distance(point, points[i], points[i + 1]) < threshold
        for i in range(len(points) - 1)
    )
