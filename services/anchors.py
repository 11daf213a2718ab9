"""
Anchor resolution and best-anchor prediction.

Anchors sit at the midpoints of the four sides of a shape's unrotated
bounding box and follow the shape's rotation about its center.
"""

import math
from dataclasses import dataclass
from typing import List, Mapping, Optional, Tuple

from models.connection import ANCHOR_ORDER, AnchorPosition, Connection
from models.geometry import Point
from models.shape import Shape
from .geometry_kernel import rotate_point


# Distance within which a drag point snaps to a specific anchor
ANCHOR_SNAP_THRESHOLD = 25

# Default pick radius for find_nearest_anchor
NEAREST_ANCHOR_THRESHOLD = 20

# Best-anchor score weights
DISTANCE_WEIGHT = 50
DIRECTION_WEIGHT = 30
OPPOSITE_BONUS = 20

# Outward direction of each anchor in radians (screen coordinates, y down)
_ANCHOR_DIRECTIONS = {
    AnchorPosition.TOP: -math.pi / 2,
    AnchorPosition.RIGHT: 0.0,
    AnchorPosition.BOTTOM: math.pi / 2,
    AnchorPosition.LEFT: math.pi,
}


@dataclass(frozen=True)
class BestAnchor:
    """Result of best-anchor prediction."""
    anchor: AnchorPosition
    point: Point
    snapped: bool


def get_anchor_position(shape: Shape, anchor: AnchorPosition) -> Point:
    """Get the canvas position of an anchor, taking the shape rotation into account."""
    center = shape.center
    if anchor == AnchorPosition.TOP:
        point = Point(center.x, shape.y)
    elif anchor == AnchorPosition.RIGHT:
        point = Point(shape.x + shape.width, center.y)
    elif anchor == AnchorPosition.BOTTOM:
        point = Point(center.x, shape.y + shape.height)
    else:
        point = Point(shape.x, center.y)
    return rotate_point(point, center, shape.rotation)


def get_all_anchors(shape: Shape) -> List[Tuple[AnchorPosition, Point]]:
    """Get all four anchors of a shape in enumeration order."""
    return [(anchor, get_anchor_position(shape, anchor)) for anchor in ANCHOR_ORDER]


def find_nearest_anchor(
    shape: Shape,
    point: Point,
    threshold: float = NEAREST_ANCHOR_THRESHOLD,
) -> Optional[Tuple[AnchorPosition, Point]]:
    """Find the anchor closest to point, if any is strictly within threshold."""
    nearest = None
    min_distance = threshold
    for anchor, anchor_point in get_all_anchors(shape):
        distance = anchor_point.distance_to(point)
        if distance < min_distance:
            min_distance = distance
            nearest = (anchor, anchor_point)
    return nearest


def resolve_endpoints(
    connection: Connection,
    shapes: Mapping[str, Shape],
) -> Optional[Tuple[Point, Point]]:
    """
    Resolve the canvas positions of both ends of a connection.

    Attached ends use the live anchor position of their shape; floating
    ends use the stored point.

    Returns:
        Tuple of (start, end), or None when an attached shape is missing or
        a floating end has no point
    """
    if connection.source_attached:
        source = shapes.get(connection.source_shape_id) if connection.source_shape_id else None
        if source is None:
            return None
        start = get_anchor_position(source, connection.source_anchor)
    elif connection.floating_source_point is not None:
        start = connection.floating_source_point
    else:
        return None

    if connection.target_attached:
        if not connection.target_shape_id or connection.target_anchor is None:
            return None
        target = shapes.get(connection.target_shape_id)
        if target is None:
            return None
        end = get_anchor_position(target, connection.target_anchor)
    elif connection.floating_target_point is not None:
        end = connection.floating_target_point
    else:
        return None

    return start, end


def get_anchor_direction(anchor: AnchorPosition) -> float:
    """Get the outward direction of an anchor in radians (0 = right, y down)."""
    return _ANCHOR_DIRECTIONS[anchor]


def get_anchor_vector(anchor: AnchorPosition) -> Point:
    """Get the outward unit vector of an anchor."""
    if anchor == AnchorPosition.TOP:
        return Point(0, -1)
    if anchor == AnchorPosition.BOTTOM:
        return Point(0, 1)
    if anchor == AnchorPosition.LEFT:
        return Point(-1, 0)
    return Point(1, 0)


def is_opposite_anchor(a: AnchorPosition, b: AnchorPosition) -> bool:
    """Check if two anchors face each other (left/right or top/bottom)."""
    return a.opposite == b


def _angle_difference(angle: float) -> float:
    """Magnitude of an angle difference folded into [0, pi]."""
    while angle > math.pi:
        angle -= 2 * math.pi
    while angle < -math.pi:
        angle += 2 * math.pi
    return abs(angle)


def calculate_best_anchor(
    target_shape: Shape,
    drag_point: Point,
    opposite_point: Point,
    opposite_anchor: Optional[AnchorPosition] = None,
    snap_threshold: float = ANCHOR_SNAP_THRESHOLD,
) -> BestAnchor:
    """
    Pick the anchor on target_shape for an endpoint being dragged.

    An anchor within snap_threshold of the drag point wins outright.
    Otherwise each anchor is scored on closeness to the drag point (50),
    how well it faces the opposite endpoint (30) and whether it is the
    opposite of the other end's anchor (20).

    Args:
        target_shape: Shape the endpoint is being dropped on
        drag_point: Current pointer position
        opposite_point: Position of the connection's other endpoint
        opposite_anchor: Anchor of the other endpoint, if attached
        snap_threshold: Direct snapping distance

    Returns:
        BestAnchor with the chosen anchor and its position
    """
    anchors = get_all_anchors(target_shape)

    for anchor, point in anchors:
        if point.distance_to(drag_point) <= snap_threshold:
            return BestAnchor(anchor, point, True)

    max_distance = max(target_shape.width, target_shape.height, 100)
    candidates = []
    for anchor, point in anchors:
        distance = point.distance_to(drag_point)
        score = DISTANCE_WEIGHT * (1 - min(distance / max_distance, 1))

        approach = math.atan2(opposite_point.y - point.y, opposite_point.x - point.x)
        angle_diff = _angle_difference(approach - get_anchor_direction(anchor))
        score += DIRECTION_WEIGHT * (1 - angle_diff / math.pi)

        if opposite_anchor is not None and is_opposite_anchor(opposite_anchor, anchor):
            score += OPPOSITE_BONUS

        candidates.append((score, anchor, point))

    # sorted() is stable, equal scores keep enumeration order
    candidates = sorted(candidates, key=lambda c: c[0], reverse=True)
    _, anchor, point = candidates[0]
    return BestAnchor(anchor, point, False)
