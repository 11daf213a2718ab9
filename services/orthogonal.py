"""
Orthogonal connector routing.

Paths use only horizontal and vertical segments. Each end first leaves its
anchor perpendicular to the shape side by EXIT_OFFSET, then the two exit
points are joined with one of three strategies:

    direct   anchors on perpendicular axes, one turn (L)
    z-shape  opposite anchors facing each other, two turns through the
             midpoint between the exit points
    u-shape  same anchors, or opposite anchors facing away, a detour
             outward past both exit points
"""

from enum import Enum
from typing import List, Optional, Sequence

from models.connection import AnchorPosition
from models.geometry import Point


# Distance travelled perpendicular to the anchor before the first turn
EXIT_OFFSET = 20

# Minimum outward distance of a u-shape detour
U_SHAPE_MIN_OFFSET = 50


class RoutingStrategy(Enum):
    DIRECT = "direct"
    Z_SHAPE = "z-shape"
    U_SHAPE = "u-shape"


def get_exit_point(point: Point, anchor: AnchorPosition, offset: float = EXIT_OFFSET) -> Point:
    """Move point outward from its anchor side by offset."""
    if anchor == AnchorPosition.TOP:
        return Point(point.x, point.y - offset)
    if anchor == AnchorPosition.BOTTOM:
        return Point(point.x, point.y + offset)
    if anchor == AnchorPosition.LEFT:
        return Point(point.x - offset, point.y)
    return Point(point.x + offset, point.y)


def determine_strategy(
    start_anchor: AnchorPosition,
    end_anchor: AnchorPosition,
    start: Point,
    end: Point,
) -> RoutingStrategy:
    """
    Pick the routing strategy from the anchors and the endpoint positions.

    Opposite anchors only face each other when the start exits toward the
    end: right->left with the end further right, bottom->top with the end
    further down (and the mirrored cases).
    """
    if start_anchor == end_anchor:
        return RoutingStrategy.U_SHAPE

    if start_anchor.is_horizontal != end_anchor.is_horizontal:
        return RoutingStrategy.DIRECT

    if start_anchor.is_horizontal:
        facing = (start_anchor == AnchorPosition.RIGHT) == (end.x > start.x)
    else:
        facing = (start_anchor == AnchorPosition.BOTTOM) == (end.y > start.y)

    return RoutingStrategy.Z_SHAPE if facing else RoutingStrategy.U_SHAPE


def calculate_orthogonal_path(
    start: Point,
    start_anchor: AnchorPosition,
    end: Point,
    end_anchor: AnchorPosition,
    exit_offset: float = EXIT_OFFSET,
) -> List[Point]:
    """
    Route an orthogonal path between two anchor points.

    The first and last points of the result are always start and end.

    Args:
        start: Source anchor position
        start_anchor: Side of the source shape
        end: Target anchor position
        end_anchor: Side of the target shape
        exit_offset: Perpendicular exit distance

    Returns:
        Path points with collinear intermediate points removed
    """
    exit_point = get_exit_point(start, start_anchor, exit_offset)
    entry_point = get_exit_point(end, end_anchor, exit_offset)
    strategy = determine_strategy(start_anchor, end_anchor, start, end)

    points = [start, exit_point]

    if strategy == RoutingStrategy.DIRECT:
        if start_anchor.is_horizontal:
            points.append(Point(exit_point.x, entry_point.y))
        else:
            points.append(Point(entry_point.x, exit_point.y))

    elif strategy == RoutingStrategy.Z_SHAPE:
        if start_anchor.is_horizontal:
            mid_x = (exit_point.x + entry_point.x) / 2
            points.append(Point(mid_x, exit_point.y))
            points.append(Point(mid_x, entry_point.y))
        else:
            mid_y = (exit_point.y + entry_point.y) / 2
            points.append(Point(exit_point.x, mid_y))
            points.append(Point(entry_point.x, mid_y))

    else:
        offset = max(abs(end.x - start.x) * 0.3, abs(end.y - start.y) * 0.3, U_SHAPE_MIN_OFFSET)
        if start_anchor.is_horizontal:
            if start_anchor == AnchorPosition.RIGHT:
                far_x = max(exit_point.x, entry_point.x) + offset
            else:
                far_x = min(exit_point.x, entry_point.x) - offset
            points.append(Point(far_x, exit_point.y))
            points.append(Point(far_x, entry_point.y))
        else:
            if start_anchor == AnchorPosition.BOTTOM:
                far_y = max(exit_point.y, entry_point.y) + offset
            else:
                far_y = min(exit_point.y, entry_point.y) - offset
            points.append(Point(exit_point.x, far_y))
            points.append(Point(entry_point.x, far_y))

    points.append(entry_point)
    points.append(end)
    return simplify_path(points)


def simplify_path(points: Sequence[Point]) -> List[Point]:
    """Drop intermediate points that do not turn (same x or same y as both neighbours)."""
    if len(points) <= 2:
        return list(points)

    simplified = [points[0]]
    for i in range(1, len(points) - 1):
        prev = simplified[-1]
        curr = points[i]
        nxt = points[i + 1]
        on_horizontal = prev.y == curr.y == nxt.y
        on_vertical = prev.x == curr.x == nxt.x
        if not on_horizontal and not on_vertical:
            simplified.append(curr)

    simplified.append(points[-1])
    return simplified


def infer_exit_anchor(from_point: Point, to_point: Point) -> AnchorPosition:
    """Side a leg leaves from, based on where it is heading."""
    dx = to_point.x - from_point.x
    dy = to_point.y - from_point.y
    if abs(dx) > abs(dy):
        return AnchorPosition.RIGHT if dx > 0 else AnchorPosition.LEFT
    return AnchorPosition.BOTTOM if dy > 0 else AnchorPosition.TOP


def infer_entry_anchor(from_point: Point, to_point: Point) -> AnchorPosition:
    """Side a leg arrives on, based on where it came from."""
    return infer_exit_anchor(from_point, to_point).opposite


def route_orthogonal_with_waypoints(
    start: Point,
    end: Point,
    waypoints: Sequence[Point],
    start_anchor: Optional[AnchorPosition] = None,
    end_anchor: Optional[AnchorPosition] = None,
    exit_offset: float = EXIT_OFFSET,
) -> List[Point]:
    """
    Route an orthogonal path that passes through every waypoint.

    Each leg is routed separately. The first leg leaves from start_anchor
    and the last arrives on end_anchor; inner legs infer their sides from
    the leg direction.
    """
    start_anchor = start_anchor or AnchorPosition.RIGHT
    end_anchor = end_anchor or AnchorPosition.LEFT

    if not waypoints:
        return calculate_orthogonal_path(start, start_anchor, end, end_anchor, exit_offset)

    checkpoints = [start, *waypoints, end]
    last_leg = len(checkpoints) - 2
    result = [start]

    for i in range(len(checkpoints) - 1):
        from_point = checkpoints[i]
        to_point = checkpoints[i + 1]
        from_anchor = start_anchor if i == 0 else infer_exit_anchor(from_point, to_point)
        to_anchor = end_anchor if i == last_leg else infer_entry_anchor(from_point, to_point)

        leg = calculate_orthogonal_path(from_point, from_anchor, to_point, to_anchor, exit_offset)
        result.extend(leg[1:])

    return result
