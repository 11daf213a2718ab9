"""
Geometry kernel.

Bounds and angle primitives shared by the resize, rotation and group
transform services.

Angle convention: angles returned by angle_from_center are in degrees,
0 = up (12 o'clock), increasing clockwise (90 = right, 180 = down,
270 = left). The rotation handle sits above the shape, so a pointer
straight above the center reads as 0.
"""

import math
from typing import List, Tuple

from models.geometry import Bounds, Point
from models.interaction import HandleType, RESIZE_HANDLES


# Threshold for near-diagonal movement in constrain_to_axis
AXIS_CONSTRAINT_THRESHOLD = 5


def bounds_center(bounds: Bounds) -> Point:
    """Get the center point of a bounds rectangle."""
    return Point(bounds.x + bounds.width / 2, bounds.y + bounds.height / 2)


def normalize_angle(angle: float) -> float:
    """Normalize an angle in degrees to [0, 360)."""
    normalized = angle % 360
    # -0.0 and float rounding at the upper edge
    if normalized >= 360 or normalized == 0:
        return 0.0
    return normalized


def angle_from_center(center: Point, point: Point) -> float:
    """
    Calculate the angle in degrees from center to point.

    Returns an angle in [0, 360) where 0 = up and values grow clockwise.
    atan2 measures from the positive x axis, so 90 degrees is added to
    move the zero to 12 o'clock.
    """
    dx = point.x - center.x
    dy = point.y - center.y
    angle = math.degrees(math.atan2(dy, dx)) + 90
    return normalize_angle(angle)


def snap_angle(angle: float, increment: float) -> float:
    """Snap an angle to the nearest multiple of increment (halves round up)."""
    if increment <= 0:
        return angle
    return math.floor(angle / increment + 0.5) * increment


def constrain_to_axis(delta: Point, threshold: float = AXIS_CONSTRAINT_THRESHOLD) -> Point:
    """
    Constrain a movement delta to its dominant axis.

    Near-diagonal movements (within threshold) keep the axis with the
    larger absolute value.
    """
    abs_x = abs(delta.x)
    abs_y = abs(delta.y)

    if abs_x > abs_y + threshold:
        return Point(delta.x, 0)
    if abs_y > abs_x + threshold:
        return Point(0, delta.y)

    if abs_x >= abs_y:
        return Point(delta.x, 0)
    return Point(0, delta.y)


def rotate_point(point: Point, center: Point, degrees: float) -> Point:
    """Rotate point clockwise (screen coordinates) about center."""
    if degrees == 0:
        return Point(point.x, point.y)
    rad = math.radians(degrees)
    cos = math.cos(rad)
    sin = math.sin(rad)
    dx = point.x - center.x
    dy = point.y - center.y
    return Point(
        center.x + dx * cos - dy * sin,
        center.y + dx * sin + dy * cos,
    )


def get_handle_positions(bounds: Bounds) -> List[Tuple[HandleType, Point]]:
    """Get the 8 resize handle positions (corners and edge midpoints)."""
    x, y, w, h = bounds.x, bounds.y, bounds.width, bounds.height
    positions = {
        HandleType.NW: Point(x, y),
        HandleType.N: Point(x + w / 2, y),
        HandleType.NE: Point(x + w, y),
        HandleType.W: Point(x, y + h / 2),
        HandleType.E: Point(x + w, y + h / 2),
        HandleType.SW: Point(x, y + h),
        HandleType.S: Point(x + w / 2, y + h),
        HandleType.SE: Point(x + w, y + h),
    }
    return [(handle, positions[handle]) for handle in RESIZE_HANDLES]


def get_rotation_handle_position(bounds: Bounds, offset: float) -> Point:
    """Get the rotation handle position (above the top-center of the shape)."""
    return Point(bounds.x + bounds.width / 2, bounds.y - offset)


def is_corner_handle(handle: HandleType) -> bool:
    """Check if a handle is one of the four corner handles."""
    return handle.is_corner
