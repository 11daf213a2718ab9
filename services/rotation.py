"""
Rotation engine.

Single-shape rotation about the shape center. Snapping applies to the
rotation delta of the gesture, not to the absolute angle, so a shape that
starts at 10 degrees snaps to 25, 40, 55, ...
"""

from models.geometry import Point
from .geometry_kernel import angle_from_center, normalize_angle, snap_angle


# Default snapping increment (degrees) when snapping is enabled
ROTATION_SNAP_DEGREES = 15


def rotate(
    start_rotation: float,
    angle_delta: float,
    snap_enabled: bool = False,
    increment: float = ROTATION_SNAP_DEGREES,
) -> float:
    """
    Apply an angle delta to a starting rotation.

    Args:
        start_rotation: Rotation at gesture start (degrees)
        angle_delta: Total angle change since gesture start (degrees)
        snap_enabled: Round the delta to the nearest increment
        increment: Snapping increment in degrees

    Returns:
        New rotation normalized to [0, 360)
    """
    if snap_enabled:
        angle_delta = snap_angle(angle_delta, increment)
    return normalize_angle(start_rotation + angle_delta)


def rotation_delta(center: Point, start_pointer: Point, current_pointer: Point) -> float:
    """Angle swept by the pointer around center since the gesture started."""
    return angle_from_center(center, current_pointer) - angle_from_center(center, start_pointer)


def rotation_from_pointer(
    center: Point,
    start_pointer: Point,
    current_pointer: Point,
    start_rotation: float,
    snap_enabled: bool = False,
    increment: float = ROTATION_SNAP_DEGREES,
) -> float:
    """Compute the new rotation for a rotation-handle drag."""
    delta = rotation_delta(center, start_pointer, current_pointer)
    return rotate(start_rotation, delta, snap_enabled, increment)
