"""
Grid snapping.
"""

import math

from models.geometry import Bounds, Point


DEFAULT_GRID_SIZE = 20


def round_half_up(value: float) -> float:
    """Round to the nearest integer (halves round up)."""
    return math.floor(value + 0.5)


def snap_to_grid(value: float, grid_size: float = DEFAULT_GRID_SIZE) -> float:
    """Snap a value to the nearest grid line (halves round up)."""
    if grid_size <= 0:
        return value
    return math.floor(value / grid_size + 0.5) * grid_size


def snap_point_to_grid(point: Point, grid_size: float = DEFAULT_GRID_SIZE, enabled: bool = True) -> Point:
    if not enabled:
        return point
    return Point(snap_to_grid(point.x, grid_size), snap_to_grid(point.y, grid_size))


def snap_bounds_to_grid(bounds: Bounds, grid_size: float = DEFAULT_GRID_SIZE, enabled: bool = True) -> Bounds:
    """Snap the bounds position to the grid, keeping the size."""
    if not enabled:
        return bounds
    return Bounds(
        snap_to_grid(bounds.x, grid_size),
        snap_to_grid(bounds.y, grid_size),
        bounds.width,
        bounds.height,
    )


def adaptive_grid_size(base_size: float, zoom: float) -> float:
    """Widen the grid when zoomed far out: x4 below 25%, x2 below 50%."""
    if zoom < 0.25:
        return base_size * 4
    if zoom < 0.5:
        return base_size * 2
    return base_size


def snap_resized_bounds(bounds: Bounds, grid_size: float, min_size: float) -> Bounds:
    """
    Snap resized bounds to the grid.

    The top-left corner and the bottom-right corner are snapped
    separately, so both edges of the dragged side land on grid lines. The
    size is then held at min_size or more.
    """
    x = snap_to_grid(bounds.x, grid_size)
    y = snap_to_grid(bounds.y, grid_size)
    width = snap_to_grid(bounds.x + bounds.width, grid_size) - x
    height = snap_to_grid(bounds.y + bounds.height, grid_size) - y
    return Bounds(x, y, max(width, min_size), max(height, min_size))


def round_bounds(bounds: Bounds) -> Bounds:
    return Bounds(
        round_half_up(bounds.x),
        round_half_up(bounds.y),
        round_half_up(bounds.width),
        round_half_up(bounds.height),
    )
