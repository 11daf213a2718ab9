"""
Resize engine.

Computes new bounds for a shape (or a group bounding box) while one of the
eight resize handles is dragged. The delta is always the total pointer
movement since the gesture started, in canvas units.

The constraints compose in a fixed order:
    raw resize -> aspect ratio -> minimum size -> resize from center
"""

from models.geometry import Bounds, Point
from models.interaction import HandleType, ResizeOptions


def calculate_resize(
    start_bounds: Bounds,
    handle: HandleType,
    delta: Point,
    options: ResizeOptions,
) -> Bounds:
    """
    Calculate new bounds for a handle drag.

    Args:
        start_bounds: Bounds at gesture start
        handle: Resize handle being dragged
        delta: Total pointer movement since gesture start
        options: Aspect ratio, center and minimum size constraints

    Returns:
        New bounds
    """
    bounds = _raw_resize(start_bounds, handle, delta)

    if options.maintain_aspect_ratio and handle.is_corner:
        bounds = _apply_aspect_ratio(bounds, start_bounds, handle, options.original_aspect_ratio)

    bounds = _enforce_minimum_size(bounds, start_bounds, handle, options.min_size)

    if options.resize_from_center:
        bounds = _apply_resize_from_center(bounds, start_bounds, options.min_size)

    return bounds


def _raw_resize(start_bounds: Bounds, handle: HandleType, delta: Point) -> Bounds:
    """Move only the edges the handle owns."""
    x, y = start_bounds.x, start_bounds.y
    width, height = start_bounds.width, start_bounds.height

    if handle.moves_left_edge:
        x += delta.x
        width -= delta.x
    elif handle in (HandleType.NE, HandleType.E, HandleType.SE):
        width += delta.x

    if handle.moves_top_edge:
        y += delta.y
        height -= delta.y
    elif handle in (HandleType.SW, HandleType.S, HandleType.SE):
        height += delta.y

    return Bounds(x, y, width, height)


def _apply_aspect_ratio(
    bounds: Bounds,
    start_bounds: Bounds,
    handle: HandleType,
    aspect_ratio: float,
) -> Bounds:
    """
    Make width/height match aspect_ratio.

    The axis that changed more drives the other one. Position moves only on
    the edges being dragged so the opposite corner stays put. A ratio of
    zero or less leaves the bounds unconstrained.
    """
    if aspect_ratio <= 0:
        return bounds

    x, y, width, height = bounds.x, bounds.y, bounds.width, bounds.height

    width_change = abs(width - start_bounds.width)
    height_change = abs(height - start_bounds.height)

    if width_change >= height_change:
        target_height = width / aspect_ratio
        if handle.moves_top_edge:
            y -= target_height - height
        height = target_height
    else:
        target_width = height * aspect_ratio
        if handle.moves_left_edge:
            x -= target_width - width
        width = target_width

    return Bounds(x, y, width, height)


def _enforce_minimum_size(
    bounds: Bounds,
    start_bounds: Bounds,
    handle: HandleType,
    min_size: float,
) -> Bounds:
    """Clamp the size to min_size, keeping the edge not being dragged fixed."""
    x, y, width, height = bounds.x, bounds.y, bounds.width, bounds.height

    if width < min_size:
        width = min_size
        if handle.moves_left_edge:
            x = start_bounds.x + start_bounds.width - min_size

    if height < min_size:
        height = min_size
        if handle.moves_top_edge:
            y = start_bounds.y + start_bounds.height - min_size

    return Bounds(x, y, width, height)


def _apply_resize_from_center(bounds: Bounds, start_bounds: Bounds, min_size: float) -> Bounds:
    """
    Double the size change and center it on the original center.

    Doubling a shrink can undercut min_size again, so the doubled size is
    clamped before it is centered.
    """
    width_delta = bounds.width - start_bounds.width
    height_delta = bounds.height - start_bounds.height

    width = max(start_bounds.width + width_delta * 2, min_size)
    height = max(start_bounds.height + height_delta * 2, min_size)
    center = start_bounds.center

    return Bounds(
        center.x - width / 2,
        center.y - height / 2,
        width,
        height,
    )
