"""
Group transform.

Scales and rotates several shapes together while preserving their layout
relative to each other. Both operations take the member snapshot captured
at gesture start and are recomputed from it on every pointer event, so
repeated or skipped events never compound.
"""

import math
from dataclasses import dataclass
from typing import Dict, Iterable, Mapping

from models.geometry import Bounds, Point
from models.interaction import HandleType
from models.shape import MIN_SHAPE_SIZE, Shape
from .geometry_kernel import normalize_angle


@dataclass(frozen=True)
class ShapeState:
    """Snapshot of a shape's transform fields at gesture start."""
    x: float
    y: float
    width: float
    height: float
    rotation: float

    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)

    @classmethod
    def from_shape(cls, shape: Shape) -> "ShapeState":
        return cls(shape.x, shape.y, shape.width, shape.height, shape.rotation)


def capture_shape_states(shapes: Mapping[str, Shape], shape_ids: Iterable[str]) -> Dict[str, ShapeState]:
    """Snapshot the transform fields of the given shapes (missing ids are skipped)."""
    states = {}
    for shape_id in shape_ids:
        shape = shapes.get(shape_id)
        if shape is not None:
            states[shape_id] = ShapeState.from_shape(shape)
    return states


def calculate_group_bounds(shapes: Iterable[Shape]) -> Bounds:
    """Bounding box of the unrotated bounds of all shapes (empty -> zero bounds)."""
    shapes = list(shapes)
    if not shapes:
        return Bounds(0, 0, 0, 0)

    min_x = min(s.x for s in shapes)
    min_y = min(s.y for s in shapes)
    max_x = max(s.x + s.width for s in shapes)
    max_y = max(s.y + s.height for s in shapes)
    return Bounds(min_x, min_y, max_x - min_x, max_y - min_y)


def get_anchor_point(bounds: Bounds, handle: HandleType) -> Point:
    """
    Get the point that stays fixed while handle is dragged.

    This is the corner or edge midpoint opposite the handle.
    """
    x, y, w, h = bounds.x, bounds.y, bounds.width, bounds.height
    anchors = {
        HandleType.NW: Point(x + w, y + h),
        HandleType.N: Point(x + w / 2, y + h),
        HandleType.NE: Point(x, y + h),
        HandleType.E: Point(x, y + h / 2),
        HandleType.SE: Point(x, y),
        HandleType.S: Point(x + w / 2, y),
        HandleType.SW: Point(x + w, y),
        HandleType.W: Point(x + w, y + h / 2),
    }
    return anchors.get(handle, bounds.center)


def scale_shapes_in_group(
    start_states: Mapping[str, ShapeState],
    start_group_bounds: Bounds,
    new_group_bounds: Bounds,
    handle: HandleType,
    min_size: float = MIN_SHAPE_SIZE,
) -> Dict[str, Dict[str, float]]:
    """
    Scale every member proportionally to a resized group bounding box.

    Each member center is expressed relative to the fixed anchor, scaled
    component-wise and re-anchored on the new bounds. Sizes scale by the
    absolute scale factors with a min_size floor.

    Returns:
        Partial field updates (x, y, width, height) keyed by shape id
    """
    scale_x = new_group_bounds.width / start_group_bounds.width if start_group_bounds.width > 0 else 1.0
    scale_y = new_group_bounds.height / start_group_bounds.height if start_group_bounds.height > 0 else 1.0

    start_anchor = get_anchor_point(start_group_bounds, handle)
    new_anchor = get_anchor_point(new_group_bounds, handle)

    updates = {}
    for shape_id, state in start_states.items():
        center = state.center
        new_center_x = new_anchor.x + (center.x - start_anchor.x) * scale_x
        new_center_y = new_anchor.y + (center.y - start_anchor.y) * scale_y

        new_width = max(min_size, state.width * abs(scale_x))
        new_height = max(min_size, state.height * abs(scale_y))

        updates[shape_id] = {
            "x": new_center_x - new_width / 2,
            "y": new_center_y - new_height / 2,
            "width": new_width,
            "height": new_height,
        }
    return updates


def rotate_shapes_around_center(
    start_states: Mapping[str, ShapeState],
    center: Point,
    angle_delta: float,
) -> Dict[str, Dict[str, float]]:
    """
    Rotate every member around a shared center.

    Member centers orbit the group center and each member's own rotation
    grows by the same delta, so members spin in place as well.

    Returns:
        Partial field updates (x, y, rotation) keyed by shape id
    """
    rad = math.radians(angle_delta)
    cos = math.cos(rad)
    sin = math.sin(rad)

    updates = {}
    for shape_id, state in start_states.items():
        shape_center = state.center
        rel_x = shape_center.x - center.x
        rel_y = shape_center.y - center.y

        new_center_x = center.x + rel_x * cos - rel_y * sin
        new_center_y = center.y + rel_x * sin + rel_y * cos

        updates[shape_id] = {
            "x": new_center_x - state.width / 2,
            "y": new_center_y - state.height / 2,
            "rotation": normalize_angle(state.rotation + angle_delta),
        }
    return updates


def apply_shape_updates(
    shapes: Mapping[str, Shape],
    updates: Mapping[str, Mapping[str, float]],
) -> Dict[str, Shape]:
    """
    Return a new shapes dict with the updates applied.

    The input mapping is left untouched so callers can swap the whole
    collection in one assignment.
    """
    new_shapes = dict(shapes)
    for shape_id, fields in updates.items():
        shape = new_shapes.get(shape_id)
        if shape is not None:
            new_shapes[shape_id] = shape.copy(**fields)
    return new_shapes
