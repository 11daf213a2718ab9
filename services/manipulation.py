"""
Manipulation sessions.

A session covers one drag gesture. It snapshots the shapes at start and
every update() recomputes the result from that snapshot plus the total
pointer movement, so updates are idempotent and may be repeated or
skipped. update() returns a new shapes dict for the caller to swap in as
a whole.

commit() turns the difference between the snapshot and the final shapes
into a history entry (None when nothing changed). cancel() returns the
snapshot so the caller can restore the pre-gesture state.
"""

import logging
from typing import Dict, List, Mapping, Optional, Sequence

from models.geometry import Point
from models.history import ActionType, Delta, HistoryEntryInput
from models.interaction import HandleType, ManipulationState, ManipulationType, ResizeOptions
from models.shape import MIN_SHAPE_SIZE, Shape
from .geometry_kernel import AXIS_CONSTRAINT_THRESHOLD, constrain_to_axis, snap_angle
from .group_transform import (
    apply_shape_updates,
    calculate_group_bounds,
    capture_shape_states,
    rotate_shapes_around_center,
    scale_shapes_in_group,
)
from .history_manager import build_shape_modifications
from .resize import calculate_resize
from .rotation import ROTATION_SNAP_DEGREES, rotation_delta, rotation_from_pointer
from .snap import DEFAULT_GRID_SIZE, round_bounds, snap_resized_bounds, snap_to_grid

logger = logging.getLogger(__name__)


class ManipulationSession:
    """
    Base class for drag sessions over a set of shapes.

    Subclasses implement update() and set the recorded fields and the
    history action.
    """

    action_type: ActionType = ActionType.MOVE_SHAPES
    fields: Sequence[str] = ("x", "y")

    def __init__(self, shapes: Mapping[str, Shape], shape_ids: Sequence[str], state: ManipulationState):
        self._start_shapes: Dict[str, Shape] = dict(shapes)
        self.shape_ids: List[str] = [sid for sid in shape_ids if sid in shapes]
        self.state = state
        self._finished = False
        logger.debug(f"Start {state.type.value} on {len(self.shape_ids)} shape(s)")

    @property
    def is_active(self) -> bool:
        return not self._finished

    @property
    def start_shapes(self) -> Dict[str, Shape]:
        return dict(self._start_shapes)

    def description(self) -> str:
        count = len(self.shape_ids)
        noun = "shape" if count == 1 else "shapes"
        return f"{self.state.type.value.replace('-', ' ').capitalize()} {count} {noun}"

    def commit(self, shapes: Mapping[str, Shape], selection: Sequence[str] = ()) -> Optional[HistoryEntryInput]:
        """
        End the gesture and describe what changed.

        Args:
            shapes: Shapes as they are at the end of the gesture
            selection: Selected shape ids (recorded before and after)

        Returns:
            History entry input, or None when no recorded field changed
            or the session already ended
        """
        if self._finished:
            return None
        self._finished = True

        modifications = build_shape_modifications(self._start_shapes, shapes, self.fields, self.shape_ids)
        if not modifications:
            logger.debug(f"{self.state.type.value} ended without changes")
            return None

        return HistoryEntryInput(
            action_type=self.action_type,
            description=self.description(),
            shape_delta=Delta.of(modified=modifications),
            selection_before=tuple(selection),
            selection_after=tuple(selection),
        )

    def cancel(self) -> Dict[str, Shape]:
        """End the gesture and return the shapes as they were at start."""
        self._finished = True
        logger.debug(f"{self.state.type.value} cancelled")
        return dict(self._start_shapes)


class MoveSession(ManipulationSession):
    """Move one or more shapes by the pointer delta."""

    action_type = ActionType.MOVE_SHAPES
    fields = ("x", "y")

    def __init__(self, shapes: Mapping[str, Shape], shape_ids: Sequence[str], start_point: Point,
                 grid_size: float = DEFAULT_GRID_SIZE, snap_enabled: bool = True,
                 axis_threshold: float = AXIS_CONSTRAINT_THRESHOLD):
        primary = shapes[shape_ids[0]] if shape_ids and shape_ids[0] in shapes else None
        state = ManipulationState(
            type=ManipulationType.MOVE,
            target_id=primary.id if primary else "",
            start_point=start_point,
            start_bounds=primary.bounds if primary else None,
        )
        super().__init__(shapes, shape_ids, state)
        self.grid_size = grid_size
        self.snap_enabled = snap_enabled
        self.axis_threshold = axis_threshold

    def update(self, pointer: Point, constrain_axis: bool = False, snap: bool = False) -> Dict[str, Shape]:
        """
        Args:
            pointer: Current pointer position in canvas space
            constrain_axis: Lock movement to the dominant axis
            snap: Snap the primary shape to the grid; the others follow.
                Ignored when grid snapping is disabled for the session.
        """
        delta = Point(pointer.x - self.state.start_point.x, pointer.y - self.state.start_point.y)
        if constrain_axis:
            delta = constrain_to_axis(delta, self.axis_threshold)

        if snap and self.snap_enabled and self.state.start_bounds is not None:
            anchor = self.state.start_bounds
            delta = Point(
                snap_to_grid(anchor.x + delta.x, self.grid_size) - anchor.x,
                snap_to_grid(anchor.y + delta.y, self.grid_size) - anchor.y,
            )

        updates = {}
        for shape_id in self.shape_ids:
            shape = self._start_shapes[shape_id]
            updates[shape_id] = {"x": shape.x + delta.x, "y": shape.y + delta.y}
        return apply_shape_updates(self._start_shapes, updates)


class ResizeSession(ManipulationSession):
    """Resize a single shape with one of the eight handles."""

    action_type = ActionType.RESIZE_SHAPE
    fields = ("x", "y", "width", "height")

    def __init__(self, shapes: Mapping[str, Shape], shape_id: str, handle: HandleType, start_point: Point,
                 min_size: float = MIN_SHAPE_SIZE, grid_size: float = DEFAULT_GRID_SIZE,
                 snap_enabled: bool = True):
        shape = shapes[shape_id]
        state = ManipulationState(
            type=ManipulationType.RESIZE,
            target_id=shape_id,
            start_point=start_point,
            start_bounds=shape.bounds,
            start_rotation=shape.rotation,
            handle=handle,
            aspect_ratio=shape.bounds.aspect_ratio,
        )
        super().__init__(shapes, [shape_id], state)
        self.min_size = min_size
        self.grid_size = grid_size
        self.snap_enabled = snap_enabled

    def update(self, pointer: Point, maintain_aspect_ratio: bool = False,
               resize_from_center: bool = False, snap: bool = False) -> Dict[str, Shape]:
        """
        Args:
            pointer: Current pointer position in canvas space
            maintain_aspect_ratio: Keep the starting width/height ratio
            resize_from_center: Grow both opposite edges around the center
            snap: Snap the moved edges to the grid. Resizing from the
                center never snaps.

        Returns:
            Updated shapes mapping. Unsnapped results are rounded to whole units.
        """
        delta = Point(pointer.x - self.state.start_point.x, pointer.y - self.state.start_point.y)
        options = ResizeOptions(
            maintain_aspect_ratio=maintain_aspect_ratio,
            resize_from_center=resize_from_center,
            original_aspect_ratio=self.state.aspect_ratio,
            min_size=self.min_size,
        )
        bounds = calculate_resize(self.state.start_bounds, self.state.handle, delta, options)
        if snap and self.snap_enabled and not resize_from_center:
            bounds = snap_resized_bounds(bounds, self.grid_size, self.min_size)
        else:
            bounds = round_bounds(bounds)
        return apply_shape_updates(self._start_shapes, {self.state.target_id: bounds.to_dict()})


class RotateSession(ManipulationSession):
    """Rotate a single shape about its center with the rotation handle."""

    action_type = ActionType.ROTATE_SHAPE
    fields = ("rotation",)

    def __init__(self, shapes: Mapping[str, Shape], shape_id: str, start_point: Point,
                 snap_increment: float = ROTATION_SNAP_DEGREES):
        shape = shapes[shape_id]
        state = ManipulationState(
            type=ManipulationType.ROTATE,
            target_id=shape_id,
            start_point=start_point,
            start_bounds=shape.bounds,
            start_rotation=shape.rotation,
            handle=HandleType.ROTATION,
        )
        super().__init__(shapes, [shape_id], state)
        self.snap_increment = snap_increment

    def update(self, pointer: Point, snap: bool = False) -> Dict[str, Shape]:
        rotation = rotation_from_pointer(
            self.state.start_bounds.center,
            self.state.start_point,
            pointer,
            self.state.start_rotation,
            snap,
            self.snap_increment,
        )
        return apply_shape_updates(self._start_shapes, {self.state.target_id: {"rotation": rotation}})


class GroupResizeSession(ManipulationSession):
    """Scale several shapes by dragging a handle of their combined bounds."""

    action_type = ActionType.RESIZE_SHAPE
    fields = ("x", "y", "width", "height")

    def __init__(self, shapes: Mapping[str, Shape], shape_ids: Sequence[str], handle: HandleType,
                 start_point: Point, group_id: str = "", min_size: float = MIN_SHAPE_SIZE):
        members = [shapes[sid] for sid in shape_ids if sid in shapes]
        bounds = calculate_group_bounds(members)
        state = ManipulationState(
            type=ManipulationType.GROUP_RESIZE,
            target_id=group_id,
            start_point=start_point,
            start_bounds=bounds,
            handle=handle,
            aspect_ratio=bounds.aspect_ratio,
        )
        super().__init__(shapes, shape_ids, state)
        self.min_size = min_size
        self._states = capture_shape_states(shapes, self.shape_ids)

    def update(self, pointer: Point, maintain_aspect_ratio: bool = False) -> Dict[str, Shape]:
        delta = Point(pointer.x - self.state.start_point.x, pointer.y - self.state.start_point.y)
        options = ResizeOptions(
            maintain_aspect_ratio=maintain_aspect_ratio,
            original_aspect_ratio=self.state.aspect_ratio,
            min_size=self.min_size,
        )
        new_bounds = calculate_resize(self.state.start_bounds, self.state.handle, delta, options)
        updates = scale_shapes_in_group(
            self._states, self.state.start_bounds, new_bounds, self.state.handle, self.min_size
        )
        return apply_shape_updates(self._start_shapes, updates)


class GroupRotateSession(ManipulationSession):
    """Rotate several shapes around the center of their combined bounds."""

    action_type = ActionType.ROTATE_SHAPE
    fields = ("x", "y", "rotation")

    def __init__(self, shapes: Mapping[str, Shape], shape_ids: Sequence[str], start_point: Point,
                 group_id: str = "", snap_increment: float = ROTATION_SNAP_DEGREES):
        members = [shapes[sid] for sid in shape_ids if sid in shapes]
        state = ManipulationState(
            type=ManipulationType.GROUP_ROTATE,
            target_id=group_id,
            start_point=start_point,
            start_bounds=calculate_group_bounds(members),
            handle=HandleType.ROTATION,
        )
        super().__init__(shapes, shape_ids, state)
        self.snap_increment = snap_increment
        self._states = capture_shape_states(shapes, self.shape_ids)

    @property
    def center(self) -> Point:
        return self.state.start_bounds.center

    def update(self, pointer: Point, snap: bool = False) -> Dict[str, Shape]:
        delta = rotation_delta(self.center, self.state.start_point, pointer)
        if snap:
            delta = snap_angle(delta, self.snap_increment)
        updates = rotate_shapes_around_center(self._states, self.center, delta)
        return apply_shape_updates(self._start_shapes, updates)
