"""
Arrangement: alignment, distribution and z-order.

Every function returns partial field updates keyed by shape id (the same
form the group transforms use) and leaves the shapes untouched. An empty
result means there is nothing to do.
"""

from enum import Enum
from typing import Dict, Iterable, List, Sequence

from models.shape import Shape
from .hit_test import get_selection_bounds
from .snap import round_half_up


class AlignmentType(Enum):
    LEFT = "left"
    CENTER_HORIZONTAL = "center-horizontal"
    RIGHT = "right"
    TOP = "top"
    CENTER_VERTICAL = "center-vertical"
    BOTTOM = "bottom"


class DistributionType(Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class ZOrderAction(Enum):
    BRING_TO_FRONT = "bring-to-front"
    SEND_TO_BACK = "send-to-back"
    BRING_FORWARD = "bring-forward"
    SEND_BACKWARD = "send-backward"


# ==================== Alignment ====================

def calculate_alignment(shapes: Sequence[Shape], alignment: AlignmentType) -> Dict[str, Dict[str, float]]:
    """
    Align shapes to the edges or center of their combined bounds.

    Needs at least two shapes, otherwise nothing is returned.
    """
    if len(shapes) < 2:
        return {}

    bounds = get_selection_bounds(shapes)
    center = bounds.center
    updates = {}

    for shape in shapes:
        if alignment == AlignmentType.LEFT:
            updates[shape.id] = {"x": bounds.x}
        elif alignment == AlignmentType.CENTER_HORIZONTAL:
            updates[shape.id] = {"x": center.x - shape.width / 2}
        elif alignment == AlignmentType.RIGHT:
            updates[shape.id] = {"x": bounds.right - shape.width}
        elif alignment == AlignmentType.TOP:
            updates[shape.id] = {"y": bounds.y}
        elif alignment == AlignmentType.CENTER_VERTICAL:
            updates[shape.id] = {"y": center.y - shape.height / 2}
        else:
            updates[shape.id] = {"y": bounds.bottom - shape.height}

    return updates


# ==================== Distribution ====================

def _distribution_gap(sorted_shapes: Sequence[Shape], horizontal: bool) -> float:
    first = sorted_shapes[0]
    last = sorted_shapes[-1]
    if horizontal:
        total_space = (last.x + last.width) - first.x
        total_size = sum(s.width for s in sorted_shapes)
    else:
        total_space = (last.y + last.height) - first.y
        total_size = sum(s.height for s in sorted_shapes)
    return (total_space - total_size) / (len(sorted_shapes) - 1)


def can_distribute(shapes: Sequence[Shape], distribution: DistributionType) -> bool:
    """Three or more shapes with room for a non-negative gap between them."""
    if len(shapes) < 3:
        return False
    horizontal = distribution == DistributionType.HORIZONTAL
    ordered = sorted(shapes, key=lambda s: s.x if horizontal else s.y)
    return _distribution_gap(ordered, horizontal) >= 0


def calculate_distribution(shapes: Sequence[Shape], distribution: DistributionType) -> Dict[str, Dict[str, float]]:
    """
    Space shapes evenly between the first and the last one.

    The outermost shapes stay in place; middle shapes get whole-unit
    positions. Returns nothing for fewer than three shapes or when the
    shapes would have to overlap.
    """
    if len(shapes) < 3:
        return {}

    horizontal = distribution == DistributionType.HORIZONTAL
    ordered = sorted(shapes, key=lambda s: s.x if horizontal else s.y)
    gap = _distribution_gap(ordered, horizontal)
    if gap < 0:
        return {}

    first = ordered[0]
    updates = {}
    if horizontal:
        current = first.x + first.width + gap
        for shape in ordered[1:-1]:
            updates[shape.id] = {"x": round_half_up(current)}
            current += shape.width + gap
    else:
        current = first.y + first.height + gap
        for shape in ordered[1:-1]:
            updates[shape.id] = {"y": round_half_up(current)}
            current += shape.height + gap
    return updates


# ==================== Z-order ====================

def _split_selection(all_shapes: Iterable[Shape], selected_ids: Iterable[str]):
    selected = set(selected_ids)
    ordered = sorted(all_shapes, key=lambda s: s.z_index)
    return ordered, selected, [s for s in ordered if s.id in selected]


def bring_to_front(all_shapes: Iterable[Shape], selected_ids: Iterable[str]) -> Dict[str, Dict[str, int]]:
    """Move the selection above everything, keeping its internal order."""
    ordered, _, chosen = _split_selection(all_shapes, selected_ids)
    if not chosen:
        return {}
    next_z = ordered[-1].z_index + 1
    return {shape.id: {"z_index": next_z + i} for i, shape in enumerate(chosen)}


def send_to_back(all_shapes: Iterable[Shape], selected_ids: Iterable[str]) -> Dict[str, Dict[str, int]]:
    """Move the selection below everything, keeping its internal order."""
    ordered, _, chosen = _split_selection(all_shapes, selected_ids)
    if not chosen:
        return {}
    next_z = ordered[0].z_index - len(chosen)
    return {shape.id: {"z_index": next_z + i} for i, shape in enumerate(chosen)}


def bring_forward(all_shapes: Iterable[Shape], selected_ids: Iterable[str]) -> Dict[str, Dict[str, int]]:
    """Swap the selection with the next unselected shape above it."""
    ordered, selected, chosen = _split_selection(all_shapes, selected_ids)
    if not chosen:
        return {}

    max_selected = max(s.z_index for s in chosen)
    above = [s for s in ordered if s.id not in selected and s.z_index > max_selected]
    if not above:
        return {}

    next_above = above[0]
    updates = {shape.id: {"z_index": next_above.z_index} for shape in chosen}
    updates[next_above.id] = {"z_index": chosen[0].z_index}
    return updates


def send_backward(all_shapes: Iterable[Shape], selected_ids: Iterable[str]) -> Dict[str, Dict[str, int]]:
    """Swap the selection with the next unselected shape below it."""
    ordered, selected, chosen = _split_selection(all_shapes, selected_ids)
    if not chosen:
        return {}

    min_selected = min(s.z_index for s in chosen)
    below = [s for s in ordered if s.id not in selected and s.z_index < min_selected]
    if not below:
        return {}

    next_below = below[-1]
    updates = {shape.id: {"z_index": next_below.z_index} for shape in chosen}
    updates[next_below.id] = {"z_index": chosen[-1].z_index}
    return updates


def calculate_z_order(
    all_shapes: Iterable[Shape],
    selected_ids: List[str],
    action: ZOrderAction,
) -> Dict[str, Dict[str, int]]:
    """Dispatch a z-order action."""
    handlers = {
        ZOrderAction.BRING_TO_FRONT: bring_to_front,
        ZOrderAction.SEND_TO_BACK: send_to_back,
        ZOrderAction.BRING_FORWARD: bring_forward,
        ZOrderAction.SEND_BACKWARD: send_backward,
    }
    return handlers[action](all_shapes, selected_ids)
