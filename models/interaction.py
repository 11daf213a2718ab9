"""
Interaction models for pointer-driven manipulation.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .geometry import Bounds, Point


class HandleType(Enum):
    """
    Selection handles.

    Eight resize handles at the corners and edge midpoints plus the
    rotation handle drawn above the shape.
    """
    NW = "nw"
    N = "n"
    NE = "ne"
    W = "w"
    E = "e"
    SW = "sw"
    S = "s"
    SE = "se"
    ROTATION = "rotation"

    @property
    def is_corner(self) -> bool:
        return self in (HandleType.NW, HandleType.NE, HandleType.SW, HandleType.SE)

    @property
    def moves_left_edge(self) -> bool:
        return "w" in self.value and self is not HandleType.ROTATION

    @property
    def moves_top_edge(self) -> bool:
        return self.value.startswith("n")


RESIZE_HANDLES = (
    HandleType.NW, HandleType.N, HandleType.NE,
    HandleType.W, HandleType.E,
    HandleType.SW, HandleType.S, HandleType.SE,
)


class ManipulationType(Enum):
    """Kinds of gestures the manipulation sessions implement."""
    MOVE = "move"
    RESIZE = "resize"
    ROTATE = "rotate"
    GROUP_RESIZE = "group-resize"
    GROUP_ROTATE = "group-rotate"


@dataclass
class ManipulationState:
    """
    Transient state of one active gesture.

    Created at gesture start and discarded at the end; never persisted.
    target_id is a shape id, or a group id for group gestures.
    """
    type: ManipulationType
    target_id: str
    start_point: Point = field(default_factory=Point)
    start_bounds: Bounds = field(default_factory=Bounds)
    start_rotation: float = 0.0
    handle: Optional[HandleType] = None
    aspect_ratio: Optional[float] = None


@dataclass
class ResizeOptions:
    """
    Constraints for a resize calculation.

    Attributes:
        maintain_aspect_ratio: Keep original_aspect_ratio (corner handles only)
        resize_from_center: Keep the center fixed instead of the opposite edge
        original_aspect_ratio: Width/height ratio at gesture start
        min_size: Smallest allowed width and height
    """
    maintain_aspect_ratio: bool = False
    resize_from_center: bool = False
    original_aspect_ratio: float = 1.0
    min_size: float = 10
