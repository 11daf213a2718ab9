"""
Shape and group models.

Only the fields the geometry core reads or writes are modelled here. The
shape collection is owned by the caller; the core never keeps a shape
between calls.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional
import uuid

from .geometry import Bounds, Point


def _generate_id() -> str:
    """Generate a short unique ID."""
    return str(uuid.uuid4())[:8]


class ShapeType(Enum):
    """Shape kinds supported by the editor."""
    RECTANGLE = "rectangle"
    ELLIPSE = "ellipse"
    DIAMOND = "diamond"
    TRIANGLE = "triangle"
    LINE = "line"
    TEXT = "text"


# Default shape values
DEFAULT_SHAPE_WIDTH = 100
DEFAULT_SHAPE_HEIGHT = 60
DEFAULT_STROKE_WIDTH = 2
MIN_SHAPE_SIZE = 10


# Fields copied into history deltas for transform operations
TRANSFORM_FIELDS = ("x", "y", "width", "height", "rotation")


@dataclass
class Shape:
    """
    A shape on the canvas.

    Attributes:
        id: Unique identifier
        shape_type: Kind of shape (decides the hit-test geometry)
        x, y: Top-left corner of the unrotated bounding box
        width, height: Size of the unrotated bounding box
        rotation: Clockwise rotation about the center in degrees (0-360)
        z_index: Stacking order, higher is on top
        stroke_width: Outline width (inflates the hit area by half)
        visible: Hidden shapes are skipped by hit-testing
        locked: Locked shapes are skipped by box selection
        group_id: Group this shape belongs to, if any
    """
    id: str = field(default_factory=_generate_id)
    shape_type: ShapeType = ShapeType.RECTANGLE
    x: float = 0.0
    y: float = 0.0
    width: float = DEFAULT_SHAPE_WIDTH
    height: float = DEFAULT_SHAPE_HEIGHT
    rotation: float = 0.0
    z_index: int = 0
    stroke_width: float = DEFAULT_STROKE_WIDTH
    visible: bool = True
    locked: bool = False
    group_id: Optional[str] = None

    def __post_init__(self):
        if isinstance(self.shape_type, str):
            self.shape_type = ShapeType(self.shape_type)

    @property
    def bounds(self) -> Bounds:
        return Bounds(self.x, self.y, self.width, self.height)

    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)

    def copy(self, **changes) -> "Shape":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def get_fields(self, names) -> Dict[str, Any]:
        """Return a partial dict of the named fields."""
        return {name: getattr(self, name) for name in names}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "shape_type": self.shape_type.value,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "rotation": self.rotation,
            "z_index": self.z_index,
            "stroke_width": self.stroke_width,
            "visible": self.visible,
            "locked": self.locked,
            "group_id": self.group_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Shape":
        """Create from dictionary."""
        return cls(
            id=data.get("id", _generate_id()),
            shape_type=ShapeType(data.get("shape_type", "rectangle")),
            x=data.get("x", 0.0),
            y=data.get("y", 0.0),
            width=data.get("width", DEFAULT_SHAPE_WIDTH),
            height=data.get("height", DEFAULT_SHAPE_HEIGHT),
            rotation=data.get("rotation", 0.0),
            z_index=data.get("z_index", 0),
            stroke_width=data.get("stroke_width", DEFAULT_STROKE_WIDTH),
            visible=data.get("visible", True),
            locked=data.get("locked", False),
            group_id=data.get("group_id"),
        )


@dataclass
class Group:
    """
    A named set of shape ids.

    Groups nest through parent_group_id: grouping shapes that already belong
    to a group makes the new group the parent of the existing one.
    """
    id: str = field(default_factory=_generate_id)
    member_ids: List[str] = field(default_factory=list)
    parent_group_id: Optional[str] = None

    def copy(self, **changes) -> "Group":
        changes.setdefault("member_ids", list(self.member_ids))
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        d = {"id": self.id, "member_ids": list(self.member_ids)}
        if self.parent_group_id is not None:
            d["parent_group_id"] = self.parent_group_id
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Group":
        return cls(
            id=data.get("id", _generate_id()),
            member_ids=list(data.get("member_ids", [])),
            parent_group_id=data.get("parent_group_id"),
        )
