"""
Connection (connector) models.

Endpoints are either attached to a shape anchor, in which case their
position is derived from the shape every time it is needed, or floating at
an explicit canvas point.

Waypoints and bezier control points are stored RELATIVE to the endpoints:
- a waypoint is a fraction t along the straight start-end baseline plus an
  offset from that baseline point
- cp1 is an offset from the start point, cp2 an offset from the end point

This keeps the shape of a connector stable when the connected shapes move.
Serialization keeps these values exactly as stored.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional
import uuid

from .geometry import Point


def _generate_id() -> str:
    """Generate a short unique ID."""
    return str(uuid.uuid4())[:8]


class AnchorPosition(Enum):
    """Attachment points on the four sides of a shape."""
    TOP = "top"
    RIGHT = "right"
    BOTTOM = "bottom"
    LEFT = "left"

    @property
    def is_horizontal(self) -> bool:
        """True when the anchor exits horizontally (left/right)."""
        return self in (AnchorPosition.LEFT, AnchorPosition.RIGHT)

    @property
    def opposite(self) -> "AnchorPosition":
        return _OPPOSITE_ANCHORS[self]


_OPPOSITE_ANCHORS = {
    AnchorPosition.TOP: AnchorPosition.BOTTOM,
    AnchorPosition.BOTTOM: AnchorPosition.TOP,
    AnchorPosition.LEFT: AnchorPosition.RIGHT,
    AnchorPosition.RIGHT: AnchorPosition.LEFT,
}

# Enumeration order used for anchor candidates and tie-breaking
ANCHOR_ORDER = (
    AnchorPosition.TOP,
    AnchorPosition.RIGHT,
    AnchorPosition.BOTTOM,
    AnchorPosition.LEFT,
)


class CurveType(Enum):
    """Connector path families."""
    STRAIGHT = "straight"
    ORTHOGONAL = "orthogonal"
    BEZIER = "bezier"


# Label position limits while dragging, keeps the label on the visible path
LABEL_POSITION_MIN = 0.05
LABEL_POSITION_MAX = 0.95
DEFAULT_LABEL_POSITION = 0.5


@dataclass
class Waypoint:
    """
    A user-placed routing point.

    Attributes:
        id: Unique identifier
        t: Fraction (0-1) along the straight baseline between the endpoints
        offset: Displacement from the baseline point at t
    """
    id: str = field(default_factory=_generate_id)
    t: float = 0.5
    offset: Point = field(default_factory=Point)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "t": self.t, "offset": self.offset.to_dict()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Waypoint":
        return cls(
            id=data.get("id", _generate_id()),
            t=data.get("t", 0.5),
            offset=Point.from_dict(data.get("offset", {})),
        )


@dataclass
class ControlPoints:
    """Bezier control points as offsets (cp1 from start, cp2 from end)."""
    cp1: Point = field(default_factory=Point)
    cp2: Point = field(default_factory=Point)

    def to_dict(self) -> Dict[str, Any]:
        return {"cp1": self.cp1.to_dict(), "cp2": self.cp2.to_dict()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ControlPoints":
        return cls(
            cp1=Point.from_dict(data.get("cp1", {})),
            cp2=Point.from_dict(data.get("cp2", {})),
        )


@dataclass
class Connection:
    """
    A connector between two endpoints.

    Attributes:
        id: Unique identifier
        source_shape_id: Shape the start is attached to (if attached)
        source_anchor: Anchor on the source shape
        target_shape_id: Shape the end is attached to (if attached)
        target_anchor: Anchor on the target shape
        source_attached: False when the start floats at floating_source_point
        target_attached: False when the end floats at floating_target_point
        curve_type: Path family used to route the connector
        control_points: Manual bezier control offsets, auto when None
        waypoints: Relative routing points, kept in path order
        label: Optional label text
        label_position: Label location as a path parameter (0-1)
        stroke_width: Line width
    """
    id: str = field(default_factory=_generate_id)
    source_shape_id: Optional[str] = None
    source_anchor: AnchorPosition = AnchorPosition.RIGHT
    target_shape_id: Optional[str] = None
    target_anchor: Optional[AnchorPosition] = AnchorPosition.LEFT
    source_attached: bool = True
    target_attached: bool = True
    floating_source_point: Optional[Point] = None
    floating_target_point: Optional[Point] = None
    curve_type: CurveType = CurveType.STRAIGHT
    control_points: Optional[ControlPoints] = None
    waypoints: List[Waypoint] = field(default_factory=list)
    label: Optional[str] = None
    label_position: float = DEFAULT_LABEL_POSITION
    stroke_width: float = 2

    def __post_init__(self):
        if isinstance(self.source_anchor, str):
            self.source_anchor = AnchorPosition(self.source_anchor)
        if isinstance(self.target_anchor, str):
            self.target_anchor = AnchorPosition(self.target_anchor)
        if isinstance(self.curve_type, str):
            self.curve_type = CurveType(self.curve_type)

    @property
    def has_waypoints(self) -> bool:
        return len(self.waypoints) > 0

    @property
    def end_anchor(self) -> AnchorPosition:
        """Target anchor, or the side facing the source for a floating end."""
        return self.target_anchor or self.source_anchor.opposite

    def copy(self, **changes) -> "Connection":
        """Return a copy with the given fields replaced."""
        changes.setdefault("waypoints", list(self.waypoints))
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        d = {
            "id": self.id,
            "source_shape_id": self.source_shape_id,
            "source_anchor": self.source_anchor.value,
            "target_shape_id": self.target_shape_id,
            "target_anchor": self.target_anchor.value if self.target_anchor else None,
            "source_attached": self.source_attached,
            "target_attached": self.target_attached,
            "curve_type": self.curve_type.value,
            "waypoints": [wp.to_dict() for wp in self.waypoints],
            "label_position": self.label_position,
            "stroke_width": self.stroke_width,
        }
        if self.floating_source_point is not None:
            d["floating_source_point"] = self.floating_source_point.to_dict()
        if self.floating_target_point is not None:
            d["floating_target_point"] = self.floating_target_point.to_dict()
        if self.control_points is not None:
            d["control_points"] = self.control_points.to_dict()
        if self.label is not None:
            d["label"] = self.label
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Connection":
        """Create from dictionary."""
        target_anchor = data.get("target_anchor")
        floating_source = data.get("floating_source_point")
        floating_target = data.get("floating_target_point")
        control_points = data.get("control_points")
        return cls(
            id=data.get("id", _generate_id()),
            source_shape_id=data.get("source_shape_id"),
            source_anchor=AnchorPosition(data.get("source_anchor", "right")),
            target_shape_id=data.get("target_shape_id"),
            target_anchor=AnchorPosition(target_anchor) if target_anchor else None,
            source_attached=data.get("source_attached", True),
            target_attached=data.get("target_attached", True),
            floating_source_point=Point.from_dict(floating_source) if floating_source else None,
            floating_target_point=Point.from_dict(floating_target) if floating_target else None,
            curve_type=CurveType(data.get("curve_type", "straight")),
            control_points=ControlPoints.from_dict(control_points) if control_points else None,
            waypoints=[Waypoint.from_dict(wp) for wp in data.get("waypoints", [])],
            label=data.get("label"),
            label_position=data.get("label_position", DEFAULT_LABEL_POSITION),
            stroke_width=data.get("stroke_width", 2),
        )
