"""
Models package.

This package contains the data models of the diagram geometry core:
- Geometric value types (Point, Bounds)
- Shapes and groups (Shape, Group)
- Connectors (Connection, Waypoint, ControlPoints)
- Interaction state (HandleType, ManipulationState, ResizeOptions)
- History deltas (HistoryEntry, Delta, DiagramState)
"""

from .geometry import (
    Point,
    Bounds,
)
from .shape import (
    ShapeType,
    Shape,
    Group,
    DEFAULT_SHAPE_WIDTH,
    DEFAULT_SHAPE_HEIGHT,
    DEFAULT_STROKE_WIDTH,
    MIN_SHAPE_SIZE,
    TRANSFORM_FIELDS,
)
from .connection import (
    AnchorPosition,
    CurveType,
    Waypoint,
    ControlPoints,
    Connection,
    ANCHOR_ORDER,
    LABEL_POSITION_MIN,
    LABEL_POSITION_MAX,
    DEFAULT_LABEL_POSITION,
)
from .interaction import (
    HandleType,
    ManipulationType,
    ManipulationState,
    ResizeOptions,
    RESIZE_HANDLES,
)
from .history import (
    ActionType,
    Modification,
    Delta,
    EMPTY_DELTA,
    HistoryEntryInput,
    HistoryEntry,
    DiagramState,
)


__all__ = [
    # Geometry
    "Point",
    "Bounds",
    # Shapes
    "ShapeType",
    "Shape",
    "Group",
    "DEFAULT_SHAPE_WIDTH",
    "DEFAULT_SHAPE_HEIGHT",
    "DEFAULT_STROKE_WIDTH",
    "MIN_SHAPE_SIZE",
    "TRANSFORM_FIELDS",
    # Connections
    "AnchorPosition",
    "CurveType",
    "Waypoint",
    "ControlPoints",
    "Connection",
    "ANCHOR_ORDER",
    "LABEL_POSITION_MIN",
    "LABEL_POSITION_MAX",
    "DEFAULT_LABEL_POSITION",
    # Interaction
    "HandleType",
    "ManipulationType",
    "ManipulationState",
    "ResizeOptions",
    "RESIZE_HANDLES",
    # History
    "ActionType",
    "Modification",
    "Delta",
    "EMPTY_DELTA",
    "HistoryEntryInput",
    "HistoryEntry",
    "DiagramState",
]
