"""
History (undo/redo) models.

A history entry records what one user action changed as deltas: the shapes
and connections that were added, removed, or modified (with partial field
dicts for the before and after state). Entries are frozen once created.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .connection import Connection
from .shape import Group, Shape


class ActionType(Enum):
    """Types of actions that can be recorded in history."""
    CREATE_SHAPE = "CREATE_SHAPE"
    DELETE_SHAPES = "DELETE_SHAPES"
    MOVE_SHAPES = "MOVE_SHAPES"
    RESIZE_SHAPE = "RESIZE_SHAPE"
    ROTATE_SHAPE = "ROTATE_SHAPE"
    UPDATE_STYLE = "UPDATE_STYLE"
    UPDATE_TEXT = "UPDATE_TEXT"
    CREATE_CONNECTION = "CREATE_CONNECTION"
    DELETE_CONNECTIONS = "DELETE_CONNECTIONS"
    UPDATE_CONNECTION = "UPDATE_CONNECTION"
    MOVE_WAYPOINT = "MOVE_WAYPOINT"
    MOVE_CONTROL_POINT = "MOVE_CONTROL_POINT"
    MOVE_LABEL = "MOVE_LABEL"
    PASTE = "PASTE"
    DUPLICATE = "DUPLICATE"
    ALIGN = "ALIGN"
    DISTRIBUTE = "DISTRIBUTE"
    Z_ORDER = "Z_ORDER"
    GROUP = "GROUP"
    UNGROUP = "UNGROUP"


@dataclass(frozen=True)
class Modification:
    """Before/after field values for one shape or connection."""
    id: str
    before: Dict[str, Any]
    after: Dict[str, Any]


@dataclass(frozen=True)
class Delta:
    """Added, removed and modified items of one collection."""
    added: Tuple[Any, ...] = ()
    removed: Tuple[Any, ...] = ()
    modified: Tuple[Modification, ...] = ()

    @classmethod
    def of(cls, added=(), removed=(), modified=()) -> "Delta":
        """Build a delta from any iterables."""
        return cls(tuple(added), tuple(removed), tuple(modified))

    @property
    def is_empty(self) -> bool:
        return not (self.added or self.removed or self.modified)


EMPTY_DELTA = Delta()


@dataclass(frozen=True)
class HistoryEntryInput:
    """Data needed to create a history entry (id and timestamp are generated)."""
    action_type: ActionType
    description: str
    shape_delta: Delta = EMPTY_DELTA
    connection_delta: Delta = EMPTY_DELTA
    selection_before: Tuple[str, ...] = ()
    selection_after: Tuple[str, ...] = ()


@dataclass(frozen=True)
class HistoryEntry:
    """A single immutable history entry representing one undoable action."""
    id: str
    action_type: ActionType
    description: str
    timestamp: float
    shape_delta: Delta
    connection_delta: Delta
    selection_before: Tuple[str, ...]
    selection_after: Tuple[str, ...]


@dataclass
class DiagramState:
    """
    Snapshot of the caller-owned collections.

    History application never mutates a DiagramState; it builds new
    dictionaries and returns a new instance in one step.
    """
    shapes: Dict[str, Shape] = field(default_factory=dict)
    connections: Dict[str, Connection] = field(default_factory=dict)
    groups: Dict[str, Group] = field(default_factory=dict)
    selected_shape_ids: List[str] = field(default_factory=list)
    selected_connection_ids: List[str] = field(default_factory=list)

    def get_shape(self, shape_id: str) -> Optional[Shape]:
        return self.shapes.get(shape_id)

    def get_connection(self, connection_id: str) -> Optional[Connection]:
        return self.connections.get(connection_id)
