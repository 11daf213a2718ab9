"""
Undo/Redo History Manager.

History is two stacks of delta entries. Each entry records the shapes and
connections one action added, removed or modified (with before/after
field values), plus the selection before and after the action.

The manager only moves entries between the stacks. Applying an entry to
the diagram is done by apply_undo/apply_redo, which build new collections
and return a new DiagramState in one step.
"""

import copy
import logging
import time
import uuid
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from PyQt6.QtCore import QObject, pyqtSignal

from models.connection import Connection
from models.history import (
    ActionType,
    Delta,
    DiagramState,
    HistoryEntry,
    HistoryEntryInput,
    Modification,
)
from models.shape import TRANSFORM_FIELDS, Shape
from .groups import sync_groups_from_shapes

logger = logging.getLogger(__name__)


DEFAULT_MAX_HISTORY = 50

_GROUP_ACTIONS = (ActionType.GROUP, ActionType.UNGROUP)


class HistoryManager(QObject):
    """
    Manages undo/redo history as a past and a future stack.

    Emits history_changed(can_undo, can_redo) whenever either stack
    changes and entry_pushed(description) for every recorded action.
    """

    # Signals
    history_changed = pyqtSignal(bool, bool)
    entry_pushed = pyqtSignal(str)

    def __init__(self, max_history: int = DEFAULT_MAX_HISTORY, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.max_history = max_history
        self._past: List[HistoryEntry] = []
        self._future: List[HistoryEntry] = []

    @property
    def past(self) -> List[HistoryEntry]:
        return list(self._past)

    @property
    def future(self) -> List[HistoryEntry]:
        return list(self._future)

    def push(self, entry_input: HistoryEntryInput) -> HistoryEntry:
        """
        Record a new action.

        Clears the redo stack and drops the oldest entries beyond
        max_history.

        Returns:
            The stored entry with its generated id and timestamp
        """
        entry = HistoryEntry(
            id=str(uuid.uuid4())[:8],
            action_type=entry_input.action_type,
            description=entry_input.description,
            timestamp=time.time(),
            shape_delta=entry_input.shape_delta,
            connection_delta=entry_input.connection_delta,
            selection_before=tuple(entry_input.selection_before),
            selection_after=tuple(entry_input.selection_after),
        )

        self._past.append(entry)
        self._future.clear()
        if len(self._past) > self.max_history:
            del self._past[: len(self._past) - self.max_history]

        logger.debug(f"History push: {entry.description} ({len(self._past)} entries)")
        self.entry_pushed.emit(entry.description)
        self._notify()
        return entry

    def undo(self) -> Optional[HistoryEntry]:
        """
        Move the latest entry to the redo stack.

        Returns:
            The entry to revert, or None when there is nothing to undo
        """
        if not self._past:
            return None
        entry = self._past.pop()
        self._future.append(entry)
        logger.debug(f"Undo: {entry.description}")
        self._notify()
        return entry

    def redo(self) -> Optional[HistoryEntry]:
        """
        Move the latest undone entry back to the undo stack.

        Returns:
            The entry to reapply, or None when there is nothing to redo
        """
        if not self._future:
            return None
        entry = self._future.pop()
        self._past.append(entry)
        logger.debug(f"Redo: {entry.description}")
        self._notify()
        return entry

    def undo_state(self, state: DiagramState) -> DiagramState:
        """Undo the latest entry and return the reverted state (unchanged when empty)."""
        entry = self.undo()
        if entry is None:
            return state
        return apply_undo(state, entry)

    def redo_state(self, state: DiagramState) -> DiagramState:
        """Redo the latest undone entry and return the new state (unchanged when empty)."""
        entry = self.redo()
        if entry is None:
            return state
        return apply_redo(state, entry)

    def can_undo(self) -> bool:
        return bool(self._past)

    def can_redo(self) -> bool:
        return bool(self._future)

    def undo_description(self) -> str:
        """Description of the action undo would revert."""
        return self._past[-1].description if self._past else ""

    def redo_description(self) -> str:
        """Description of the action redo would reapply."""
        return self._future[-1].description if self._future else ""

    def clear(self):
        """Clear all history."""
        self._past.clear()
        self._future.clear()
        logger.debug("History cleared")
        self._notify()

    def _notify(self):
        self.history_changed.emit(self.can_undo(), self.can_redo())


# ==================== Applying entries ====================

def _merge(item, fields: Mapping):
    return item.copy(**copy.deepcopy(dict(fields)))


def _revert_collection(items: Mapping, delta: Delta) -> Dict:
    new_items = dict(items)
    for item in delta.added:
        new_items.pop(item.id, None)
    for item in delta.removed:
        new_items[item.id] = copy.deepcopy(item)
    for mod in delta.modified:
        if mod.id in new_items:
            new_items[mod.id] = _merge(new_items[mod.id], mod.before)
    return new_items


def _reapply_collection(items: Mapping, delta: Delta) -> Dict:
    new_items = dict(items)
    for item in delta.removed:
        new_items.pop(item.id, None)
    for item in delta.added:
        new_items[item.id] = copy.deepcopy(item)
    for mod in delta.modified:
        if mod.id in new_items:
            new_items[mod.id] = _merge(new_items[mod.id], mod.after)
    return new_items


def apply_undo(state: DiagramState, entry: HistoryEntry) -> DiagramState:
    """
    Revert an entry.

    Added items are removed, removed items come back, modified items get
    their before values. The selection returns to selection_before.
    """
    shapes = _revert_collection(state.shapes, entry.shape_delta)
    connections = _revert_collection(state.connections, entry.connection_delta)
    groups = state.groups
    if entry.action_type in _GROUP_ACTIONS:
        groups = sync_groups_from_shapes(state.groups, shapes.values())

    return DiagramState(
        shapes=shapes,
        connections=connections,
        groups=dict(groups),
        selected_shape_ids=list(entry.selection_before),
        selected_connection_ids=[],
    )


def apply_redo(state: DiagramState, entry: HistoryEntry) -> DiagramState:
    """Reapply an entry (the mirror of apply_undo, using the after values)."""
    shapes = _reapply_collection(state.shapes, entry.shape_delta)
    connections = _reapply_collection(state.connections, entry.connection_delta)
    groups = state.groups
    if entry.action_type in _GROUP_ACTIONS:
        groups = sync_groups_from_shapes(state.groups, shapes.values())

    return DiagramState(
        shapes=shapes,
        connections=connections,
        groups=dict(groups),
        selected_shape_ids=list(entry.selection_after),
        selected_connection_ids=[],
    )


# ==================== Building deltas ====================

def build_shape_modifications(
    before_shapes: Mapping[str, Shape],
    after_shapes: Mapping[str, Shape],
    fields: Sequence[str] = TRANSFORM_FIELDS,
    shape_ids: Optional[Iterable[str]] = None,
) -> List[Modification]:
    """
    Build modifications for shapes whose fields actually changed.

    Args:
        before_shapes: Shapes before the action
        after_shapes: Shapes after the action
        fields: Fields to compare and record
        shape_ids: Restrict to these ids (all common ids when omitted)
    """
    ids = shape_ids if shape_ids is not None else before_shapes.keys()
    modifications = []
    for shape_id in ids:
        before = before_shapes.get(shape_id)
        after = after_shapes.get(shape_id)
        if before is None or after is None:
            continue
        before_fields = before.get_fields(fields)
        after_fields = after.get_fields(fields)
        if before_fields != after_fields:
            modifications.append(Modification(shape_id, before_fields, after_fields))
    return modifications


def build_connection_modification(
    before: Connection,
    after: Connection,
    fields: Sequence[str],
) -> Optional[Modification]:
    """Build a modification for one connection, or None when nothing changed."""
    before_fields = {name: copy.deepcopy(getattr(before, name)) for name in fields}
    after_fields = {name: copy.deepcopy(getattr(after, name)) for name in fields}
    if before_fields == after_fields:
        return None
    return Modification(before.id, before_fields, after_fields)
