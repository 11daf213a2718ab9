"""
Drag Session.

Scoped pointer/keyboard subscription for one manipulation gesture. The
session installs itself as a Qt event filter on the source object while
the gesture is active and removes itself exactly once, whether the
gesture ends with a button release, an Escape press, an explicit
end()/cancel() call or an exception inside a ``with`` block.
"""

import logging
from typing import Callable, Optional

from PyQt6.QtCore import QEvent, QObject, QPointF, Qt, pyqtSignal

from models.geometry import Point

logger = logging.getLogger(__name__)


def _identity_mapping(pos: QPointF) -> Point:
    return Point(pos.x(), pos.y())


class DragSession(QObject):
    """
    One drag gesture.

    Mouse moves are converted to canvas points with map_to_canvas and
    forwarded to on_move; a button release ends the session, Escape
    cancels it.

    Usage:
        with DragSession(canvas, on_move=session.update) as drag:
            ...
    """

    # Signals
    moved = pyqtSignal(float, float)   # canvas x, y
    finished = pyqtSignal()
    cancelled = pyqtSignal()

    def __init__(
        self,
        source: QObject,
        on_move: Optional[Callable[[Point], None]] = None,
        on_end: Optional[Callable[[], None]] = None,
        on_cancel: Optional[Callable[[], None]] = None,
        map_to_canvas: Callable[[QPointF], Point] = _identity_mapping,
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        self._source = source
        self._on_move = on_move
        self._on_end = on_end
        self._on_cancel = on_cancel
        self._map_to_canvas = map_to_canvas
        self._active = False
        self._done = False
        self._last_point: Optional[Point] = None

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def is_done(self) -> bool:
        return self._done

    @property
    def last_point(self) -> Optional[Point]:
        """Last canvas point delivered to on_move."""
        return self._last_point

    def begin(self) -> "DragSession":
        """Start listening to the source object's input events."""
        if self._active or self._done:
            return self
        self._source.installEventFilter(self)
        self._active = True
        logger.debug("Drag session started")
        return self

    def end(self) -> bool:
        """
        Finish the gesture normally.

        Returns:
            True if this call ended the session, False if it had already ended
        """
        if not self._release():
            return False
        logger.debug("Drag session finished")
        if self._on_end:
            self._on_end()
        self.finished.emit()
        return True

    def cancel(self) -> bool:
        """
        Abort the gesture.

        Returns:
            True if this call ended the session, False if it had already ended
        """
        if not self._release():
            return False
        logger.debug("Drag session cancelled")
        if self._on_cancel:
            self._on_cancel()
        self.cancelled.emit()
        return True

    def _release(self) -> bool:
        if self._done:
            return False
        if self._active:
            self._source.removeEventFilter(self)
        self._active = False
        self._done = True
        return True

    def eventFilter(self, obj: QObject, event: QEvent) -> bool:
        if not self._active:
            return False

        event_type = event.type()

        if event_type == QEvent.Type.MouseMove:
            point = self._map_to_canvas(event.position())
            self._last_point = point
            if self._on_move:
                self._on_move(point)
            self.moved.emit(point.x, point.y)
            return True

        if event_type == QEvent.Type.MouseButtonRelease:
            self.end()
            return True

        if event_type == QEvent.Type.KeyPress and event.key() == Qt.Key.Key_Escape:
            self.cancel()
            return True

        return False

    def __enter__(self) -> "DragSession":
        return self.begin()

    def __exit__(self, exc_type, exc, tb) -> bool:
        if not self._done:
            self.cancel()
        return False
