"""
Settings-backed editor operations.

EditorServices builds sessions, paths and hit-tests with the thresholds,
grid and routing options from one EditorSettings instance, so a canvas
only has to pass pointer positions and zoom.
"""

import logging
from typing import Iterable, Mapping, Optional, Sequence

from PyQt6.QtCore import QObject

from models.connection import Connection
from models.geometry import Bounds, Point
from models.interaction import HandleType
from models.shape import Shape
from .anchors import find_nearest_anchor
from .connection_edit import Endpoint, drop_endpoint, move_label, predict_endpoint_anchor
from .connector_path import ConnectorPath, build_path_for_connection, label_point
from .geometry_kernel import get_rotation_handle_position
from .history_manager import HistoryManager
from .hit_test import find_connection_at_point, hit_threshold
from .manipulation import (
    GroupResizeSession,
    GroupRotateSession,
    MoveSession,
    ResizeSession,
    RotateSession,
)
from .settings_manager import EditorSettings, get_settings
from .snap import adaptive_grid_size

logger = logging.getLogger(__name__)


class EditorServices:
    """
    Editor operations configured from settings.

    Settings are read on every call, so edits made through a
    SettingsManager apply to the next session or lookup.
    """

    def __init__(self, settings: Optional[EditorSettings] = None):
        """
        Args:
            settings: Settings to use. Defaults to the global settings manager's.
        """
        self.settings = settings if settings is not None else get_settings().settings

    # ==================== History ====================

    def history_manager(self, parent: Optional[QObject] = None) -> HistoryManager:
        max_history = self.settings.history.max_history
        logger.debug(f"Creating history manager (max {max_history})")
        return HistoryManager(max_history, parent)

    # ==================== Grid ====================

    def grid_size(self, zoom: float = 1.0) -> float:
        """Grid spacing for a zoom level, widened when zoomed out if adaptive."""
        grid = self.settings.grid
        if grid.adaptive:
            return adaptive_grid_size(grid.size, zoom)
        return grid.size

    # ==================== Shape sessions ====================

    def move_session(self, shapes: Mapping[str, Shape], shape_ids: Sequence[str], start_point: Point,
                     zoom: float = 1.0) -> MoveSession:
        return MoveSession(
            shapes,
            shape_ids,
            start_point,
            grid_size=self.grid_size(zoom),
            snap_enabled=self.settings.grid.snap_enabled,
            axis_threshold=self.settings.manipulation.axis_constraint_threshold,
        )

    def resize_session(self, shapes: Mapping[str, Shape], shape_id: str, handle: HandleType,
                       start_point: Point, zoom: float = 1.0) -> ResizeSession:
        return ResizeSession(
            shapes,
            shape_id,
            handle,
            start_point,
            min_size=self.settings.manipulation.min_shape_size,
            grid_size=self.grid_size(zoom),
            snap_enabled=self.settings.grid.snap_enabled,
        )

    def rotate_session(self, shapes: Mapping[str, Shape], shape_id: str, start_point: Point) -> RotateSession:
        return RotateSession(
            shapes, shape_id, start_point,
            snap_increment=self.settings.manipulation.rotation_snap_degrees,
        )

    def group_resize_session(self, shapes: Mapping[str, Shape], shape_ids: Sequence[str], handle: HandleType,
                             start_point: Point, group_id: str = "") -> GroupResizeSession:
        return GroupResizeSession(
            shapes, shape_ids, handle, start_point, group_id,
            min_size=self.settings.manipulation.min_shape_size,
        )

    def group_rotate_session(self, shapes: Mapping[str, Shape], shape_ids: Sequence[str], start_point: Point,
                             group_id: str = "") -> GroupRotateSession:
        return GroupRotateSession(
            shapes, shape_ids, start_point, group_id,
            snap_increment=self.settings.manipulation.rotation_snap_degrees,
        )

    def rotation_handle_position(self, bounds: Bounds) -> Point:
        return get_rotation_handle_position(bounds, self.settings.manipulation.rotation_handle_offset)

    # ==================== Connectors ====================

    def path_for(self, connection: Connection, shapes: Mapping[str, Shape]) -> Optional[ConnectorPath]:
        """Route a connection with the configured exit offset, sampling and tension."""
        options = self.settings.connection
        return build_path_for_connection(
            connection, shapes, options.exit_offset, options.bezier_samples, options.catmull_rom_tension
        )

    def label_point(self, connection: Connection, shapes: Mapping[str, Shape]) -> Optional[Point]:
        options = self.settings.connection
        return label_point(
            connection, shapes, options.exit_offset, options.bezier_samples, options.catmull_rom_tension
        )

    def move_label(self, connection: Connection, shapes: Mapping[str, Shape], point: Point) -> Optional[Connection]:
        options = self.settings.connection
        return move_label(
            connection, shapes, point, options.exit_offset, options.bezier_samples, options.catmull_rom_tension
        )

    def predict_endpoint_anchor(self, connection: Connection, shapes: Mapping[str, Shape], endpoint: Endpoint,
                                point: Point):
        return predict_endpoint_anchor(
            connection, shapes, endpoint, point, self.settings.connection.anchor_snap_threshold
        )

    def drop_endpoint(self, connection: Connection, shapes: Mapping[str, Shape], endpoint: Endpoint,
                      point: Point) -> Connection:
        return drop_endpoint(connection, shapes, endpoint, point, self.settings.connection.anchor_snap_threshold)

    def nearest_anchor(self, shape: Shape, point: Point):
        """Anchor of shape within the configured distance of point, if any."""
        return find_nearest_anchor(shape, point, self.settings.connection.nearest_anchor_threshold)

    # ==================== Hit-testing ====================

    def hit_threshold(self, zoom: float = 1.0) -> float:
        return hit_threshold(zoom, self.settings.connection.hit_threshold)

    def connection_at(self, point: Point, connections: Iterable[Connection], shapes: Mapping[str, Shape],
                      zoom: float = 1.0) -> Optional[Connection]:
        options = self.settings.connection
        return find_connection_at_point(
            point,
            connections,
            shapes,
            zoom,
            options.hit_threshold,
            options.exit_offset,
            options.bezier_samples,
            options.catmull_rom_tension,
        )
