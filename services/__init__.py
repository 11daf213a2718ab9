"""Services package."""

from .geometry_kernel import (
    angle_from_center,
    normalize_angle,
    snap_angle,
    constrain_to_axis,
    rotate_point,
    get_handle_positions,
    get_rotation_handle_position,
)
from .resize import calculate_resize
from .rotation import rotate, rotation_from_pointer
from .group_transform import (
    ShapeState,
    capture_shape_states,
    calculate_group_bounds,
    get_anchor_point,
    scale_shapes_in_group,
    rotate_shapes_around_center,
    apply_shape_updates,
)
from .groups import (
    create_group,
    ungroup,
    get_group_for_shape,
    get_top_level_group,
    get_all_group_shape_ids,
    is_complete_group_selected,
)
from .anchors import (
    BestAnchor,
    get_anchor_position,
    get_all_anchors,
    find_nearest_anchor,
    resolve_endpoints,
    calculate_best_anchor,
)
from .path_utils import (
    waypoint_to_absolute,
    absolute_to_waypoint,
    calculate_waypoint_insert_index,
    insert_waypoint,
    clamp_label_position,
)
from .orthogonal import (
    RoutingStrategy,
    determine_strategy,
    calculate_orthogonal_path,
    route_orthogonal_with_waypoints,
)
from .bezier import (
    BezierCurve,
    point_on_bezier,
    tangent_angle,
    calculate_auto_control_points,
    get_absolute_control_points,
    catmull_rom_to_bezier,
)
from .connector_path import (
    ConnectorPath,
    StraightPath,
    OrthogonalPath,
    BezierPath,
    build_connector_path,
    build_path_for_connection,
    label_point,
)
from .hit_test import (
    hit_test_shape,
    find_shape_at_point,
    find_connection_at_point,
    hit_threshold,
    get_shapes_in_box,
)
from .arrange import (
    AlignmentType,
    DistributionType,
    ZOrderAction,
    calculate_alignment,
    calculate_distribution,
    calculate_z_order,
)
from .snap import (
    snap_to_grid,
    snap_point_to_grid,
    snap_bounds_to_grid,
    snap_resized_bounds,
    round_bounds,
    adaptive_grid_size,
)
from .history_manager import HistoryManager, apply_undo, apply_redo, build_shape_modifications
from .manipulation import (
    MoveSession,
    ResizeSession,
    RotateSession,
    GroupResizeSession,
    GroupRotateSession,
)
from .drag_session import DragSession
from .settings_manager import (
    SettingsManager,
    EditorSettings,
    ManipulationSettings,
    ConnectionSettings,
    GridSettings,
    HistorySettings,
    get_settings,
    reset_settings_manager,
)
from .editor_services import EditorServices

__all__ = [
    # Geometry kernel
    "angle_from_center",
    "normalize_angle",
    "snap_angle",
    "constrain_to_axis",
    "rotate_point",
    "get_handle_positions",
    "get_rotation_handle_position",
    # Transforms
    "calculate_resize",
    "rotate",
    "rotation_from_pointer",
    "ShapeState",
    "capture_shape_states",
    "calculate_group_bounds",
    "get_anchor_point",
    "scale_shapes_in_group",
    "rotate_shapes_around_center",
    "apply_shape_updates",
    # Groups
    "create_group",
    "ungroup",
    "get_group_for_shape",
    "get_top_level_group",
    "get_all_group_shape_ids",
    "is_complete_group_selected",
    # Anchors
    "BestAnchor",
    "get_anchor_position",
    "get_all_anchors",
    "find_nearest_anchor",
    "resolve_endpoints",
    "calculate_best_anchor",
    # Paths
    "waypoint_to_absolute",
    "absolute_to_waypoint",
    "calculate_waypoint_insert_index",
    "insert_waypoint",
    "clamp_label_position",
    "RoutingStrategy",
    "determine_strategy",
    "calculate_orthogonal_path",
    "route_orthogonal_with_waypoints",
    "BezierCurve",
    "point_on_bezier",
    "tangent_angle",
    "calculate_auto_control_points",
    "get_absolute_control_points",
    "catmull_rom_to_bezier",
    "ConnectorPath",
    "StraightPath",
    "OrthogonalPath",
    "BezierPath",
    "build_connector_path",
    "build_path_for_connection",
    "label_point",
    # Hit-testing
    "hit_test_shape",
    "find_shape_at_point",
    "find_connection_at_point",
    "hit_threshold",
    "get_shapes_in_box",
    # Arrangement
    "AlignmentType",
    "DistributionType",
    "ZOrderAction",
    "calculate_alignment",
    "calculate_distribution",
    "calculate_z_order",
    "snap_to_grid",
    "snap_point_to_grid",
    "snap_bounds_to_grid",
    "snap_resized_bounds",
    "round_bounds",
    "adaptive_grid_size",
    # History
    "HistoryManager",
    "apply_undo",
    "apply_redo",
    "build_shape_modifications",
    # Sessions
    "MoveSession",
    "ResizeSession",
    "RotateSession",
    "GroupResizeSession",
    "GroupRotateSession",
    "DragSession",
    # Settings
    "SettingsManager",
    "EditorSettings",
    "ManipulationSettings",
    "ConnectionSettings",
    "GridSettings",
    "HistorySettings",
    "get_settings",
    "reset_settings_manager",
    "EditorServices",
]
