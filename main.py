#!/usr/bin/env python3
"""
Diagram Geometry Core - Command Line Entry Point

Routes the connectors of a diagram and prints their paths, which is handy
for checking anchor resolution and routing without a canvas.

Usage:
    python main.py                       # Route the built-in sample diagram
    python main.py diagram.json          # Route a diagram file
    python main.py diagram.json --curve orthogonal
    python main.py --debug               # Enable debug logging

Diagram files are JSON objects with "shapes" and "connections" lists in
the to_dict() form of Shape and Connection.
"""

import sys
import json
import logging
import argparse
from typing import Optional

from models import Connection, CurveType, DiagramState, Shape, AnchorPosition
from services.editor_services import EditorServices
from services.settings_manager import get_settings


def setup_logging(debug: bool = False):
    """Configure logging for the application."""
    level = logging.DEBUG if debug else logging.INFO

    # Create formatter
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)

    # Log startup message
    logger = logging.getLogger(__name__)
    logger.info(f"Logging initialized at {'DEBUG' if debug else 'INFO'} level")


def load_diagram(path: str) -> DiagramState:
    """Load shapes and connections from a JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    shapes = [Shape.from_dict(s) for s in data.get("shapes", [])]
    connections = [Connection.from_dict(c) for c in data.get("connections", [])]
    return DiagramState(
        shapes={s.id: s for s in shapes},
        connections={c.id: c for c in connections},
    )


def sample_diagram() -> DiagramState:
    """Three boxes joined by one connector of each curve type."""
    shapes = [
        Shape(id="start", x=0, y=0, width=120, height=60),
        Shape(id="decide", shape_type="diamond", x=260, y=120, width=120, height=80),
        Shape(id="done", shape_type="ellipse", x=0, y=260, width=120, height=60),
    ]
    connections = [
        Connection(id="c1", source_shape_id="start", source_anchor=AnchorPosition.RIGHT,
                   target_shape_id="decide", target_anchor=AnchorPosition.TOP,
                   curve_type=CurveType.ORTHOGONAL),
        Connection(id="c2", source_shape_id="decide", source_anchor=AnchorPosition.BOTTOM,
                   target_shape_id="done", target_anchor=AnchorPosition.RIGHT,
                   curve_type=CurveType.BEZIER),
        Connection(id="c3", source_shape_id="done", source_anchor=AnchorPosition.TOP,
                   target_shape_id="start", target_anchor=AnchorPosition.BOTTOM,
                   curve_type=CurveType.STRAIGHT),
    ]
    return DiagramState(
        shapes={s.id: s for s in shapes},
        connections={c.id: c for c in connections},
    )


def print_paths(state: DiagramState, curve: Optional[CurveType] = None):
    """Print the routed path of every connection."""
    services = EditorServices(get_settings().settings)

    for connection in state.connections.values():
        if curve is not None:
            connection = connection.copy(curve_type=curve)

        path = services.path_for(connection, state.shapes)
        if path is None:
            print(f"{connection.id}: unresolved endpoints")
            continue

        print(f"{connection.id} ({path.curve_type.value}, length {path.length:.1f}):")
        if hasattr(path, "segments"):
            for seg in path.segments:
                print(f"  C ({seg.cp1.x:.1f}, {seg.cp1.y:.1f}) ({seg.cp2.x:.1f}, {seg.cp2.y:.1f}) "
                      f"-> ({seg.end.x:.1f}, {seg.end.y:.1f})")
        else:
            for pt in path.points:
                print(f"  ({pt.x:.1f}, {pt.y:.1f})")

        label = path.point_at(connection.label_position)
        print(f"  label at ({label.x:.1f}, {label.y:.1f})")


def main():
    """Main entry point."""
    # Parse command line arguments
    parser = argparse.ArgumentParser(description='Diagram geometry core: route connectors')
    parser.add_argument('diagram', nargs='?', help='Diagram JSON file (sample diagram if omitted)')
    parser.add_argument('--curve', choices=[c.value for c in CurveType],
                        help='Route every connector with this curve type')
    parser.add_argument('--settings', help='Settings file to use instead of the default location')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')
    args = parser.parse_args()

    # Setup logging
    setup_logging(debug=args.debug)
    logger = logging.getLogger(__name__)

    get_settings(args.settings)

    if args.diagram:
        try:
            state = load_diagram(args.diagram)
        except (OSError, ValueError) as e:
            logger.error(f"Could not load diagram {args.diagram}: {e}")
            return 1
    else:
        state = sample_diagram()

    curve = CurveType(args.curve) if args.curve else None
    print_paths(state, curve)
    return 0


if __name__ == "__main__":
    sys.exit(main())
