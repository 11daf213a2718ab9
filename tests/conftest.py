"""
Pytest configuration and shared fixtures for diagram core tests.
"""

import os
import pytest
import tempfile
import shutil
from pathlib import Path
from typing import Dict, Generator

# Qt event tests run without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

# Add parent directory to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from models.connection import AnchorPosition, Connection, CurveType
from models.geometry import Bounds, Point
from models.history import DiagramState
from models.shape import Shape, ShapeType
from services.history_manager import HistoryManager
from services.settings_manager import SettingsManager, reset_settings_manager


# ============== Temporary Directory Fixtures ==============

@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    tmp = tempfile.mkdtemp(prefix="diagram_core_test_")
    yield Path(tmp)
    shutil.rmtree(tmp, ignore_errors=True)


# ============== Qt Fixtures ==============

@pytest.fixture(scope="session")
def qapp():
    """Shared QGuiApplication for tests that construct Qt events."""
    from PyQt6.QtGui import QGuiApplication
    app = QGuiApplication.instance()
    if app is None:
        app = QGuiApplication([])
    yield app


# ============== Shape Fixtures ==============

@pytest.fixture
def rect_shape() -> Shape:
    """A 200x100 rectangle at (100, 100)."""
    return Shape(id="rect", shape_type=ShapeType.RECTANGLE, x=100, y=100, width=200, height=100)


@pytest.fixture
def two_shapes() -> Dict[str, Shape]:
    """Two rectangles side by side, source on the left."""
    source = Shape(id="a", x=0, y=0, width=100, height=60, z_index=0)
    target = Shape(id="b", x=300, y=0, width=100, height=60, z_index=1)
    return {source.id: source, target.id: target}


@pytest.fixture
def three_shapes() -> Dict[str, Shape]:
    """Three rectangles in a row with uneven gaps."""
    shapes = [
        Shape(id="s1", x=0, y=0, width=50, height=50, z_index=0),
        Shape(id="s2", x=70, y=40, width=50, height=30, z_index=1),
        Shape(id="s3", x=250, y=10, width=50, height=50, z_index=2),
    ]
    return {s.id: s for s in shapes}


@pytest.fixture
def straight_connection() -> Connection:
    """Straight connector from the right of 'a' to the left of 'b'."""
    return Connection(
        id="c1",
        source_shape_id="a",
        source_anchor=AnchorPosition.RIGHT,
        target_shape_id="b",
        target_anchor=AnchorPosition.LEFT,
        curve_type=CurveType.STRAIGHT,
    )


@pytest.fixture
def diagram_state(two_shapes: Dict[str, Shape], straight_connection: Connection) -> DiagramState:
    return DiagramState(
        shapes=dict(two_shapes),
        connections={straight_connection.id: straight_connection},
    )


# ============== Service Fixtures ==============

@pytest.fixture
def history(qapp) -> HistoryManager:
    """A history manager with the default 50-entry cap."""
    return HistoryManager()


@pytest.fixture
def settings_manager(temp_dir: Path) -> Generator[SettingsManager, None, None]:
    """Settings manager writing to a temporary file."""
    reset_settings_manager()
    manager = SettingsManager(config_override=str(temp_dir / "settings.json"))
    yield manager
    reset_settings_manager()


# ============== Helper Functions ==============

def assert_point_close(actual: Point, expected: Point, tol: float = 1e-6):
    """Assert that two points match within tolerance."""
    assert abs(actual.x - expected.x) <= tol, f"x: {actual.x} != {expected.x}"
    assert abs(actual.y - expected.y) <= tol, f"y: {actual.y} != {expected.y}"


def assert_bounds_close(actual: Bounds, expected: Bounds, tol: float = 1e-6):
    """Assert that two bounds match within tolerance."""
    for name in ("x", "y", "width", "height"):
        a = getattr(actual, name)
        e = getattr(expected, name)
        assert abs(a - e) <= tol, f"{name}: {a} != {e}"
