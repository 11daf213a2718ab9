"""
Geometric value types.

Point and Bounds are plain value objects in canvas coordinates. Every
computation in the services package returns new instances instead of
mutating the ones it was given.
"""

from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class Point:
    """2D point on the canvas."""
    x: float = 0.0
    y: float = 0.0

    def to_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)

    def offset(self, dx: float, dy: float) -> "Point":
        """Return a new point translated by (dx, dy)."""
        return Point(self.x + dx, self.y + dy)

    def distance_to(self, other: "Point") -> float:
        return ((other.x - self.x) ** 2 + (other.y - self.y) ** 2) ** 0.5

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Point":
        return cls(x=data.get("x", 0.0), y=data.get("y", 0.0))


@dataclass
class Bounds:
    """Axis-aligned rectangle (top-left corner plus size)."""
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)

    @property
    def aspect_ratio(self) -> float:
        """Width/height ratio, 1.0 when either side is zero."""
        if self.width == 0 or self.height == 0:
            return 1.0
        return self.width / self.height

    def to_tuple(self) -> tuple[float, float, float, float]:
        return (self.x, self.y, self.width, self.height)

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Bounds":
        return cls(
            x=data.get("x", 0.0),
            y=data.get("y", 0.0),
            width=data.get("width", 0.0),
            height=data.get("height", 0.0),
        )
