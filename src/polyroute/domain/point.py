"""Core geometric value types for polyline representation.

This module defines the fundamental value types used throughout polyroute:
- Point: An immutable integer 2D point
- PointList: An ordered, mutable sequence of points (a polyline)
- Rectangle: An axis-aligned rectangle in screen coordinates (y grows down)
"""

import math
from dataclasses import dataclass
from typing import Any, TypeAlias


def round_coord(value: float) -> int:
    """Round a coordinate half-up to the nearest integer.

    Pixel coordinates round .5 towards positive infinity, which differs from
    Python's built-in banker's rounding.

    Args:
        value: Fractional coordinate

    Returns:
        Nearest integer, ties rounded up

    Examples:
        >>> round_coord(2.5)
        3
        >>> round_coord(-2.5)
        -2
    """
    return int(math.floor(value + 0.5))


@dataclass(frozen=True, slots=True)
class Point:
    """A point in 2D integer space.

    Immutable and hashable, so it can be shared freely between point lists
    without aliasing surprises.

    Attributes:
        x: X coordinate
        y: Y coordinate
    """

    x: int
    y: int

    @classmethod
    def of(cls, x: float, y: float) -> "Point":
        """Create a point from fractional coordinates, rounding half-up.

        Args:
            x: X coordinate
            y: Y coordinate

        Returns:
            Point with rounded coordinates
        """
        return cls(round_coord(x), round_coord(y))

    def to_tuple(self) -> tuple[int, int]:
        """Convert to simple (x, y) tuple.

        Returns:
            Tuple of (x, y) coordinates
        """
        return (self.x, self.y)

    def distance_to(self, other: "Point") -> float:
        """Euclidean distance to another point."""
        return math.hypot(other.x - self.x, other.y - self.y)

    def translated(self, dx: int, dy: int) -> "Point":
        """Return a copy moved by (dx, dy)."""
        return Point(self.x + dx, self.y + dy)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC.

        Returns:
            Dictionary with x and y fields
        """
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Point":
        """Deserialize from dictionary.

        Args:
            data: Dictionary with x and y fields

        Returns:
            Point instance
        """
        return cls(x=int(data["x"]), y=int(data["y"]))


PointList: TypeAlias = list[Point]


@dataclass(frozen=True, slots=True)
class Rectangle:
    """An axis-aligned rectangle.

    Coordinates follow the screen convention: y grows downwards, so ``top`` is
    numerically smaller than ``bottom``.

    Attributes:
        x: Left edge
        y: Top edge
        width: Horizontal extent
        height: Vertical extent
        id: Optional identifier of the diagram element this box belongs to
    """

    x: int
    y: int
    width: int
    height: int
    id: str | None = None

    @classmethod
    def from_corners(cls, a: Point, b: Point, id: str | None = None) -> "Rectangle":  # noqa: A002
        """Build the rectangle spanned by two opposite corners."""
        left, right = min(a.x, b.x), max(a.x, b.x)
        top, bottom = min(a.y, b.y), max(a.y, b.y)
        return cls(left, top, right - left, bottom - top, id)

    @property
    def left(self) -> int:
        return self.x

    @property
    def top(self) -> int:
        return self.y

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def contains(self, point: Point) -> bool:
        """Check containment, inclusive of the top-left edges only.

        Args:
            point: The point to test

        Returns:
            True if left <= x < right and top <= y < bottom
        """
        return self.left <= point.x < self.right and self.top <= point.y < self.bottom

    def intersects(self, other: "Rectangle") -> bool:
        """Check for strict overlap with another rectangle.

        Rectangles that only share an edge do not intersect.
        """
        return (
            other.x < self.right
            and other.y < self.bottom
            and other.right > self.x
            and other.bottom > self.y
        )

    def expanded(self, dx: int, dy: int) -> "Rectangle":
        """Return a copy grown by dx on the left and right and dy on top and bottom."""
        return Rectangle(
            self.x - dx, self.y - dy, self.width + 2 * dx, self.height + 2 * dy, self.id
        )

    def to_points(self) -> PointList:
        """Convert to a closed ring of corner points.

        The ring runs clockwise on screen: top-left, top-right, bottom-right,
        bottom-left and back to top-left.

        Returns:
            Five points, first and last identical
        """
        top_left = Point(self.left, self.top)
        return [
            top_left,
            Point(self.right, self.top),
            Point(self.right, self.bottom),
            Point(self.left, self.bottom),
            top_left,
        ]

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {
            "kind": "rectangle",
            "id": self.id,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Rectangle":
        """Deserialize from dictionary."""
        return cls(
            x=int(data["x"]),
            y=int(data["y"]),
            width=int(data["width"]),
            height=int(data["height"]),
            id=data.get("id"),
        )
