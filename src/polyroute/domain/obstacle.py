"""Obstacle shapes that connectors are routed around.

An obstacle is read-only input to the router. Three shapes are supported:
- Rectangle: an axis-aligned box (defined in polyroute.domain.point)
- PolygonObstacle: an arbitrary closed polygon
- PointObstacle: a point with a clearance box, such as a connector label
"""

from dataclasses import dataclass, field
from typing import Any, TypeAlias

from polyroute.domain.point import Point, PointList, Rectangle


@dataclass(frozen=True)
class PolygonObstacle:
    """A closed polygon obstacle.

    The ring does not need to repeat its first point; ``closed_points``
    closes it when needed.

    Attributes:
        points: Polygon vertices in order
        id: Optional identifier of the diagram element
    """

    points: tuple[Point, ...]
    id: str | None = None

    def __post_init__(self) -> None:
        # Accept any sequence but store a tuple so the obstacle stays hashable
        object.__setattr__(self, "points", tuple(self.points))

    def closed_points(self) -> PointList:
        """Vertices as a closed ring (first point repeated at the end)."""
        ring = list(self.points)
        if ring and ring[0] != ring[-1]:
            ring.append(ring[0])
        return ring

    def bounding_box(self) -> Rectangle:
        """Axis-aligned bounds of the polygon."""
        if not self.points:
            return Rectangle(0, 0, 0, 0, self.id)
        xs = [p.x for p in self.points]
        ys = [p.y for p in self.points]
        return Rectangle(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys), self.id)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {
            "kind": "polygon",
            "id": self.id,
            "points": [p.to_dict() for p in self.points],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PolygonObstacle":
        """Deserialize from dictionary."""
        return cls([Point.from_dict(p) for p in data["points"]], id=data.get("id"))


@dataclass(frozen=True)
class PointObstacle:
    """A point that a connector must detour around, e.g. a label anchor.

    The router builds a box of ``width`` along the path and ``height`` off
    the path, centered on the projection of ``center`` onto the path.

    Attributes:
        center: The point to avoid
        width: Extent of the detour along the path
        height: Clearance of the detour off the path
        incline_offset: How far the detour's sides lean inwards
        top: Route above the path (True) or below it (False)
        id: Optional identifier of the diagram element
    """

    center: Point
    width: int
    height: int
    incline_offset: int = 0
    top: bool = True
    id: str | None = field(default=None)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {
            "kind": "point",
            "id": self.id,
            "center": self.center.to_dict(),
            "width": self.width,
            "height": self.height,
            "incline_offset": self.incline_offset,
            "top": self.top,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PointObstacle":
        """Deserialize from dictionary."""
        return cls(
            center=Point.from_dict(data["center"]),
            width=int(data["width"]),
            height=int(data["height"]),
            incline_offset=int(data.get("incline_offset", 0)),
            top=bool(data.get("top", True)),
            id=data.get("id"),
        )


Obstacle: TypeAlias = Rectangle | PolygonObstacle | PointObstacle


def obstacle_from_dict(data: dict[str, Any]) -> Obstacle:
    """Deserialize any obstacle from its dictionary form.

    Args:
        data: Dictionary with a "kind" of rectangle, polygon or point

    Returns:
        The matching obstacle instance

    Raises:
        ValueError: If the kind is unknown
    """
    kind = data.get("kind")
    if kind == "rectangle":
        return Rectangle.from_dict(data)
    if kind == "polygon":
        return PolygonObstacle.from_dict(data)
    if kind == "point":
        return PointObstacle.from_dict(data)
    raise ValueError(f"Unknown obstacle kind: {kind!r}")
