"""Domain models for polyroute.

This module contains the geometric value types and the document models that
the routing algorithms consume. All models are designed to be:

- Immutable where possible (using frozen dataclasses)
- Serializable for inter-process communication (parallel processing)
- Independent of any rendering toolkit

Key classes:
- Point: An integer 2D point
- Rectangle: An axis-aligned box obstacle
- LineSeg: A directed segment between two points
- PolygonObstacle / PointObstacle: Other obstacle shapes
- Connector: A connector path between two diagram nodes
- RoutingDocument: Connectors plus obstacles of one diagram
"""

from polyroute.domain.connector import Connector, RoutingDocument
from polyroute.domain.obstacle import (
    Obstacle,
    PointObstacle,
    PolygonObstacle,
    obstacle_from_dict,
)
from polyroute.domain.point import Point, PointList, Rectangle, round_coord
from polyroute.domain.segment import BIG_SLOPE, KeyPoint, LineSeg, Sign

__all__: list[str] = [
    # Enums
    "KeyPoint",
    "Sign",
    # Core types
    "BIG_SLOPE",
    "Connector",
    "LineSeg",
    "Obstacle",
    "Point",
    "PointList",
    "PointObstacle",
    "PolygonObstacle",
    "Rectangle",
    "RoutingDocument",
    "obstacle_from_dict",
    "round_coord",
]
