"""Conversion between JSON routing documents and domain models.

The on-disk format stores points as ``[x, y]`` pairs. Documents are validated
with pydantic models before they are turned into domain objects, so that a
malformed file fails with a single readable error instead of deep inside the
router.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, ValidationError, model_validator

from polyroute.domain import (
    Connector,
    Obstacle,
    Point,
    PointObstacle,
    PolygonObstacle,
    Rectangle,
    RoutingDocument,
)
from polyroute.exceptions import DocumentFormatError

Coordinate = tuple[int, int]


class RectangleModel(BaseModel):
    """Rectangle obstacle as stored on disk."""

    kind: Literal["rectangle"]
    id: str | None = None
    x: int
    y: int
    width: int = Field(ge=0)
    height: int = Field(ge=0)


class PolygonModel(BaseModel):
    """Polygon obstacle as stored on disk."""

    kind: Literal["polygon"]
    id: str | None = None
    points: list[Coordinate] = Field(min_length=3)


class PointObstacleModel(BaseModel):
    """Point obstacle as stored on disk."""

    kind: Literal["point"]
    id: str | None = None
    center: Coordinate
    width: int = Field(ge=0)
    height: int = Field(ge=0)
    incline_offset: int = 0
    top: bool = True


ObstacleModel = Annotated[
    RectangleModel | PolygonModel | PointObstacleModel, Field(discriminator="kind")
]


class ConnectorModel(BaseModel):
    """Connector as stored on disk."""

    id: str
    source: str | None = None
    target: str | None = None
    points: list[Coordinate]


class DocumentModel(BaseModel):
    """Top-level routing document."""

    connectors: list[ConnectorModel] = Field(default_factory=list)
    obstacles: list[ObstacleModel] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_unique_ids(self) -> "DocumentModel":
        seen: set[str] = set()
        for connector in self.connectors:
            if connector.id in seen:
                raise ValueError(f"Duplicate connector id: {connector.id}")
            seen.add(connector.id)
        return self


def _to_points(coords: list[Coordinate]) -> list[Point]:
    return [Point(x, y) for x, y in coords]


def _obstacle_to_domain(model: RectangleModel | PolygonModel | PointObstacleModel) -> Obstacle:
    if isinstance(model, RectangleModel):
        return Rectangle(model.x, model.y, model.width, model.height, model.id)
    if isinstance(model, PolygonModel):
        return PolygonObstacle(_to_points(model.points), id=model.id)
    return PointObstacle(
        center=Point(*model.center),
        width=model.width,
        height=model.height,
        incline_offset=model.incline_offset,
        top=model.top,
        id=model.id,
    )


def json_to_document(data: Any, path: str = "<memory>") -> RoutingDocument:
    """Validate parsed JSON and convert it to a routing document.

    Args:
        data: Parsed JSON content
        path: Source of the data, used in error messages

    Returns:
        RoutingDocument with domain connectors and obstacles

    Raises:
        DocumentFormatError: If the data does not match the document schema
    """
    try:
        model = DocumentModel.model_validate(data)
    except ValidationError as e:
        raise DocumentFormatError(path, str(e)) from e

    connectors = [
        Connector(
            id=c.id,
            points=_to_points(c.points),
            source=c.source,
            target=c.target,
        )
        for c in model.connectors
    ]
    obstacles = [_obstacle_to_domain(o) for o in model.obstacles]
    return RoutingDocument(connectors=connectors, obstacles=obstacles)


def _obstacle_to_json(obstacle: Obstacle) -> dict[str, Any]:
    if isinstance(obstacle, Rectangle):
        return {
            "kind": "rectangle",
            "id": obstacle.id,
            "x": obstacle.x,
            "y": obstacle.y,
            "width": obstacle.width,
            "height": obstacle.height,
        }
    if isinstance(obstacle, PolygonObstacle):
        return {
            "kind": "polygon",
            "id": obstacle.id,
            "points": [list(p.to_tuple()) for p in obstacle.points],
        }
    return {
        "kind": "point",
        "id": obstacle.id,
        "center": list(obstacle.center.to_tuple()),
        "width": obstacle.width,
        "height": obstacle.height,
        "incline_offset": obstacle.incline_offset,
        "top": obstacle.top,
    }


def document_to_json(document: RoutingDocument) -> dict[str, Any]:
    """Convert a routing document to its JSON-ready form.

    Args:
        document: The document to convert

    Returns:
        Dictionary suitable for json.dump
    """
    return {
        "connectors": [
            {
                "id": c.id,
                "source": c.source,
                "target": c.target,
                "points": [list(p.to_tuple()) for p in c.points],
            }
            for c in document.connectors
        ],
        "obstacles": [_obstacle_to_json(o) for o in document.obstacles],
    }
