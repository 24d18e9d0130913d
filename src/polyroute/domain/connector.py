"""Connector and routing document models.

A connector is a polyline between two diagram nodes. A routing document
bundles the connectors of a diagram with the obstacles they must avoid.
"""

from dataclasses import dataclass, field
from typing import Any

from polyroute.domain.obstacle import Obstacle, obstacle_from_dict
from polyroute.domain.point import Point, PointList


@dataclass
class Connector:
    """A connector path between two diagram nodes.

    Designed for efficient serialization for parallel processing.

    Attributes:
        id: Connector identifier
        points: Path from source anchor to target anchor
        source: Identifier of the source node, if known
        target: Identifier of the target node, if known
    """

    id: str
    points: PointList
    source: str | None = None
    target: str | None = None

    @property
    def end_ids(self) -> set[str]:
        """Identifiers of the nodes this connector is attached to."""
        return {node for node in (self.source, self.target) if node is not None}

    def is_degenerate(self) -> bool:
        """Check if the connector has too few points to form a segment."""
        return len(self.points) < 2

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC.

        Returns:
            Dictionary representation of the connector
        """
        return {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "points": [p.to_dict() for p in self.points],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Connector":
        """Deserialize from dictionary.

        Args:
            data: Dictionary representation of a connector

        Returns:
            Connector instance
        """
        return cls(
            id=data["id"],
            points=[Point.from_dict(p) for p in data["points"]],
            source=data.get("source"),
            target=data.get("target"),
        )


@dataclass
class RoutingDocument:
    """All connectors and obstacles of one diagram.

    Attributes:
        connectors: Connectors to route, in document order
        obstacles: Obstacles the connectors must avoid, in routing order
    """

    connectors: list[Connector] = field(default_factory=list)
    obstacles: list[Obstacle] = field(default_factory=list)

    def get_connector(self, connector_id: str) -> Connector | None:
        """Look up a connector by identifier."""
        for connector in self.connectors:
            if connector.id == connector_id:
                return connector
        return None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "connectors": [c.to_dict() for c in self.connectors],
            "obstacles": [o.to_dict() for o in self.obstacles],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RoutingDocument":
        """Deserialize from dictionary."""
        return cls(
            connectors=[Connector.from_dict(c) for c in data.get("connectors", [])],
            obstacles=[obstacle_from_dict(o) for o in data.get("obstacles", [])],
        )
