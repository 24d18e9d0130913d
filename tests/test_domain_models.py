"""Tests for domain models."""

import math
from dataclasses import FrozenInstanceError

import pytest

from polyroute.domain import (
    BIG_SLOPE,
    Connector,
    KeyPoint,
    LineSeg,
    Point,
    PointObstacle,
    PolygonObstacle,
    Rectangle,
    RoutingDocument,
    Sign,
    obstacle_from_dict,
    round_coord,
)
from polyroute.exceptions import GeometryError, InvalidKeyPointError


class TestRoundCoord:
    """Tests for half-up coordinate rounding."""

    def test_rounds_half_up(self) -> None:
        """Test that .5 rounds towards positive infinity."""
        assert round_coord(2.5) == 3
        assert round_coord(3.5) == 4
        assert round_coord(-2.5) == -2

    def test_rounds_to_nearest(self) -> None:
        """Test ordinary rounding."""
        assert round_coord(2.4) == 2
        assert round_coord(-2.6) == -3


class TestPoint:
    """Tests for Point model."""

    def test_creation(self) -> None:
        """Test basic point creation."""
        p = Point(10, 20)
        assert p.x == 10
        assert p.y == 20

    def test_immutability(self) -> None:
        """Test that points are immutable."""
        p = Point(10, 20)
        with pytest.raises(FrozenInstanceError):
            p.x = 30  # type: ignore[misc]

    def test_hashable(self) -> None:
        """Test that points can be used in sets."""
        assert len({Point(1, 2), Point(1, 2), Point(2, 1)}) == 2

    def test_of_rounds(self) -> None:
        """Test creation from fractional coordinates."""
        assert Point.of(1.5, -0.4) == Point(2, 0)

    def test_to_tuple(self) -> None:
        """Test conversion to tuple."""
        assert Point(10, 20).to_tuple() == (10, 20)

    def test_distance_to(self) -> None:
        """Test euclidean distance."""
        assert Point(0, 0).distance_to(Point(3, 4)) == 5.0

    def test_translated(self) -> None:
        """Test translation returns a new point."""
        p = Point(1, 1)
        assert p.translated(2, -3) == Point(3, -2)
        assert p == Point(1, 1)

    def test_serialization(self) -> None:
        """Test to_dict/from_dict."""
        p = Point(10, 20)
        data = p.to_dict()
        assert data == {"x": 10, "y": 20}
        assert Point.from_dict(data) == p


class TestRectangle:
    """Tests for Rectangle model."""

    def test_edges(self) -> None:
        """Test edge properties in screen coordinates."""
        rect = Rectangle(10, 20, 30, 40)
        assert rect.left == 10
        assert rect.top == 20
        assert rect.right == 40
        assert rect.bottom == 60

    def test_from_corners(self) -> None:
        """Test building from any two opposite corners."""
        assert Rectangle.from_corners(Point(10, 20), Point(0, 5)) == Rectangle(0, 5, 10, 15)

    def test_contains_is_half_open(self) -> None:
        """Test that only the top and left edges are inside."""
        rect = Rectangle(0, 0, 10, 10)
        assert rect.contains(Point(0, 0))
        assert rect.contains(Point(5, 5))
        assert not rect.contains(Point(10, 5))
        assert not rect.contains(Point(5, 10))
        assert not rect.contains(Point(10, 10))

    def test_intersects_strict(self) -> None:
        """Test that touching rectangles do not intersect."""
        rect = Rectangle(0, 0, 10, 10)
        assert rect.intersects(Rectangle(5, 5, 10, 10))
        assert not rect.intersects(Rectangle(10, 0, 5, 5))
        assert not rect.intersects(Rectangle(20, 20, 5, 5))

    def test_expanded(self) -> None:
        """Test growing a rectangle on all sides."""
        assert Rectangle(10, 10, 5, 5, "n1").expanded(1, 2) == Rectangle(9, 8, 7, 9, "n1")

    def test_to_points_closed_ring(self) -> None:
        """Test the corner ring runs clockwise on screen and is closed."""
        ring = Rectangle(0, 0, 10, 20).to_points()
        assert ring == [Point(0, 0), Point(10, 0), Point(10, 20), Point(0, 20), Point(0, 0)]

    def test_serialization(self) -> None:
        """Test to_dict/from_dict keeps the identifier."""
        rect = Rectangle(1, 2, 3, 4, id="node")
        data = rect.to_dict()
        assert data["kind"] == "rectangle"
        assert Rectangle.from_dict(data) == rect


class TestLineSeg:
    """Tests for LineSeg model."""

    def test_length(self) -> None:
        """Test euclidean length."""
        assert LineSeg(Point(0, 0), Point(3, 4)).length() == 5.0

    def test_slopes(self) -> None:
        """Test slope and perpendicular slope."""
        seg = LineSeg(Point(0, 0), Point(10, 20))
        assert seg.slope() == 2.0
        assert seg.perpendicular_slope() == -0.5

    def test_vertical_slope(self) -> None:
        """Test that vertical segments report BIG_SLOPE."""
        seg = LineSeg(Point(0, 0), Point(0, 10))
        assert seg.is_vertical()
        assert seg.slope() == BIG_SLOPE
        assert seg.perpendicular_slope() == 0.0

    def test_horizontal_perpendicular(self) -> None:
        """Test that a horizontal segment's perpendicular is vertical."""
        seg = LineSeg(Point(0, 0), Point(10, 0))
        assert seg.is_horizontal()
        assert seg.perpendicular_slope() == BIG_SLOPE

    def test_midpoint(self) -> None:
        """Test midpoint rounding."""
        assert LineSeg(Point(0, 0), Point(5, 10)).midpoint() == Point(3, 5)

    def test_immutability(self) -> None:
        """Test that segments are immutable."""
        seg = LineSeg(Point(0, 0), Point(1, 1))
        with pytest.raises(FrozenInstanceError):
            seg.origin = Point(2, 2)  # type: ignore[misc]

    def test_from_slope_origin(self) -> None:
        """Test building a segment from its origin."""
        seg = LineSeg.from_slope(KeyPoint.ORIGIN, 0, 0, 0.0, 10, 1)
        assert seg == LineSeg(Point(0, 0), Point(10, 0))

    def test_from_slope_vertical_negative(self) -> None:
        """Test a vertical segment built in the negative direction."""
        seg = LineSeg.from_slope(KeyPoint.ORIGIN, 0, 0, BIG_SLOPE, 10, -1)
        assert seg == LineSeg(Point(0, 0), Point(0, -10))

    def test_from_slope_midpoint(self) -> None:
        """Test building a segment centered on a point."""
        seg = LineSeg.from_slope(KeyPoint.MIDPOINT, 5, 5, 0.0, 10, 1)
        assert seg == LineSeg(Point(0, 5), Point(10, 5))

    def test_from_slope_terminus(self) -> None:
        """Test building a segment ending at a point."""
        seg = LineSeg.from_slope(KeyPoint.TERMINUS, 10, 0, 0.0, 10, 1)
        assert seg == LineSeg(Point(0, 0), Point(10, 0))

    def test_from_slope_invalid_key_point(self) -> None:
        """Test that an invalid key point is rejected."""
        with pytest.raises(InvalidKeyPointError):
            LineSeg.from_slope("origin", 0, 0, 0.0, 10, 1)  # type: ignore[arg-type]

    def test_serialization_to_tuple(self) -> None:
        """Test conversion to nested tuples."""
        assert LineSeg(Point(1, 2), Point(3, 4)).to_tuple() == ((1, 2), (3, 4))


class TestObstacles:
    """Tests for obstacle models."""

    def test_polygon_stores_tuple(self) -> None:
        """Test that polygon points are stored immutably."""
        polygon = PolygonObstacle([Point(0, 0), Point(10, 0), Point(5, 8)])
        assert isinstance(polygon.points, tuple)
        assert hash(polygon) == hash(PolygonObstacle((Point(0, 0), Point(10, 0), Point(5, 8))))

    def test_polygon_closed_points(self) -> None:
        """Test that the ring is closed once."""
        polygon = PolygonObstacle([Point(0, 0), Point(10, 0), Point(5, 8)])
        ring = polygon.closed_points()
        assert len(ring) == 4
        assert ring[0] == ring[-1]

        closed = PolygonObstacle(ring)
        assert len(closed.closed_points()) == 4

    def test_polygon_bounding_box(self) -> None:
        """Test polygon bounds."""
        polygon = PolygonObstacle([Point(0, 5), Point(10, 0), Point(5, 8)], id="p")
        assert polygon.bounding_box() == Rectangle(0, 0, 10, 8, "p")

    def test_polygon_serialization(self) -> None:
        """Test to_dict/from_dict."""
        polygon = PolygonObstacle([Point(0, 0), Point(10, 0), Point(5, 8)], id="tri")
        restored = obstacle_from_dict(polygon.to_dict())
        assert restored == polygon

    def test_point_obstacle_serialization(self) -> None:
        """Test to_dict/from_dict."""
        obstacle = PointObstacle(Point(50, 0), width=20, height=10, incline_offset=3, top=False)
        restored = obstacle_from_dict(obstacle.to_dict())
        assert restored == obstacle

    def test_point_obstacle_defaults(self) -> None:
        """Test defaults applied when optional fields are missing."""
        obstacle = PointObstacle.from_dict(
            {"kind": "point", "center": {"x": 1, "y": 2}, "width": 4, "height": 6}
        )
        assert obstacle.incline_offset == 0
        assert obstacle.top is True
        assert obstacle.id is None

    def test_rectangle_from_dict(self) -> None:
        """Test rectangle dispatch."""
        data = {"kind": "rectangle", "x": 1, "y": 2, "width": 3, "height": 4}
        assert obstacle_from_dict(data) == Rectangle(1, 2, 3, 4)

    def test_unknown_kind(self) -> None:
        """Test that unknown obstacle kinds are rejected."""
        with pytest.raises(ValueError, match="Unknown obstacle kind"):
            obstacle_from_dict({"kind": "circle"})


class TestConnector:
    """Tests for Connector model."""

    def test_end_ids(self) -> None:
        """Test that only known ends are reported."""
        assert Connector("e1", [], source="a", target="b").end_ids == {"a", "b"}
        assert Connector("e1", [], source="a").end_ids == {"a"}
        assert Connector("e1", []).end_ids == set()

    def test_is_degenerate(self) -> None:
        """Test degenerate detection."""
        assert Connector("e1", [Point(0, 0)]).is_degenerate()
        assert not Connector("e1", [Point(0, 0), Point(1, 1)]).is_degenerate()

    def test_serialization(self) -> None:
        """Test to_dict/from_dict."""
        connector = Connector("e1", [Point(0, 0), Point(10, 10)], source="a", target="b")
        data = connector.to_dict()
        assert data["points"] == [{"x": 0, "y": 0}, {"x": 10, "y": 10}]

        restored = Connector.from_dict(data)
        assert restored == connector


class TestRoutingDocument:
    """Tests for RoutingDocument model."""

    def test_get_connector(self) -> None:
        """Test lookup by identifier."""
        doc = RoutingDocument(connectors=[Connector("e1", []), Connector("e2", [])])
        assert doc.get_connector("e2") is doc.connectors[1]
        assert doc.get_connector("missing") is None

    def test_serialization(self) -> None:
        """Test to_dict/from_dict with mixed obstacles."""
        doc = RoutingDocument(
            connectors=[Connector("e1", [Point(0, 0), Point(100, 0)])],
            obstacles=[
                Rectangle(40, -10, 20, 20, "n1"),
                PolygonObstacle([Point(0, 0), Point(10, 0), Point(5, 8)]),
                PointObstacle(Point(50, 0), 20, 10),
            ],
        )
        restored = RoutingDocument.from_dict(doc.to_dict())
        assert restored == doc

    def test_empty_defaults(self) -> None:
        """Test that a missing section means an empty list."""
        doc = RoutingDocument.from_dict({})
        assert doc.connectors == []
        assert doc.obstacles == []


class TestExceptions:
    """Tests for geometry exceptions."""

    def test_invalid_key_point_error(self) -> None:
        """Test the error is both a GeometryError and a ValueError."""
        error = InvalidKeyPointError("bogus", "point_on")
        assert isinstance(error, GeometryError)
        assert isinstance(error, ValueError)
        assert error.key_point == "bogus"
        assert error.operation == "point_on"
        assert "point_on" in str(error)


def test_point_of_handles_float_noise() -> None:
    """Test rounding of values a hair below .5."""
    assert Point.of(math.nextafter(2.5, 0), 0) == Point(2, 0)
