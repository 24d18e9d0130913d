"""Tests for obstacle routing."""

import pytest

from polyroute.config import RoutingConfig
from polyroute.core.router import (
    route_around,
    route_around_point,
    route_around_poly,
    route_around_rect,
)
from polyroute.domain import Point, PointObstacle, PolygonObstacle, Rectangle


def pts(*coords: tuple[int, int]) -> list[Point]:
    """Build a point list from coordinate pairs."""
    return [Point(x, y) for x, y in coords]


def strictly_inside(point: Point, rect: Rectangle) -> bool:
    """Check whether a point lies in the interior of a rectangle."""
    return rect.left < point.x < rect.right and rect.top < point.y < rect.bottom


@pytest.fixture
def straight() -> list[Point]:
    """A horizontal path along the x axis."""
    return pts((0, 0), (100, 0))


@pytest.fixture
def box() -> Rectangle:
    """A rectangle the straight path passes through."""
    return Rectangle(40, -10, 20, 20)


class TestRouteAroundRect:
    """Tests for route_around_rect."""

    def test_routes_around_tall_box(self) -> None:
        """Test a stepped path crossing a tall box."""
        path = pts((0, 0), (50, 0), (50, 50), (100, 50))
        rect = Rectangle(40, -10, 20, 70)

        result = route_around_rect(path, rect)

        assert result == pts((0, 0), (40, 0), (40, 60), (60, 60), (60, 50), (100, 50))
        assert not any(strictly_inside(p, rect) for p in result)
        assert result[0] == path[0]
        assert result[-1] == path[-1]

    def test_input_not_modified(self) -> None:
        path = pts((0, 0), (50, 0), (50, 50), (100, 50))
        route_around_rect(path, Rectangle(40, -10, 20, 70))
        assert path == pts((0, 0), (50, 0), (50, 50), (100, 50))

    def test_straight_path(self, straight: list[Point], box: Rectangle) -> None:
        """Test that ties between both ways around go against the ring order."""
        result = route_around_rect(straight, box)
        assert result == pts((0, 0), (40, 0), (40, 10), (60, 10), (60, 0), (100, 0))

    def test_buffer(self, straight: list[Point], box: Rectangle) -> None:
        """Test that a buffered detour keeps clear of the box."""
        result = route_around_rect(straight, box, buffer=5)

        assert result == pts((0, 0), (35, 15), (65, 15), (100, 0))
        clearance = box.expanded(5, 5)
        assert not any(strictly_inside(p, clearance) for p in result)

    @pytest.mark.parametrize("buffer", [5, 10])
    def test_buffer_on_stepped_path(self, buffer: int) -> None:
        """Test that a buffered detour survives pruning on a bent path."""
        path = pts((0, 0), (50, 0), (50, 50), (100, 50))
        rect = Rectangle(40, -10, 20, 70)

        result = route_around_rect(path, rect, buffer=buffer)

        assert result is not None
        assert result[0] == path[0]
        assert result[-1] == path[-1]
        clearance = rect.expanded(buffer, buffer)
        assert not any(strictly_inside(p, clearance) for p in result)

    def test_buffer_on_stepped_path_points(self) -> None:
        path = pts((0, 0), (50, 0), (50, 50), (100, 50))
        result = route_around_rect(path, Rectangle(40, -10, 20, 70), buffer=5)
        assert result == pts((0, 0), (35, 0), (35, 65), (65, 65), (100, 50))

    def test_crossing_through_corner(self) -> None:
        """Test that a crossing at a box corner counts once, not once per edge."""
        path = pts((30, 20), (70, -20))
        result = route_around_rect(path, Rectangle(40, -10, 20, 20))
        assert result == pts((30, 20), (40, 10), (60, 10), (60, -10), (70, -20))

    def test_miss_returns_none(self, straight: list[Point]) -> None:
        assert route_around_rect(straight, Rectangle(200, 200, 10, 10)) is None

    def test_bounds_overlap_without_crossing(self) -> None:
        """Test a path whose bounds cover the box without crossing it."""
        path = pts((0, 0), (100, 0), (100, 100))
        assert route_around_rect(path, Rectangle(20, 20, 30, 30)) is None

    def test_endpoint_inside_box(self) -> None:
        """Test that a path starting inside the box can still leave it."""
        path = pts((50, 0), (50, 100))
        result = route_around_rect(path, Rectangle(40, -10, 20, 20))
        assert result == pts((50, 0), (40, 0), (40, 10), (50, 10), (50, 100))

    def test_too_few_points(self, box: Rectangle) -> None:
        assert route_around_rect(pts((50, 0)), box) is None


class TestRouteAroundPoly:
    """Tests for route_around_poly."""

    @pytest.fixture
    def tall(self) -> list[Point]:
        """A box extending further below the path than above it."""
        return pts((40, -10), (60, -10), (60, 30), (40, 30))

    def test_shortest(self, straight: list[Point], tall: list[Point]) -> None:
        result = route_around_poly(straight, tall)
        assert result == pts((0, 0), (40, 0), (40, -10), (60, -10), (60, 0), (100, 0))

    def test_longest(self, straight: list[Point], tall: list[Point]) -> None:
        result = route_around_poly(straight, tall, shortest_distance=False)
        assert result == pts((0, 0), (40, 0), (40, 30), (60, 30), (60, 0), (100, 0))

    def test_orientation_normalized(self, straight: list[Point]) -> None:
        """Test that a counter-clockwise polygon still gets an outward buffer."""
        polygon = pts((40, -10), (40, 10), (60, 10), (60, -10))
        result = route_around_poly(straight, polygon, buffer=5)
        assert result == pts((0, 0), (35, 15), (65, 15), (100, 0))

    def test_buffer_on_stepped_path(self) -> None:
        """Test that a clockwise ring routes like the matching rectangle."""
        path = pts((0, 0), (50, 0), (50, 50), (100, 50))
        rect = Rectangle(40, -10, 20, 70)

        result = route_around_poly(path, rect.to_points(), buffer=5)

        assert result is not None
        assert result == route_around_rect(path, rect, buffer=5)

    def test_unmatched_crossing(self, box: Rectangle) -> None:
        """Test that a path ending inside the polygon is not routed."""
        path = pts((0, 0), (50, 0))
        assert route_around_poly(path, box.to_points()) is None

    def test_degenerate_polygon(self, straight: list[Point]) -> None:
        assert route_around_poly(straight, pts((0, 0), (10, 10))) is None

    def test_miss(self, straight: list[Point]) -> None:
        polygon = pts((0, 50), (10, 50), (5, 60))
        assert route_around_poly(straight, polygon) is None


class TestRouteAroundPoint:
    """Tests for route_around_point."""

    def test_top(self, straight: list[Point]) -> None:
        result = route_around_point(straight, Point(50, 0), height=10, width=20)
        assert result == pts((0, 0), (40, 0), (40, -10), (60, -10), (60, 0), (100, 0))

    def test_bottom(self, straight: list[Point]) -> None:
        result = route_around_point(straight, Point(50, 0), height=10, width=20, top=False)
        assert result == pts((0, 0), (40, 0), (40, 10), (60, 10), (60, 0), (100, 0))

    def test_incline(self, straight: list[Point]) -> None:
        result = route_around_point(
            straight, Point(50, 0), height=10, width=20, incline_offset=5
        )
        assert result == pts((0, 0), (40, 0), (45, -10), (55, -10), (60, 0), (100, 0))

    def test_center_projected_onto_path(self) -> None:
        """Test a point beside the second leg of an elbow."""
        path = pts((0, 0), (100, 0), (100, 100))
        result = route_around_point(path, Point(110, 50), height=10, width=20)
        assert result == pts(
            (0, 0), (100, 0), (100, 40), (110, 40), (110, 60), (100, 60), (100, 100)
        )

    def test_degenerate_path(self) -> None:
        assert route_around_point(pts((5, 5), (5, 5)), Point(5, 5), 10, 20) is None


class TestRouteAround:
    """Tests for obstacle dispatch."""

    def test_rectangle(self, straight: list[Point], box: Rectangle) -> None:
        assert route_around(straight, box) == route_around_rect(straight, box)

    def test_polygon(self, straight: list[Point], box: Rectangle) -> None:
        polygon = PolygonObstacle(box.to_points()[:-1])
        assert route_around(straight, polygon) == route_around_poly(straight, box.to_points())

    def test_point(self, straight: list[Point]) -> None:
        obstacle = PointObstacle(Point(50, 0), width=20, height=10)
        assert route_around(straight, obstacle) == route_around_point(
            straight, Point(50, 0), 10, 20
        )

    def test_distant_point_ignored(self, straight: list[Point]) -> None:
        obstacle = PointObstacle(Point(50, 100), width=20, height=10)
        assert route_around(straight, obstacle) is None

    def test_config_applied(self, straight: list[Point], box: Rectangle) -> None:
        config = RoutingConfig(buffer=5)
        assert route_around(straight, box, config) == pts((0, 0), (35, 15), (65, 15), (100, 0))

    def test_unsupported(self, straight: list[Point]) -> None:
        with pytest.raises(TypeError, match="Unsupported obstacle type"):
            route_around(straight, Point(0, 0))  # type: ignore[arg-type]
