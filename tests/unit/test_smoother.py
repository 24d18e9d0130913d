"""Tests for Bezier smoothing."""

import pytest

from polyroute.core._bezier import split_cubic, subdivide_cubic
from polyroute.core.smoother import (
    MAX_BEZIER_LINES,
    approx_polyline_from_bezier,
    calc_bezier,
    calc_smooth_polyline,
)
from polyroute.domain import Point


def pts(*coords: tuple[int, int]) -> list[Point]:
    """Build a point list from coordinate pairs."""
    return [Point(x, y) for x, y in coords]


@pytest.fixture
def elbow() -> list[Point]:
    """An L-shaped path with one right-angle corner."""
    return pts((0, 0), (100, 0), (100, 100))


def on_elbow(point: Point) -> bool:
    """Check whether a point lies on the elbow fixture."""
    return (point.y == 0 and 0 <= point.x <= 100) or (point.x == 100 and 0 <= point.y <= 100)


class TestSubdivision:
    """Tests for cubic subdivision."""

    def test_split_cubic_midpoint(self) -> None:
        left, right = split_cubic(((0, 0), (0, 0), (100, 0), (100, 0)))
        assert left[3] == (50.0, 0.0)
        assert right[0] == left[3]
        assert right[3] == (100, 0)

    def test_subdivide_power_of_two(self) -> None:
        """Test that the piece count is rounded up to a power of two."""
        result = subdivide_cubic(Point(0, 0), Point(0, 0), Point(100, 0), Point(100, 0), 3)
        assert result == pts((0, 0), (16, 0), (50, 0), (84, 0), (100, 0))


class TestCalcBezier:
    """Tests for control stream construction."""

    def test_zero_factor_controls(self, elbow: list[Point]) -> None:
        """Test that factor zero puts control points on the corners."""
        bezier = calc_bezier(elbow, 0)
        assert bezier == pts((0, 0), (0, 0), (100, 0), (100, 0), (100, 0), (100, 100), (100, 100))

    def test_stream_shape(self, elbow: list[Point]) -> None:
        """Test one end point followed by three points per curve."""
        bezier = calc_bezier(elbow, 50)
        assert len(bezier) == 7
        assert bezier[0] == Point(0, 0)
        assert bezier[3] == Point(100, 0)
        assert bezier[-1] == Point(100, 100)

    def test_corner_controls_on_bisector(self, elbow: list[Point]) -> None:
        bezier = calc_bezier(elbow, 50)
        assert bezier[1] == Point(50, 0)
        assert bezier[2] == Point(65, -35)

    def test_start_index(self, elbow: list[Point]) -> None:
        bezier = calc_bezier(elbow, 0, start_index=1)
        assert bezier == pts((100, 0), (100, 0), (100, 100), (100, 100))

    def test_end_index(self, elbow: list[Point]) -> None:
        bezier = calc_bezier(elbow, 0, end_index=0)
        assert bezier == pts((0, 0), (0, 0), (100, 0), (100, 0))

    def test_short_segments_skipped(self) -> None:
        assert calc_bezier(pts((0, 0), (3, 0), (5, 0)), 50) == []


class TestApproxPolyline:
    """Tests for approx_polyline_from_bezier."""

    def test_incomplete_stream(self) -> None:
        assert approx_polyline_from_bezier(pts((0, 0), (1, 1), (2, 2))) is None

    def test_steps(self) -> None:
        bezier = pts((0, 0), (0, 0), (100, 0), (100, 0))
        assert approx_polyline_from_bezier(bezier, 4) == pts(
            (0, 0), (16, 0), (50, 0), (84, 0), (100, 0)
        )

    def test_single_step(self) -> None:
        bezier = pts((0, 0), (0, 0), (100, 0), (100, 0))
        assert approx_polyline_from_bezier(bezier, 1) == pts((0, 0), (100, 0))

    def test_steps_capped(self, elbow: list[Point]) -> None:
        bezier = calc_bezier(elbow, 50)
        assert approx_polyline_from_bezier(bezier, 100) == approx_polyline_from_bezier(
            bezier, MAX_BEZIER_LINES
        )

    def test_no_consecutive_duplicates(self, elbow: list[Point]) -> None:
        result = approx_polyline_from_bezier(calc_bezier(elbow, 50), 32)
        assert result is not None
        assert all(a != b for a, b in zip(result, result[1:]))


class TestCalcSmoothPolyline:
    """Tests for calc_smooth_polyline."""

    def test_too_few_points(self) -> None:
        assert calc_smooth_polyline(pts((0, 0)), 50) is None
        assert calc_smooth_polyline([], 50) is None

    def test_all_segments_short(self) -> None:
        assert calc_smooth_polyline(pts((0, 0), (3, 0), (5, 0)), 50) is None

    def test_zero_factor_stays_on_path(self, elbow: list[Point]) -> None:
        """Test that factor zero only adds points along the original path."""
        result = calc_smooth_polyline(elbow, 0)
        assert result is not None
        assert result[0] == Point(0, 0)
        assert result[-1] == Point(100, 100)
        assert all(on_elbow(p) for p in result)

    def test_endpoints_unchanged(self, elbow: list[Point]) -> None:
        result = calc_smooth_polyline(elbow, 50)
        assert result is not None
        assert result[0] == elbow[0]
        assert result[-1] == elbow[-1]
        assert len(result) > len(elbow)

    def test_curve_leaves_path(self, elbow: list[Point]) -> None:
        """Test that a positive factor bends the path near the corner."""
        result = calc_smooth_polyline(elbow, 50)
        assert result is not None
        assert any(p.y < 0 for p in result)

    def test_straight_line(self) -> None:
        result = calc_smooth_polyline(pts((0, 0), (100, 0)), 0, bezier_steps=1)
        assert result == pts((0, 0), (100, 0))

    def test_input_not_modified(self, elbow: list[Point]) -> None:
        calc_smooth_polyline(elbow, 50)
        assert elbow == pts((0, 0), (100, 0), (100, 100))
