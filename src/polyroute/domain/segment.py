"""Directed line segments and the enums used to parametrize them.

A LineSeg is built on demand from two adjacent points of a polyline and is
discarded after the calculation that needed it. All distance-from-an-end
queries are parametrized by a KeyPoint, and perpendicular offsets by a Sign.
"""

import math
from dataclasses import dataclass
from enum import Enum, auto

from polyroute.domain.point import Point
from polyroute.exceptions import InvalidKeyPointError

# Slope reported for vertical segments
BIG_SLOPE = 9999.0

_EPSILON = 1e-10


class KeyPoint(Enum):
    """Reference position on a segment or polyline.

    - ORIGIN: the start point
    - MIDPOINT: half way along
    - TERMINUS: the end point
    """

    ORIGIN = auto()
    MIDPOINT = auto()
    TERMINUS = auto()


class Sign(Enum):
    """Side of a directed segment.

    POSITIVE is the left-hand normal in screen coordinates (y down), which is
    the outward side of a boundary that runs clockwise on screen.
    """

    POSITIVE = 1
    NEGATIVE = -1


@dataclass(frozen=True, slots=True)
class LineSeg:
    """A directed line segment from origin to terminus.

    Attributes:
        origin: Start point
        terminus: End point
    """

    origin: Point
    terminus: Point

    @classmethod
    def from_slope(
        cls,
        key_point: KeyPoint,
        x: int,
        y: int,
        slope: float,
        length: float,
        sign: int,
    ) -> "LineSeg":
        """Build a segment of a given slope and length anchored at (x, y).

        Args:
            key_point: Which part of the new segment sits at (x, y)
            x: Anchor x coordinate
            y: Anchor y coordinate
            slope: Slope of the segment, BIG_SLOPE for vertical
            length: Length of the segment
            sign: +1 or -1, direction of travel from origin to terminus

        Returns:
            New LineSeg

        Raises:
            InvalidKeyPointError: If key_point is not a KeyPoint
        """
        if slope == BIG_SLOPE:
            dx = 0.0
            dy = float(length)
        else:
            dx = length / math.sqrt(slope * slope + 1)
            dy = slope * dx
        dx *= sign
        dy *= sign

        if key_point is KeyPoint.ORIGIN:
            return cls(Point(x, y), Point.of(x + dx, y + dy))
        if key_point is KeyPoint.TERMINUS:
            return cls(Point.of(x - dx, y - dy), Point(x, y))
        if key_point is KeyPoint.MIDPOINT:
            return cls(Point.of(x - dx / 2, y - dy / 2), Point.of(x + dx / 2, y + dy / 2))
        raise InvalidKeyPointError(key_point, "LineSeg.from_slope")

    @property
    def dx(self) -> int:
        return self.terminus.x - self.origin.x

    @property
    def dy(self) -> int:
        return self.terminus.y - self.origin.y

    def length(self) -> float:
        """Euclidean length of the segment."""
        return math.hypot(self.dx, self.dy)

    def is_horizontal(self) -> bool:
        return self.origin.y == self.terminus.y

    def is_vertical(self) -> bool:
        return self.origin.x == self.terminus.x

    def midpoint(self) -> Point:
        return Point.of(
            (self.origin.x + self.terminus.x) / 2, (self.origin.y + self.terminus.y) / 2
        )

    def slope(self) -> float:
        """Slope dy/dx, or BIG_SLOPE for a vertical segment."""
        if self.is_vertical():
            return BIG_SLOPE
        return self.dy / self.dx

    def perpendicular_slope(self) -> float:
        """Slope of a line perpendicular to this segment."""
        if self.is_horizontal():
            return BIG_SLOPE
        if self.is_vertical():
            return 0.0
        return -1.0 / self.slope()

    def equation(self) -> tuple[float, float, float]:
        """Coefficients (a, b, c) of the line a*x + b*y = c through the segment."""
        a = float(self.dy)
        b = float(self.origin.x - self.terminus.x)
        c = a * self.origin.x + b * self.origin.y
        return a, b, c

    def lines_intersections(self, other: "LineSeg") -> list[Point]:
        """Intersection candidates of the infinite lines through both segments.

        Uses Cramer's rule. Parallel distinct lines have no candidates;
        coincident lines report every endpoint of both segments so that the
        caller can pick whichever lies on both segments.

        Args:
            other: The other segment

        Returns:
            Candidate intersection points (rounded to integers)
        """
        a1, b1, c1 = self.equation()
        a2, b2, c2 = other.equation()

        det = a1 * b2 - a2 * b1
        if abs(det) < _EPSILON:
            # Parallel: coincident only if the coefficient rows are proportional
            if abs(a1 * c2 - a2 * c1) < _EPSILON and abs(b1 * c2 - b2 * c1) < _EPSILON:
                return [other.origin, other.terminus, self.origin, self.terminus]
            return []

        x = (c1 * b2 - b1 * c2) / det
        y = (a1 * c2 - c1 * a2) / det
        return [Point.of(x, y)]

    def contains_point(self, point: Point, tolerance: float = 0) -> bool:
        """Check whether a point lies on the segment within a tolerance."""
        return self.distance_to_point(point.x, point.y) <= tolerance

    def intersect(self, other: "LineSeg", tolerance: float = 1) -> Point | None:
        """Find the intersection point of two segments.

        The tolerance lets near-touching endpoints count as intersecting, so
        that pixel rounding does not hide a crossing at a corner.

        Args:
            other: The other segment
            tolerance: Maximum distance of the candidate from either segment

        Returns:
            Intersection point, or None if the segments do not meet
        """
        for candidate in self.lines_intersections(other):
            if self.contains_point(candidate, tolerance) and other.contains_point(
                candidate, tolerance
            ):
                return candidate
        return None

    def distance_along(self, point: Point) -> float:
        """Fractional projection of a point onto the segment.

        The result is not clamped: values below 0 lie before the origin and
        values above 1 lie past the terminus. Callers must check the range.

        Args:
            point: The point to project

        Returns:
            Projection parameter, 0.0 for a zero-length segment
        """
        length_sq = self.dx * self.dx + self.dy * self.dy
        if length_sq == 0:
            return 0.0
        return (
            (point.x - self.origin.x) * self.dx + (point.y - self.origin.y) * self.dy
        ) / length_sq

    def _projection(self, x: float, y: float) -> tuple[float, float]:
        length_sq = self.dx * self.dx + self.dy * self.dy
        if length_sq == 0:
            return float(self.origin.x), float(self.origin.y)
        t = ((x - self.origin.x) * self.dx + (y - self.origin.y) * self.dy) / length_sq
        return self.origin.x + t * self.dx, self.origin.y + t * self.dy

    def perpendicular_intersect(self, x: int, y: int) -> Point:
        """Foot of the perpendicular from (x, y) onto the infinite line."""
        px, py = self._projection(x, y)
        return Point.of(px, py)

    def distance_to_point(self, x: int, y: int) -> float:
        """Shortest distance from (x, y) to the segment (clamped to its ends)."""
        pct = self.distance_along(Point(x, y))
        if pct <= 0.0:
            return math.hypot(x - self.origin.x, y - self.origin.y)
        if pct >= 1.0:
            return math.hypot(x - self.terminus.x, y - self.terminus.y)
        px, py = self._projection(x, y)
        return math.hypot(x - px, y - py)

    def point_on(self, distance: float, from_key_point: KeyPoint) -> Point:
        """Point reached by walking a distance from one of the key points.

        ORIGIN and MIDPOINT walk towards the terminus, TERMINUS walks towards
        the origin. Negative distances walk the other way, past the key point.

        Args:
            distance: Distance to walk
            from_key_point: Where the walk starts

        Returns:
            The point reached

        Raises:
            InvalidKeyPointError: If from_key_point is not a KeyPoint
        """
        length = self.length()
        if from_key_point is KeyPoint.ORIGIN:
            start_x, start_y, direction = float(self.origin.x), float(self.origin.y), 1.0
        elif from_key_point is KeyPoint.MIDPOINT:
            start_x = (self.origin.x + self.terminus.x) / 2
            start_y = (self.origin.y + self.terminus.y) / 2
            direction = 1.0
        elif from_key_point is KeyPoint.TERMINUS:
            start_x, start_y, direction = float(self.terminus.x), float(self.terminus.y), -1.0
        else:
            raise InvalidKeyPointError(from_key_point, "LineSeg.point_on")

        if length < _EPSILON:
            return Point.of(start_x, start_y)

        step = direction * distance / length
        return Point.of(start_x + step * self.dx, start_y + step * self.dy)

    def locate_point(self, fraction: float, offset: float, sign: Sign) -> Point:
        """Point at a fractional position, pushed sideways off the segment.

        Used to produce buffer points around obstacle boundaries and
        perpendicular placements relative to a path.

        Args:
            fraction: Position along the segment (0 = origin, 1 = terminus)
            offset: Perpendicular distance from the segment
            sign: Side of the segment to offset towards

        Returns:
            The offset point
        """
        base_x = self.origin.x + fraction * self.dx
        base_y = self.origin.y + fraction * self.dy
        length = self.length()
        if length < _EPSILON:
            return Point.of(base_x, base_y)

        nx = self.dy / length * sign.value
        ny = -self.dx / length * sign.value
        return Point.of(base_x + nx * offset, base_y + ny * offset)

    def parallel_through(self, point: Point) -> "LineSeg":
        """Copy of this segment translated so that it passes through a point."""
        foot = self.perpendicular_intersect(point.x, point.y)
        dx = point.x - foot.x
        dy = point.y - foot.y
        return LineSeg(self.origin.translated(dx, dy), self.terminus.translated(dx, dy))

    def trig_values(self, dx: float, dy: float) -> tuple[float, float]:
        """Sine and cosine of the angle from this segment to a vector.

        Args:
            dx: Vector x component
            dy: Vector y component

        Returns:
            Tuple (sin_theta, cos_theta); (0.0, 1.0) if either length is zero
        """
        denominator = self.length() * math.hypot(dx, dy)
        if denominator < _EPSILON:
            return 0.0, 1.0
        cross = self.dx * dy - self.dy * dx
        dot = self.dx * dx + self.dy * dy
        return cross / denominator, dot / denominator

    def to_tuple(self) -> tuple[tuple[int, int], tuple[int, int]]:
        return (self.origin.to_tuple(), self.terminus.to_tuple())
