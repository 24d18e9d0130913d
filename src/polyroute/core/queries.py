"""Read-only geometric queries over polylines.

This module provides the measurements the router and smoother are built on:
- Segment decomposition and total length
- Bounding boxes and signed area
- Nearest segment lookup
- Walking a given distance along a path
- Intersections with another polyline

All functions are pure and never modify their inputs. Queries on fewer than
two points are degenerate and return an empty result or None.

Lengths are accumulated from per-segment lengths that are each rounded to
whole units first, matching how connector lengths are reported on screen.
"""

import math
from dataclasses import dataclass

from polyroute.domain import KeyPoint, LineSeg, Point, PointList, Rectangle, Sign, round_coord
from polyroute.exceptions import InvalidKeyPointError

# Distance within which a segment is considered to touch another segment
INTERSECT_TOLERANCE = 1


@dataclass(frozen=True)
class LocateInfo:
    """Segment holding a given fraction of a path, and the distance left in it."""

    segment: LineSeg
    remaining: int


def get_line_segments(points: PointList) -> list[LineSeg]:
    """Split a polyline into its consecutive segments.

    Args:
        points: The polyline

    Returns:
        One LineSeg per pair of adjacent points, empty for fewer than 2 points
    """
    return [LineSeg(points[i], points[i + 1]) for i in range(len(points) - 1)]


def segments_length(segments: list[LineSeg]) -> int:
    """Total length of a list of segments, each rounded before summing."""
    return sum(round_coord(segment.length()) for segment in segments)


def get_points_length(points: PointList) -> int:
    """Total length of a polyline, each segment rounded before summing.

    Examples:
        >>> get_points_length([Point(0, 0), Point(100, 0)])
        100
    """
    return segments_length(get_line_segments(points))


def get_points_infimum(points: PointList) -> Point | None:
    """Top-left corner of the bounding box, or None for an empty list."""
    if not points:
        return None
    return Point(min(p.x for p in points), min(p.y for p in points))


def get_points_supremum(points: PointList) -> Point | None:
    """Bottom-right corner of the bounding box, or None for an empty list."""
    if not points:
        return None
    return Point(max(p.x for p in points), max(p.y for p in points))


def get_points_bounds(points: PointList) -> Rectangle | None:
    """Bounding box of a polyline, or None for an empty list."""
    infimum = get_points_infimum(points)
    supremum = get_points_supremum(points)
    if infimum is None or supremum is None:
        return None
    return Rectangle.from_corners(infimum, supremum)


def signed_area(points: PointList) -> float:
    """Calculate signed area of a polygon using the shoelace formula.

    In screen coordinates (y down) a positive area means the ring runs
    clockwise on screen.

    Args:
        points: List of points forming the polygon boundary

    Returns:
        Signed area in square units. Returns 0.0 for degenerate polygons.

    Examples:
        >>> signed_area([Point(0, 0), Point(10, 0), Point(10, 10), Point(0, 10)])
        100.0
    """
    n = len(points)
    if n < 3:
        return 0.0

    area = 0.0
    for i in range(n):
        j = (i + 1) % n
        area += points[i].x * points[j].y
        area -= points[j].x * points[i].y

    return area / 2.0


def get_nearest_segment(segments: list[LineSeg], x: int, y: int) -> LineSeg | None:
    """Find the segment closest to a point.

    Ties are resolved in favour of the earliest segment.

    Args:
        segments: Candidate segments
        x: Point x coordinate
        y: Point y coordinate

    Returns:
        The nearest segment, or None if there are no segments
    """
    nearest = None
    min_distance = math.inf
    for segment in segments:
        distance = segment.distance_to_point(x, y)
        if distance < min_distance:
            nearest = segment
            min_distance = distance
    return nearest


def nearest_segment_index(points: PointList, point: Point) -> int | None:
    """Index of the segment of a polyline closest to a point.

    Args:
        points: The polyline
        point: The point to look up

    Returns:
        0-based index of the nearest segment, or None for fewer than 2 points
    """
    nearest = None
    min_distance = math.inf
    for index, segment in enumerate(get_line_segments(points)):
        distance = segment.distance_to_point(point.x, point.y)
        if distance < min_distance:
            nearest = index
            min_distance = distance
    return nearest


def locate_segment(
    segments: list[LineSeg], fraction: float, key_point: KeyPoint
) -> LocateInfo | None:
    """Find the segment that holds a fraction of the total length.

    The fraction is clamped to [0, 1]. ORIGIN and MIDPOINT scan forward
    (MIDPOINT starting half way along), TERMINUS scans backward.

    Args:
        segments: Segments of the path
        fraction: Fraction of total length to locate
        key_point: End of the path the fraction is measured from

    Returns:
        The holding segment and the distance remaining within it, or None if
        the distance runs past the end of the path

    Raises:
        InvalidKeyPointError: If key_point is not a KeyPoint
    """
    fraction = min(max(fraction, 0.0), 1.0)
    total = segments_length(segments)
    remaining = round_coord(fraction * total)

    if key_point is KeyPoint.ORIGIN or key_point is KeyPoint.MIDPOINT:
        if key_point is KeyPoint.MIDPOINT:
            remaining += total // 2
        ordered = segments
    elif key_point is KeyPoint.TERMINUS:
        ordered = list(reversed(segments))
    else:
        raise InvalidKeyPointError(key_point, "locate_segment")

    for segment in ordered:
        seg_length = round_coord(segment.length())
        if seg_length >= remaining:
            return LocateInfo(segment, remaining)
        remaining -= seg_length
    return None


def point_on(
    points: PointList, distance: float, from_key_point: KeyPoint = KeyPoint.ORIGIN
) -> Point | None:
    """Point reached by walking a distance along a polyline.

    ORIGIN walks forward from the first point and TERMINUS walks backward
    from the last. MIDPOINT walks forward from half the total length.
    Distances beyond either end extrapolate along the end segment.

    Args:
        points: The polyline
        distance: Distance to walk
        from_key_point: Where the walk starts

    Returns:
        The point reached, or None for fewer than 2 points

    Raises:
        InvalidKeyPointError: If from_key_point is not a KeyPoint
    """
    segments = get_line_segments(points)
    if not segments:
        if not isinstance(from_key_point, KeyPoint):
            raise InvalidKeyPointError(from_key_point, "point_on")
        return None

    total = segments_length(segments)
    if from_key_point is KeyPoint.MIDPOINT:
        distance = total // 2 + distance
        from_key_point = KeyPoint.ORIGIN

    first, last = segments[0], segments[-1]
    if from_key_point is KeyPoint.ORIGIN:
        if distance >= total:
            return last.point_on(-(distance - total), KeyPoint.TERMINUS)
        if distance < 0:
            return first.point_on(distance, KeyPoint.ORIGIN)
    elif from_key_point is KeyPoint.TERMINUS:
        if distance >= total:
            return first.point_on(-(distance - total), KeyPoint.ORIGIN)
        if distance < 0:
            return last.point_on(distance, KeyPoint.TERMINUS)
    else:
        raise InvalidKeyPointError(from_key_point, "point_on")

    info = locate_segment(segments, distance / total, from_key_point)
    if info is None:
        return None
    return info.segment.point_on(info.remaining, from_key_point)


def segment_distance(
    segments: list[LineSeg], segment: LineSeg | int, up_to: KeyPoint = KeyPoint.ORIGIN
) -> float:
    """Fraction of the total length that precedes a point of a segment.

    Args:
        segments: Segments of the path
        segment: The segment, or its index in ``segments``
        up_to: Which point of the segment to measure up to

    Returns:
        Fraction of the total length, 0.0 if the segment is not in the path

    Raises:
        InvalidKeyPointError: If up_to is not a KeyPoint
    """
    index = segment if isinstance(segment, int) else _index_of(segments, segment)
    if index is None or not 0 <= index < len(segments):
        return 0.0

    accumulated = 0
    for preceding in segments[:index]:
        accumulated = int(accumulated + preceding.length())

    target = segments[index]
    if up_to is KeyPoint.MIDPOINT:
        accumulated = int(accumulated + target.length() / 2)
    elif up_to is KeyPoint.TERMINUS:
        accumulated = int(accumulated + target.length())
    elif up_to is not KeyPoint.ORIGIN:
        raise InvalidKeyPointError(up_to, "segment_distance")

    total = segments_length(segments)
    if total == 0:
        return 0.0
    return accumulated / total


def _index_of(segments: list[LineSeg], segment: LineSeg) -> int | None:
    for index, candidate in enumerate(segments):
        if candidate == segment:
            return index
    return None


def distance_along(points: PointList, point: Point) -> float:
    """Fraction of the total length at which a point projects onto a path.

    The point is projected onto its nearest segment. Inner segments clamp the
    projection to the segment, while the first and last segments let it run
    past the path ends, giving values below 0 or above 1.

    Args:
        points: The polyline
        point: The point to project

    Returns:
        Fraction of the total length, 0.0 for a degenerate path
    """
    segments = get_line_segments(points)
    nearest = nearest_segment_index(points, point)
    if nearest is None:
        return 0.0
    total = segments_length(segments)
    if total == 0:
        return 0.0

    segment = segments[nearest]
    segment_pct = segment.distance_along(point)
    if nearest > 0:
        segment_pct = max(segment_pct, 0.0)
    if nearest < len(segments) - 1:
        segment_pct = min(segment_pct, 1.0)

    line_pct = segment_distance(segments, nearest, KeyPoint.ORIGIN)
    return line_pct + segment_pct * segment.length() / total


def find_intersections(
    points: PointList, other: PointList
) -> tuple[list[Point], list[int]]:
    """Find where a polyline crosses another polyline.

    Hits within twice the intersection tolerance of the previous hit on both
    axes are treated as the same crossing, so a path passing exactly through
    a corner of ``other`` is reported once.

    Args:
        points: The path to walk
        other: The polyline to test against

    Returns:
        Tuple (intersections, distances): the crossing points, segment by
        segment of ``points`` and in boundary order within a segment, and
        for each its rounded distance from the start of ``points``
    """
    other_segments = get_line_segments(other)
    intersections: list[Point] = []
    distances: list[int] = []

    last_hit = None
    travelled = 0.0
    for segment in get_line_segments(points):
        seg_length = segment.length()
        for boundary in other_segments:
            hit = segment.intersect(boundary, INTERSECT_TOLERANCE)
            if hit is None:
                continue
            if (
                last_hit is not None
                and abs(last_hit.x - hit.x) < INTERSECT_TOLERANCE * 2
                and abs(last_hit.y - hit.y) < INTERSECT_TOLERANCE * 2
            ):
                continue
            last_hit = hit
            intersections.append(hit)
            distances.append(round_coord(travelled + segment.distance_along(hit) * seg_length))
        travelled += seg_length

    return intersections, distances


def calculate_point_relative_to_line(
    points: PointList, from_line: int, from_end: int, is_percentage: bool = True
) -> Point | None:
    """Place a point beside a path, for example to anchor a label.

    Args:
        points: The polyline
        from_line: Perpendicular distance from the path; its sign picks the side
        from_end: Position along the path from its first point
        is_percentage: Whether ``from_end`` is a percentage or absolute units

    Returns:
        The placed point, or None for a degenerate path
    """
    segments = get_line_segments(points)
    if not segments:
        return None

    if is_percentage:
        fraction = from_end / 100.0
    else:
        total = segments_length(segments)
        fraction = from_end / total if total else 0.0

    info = locate_segment(segments, fraction, KeyPoint.ORIGIN)
    if info is None:
        return None

    seg_length = info.segment.length()
    in_segment = info.remaining / seg_length if seg_length > 0 else 0.0
    sign = Sign.POSITIVE if from_line > 0 else Sign.NEGATIVE
    return info.segment.locate_point(in_segment, abs(from_line), sign)


def pick_closest_point(points: PointList, point: Point) -> Point | None:
    """Pick the point nearest to a reference point.

    Candidates are compared on x first, falling back to y only when x does
    not improve. This is exact for the axis-aligned collinear points it is
    used with, but is not a Euclidean nearest-point search.
    """
    if not points:
        return None
    result = points[0]
    for candidate in points[1:]:
        if abs(candidate.x - point.x) < abs(result.x - point.x):
            result = candidate
        elif abs(candidate.y - point.y) < abs(result.y - point.y):
            result = candidate
    return result


def pick_farthest_point(points: PointList, point: Point) -> Point | None:
    """Pick the point farthest from a reference point, x first then y."""
    if not points:
        return None
    result = points[0]
    for candidate in points[1:]:
        if abs(candidate.x - point.x) > abs(result.x - point.x):
            result = candidate
        elif abs(candidate.y - point.y) > abs(result.y - point.y):
            result = candidate
    return result
