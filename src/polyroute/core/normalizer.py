"""Polyline normalization.

Removes redundant points from a connector path: points that sit too close to
their predecessor, and points that lie on the straight line between their
neighbours. The first and last points are never removed, since they anchor
the connector to its source and target.
"""

import logging

from polyroute.domain import LineSeg, Point, PointList, round_coord

logger = logging.getLogger(__name__)

# Upper bound on remove/flatten rounds before giving up on a fixpoint
MAX_NORMALIZE_PASSES = 100


def same_orientation(first: Point, middle: Point, last: Point, tolerance: int) -> bool:
    """Check whether a point lies on the line through its neighbours.

    Args:
        first: Point before the candidate
        middle: The candidate point
        last: Point after the candidate
        tolerance: Maximum rounded perpendicular distance of the candidate

    Returns:
        True if the candidate can be removed without visibly bending the path
    """
    foot = LineSeg(first, last).perpendicular_intersect(middle.x, middle.y)
    return round_coord(foot.distance_to(middle)) <= tolerance


def flatten_segments(points: PointList, tolerance: int = 0) -> bool:
    """Remove interior points that lie on the line through their neighbours.

    When a point is removed and the segment leading to it was nearly
    horizontal (or vertical), the following point is snapped to the same y
    (or x) so that the merged segment stays axis-aligned. The last point is
    never snapped.

    Args:
        points: Polyline to flatten, modified in place
        tolerance: Straight-line tolerance

    Returns:
        True if any point was removed
    """
    changed = False
    i = 0
    while i + 2 < len(points):
        start, middle, following = points[i], points[i + 1], points[i + 2]
        if not same_orientation(start, middle, following, tolerance):
            i += 1
            continue

        del points[i + 1]
        changed = True

        if i + 1 == len(points) - 1:
            continue
        dx = middle.x - start.x
        dy = middle.y - start.y
        if abs(dy) < tolerance:
            points[i + 1] = Point(following.x, start.y)
        elif abs(dx) < tolerance:
            points[i + 1] = Point(start.x, following.y)

    return changed


def _remove_short_segments(points: PointList, tolerance: int) -> bool:
    changed = False
    i = 1
    while i < len(points) - 1:
        if int(points[i].distance_to(points[i - 1])) <= tolerance:
            del points[i]
            changed = True
        else:
            i += 1
    return changed


def normalize_segments(points: PointList, tolerance: int = 0) -> bool:
    """Normalize a polyline in place.

    Repeats two passes until nothing changes: drop interior points within
    ``tolerance`` of their predecessor, then flatten nearly straight runs.

    Args:
        points: Polyline to normalize, modified in place
        tolerance: Distance within which points are considered redundant

    Returns:
        True if the polyline was changed

    Examples:
        >>> pts = [Point(0, 0), Point(50, 0), Point(100, 0)]
        >>> normalize_segments(pts)
        True
        >>> pts
        [Point(x=0, y=0), Point(x=100, y=0)]
    """
    has_changed = False
    for _ in range(MAX_NORMALIZE_PASSES):
        changed = _remove_short_segments(points, tolerance)
        changed |= flatten_segments(points, tolerance)
        if not changed:
            return has_changed
        has_changed = True

    logger.warning(
        "Normalization did not settle after %d passes (%d points remain)",
        MAX_NORMALIZE_PASSES,
        len(points),
    )
    return has_changed
