"""Bezier smoothing of polylines.

A polyline is smoothed in two steps. First a stream of cubic Bezier control
points is derived from the path (end, control, control, end, control,
control, end, ...). Each corner gets control points on the bisector of the
turn, set back by ``smooth_factor`` percent of the segment length. Then each
cubic is flattened back into line segments.
"""

import logging
import math

from polyroute.core._bezier import subdivide_cubic
from polyroute.core.queries import get_line_segments
from polyroute.domain import KeyPoint, LineSeg, Point, PointList, round_coord

logger = logging.getLogger(__name__)

# Segments this short or shorter carry no curve of their own
MIN_LINE_LENGTH = 5
DEFAULT_BEZIER_LINES = 16
MAX_BEZIER_LINES = 32


def _rotate(x: int, y: int, angle: float) -> Point:
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    return Point.of(x * cos_a - y * sin_a, x * sin_a + y * cos_a)


def _bisector_angle(segment: LineSeg, following: LineSeg) -> float:
    sin_theta, cos_theta = segment.trig_values(following.dx, following.dy)
    angle = math.atan2(-sin_theta, -cos_theta)
    if angle > 0:
        return (math.pi - angle) / -2
    return (-math.pi - angle) / -2


def calc_bezier(
    points: PointList,
    smooth_factor: int,
    start_index: int = 0,
    end_index: int | None = None,
) -> PointList:
    """Derive the cubic Bezier control stream for a polyline.

    Control points are calculated for every segment so that curves stay
    continuous, but only segments from ``start_index`` to ``end_index``
    (inclusive) contribute to the returned stream.

    Args:
        points: The polyline
        smooth_factor: Control length as a percentage of segment length
        start_index: First segment to emit
        end_index: Last segment to emit, defaults to the last segment

    Returns:
        Control points: one end point followed by three points per curve
    """
    segments = get_line_segments(points)
    if end_index is None:
        end_index = len(segments) - 1

    bezier: PointList = []
    prev_control = None
    i = 0
    while i < len(segments):
        if i > end_index:
            break
        segment = segments[i]
        emit = i >= start_index
        seg_length = segment.length()
        control_length = seg_length * smooth_factor / 100

        if seg_length <= MIN_LINE_LENGTH:
            i += 1
            continue

        if not bezier and emit:
            bezier.append(segment.origin)

        if prev_control is not None:
            lead_in = LineSeg(prev_control, segment.origin)
            start_control = lead_in.point_on(
                round_coord(lead_in.length() + control_length), KeyPoint.ORIGIN
            )
        else:
            start_control = segment.point_on(round_coord(control_length), KeyPoint.ORIGIN)

        following = None
        while i + 1 < len(segments):
            if segments[i + 1].length() >= MIN_LINE_LENGTH:
                following = segments[i + 1]
                break
            i += 1

        if following is not None:
            rotated = _rotate(segment.dx, segment.dy, _bisector_angle(segment, following))
            projection = LineSeg(Point(0, 0), rotated).point_on(
                round_coord(control_length), KeyPoint.ORIGIN
            )
            terminus_control = Point(
                segment.terminus.x - projection.x, segment.terminus.y - projection.y
            )
        else:
            terminus_control = segment.point_on(
                round_coord(seg_length - control_length), KeyPoint.ORIGIN
            )

        prev_control = terminus_control
        if emit:
            bezier.extend([start_control, terminus_control, segment.terminus])
        i += 1

    return bezier


def approx_polyline_from_bezier(
    bezier: PointList, steps: int = DEFAULT_BEZIER_LINES
) -> PointList | None:
    """Flatten a Bezier control stream into a polyline.

    Curves share their end points, which are emitted once. Consecutive points
    that round to the same coordinates are merged. The first and last points
    are pinned to the first and last end points of the stream.

    Args:
        bezier: Control stream as produced by calc_bezier
        steps: Line segments per curve, capped at MAX_BEZIER_LINES

    Returns:
        The flattened polyline, or None if the stream holds no complete curve
    """
    if len(bezier) < 4:
        return None
    steps = max(1, min(steps, MAX_BEZIER_LINES))

    result: PointList = []
    for i in range(0, len(bezier) - 3, 3):
        pieces = subdivide_cubic(bezier[i], bezier[i + 1], bezier[i + 2], bezier[i + 3], steps)
        if result:
            pieces = pieces[1:]
        for point in pieces:
            if not result or result[-1] != point:
                result.append(point)

    result[0] = bezier[0]
    if len(result) == 1:
        result.append(bezier[-1])
    else:
        result[-1] = bezier[-1]
    return result


def calc_smooth_polyline(
    points: PointList,
    smooth_factor: int,
    bezier_steps: int = DEFAULT_BEZIER_LINES,
    start_index: int = 0,
    end_index: int | None = None,
) -> PointList | None:
    """Smooth a polyline with Bezier curves.

    Args:
        points: The polyline
        smooth_factor: Curve strength as a percentage of segment length
        bezier_steps: Line segments used per curve
        start_index: First segment to smooth
        end_index: Last segment to smooth, defaults to the last segment

    Returns:
        The smoothed polyline, or None if no curve could be built (fewer than
        2 points, or every segment too short)
    """
    if len(points) < 2:
        return None

    bezier = calc_bezier(points, smooth_factor, start_index, end_index)
    smoothed = approx_polyline_from_bezier(bezier, bezier_steps)
    if smoothed is None:
        logger.debug("No curve could be built for %d points", len(points))
    return smoothed
