"""Routing of polylines around obstacles.

The router walks a connector path looking for the points where it crosses
the boundary of an obstacle. Each entry/exit pair of crossings is replaced by
a detour that follows the obstacle boundary, either the shorter or the longer
way around.

Three obstacle shapes are supported:
- Rectangles, whose box is shrunk when a path end sits inside it
- Arbitrary polygons
- Points, which are wrapped in a small box leaning on the path

All functions return a new point list, or None when the path does not need
to change or cannot be routed.
"""

import logging
from dataclasses import dataclass
from enum import Enum, auto

from polyroute.config import RoutingConfig
from polyroute.core.queries import (
    INTERSECT_TOLERANCE,
    distance_along,
    get_line_segments,
    get_nearest_segment,
    get_points_bounds,
    locate_segment,
    point_on,
    segments_length,
    signed_area,
)
from polyroute.core.smoother import DEFAULT_BEZIER_LINES, calc_smooth_polyline
from polyroute.domain import (
    KeyPoint,
    LineSeg,
    Obstacle,
    Point,
    PointList,
    PointObstacle,
    PolygonObstacle,
    Rectangle,
    Sign,
    round_coord,
)

logger = logging.getLogger(__name__)


class _RouteState(Enum):
    SEEKING = auto()
    DETOURING = auto()


@dataclass(frozen=True)
class _Crossing:
    """A point where the path crosses the obstacle boundary."""

    point: Point
    edge: int
    distance: int


def _append(points: PointList, point: Point) -> None:
    if not points or points[-1] != point:
        points.append(point)


def _dedupe(points: PointList) -> PointList:
    result: PointList = []
    for point in points:
        _append(result, point)
    return result


def _touches(points: PointList, obstacle_bounds: Rectangle) -> bool:
    bounds = get_points_bounds(points)
    if bounds is None:
        return False
    # Grow by one so that horizontal and vertical paths have an area
    return bounds.expanded(1, 1).intersects(obstacle_bounds)


def _ring_from_edges(edges: list[LineSeg]) -> PointList:
    return [edge.origin for edge in edges] + [edges[-1].terminus]


def _shrink_box(edges: list[LineSeg], contained: Point) -> list[LineSeg]:
    """Move the box edge nearest to a contained point onto that point.

    The moved edge stays parallel to the original. Both neighbouring edges
    are stretched or cut so the box stays closed.
    """
    nearest = 0
    min_distance = edges[0].distance_to_point(contained.x, contained.y)
    for index, edge in enumerate(edges[1:], start=1):
        distance = edge.distance_to_point(contained.x, contained.y)
        if distance < min_distance:
            nearest = index
            min_distance = distance

    moved = edges[nearest].parallel_through(contained)
    count = len(edges)
    before = (nearest - 1) % count
    after = (nearest + 1) % count

    adjusted = list(edges)
    adjusted[nearest] = moved
    adjusted[before] = LineSeg(adjusted[before].origin, moved.origin)
    adjusted[after] = LineSeg(moved.terminus, adjusted[after].terminus)
    return adjusted


def _above(edge: LineSeg, point: Point, buffer: int) -> Point:
    if buffer <= 0:
        return point
    return edge.locate_point(edge.distance_along(point), buffer, Sign.POSITIVE)


def _trace_boundary(
    route: PointList,
    edges: list[LineSeg],
    start: int,
    end: int,
    forward: bool,
    buffer: int,
) -> int:
    """Walk the boundary from one edge to another, collecting corners.

    Args:
        route: Points collected so far, extended in place
        edges: Boundary edges
        start: Edge the walk starts on
        end: Edge the walk ends on
        forward: Walk in edge order (True) or against it (False)
        buffer: Clearance of the corners from the boundary

    Returns:
        Length of the walk
    """
    distance = 0
    index = start
    while True:
        edge = edges[index]
        edge_length = edge.length()
        offset = buffer / edge_length if edge_length > 0 else 0.0
        if forward:
            offset += 1.0
            corner = edge.terminus
        else:
            offset = -offset
            corner = edge.origin

        distance = int(distance + route[-1].distance_to(corner))
        if buffer > 0:
            route.append(edge.locate_point(offset, buffer, Sign.POSITIVE))
        else:
            route.append(corner)

        if index == end:
            break
        index = (index + 1) % len(edges) if forward else (index - 1) % len(edges)
        if index == end:
            break
    return distance


def _prune(detour: PointList, before: Point, after: Point, edges: list[LineSeg]) -> PointList:
    """Drop detour points that the path can cut across without hitting the boundary."""
    check = [before, *detour, after]
    kept: PointList = []
    start, skip = check[0], check[1]
    for end in check[2:]:
        probe = LineSeg(start, end)
        if any(probe.intersect(edge, INTERSECT_TOLERANCE) is not None for edge in edges):
            kept.append(skip)
            start = skip
        skip = end
    return kept


def _build_detour(
    first: _Crossing,
    second: _Crossing,
    before: Point,
    after: Point,
    edges: list[LineSeg],
    smooth_factor: int,
    shortest_distance: bool,
    include_intersection_points: bool,
    buffer: int,
) -> PointList:
    """Build the boundary-following replacement between two crossings.

    Args:
        first: Crossing reached first along the path
        second: Crossing reached second along the path
        before: Last path point emitted before the second crossing
        after: First path point after the detour
        edges: Boundary edges of the obstacle
        smooth_factor: Smoothing applied to the detour (0 = none)
        shortest_distance: Keep the shorter walk instead of the longer one
        include_intersection_points: Keep every boundary point without pruning
        buffer: Clearance of the detour from the boundary

    Returns:
        Detour points from the first crossing to the second
    """
    entry = _above(edges[first.edge], first.point, buffer)

    forward = [entry]
    forward_length = _trace_boundary(forward, edges, first.edge, second.edge, True, buffer)
    forward_length = int(forward_length + forward[-1].distance_to(second.point))

    backward = [entry]
    backward_length = _trace_boundary(backward, edges, first.edge, second.edge, False, buffer)
    backward_length = int(backward_length + backward[-1].distance_to(second.point))

    exit_point = _above(edges[second.edge], second.point, buffer)
    forward.append(exit_point)
    backward.append(exit_point)

    if (forward_length < backward_length and shortest_distance) or (
        forward_length > backward_length and not shortest_distance
    ):
        detour = forward
    else:
        detour = backward
    logger.debug(
        "Detour lengths forward=%d backward=%d, taking %s",
        forward_length,
        backward_length,
        "forward" if detour is forward else "backward",
    )

    detour = _dedupe(detour)
    if not include_intersection_points and len(detour) >= 3:
        detour = _prune(detour, before, after, edges)

    if smooth_factor > 0:
        smoothed = calc_smooth_polyline(detour, smooth_factor, DEFAULT_BEZIER_LINES)
        if smoothed is not None:
            detour = smoothed
    return detour


def _route_around_ring(
    points: PointList,
    ring: PointList,
    smooth_factor: int,
    shortest_distance: bool,
    include_intersection_points: bool,
    buffer: int,
) -> PointList | None:
    edges = get_line_segments(ring)
    segments = get_line_segments(points)
    if not edges or not segments:
        return None

    result: PointList = []
    state = _RouteState.SEEKING
    held: _Crossing | None = None
    anchor = 0
    prev_hit: Point | None = None
    travelled = 0
    tolerance = INTERSECT_TOLERANCE * 2

    for seg_index, segment in enumerate(segments):
        seg_length = segment.length()
        rerouted = False

        for edge_index, edge in enumerate(edges):
            hit = segment.intersect(edge, INTERSECT_TOLERANCE)
            if hit is None:
                continue

            # A hit next to the previous one is the same crossing seen on an adjacent edge
            if (
                prev_hit is None
                or abs(prev_hit.x - hit.x) > tolerance
                or abs(prev_hit.y - hit.y) > tolerance
            ):
                crossing = _Crossing(
                    hit, edge_index, travelled + int(segment.distance_along(hit) * seg_length)
                )
                if state is _RouteState.DETOURING and held is not None:
                    first, second = held, crossing
                    if first.distance >= second.distance:
                        first, second = second, first

                    # Pruning starts from the last point emitted before the second crossing
                    before = result[-1]
                    del result[anchor:]
                    detour = _build_detour(
                        first,
                        second,
                        before,
                        segment.terminus,
                        edges,
                        smooth_factor,
                        shortest_distance,
                        include_intersection_points,
                        buffer,
                    )
                    for point in detour:
                        _append(result, point)
                    _append(result, segment.terminus)

                    held = None
                    state = _RouteState.SEEKING
                    rerouted = True
                    break

                held = crossing
                _append(result, segment.origin)
                anchor = len(result)
                state = _RouteState.DETOURING

            prev_hit = hit

        travelled = int(travelled + seg_length)
        if not rerouted:
            _append(result, segment.origin)
            if seg_index == len(segments) - 1:
                _append(result, segment.terminus)

    if state is _RouteState.DETOURING:
        logger.debug("Path enters the obstacle without leaving it, no route")
        return None
    if len(result) == len(points):
        logger.debug("Path does not cross the obstacle")
        return None
    return result


def route_around_poly(
    points: PointList,
    polygon: PointList,
    smooth_factor: int = 0,
    shortest_distance: bool = True,
    include_intersection_points: bool = False,
    buffer: int = 0,
) -> PointList | None:
    """Route a path around a polygon.

    The polygon is closed if needed and re-oriented so that detour buffers
    are pushed outwards.

    Args:
        points: The path to route
        polygon: Polygon vertices
        smooth_factor: Smoothing applied to each detour (0 = sharp corners)
        shortest_distance: Go the shorter way around (False for the longer)
        include_intersection_points: Keep every boundary point of the detour
        buffer: Clearance kept from the polygon

    Returns:
        The routed path, or None if it does not cross the polygon or cannot
        be routed
    """
    if len(points) < 2 or len(polygon) < 3:
        return None

    ring = list(polygon)
    if ring[0] != ring[-1]:
        ring.append(ring[0])
    if signed_area(ring) < 0:
        ring.reverse()

    bounds = get_points_bounds(ring)
    if bounds is None or not _touches(points, bounds):
        logger.debug("Path bounds miss polygon %s", bounds)
        return None

    return _route_around_ring(
        points, ring, smooth_factor, shortest_distance, include_intersection_points, buffer
    )


def route_around_rect(
    points: PointList,
    rect: Rectangle,
    smooth_factor: int = 0,
    include_intersection_points: bool = False,
    buffer: int = 0,
) -> PointList | None:
    """Route a path around a rectangle, taking the shorter way.

    If an end of the path lies inside the rectangle, the nearest side is
    pulled in to pass through that end, so the path can still leave the box.

    Args:
        points: The path to route
        rect: The rectangle to avoid
        smooth_factor: Smoothing applied to each detour (0 = sharp corners)
        include_intersection_points: Keep every boundary point of the detour
        buffer: Clearance kept from the rectangle

    Returns:
        The routed path, or None if it does not cross the rectangle or cannot
        be routed

    Examples:
        >>> path = [Point(0, 0), Point(50, 0), Point(50, 50), Point(100, 50)]
        >>> route_around_rect(path, Rectangle(40, -10, 20, 70))
        [Point(x=0, y=0), Point(x=40, y=0), Point(x=40, y=60), Point(x=60, y=60), Point(x=60, y=50), Point(x=100, y=50)]
    """
    if len(points) < 2:
        return None
    if not _touches(points, rect):
        logger.debug("Path bounds miss rectangle %s", rect)
        return None

    ring = rect.to_points()
    first, last = points[0], points[-1]
    if rect.contains(first) or rect.contains(last):
        edges = get_line_segments(ring)
        if rect.contains(first):
            edges = _shrink_box(edges, first)
        if rect.contains(last):
            edges = _shrink_box(edges, last)
        ring = _ring_from_edges(edges)

    return _route_around_ring(points, ring, smooth_factor, True, include_intersection_points, buffer)


def route_around_point(
    points: PointList,
    center: Point,
    height: int,
    width: int,
    smooth_factor: int = 0,
    incline_offset: int = 0,
    top: bool = True,
) -> PointList | None:
    """Route a path around a point, for example to clear a label.

    The path is bent out into a box ``width`` long and ``height`` high,
    centered on the projection of ``center`` onto the path. The sides of the
    box lean inwards by ``incline_offset``.

    Args:
        points: The path to route
        center: The point to clear
        height: How far the detour leaves the path
        width: Length of path replaced by the detour
        smooth_factor: Smoothing applied to the detour (0 = sharp corners)
        incline_offset: Inward lean of the detour sides
        top: Bend above the path (True) or below it (False)

    Returns:
        The routed path, or None if the path is degenerate or the detour
        does not fit on it
    """
    segments = get_line_segments(points)
    poly_length = segments_length(segments)
    if poly_length == 0:
        return None

    center_distance = round_coord(distance_along(points, center) * poly_length)
    half_width = width // 2

    mid_start = point_on(points, center_distance - half_width, KeyPoint.ORIGIN)
    mid_end = point_on(points, center_distance + half_width, KeyPoint.ORIGIN)
    if mid_start is None or mid_end is None:
        return None
    line_new = LineSeg(mid_start, mid_end)

    start_info = locate_segment(
        segments, (center_distance - half_width) / poly_length, KeyPoint.ORIGIN
    )
    end_info = locate_segment(
        segments, (center_distance + half_width) / poly_length, KeyPoint.ORIGIN
    )
    if start_info is None or end_info is None:
        return None

    slope = line_new.slope()
    direction = -1 if (top and slope <= 0) or (not top and slope > 0) else 1

    pt_start = line_new.point_on(incline_offset, KeyPoint.ORIGIN)
    pt_end = line_new.point_on(incline_offset, KeyPoint.TERMINUS)
    perpendicular = line_new.perpendicular_slope()
    line_start = LineSeg.from_slope(
        KeyPoint.ORIGIN, pt_start.x, pt_start.y, perpendicular, height, direction
    )
    line_end = LineSeg.from_slope(
        KeyPoint.ORIGIN, pt_end.x, pt_end.y, perpendicular, height, direction
    )

    box = [mid_start, line_start.terminus, line_end.terminus, mid_end, mid_start]
    box_edges = get_line_segments(box)

    result: PointList = []
    found_end = False
    anchor = 0
    for seg_index, segment in enumerate(segments):
        if segment is start_info.segment:
            _append(result, segment.origin)
            anchor = len(result)

        if segment is end_info.segment:
            detour = _build_detour(
                _Crossing(mid_start, 0, 0),
                _Crossing(mid_end, len(box_edges) - 1, 0),
                mid_start,
                mid_end,
                box_edges,
                smooth_factor,
                False,
                True,
                0,
            )
            del result[anchor:]
            for point in detour:
                _append(result, point)
            _append(result, segment.terminus)
            found_end = True
        else:
            _append(result, segment.origin)
            if seg_index == len(segments) - 1:
                _append(result, segment.terminus)

    if not found_end:
        return None
    return result


def _near_path(points: PointList, obstacle: PointObstacle) -> bool:
    center = obstacle.center
    nearest = get_nearest_segment(get_line_segments(points), center.x, center.y)
    if nearest is None:
        return False
    return nearest.distance_to_point(center.x, center.y) <= max(obstacle.width, obstacle.height)


def route_around(
    points: PointList, obstacle: Obstacle, config: RoutingConfig | None = None
) -> PointList | None:
    """Route a path around any supported obstacle.

    Point obstacles are only considered when their center lies within their
    width or height of the path.

    Args:
        points: The path to route
        obstacle: Rectangle, PolygonObstacle or PointObstacle
        config: Routing options, defaults to RoutingConfig()

    Returns:
        The routed path, or None if the path is left unchanged

    Raises:
        TypeError: If the obstacle type is not supported
    """
    config = config or RoutingConfig()
    if isinstance(obstacle, Rectangle):
        return route_around_rect(
            points,
            obstacle,
            config.smooth_factor,
            config.include_intersection_points,
            config.buffer,
        )
    if isinstance(obstacle, PolygonObstacle):
        return route_around_poly(
            points,
            list(obstacle.points),
            config.smooth_factor,
            config.shortest_distance,
            config.include_intersection_points,
            config.buffer,
        )
    if isinstance(obstacle, PointObstacle):
        if not _near_path(points, obstacle):
            logger.debug("Path is clear of point obstacle %s", obstacle.id)
            return None
        return route_around_point(
            points,
            obstacle.center,
            obstacle.height,
            obstacle.width,
            config.smooth_factor,
            obstacle.incline_offset,
            obstacle.top,
        )
    raise TypeError(f"Unsupported obstacle type: {type(obstacle).__name__}")
