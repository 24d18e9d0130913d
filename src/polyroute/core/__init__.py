"""Core geometry algorithms for polyroute.

This module contains the core algorithms for:

- Polyline normalization (removing redundant points)
- Geometric queries (length, nearest segment, walking along a path)
- Routing paths around rectangle, polygon and point obstacles
- Bezier smoothing of polylines
- Batch routing of whole documents

All geometry functions are designed to be:
- Stateless (safe for use in worker processes)
- Free of side effects, except normalize_segments which edits in place

Key functions:
- normalize_segments: Remove redundant points from a path
- get_points_length: Total path length
- point_on: Point at a distance along a path
- find_intersections: Crossings of two polylines
- route_around_rect / route_around_poly / route_around_point: Detours
- calc_smooth_polyline: Bezier-smoothed copy of a path

Key classes:
- PathProcessor: Routes every connector of a document
"""

from polyroute.core.normalizer import flatten_segments, normalize_segments, same_orientation
from polyroute.core.processor import (
    Detour,
    PathProcessor,
    find_conflicts,
    process_connector,
    route_connector,
)
from polyroute.core.queries import (
    calculate_point_relative_to_line,
    distance_along,
    find_intersections,
    get_line_segments,
    get_nearest_segment,
    get_points_bounds,
    get_points_infimum,
    get_points_length,
    get_points_supremum,
    locate_segment,
    nearest_segment_index,
    pick_closest_point,
    pick_farthest_point,
    point_on,
    segment_distance,
    segments_length,
    signed_area,
)
from polyroute.core.router import (
    route_around,
    route_around_point,
    route_around_poly,
    route_around_rect,
)
from polyroute.core.smoother import (
    DEFAULT_BEZIER_LINES,
    MAX_BEZIER_LINES,
    MIN_LINE_LENGTH,
    approx_polyline_from_bezier,
    calc_bezier,
    calc_smooth_polyline,
)

__all__ = [
    # Smoother constants
    "DEFAULT_BEZIER_LINES",
    "MAX_BEZIER_LINES",
    "MIN_LINE_LENGTH",
    # Processor classes
    "Detour",
    "PathProcessor",
    "approx_polyline_from_bezier",
    "calc_bezier",
    "calc_smooth_polyline",
    "calculate_point_relative_to_line",
    "distance_along",
    "find_conflicts",
    "find_intersections",
    "flatten_segments",
    "get_line_segments",
    "get_nearest_segment",
    "get_points_bounds",
    "get_points_infimum",
    "get_points_length",
    "get_points_supremum",
    "locate_segment",
    "nearest_segment_index",
    "normalize_segments",
    "pick_closest_point",
    "pick_farthest_point",
    "point_on",
    "process_connector",
    "route_around",
    "route_around_point",
    "route_around_poly",
    "route_around_rect",
    "route_connector",
    "same_orientation",
    "segment_distance",
    "segments_length",
    "signed_area",
]
