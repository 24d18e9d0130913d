"""Internal cubic Bezier subdivision.

This is an internal module containing helper functions for
approx_polyline_from_bezier. Not intended for public use.
"""

from polyroute.domain import Point

_Coord = tuple[float, float]
_Cubic = tuple[_Coord, _Coord, _Coord, _Coord]


def _mid(a: _Coord, b: _Coord) -> _Coord:
    return ((a[0] + b[0]) / 2, (a[1] + b[1]) / 2)


def split_cubic(curve: _Cubic) -> tuple[_Cubic, _Cubic]:
    """Split a cubic Bezier curve in half using De Casteljau's algorithm.

    Args:
        curve: Control points (p0, p1, p2, p3)

    Returns:
        Control points of the left and right halves
    """
    p0, p1, p2, p3 = curve

    q1 = _mid(p0, p1)
    m = _mid(p1, p2)
    r2 = _mid(p2, p3)
    q2 = _mid(q1, m)
    r1 = _mid(m, r2)
    # Point on the curve at t=0.5
    q3 = _mid(q2, r1)

    return (p0, q1, q2, q3), (q3, r1, r2, p3)


def subdivide_cubic(p0: Point, p1: Point, p2: Point, p3: Point, steps: int) -> list[Point]:
    """Approximate a cubic Bezier curve by a fixed number of line segments.

    The curve is halved repeatedly until it is made of at least ``steps``
    pieces, so the segment count is the smallest power of two not below
    ``steps``.

    Args:
        p0: Start point
        p1: First control point
        p2: Second control point
        p3: End point
        steps: Minimum number of line segments

    Returns:
        The piece endpoints from p0 to p3, rounded to integer points
    """
    curves: list[_Cubic] = [
        ((p0.x, p0.y), (p1.x, p1.y), (p2.x, p2.y), (p3.x, p3.y))
    ]
    while len(curves) < steps:
        halves: list[_Cubic] = []
        for curve in curves:
            halves.extend(split_cubic(curve))
        curves = halves

    ends = [curve[0] for curve in curves]
    ends.append(curves[-1][3])
    return [Point.of(x, y) for x, y in ends]
