"""
Rasterization primitives for City Designer.

Integer-only line and circle rasterizers. Roads are rasterized lines,
parks, the fountain and radial rings are rasterized circles.
"""

from typing import List

from ..models.geometry import Point


def bresenham_line(x0: int, y0: int, x1: int, y1: int) -> List[Point]:
    """
    Rasterize a segment with Bresenham's algorithm.

    Works in every octant using an accumulated error term. The result
    is 8-connected, starts at (x0, y0), ends at (x1, y1) and has exactly
    max(|dx|, |dy|) + 1 points.

    Args:
        x0, y0: Start point
        x1, y1: End point

    Returns:
        Ordered list of points from start to end
    """
    points: List[Point] = []

    dx = abs(x1 - x0)
    dy = -abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx + dy

    x, y = x0, y0
    while True:
        points.append(Point(x, y))
        if x == x1 and y == y1:
            break

        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x += sx
        if e2 <= dx:
            err += dx
            y += sy

    return points


def midpoint_circle(center_x: int, center_y: int, radius: int) -> List[Point]:
    """
    Rasterize a circle boundary with the midpoint algorithm.

    One octant is walked with an integer decision variable and each
    step is reflected into the other seven, so points are appended
    eight at a time. Octant seams produce repeated points; they are
    kept so the point count depends only on the radius.

    Args:
        center_x, center_y: Circle center
        radius: Circle radius

    Returns:
        Boundary points; empty for a negative radius and the single
        center point for radius 0
    """
    if radius < 0:
        return []
    if radius == 0:
        return [Point(center_x, center_y)]

    points: List[Point] = []

    x = 0
    y = radius
    d = 1 - radius

    while x <= y:
        points.extend((
            Point(center_x + x, center_y + y),
            Point(center_x - x, center_y + y),
            Point(center_x + x, center_y - y),
            Point(center_x - x, center_y - y),
            Point(center_x + y, center_y + x),
            Point(center_x - y, center_y + x),
            Point(center_x + y, center_y - x),
            Point(center_x - y, center_y - x),
        ))

        x += 1
        if d < 0:
            d += 2 * x + 1
        else:
            y -= 1
            d += 2 * (x - y) + 1

    return points
