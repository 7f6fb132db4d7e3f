"""
Geometry engine for IndoorSense.

Pure functions for converting between map space and screen space and for
ray-casting hit-tests. Nothing here keeps state and nothing here raises:
degenerate input (empty polygons, zero-sized viewports, malformed points)
resolves to a well-defined fallback value.
"""

import math
from typing import List, Sequence, Tuple

from indoorsense.config import GeometryConfig
from indoorsense.utils.coords import Coords, Rect, Size

Point = Sequence[float]
Polygon = Sequence[Point]


def is_valid_point(point: Point) -> bool:
    """
    A point is usable when it has at least two components.
    """
    try:
        return len(point) >= 2
    except TypeError:
        return False


def valid_points(polygon: Polygon) -> List[Tuple[float, float]]:
    """
    Returns the (x, y) pairs of a polygon, skipping points with fewer than two components.
    """
    return [(float(p[0]), float(p[1])) for p in polygon if is_valid_point(p)]


def polygon_centroid(polygon: Polygon) -> Coords:
    """
    Arithmetic mean of the valid points of a polygon, or (0, 0) if there are none.
    """
    points = valid_points(polygon)
    if not points:
        return Coords.ZERO
    total_x = sum(p[0] for p in points)
    total_y = sum(p[1] for p in points)
    return Coords(total_x / len(points), total_y / len(points))


def compute_scale_and_offset(viewport: Size, map_rect: Rect,
                             padding: float = GeometryConfig.VIEWPORT_PADDING) -> Tuple[float, Coords]:
    """
    Fit `map_rect` into `viewport` preserving aspect ratio and center it.

    Args:
        viewport (Size): Size of the drawing surface in screen points
        map_rect (Rect): Bounding rectangle of the floor plan in map space
        padding (float): Margin kept free on every side of the viewport

    Returns:
        tuple: (scale, offset) such that screen = map * scale + offset.
               A degenerate map rectangle yields the identity (1.0, (0, 0)).
    """
    if map_rect.is_degenerate:
        return 1.0, Coords.ZERO

    available_width = viewport.width - padding * 2
    available_height = viewport.height - padding * 2

    scale_x = available_width / map_rect.width
    scale_y = available_height / map_rect.height
    scale = min(scale_x, scale_y)

    scaled_width = map_rect.width * scale
    scaled_height = map_rect.height * scale
    offset_x = (viewport.width - scaled_width) / 2 - map_rect.min_x * scale
    offset_y = (viewport.height - scaled_height) / 2 - map_rect.min_y * scale

    return scale, Coords(offset_x, offset_y)


def to_screen(map_point: Coords, scale: float, offset: Coords) -> Coords:
    """
    Map space to screen space.
    """
    return map_point * scale + offset


def to_map(screen_point: Coords, scale: float, offset: Coords) -> Coords:
    """
    Screen space to map space, the exact inverse of `to_screen`.
    A zero or non-finite scale passes the point through unchanged.
    """
    if scale == 0 or not math.isfinite(scale):
        return screen_point
    return (screen_point - offset) / scale


def canvas_to_map(screen_point: Coords, viewport: Size, map_rect: Rect,
                  padding: float = GeometryConfig.VIEWPORT_PADDING) -> Coords:
    """
    Convert a touch in the viewport to map coordinates.

    Uses the same scale and offset as rendering so hit-testing agrees with
    what is displayed. A degenerate viewport or map returns the point unchanged.
    """
    if viewport.is_degenerate or map_rect.is_degenerate:
        return screen_point

    scale, offset = compute_scale_and_offset(viewport, map_rect, padding)
    return to_map(screen_point, scale, offset)


def point_in_polygon(point: Point, polygon: Polygon,
                     epsilon: float = GeometryConfig.EPSILON) -> bool:
    """
    Crossing-number (ray-casting) point-in-polygon test.

    A horizontal ray is cast from the point towards +x and the number of
    polygon edges it crosses is counted; an odd count means inside.
    Edges with a malformed endpoint and edges with a near-zero y-span are
    skipped. Points exactly on the boundary may go either way.

    Args:
        point: (x, y) to test
        polygon: Sequence of vertices, implicitly closed

    Returns:
        bool: True if the point is inside. Polygons with fewer than 3 points are never hit.
    """
    if not is_valid_point(point) or len(polygon) < 3:
        return False

    px, py = float(point[0]), float(point[1])
    inside = False
    j = len(polygon) - 1

    for i in range(len(polygon)):
        if not (is_valid_point(polygon[i]) and is_valid_point(polygon[j])):
            j = i
            continue

        xi, yi = float(polygon[i][0]), float(polygon[i][1])
        xj, yj = float(polygon[j][0]), float(polygon[j][1])

        if (yi > py) != (yj > py):
            denom = yj - yi
            if abs(denom) > epsilon:
                intercept_x = (xj - xi) * (py - yi) / denom + xi
                if px < intercept_x:
                    inside = not inside
        j = i

    return inside
