"""
Planar geometry helpers for city generation.

All road-graph math happens in the horizontal plane, so points are plain
``(x, z)`` tuples.  Mesh output lifts them to ``(x, y, z)`` with Y up.
"""

from __future__ import annotations

import math
from typing import List, Optional, Sequence, Tuple

Vec2 = Tuple[float, float]
Vec3 = Tuple[float, float, float]
Polygon = List[Vec2]

EPSILON = 1e-6

# Parameters must fall strictly inside this window to count as a hit.
# Keeps endpoint touches from splitting a segment into slivers.
SEGMENT_PARAM_MIN = 0.01
SEGMENT_PARAM_MAX = 0.99

PARALLEL_TOLERANCE = 1e-4

UP: Vec3 = (0.0, 1.0, 0.0)


# ---------------------------------------------------------------------------
# Vector math
# ---------------------------------------------------------------------------

def add(a: Vec2, b: Vec2) -> Vec2:
    return (a[0] + b[0], a[1] + b[1])


def sub(a: Vec2, b: Vec2) -> Vec2:
    return (a[0] - b[0], a[1] - b[1])


def scale(v: Vec2, s: float) -> Vec2:
    return (v[0] * s, v[1] * s)


def dot(a: Vec2, b: Vec2) -> float:
    return a[0] * b[0] + a[1] * b[1]


def length(v: Vec2) -> float:
    return math.sqrt(v[0] * v[0] + v[1] * v[1])


def distance(a: Vec2, b: Vec2) -> float:
    return length(sub(a, b))


def distance_sq(a: Vec2, b: Vec2) -> float:
    dx = a[0] - b[0]
    dz = a[1] - b[1]
    return dx * dx + dz * dz


def normalize(v: Vec2) -> Vec2:
    ln = length(v)
    if ln < EPSILON:
        return (0.0, 0.0)
    return (v[0] / ln, v[1] / ln)


def cross_y(u: Vec2, v: Vec2) -> float:
    """Vertical component of the 3D cross product of two horizontal vectors.

    With u = (ux, 0, uz) and v = (vx, 0, vz), (u x v).y = uz*vx - ux*vz.
    Positive means v lies to the left of u when walking the road graph.
    """
    return u[1] * v[0] - u[0] * v[1]


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def lerp_point(a: Vec2, b: Vec2, t: float) -> Vec2:
    return (a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t)


def lift(p: Vec2, y: float = 0.0) -> Vec3:
    """Lift a planar point into 3D with the given height."""
    return (p[0], y, p[1])


def normalize3(v: Vec3) -> Vec3:
    ln = math.sqrt(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])
    if ln < EPSILON:
        return UP
    return (v[0] / ln, v[1] / ln, v[2] / ln)


# ---------------------------------------------------------------------------
# Line tests
# ---------------------------------------------------------------------------

def line_intersection(p1: Vec2, p2: Vec2, p3: Vec2, p4: Vec2) -> Optional[Vec2]:
    """Intersect segment p1-p2 with segment p3-p4.

    Both interpolation parameters must lie strictly inside the segment
    window; touching at (or near) an endpoint is not a crossing.

    Returns:
        The crossing point, or None for parallel or non-crossing segments.
    """
    denom = (p4[1] - p3[1]) * (p2[0] - p1[0]) - (p4[0] - p3[0]) * (p2[1] - p1[1])
    if abs(denom) < PARALLEL_TOLERANCE:
        return None
    ua = ((p4[0] - p3[0]) * (p1[1] - p3[1]) - (p4[1] - p3[1]) * (p1[0] - p3[0])) / denom
    ub = ((p2[0] - p1[0]) * (p1[1] - p3[1]) - (p2[1] - p1[1]) * (p1[0] - p3[0])) / denom
    if (SEGMENT_PARAM_MIN < ua < SEGMENT_PARAM_MAX
            and SEGMENT_PARAM_MIN < ub < SEGMENT_PARAM_MAX):
        return (p1[0] + ua * (p2[0] - p1[0]), p1[1] + ua * (p2[1] - p1[1]))
    return None


def project_onto_segment(p: Vec2, a: Vec2, b: Vec2) -> Optional[Tuple[Vec2, float]]:
    """Project p onto segment a-b.

    Returns:
        (closest point, parameter) when the parameter is strictly inside the
        segment window, otherwise None.
    """
    ab = sub(b, a)
    len_sq = dot(ab, ab)
    if len_sq < EPSILON:
        return None
    t = dot(sub(p, a), ab) / len_sq
    if SEGMENT_PARAM_MIN < t < SEGMENT_PARAM_MAX:
        return (a[0] + t * ab[0], a[1] + t * ab[1]), t
    return None


# ---------------------------------------------------------------------------
# Polygons
# ---------------------------------------------------------------------------

def polygon_signed_area(polygon: Sequence[Vec2]) -> float:
    """Shoelace area; positive for counter-clockwise winding."""
    total = 0.0
    n = len(polygon)
    for i in range(n):
        x1, z1 = polygon[i]
        x2, z2 = polygon[(i + 1) % n]
        total += x1 * z2 - x2 * z1
    return total * 0.5


def polygon_area(polygon: Sequence[Vec2]) -> float:
    return abs(polygon_signed_area(polygon))


def ensure_ccw(polygon: Sequence[Vec2]) -> Polygon:
    """Return the polygon with counter-clockwise winding."""
    if polygon_signed_area(polygon) < 0:
        return list(reversed(polygon))
    return list(polygon)


def polygon_bounds(polygon: Sequence[Vec2]) -> Tuple[Vec2, Vec2]:
    """Axis-aligned bounds as ((min_x, min_z), (max_x, max_z))."""
    xs = [p[0] for p in polygon]
    zs = [p[1] for p in polygon]
    return (min(xs), min(zs)), (max(xs), max(zs))


def split_polygon(polygon: Sequence[Vec2], plane_point: Vec2,
                  plane_normal: Vec2) -> Tuple[Polygon, Polygon]:
    """Split a polygon by a vertical plane through plane_point.

    Vertices with non-negative signed distance go to the first side, the
    rest to the second.  A vertex lying on the plane belongs to both, and
    every edge that strictly straddles the plane contributes its crossing
    point to both sides.

    Returns:
        (front, back) vertex lists; either may have fewer than 3 vertices.
    """
    front: Polygon = []
    back: Polygon = []
    n = len(polygon)
    for i in range(n):
        p1 = polygon[i]
        p2 = polygon[(i + 1) % n]
        d1 = dot(sub(p1, plane_point), plane_normal)
        d2 = dot(sub(p2, plane_point), plane_normal)

        if abs(d1) <= 1e-9:
            front.append(p1)
            back.append(p1)
        elif d1 > 0:
            front.append(p1)
        else:
            back.append(p1)

        if (d1 > 1e-9 and d2 < -1e-9) or (d1 < -1e-9 and d2 > 1e-9):
            t = abs(d1) / (abs(d1) + abs(d2))
            crossing = lerp_point(p1, p2, t)
            front.append(crossing)
            back.append(crossing)
    return front, back
