"""
Junction quad corners.

Every connected node gets a square of half road width around it.  The
same four corners are used to stitch road quads between junctions and to
inset block outlines, which keeps the road mesh and the buildable areas
sharing exact edges.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from .city_types import JunctionCorners
from .geometry import Vec2, add, cross_y, dot, normalize, sub
from .road_graph import RoadGraph


def junction_corners(center: Vec2, road_width: float,
                     facing: Optional[Vec2] = None) -> List[Vec2]:
    """Corners of one junction quad in BL, TL, TR, BR order.

    Args:
        center: Node position
        road_width: Full road width; the quad has half of it on each side
        facing: Optional direction the quad's local +Z should point at.
            Used for dead ends; everything else stays axis-aligned.

    Returns:
        Four world-space corners
    """
    hw = road_width / 2.0
    local = [(-hw, -hw), (-hw, hw), (hw, hw), (hw, -hw)]

    if facing is None:
        return [add(center, c) for c in local]

    forward = normalize(facing)
    if forward == (0.0, 0.0):
        return [add(center, c) for c in local]
    right = (forward[1], -forward[0])
    return [
        (center[0] + lx * right[0] + lz * forward[0],
         center[1] + lx * right[1] + lz * forward[1])
        for lx, lz in local
    ]


def build_junction_corners(graph: RoadGraph, road_width: float) -> JunctionCorners:
    """Compute corners for every node with at least one road."""
    corners: JunctionCorners = {}
    for i, center in enumerate(graph.nodes):
        neighbors = graph.neighbors(i)
        if not neighbors:
            continue
        facing = None
        if len(neighbors) == 1:
            facing = sub(graph.nodes[neighbors[0]], center)
        corners[i] = junction_corners(center, road_width, facing)
    return corners


def facing_corners(center: Vec2, corners: List[Vec2], direction: Vec2) -> Tuple[Vec2, Vec2]:
    """The two corners that best face ``direction`` from ``center``.

    Ties keep corner order, so the result is stable for axis-aligned quads.
    """
    ranked = sorted(
        corners,
        key=lambda c: dot(normalize(sub(c, center)), direction),
        reverse=True,
    )
    return ranked[0], ranked[1]


def side_corner(center: Vec2, corners: List[Vec2], toward: Vec2,
                reference: Vec2, left: bool = True) -> Vec2:
    """Pick the facing corner on one side of a travel direction.

    Args:
        center: Junction node position
        corners: The junction's four corners
        toward: Position of the neighbour the corners should face
        reference: Direction of travel used to decide left and right
        left: Return the left corner when True, else the right one
    """
    direction = normalize(sub(toward, center))
    c1, c2 = facing_corners(center, corners, direction)
    cross1 = cross_y(reference, normalize(sub(c1, center)))
    cross2 = cross_y(reference, normalize(sub(c2, center)))
    if left:
        return c1 if cross1 > cross2 else c2
    return c1 if cross1 < cross2 else c2
