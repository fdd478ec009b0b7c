"""
Road mesh construction from the frozen road graph.

Two passes over the graph:
1. A junction quad for every connected node.
2. A connecting quad for every segment, stitched between the facing edges
   of its two junction quads.

Because each road quad reuses the exact corner positions of the junctions
at either end, the seams between the two passes stay watertight.
"""

from __future__ import annotations

import logging
from typing import List, Tuple

from cityforge.generators.city_types import CityLayout
from cityforge.generators.geometry import Vec2, cross_y, distance, lift, normalize, sub
from cityforge.generators.junctions import facing_corners
from cityforge.generators.road_graph import RoadSegment

from .mesh_buffers import MeshAccumulator, MeshBuffers

logger = logging.getLogger(__name__)


class RoadMesher:
    """Builds the road surface mesh for a city layout.

    Junction corners must already be stored on the layout; see
    ``build_junction_corners``.
    """

    def __init__(self, layout: CityLayout):
        self.layout = layout
        self.skipped_segments: List[RoadSegment] = []

    def build(self) -> MeshBuffers:
        mesh = MeshAccumulator(with_colors=True)
        self.skipped_segments = []

        for node in sorted(self.layout.junction_corners):
            self._add_junction(mesh, self.layout.junction_corners[node])
        junction_vertices = mesh.vertex_count

        for seg in sorted(self.layout.graph.segments):
            if not self._add_road(mesh, seg):
                self.skipped_segments.append(seg)

        result = mesh.build()
        logger.info("Road mesh: %d junction + %d road vertices, %d triangles (%d segments skipped)",
                    junction_vertices, result.vertex_count - junction_vertices,
                    result.triangle_count, len(self.skipped_segments))
        return result

    def _add_junction(self, mesh: MeshAccumulator, corners: List[Vec2]):
        start = mesh.vertex_count
        for corner in corners:
            mesh.add_vertex(lift(corner))
        mesh.add_quad(start)

    def _add_road(self, mesh: MeshAccumulator, seg: RoadSegment) -> bool:
        corners = self.layout.junction_corners
        if seg.a not in corners or seg.b not in corners:
            logger.debug("Segment %d-%d has an endpoint without junction corners", seg.a, seg.b)
            return False

        p_a, p_b = self.layout.graph.segment_endpoints(seg)
        a1, b1, b2, a2 = road_quad(p_a, corners[seg.a], p_b, corners[seg.b])

        start = mesh.vertex_count
        for corner in (a1, b1, b2, a2):
            mesh.add_vertex(lift(corner))
        mesh.add_quad(start)
        return True


def road_quad(p_a: Vec2, corners_a: List[Vec2],
              p_b: Vec2, corners_b: List[Vec2]) -> Tuple[Vec2, Vec2, Vec2, Vec2]:
    """Counter-clockwise quad (A1, B1, B2, A2) joining two junctions.

    Takes the two corners of each junction that face the other end, pairs
    them so the connecting edges do not cross, then flips the winding if
    needed so the quad faces up.
    """
    direction = normalize(sub(p_b, p_a))
    a1, a2 = facing_corners(p_a, corners_a, direction)
    b1, b2 = facing_corners(p_b, corners_b, (-direction[0], -direction[1]))

    # Pick the pairing with the shorter connecting edges to avoid a twisted quad
    direct = distance(a1, b1) + distance(a2, b2)
    swapped = distance(a1, b2) + distance(a2, b1)
    if swapped < direct:
        b1, b2 = b2, b1

    if cross_y(sub(b1, a1), sub(a2, a1)) < 0:
        a1, a2 = a2, a1
        b1, b2 = b2, b1
    return a1, b1, b2, a2
