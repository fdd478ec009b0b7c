"""
Block perimeter recovery.

A block only remembers its four corner nodes, but the roads around it may
have been split by later cuts that T into its edges.  The tracer walks the
frozen road graph between consecutive corners to recover the full
perimeter, then builds the buildable polygon from the junction corners
that face into the block.
"""

import logging
from typing import List, Tuple

from .city_types import CityBlock, CityLayout
from .geometry import Polygon, Vec2, distance, sub
from .junctions import side_corner

logger = logging.getLogger(__name__)

DUPLICATE_VERTEX_TOLERANCE = 0.001


class BlockShapeTracer:
    """Fills in ``full_perimeter`` and ``inner_polygon`` for every block."""

    def __init__(self, layout: CityLayout):
        self.layout = layout
        self.graph = layout.graph
        self.skipped: List[int] = []

    def run(self) -> int:
        """
        Trace every block with valid corners.

        Returns:
            Number of blocks traced
        """
        self.skipped = []
        traced = 0
        node_count = self.graph.node_count
        for index, block in enumerate(self.layout.blocks):
            if not block.has_valid_corners(node_count):
                logger.warning("Block %d has stale corners %s (node count %d); skipping",
                               index, block.corners, node_count)
                self.skipped.append(index)
                continue
            block.full_perimeter = self.trace_perimeter(block)
            block.inner_polygon = self.build_inner_polygon(block.full_perimeter)
            traced += 1

        logger.info("Traced %d blocks (%d skipped)", traced, len(self.skipped))
        return traced

    def trace_perimeter(self, block: CityBlock) -> List[int]:
        """Closed loop of node indices around the block, start not repeated."""
        perimeter = [block.tl]
        for start, end in ((block.tl, block.tr), (block.tr, block.br),
                           (block.br, block.bl), (block.bl, block.tl)):
            perimeter.extend(self.graph.find_path(start, end))

        deduped: List[int] = []
        for node in perimeter:
            if not deduped or deduped[-1] != node:
                deduped.append(node)
        if len(deduped) > 1 and deduped[0] == deduped[-1]:
            deduped.pop()
        return deduped

    def build_inner_polygon(self, perimeter: List[int]) -> Polygon:
        """Road-width-inset outline built from junction corners along the perimeter."""
        count = len(perimeter)
        vertices: Polygon = []
        for j in range(count):
            prev = perimeter[(j + count - 1) % count]
            curr = perimeter[j]
            nxt = perimeter[(j + 1) % count]

            incoming, outgoing = self._corner_pair(prev, curr, nxt)
            vertices.append(incoming)
            vertices.append(outgoing)

        cleaned: Polygon = []
        for v in vertices:
            if cleaned and distance(v, cleaned[-1]) < DUPLICATE_VERTEX_TOLERANCE:
                continue
            cleaned.append(v)
        if len(cleaned) > 1 and distance(cleaned[0], cleaned[-1]) < DUPLICATE_VERTEX_TOLERANCE:
            cleaned.pop()
        return cleaned

    def _corner_pair(self, prev: int, curr: int, nxt: int) -> Tuple[Vec2, Vec2]:
        nodes = self.graph.nodes
        center = nodes[curr]
        corners = self.layout.junction_corners.get(curr)
        if corners is None:
            return center, center

        # Left of the road arriving from prev, then left of the road leaving to next
        incoming = side_corner(center, corners, nodes[prev], sub(center, nodes[prev]))
        outgoing = side_corner(center, corners, nodes[nxt], sub(nodes[nxt], center))
        return incoming, outgoing
