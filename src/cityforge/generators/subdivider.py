"""
Recursive spatial subdivision of the city area into blocks.

Works like a BSP split: each rectangle is cut in two along its shorter
direction until it is small enough or deep enough to become a block.
Every cut is inserted into the road graph immediately, and the cut's two
endpoint nodes are handed to both children as shared corners so that
neighbouring blocks agree on the node identity of their common edge.
"""

import logging
import random
from dataclasses import dataclass
from enum import Enum, auto
from typing import List

from .city_types import Bounds, CityBlock
from .geometry import lerp
from .road_graph import RoadGraph

logger = logging.getLogger(__name__)

# Split axis is forced once one side is this much longer than the other.
ASPECT_FORCE_RATIO = 1.5


class SplitDirection(Enum):
    """Direction of a subdivision cut"""
    HORIZONTAL = auto()  # Cut line runs along X, splitting Z
    VERTICAL = auto()    # Cut line runs along Z, splitting X


@dataclass
class Rect:
    """Rectangle in the horizontal plane (x, z origin plus size)"""
    x: float
    z: float
    width: float
    height: float

    @property
    def x2(self) -> float:
        return self.x + self.width

    @property
    def z2(self) -> float:
        return self.z + self.height

    @classmethod
    def from_bounds(cls, bounds: Bounds) -> 'Rect':
        return cls(bounds.min_x, bounds.min_z, bounds.width, bounds.height)


class SpatialSubdivider:
    """Partitions a rectangle into blocks, threading every cut through a RoadGraph."""

    def __init__(self, graph: RoadGraph, rng: random.Random, max_depth: int,
                 min_block_size: float, split_jitter: float):
        self.graph = graph
        self.rng = rng
        self.max_depth = max_depth
        self.min_block_size = min_block_size
        self.split_jitter = split_jitter
        self.blocks: List[CityBlock] = []

    def run(self, bounds: Bounds) -> List[CityBlock]:
        """
        Subdivide the whole generation area.

        Draws the outer boundary, registers the four outer corners and
        recurses.  Adjacency is rebuilt once at the end.

        Args:
            bounds: Generation area

        Returns:
            Blocks in the order they were emitted
        """
        self.blocks = []
        area = Rect.from_bounds(bounds)
        self._draw_boundary(area)

        bl = self.graph.get_or_add_node((area.x, area.z))
        br = self.graph.get_or_add_node((area.x2, area.z))
        tr = self.graph.get_or_add_node((area.x2, area.z2))
        tl = self.graph.get_or_add_node((area.x, area.z2))
        self._subdivide(area, 0, tl, tr, br, bl)

        self.graph.rebuild_adjacency()
        logger.info("Subdivision produced %d blocks, %d nodes, %d segments",
                    len(self.blocks), self.graph.node_count, self.graph.segment_count)
        return self.blocks

    def _draw_boundary(self, area: Rect):
        tl = (area.x, area.z2)
        tr = (area.x2, area.z2)
        br = (area.x2, area.z)
        bl = (area.x, area.z)
        self.graph.insert_segment(tl, tr)
        self.graph.insert_segment(tr, br)
        self.graph.insert_segment(br, bl)
        self.graph.insert_segment(bl, tl)

    def choose_direction(self, area: Rect) -> SplitDirection:
        """Cut across the longer side; force it for elongated rectangles."""
        horizontal = area.width < area.height
        if area.width > area.height * ASPECT_FORCE_RATIO:
            horizontal = False
        elif area.height > area.width * ASPECT_FORCE_RATIO:
            horizontal = True
        return SplitDirection.HORIZONTAL if horizontal else SplitDirection.VERTICAL

    def _is_leaf(self, area: Rect, depth: int) -> bool:
        if depth >= self.max_depth:
            return True
        limit = self.min_block_size * 2.0
        return area.width < limit and area.height < limit

    def _subdivide(self, area: Rect, depth: int, tl: int, tr: int, br: int, bl: int):
        if self._is_leaf(area, depth):
            self.blocks.append(CityBlock(tl, tr, br, bl))
            return

        direction = self.choose_direction(area)
        t = self.rng.uniform(0.4 - self.split_jitter, 0.6 + self.split_jitter)

        if direction == SplitDirection.HORIZONTAL:
            split_z = lerp(area.z, area.z2, t)
            start = (area.x, split_z)
            end = (area.x2, split_z)
            self.graph.insert_segment(start, end)

            ml = self.graph.get_or_add_node(start)
            mr = self.graph.get_or_add_node(end)

            lower = Rect(area.x, area.z, area.width, split_z - area.z)
            upper = Rect(area.x, split_z, area.width, area.z2 - split_z)
            self._subdivide(lower, depth + 1, ml, mr, br, bl)
            self._subdivide(upper, depth + 1, tl, tr, mr, ml)
        else:
            split_x = lerp(area.x, area.x2, t)
            start = (split_x, area.z)
            end = (split_x, area.z2)
            self.graph.insert_segment(start, end)

            mb = self.graph.get_or_add_node(start)
            mt = self.graph.get_or_add_node(end)

            left = Rect(area.x, area.z, split_x - area.x, area.height)
            right = Rect(split_x, area.z, area.x2 - split_x, area.height)
            self._subdivide(left, depth + 1, tl, mt, mb, bl)
            self._subdivide(right, depth + 1, mt, tr, br, mb)
