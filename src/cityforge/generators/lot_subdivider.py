"""
Recursive lot subdivision of block polygons.
"""

import logging
import random
from typing import List, Sequence

from .city_types import CityLayout
from .geometry import Polygon, Vec2, polygon_area, polygon_bounds, split_polygon

logger = logging.getLogger(__name__)


class LotSubdivider:
    """Cuts polygons along their longer bounding-box axis until lots are small enough."""

    def __init__(self, rng: random.Random, subdivision_depth: int,
                 min_lot_area: float, lot_split_jitter: float):
        self.rng = rng
        self.subdivision_depth = subdivision_depth
        self.min_lot_area = min_lot_area
        self.lot_split_jitter = lot_split_jitter
        self.degenerate_splits = 0

    def run(self, layout: CityLayout) -> int:
        """
        Subdivide the inner polygon of every traced block.

        Returns:
            Total number of lots produced
        """
        total = 0
        for block in layout.blocks:
            if not block.inner_polygon or len(block.inner_polygon) < 3:
                continue
            block.sub_lots = self.subdivide(block.inner_polygon)
            total += len(block.sub_lots)
        logger.info("Subdivided blocks into %d lots (%d degenerate splits kept whole)",
                    total, self.degenerate_splits)
        return total

    def subdivide(self, polygon: Sequence[Vec2]) -> List[Polygon]:
        """Split one polygon into lots, depth first, front side before back."""
        lots: List[Polygon] = []
        self._subdivide(list(polygon), 0, lots)
        return lots

    def _subdivide(self, polygon: Polygon, depth: int, lots: List[Polygon]):
        if depth >= self.subdivision_depth or polygon_area(polygon) < self.min_lot_area:
            lots.append(polygon)
            return

        (min_x, min_z), (max_x, max_z) = polygon_bounds(polygon)
        size_x = max_x - min_x
        size_z = max_z - min_z
        ratio = 0.5 + self.rng.uniform(-self.lot_split_jitter, self.lot_split_jitter)

        if size_x > size_z:
            plane_point = (min_x + size_x * ratio, (min_z + max_z) / 2.0)
            plane_normal = (1.0, 0.0)
        else:
            plane_point = ((min_x + max_x) / 2.0, min_z + size_z * ratio)
            plane_normal = (0.0, 1.0)

        front, back = split_polygon(polygon, plane_point, plane_normal)
        if len(front) < 3 or len(back) < 3:
            self.degenerate_splits += 1
            lots.append(polygon)
            return

        self._subdivide(front, depth + 1, lots)
        self._subdivide(back, depth + 1, lots)
