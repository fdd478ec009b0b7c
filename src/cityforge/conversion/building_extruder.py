"""
Building extrusion from lot footprints.

Each footprint becomes a prism: one wall quad per edge and a flat roof.
Walls and roof never share vertices, so every face keeps its own normal
(flat shading).  No floor is emitted since buildings sit on the ground.
"""

from __future__ import annotations

import logging
import math
import random
from typing import Optional, Sequence

from cityforge.generators.city_types import CityLayout
from cityforge.generators.geometry import UP, Vec2, ensure_ccw, lift, normalize3

from .mesh_buffers import MeshAccumulator, MeshBuffers

logger = logging.getLogger(__name__)


def extrude_footprint(footprint: Sequence[Vec2], height: float, mesh: MeshAccumulator) -> bool:
    """
    Append a flat-shaded prism for one footprint.

    For N footprint vertices this adds 4N wall vertices followed by N roof
    vertices, 6N wall indices and 3(N - 2) roof indices.

    Args:
        footprint: Lot polygon in the horizontal plane
        height: Extrusion height along +Y
        mesh: Accumulator receiving the geometry

    Returns:
        False when the footprint has fewer than 3 vertices and was skipped
    """
    if footprint is None or len(footprint) < 3:
        return False

    ring = ensure_ccw(footprint)
    n = len(ring)

    for i in range(n):
        p1 = ring[i]
        p2 = ring[(i + 1) % n]
        dx = p2[0] - p1[0]
        dz = p2[1] - p1[1]
        # up x (p2 - p1)
        normal = normalize3((dz, 0.0, -dx))

        v = mesh.add_vertex(lift(p1), normal)
        mesh.add_vertex(lift(p1, height), normal)
        mesh.add_vertex(lift(p2, height), normal)
        mesh.add_vertex(lift(p2), normal)
        mesh.add_quad(v)

    roof = mesh.vertex_count
    for p in ring:
        mesh.add_vertex(lift(p, height), UP)
    for i in range(1, n - 1):
        mesh.add_triangle(roof, roof + i + 1, roof + i)
    return True


class BuildingExtruder:
    """Turns every lot of every block into building geometry."""

    def __init__(self, rng: random.Random, min_height: float, max_height: float,
                 floor_height: float = 0.0):
        self.rng = rng
        self.min_height = min_height
        self.max_height = max_height
        self.floor_height = floor_height
        self.building_count = 0

    def pick_height(self) -> float:
        """Random building height, snapped to whole storeys when floor_height is set."""
        height = self.rng.uniform(self.min_height, self.max_height)
        if self.floor_height > 0:
            fh = self.floor_height
            # Storey counts whose height lies inside the configured range
            lowest = max(1, int(math.ceil(self.min_height / fh)))
            highest = max(1, int(math.floor(self.max_height / fh)))
            floors = int(math.floor(height / fh + 0.5))
            height = min(max(floors, lowest), highest) * fh
        return height

    def build(self, layout: CityLayout, mesh: Optional[MeshAccumulator] = None) -> MeshBuffers:
        mesh = mesh or MeshAccumulator()
        self.building_count = 0
        for block in layout.blocks:
            if not block.sub_lots:
                continue
            for lot in block.sub_lots:
                height = self.pick_height()
                if extrude_footprint(lot, height, mesh):
                    self.building_count += 1

        result = mesh.build()
        logger.info("Extruded %d buildings: %d vertices, %d triangles",
                    self.building_count, result.vertex_count, result.triangle_count)
        return result
