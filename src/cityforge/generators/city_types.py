"""
Shared city layout types.

A CityLayout bundles everything the generation stages produce: the road
graph, the block list and the junction corners that the road mesher and
the block tracer both read.  Blocks are kept in a plain list and updated
in place by index.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .geometry import Polygon, Vec2
from .road_graph import RoadGraph

JunctionCorners = Dict[int, List[Vec2]]


@dataclass
class Bounds:
    """Axis-aligned generation area in the horizontal plane."""
    min_x: float
    min_z: float
    max_x: float
    max_z: float

    @classmethod
    def centered(cls, size_x: float, size_z: float) -> 'Bounds':
        return cls(-size_x / 2.0, -size_z / 2.0, size_x / 2.0, size_z / 2.0)

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_z - self.min_z

    @property
    def area(self) -> float:
        return self.width * self.height

    def is_on_boundary(self, point: Vec2, eps: float = 0.1) -> bool:
        """True when the point sits on one of the outer edges."""
        x, z = point
        on_x = abs(x - self.min_x) < eps or abs(x - self.max_x) < eps
        on_z = abs(z - self.min_z) < eps or abs(z - self.max_z) < eps
        return on_x or on_z


@dataclass
class CityBlock:
    """A subdivision leaf bounded by four corner nodes."""
    tl: int
    tr: int
    br: int
    bl: int
    full_perimeter: Optional[List[int]] = None
    inner_polygon: Optional[Polygon] = None
    sub_lots: Optional[List[Polygon]] = None

    @property
    def corners(self) -> Tuple[int, int, int, int]:
        return (self.tl, self.tr, self.br, self.bl)

    def has_valid_corners(self, node_count: int) -> bool:
        return all(0 <= c < node_count for c in self.corners)

    def remap_corners(self, redirect: Dict[int, int]):
        self.tl = redirect.get(self.tl, self.tl)
        self.tr = redirect.get(self.tr, self.tr)
        self.br = redirect.get(self.br, self.br)
        self.bl = redirect.get(self.bl, self.bl)

    def logical_outline(self, nodes: List[Vec2]) -> Polygon:
        """Corner positions in tl, tr, br, bl order."""
        return [nodes[c] for c in self.corners]


@dataclass
class CityLayout:
    """Road graph, blocks and junction corners of one generated city."""
    bounds: Bounds
    graph: RoadGraph = field(default_factory=RoadGraph)
    blocks: List[CityBlock] = field(default_factory=list)
    junction_corners: JunctionCorners = field(default_factory=dict)

    @property
    def lot_count(self) -> int:
        return sum(len(b.sub_lots) for b in self.blocks if b.sub_lots)

    def valid_blocks(self) -> List[Tuple[int, CityBlock]]:
        """(index, block) pairs whose corners still address real nodes."""
        count = self.graph.node_count
        return [(i, b) for i, b in enumerate(self.blocks) if b.has_valid_corners(count)]
