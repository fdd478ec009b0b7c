"""
Read-only debug overlay for viewers.

Flattens a CityLayout into plain line lists and node markers so a viewer
can draw the road graph, block outlines and lots without touching the
generator's own structures.
"""

from dataclasses import dataclass, field
from typing import List, Tuple

from cityforge.generators.city_types import CityLayout
from cityforge.generators.geometry import Polygon, Vec2

from .graph_export import degree_class

Line = Tuple[Vec2, Vec2]


@dataclass(frozen=True)
class NodeMarker:
    index: int
    position: Vec2
    degree: int
    kind: str   # dead_end, pass_through or junction


@dataclass
class DebugOverlay:
    road_lines: List[Line] = field(default_factory=list)
    block_outlines: List[Polygon] = field(default_factory=list)
    buildable_outlines: List[Polygon] = field(default_factory=list)
    lot_outlines: List[Polygon] = field(default_factory=list)
    nodes: List[NodeMarker] = field(default_factory=list)

    @staticmethod
    def outline_lines(polygon: Polygon) -> List[Line]:
        """Closed edge list of a polygon."""
        n = len(polygon)
        return [(polygon[i], polygon[(i + 1) % n]) for i in range(n)]


def build_debug_overlay(layout: CityLayout) -> DebugOverlay:
    """Collect the drawable pieces of a layout.

    Stale blocks and nodes without roads are left out.
    """
    graph = layout.graph
    overlay = DebugOverlay()

    for seg in sorted(graph.segments):
        overlay.road_lines.append(graph.segment_endpoints(seg))

    for index, position in enumerate(graph.nodes):
        degree = graph.degree(index)
        if degree == 0:
            continue
        overlay.nodes.append(NodeMarker(index, position, degree, degree_class(degree)))

    for _, block in layout.valid_blocks():
        overlay.block_outlines.append(block.logical_outline(graph.nodes))
        if block.inner_polygon:
            overlay.buildable_outlines.append(list(block.inner_polygon))
        for lot in block.sub_lots or []:
            overlay.lot_outlines.append(list(lot))

    return overlay
