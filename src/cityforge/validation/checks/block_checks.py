"""
Block and lot validation checks.

- Closed perimeter loops (BLOCK-001)
- Inset buildable polygons (BLOCK-002)
- Stale block corners (BLOCK-003)
- Lots partitioning the buildable polygon (LOT-001)
"""

from typing import List, Optional

from cityforge.generators.city_types import CityBlock, CityLayout
from cityforge.generators.geometry import polygon_area, polygon_signed_area
from cityforge.generators.road_graph import RoadGraph

from ..core import ValidationIssue, ValidationResult, ValidationStage
from ..rules import BLOCK_001, BLOCK_002, BLOCK_003, LOT_001

LOT_AREA_TOLERANCE = 1e-6


def perimeter_problem(perimeter: List[int], graph: RoadGraph) -> Optional[str]:
    """Describe why a perimeter is not a closed road loop, or None if it is."""
    if len(perimeter) < 3:
        return f"only {len(perimeter)} nodes"
    if perimeter[0] == perimeter[-1]:
        return "first node repeated at the end"
    count = len(perimeter)
    for i in range(count):
        a = perimeter[i]
        b = perimeter[(i + 1) % count]
        if a == b:
            return f"node {a} repeated"
        if not graph.has_segment(a, b):
            return f"nodes {a} and {b} are not connected by a road"
    return None


def check_block(index: int, block: CityBlock, layout: CityLayout,
                road_width: float) -> List[ValidationIssue]:
    """Check one traced block.

    Args:
        index: Block index, used for messages
        block: Block to check
        layout: Layout the block belongs to
        road_width: Road width used for generation

    Returns:
        List of ValidationIssue
    """
    issues = []
    location = f"block {index}"
    graph = layout.graph

    if not block.has_valid_corners(graph.node_count):
        issues.append(BLOCK_003.issue(location=location, block=index, corners=block.corners))
        return issues

    if block.full_perimeter is not None:
        reason = perimeter_problem(block.full_perimeter, graph)
        if reason:
            issues.append(BLOCK_001.issue(location=location, block=index, reason=reason))

    inner = block.inner_polygon
    if road_width > 0 and inner and len(inner) >= 3:
        inner_area = polygon_area(inner)
        outer_area = polygon_area(block.logical_outline(graph.nodes))
        if inner_area >= outer_area:
            issues.append(BLOCK_002.issue(location=location, block=index,
                                          inner=inner_area, outer=outer_area))

    if block.sub_lots and inner:
        inner_signed = polygon_signed_area(inner)
        lots_signed = sum(polygon_signed_area(lot) for lot in block.sub_lots)
        tolerance = LOT_AREA_TOLERANCE * max(1.0, abs(inner_signed))
        if abs(lots_signed - inner_signed) > tolerance:
            issues.append(LOT_001.issue(location=location, block=index,
                                        lots=lots_signed, inner=inner_signed))
    return issues


def validate_blocks(layout: CityLayout, road_width: float) -> ValidationResult:
    """Validate every block of a layout."""
    result = ValidationResult(stage=ValidationStage.BLOCKS)
    for index, block in enumerate(layout.blocks):
        for issue in check_block(index, block, layout, road_width):
            result.add_issue(issue)
    return result
