"""
Validation check modules.

Each module provides specific validation checks:
- graph_checks: Road graph structure and node spacing
- block_checks: Block perimeters, buildable polygons and lots
"""

from .graph_checks import (
    validate_road_graph,
    check_segments,
    check_node_spacing,
)

from .block_checks import (
    validate_blocks,
    check_block,
    perimeter_problem,
    LOT_AREA_TOLERANCE,
)

__all__ = [
    # Graph
    'validate_road_graph',
    'check_segments',
    'check_node_spacing',
    # Blocks
    'validate_blocks',
    'check_block',
    'perimeter_problem',
    'LOT_AREA_TOLERANCE',
]
