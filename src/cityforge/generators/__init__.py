"""
City Layout Generator Module

Builds the 2D plan of a city: the road graph, the blocks between roads
and the lots inside each block.
"""

from .city_types import Bounds, CityBlock, CityLayout, JunctionCorners
from .road_graph import RoadGraph, RoadSegment
from .subdivider import SpatialSubdivider, SplitDirection, Rect
from .consolidation import ConsolidationReport, NodeConsolidator, NodeJitterer
from .junctions import build_junction_corners, junction_corners
from .block_tracer import BlockShapeTracer
from .lot_subdivider import LotSubdivider

__all__ = [
    'Bounds',
    'CityBlock',
    'CityLayout',
    'JunctionCorners',
    'RoadGraph',
    'RoadSegment',
    'SpatialSubdivider',
    'SplitDirection',
    'Rect',
    'ConsolidationReport',
    'NodeConsolidator',
    'NodeJitterer',
    'build_junction_corners',
    'junction_corners',
    'BlockShapeTracer',
    'LotSubdivider',
]
