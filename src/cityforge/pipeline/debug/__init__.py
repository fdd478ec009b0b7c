"""Debug utilities for the generation pipeline."""

from .graph_export import export_road_graph_dot, export_city_json, degree_class
from .overlay import DebugOverlay, NodeMarker, build_debug_overlay

__all__ = [
    'export_road_graph_dot',
    'export_city_json',
    'degree_class',
    'DebugOverlay',
    'NodeMarker',
    'build_debug_overlay',
]
