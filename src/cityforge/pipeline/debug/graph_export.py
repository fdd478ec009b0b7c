"""
Graph export utilities for city debugging.

Provides export functions to inspect generated road networks in:
- DOT format (Graphviz) for visual graph inspection
- JSON format for programmatic analysis and reproducibility tracking
"""

import json
from typing import Any, Dict

from cityforge.conversion.city_serializer import city_to_dict
from cityforge.generators.city_types import CityLayout
from cityforge.generators.road_graph import RoadGraph

# Fill colors by degree class
DEGREE_COLORS = {
    'dead_end': '#FF6B6B',       # Red
    'pass_through': '#FFD700',   # Gold
    'junction': '#90EE90',       # Light green
    'isolated': '#D3D3D3',       # Light gray
}


def degree_class(degree: int) -> str:
    """Name the role a node plays in the road network."""
    if degree == 0:
        return 'isolated'
    if degree == 1:
        return 'dead_end'
    if degree == 2:
        return 'pass_through'
    return 'junction'


def export_road_graph_dot(layout: CityLayout) -> str:
    """Export the road graph as Graphviz DOT format.

    Node positions are pinned with ``pos`` so ``neato -n`` reproduces the
    city plan; -z is used as the y axis so the picture is not mirrored.

    Args:
        layout: Generated city layout

    Returns:
        DOT format string for visualization with Graphviz or online viewers
    """
    graph = layout.graph
    lines = ['graph RoadNetwork {']
    lines.append('  node [shape=circle, style=filled, fontsize=8];')
    lines.append('')

    for index, (x, z) in enumerate(graph.nodes):
        degree = graph.degree(index)
        color = DEGREE_COLORS[degree_class(degree)]
        label = f"{index}\\ndeg {degree}"
        lines.append(f'  n{index} [label="{label}" pos="{x:.2f},{-z:.2f}!" fillcolor="{color}"];')

    lines.append('')

    for seg in sorted(graph.segments):
        lines.append(f'  n{seg.a} -- n{seg.b};')

    lines.append('}')
    return '\n'.join(lines)


def graph_statistics(graph: RoadGraph) -> Dict[str, Any]:
    """Count nodes per degree class plus basic totals."""
    classes: Dict[str, int] = {}
    for index in range(graph.node_count):
        name = degree_class(graph.degree(index))
        classes[name] = classes.get(name, 0) + 1
    return {
        'node_count': graph.node_count,
        'segment_count': graph.segment_count,
        'degree_classes': classes,
    }


def export_city_json(layout: CityLayout, seed: int) -> str:
    """Export a city layout as JSON with metadata.

    Args:
        layout: Generated city layout
        seed: The seed used for generation

    Returns:
        JSON string with layout and debug metadata
    """
    stats = graph_statistics(layout.graph)
    stats['block_count'] = len(layout.blocks)
    stats['valid_block_count'] = len(layout.valid_blocks())
    stats['lot_count'] = layout.lot_count

    output = {
        'metadata': {
            'seed': seed,
            'version': '1.0',
            'generator': 'cityforge',
        },
        'statistics': stats,
        'layout': city_to_dict(layout),
    }
    return json.dumps(output, indent=2)
