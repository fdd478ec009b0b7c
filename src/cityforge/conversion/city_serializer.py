"""
JSON persistence of a generated city layout.

Stores the node list, the canonical segment list, the blocks and the
junction corners directly; adjacency is derived and is rebuilt on load.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from cityforge.generators.city_types import Bounds, CityBlock, CityLayout
from cityforge.generators.road_graph import RoadGraph

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1


class CitySerializationError(ValueError):
    """Raised when serialized city data is malformed."""


def _polygon_to_list(polygon) -> Optional[List[List[float]]]:
    if polygon is None:
        return None
    return [[float(x), float(z)] for x, z in polygon]


def _list_to_polygon(data) -> Optional[List[tuple]]:
    if data is None:
        return None
    return [(float(p[0]), float(p[1])) for p in data]


def _block_to_dict(block: CityBlock) -> Dict[str, Any]:
    return {
        "corners": list(block.corners),
        "full_perimeter": list(block.full_perimeter) if block.full_perimeter is not None else None,
        "inner_polygon": _polygon_to_list(block.inner_polygon),
        "sub_lots": ([_polygon_to_list(lot) for lot in block.sub_lots]
                     if block.sub_lots is not None else None),
    }


def _dict_to_block(data: Dict[str, Any]) -> CityBlock:
    tl, tr, br, bl = (int(c) for c in data["corners"])
    perimeter = data.get("full_perimeter")
    lots = data.get("sub_lots")
    return CityBlock(
        tl, tr, br, bl,
        full_perimeter=[int(n) for n in perimeter] if perimeter is not None else None,
        inner_polygon=_list_to_polygon(data.get("inner_polygon")),
        sub_lots=[_list_to_polygon(lot) for lot in lots] if lots is not None else None,
    )


def city_to_dict(layout: CityLayout) -> Dict[str, Any]:
    """Convert a CityLayout to a JSON-serializable dictionary."""
    b = layout.bounds
    return {
        "version": FORMAT_VERSION,
        "bounds": [b.min_x, b.min_z, b.max_x, b.max_z],
        "nodes": [[x, z] for x, z in layout.graph.nodes],
        "segments": [[seg.a, seg.b] for seg in sorted(layout.graph.segments)],
        "blocks": [_block_to_dict(block) for block in layout.blocks],
        "junction_corners": {
            str(node): _polygon_to_list(corners)
            for node, corners in sorted(layout.junction_corners.items())
        },
    }


def city_from_dict(data: Dict[str, Any]) -> CityLayout:
    """
    Rebuild a CityLayout from ``city_to_dict`` output.

    Raises:
        CitySerializationError: If required fields are missing or a segment
            references a node that does not exist
    """
    try:
        graph = RoadGraph()
        graph.nodes = [(float(p[0]), float(p[1])) for p in data["nodes"]]
        for a, b in data["segments"]:
            a, b = int(a), int(b)
            if not (0 <= a < len(graph.nodes) and 0 <= b < len(graph.nodes)):
                raise CitySerializationError(f"Segment {a}-{b} references a missing node")
            graph.add_segment(a, b)
        graph.rebuild_adjacency()

        min_x, min_z, max_x, max_z = (float(v) for v in data["bounds"])
        layout = CityLayout(
            bounds=Bounds(min_x, min_z, max_x, max_z),
            graph=graph,
            blocks=[_dict_to_block(b) for b in data.get("blocks", [])],
            junction_corners={
                int(node): _list_to_polygon(corners)
                for node, corners in data.get("junction_corners", {}).items()
            },
        )
    except CitySerializationError:
        raise
    except (KeyError, TypeError, ValueError) as e:
        raise CitySerializationError(f"Malformed city data: {e}") from e

    version = data.get("version")
    if version != FORMAT_VERSION:
        logger.warning("City data version %s differs from %d", version, FORMAT_VERSION)
    return layout


def save_city_json(layout: CityLayout, path) -> Path:
    """Write the layout to ``path`` as JSON and return the path."""
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    with open(file_path, 'w', encoding='utf-8') as f:
        json.dump(city_to_dict(layout), f, indent=2)
    return file_path


def load_city_json(path) -> CityLayout:
    """Load a layout written by ``save_city_json``."""
    with open(Path(path), 'r', encoding='utf-8') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise CitySerializationError(f"Invalid JSON in {path}: {e}") from e
    return city_from_dict(data)
