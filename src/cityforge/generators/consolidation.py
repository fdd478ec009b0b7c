"""
Post-subdivision graph clean-up: node consolidation and jitter.

Subdivision and T-junction insertion can leave several nodes crowded
around the same intersection.  The consolidator folds those into single
nodes; the jitterer then nudges interior nodes so the grid looks less
mechanical, never far enough for two connected nodes to cross.
"""

import logging
import math
import random
from dataclasses import dataclass
from typing import Dict, List

from .city_types import Bounds, CityBlock
from .geometry import Vec2, distance
from .road_graph import RoadGraph

logger = logging.getLogger(__name__)

MAX_CONSOLIDATION_PASSES = 5
CONSOLIDATION_FACTOR = 1.5

BOUNDARY_EPSILON = 0.1
NEIGHBOR_JITTER_FRACTION = 0.4
MIN_JITTER = 0.01


@dataclass
class ConsolidationReport:
    """Outcome of a consolidation run"""
    passes: int
    merged_passes: int
    converged: bool
    nodes_before: int
    nodes_after: int
    segments_dropped: int


class NodeConsolidator:
    """Merges nodes that sit closer together than a road-width-derived threshold."""

    def __init__(self, road_width: float, max_passes: int = MAX_CONSOLIDATION_PASSES):
        self.threshold = road_width * CONSOLIDATION_FACTOR
        self.max_passes = max_passes

    def run(self, graph: RoadGraph, blocks: List[CityBlock]) -> ConsolidationReport:
        """
        Consolidate the graph in place, remapping block corners along the way.

        Args:
            graph: Road graph to simplify
            blocks: Blocks whose corner indices follow the remap

        Returns:
            ConsolidationReport describing what happened
        """
        nodes_before = graph.node_count
        passes = 0
        merged_passes = 0
        dropped = 0
        changed = True

        while changed and passes < self.max_passes:
            passes += 1
            redirect, new_nodes, changed = self._group_nodes(graph.nodes)
            if not changed:
                break

            merged_passes += 1
            for block in blocks:
                block.remap_corners(redirect)
            dropped += graph.remap(redirect, new_nodes)
            logger.debug("Consolidation pass %d: %d -> %d nodes",
                         passes, len(redirect), len(new_nodes))

        converged = not changed
        if changed:
            # The final pass may already have left nothing to merge.
            converged = not self._group_nodes(graph.nodes)[2]
        if not converged:
            logger.warning("Node consolidation stopped after %d passes without converging",
                           passes)

        logger.info("Consolidated %d nodes into %d (threshold %.2f)",
                    nodes_before, graph.node_count, self.threshold)
        return ConsolidationReport(
            passes=passes,
            merged_passes=merged_passes,
            converged=converged,
            nodes_before=nodes_before,
            nodes_after=graph.node_count,
            segments_dropped=dropped,
        )

    def _group_nodes(self, nodes: List[Vec2]):
        """One pass of grouping around each not-yet-merged node.

        Returns:
            (old -> new redirect, compacted node list, whether anything merged)
        """
        redirect: Dict[int, int] = {}
        new_nodes: List[Vec2] = []
        merged = [False] * len(nodes)
        changed = False

        for i, anchor in enumerate(nodes):
            if merged[i]:
                continue
            merged[i] = True
            group = [i]
            sum_x, sum_z = anchor

            for j in range(i + 1, len(nodes)):
                if merged[j]:
                    continue
                if distance(anchor, nodes[j]) < self.threshold:
                    group.append(j)
                    sum_x += nodes[j][0]
                    sum_z += nodes[j][1]
                    merged[j] = True
                    changed = True

            new_index = len(new_nodes)
            new_nodes.append((sum_x / len(group), sum_z / len(group)))
            for old_index in group:
                redirect[old_index] = new_index

        return redirect, new_nodes, changed


class NodeJitterer:
    """Applies a bounded random planar offset to every interior node."""

    def __init__(self, rng: random.Random, node_jitter: float, bounds: Bounds):
        self.rng = rng
        self.node_jitter = node_jitter
        self.bounds = bounds

    def run(self, graph: RoadGraph) -> int:
        """
        Jitter nodes in index order.

        Boundary nodes stay pinned.  Each offset is capped at a fraction of
        the distance to the nearest neighbour, which is read after earlier
        nodes have already moved.

        Returns:
            Number of nodes moved
        """
        if self.node_jitter <= 0:
            return 0

        moved = 0
        for i in range(graph.node_count):
            point = graph.nodes[i]
            if self.bounds.is_on_boundary(point, BOUNDARY_EPSILON):
                continue

            nearest = graph.nearest_neighbor_distance(i)
            cap = min(self.node_jitter, nearest * NEIGHBOR_JITTER_FRACTION)
            if cap < MIN_JITTER:
                continue

            angle = self.rng.uniform(0.0, 2.0 * math.pi)
            magnitude = self.rng.uniform(0.0, cap)
            graph.nodes[i] = (point[0] + math.cos(angle) * magnitude,
                              point[1] + math.sin(angle) * magnitude)
            moved += 1

        logger.info("Jittered %d of %d nodes (max %.2f)",
                    moved, graph.node_count, self.node_jitter)
        return moved
