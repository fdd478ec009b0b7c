"""
Planar road graph with proximity-deduplicated nodes.

The graph is the single source of truth for the road network while the
city is being built.  Segments are undirected and stored canonically, so
the segment set can never hold the same road twice.  Inserting a line
resolves every crossing and T-junction it creates against the roads that
are already there, keeping the graph planar.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Set, Tuple

from .geometry import (
    Vec2,
    distance,
    distance_sq,
    line_intersection,
    project_onto_segment,
)

logger = logging.getLogger(__name__)

# Squared distance under which two points are the same node.
NODE_MERGE_DISTANCE_SQ = 1e-4

# Max distance between an endpoint and its projection for a T-junction.
T_JUNCTION_SNAP = 0.1

# Consecutive split points closer than this collapse into one.
MIN_SPLIT_SPACING = 0.1


@dataclass(frozen=True, order=True)
class RoadSegment:
    """Undirected road centerline between two node indices.

    The constructor always stores the smaller index in ``a`` so that
    ``RoadSegment(3, 1) == RoadSegment(1, 3)``.
    """
    a: int
    b: int

    def __post_init__(self):
        if self.a > self.b:
            lo, hi = self.b, self.a
            object.__setattr__(self, 'a', lo)
            object.__setattr__(self, 'b', hi)

    @property
    def is_loop(self) -> bool:
        return self.a == self.b

    def other(self, node: int) -> int:
        """Return the endpoint opposite to ``node``."""
        return self.b if node == self.a else self.a


class RoadGraph:
    """Node registry, canonical segment set and derived adjacency."""

    def __init__(self):
        self.nodes: List[Vec2] = []
        self.segments: Set[RoadSegment] = set()
        self.adjacency: List[List[int]] = []

    # -- registry --

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    @property
    def segment_count(self) -> int:
        return len(self.segments)

    def get_or_add_node(self, point: Vec2) -> int:
        """Return the index of the node at ``point``, registering it if new."""
        for i, existing in enumerate(self.nodes):
            if distance_sq(existing, point) < NODE_MERGE_DISTANCE_SQ:
                return i
        self.nodes.append((float(point[0]), float(point[1])))
        self.adjacency.append([])
        return len(self.nodes) - 1

    def add_segment(self, a: int, b: int) -> bool:
        """Add a canonical segment; self-loops are rejected."""
        if a == b:
            return False
        self.segments.add(RoadSegment(a, b))
        return True

    def clear(self):
        self.nodes.clear()
        self.segments.clear()
        self.adjacency.clear()

    # -- adjacency --

    def rebuild_adjacency(self):
        """Recompute adjacency from the segment set.

        Segments are visited in sorted order so neighbor lists, and every
        search built on them, are reproducible.
        """
        self.adjacency = [[] for _ in range(len(self.nodes))]
        for seg in sorted(self.segments):
            if seg.is_loop:
                continue
            self.adjacency[seg.a].append(seg.b)
            self.adjacency[seg.b].append(seg.a)

    def neighbors(self, node: int) -> List[int]:
        return self.adjacency[node]

    def degree(self, node: int) -> int:
        return len(self.adjacency[node])

    def has_segment(self, a: int, b: int) -> bool:
        return RoadSegment(a, b) in self.segments

    # -- insertion --

    def insert_segment(self, start: Vec2, end: Vec2):
        """Insert a road from ``start`` to ``end``.

        Every existing segment that the new road crosses, or that one of its
        endpoints lands on, is split at that point.  The new road is then
        chained through all of those points, so nothing overlaps and every
        junction is a shared node.
        """
        split_points: List[Vec2] = [start, end]

        for seg in sorted(self.segments):
            s1 = self.nodes[seg.a]
            s2 = self.nodes[seg.b]
            hits: List[Vec2] = []

            crossing = line_intersection(start, end, s1, s2)
            if crossing is not None:
                hits.append(crossing)

            for endpoint in (start, end):
                projected = project_onto_segment(endpoint, s1, s2)
                if projected is None:
                    continue
                snapped, _ = projected
                if distance(endpoint, snapped) < T_JUNCTION_SNAP:
                    hits.append(endpoint)

            if hits:
                self._split_segment(seg, hits)
                split_points.extend(hits)

        split_points.sort(key=lambda p: distance(start, p))
        chain: List[Vec2] = []
        for p in split_points:
            if chain and distance(chain[-1], p) < MIN_SPLIT_SPACING:
                continue
            chain.append(p)

        for p, q in zip(chain, chain[1:]):
            self.add_segment(self.get_or_add_node(p), self.get_or_add_node(q))

    def _split_segment(self, seg: RoadSegment, points: Iterable[Vec2]):
        """Replace ``seg`` with a chain running through ``points``."""
        origin = self.nodes[seg.a]
        ordered = sorted(points, key=lambda p: distance(origin, p))
        self.segments.discard(seg)
        chain = [seg.a] + [self.get_or_add_node(p) for p in ordered] + [seg.b]
        for a, b in zip(chain, chain[1:]):
            self.add_segment(a, b)

    # -- remapping --

    def remap(self, redirect: Dict[int, int], new_nodes: List[Vec2]) -> int:
        """Swap in a compacted node list and redirect every segment.

        Segments with an endpoint missing from ``redirect`` or that
        collapse to a single node are dropped; duplicates fold together
        through the set.

        Returns:
            Number of segments dropped, unmapped and self-loop alike.
        """
        self.nodes = list(new_nodes)
        remapped: Set[RoadSegment] = set()
        dropped = 0
        for seg in self.segments:
            if seg.a not in redirect or seg.b not in redirect:
                dropped += 1
                continue
            new_a = redirect[seg.a]
            new_b = redirect[seg.b]
            if new_a == new_b:
                dropped += 1
                continue
            remapped.add(RoadSegment(new_a, new_b))
        self.segments = remapped
        self.rebuild_adjacency()
        return dropped

    # -- search --

    def find_path(self, start: int, end: int) -> List[int]:
        """Breadth-first shortest path from ``start`` to ``end``.

        Returns:
            Node indices after ``start`` up to and including ``end``; empty
            when the nodes are equal or not connected.
        """
        if start == end:
            return []

        parents: Dict[int, int] = {}
        visited = {start}
        queue = deque([start])
        found = False
        while queue:
            current = queue.popleft()
            if current == end:
                found = True
                break
            for neighbor in self.adjacency[current]:
                if neighbor not in visited:
                    visited.add(neighbor)
                    parents[neighbor] = current
                    queue.append(neighbor)

        if not found:
            logger.debug("No road path between nodes %d and %d", start, end)
            return []

        path: List[int] = []
        step = end
        while step != start:
            path.append(step)
            step = parents[step]
        path.reverse()
        return path

    # -- queries --

    def nearest_neighbor_distance(self, node: int) -> float:
        """Distance to the closest adjacent node, or infinity when isolated."""
        best = float('inf')
        here = self.nodes[node]
        for other in self.adjacency[node]:
            d = distance(here, self.nodes[other])
            if d < best:
                best = d
        return best

    def segment_endpoints(self, seg: RoadSegment) -> Tuple[Vec2, Vec2]:
        return self.nodes[seg.a], self.nodes[seg.b]

    def find_node(self, point: Vec2) -> Optional[int]:
        """Index of the node at ``point`` without registering a new one."""
        for i, existing in enumerate(self.nodes):
            if distance_sq(existing, point) < NODE_MERGE_DISTANCE_SQ:
                return i
        return None
