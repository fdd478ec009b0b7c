"""Tests for node consolidation and jitter."""

import random

from cityforge.generators.city_types import Bounds, CityBlock
from cityforge.generators.consolidation import NodeConsolidator, NodeJitterer
from cityforge.generators.road_graph import RoadGraph, RoadSegment
from cityforge.generators.subdivider import SpatialSubdivider


def _graph(points, pairs):
    graph = RoadGraph()
    for p in points:
        graph.get_or_add_node(p)
    for a, b in pairs:
        graph.add_segment(a, b)
    graph.rebuild_adjacency()
    return graph


def _subdivided(max_depth=2, seed=3):
    graph = RoadGraph()
    bounds = Bounds.centered(100.0, 100.0)
    SpatialSubdivider(graph, random.Random(seed), max_depth, 20.0, 0.1).run(bounds)
    return graph, bounds


def test_close_nodes_merge_into_centroid():
    graph = _graph([(0, 0), (1, 0), (10, 0)], [(0, 1), (1, 2)])
    block = CityBlock(0, 1, 2, 1)

    report = NodeConsolidator(road_width=2.0).run(graph, [block])

    assert graph.nodes == [(0.5, 0.0), (10.0, 0.0)]
    assert graph.segments == {RoadSegment(0, 1)}
    assert block.corners == (0, 0, 1, 0)
    assert report.converged
    assert report.passes == 2
    assert report.merged_passes == 1
    assert report.nodes_before == 3
    assert report.nodes_after == 2
    assert report.segments_dropped == 1


def test_merging_can_cascade_over_passes():
    graph = _graph([(0.0, 0.0), (2.9, 0.0), (1.45, 2.9)], [(0, 1), (1, 2), (2, 0)])
    report = NodeConsolidator(road_width=2.0).run(graph, [])
    assert report.merged_passes == 2
    assert report.converged
    assert graph.node_count == 1
    assert graph.segment_count == 0


def test_pass_cap_reports_non_convergence():
    graph = _graph([(0.0, 0.0), (2.9, 0.0), (1.45, 2.9)], [(0, 1), (1, 2), (2, 0)])
    report = NodeConsolidator(road_width=2.0, max_passes=1).run(graph, [])
    assert report.passes == 1
    assert not report.converged
    assert graph.node_count == 2


def test_distant_nodes_are_left_alone():
    graph, _ = _subdivided(max_depth=0)
    before = list(graph.nodes)
    report = NodeConsolidator(road_width=2.0).run(graph, [])
    assert graph.nodes == before
    assert report.converged
    assert report.merged_passes == 0


def test_zero_jitter_changes_nothing():
    graph, bounds = _subdivided()
    before = list(graph.nodes)
    moved = NodeJitterer(random.Random(1), 0.0, bounds).run(graph)
    assert moved == 0
    assert graph.nodes == before


def test_jitter_pins_boundary_and_bounds_offsets():
    graph, bounds = _subdivided()
    before = list(graph.nodes)
    interior = [i for i, p in enumerate(before) if not bounds.is_on_boundary(p)]
    assert interior

    moved = NodeJitterer(random.Random(1), 1.0, bounds).run(graph)

    assert moved == len(interior)
    for i, (old, new) in enumerate(zip(before, graph.nodes)):
        offset = ((new[0] - old[0]) ** 2 + (new[1] - old[1]) ** 2) ** 0.5
        if i in interior:
            assert offset <= 1.0 + 1e-9
        else:
            assert new == old


def test_jitter_is_deterministic():
    graph_a, bounds = _subdivided()
    graph_b, _ = _subdivided()
    NodeJitterer(random.Random(5), 2.0, bounds).run(graph_a)
    NodeJitterer(random.Random(5), 2.0, bounds).run(graph_b)
    assert graph_a.nodes == graph_b.nodes
