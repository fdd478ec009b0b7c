"""Tests for the planar road graph."""

from cityforge.generators.road_graph import RoadGraph, RoadSegment


def _line_graph(*points):
    graph = RoadGraph()
    indices = [graph.get_or_add_node(p) for p in points]
    for a, b in zip(indices, indices[1:]):
        graph.add_segment(a, b)
    graph.rebuild_adjacency()
    return graph


def test_segments_are_canonical():
    seg = RoadSegment(3, 1)
    assert (seg.a, seg.b) == (1, 3)
    assert seg == RoadSegment(1, 3)
    assert seg.other(1) == 3
    assert len({RoadSegment(3, 1), RoadSegment(1, 3)}) == 1


def test_self_loops_are_rejected():
    graph = RoadGraph()
    a = graph.get_or_add_node((0.0, 0.0))
    assert graph.add_segment(a, a) is False
    assert graph.segment_count == 0


def test_nearby_points_share_a_node():
    graph = RoadGraph()
    a = graph.get_or_add_node((0.0, 0.0))
    b = graph.get_or_add_node((0.005, 0.0))
    c = graph.get_or_add_node((0.5, 0.0))
    assert a == b
    assert c != a
    assert graph.node_count == 2


def test_crossing_roads_share_one_new_node():
    graph = RoadGraph()
    graph.insert_segment((-10.0, 0.0), (10.0, 0.0))
    graph.insert_segment((0.0, -10.0), (0.0, 10.0))
    graph.rebuild_adjacency()

    assert graph.node_count == 5
    assert graph.segment_count == 4
    center = graph.find_node((0.0, 0.0))
    assert center is not None
    assert graph.degree(center) == 4
    assert all(not seg.is_loop for seg in graph.segments)


def test_endpoint_near_road_makes_t_junction():
    graph = RoadGraph()
    graph.insert_segment((-10.0, 0.0), (10.0, 0.0))
    graph.insert_segment((0.0, 0.05), (0.0, 10.0))
    graph.rebuild_adjacency()

    junction = graph.find_node((0.0, 0.05))
    assert junction is not None
    assert graph.degree(junction) == 3
    assert graph.segment_count == 3
    assert not graph.has_segment(0, 1)


def test_new_road_is_chained_through_every_crossing():
    graph = RoadGraph()
    graph.insert_segment((-10.0, -5.0), (-10.0, 5.0))
    graph.insert_segment((10.0, -5.0), (10.0, 5.0))
    graph.insert_segment((-20.0, 0.0), (20.0, 0.0))
    graph.rebuild_adjacency()

    left = graph.find_node((-10.0, 0.0))
    right = graph.find_node((10.0, 0.0))
    assert graph.has_segment(left, right)
    assert graph.segment_count == 7


def test_find_path_follows_roads():
    graph = _line_graph((0, 0), (1, 0), (2, 0), (3, 0))
    assert graph.find_path(0, 3) == [1, 2, 3]
    assert graph.find_path(2, 2) == []


def test_find_path_between_disconnected_nodes_is_empty():
    graph = _line_graph((0, 0), (1, 0))
    lonely = graph.get_or_add_node((5.0, 5.0))
    graph.rebuild_adjacency()
    assert graph.find_path(0, lonely) == []


def test_remap_drops_collapsed_segments():
    graph = _line_graph((0, 0), (1, 0), (10, 0))
    dropped = graph.remap({0: 0, 1: 0, 2: 1}, [(0.5, 0.0), (10.0, 0.0)])
    assert dropped == 1
    assert graph.segments == {RoadSegment(0, 1)}
    assert graph.neighbors(0) == [1]


def test_remap_counts_unmapped_segments_as_dropped():
    graph = _line_graph((0, 0), (10, 0), (20, 0))
    dropped = graph.remap({0: 0, 1: 1}, [(0.0, 0.0), (10.0, 0.0)])
    assert dropped == 1
    assert graph.segments == {RoadSegment(0, 1)}


def test_nearest_neighbor_distance():
    graph = _line_graph((0, 0), (3, 0), (3, 1))
    assert graph.nearest_neighbor_distance(1) == 1.0
    isolated = graph.get_or_add_node((50.0, 50.0))
    graph.rebuild_adjacency()
    assert graph.nearest_neighbor_distance(isolated) == float('inf')
