"""Tests for junction corners and the road mesher."""

import numpy as np
import pytest

from cityforge.conversion.road_mesher import RoadMesher, road_quad
from cityforge.generators.city_types import Bounds, CityLayout
from cityforge.generators.junctions import build_junction_corners, junction_corners, side_corner
from cityforge.generators.road_graph import RoadGraph


def _layout(points, pairs, road_width=2.0):
    graph = RoadGraph()
    for p in points:
        graph.get_or_add_node(p)
    for a, b in pairs:
        graph.add_segment(a, b)
    graph.rebuild_adjacency()
    layout = CityLayout(bounds=Bounds.centered(100.0, 100.0), graph=graph)
    layout.junction_corners = build_junction_corners(graph, road_width)
    return layout


def _face_normals(mesh):
    tris = mesh.positions[mesh.triangles()]
    return np.cross(tris[:, 1] - tris[:, 0], tris[:, 2] - tris[:, 0])


def test_axis_aligned_corners():
    corners = junction_corners((0.0, 0.0), 2.0)
    assert corners == [(-1.0, -1.0), (-1.0, 1.0), (1.0, 1.0), (1.0, -1.0)]


def test_dead_end_corners_face_neighbor():
    corners = junction_corners((0.0, 0.0), 2.0, facing=(5.0, 0.0))
    expected = [(-1.0, 1.0), (1.0, 1.0), (1.0, -1.0), (-1.0, -1.0)]
    for got, want in zip(corners, expected):
        assert got == pytest.approx(want)


def test_isolated_nodes_get_no_corners():
    layout = _layout([(0, 0), (10, 0), (50, 50)], [(0, 1)])
    assert set(layout.junction_corners) == {0, 1}


def test_side_corner_picks_left_of_travel():
    corners = junction_corners((0.0, 0.0), 2.0)
    # Heading +x toward (10, 0); the facing corners are (1, 1) and (1, -1)
    left = side_corner((0.0, 0.0), corners, (10.0, 0.0), (1.0, 0.0), left=True)
    right = side_corner((0.0, 0.0), corners, (10.0, 0.0), (1.0, 0.0), left=False)
    assert left == (1.0, -1.0)
    assert right == (1.0, 1.0)


def test_road_quad_pairs_facing_corners():
    layout = _layout([(0, 0), (10, 0)], [(0, 1)])
    corners = layout.junction_corners
    quad = road_quad((0.0, 0.0), corners[0], (10.0, 0.0), corners[1])
    expected = [(1.0, 1.0), (9.0, 1.0), (9.0, -1.0), (1.0, -1.0)]
    for got, want in zip(quad, expected):
        assert got == pytest.approx(want)


def test_mesh_counts_and_attributes():
    layout = _layout([(0, 0), (10, 0), (10, 10)], [(0, 1), (1, 2)])
    mesh = RoadMesher(layout).build()

    # 4 vertices per junction plus 4 per road
    assert mesh.vertex_count == 4 * 3 + 4 * 2
    assert mesh.triangle_count == 2 * 3 + 2 * 2
    assert np.allclose(mesh.positions[:, 1], 0.0)
    assert np.allclose(mesh.normals, [0.0, 1.0, 0.0])
    assert mesh.colors.shape == (mesh.vertex_count, 4)
    assert np.allclose(mesh.colors, 1.0)


def test_all_faces_point_up():
    layout = _layout([(0, 0), (10, 0), (10, 10), (0, 10), (5, 5)],
                     [(0, 1), (1, 2), (2, 3), (3, 0), (0, 4)])
    mesh = RoadMesher(layout).build()
    assert (_face_normals(mesh)[:, 1] > 0).all()


def test_roads_reuse_junction_corners():
    layout = _layout([(0, 0), (10, 0), (10, 10), (0, 10)],
                     [(0, 1), (1, 2), (2, 3), (3, 0)])
    mesh = RoadMesher(layout).build()
    junction_vertices = 4 * len(layout.junction_corners)
    corner_set = {
        (round(x, 5), round(z, 5))
        for corners in layout.junction_corners.values()
        for x, z in corners
    }
    for x, _, z in mesh.positions[junction_vertices:]:
        assert (round(float(x), 5), round(float(z), 5)) in corner_set


def test_segment_without_corners_is_skipped():
    layout = _layout([(0, 0), (10, 0), (20, 0)], [(0, 1), (1, 2)])
    del layout.junction_corners[2]
    mesher = RoadMesher(layout)
    mesh = mesher.build()
    assert len(mesher.skipped_segments) == 1
    assert mesh.vertex_count == 4 * 2 + 4
