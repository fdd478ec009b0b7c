"""Tests for the planar geometry helpers."""

import pytest

from cityforge.generators.geometry import (
    cross_y,
    ensure_ccw,
    line_intersection,
    normalize,
    polygon_area,
    polygon_bounds,
    polygon_signed_area,
    project_onto_segment,
    split_polygon,
)

SQUARE = [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0)]


def test_crossing_segments_intersect_at_midpoint():
    hit = line_intersection((0, 0), (10, 0), (5, -5), (5, 5))
    assert hit == pytest.approx((5.0, 0.0))


def test_parallel_segments_do_not_intersect():
    assert line_intersection((0, 0), (10, 0), (0, 1), (10, 1)) is None


def test_touching_at_endpoint_is_not_a_crossing():
    assert line_intersection((0, 0), (10, 0), (10, -5), (10, 5)) is None


def test_projection_inside_segment():
    point, t = project_onto_segment((5.0, 0.05), (0.0, 0.0), (10.0, 0.0))
    assert point == pytest.approx((5.0, 0.0))
    assert t == pytest.approx(0.5)


def test_projection_past_segment_end_is_rejected():
    assert project_onto_segment((11.0, 0.0), (0.0, 0.0), (10.0, 0.0)) is None


def test_normalize_zero_vector():
    assert normalize((0.0, 0.0)) == (0.0, 0.0)
    assert normalize((3.0, 4.0)) == pytest.approx((0.6, 0.8))


def test_cross_y_sign():
    assert cross_y((1.0, 0.0), (0.0, 1.0)) == pytest.approx(-1.0)
    assert cross_y((1.0, 0.0), (0.0, -1.0)) == pytest.approx(1.0)


def test_signed_area_and_winding():
    assert polygon_signed_area(SQUARE) == pytest.approx(100.0)
    clockwise = list(reversed(SQUARE))
    assert polygon_signed_area(clockwise) == pytest.approx(-100.0)
    assert polygon_area(clockwise) == pytest.approx(100.0)
    assert polygon_signed_area(ensure_ccw(clockwise)) == pytest.approx(100.0)


def test_polygon_bounds():
    assert polygon_bounds(SQUARE) == ((0.0, 0.0), (10.0, 10.0))


def test_split_polygon_through_middle():
    front, back = split_polygon(SQUARE, (5.0, 5.0), (0.0, 1.0))
    assert front == [(10.0, 5.0), (10.0, 10.0), (0.0, 10.0), (0.0, 5.0)]
    assert back == [(0.0, 0.0), (10.0, 0.0), (10.0, 5.0), (0.0, 5.0)]
    assert polygon_area(front) + polygon_area(back) == pytest.approx(100.0)


def test_split_polygon_vertex_on_plane_goes_to_both_sides():
    front, back = split_polygon(SQUARE, (0.0, 5.0), (1.0, 0.0))
    assert front == SQUARE
    assert back == [(0.0, 0.0), (0.0, 10.0)]


def test_split_preserves_signed_area():
    hexagon = [(4, 0), (8, 2), (8, 6), (4, 8), (0, 6), (0, 2)]
    front, back = split_polygon(hexagon, (3.3, 0.0), (1.0, 0.0))
    total = polygon_signed_area(front) + polygon_signed_area(back)
    assert total == pytest.approx(polygon_signed_area(hexagon))
