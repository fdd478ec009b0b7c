"""Tests for recursive lot subdivision."""

import random

import pytest

from cityforge.generators.city_types import Bounds, CityBlock, CityLayout
from cityforge.generators.geometry import polygon_signed_area
from cityforge.generators.lot_subdivider import LotSubdivider

SQUARE = [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0)]


class FixedRandom(random.Random):
    """Random source whose uniform() always returns the same value."""

    def __init__(self, value):
        super().__init__(0)
        self.value = value

    def uniform(self, a, b):
        return self.value


def test_single_split_halves_the_square():
    lots = LotSubdivider(random.Random(0), 1, 0.0, 0.0).subdivide(SQUARE)
    assert lots == [
        [(10.0, 5.0), (10.0, 10.0), (0.0, 10.0), (0.0, 5.0)],
        [(0.0, 0.0), (10.0, 0.0), (10.0, 5.0), (0.0, 5.0)],
    ]


def test_depth_zero_keeps_polygon_whole():
    lots = LotSubdivider(random.Random(0), 0, 0.0, 0.2).subdivide(SQUARE)
    assert lots == [SQUARE]


def test_small_polygons_are_not_split():
    lots = LotSubdivider(random.Random(0), 4, 200.0, 0.2).subdivide(SQUARE)
    assert lots == [SQUARE]


@pytest.mark.parametrize("seed", [0, 1, 2, 3])
def test_lots_partition_the_polygon(seed):
    hexagon = [(40, 0), (80, 20), (80, 60), (40, 80), (0, 60), (0, 20)]
    subdivider = LotSubdivider(random.Random(seed), 3, 50.0, 0.3)
    lots = subdivider.subdivide(hexagon)
    assert len(lots) > 1
    total = sum(polygon_signed_area(lot) for lot in lots)
    assert total == pytest.approx(polygon_signed_area(hexagon))
    assert all(len(lot) >= 3 for lot in lots)


def test_degenerate_split_emits_original():
    # A ratio past the bounds leaves one side empty
    subdivider = LotSubdivider(FixedRandom(0.6), 2, 0.0, 0.6)
    lots = subdivider.subdivide(SQUARE)
    assert lots == [SQUARE]
    assert subdivider.degenerate_splits == 1


def test_run_skips_blocks_without_buildable_polygon():
    layout = CityLayout(bounds=Bounds.centered(10.0, 10.0))
    layout.blocks = [
        CityBlock(0, 1, 2, 3, inner_polygon=list(SQUARE)),
        CityBlock(0, 1, 2, 3),
        CityBlock(0, 1, 2, 3, inner_polygon=[(0.0, 0.0), (1.0, 1.0)]),
    ]
    total = LotSubdivider(random.Random(0), 1, 0.0, 0.0).run(layout)
    assert total == 2
    assert len(layout.blocks[0].sub_lots) == 2
    assert layout.blocks[1].sub_lots is None
    assert layout.blocks[2].sub_lots is None
    assert layout.lot_count == 2
