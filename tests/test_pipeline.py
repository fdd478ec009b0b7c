"""End-to-end tests for the city generation pipeline."""

import pytest

from cityforge.generators.city_types import CityBlock
from cityforge.generators.subdivider import SpatialSubdivider
from cityforge.pipeline import (
    CityGenerator,
    CitySettings,
    PipelineError,
    PipelineStage,
    generate_city,
)


def test_depth_zero_city():
    result = generate_city(CitySettings(max_depth=0, node_jitter=0.0))
    layout = result.layout

    assert len(layout.blocks) == 1
    assert layout.graph.node_count == 4
    assert layout.graph.segment_count == 4
    assert layout.lot_count == 4
    # 4 junctions + 4 roads, 4 vertices each
    assert result.road_mesh.vertex_count == 32
    # 4 box lots, 5 vertices per footprint vertex
    assert result.building_mesh.vertex_count == 4 * 5 * 4
    assert result.metrics['consolidation_passes'] == 1
    assert result.validation.passed


def test_same_seed_same_city():
    settings = CitySettings(seed=77)
    first = CityGenerator(settings).generate()
    second = CityGenerator(settings).generate()

    assert first.layout.graph.nodes == second.layout.graph.nodes
    assert first.layout.graph.segments == second.layout.graph.segments
    assert len(first.layout.blocks) == len(second.layout.blocks)
    assert first.layout.lot_count == second.layout.lot_count
    assert first.building_mesh.vertex_count == second.building_mesh.vertex_count


def test_generator_can_run_twice():
    generator = CityGenerator(CitySettings(seed=5))
    first = generator.generate()
    second = generator.generate()
    assert first.layout.graph.nodes == second.layout.graph.nodes


def test_different_seeds_differ():
    a = generate_city(CitySettings(seed=1))
    b = generate_city(CitySettings(seed=2))
    assert a.layout.graph.nodes != b.layout.graph.nodes


@pytest.mark.parametrize("seed", [1, 7, 42, 1234])
def test_city_properties(seed):
    result = generate_city(CitySettings(seed=seed))
    layout = result.layout
    graph = layout.graph

    assert all(seg.a != seg.b for seg in graph.segments)
    assert result.validation is not None
    assert result.validation.passed

    assert result.metrics['segments_skipped'] == 0
    assert result.road_mesh.vertex_count == (
        4 * len(layout.junction_corners) + 4 * graph.segment_count)

    footprint_vertices = sum(
        len(lot) for block in layout.blocks for lot in (block.sub_lots or []))
    assert result.building_mesh.vertex_count == 5 * footprint_vertices
    assert result.metrics['building_count'] == layout.lot_count


def test_zero_jitter_moves_nothing():
    result = generate_city(CitySettings(node_jitter=0.0))
    assert result.metrics['nodes_jittered'] == 0


def test_stages_and_metrics():
    result = generate_city(CitySettings(seed=3))
    assert result.stages_completed == [
        PipelineStage.SUBDIVIDE,
        PipelineStage.CONSOLIDATE,
        PipelineStage.JITTER,
        PipelineStage.MESH_ROADS,
        PipelineStage.TRACE_BLOCKS,
        PipelineStage.SUBDIVIDE_LOTS,
        PipelineStage.EXTRUDE_BUILDINGS,
        PipelineStage.VALIDATE,
        PipelineStage.COMPLETE,
    ]
    for key in ('seed', 'node_count', 'segment_count', 'block_count', 'lot_count',
                'consolidation_passes', 'timings', 'total_time'):
        assert key in result.metrics
    assert result.metrics['seed'] == 3
    assert set(result.metrics['timings']) == {
        stage.value for stage in result.stages_completed[:-1]}


def test_validation_can_be_disabled():
    result = generate_city(CitySettings(validate=False))
    assert result.validation is None
    assert PipelineStage.VALIDATE not in result.stages_completed


@pytest.mark.parametrize("overrides", [
    {'split_jitter': 0.5},
    {'node_jitter': 6.0},
    {'road_width': -1.0},
    {'city_size_x': 0.0},
    {'min_building_height': 20.0, 'max_building_height': 10.0},
])
def test_invalid_settings_raise(overrides):
    with pytest.raises(PipelineError):
        CityGenerator(CitySettings(**overrides))


def test_invalid_settings_lists_every_problem():
    with pytest.raises(PipelineError) as excinfo:
        CityGenerator(CitySettings(split_jitter=0.5, road_width=-1.0))
    assert "Split jitter" in str(excinfo.value)
    assert "Road width" in str(excinfo.value)


def test_progress_callback_sees_every_stage():
    updates = []
    generate_city(CitySettings(seed=9), progress_callback=updates.append)

    stages = []
    for update in updates:
        if not stages or stages[-1] != update.stage:
            stages.append(update.stage)
    assert stages[0] == PipelineStage.SUBDIVIDE
    assert stages[-1] == PipelineStage.COMPLETE
    progress = [u.overall_progress for u in updates]
    assert progress == sorted(progress)
    assert progress[-1] == pytest.approx(1.0)


def test_failing_progress_callback_is_ignored():
    def explode(progress):
        raise RuntimeError("viewer went away")

    result = generate_city(CitySettings(seed=9), progress_callback=explode)
    assert PipelineStage.COMPLETE in result.stages_completed


def test_stale_block_is_reported_not_fatal(monkeypatch):
    original_run = SpatialSubdivider.run

    def run_with_stale_block(self, bounds):
        blocks = original_run(self, bounds)
        blocks.append(CityBlock(0, 1, 2, 10_000))
        return blocks

    monkeypatch.setattr(SpatialSubdivider, "run", run_with_stale_block)
    result = generate_city(CitySettings(seed=2))

    stale = result.layout.blocks[-1]
    assert stale.full_perimeter is None
    assert stale.sub_lots is None
    assert result.metrics['blocks_skipped'] == 1
    assert any("stale corners" in w for w in result.warnings)
    assert "BLOCK-003" in result.validation.codes()
    assert result.validation.passed


def test_unexpected_errors_propagate(monkeypatch):
    def broken(self, layout):
        raise RuntimeError("boom")

    monkeypatch.setattr("cityforge.pipeline.city_pipeline.LotSubdivider.run", broken)
    with pytest.raises(RuntimeError, match="boom"):
        generate_city(CitySettings(seed=2))
