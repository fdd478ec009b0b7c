"""
City generation pipeline.

Orchestrates spatial subdivision, road graph clean-up, road meshing,
block tracing, lot subdivision and building extrusion.  Every random
draw comes from one ``random.Random`` seeded from the settings, so a
given seed always yields the same city.
"""

import logging
import random
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from cityforge.conversion.building_extruder import BuildingExtruder
from cityforge.conversion.mesh_buffers import MeshBuffers
from cityforge.conversion.road_mesher import RoadMesher
from cityforge.generators.block_tracer import BlockShapeTracer
from cityforge.generators.city_types import Bounds, CityLayout
from cityforge.generators.consolidation import ConsolidationReport, NodeConsolidator, NodeJitterer
from cityforge.generators.junctions import build_junction_corners
from cityforge.generators.lot_subdivider import LotSubdivider
from cityforge.generators.subdivider import SpatialSubdivider
from cityforge.validation import ValidationIssue, ValidationResult, validate_city
from cityforge.validation.checks import check_node_spacing

from .settings import CitySettings

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Enums / dataclasses
# ---------------------------------------------------------------------------

class PipelineStage(Enum):
    SUBDIVIDE = "subdivide"
    CONSOLIDATE = "consolidate"
    JITTER = "jitter"
    MESH_ROADS = "mesh_roads"
    TRACE_BLOCKS = "trace_blocks"
    SUBDIVIDE_LOTS = "subdivide_lots"
    EXTRUDE_BUILDINGS = "extrude_buildings"
    VALIDATE = "validate"
    COMPLETE = "complete"


@dataclass
class PipelineProgress:
    stage: PipelineStage
    overall_progress: float
    message: str

    @property
    def percentage(self) -> int:
        return int(self.overall_progress * 100)


@dataclass
class CityResult:
    layout: CityLayout
    road_mesh: Optional[MeshBuffers] = None
    building_mesh: Optional[MeshBuffers] = None
    stages_completed: List[PipelineStage] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    metrics: Dict[str, Any] = field(default_factory=dict)
    validation: Optional[ValidationResult] = None

    @property
    def total_time(self) -> float:
        return self.metrics.get("total_time", 0.0)

    @property
    def blocks(self):
        return self.layout.blocks

    def add_warning(self, warning: str, stage: Optional[PipelineStage] = None):
        if stage:
            warning = f"[{stage.value}] {warning}"
        self.warnings.append(warning)


ProgressCallback = Callable[[PipelineProgress], None]

# Share of the overall progress bar taken by each stage
STAGE_WEIGHTS = {
    PipelineStage.SUBDIVIDE: 0.15,
    PipelineStage.CONSOLIDATE: 0.15,
    PipelineStage.JITTER: 0.05,
    PipelineStage.MESH_ROADS: 0.15,
    PipelineStage.TRACE_BLOCKS: 0.15,
    PipelineStage.SUBDIVIDE_LOTS: 0.10,
    PipelineStage.EXTRUDE_BUILDINGS: 0.15,
    PipelineStage.VALIDATE: 0.10,
}


# ---------------------------------------------------------------------------
# Main pipeline
# ---------------------------------------------------------------------------

class CityGenerator:
    """Generates a complete city from CitySettings."""

    def __init__(self, settings: Optional[CitySettings] = None,
                 progress_callback: Optional[ProgressCallback] = None):
        self.settings = settings or CitySettings()
        self.settings.check()
        self.progress_callback = progress_callback
        self.current_stage = PipelineStage.SUBDIVIDE
        self.rng = random.Random(self.settings.seed)

        self.layout: Optional[CityLayout] = None
        self._consolidation: Optional[ConsolidationReport] = None
        self._spacing_issues: List[ValidationIssue] = []

    # -- helpers --

    def set_progress_callback(self, callback: ProgressCallback):
        self.progress_callback = callback

    def _report(self, stage_progress: float, message: str):
        if not self.progress_callback:
            return
        stages = list(STAGE_WEIGHTS)
        if self.current_stage in STAGE_WEIGHTS:
            idx = stages.index(self.current_stage)
            done = sum(STAGE_WEIGHTS[s] for s in stages[:idx])
            overall = done + STAGE_WEIGHTS[self.current_stage] * stage_progress
        else:
            overall = 1.0
        progress = PipelineProgress(self.current_stage, min(overall, 1.0), message)
        try:
            self.progress_callback(progress)
        except Exception:
            logger.warning("Progress callback raised; ignoring", exc_info=True)

    def _begin(self, stage: PipelineStage, message: str):
        self.current_stage = stage
        logger.debug("Stage: %s", stage.value)
        self._report(0.0, message)

    # -- stages --

    def _subdivide(self, result: CityResult):
        self._begin(PipelineStage.SUBDIVIDE, "Subdividing city area...")
        s = self.settings
        subdivider = SpatialSubdivider(self.layout.graph, self.rng, s.max_depth,
                                       s.min_block_size, s.split_jitter)
        self.layout.blocks = subdivider.run(self.layout.bounds)
        result.metrics['initial_nodes'] = self.layout.graph.node_count
        self._report(1.0, f"{len(self.layout.blocks)} blocks")

    def _consolidate(self, result: CityResult):
        self._begin(PipelineStage.CONSOLIDATE, "Consolidating nodes...")
        consolidator = NodeConsolidator(self.settings.road_width)
        report = consolidator.run(self.layout.graph, self.layout.blocks)
        self._consolidation = report
        result.metrics['consolidation_passes'] = report.passes
        result.metrics['consolidation_converged'] = report.converged
        result.metrics['segments_dropped'] = report.segments_dropped
        if not report.converged:
            result.add_warning(
                f"Node consolidation did not converge after {report.passes} passes",
                PipelineStage.CONSOLIDATE)

        # Spacing only holds right after consolidation; jitter may close gaps.
        self._spacing_issues = []
        if self.settings.validate and report.converged and consolidator.threshold > 0:
            self._spacing_issues = check_node_spacing(self.layout.graph.nodes,
                                                      consolidator.threshold)
        self._report(1.0, f"{report.nodes_before} -> {report.nodes_after} nodes")

    def _jitter(self, result: CityResult):
        self._begin(PipelineStage.JITTER, "Jittering nodes...")
        jitterer = NodeJitterer(self.rng, self.settings.node_jitter, self.layout.bounds)
        moved = jitterer.run(self.layout.graph)
        result.metrics['nodes_jittered'] = moved
        self._report(1.0, f"{moved} nodes moved")

    def _mesh_roads(self, result: CityResult):
        self._begin(PipelineStage.MESH_ROADS, "Building road mesh...")
        self.layout.junction_corners = build_junction_corners(self.layout.graph,
                                                              self.settings.road_width)
        mesher = RoadMesher(self.layout)
        result.road_mesh = mesher.build()
        result.metrics['junction_count'] = len(self.layout.junction_corners)
        result.metrics['segments_skipped'] = len(mesher.skipped_segments)
        self._report(1.0, f"{result.road_mesh.triangle_count} road triangles")

    def _trace_blocks(self, result: CityResult):
        self._begin(PipelineStage.TRACE_BLOCKS, "Tracing block shapes...")
        tracer = BlockShapeTracer(self.layout)
        traced = tracer.run()
        for index in tracer.skipped:
            block = self.layout.blocks[index]
            result.add_warning(f"Block {index} has stale corners {block.corners}; skipped",
                               PipelineStage.TRACE_BLOCKS)
        result.metrics['blocks_traced'] = traced
        result.metrics['blocks_skipped'] = len(tracer.skipped)
        self._report(1.0, f"{traced} blocks traced")

    def _subdivide_lots(self, result: CityResult):
        self._begin(PipelineStage.SUBDIVIDE_LOTS, "Subdividing lots...")
        s = self.settings
        subdivider = LotSubdivider(self.rng, s.subdivision_depth, s.min_lot_area,
                                   s.lot_split_jitter)
        lots = subdivider.run(self.layout)
        result.metrics['lot_count'] = lots
        result.metrics['degenerate_lot_splits'] = subdivider.degenerate_splits
        self._report(1.0, f"{lots} lots")

    def _extrude_buildings(self, result: CityResult):
        self._begin(PipelineStage.EXTRUDE_BUILDINGS, "Extruding buildings...")
        s = self.settings
        extruder = BuildingExtruder(self.rng, s.min_building_height, s.max_building_height,
                                    s.floor_height)
        result.building_mesh = extruder.build(self.layout)
        result.metrics['building_count'] = extruder.building_count
        self._report(1.0, f"{extruder.building_count} buildings")

    def _validate(self, result: CityResult):
        self._begin(PipelineStage.VALIDATE, "Validating city...")
        converged = self._consolidation.converged if self._consolidation else True
        validation = validate_city(self.layout, self.settings,
                                   consolidation_converged=converged)
        for issue in self._spacing_issues:
            validation.add_issue(issue)
        for issue in validation.issues:
            logger.debug("%s", issue.format())
        result.validation = validation
        self._report(1.0, "Validation passed" if validation.passed else "Validation failed")

    # -- main entry --

    def generate(self) -> CityResult:
        """Run every stage and return the finished city.

        Raises:
            Exception: Any unexpected error is logged and re-raised; a
                partially generated city is never returned.
        """
        s = self.settings
        self.rng = random.Random(s.seed)
        self.layout = CityLayout(bounds=Bounds.centered(s.city_size_x, s.city_size_z))
        self._consolidation = None
        self._spacing_issues = []
        result = CityResult(layout=self.layout)
        result.metrics['seed'] = s.seed
        start_time = time.time()

        logger.info("Generation seed: %d", s.seed)
        logger.info("Starting city generation: %.1fx%.1f, max depth %d, road width %.2f",
                    s.city_size_x, s.city_size_z, s.max_depth, s.road_width)

        stages = [
            (self._subdivide, PipelineStage.SUBDIVIDE),
            (self._consolidate, PipelineStage.CONSOLIDATE),
            (self._jitter, PipelineStage.JITTER),
            (self._mesh_roads, PipelineStage.MESH_ROADS),
            (self._trace_blocks, PipelineStage.TRACE_BLOCKS),
            (self._subdivide_lots, PipelineStage.SUBDIVIDE_LOTS),
            (self._extrude_buildings, PipelineStage.EXTRUDE_BUILDINGS),
        ]
        if s.validate:
            stages.append((self._validate, PipelineStage.VALIDATE))

        timings = {}
        try:
            for stage_fn, stage in stages:
                stage_start = time.time()
                stage_fn(result)
                timings[stage.value] = time.time() - stage_start
                result.stages_completed.append(stage)
        except Exception:
            logger.exception("Unexpected error during stage '%s'", self.current_stage.value)
            raise

        self.current_stage = PipelineStage.COMPLETE
        result.stages_completed.append(PipelineStage.COMPLETE)
        graph = self.layout.graph
        result.metrics['node_count'] = graph.node_count
        result.metrics['segment_count'] = graph.segment_count
        result.metrics['block_count'] = len(self.layout.blocks)
        result.metrics['timings'] = timings
        result.metrics['total_time'] = time.time() - start_time
        self._report(1.0, "City complete")

        logger.info("City complete in %.2fs: %d nodes, %d segments, %d blocks, %d lots",
                    result.metrics['total_time'], graph.node_count, graph.segment_count,
                    len(self.layout.blocks), self.layout.lot_count)
        return result


def generate_city(settings: Optional[CitySettings] = None,
                  progress_callback: Optional[ProgressCallback] = None) -> CityResult:
    """Convenience wrapper: build a CityGenerator and run it once."""
    return CityGenerator(settings, progress_callback).generate()
