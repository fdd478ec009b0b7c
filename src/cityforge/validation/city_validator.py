"""
Whole-city validation.

Runs the graph and block checks against a finished layout and merges
their findings into one result.
"""

import logging

from cityforge.generators.city_types import CityLayout

from .checks import validate_blocks, validate_road_graph
from .core import ValidationResult

logger = logging.getLogger(__name__)

# Matches NodeConsolidator: nodes closer than this many road widths merge
SPACING_FACTOR = 1.5


def validate_city(layout: CityLayout, settings,
                  check_spacing: bool = False,
                  consolidation_converged: bool = True) -> ValidationResult:
    """Validate a generated city layout.

    Node spacing is not checked by default: jitter may legitimately move
    nodes closer than the consolidation threshold after the fact.

    Args:
        layout: Layout to validate
        settings: CitySettings the layout was generated with
        check_spacing: Also run the node spacing check
        consolidation_converged: Whether consolidation reached a fixed point

    Returns:
        Merged ValidationResult
    """
    road_width = settings.road_width
    threshold = None
    if check_spacing and road_width > 0:
        threshold = SPACING_FACTOR * road_width

    result = ValidationResult()
    result.merge(validate_road_graph(layout.graph, threshold, consolidation_converged))
    result.merge(validate_blocks(layout, road_width))

    if result.failed:
        logger.error("City validation failed with %d error(s)", len(result.errors))
    elif result.warnings:
        logger.warning("City validation passed with %d warning(s)", len(result.warnings))
    else:
        logger.debug("City validation passed")
    return result
